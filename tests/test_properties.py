"""Tests for the frontmatter property renderer."""

import datetime

import pytest

from sitelinks.content import Page
from sitelinks.properties import (
    MISSING,
    PageProperties,
    RenderContext,
    ValueKind,
    classify,
    default_renderer,
    hide,
)
from sitelinks.tree import Element, Text, to_html, walk

SLUGS = ["index", "notes/a", "notes/b", "tags/foo"]


@pytest.fixture
def ctx():
    return RenderContext(page=Page(slug="notes/x", frontmatter={}), all_slugs=SLUGS)


def _render_page(frontmatter, **kwargs):
    page = Page(slug="notes/x", frontmatter=frontmatter)
    return PageProperties(**kwargs)(RenderContext(page=page, all_slugs=SLUGS))


def _pairs(dl):
    """(name, dd) pairs of a rendered property list."""
    names = [c.children[0].value for c in dl.children if c.tag == "dt"]
    values = [c for c in dl.children if c.tag == "dd"]
    return list(zip(names, values))


@pytest.mark.parametrize(
    "value, kind",
    [
        (None, ValueKind.NULL),
        (MISSING, ValueKind.MISSING),
        ("x", ValueKind.STRING),
        (["x"], ValueKind.LIST),
        ({"k": 1}, ValueKind.MAPPING),
        (3, ValueKind.OTHER),
        (True, ValueKind.OTHER),
    ],
)
def test_classify(value, kind):
    assert classify(value) is kind


def test_null_and_missing(ctx):
    assert default_renderer("f", None, ctx) == "null"
    assert default_renderer("f", MISSING, ctx) is None


def test_missing_field_is_omitted():
    dl = _render_page({"f": None, "g": MISSING})
    assert [name for name, _ in _pairs(dl)] == ["f"]
    assert to_html(dl) == '<dl class="page-props"><dt>f</dt><dd>null</dd></dl>'


def test_empty_list_renders_no_list():
    dl = _render_page({"aliases": []})
    html = to_html(dl)
    assert "<ul" not in html
    assert "<dt>aliases</dt><dd></dd>" in html


def test_external_link(ctx):
    a = default_renderer("source", "https://example.com/x", ctx)
    assert a.tag == "a"
    assert a.properties == {
        "class": ["external"],
        "href": "https://example.com/x",
        "target": "_blank",
    }
    assert a.children == [Text("https://example.com/x")]


def test_wikilink_with_anchor_and_alias(ctx):
    a = default_renderer("related", "[[notes/a#Intro|See intro]]", ctx)
    assert a.tag == "a"
    assert a.classes == ["internal"]
    assert a.properties["href"] == "../notes/a#Intro"
    assert a.properties["data-slug"] == "notes/a"
    assert a.children == [Text("See intro")]


def test_wikilink_without_alias_shows_path(ctx):
    a = default_renderer("related", "[[b]]", ctx)
    assert a.properties["href"] == "../notes/b"
    assert a.children == [Text("b")]


@pytest.mark.parametrize("value", ["![[notes/a]]", "see [[notes/a]]", "hello"])
def test_plain_strings(ctx, value):
    assert default_renderer("f", value, ctx) == value


def test_list_renders_items_recursively(ctx):
    ul = default_renderer("links", ["a", "https://x.org", None], ctx)
    assert ul.tag == "ul"
    assert ul.classes == ["property-list"]
    first, second, third = ul.children
    assert first.children == [Text("a")]
    assert second.children[0].tag == "a"
    assert third.children == [Text("null")]


def test_mapping_is_dumped(ctx):
    code = default_renderer("meta", {"k": 1}, ctx)
    assert code.tag == "code"
    assert code.children == [Text('{\n  "k": 1\n}')]


@pytest.mark.parametrize(
    "value, expected",
    [(3, "3"), (2.5, "2.5"), (True, "true"), (False, "false"), (datetime.date(2024, 1, 2), "2024-01-02")],
)
def test_other_values(ctx, value, expected):
    assert default_renderer("f", value, ctx) == expected


def test_tags_link_to_tag_pages():
    dl = _render_page({"tags": ["foo", "Bar Baz"]})
    links = [n for n in walk(dl) if isinstance(n, Element) and n.tag == "a"]
    assert [a.properties["href"] for a in links] == ["../tags/foo", "../tags/bar-baz"]
    assert [a.children[0].value for a in links] == ["foo", "Bar Baz"]
    assert all(a.classes == ["internal", "tag-link"] for a in links)


def test_single_tag_string():
    dl = _render_page({"tags": "solo"})
    (a,) = [n for n in walk(dl) if isinstance(n, Element) and n.tag == "a"]
    assert a.properties["href"] == "../tags/solo"


@pytest.mark.parametrize("tags", [None, ["foo", None]])
def test_empty_tag_renders_null(tags):
    dl = _render_page({"tags": tags})
    items = [n for n in walk(dl) if isinstance(n, Element) and n.tag == "li"]
    assert items[-1].children == [Text("null")]
    hrefs = [n.properties["href"] for n in walk(dl) if isinstance(n, Element) and n.tag == "a"]
    assert "../tags/none" not in hrefs
    assert len(hrefs) == len(items) - 1


def test_builtin_hidden_fields():
    dl = _render_page(
        {"title": "T", "date": "2024-01-01", "cssclasses": ["wide"], "status": "draft"}
    )
    assert [name for name, _ in _pairs(dl)] == ["status"]


@pytest.mark.parametrize("hide_props", ["secret", ["secret", "other"]])
def test_hide_props(hide_props):
    dl = _render_page({"hide-props": hide_props, "secret": "x", "other": "y", "shown": "z"})
    names = [name for name, _ in _pairs(dl)]
    if isinstance(hide_props, str):
        assert names == ["other", "shown"]
    else:
        assert names == ["shown"]


def test_hide_props_beats_overrides():
    dl = _render_page(
        {"hide-props": "status", "status": "draft"},
        field_renderers={"status": lambda value, ctx: value.upper()},
    )
    assert _pairs(dl) == []


def test_no_frontmatter_renders_nothing():
    page = Page(slug="notes/x", frontmatter=None)
    assert PageProperties()(RenderContext(page=page)) is None


def test_empty_frontmatter_renders_empty_list():
    dl = _render_page({})
    assert dl.tag == "dl"
    assert dl.children == []


def test_field_overrides_merge_with_defaults():
    dl = _render_page(
        {"publish": True, "status": "draft", "title": "T"},
        field_renderers={"publish": hide, "status": lambda value, ctx: value.upper()},
    )
    pairs = _pairs(dl)
    assert [name for name, _ in pairs] == ["status"]
    assert pairs[0][1].children == [Text("DRAFT")]


def test_default_renderer_override():
    dl = _render_page(
        {"a": 1, "tags": ["foo"]},
        default_renderer=lambda name, value, ctx: f"{name}={value}",
    )
    pairs = _pairs(dl)
    assert pairs[0][1].children == [Text("a=1")]
    # field renderers still apply
    assert pairs[1][1].children[0].tag == "ul"


def test_display_class():
    page = Page(slug="notes/x", frontmatter={"a": "b"})
    dl = PageProperties()(RenderContext(page=page, display_class="desktop-only"))
    assert dl.classes == ["desktop-only", "page-props"]
