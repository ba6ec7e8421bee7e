"""Render a page's frontmatter as a definition list of properties.

Each frontmatter field becomes a ``<dt>name</dt><dd>value</dd>`` pair. Fields
with an entry in the renderer table use it; everything else goes through
:func:`default_renderer`, which dispatches on the :class:`ValueKind` of the
value. A renderer returning ``None`` drops the field entirely.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from sitelinks.content import Page
from sitelinks.links import WikiLink, match_wikilink
from sitelinks.path import FullSlug, path_to_root, slugify_tag
from sitelinks.resolve import Strategy, canonicalize, resolve
from sitelinks.tree import Element, Node, Text

EXTERNAL_LINK_RE = re.compile(r"^https?://", re.IGNORECASE)

# frontmatter field listing other fields to hide on this page
HIDE_PROPS_FIELD = "hide-props"


class _Missing:
    """Marker for a field that is declared but has no value at all."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class ValueKind(Enum):
    NULL = "null"
    MISSING = "missing"
    STRING = "string"
    LIST = "list"
    MAPPING = "mapping"
    OTHER = "other"


def classify(value: Any) -> ValueKind:
    if value is MISSING:
        return ValueKind.MISSING
    if value is None:
        return ValueKind.NULL
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    return ValueKind.OTHER


@dataclass
class RenderContext:
    """What a renderer may look at besides the value itself."""

    page: Page
    all_slugs: Sequence[FullSlug] = ()
    display_class: str | None = None


Fragment = Union[Node, str]
FieldRenderer = Callable[[Any, RenderContext], Union[Fragment, None]]
DefaultRenderer = Callable[[str, Any, RenderContext], Union[Fragment, None]]


def _as_node(fragment: Fragment) -> Node:
    return Text(fragment) if isinstance(fragment, str) else fragment


def render_external_link(value: str) -> Element:
    return Element("a", {"class": ["external"], "href": value, "target": "_blank"}, [Text(value)])


def render_internal_link(link: WikiLink, ctx: RenderContext) -> Element:
    href = resolve(ctx.page.slug, link.target, Strategy.SHORTEST, ctx.all_slugs)
    full = canonicalize(href, ctx.page.slug)
    text = link.alias if link.alias is not None else link.path
    return Element(
        "a",
        {"class": ["internal"], "href": href, "data-slug": full},
        [Text(text)],
    )


def _render_null(name: str, value: Any, ctx: RenderContext) -> Fragment | None:
    return "null"


def _render_missing(name: str, value: Any, ctx: RenderContext) -> Fragment | None:
    return None


def _render_string(name: str, value: str, ctx: RenderContext) -> Fragment | None:
    if EXTERNAL_LINK_RE.match(value):
        return render_external_link(value)
    link = match_wikilink(value)
    if link is not None:
        return render_internal_link(link, ctx)
    return value


def _render_list(name: str, value: Sequence[Any], ctx: RenderContext) -> Fragment | None:
    if not value:
        return ""
    items = []
    for item in value:
        rendered = default_renderer(name, item, ctx)
        items.append(Element("li", children=[] if rendered is None else [_as_node(rendered)]))
    return Element("ul", {"class": ["property-list"]}, items)


def _render_mapping(name: str, value: Mapping, ctx: RenderContext) -> Fragment | None:
    return Element("code", children=[Text(json.dumps(value, indent=2, default=str))])


def _render_other(name: str, value: Any, ctx: RenderContext) -> Fragment | None:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


_RENDERERS: dict[ValueKind, DefaultRenderer] = {
    ValueKind.NULL: _render_null,
    ValueKind.MISSING: _render_missing,
    ValueKind.STRING: _render_string,
    ValueKind.LIST: _render_list,
    ValueKind.MAPPING: _render_mapping,
    ValueKind.OTHER: _render_other,
}


def default_renderer(name: str, value: Any, ctx: RenderContext) -> Fragment | None:
    """Render any frontmatter value; ``None`` means the field is skipped."""
    return _RENDERERS[classify(value)](name, value, ctx)


def _tag_link(tag: Any, base_dir: str) -> Node:
    if tag is None:
        # an empty `tags:` entry, shown like any other null value
        return Text("null")
    return Element(
        "a",
        {
            "href": f"{base_dir}/tags/{slugify_tag(str(tag))}",
            "class": ["internal", "tag-link"],
        },
        [Text(str(tag))],
    )


def tag_renderer(value: Any, ctx: RenderContext) -> Fragment | None:
    tags = value if isinstance(value, (list, tuple)) else [value]
    base_dir = path_to_root(ctx.page.slug)
    items = [Element("li", children=[_tag_link(tag, base_dir)]) for tag in tags]
    return Element("ul", {"class": ["property-list"]}, items)


def hide(value: Any, ctx: RenderContext) -> Fragment | None:
    return None


DEFAULT_FIELD_RENDERERS: dict[str, FieldRenderer] = {
    "title": hide,
    "date": hide,
    "cssclasses": hide,
    "tags": tag_renderer,
    HIDE_PROPS_FIELD: hide,
}


DEFAULT_RENDERER: DefaultRenderer = default_renderer


def hidden_fields(frontmatter: Mapping[str, Any]) -> list[str]:
    raw = frontmatter.get(HIDE_PROPS_FIELD)
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, list) and raw and isinstance(raw[0], str):
        return raw
    return []


class PageProperties:
    """The page properties component.

    Args:
        field_renderers: Per-field renderers, merged over
            :data:`DEFAULT_FIELD_RENDERERS`.
        default_renderer: Renderer for fields without an entry.
    """

    def __init__(
        self,
        field_renderers: Mapping[str, FieldRenderer] | None = None,
        default_renderer: DefaultRenderer | None = None,
    ) -> None:
        self.field_renderers: dict[str, FieldRenderer] = {
            **DEFAULT_FIELD_RENDERERS,
            **(field_renderers or {}),
        }
        self.default_renderer: DefaultRenderer = default_renderer or DEFAULT_RENDERER

    def render_field(self, name: str, value: Any, ctx: RenderContext) -> Fragment | None:
        renderer = self.field_renderers.get(name)
        if renderer is not None:
            return renderer(value, ctx)
        return self.default_renderer(name, value, ctx)

    def __call__(self, ctx: RenderContext) -> Element | None:
        frontmatter = ctx.page.frontmatter
        if frontmatter is None:
            return None

        hidden = hidden_fields(frontmatter)
        children: list[Node] = []
        for name, value in frontmatter.items():
            if name in hidden:
                continue
            rendered = self.render_field(name, value, ctx)
            if rendered is None:
                continue
            children.append(Element("dt", children=[Text(str(name))]))
            children.append(Element("dd", children=[_as_node(rendered)]))

        classes = [ctx.display_class] if ctx.display_class else []
        return Element("dl", {"class": [*classes, "page-props"]}, children)
