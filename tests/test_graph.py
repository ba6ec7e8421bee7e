"""Tests for the link graph."""

import json

import pytest

from sitelinks.content import Page
from sitelinks.graph import backlinks, build_link_graph, dump_link_index, load_link_index


def _make_pages():
    return [
        Page(slug="index", frontmatter={"title": "Home"}, links=["notes/a", "/"]),
        Page(slug="notes/a", links=["notes/b", "notes/c"]),
        Page(slug="notes/b", links=["notes/a"]),
        Page(slug="notes/c"),
        Page(slug="orphan"),
    ]


def test_build_link_graph_nodes():
    G = build_link_graph(_make_pages())
    assert set(G.nodes) == {"/", "notes/a", "notes/b", "notes/c", "orphan"}
    assert G.nodes["/"]["title"] == "Home"
    assert G.nodes["notes/c"]["title"] == "notes/c"


def test_build_link_graph_edges():
    G = build_link_graph(_make_pages())
    assert G.has_edge("notes/a", "notes/b")
    assert G.has_edge("notes/b", "notes/a")
    assert not G.has_edge("notes/c", "notes/a")
    assert not G.has_edge("/", "/")  # self links dropped
    assert G.degree("orphan") == 0


def test_links_to_unknown_pages_become_nodes():
    G = build_link_graph([Page(slug="notes/a", links=["missing"])])
    assert "missing" in G
    assert G.has_edge("notes/a", "missing")


def test_backlinks():
    G = build_link_graph(_make_pages())
    assert backlinks(G, "notes/a") == ["/", "notes/b"]
    assert backlinks(G, "orphan") == []
    assert backlinks(G, "not-a-page") == []


def test_link_index_round_trip(tmp_path):
    path = tmp_path / "links.json"
    dump_link_index(_make_pages(), path)

    raw = json.loads(path.read_text())
    assert raw["notes/a"] == ["notes/b", "notes/c"]

    pages = load_link_index(path)
    assert {p.slug: p.links for p in pages}["index"] == ["notes/a", "/"]


def test_load_link_index_rejects_non_object(tmp_path):
    path = tmp_path / "links.json"
    path.write_text("[1, 2]")
    with pytest.raises(ValueError):
        load_link_index(path)
