"""Build the site link graph from each page's outgoing links."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

import networkx as nx

from sitelinks.content import Page
from sitelinks.path import SimpleSlug, simplify_slug


def build_link_graph(pages: Iterable[Page]) -> nx.DiGraph:
    """Build a directed graph from the outgoing links recorded on pages.

    Nodes are simple slugs. An edge ``a -> b`` exists when page ``a`` links
    to ``b``. Targets without a page of their own still become nodes, self
    links are dropped.
    """
    G = nx.DiGraph()
    for page in pages:
        source = simplify_slug(page.slug)
        title = (page.frontmatter or {}).get("title", source)
        G.add_node(source, title=title)
        for target in page.links:
            if target != source:
                G.add_edge(source, target)
    return G


def backlinks(graph: nx.DiGraph, slug: SimpleSlug) -> list[SimpleSlug]:
    """Pages linking to ``slug``, sorted."""
    if slug not in graph:
        return []
    return sorted(graph.predecessors(slug))


def dump_link_index(pages: Iterable[Page], path: str | Path) -> None:
    """Write ``{slug: [outgoing, ...]}`` as JSON."""
    index = {page.slug: list(page.links) for page in pages}
    Path(path).write_text(json.dumps(index, indent=2, sort_keys=True), encoding="utf-8")


def load_link_index(path: str | Path) -> list[Page]:
    """Read a link index written by :func:`dump_link_index`."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Link index must be a JSON object: {path}")
    return [Page(slug=slug, links=list(links)) for slug, links in raw.items()]
