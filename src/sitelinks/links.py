"""Rewrite links in rendered pages and collect each page's outgoing links."""

from __future__ import annotations

import logging
import posixpath
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from sitelinks.content import Page
from sitelinks.path import FullSlug, SimpleSlug, is_absolute_url, simplify_slug
from sitelinks.resolve import Strategy, canonicalize, resolve
from sitelinks.tree import Element, Root, visit

log = logging.getLogger(__name__)

# [[path#heading|alias]], optionally prefixed with ! for embeds
WIKILINK_RE = re.compile(r"!?\[\[([^\[\]|#\\]+)?(#+[^\[\]|#\\]+)?(\\?\|[^\[\]#]*)?\]\]")

MEDIA_TAGS = ("img", "video", "audio", "iframe")

EXTERNAL_ICON_PATH = (
    "M320 0H288V64h32 82.7L201.4 265.4 178.7 288 224 333.3l22.6-22.6L448 109.3V192v32h64V192 "
    "32 0H480 320zM32 32H0V64 480v32H32 456h32V480 352 320H424v32 96H64V96h96 32V32H160 32z"
)


@dataclass(frozen=True)
class WikiLink:
    """A string value that is exactly one wikilink."""

    path: str
    anchor: str
    alias: str | None

    @property
    def target(self) -> str:
        return self.path + self.anchor


def match_wikilink(value: str) -> WikiLink | None:
    """Parse ``value`` if the whole string is a single, non-embed wikilink."""
    if value.startswith("!"):
        return None
    match = WIKILINK_RE.fullmatch(value)
    if match is None:
        return None
    raw_path, raw_anchor, raw_alias = match.groups()
    alias = raw_alias.lstrip("\\")[1:].strip() if raw_alias is not None else None
    return WikiLink(
        path=(raw_path or "").strip(),
        anchor=(raw_anchor or "").strip(),
        alias=alias,
    )


def external_icon() -> Element:
    return Element(
        "svg",
        {
            "aria-hidden": "true",
            "class": ["external-icon"],
            "style": "max-width:0.8em;max-height:0.8em",
            "viewBox": "0 0 512 512",
        },
        [Element("path", {"d": EXTERNAL_ICON_PATH})],
    )


def _has_external_icon(node: Element) -> bool:
    return any(
        isinstance(child, Element) and child.tag == "svg" and child.has_class("external-icon")
        for child in node.children
    )


def _pretty_text(text: str) -> str:
    """Last path segment of ``text``, ignoring a trailing slash."""
    trimmed = text.rstrip("/")
    return posixpath.basename(trimmed) if trimmed else text


def _frontmatter_strings(frontmatter: dict | None) -> Iterator[str]:
    for value in (frontmatter or {}).values():
        values = value if isinstance(value, list) else [value]
        for v in values:
            if isinstance(v, str):
                yield v


@dataclass
class LinkOptions:
    """Link processing switches, see ``SiteConfig`` for the config file keys."""

    markdown_link_resolution: Strategy = Strategy.ABSOLUTE
    # strips folders from link text so that it looks nice
    pretty_links: bool = True
    open_links_in_new_tab: bool = False
    lazy_load: bool = False
    external_link_icon: bool = True
    index_frontmatter_wikilinks: bool = False


class LinkProcessor:
    """Rewrites anchors and media sources of a rendered page.

    Safe to run more than once over the same tree: classes and the icon are
    only added when missing, the alias check only runs on links without an
    ``internal``/``external`` class, and links already carrying
    ``data-slug`` are not resolved again.
    """

    def __init__(self, options: LinkOptions | None = None) -> None:
        self.options = options or LinkOptions()

    def transform(self, tree: Root, page: Page, all_slugs: Sequence[FullSlug]) -> list[SimpleSlug]:
        """Mutate ``tree`` in place and record the outgoing links on ``page``.

        Args:
            tree: The page's rendered document tree.
            page: The page being processed; ``page.links`` is replaced.
            all_slugs: Full slugs of every page on the site. Read only.

        Returns:
            The page's outgoing simple slugs, deduplicated, in document order.
        """
        outgoing: dict[SimpleSlug, None] = {}

        def on_element(node: Element) -> None:
            if node.tag == "a" and isinstance(node.properties.get("href"), str):
                self._process_anchor(node, page, all_slugs, outgoing)
            if node.tag in MEDIA_TAGS and isinstance(node.properties.get("src"), str):
                self._process_media(node, page, all_slugs)

        visit(tree, on_element)

        if self.options.index_frontmatter_wikilinks:
            for value in _frontmatter_strings(page.frontmatter):
                link = match_wikilink(value)
                if link is None:
                    continue
                dest = self._resolve(page, link.target, all_slugs)
                outgoing[simplify_slug(canonicalize(dest, page.slug))] = None

        page.links = list(outgoing)
        log.debug("%s: %d outgoing links", page.slug, len(page.links))
        return page.links

    def _resolve(self, page: Page, target: str, all_slugs: Sequence[FullSlug]) -> str:
        return resolve(page.slug, target, self.options.markdown_link_resolution, all_slugs)

    def _process_anchor(
        self,
        node: Element,
        page: Page,
        all_slugs: Sequence[FullSlug],
        outgoing: dict[SimpleSlug, None],
    ) -> None:
        opts = self.options
        dest = node.properties["href"]
        is_external = is_absolute_url(dest)
        seen = node.has_class("external") or node.has_class("internal")
        node.add_class("external" if is_external else "internal")

        if is_external and opts.external_link_icon and not _has_external_icon(node):
            node.children.append(external_icon())

        # link text differing from the href was written by the author; checked
        # after the icon, so decorated external links are never aliases
        text = node.only_text_child()
        if not seen and text is not None and text.value != dest:
            node.add_class("alias")

        if is_external and opts.open_links_in_new_tab:
            node.properties["target"] = "_blank"

        is_internal = not (is_external or dest.startswith("#"))
        if is_internal:
            full = node.properties.get("data-slug")
            if not isinstance(full, str):
                dest = node.properties["href"] = self._resolve(page, dest, all_slugs)
                full = canonicalize(dest, page.slug)
                node.properties["data-slug"] = full
            outgoing[simplify_slug(full)] = None

        if opts.pretty_links and is_internal and text is not None and not text.value.startswith("#"):
            text.value = _pretty_text(text.value)

    def _process_media(self, node: Element, page: Page, all_slugs: Sequence[FullSlug]) -> None:
        if self.options.lazy_load:
            node.properties["loading"] = "lazy"

        src = node.properties["src"]
        if not is_absolute_url(src):
            node.properties["src"] = self._resolve(page, src, all_slugs)
