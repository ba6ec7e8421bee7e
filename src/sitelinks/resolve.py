"""Resolve authored link targets into final site hrefs."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from enum import Enum
from urllib.parse import unquote, urljoin, urlsplit

from sitelinks.path import (
    FullSlug,
    RelativeURL,
    is_folder_path,
    join_segments,
    path_to_root,
    resolve_relative,
    simplify_slug,
    slugify_file_path,
    split_anchor,
    strip_slashes,
)

log = logging.getLogger(__name__)

# Only the path of the resolved URL is used, the host is a placeholder.
_CANONICAL_BASE = "https://base.com/"


class Strategy(str, Enum):
    """How a markdown link target is turned into an href."""

    ABSOLUTE = "absolute"  # rooted at the site root
    RELATIVE = "relative"  # relative to the linking page's folder
    SHORTEST = "shortest"  # unique file name wins, otherwise absolute


def _normalize_segments(segments: Iterable[str]) -> list[str]:
    """Apply ``.`` and ``..``; ``..`` above the root stays at the root."""
    parts: list[str] = []
    for seg in segments:
        if seg in ("", "."):
            continue
        if seg == "..":
            if parts:
                parts.pop()
            continue
        parts.append(seg)
    return parts


def _destination(base_dir: Sequence[str], path: str) -> str:
    """Site-rooted simple slug of ``path`` read from ``base_dir``.

    Returns ``""`` for the site root.
    """
    if path.startswith("/"):
        base_dir = []
    parts = _normalize_segments([*base_dir, *path.split("/")])
    if not parts:
        return ""
    simple = simplify_slug(slugify_file_path("/".join(parts)))
    return "" if simple == "/" else simple


def _basename(slug: FullSlug) -> str:
    simple = simplify_slug(slug)
    if simple == "/":
        return "index"
    return simple.rsplit("/", 1)[-1]


def _trailing_overlap(candidate: FullSlug, target: str) -> int:
    """Number of trailing path segments the candidate shares with target."""
    a = simplify_slug(candidate).split("/")
    b = target.split("/")
    count = 0
    while count < min(len(a), len(b)) and a[-1 - count] == b[-1 - count]:
        count += 1
    return count


def find_shortest_match(target: str, all_slugs: Sequence[FullSlug]) -> FullSlug | None:
    """Pick the page a file-name style link refers to.

    An exact slug match wins. Otherwise every page whose last segment equals
    the target's basename is a candidate; the candidate sharing the most
    trailing segments with ``target`` wins, ties going to the
    lexicographically smallest slug. ``None`` when nothing matches.
    """
    if not target:
        return None

    for slug in all_slugs:
        if target == slug or target == simplify_slug(slug):
            return slug

    basename = target.rsplit("/", 1)[-1]
    candidates = sorted(slug for slug in all_slugs if _basename(slug) == basename)
    if not candidates:
        return None
    if len(candidates) > 1:
        log.debug("Ambiguous link %r, candidates: %s", target, ", ".join(candidates))
    return max(candidates, key=lambda slug: _trailing_overlap(slug, target))


def _relative_href(source: FullSlug, dest: str, folder: bool) -> RelativeURL:
    source_dir = [seg for seg in source.split("/")[:-1] if seg]
    dest_parts = dest.split("/") if dest else []

    # a page that is also an ancestor folder keeps its last segment, "." and
    # ".." would point at the folder listing
    limit = min(len(source_dir), len(dest_parts) if folder else len(dest_parts) - 1)
    common = 0
    while (
        common < limit
        and source_dir[common] == dest_parts[common]
    ):
        common += 1

    rel = [".."] * (len(source_dir) - common) + dest_parts[common:]
    href = "/".join(rel) or "."
    if not href.startswith("."):
        href = "./" + href
    return href


def resolve(
    source_slug: FullSlug,
    raw_target: str,
    strategy: Strategy | str,
    all_slugs: Sequence[FullSlug],
) -> RelativeURL:
    """Turn an authored link target into the href written into the page.

    Args:
        source_slug: Full slug of the page containing the link.
        raw_target: The link as written (``../a/b.md#Heading``, ``b``...).
        strategy: One of :class:`Strategy`.
        all_slugs: Full slugs of every page on the site. Read only.

    Returns:
        An href relative to the source page. Anchor-only targets are
        returned unchanged.
    """
    strategy = Strategy(strategy)
    path, anchor = split_anchor(raw_target)
    if not path:
        return raw_target

    path = unquote(path)
    folder = is_folder_path(path)

    if strategy is Strategy.RELATIVE:
        source_dir = source_slug.split("/")[:-1]
        dest = _destination(source_dir, path)
        href = _relative_href(source_slug, dest, folder)
    else:
        dest = _destination([], path)
        match = None
        if strategy is Strategy.SHORTEST:
            match = find_shortest_match(dest, all_slugs)
            if match is None:
                log.debug("No page matches %r, resolving from the site root", raw_target)
        if match is not None:
            return resolve_relative(source_slug, match) + anchor
        href = join_segments(path_to_root(source_slug), dest)

    if (folder or not dest) and not href.endswith("/"):
        href += "/"
    return href + anchor


def canonicalize(href: RelativeURL, file_slug: FullSlug) -> FullSlug:
    """Full slug of the page ``href`` points at when read from ``file_slug``.

    A trailing ``index`` is kept (folder hrefs gain one).
    """
    url = urljoin(_CANONICAL_BASE + strip_slashes(file_slug, only_prefix=True), href)
    dest, _anchor = split_anchor(urlsplit(url).path)
    if dest.endswith("/"):
        dest += "index"
    # urljoin keeps escapes from the href, the slug is stored decoded
    return unquote(strip_slashes(dest, only_prefix=True))
