"""Slugs and site-relative URLs.

Three string kinds flow through this package:

- ``FullSlug``: site-rooted page identifier, no extension, no leading or
  trailing slash, may end in ``index`` (e.g. ``notes/index``).
- ``SimpleSlug``: a full slug with its trailing ``index`` segment removed.
  Used as the key for backlinks and the link graph. The site root is ``/``.
- ``RelativeURL``: a link target as written into the page, possibly relative,
  possibly carrying an ``#anchor``.
"""

from __future__ import annotations

import re
from urllib.parse import unquote

FullSlug = str
SimpleSlug = str
RelativeURL = str

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z\d+\-.]*?:")
_WINDOWS_PATH_RE = re.compile(r"^[a-zA-Z]:\\")
_EXTENSION_RE = re.compile(r"\.[A-Za-z0-9]+$")
_WHITESPACE_RE = re.compile(r"\s")

# extensions that are dropped when a file path becomes a page slug
_PAGE_EXTENSIONS = {".md", ".html"}


def is_absolute_url(s: str) -> bool:
    """True for anything carrying a URL scheme (``https:``, ``mailto:``...)."""
    if _WINDOWS_PATH_RE.match(s):
        return False
    return bool(_SCHEME_RE.match(s))


def strip_slashes(s: str, only_prefix: bool = False) -> str:
    if s.startswith("/"):
        s = s[1:]
    if not only_prefix and s.endswith("/"):
        s = s[:-1]
    return s


def ends_with_segment(s: str, suffix: str) -> bool:
    """True if the last path segment of ``s`` is exactly ``suffix``."""
    return s == suffix or s.endswith("/" + suffix)


def trim_segment_suffix(s: str, suffix: str) -> str:
    if ends_with_segment(s, suffix):
        s = s[: -len(suffix)]
    return s


def is_folder_path(s: str) -> bool:
    return (
        s.endswith("/")
        or ends_with_segment(s, "index")
        or ends_with_segment(s, "index.md")
        or ends_with_segment(s, "index.html")
    )


def split_anchor(link: str) -> tuple[str, str]:
    """Split ``path#anchor`` into ``("path", "#anchor")``.

    The anchor is kept as authored apart from percent-decoding; it is ``""``
    when the link has none.
    """
    path, sep, anchor = link.partition("#")
    if not sep:
        return path, ""
    return path, "#" + unquote(anchor)


def _slugify_segment(segment: str) -> str:
    segment = _WHITESPACE_RE.sub("-", segment)
    segment = segment.replace("&", "-and-").replace("%", "-percent")
    return segment.replace("?", "").replace("#", "")


def _slugify(s: str) -> str:
    return "/".join(_slugify_segment(seg) for seg in s.split("/")).rstrip("/")


def slugify_file_path(fp: str, exclude_ext: bool = False) -> FullSlug:
    """Turn a content file path into its full slug.

    >>> slugify_file_path("notes/My Note.md")
    'notes/My-Note'
    >>> slugify_file_path("img/x.png")
    'img/x.png'
    """
    fp = strip_slashes(fp)
    match = _EXTENSION_RE.search(fp)
    ext = match.group(0) if match else ""
    without_ext = fp[: -len(ext)] if ext else fp
    if exclude_ext or ext.lower() in _PAGE_EXTENSIONS:
        ext = ""

    slug = _slugify(without_ext)
    if ends_with_segment(slug, "_index"):
        slug = slug[: -len("_index")] + "index"
    return slug + ext


def simplify_slug(fp: FullSlug) -> SimpleSlug:
    res = strip_slashes(trim_segment_suffix(fp, "index"))
    return res if res else "/"


def slugify_tag(tag: str) -> str:
    """Slug of a tag, used for the ``tags/<slug>`` index pages.

    >>> slugify_tag("Bar Baz")
    'bar-baz'
    >>> slugify_tag("Topic/Sub Topic")
    'topic/sub-topic'
    """
    return "/".join(_slugify_segment(seg).lower() for seg in tag.split("/"))


def join_segments(*args: str) -> str:
    if not args:
        return ""
    joined = "/".join(
        strip_slashes(segment) for segment in args if segment not in ("", "/")
    )
    if args[0].startswith("/"):
        joined = "/" + joined
    if args[-1].endswith("/"):
        joined = joined + "/"
    return joined


def path_to_root(slug: FullSlug) -> RelativeURL:
    """Relative path from the page at ``slug`` back to the site root.

    >>> path_to_root("index")
    '.'
    >>> path_to_root("a/b/c")
    '../..'
    """
    depth = len([seg for seg in slug.split("/") if seg]) - 1
    if depth <= 0:
        return "."
    return "/".join([".."] * depth)


def resolve_relative(current: FullSlug, target: FullSlug) -> RelativeURL:
    """Href from the page ``current`` to the page ``target``.

    Folder pages (``.../index``) keep a trailing slash so the browser lands
    on the folder listing.
    """
    href = join_segments(path_to_root(current), simplify_slug(target))
    if is_folder_path(target) and not href.endswith("/"):
        href += "/"
    return href
