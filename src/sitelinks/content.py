"""Pages as seen by the link and property passes: slug, frontmatter, links."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from sitelinks.path import FullSlug, SimpleSlug, slugify_file_path

log = logging.getLogger(__name__)

# Matches YAML frontmatter delimited by ---
_FRONTMATTER_RE = re.compile(r"\A---\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


@dataclass
class Page:
    """A single rendered page."""

    slug: FullSlug
    frontmatter: dict | None = None  # None when the source had no frontmatter block
    links: list[SimpleSlug] = field(default_factory=list)  # filled by LinkProcessor


def parse_frontmatter(text: str) -> tuple[dict | None, str]:
    """Split a markdown source into its frontmatter and body.

    Returns ``(None, text)`` when there is no frontmatter block. An empty
    or unparsable block yields ``{}``.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return None, text

    try:
        frontmatter = yaml.safe_load(match.group(1) or "") or {}
    except yaml.YAMLError as exc:
        log.warning("Ignoring invalid frontmatter: %s", exc)
        frontmatter = {}
    if not isinstance(frontmatter, dict):
        log.warning("Ignoring frontmatter that is not a mapping (%s)", type(frontmatter).__name__)
        frontmatter = {}
    return frontmatter, text[match.end() :]


def load_page(path: str | Path, slug: FullSlug | None = None) -> Page:
    """Read a markdown file's frontmatter into a :class:`Page`.

    The slug defaults to the slugified file name.
    """
    path = Path(path)
    frontmatter, _body = parse_frontmatter(path.read_text(encoding="utf-8"))
    return Page(slug=slug or slugify_file_path(path.name), frontmatter=frontmatter)


def load_slugs(path: str | Path) -> tuple[FullSlug, ...]:
    """Read the site's slug list: one slug per line, ``#`` starts a comment."""
    slugs = []
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        slugs.append(slugify_file_path(line))
    return tuple(slugs)
