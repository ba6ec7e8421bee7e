"""Site configuration loaded from a YAML file.

Example ``sitelinks.yaml``::

    markdownLinkResolution: shortest
    prettyLinks: true
    openLinksInNewTab: false
    lazyLoad: true
    externalLinkIcon: true
    indexFrontmatterWikilinks: false
    hideProperties: [publish]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from sitelinks.links import LinkOptions
from sitelinks.properties import PageProperties, hide
from sitelinks.resolve import Strategy

log = logging.getLogger(__name__)

_BOOL_KEYS = {
    "prettyLinks": "pretty_links",
    "openLinksInNewTab": "open_links_in_new_tab",
    "lazyLoad": "lazy_load",
    "externalLinkIcon": "external_link_icon",
    "indexFrontmatterWikilinks": "index_frontmatter_wikilinks",
}


class ConfigError(ValueError):
    """The configuration file is not usable."""


@dataclass
class SiteConfig:
    markdown_link_resolution: Strategy = Strategy.ABSOLUTE
    pretty_links: bool = True
    open_links_in_new_tab: bool = False
    lazy_load: bool = False
    external_link_icon: bool = True
    index_frontmatter_wikilinks: bool = False
    # properties never shown on any page
    hide_properties: list[str] = field(default_factory=lambda: ["publish"])

    def link_options(self) -> LinkOptions:
        return LinkOptions(
            markdown_link_resolution=self.markdown_link_resolution,
            pretty_links=self.pretty_links,
            open_links_in_new_tab=self.open_links_in_new_tab,
            lazy_load=self.lazy_load,
            external_link_icon=self.external_link_icon,
            index_frontmatter_wikilinks=self.index_frontmatter_wikilinks,
        )

    def page_properties(self) -> PageProperties:
        return PageProperties(field_renderers={name: hide for name in self.hide_properties})


def config_from_dict(raw: dict) -> SiteConfig:
    config = SiteConfig()
    for key, value in raw.items():
        if key == "markdownLinkResolution":
            try:
                config.markdown_link_resolution = Strategy(value)
            except ValueError:
                choices = ", ".join(s.value for s in Strategy)
                raise ConfigError(
                    f"markdownLinkResolution must be one of {choices}, got {value!r}"
                ) from None
        elif key in _BOOL_KEYS:
            if not isinstance(value, bool):
                raise ConfigError(f"{key} must be true or false, got {value!r}")
            setattr(config, _BOOL_KEYS[key], value)
        elif key == "hideProperties":
            names = [value] if isinstance(value, str) else value
            if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
                raise ConfigError(f"hideProperties must be a list of field names, got {value!r}")
            config.hide_properties = list(names)
        else:
            log.warning("Ignoring unknown config key %r", key)
    return config


def load_config(path: str | Path | None = None) -> SiteConfig:
    """Load a config file; no path means the defaults."""
    if path is None:
        return SiteConfig()

    path = Path(path)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if raw is None:
        return SiteConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    log.debug("Loaded config from %s", path)
    return config_from_dict(raw)
