"""CLI entrypoint for sitelinks."""

from __future__ import annotations

from pathlib import Path

import click
import networkx as nx
from rich.console import Console
from rich.table import Table

from sitelinks._logging import configure_logging
from sitelinks.config import ConfigError, SiteConfig, load_config
from sitelinks.content import Page, load_page, load_slugs, parse_frontmatter
from sitelinks.graph import backlinks, build_link_graph, dump_link_index, load_link_index
from sitelinks.links import LinkProcessor
from sitelinks.path import simplify_slug, slugify_file_path
from sitelinks.properties import RenderContext
from sitelinks.tree import from_html, to_html

console = Console(stderr=True)


def _load_config(path: str | None) -> SiteConfig:
    try:
        return load_config(path)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


def _all_slugs(slugs_file: str | None, slug: str) -> tuple[str, ...]:
    if slugs_file is None:
        return (slug,)
    return load_slugs(slugs_file)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """sitelinks — rewrite links and render page properties for a static site."""
    configure_logging("DEBUG" if verbose else None)


@main.command()
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--slug", required=True, help="Full slug of the page, e.g. notes/index.")
@click.option(
    "--slugs",
    "slugs_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="File listing every slug on the site, one per line.",
)
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False), default=None)
@click.option(
    "--frontmatter",
    "source_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Markdown source of the page, for frontmatter wikilink indexing.",
)
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None)
@click.option(
    "--index",
    "index_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSON link index to add this page's outgoing links to.",
)
def transform(
    html_file: str,
    slug: str,
    slugs_file: str | None,
    config_file: str | None,
    source_file: str | None,
    output: str | None,
    index_file: str | None,
):
    """Rewrite the links of a rendered page."""
    config = _load_config(config_file)
    slug = slugify_file_path(slug)
    all_slugs = _all_slugs(slugs_file, slug)

    frontmatter = None
    if source_file is not None:
        frontmatter, _body = parse_frontmatter(Path(source_file).read_text(encoding="utf-8"))
    page = Page(slug=slug, frontmatter=frontmatter)

    tree = from_html(Path(html_file).read_text(encoding="utf-8"))
    links = LinkProcessor(config.link_options()).transform(tree, page, all_slugs)
    html = to_html(tree)

    if output is None:
        click.echo(html)
    else:
        Path(output).write_text(html, encoding="utf-8")

    if index_file is not None:
        pages = load_link_index(index_file) if Path(index_file).exists() else []
        pages = [p for p in pages if p.slug != page.slug] + [page]
        dump_link_index(pages, index_file)

    if not links:
        console.print("[yellow]No outgoing links.[/yellow]")
        return

    table = Table(title=f"Outgoing links of {slug}")
    table.add_column("#", style="dim", width=4)
    table.add_column("Destination", style="cyan")
    for i, link in enumerate(links, 1):
        table.add_row(str(i), link)
    console.print(table)


@main.command()
@click.argument("markdown_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--slug", default=None, help="Full slug of the page (default: from the file name).")
@click.option(
    "--slugs",
    "slugs_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="File listing every slug on the site, one per line.",
)
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False), default=None)
def props(markdown_file: str, slug: str | None, slugs_file: str | None, config_file: str | None):
    """Render the frontmatter properties of a markdown page as HTML."""
    config = _load_config(config_file)
    page = load_page(markdown_file, slugify_file_path(slug) if slug else None)
    ctx = RenderContext(page=page, all_slugs=_all_slugs(slugs_file, page.slug))

    rendered = config.page_properties()(ctx)
    if rendered is None:
        console.print(f"[yellow]{markdown_file} has no frontmatter.[/yellow]")
        return
    click.echo(to_html(rendered))


@main.command()
@click.argument("index_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--backlinks", "backlinks_of", default=None, help="Also list pages linking to this slug.")
def stats(index_file: str, backlinks_of: str | None):
    """Print statistics about the site's link structure."""
    try:
        pages = load_link_index(index_file)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    link_graph = build_link_graph(pages)

    console.print(f"Pages: {len(pages)}")
    console.print(f"Links: {link_graph.number_of_edges()}")

    components = list(nx.weakly_connected_components(link_graph))
    console.print(f"Connected components: {len(components)}")

    isolates = list(nx.isolates(link_graph))
    console.print(f"Isolated pages (no links): {len(isolates)}")

    if link_graph.number_of_edges() > 0:
        density = nx.density(link_graph)
        console.print(f"Graph density: {density:.4f}")

    if backlinks_of is not None:
        target = simplify_slug(slugify_file_path(backlinks_of))
        sources = backlinks(link_graph, target)
        if not sources:
            console.print(f"[yellow]Nothing links to {target}.[/yellow]")
            return
        console.print(f"Backlinks of [bold]{target}[/bold]:")
        for source in sources:
            console.print(f"  [cyan]{source}[/cyan]")


if __name__ == "__main__":
    main()
