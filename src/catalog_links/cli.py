#!filepath: src/catalog_links/cli.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import typer

from catalog_links.errors import CategoryPathError
from catalog_links.link_builder import LinkBuilder
from catalog_links.lookup import InMemoryCategoryLookup, SqliteCategoryLookup
from catalog_links.resolver import CategoryPathResolver
from catalog_links.settings import AppConfig, SettingsError, get_settings
from catalog_links.url import QueryStringRenderer
from catalog_links.utils.logger import configure_logging, get_logger

app = typer.Typer(no_args_is_help=True)
logger = get_logger(__name__)


@app.callback()
def main() -> None:
    """Resolve category paths and build catalog links."""
    configure_logging()


def _load_settings() -> AppConfig:
    try:
        return get_settings()
    except SettingsError as e:
        logger.error(f"Invalid configuration: {e}")
        raise typer.Exit(code=2) from e


def _open_lookup(
    cfg: AppConfig, table: Optional[Path], db: Optional[Path]
) -> Union[InMemoryCategoryLookup, SqliteCategoryLookup]:
    if table is not None and db is not None:
        logger.error("Use either --table or --db, not both")
        raise typer.Exit(code=2)
    if db is not None:
        try:
            return SqliteCategoryLookup(db, settings=cfg.sqlite)
        except ValueError as e:
            logger.error(f"Invalid SQLite table settings: {e}")
            raise typer.Exit(code=2) from e
    if table is not None:
        try:
            return InMemoryCategoryLookup.from_file(table)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load category table {table}: {e}")
            raise typer.Exit(code=2) from e
    logger.error("A category source is required, pass --table or --db")
    raise typer.Exit(code=2)


def _builder(
    table: Optional[Path], db: Optional[Path], language: Optional[int], base_url: str
) -> LinkBuilder:
    cfg = _load_settings()
    lookup = _open_lookup(cfg, table, db)
    resolver = CategoryPathResolver(lookup, max_depth=cfg.resolver.max_depth)
    return LinkBuilder(
        resolver,
        product_categories=lookup,
        language_uid=language,
        settings=cfg.links,
        renderer=QueryStringRenderer(base_url=base_url),
    )


@app.command()
def resolve(
    leaf: int = typer.Argument(..., help="Leaf category id."),
    table: Optional[Path] = typer.Option(None, "--table", help="Category table as json or yaml."),
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite database with the category tables."),
    arguments: bool = typer.Option(False, "--arguments", help="Print link arguments."),
) -> None:
    """Print the ancestor chain of a category, root first."""
    cfg = _load_settings()
    resolver = CategoryPathResolver(
        _open_lookup(cfg, table, db), max_depth=cfg.resolver.max_depth
    )
    try:
        if arguments:
            args = resolver.category_arguments(leaf, prefix=cfg.links.argument_prefix)
            for key, value in args.items():
                typer.echo(f"{key}={value}")
            return
        chain = resolver.resolve(leaf)
    except CategoryPathError as e:
        logger.error(f"Failed to resolve category {leaf}: {e}")
        raise typer.Exit(code=2) from e
    typer.echo(" / ".join(str(c) for c in chain))


@app.command("product-link")
def product_link(
    page: int = typer.Argument(..., help="Single view page id."),
    product: int = typer.Argument(..., help="Product id."),
    category: Optional[int] = typer.Option(None, "--category", help="Category override."),
    exclude_categories: bool = typer.Option(False, "--exclude-categories"),
    absolute: bool = typer.Option(False, "--absolute"),
    base_url: str = typer.Option("", "--base-url"),
    language: Optional[int] = typer.Option(None, "--language"),
    table: Optional[Path] = typer.Option(None, "--table", help="Category table as json or yaml."),
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite database with the category tables."),
) -> None:
    """Print a product single view link."""
    builder = _builder(table, db, language, base_url)
    try:
        url = builder.build_for_product(
            page, product, category, exclude_categories=exclude_categories, absolute=absolute
        )
    except CategoryPathError as e:
        logger.error(f"Failed to build link for product {product}: {e}")
        raise typer.Exit(code=2) from e
    typer.echo(url)


@app.command("category-link")
def category_link(
    page: int = typer.Argument(..., help="List view page id."),
    category: int = typer.Argument(..., help="Category id."),
    absolute: bool = typer.Option(False, "--absolute"),
    base_url: str = typer.Option("", "--base-url"),
    language: Optional[int] = typer.Option(None, "--language"),
    table: Optional[Path] = typer.Option(None, "--table", help="Category table as json or yaml."),
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite database with the category tables."),
) -> None:
    """Print a category list view link."""
    builder = _builder(table, db, language, base_url)
    try:
        url = builder.build_for_category(page, category, absolute=absolute)
    except CategoryPathError as e:
        logger.error(f"Failed to build link for category {category}: {e}")
        raise typer.Exit(code=2) from e
    typer.echo(url)


if __name__ == "__main__":
    app()
