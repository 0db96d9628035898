#!/usr/bin/env python3
"""
`bookshelf` command: run the API server and load sample data.
"""

import asyncio
import os
import sys

import click
import uvicorn

from bookshelf import __version__
from bookshelf.config import settings
from bookshelf.logging import configure_logging, get_logger

logger = get_logger(__name__)

APP_IMPORT_PATH = "bookshelf.api.app:app"
LOG_LEVELS = ["debug", "info", "warning", "error"]


@click.group()
@click.version_option(version=__version__, prog_name="bookshelf")
def cli() -> None:
    """Bookshelf catalog service."""


@cli.command()
@click.option("--host", default=settings.api_host, show_default=True, help="Interface to bind")
@click.option("--port", default=settings.api_port, type=int, show_default=True, help="Port")
@click.option("--reload", is_flag=True, help="Restart on code changes (development)")
@click.option("--workers", default=1, type=int, show_default=True, help="Worker processes")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(LOG_LEVELS),
    show_default=True,
)
def serve(host: str, port: int, reload: bool, workers: int, log_level: str) -> None:
    """Serve GraphQL over HTTP and WebSocket on /graphql."""
    debug = log_level == "debug"
    configure_logging(debug=debug, level=log_level)

    # Reloaded and forked workers import the app fresh and read these back
    os.environ["BOOKSHELF_LOG_LEVEL"] = log_level.upper()
    if debug:
        os.environ["BOOKSHELF_DEBUG"] = "true"

    if workers > 1 and not reload:
        # Subscriptions fan out in process memory; other workers never see the event
        logger.warning(
            "bookAdded subscribers only receive books added through their own worker",
            workers=workers,
        )

    logger.info("Starting Bookshelf API", host=host, port=port, reload=reload, workers=workers)

    if reload or workers > 1:
        target = APP_IMPORT_PATH
        extra = {"reload": reload, "workers": 1 if reload else workers}
    else:
        from bookshelf.api.app import app as target

        extra = {}

    try:
        uvicorn.run(target, host=host, port=port, log_level=log_level, **extra)
    except KeyboardInterrupt:
        logger.info("Server stopped")


@cli.command()
@click.option(
    "--create-tables/--no-create-tables",
    default=False,
    help="Create missing tables first (for databases not managed by migrations)",
)
def seed(create_tables: bool) -> None:
    """Insert a small sample catalog of authors and books."""
    from bookshelf.database.connection import create_tables as ensure_tables
    from bookshelf.database.connection import dispose_database, get_async_session
    from bookshelf.database.seed_data import seed_sample_catalog

    configure_logging(level=settings.log_level)

    async def run() -> tuple[int, int]:
        try:
            if create_tables:
                await ensure_tables()
            async with get_async_session() as db:
                return await seed_sample_catalog(db)
        finally:
            await dispose_database()

    try:
        authors_created, books_created = asyncio.run(run())
    except Exception as e:
        logger.error("Seeding failed", error=str(e))
        click.echo(f"✗ Error seeding catalog: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Catalog seeded: {authors_created} authors, {books_created} books added")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
