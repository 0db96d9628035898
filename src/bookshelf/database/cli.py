#!/usr/bin/env python3
"""
`bookshelf-migrate`: Alembic commands wired to the project's alembic.ini.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import click

from alembic import command
from alembic.config import Config
from bookshelf import __version__
from bookshelf.logging import configure_logging, get_logger

logger = get_logger(__name__)

# src/bookshelf/database/cli.py -> project root
PROJECT_ROOT = Path(__file__).resolve().parents[3]


def get_alembic_config(project_root: Path = PROJECT_ROOT) -> Config:
    """Load alembic.ini with the migration scripts resolved from the project root."""
    ini_path = project_root / "alembic.ini"
    if not ini_path.is_file():
        raise click.ClickException(f"alembic.ini not found at {ini_path}")

    config = Config(str(ini_path))
    config.set_main_option("script_location", str(project_root / "alembic"))
    return config


def run_alembic(action: str, fn: Callable[[Config], None], **log_fields: object) -> None:
    """Run one Alembic command, exiting non-zero when it fails."""
    config = get_alembic_config()
    logger.info(f"{action} started", **log_fields)
    try:
        fn(config)
    except Exception as e:
        logger.error(f"{action} failed", error=str(e), **log_fields)
        sys.exit(1)
    logger.info(f"{action} finished", **log_fields)


@click.group()
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
@click.version_option(version=__version__, prog_name="bookshelf-migrate")
def main(log_level: str) -> None:
    """Manage the Bookshelf database schema."""
    configure_logging(debug=(log_level == "debug"), level=log_level)


@main.command()
@click.argument("revision", default="head")
def upgrade(revision: str) -> None:
    """Apply migrations up to REVISION (default: head)."""
    run_alembic("Upgrade", lambda cfg: command.upgrade(cfg, revision), revision=revision)


@main.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Revert migrations down to REVISION (default: one step)."""
    run_alembic("Downgrade", lambda cfg: command.downgrade(cfg, revision), revision=revision)


@main.command()
@click.option("-m", "--message", required=True, help="Revision message")
@click.option("--autogenerate/--no-autogenerate", default=True, help="Diff models against the DB")
def revision(message: str, autogenerate: bool) -> None:
    """Create a new migration script."""
    run_alembic(
        "Revision",
        lambda cfg: command.revision(cfg, message=message, autogenerate=autogenerate),
        message=message,
    )


@main.command()
@click.argument("revision", default="head")
def stamp(revision: str) -> None:
    """Mark the database as being at REVISION without running migrations."""
    run_alembic("Stamp", lambda cfg: command.stamp(cfg, revision), revision=revision)


@main.command()
def current() -> None:
    """Show the revision the database is at."""
    command.current(get_alembic_config(), verbose=True)


@main.command()
def history() -> None:
    """List migration scripts."""
    command.history(get_alembic_config())


if __name__ == "__main__":
    main()
