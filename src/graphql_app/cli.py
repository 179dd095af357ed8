#!/usr/bin/env python3
"""
Main CLI entry point for the GraphQL App backend server.
"""

import asyncio
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
import uvicorn
from alembic import command
from alembic.config import Config as AlembicConfig

from graphql_app import __version__
from graphql_app.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="graphql-app")
def cli() -> None:
    """GraphQL App CLI - run the server and manage data."""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=8000, type=int, help="Port to bind to (default: 8000)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option("--workers", default=1, type=int, help="Number of worker processes (default: 1)")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, workers: int, log_level: str) -> None:
    """Start the API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info(
        "Starting GraphQL App API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # Worker processes re-import the app, so settings travel through the environment
    if log_level == "debug":
        os.environ["GRAPHQL_APP_DEBUG"] = "true"
        os.environ["GRAPHQL_APP_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("GRAPHQL_APP_DEBUG", "false")
        os.environ.setdefault("GRAPHQL_APP_LOG_LEVEL", log_level)

    try:
        if reload or workers > 1:
            uvicorn.run(
                "graphql_app.api.app:app",
                host=host,
                port=port,
                reload=reload,
                workers=(workers if not reload else 1),
                log_level=log_level,
                access_log=True,
            )
        else:
            from graphql_app.api.app import app

            uvicorn.run(app, host=host, port=port, log_level=log_level, access_log=True)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command()
@click.option(
    "--users-per-country",
    default=3,
    type=click.IntRange(min=0),
    help="Users to create in each country (default: 3)",
)
def seed(users_per_country: int) -> None:
    """Seed the database with countries and users."""
    from graphql_app.database.connection import dispose_database, get_async_session
    from graphql_app.database.seed_data import seed_initial_data

    configure_logging()

    async def do_seed() -> int:
        try:
            async with get_async_session() as db:
                return await seed_initial_data(db, users_per_country=users_per_country)
        finally:
            await dispose_database()

    try:
        created = asyncio.run(do_seed())
    except Exception as e:
        logger.error("Failed to seed database", error=str(e))
        click.echo(f"✗ Error seeding database: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Database seeded successfully ({created} users created)")


@cli.command()
def schema() -> None:
    """Print the GraphQL schema in SDL."""
    from graphql_app.graphql.schema import print_schema

    click.echo(print_schema())


def alembic_config() -> AlembicConfig:
    """Alembic config for the migrations shipped next to ``src/`` in a checkout."""
    project_dir = Path(__file__).resolve().parents[2]
    alembic_ini = project_dir / "alembic.ini"
    if not alembic_ini.exists():
        raise click.ClickException(f"alembic.ini not found at {alembic_ini}")

    config = AlembicConfig(str(alembic_ini))
    config.set_main_option("script_location", str(project_dir / "alembic"))
    return config


def run_alembic(action: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    config = alembic_config()
    logger.info("Running migration command", action=action, args=list(args), **kwargs)
    try:
        func(config, *args, **kwargs)
    except Exception as e:
        logger.error("Migration command failed", action=action, error=str(e))
        raise click.ClickException(f"{action} failed: {e}") from e


@cli.group()
def db() -> None:
    """Manage the users and countries tables with Alembic."""
    configure_logging()


@db.command()
@click.argument("revision", default="head")
@click.option("--sql", is_flag=True, help="Print the SQL instead of running it")
def upgrade(revision: str, sql: bool) -> None:
    """Create or migrate the tables up to REVISION (default: head)."""
    run_alembic("upgrade", command.upgrade, revision, sql=sql)


@db.command()
@click.argument("revision", default="base")
@click.option("--sql", is_flag=True, help="Print the SQL instead of running it")
@click.confirmation_option(prompt="Downgrading drops tables and the rows in them. Continue?")
def downgrade(revision: str, sql: bool) -> None:
    """Migrate down to REVISION (default: base, which drops every table)."""
    run_alembic("downgrade", command.downgrade, revision, sql=sql)


@db.command()
@click.confirmation_option(prompt="This deletes every user and country. Continue?")
def reset() -> None:
    """Drop and recreate all tables."""
    run_alembic("downgrade", command.downgrade, "base")
    run_alembic("upgrade", command.upgrade, "head")
    click.echo("✓ Database reset to head")


@db.command()
@click.option("-v", "--verbose", is_flag=True)
def current(verbose: bool) -> None:
    """Show the revision the database is at."""
    run_alembic("current", command.current, verbose=verbose)


@db.command()
@click.option("-v", "--verbose", is_flag=True)
def history(verbose: bool) -> None:
    """List the known revisions."""
    run_alembic("history", command.history, verbose=verbose)


@db.command()
@click.option("-m", "--message", required=True, help="Revision message")
@click.option("--autogenerate/--no-autogenerate", default=True, help="Diff against the ORM models")
def revision(message: str, autogenerate: bool) -> None:
    """Create a new migration revision."""
    run_alembic("revision", command.revision, message=message, autogenerate=autogenerate)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
