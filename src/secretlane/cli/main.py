"""Secretlane CLI — run the server, prepare the database.

Usage:
    secretlane serve                      # Start the API (uvicorn)
    secretlane serve --port 9000 --reload
    secretlane init-db                    # Create tables if absent
    secretlane init-db --seed             # ...and the default admin user
"""

from __future__ import annotations

import asyncio
from typing import Optional

import click
import uvicorn

from secretlane.config import get_settings
from secretlane.db.engine import open_database
from secretlane.errors import SecretlaneError


def _run(coro):
    """Run an async coroutine from a synchronous Click handler."""
    return asyncio.run(coro)


@click.group()
def cli():
    """Secretlane backend."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: settings.host)")
@click.option("--port", default=None, type=int, help="Port (default: settings.port)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Start the HTTP server."""
    settings = get_settings()
    uvicorn.run(
        "secretlane.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command("init-db")
@click.option(
    "--seed/--no-seed",
    default=None,
    help="Insert the default admin user (default: settings.seed_default_user)",
)
def init_db(seed: Optional[bool]):
    """Create the users and workspaces tables."""
    settings = get_settings()
    if seed is None:
        seed = settings.seed_default_user

    async def _init():
        database = open_database(settings)
        try:
            await database.ping()
            await database.create_schema(seed_default_user=seed)
        finally:
            await database.dispose()

    try:
        _run(_init())
    except SecretlaneError as e:
        raise click.ClickException(e.message)
    click.echo(f"Schema ready ({settings.db_dialect})")


if __name__ == "__main__":
    cli()
