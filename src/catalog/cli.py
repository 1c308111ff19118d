#!/usr/bin/env python3
"""
Main CLI entry point for the package catalog server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from catalog import __version__
from catalog.database.cli import db
from catalog.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="catalog")
def cli() -> None:
    """Package catalog CLI - run the server, migrate the database, manage users."""
    pass


cli.add_command(db)


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=4000, type=int, help="Port to bind to (default: 4000)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the package catalog API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info("Starting package catalog API server", host=host, port=port, reload=reload)

    # Settings are read at import time in the server process
    if log_level == "debug":
        os.environ["CATALOG_DEBUG"] = "true"
    else:
        os.environ.setdefault("CATALOG_DEBUG", "false")
    os.environ.setdefault("CATALOG_LOG_LEVEL", log_level)

    try:
        uvicorn.run(
            "catalog.api.app:create_app",
            factory=True,
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.group()
def user() -> None:
    """Manage users in the database."""
    pass


@user.command("create")
@click.option("--user-name", required=True, help="Unique username")
@click.option("--user-type", default="user", show_default=True, help="'admin' or a standard type")
@click.password_option(help="Password (prompted if omitted)")
def create_user(user_name: str, user_type: str, password: str) -> None:
    """Create a user directly in the database, e.g. the first admin."""
    from pydantic import ValidationError

    from catalog.auth.passwords import hash_password
    from catalog.repository import SqlAlchemyCatalogStore, UserAlreadyExistsError
    from catalog.validation import Registration, format_validation_error

    configure_logging()

    try:
        registration = Registration(user_name=user_name, password=password, user_type=user_type)
    except ValidationError as e:
        click.echo(f"✗ {format_validation_error(e)}", err=True)
        sys.exit(1)

    async def do_create():
        store = SqlAlchemyCatalogStore()
        password_hash = await hash_password(registration.password)
        return await store.create_user(
            user_name=registration.user_name,
            password_hash=password_hash,
            user_type=registration.user_type,
        )

    try:
        created = asyncio.run(do_create())
    except UserAlreadyExistsError:
        click.echo(f"✗ User already exists: {user_name}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.error("Failed to create user", error=str(e))
        click.echo(f"✗ Error creating user: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ User created: {created.id}")
    click.echo(f"  Name: {created.user_name}")
    click.echo(f"  Type: {created.user_type}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
