"""
Plugin catalog CLI.

Minimal command-line driver for running a populate pass and resolving a
single plugin against the configured database.
"""

import logging
from typing import Optional

import typer
import yaml
from rich.console import Console

from plugin_catalog.logging_config import setup_logging

app = typer.Typer(
    name="plugin-catalog",
    help="Plugin catalog - synchronize plugin manifests into the catalog",
    no_args_is_help=True,
)

console = Console()


def _init_logging() -> None:
    # Fall back to console logging if the log directory is not writable
    try:
        setup_logging(context="cli")
    except PermissionError:
        logging.basicConfig(level=logging.INFO)


@app.command()
def populate(
    source: Optional[str] = typer.Option(
        None,
        "--source",
        help="Plugin archive path or URL (defaults to PLUGINS_ZIP_PATH)",
    ),
) -> None:
    """
    Run one synchronization pass from the plugin archive into the catalog.
    """
    from plugin_catalog.db.connection import db_session
    from plugin_catalog.db.repositories import PluginRepository
    from plugin_catalog.exceptions import ConfigurationError, PopulateError
    from plugin_catalog.plugins import PluginManager

    _init_logging()

    try:
        with db_session() as session:
            manager = PluginManager(PluginRepository(session))
            result = manager.populate(source)
    except ConfigurationError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)
    except PopulateError as e:
        cause = f" ({e.__cause__})" if e.__cause__ else ""
        console.print(f"[bold red]Populate failed:[/bold red] {e}{cause}")
        raise typer.Exit(1)

    console.print("[green]✓ Plugin catalog populated[/green]")
    console.print(f"  Created: {result.created}")
    console.print(f"  Updated: {result.updated}")
    console.print(f"  Unchanged: {result.unchanged}")
    console.print(f"  Failed: {result.failed}")


@app.command()
def lookup(
    name: str = typer.Argument(..., help="Plugin name"),
    kind: str = typer.Option("plugin", help="Resource kind"),
    type_: str = typer.Option("step", "--type", help="Plugin type"),
    version: str = typer.Option("", help="Plugin version"),
) -> None:
    """
    Resolve a plugin and print its parsed manifest.
    """
    from plugin_catalog.db.connection import db_session
    from plugin_catalog.db.repositories import PluginRepository
    from plugin_catalog.exceptions import PluginCatalogError
    from plugin_catalog.plugins import PluginManager

    _init_logging()

    try:
        with db_session() as session:
            manager = PluginManager(PluginRepository(session))
            manifest = manager.lookup(name, kind, type_, version)
    except PluginCatalogError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(
        yaml.safe_dump(manifest.model_dump(exclude_none=True), sort_keys=False),
        markup=False,
    )


@app.command("init-db")
def init_db_command() -> None:
    """
    Create the catalog tables (development convenience; use Alembic otherwise).
    """
    from plugin_catalog.db.connection import init_db

    init_db()
    console.print("[green]✓ Database tables created[/green]")


if __name__ == "__main__":
    app()
