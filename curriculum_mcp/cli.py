"""CLI for managing the curriculum MCP datastore and server."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table
import typer

from curriculum_mcp.config import McpConfig, load_config
from curriculum_mcp.errors import StorageError
from curriculum_mcp.models import Collection
from curriculum_mcp.store import CollectionStore

app = typer.Typer(
    name="curriculum-mcp",
    help="Curriculum MCP server management CLI",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

ConfigOption = typer.Option(None, "--config", "-c", help="Path to curriculum.toml")
DbOption = typer.Option(None, "--db", help="Override datastore path")


def _config(config_path: Path | None, db: Path | None) -> McpConfig:
    try:
        config = load_config(config_path)
    except (OSError, ValueError) as e:
        err_console.print(f"[red]✗[/] Invalid configuration: {e}")
        raise typer.Exit(1) from None
    if db is not None:
        config.store.path = str(db)
    return config


def _open_store(config: McpConfig) -> CollectionStore:
    try:
        return CollectionStore(config.store.resolved_path(), indent=config.store.indent)
    except StorageError as e:
        err_console.print(f"[red]✗[/] {e}")
        raise typer.Exit(1) from None


@app.command()
def serve(
    config_path: Path | None = ConfigOption,
    db: Path | None = DbOption,
) -> None:
    """Run the MCP server on stdio."""
    from curriculum_mcp.server import configure_logging, serve as run_server

    config = _config(config_path, db)
    configure_logging(config)
    raise typer.Exit(run_server(config))


@app.command()
def init(
    config_path: Path | None = ConfigOption,
    db: Path | None = DbOption,
) -> None:
    """Create the datastore file (or reconcile an existing one)."""
    config = _config(config_path, db)
    existed = config.store.resolved_path().exists()
    store = _open_store(config)
    if existed:
        console.print(f"[green]✓[/] Datastore ready: {store.path}")
    else:
        console.print(f"[green]✓[/] Created datastore: {store.path}")


@app.command()
def stats(
    config_path: Path | None = ConfigOption,
    db: Path | None = DbOption,
) -> None:
    """Show record counts per collection."""
    store = _open_store(_config(config_path, db))

    table = Table(title=str(store.path))
    table.add_column("Collection")
    table.add_column("Records", justify="right")
    total = 0
    for name, count in store.counts().items():
        table.add_row(name, str(count))
        total += count
    table.add_row("[bold]total[/]", f"[bold]{total}[/]")
    console.print(table)


@app.command()
def tools() -> None:
    """List the tool catalogue."""
    from curriculum_mcp.tools.catalog import TOOL_REGISTRY

    table = Table(title=f"{len(TOOL_REGISTRY)} tools")
    table.add_column("Tool")
    table.add_column("Collection")
    table.add_column("Description")
    for spec in TOOL_REGISTRY.values():
        table.add_row(spec.name, spec.kind.collection.value, spec.description)
    console.print(table)


@app.command()
def show(
    collection: str = typer.Argument(..., help="Collection name, e.g. units or style-guide"),
    record_id: str | None = typer.Option(None, "--id", help="Show a single record"),
    config_path: Path | None = ConfigOption,
    db: Path | None = DbOption,
) -> None:
    """Print a collection, or one record, as JSON."""
    try:
        target = Collection(collection)
    except ValueError:
        valid = ", ".join(c.value for c in Collection)
        err_console.print(f"[red]✗[/] Unknown collection '{collection}'. Choose from: {valid}")
        raise typer.Exit(1) from None

    store = _open_store(_config(config_path, db))

    if record_id is None:
        typer.echo(json.dumps(store.get_collection(target), indent=2, ensure_ascii=False))
        return

    record = store.find_by_id(target, record_id)
    if record is None:
        err_console.print(f"[yellow]![/] No record {record_id} in {target.value}")
        raise typer.Exit(1)
    typer.echo(json.dumps(record, indent=2, ensure_ascii=False))


def main() -> None:
    """Entry point for curriculum-mcp CLI."""
    app()


if __name__ == "__main__":
    main()
