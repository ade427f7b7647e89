"""
prefkit CLI entry point.

Commands:
    prefkit version  — Show version
    prefkit keys     — List keys in a suite
    prefkit get      — Show the stored value for a key
    prefkit set      — Store a value
    prefkit rm       — Remove a key
    prefkit clear    — Remove every key in a suite
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from prefkit.core.config import PrefkitConfig
from prefkit.core.errors import PrefkitError
from prefkit.core.logging import setup_logging_from_config
from prefkit.core.types import StoredValue, ValueKind
from prefkit.settings.manager import SettingsManager
from prefkit.store.suites import SuiteRegistry

app = typer.Typer(
    name="prefkit",
    help="prefkit — inspect and edit typed settings suites.",
    add_completion=False,
)

console = Console()

SuiteOption = typer.Option(None, "--suite", "-s", help="Suite name (default: configured suite)")
DbOption = typer.Option(None, "--db", help="SQLite database path")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Show debug output")


def _open_manager(suite: str | None, db: Path | None, verbose: bool) -> SettingsManager:
    """Load config, apply CLI overrides and bind a manager to the suite."""
    overrides: dict[str, Any] = {}
    if db is not None:
        overrides["storage"] = {"backend": "sqlite", "path": str(db)}
    try:
        config = PrefkitConfig.load(overrides=overrides)
        setup_logging_from_config(config.logging, verbose=verbose)
        registry = SuiteRegistry(config)
        return SettingsManager(registry.get(suite))
    except PrefkitError as e:
        _fail(e)


def _format_value(stored: StoredValue) -> str:
    """Render a stored value for the console, markup-escaped."""
    if stored.kind is ValueKind.BYTES:
        return stored.value.hex() or "(empty)"  # type: ignore[union-attr]
    if stored.kind is ValueKind.BOOL:
        return "true" if stored.value else "false"
    return escape(str(stored.value))


def _parse_value(raw: str, kind: ValueKind) -> Any:
    """Parse command-line text into a Python value of the given kind."""
    if kind is ValueKind.BOOL:
        lowered = raw.lower()
        if lowered in ("true", "yes", "on", "1"):
            return True
        if lowered in ("false", "no", "off", "0"):
            return False
        raise ValueError(f"'{raw}' is not a boolean")
    if kind is ValueKind.INT:
        return int(raw)
    if kind in (ValueKind.DOUBLE, ValueKind.FLOAT):
        return float(raw)
    if kind is ValueKind.BYTES:
        return bytes.fromhex(raw)
    return raw


def _fail(error: PrefkitError) -> NoReturn:
    console.print(f"[red]{escape(error.message)}[/red]")
    raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show the prefkit version."""
    from prefkit import __version__

    console.print(f"prefkit {__version__}")


@app.command()
def keys(
    suite: str = SuiteOption,
    db: Path = DbOption,
    verbose: bool = VerboseOption,
) -> None:
    """List keys in a suite with their stored kind."""
    manager = _open_manager(suite, db, verbose)
    name = escape(manager.store.suite)
    try:
        names = manager.all_keys
        if not names:
            console.print(f"[dim]Suite '{name}' is empty[/dim]")
            return

        table = Table(title=f"Suite: {name}")
        table.add_column("Key", style="cyan")
        table.add_column("Kind", style="magenta")
        table.add_column("Value")
        for key in names:
            stored = manager.get_raw(key)
            if stored is None:
                table.add_row(escape(key), "?", "[red]unreadable[/red]")
            else:
                table.add_row(escape(key), stored.kind.value, _format_value(stored))
        console.print(table)
    except PrefkitError as e:
        _fail(e)
    finally:
        manager.store.close()


@app.command()
def get(
    key: str = typer.Argument(..., help="Setting key"),
    suite: str = SuiteOption,
    db: Path = DbOption,
    verbose: bool = VerboseOption,
) -> None:
    """Show the stored value for a key."""
    manager = _open_manager(suite, db, verbose)
    try:
        stored = manager.get_raw(key)
        if stored is None:
            if manager.has_key(key):
                console.print(f"[red]'{escape(key)}' is stored but unreadable[/red]")
            else:
                console.print(f"[yellow]'{escape(key)}' is not set[/yellow]")
            raise typer.Exit(1)
        console.print(f"{_format_value(stored)} [dim]({stored.kind.value})[/dim]")
    except PrefkitError as e:
        _fail(e)
    finally:
        manager.store.close()


@app.command("set")
def set_(
    key: str = typer.Argument(..., help="Setting key"),
    value: str = typer.Argument(..., help="Value (hex for bytes)"),
    kind: ValueKind = typer.Option(ValueKind.TEXT, "--kind", "-k", help="Value kind"),
    suite: str = SuiteOption,
    db: Path = DbOption,
    verbose: bool = VerboseOption,
) -> None:
    """Store a value under a key."""
    try:
        parsed = _parse_value(value, kind)
    except ValueError as e:
        console.print(f"[red]Invalid {kind.value} value: {escape(str(e))}[/red]")
        raise typer.Exit(2)

    manager = _open_manager(suite, db, verbose)
    try:
        manager.set_value(parsed, key, kind=kind)
    except PrefkitError as e:
        _fail(e)
    finally:
        manager.store.close()
    console.print(f"[green]Set '{escape(key)}'[/green]")


@app.command()
def rm(
    key: str = typer.Argument(..., help="Setting key"),
    suite: str = SuiteOption,
    db: Path = DbOption,
    verbose: bool = VerboseOption,
) -> None:
    """Remove a key. Removing a missing key is not an error."""
    manager = _open_manager(suite, db, verbose)
    try:
        manager.remove_setting(key)
    except PrefkitError as e:
        _fail(e)
    finally:
        manager.store.close()
    console.print(f"[green]Removed '{escape(key)}'[/green]")


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    suite: str = SuiteOption,
    db: Path = DbOption,
    verbose: bool = VerboseOption,
) -> None:
    """Remove every key in a suite."""
    manager = _open_manager(suite, db, verbose)
    name = manager.store.suite
    try:
        if not yes and not typer.confirm(f"Remove all settings in suite '{name}'?"):
            console.print("[dim]Aborted[/dim]")
            raise typer.Exit(1)
        removed = manager.clear_all_settings()
    except PrefkitError as e:
        _fail(e)
    finally:
        manager.store.close()
    console.print(f"[green]Removed {removed} settings from '{escape(name)}'[/green]")


if __name__ == "__main__":
    app()
