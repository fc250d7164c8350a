"""CLI interface for tagcache."""

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from tagcache.consts import ALL_KEYS_TAG, DEFAULT_DATA_DIR
from tagcache.storage.key_value.file_store import FileStore
from tagcache.tagged_cache import TaggedCache

app = typer.Typer(
    name="tagcache",
    help="tagcache - Inspect and manage a file-backed tagged cache",
)

console = Console()

CACHE_DIR_OPTION = typer.Option(
    None, "--cache-dir", "-d", help=f"Store directory (default: {DEFAULT_DATA_DIR / 'cache'})"
)
NAMESPACE_OPTION = typer.Option("", "--namespace", "-n", help="Cache namespace")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Log cache operations")


def _open_cache(cache_dir: Path | None, namespace: str, verbose: bool) -> TaggedCache:
    """Configure logging and build a TaggedCache over a FileStore."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    return TaggedCache(FileStore(cache_dir=cache_dir), namespace=namespace)


def _format_value(value: object) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2)


@app.command()
def put(
    key: str = typer.Argument(..., help="Cache key"),
    value: str = typer.Argument(..., help="Value to store"),
    tags: list[str] = typer.Option(None, "--tag", "-t", help="Tag to attach (repeatable)"),
    ttl: int = typer.Option(0, "--ttl", help="Time-to-live in seconds (0 = default)"),
    as_json: bool = typer.Option(False, "--json", help="Parse VALUE as JSON"),
    cache_dir: Path = CACHE_DIR_OPTION,
    namespace: str = NAMESPACE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Store a value under KEY."""
    cache = _open_cache(cache_dir, namespace, verbose)

    try:
        payload = json.loads(value) if as_json else value
    except json.JSONDecodeError as e:
        console.print(f"[red]Error:[/red] Invalid JSON value: {e}")
        raise typer.Exit(1)

    try:
        cache.store(key, payload, tags=tags or [], ttl=ttl)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    tag_note = f" tagged {', '.join(tags)}" if tags else ""
    console.print(f"[green]Stored {key}{tag_note}[/green]")


@app.command()
def get(
    key: str = typer.Argument(..., help="Cache key"),
    cache_dir: Path = CACHE_DIR_OPTION,
    namespace: str = NAMESPACE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Print the value stored under KEY."""
    cache = _open_cache(cache_dir, namespace, verbose)

    try:
        found = cache.exists(key)
        value = cache.retrieve(key) if found else None
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not found:
        console.print(f"[yellow]No entry for '{key}'[/yellow]")
        raise typer.Exit(1)

    console.print(_format_value(value), markup=False)


@app.command()
def rm(
    key: str = typer.Argument(..., help="Cache key"),
    cache_dir: Path = CACHE_DIR_OPTION,
    namespace: str = NAMESPACE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Remove KEY from the cache."""
    cache = _open_cache(cache_dir, namespace, verbose)

    try:
        cache.remove(key)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Removed {key}[/green]")


@app.command("rm-tag")
def rm_tag(
    tag: str = typer.Argument(..., help="Tag to invalidate"),
    cache_dir: Path = CACHE_DIR_OPTION,
    namespace: str = NAMESPACE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Remove every key tagged with TAG."""
    cache = _open_cache(cache_dir, namespace, verbose)

    try:
        count = cache.remove_by_tag(tag)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Removed {count} keys tagged '{tag}'[/green]")


@app.command()
def clear(
    cache_dir: Path = CACHE_DIR_OPTION,
    namespace: str = NAMESPACE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Remove every key stored in the namespace."""
    cache = _open_cache(cache_dir, namespace, verbose)

    try:
        count = cache.remove_all()
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Cleared {count} keys from namespace '{namespace}'[/green]")


@app.command()
def tags(
    tag: str = typer.Argument(..., help="Tag to inspect"),
    cache_dir: Path = CACHE_DIR_OPTION,
    namespace: str = NAMESPACE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """List the keys indexed under TAG."""
    cache = _open_cache(cache_dir, namespace, verbose)
    keys = cache.keys_for_tag(tag)

    if not keys:
        console.print(f"[yellow]No keys tagged '{tag}'[/yellow]")
        return

    table = Table(title=f"Keys tagged '{tag}'")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Key", style="cyan")
    table.add_column("Live", justify="center")

    for i, key in enumerate(keys, 1):
        live = "[green]yes[/green]" if cache.exists(key) else "[red]no[/red]"
        table.add_row(str(i), key, live)

    console.print(table)


@app.command()
def stats(
    cache_dir: Path = CACHE_DIR_OPTION,
    namespace: str = NAMESPACE_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Show store and namespace statistics."""
    cache = _open_cache(cache_dir, namespace, verbose)
    store = FileStore(cache_dir=cache_dir)

    table = Table(title="Cache Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="magenta")

    table.add_row("Store directory", str(store.cache_dir))
    table.add_row("Files in store", str(len(store.keys())))
    table.add_row("Namespace", namespace or "(default)")
    table.add_row("Keys in namespace", str(len(cache.keys_for_tag(ALL_KEYS_TAG))))

    console.print(table)


@app.command()
def purge(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    cache_dir: Path = CACHE_DIR_OPTION,
) -> None:
    """Delete every file in the store, across all namespaces."""
    store = FileStore(cache_dir=cache_dir)

    if not yes:
        typer.confirm(f"Delete every entry in {store.cache_dir}?", abort=True)

    count = store.clear()
    console.print(f"[green]Purged {count} entries[/green]")


if __name__ == "__main__":
    app()
