"""Click CLI for dxcache — inspect and maintain a cache directory."""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from dxcache.cache.manager import CacheManager
from dxcache.config.hierarchy import load_config_hierarchy

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _open_manager(cache_dir: str | None, verbose: int) -> CacheManager:
    _setup_logging(verbose)
    config = load_config_hierarchy(cache_dir=cache_dir)
    # Maintenance commands always operate on the directory, even if caching is off
    config["cache_disabled"] = False
    return CacheManager.from_config(config)


cache_dir_option = click.option(
    "--cache-dir", type=click.Path(file_okay=False), default=None, help="Cache directory."
)
verbose_option = click.option(
    "-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)."
)


@click.group()
@click.version_option(package_name="dxcache")
def cli() -> None:
    """dxcache — content-addressed translation and merge cache."""


@cli.command("stats")
@cache_dir_option
@verbose_option
def cache_stats(cache_dir: str | None, verbose: int) -> None:
    """Show cache statistics."""
    mgr = _open_manager(cache_dir, verbose)

    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    translation = mgr.translation.stats()
    total = mgr.stats()
    table.add_row("Directory", str(mgr.cache_dir))
    table.add_row("Translation entries", f"{translation.entries} / {mgr.translation.max_entries}")
    table.add_row("Merge entries", f"{len(mgr.merge.index)} / {mgr.merge.index.max_entries}")
    table.add_row("Size (MB)", f"{total.size_mb:.1f}")
    table.add_row("Skipped index lines", str(mgr.merge.index.stats().degraded))

    console.print(table)


@cli.command("index")
@cache_dir_option
@verbose_option
def show_index(cache_dir: str | None, verbose: int) -> None:
    """List merge cache entries, most recent first."""
    mgr = _open_manager(cache_dir, verbose)

    table = Table(title="Merge Index", show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Inputs", justify="right")
    table.add_column("Output hash", style="cyan")
    table.add_column("File")

    for pos, entry in enumerate(mgr.merge.entries()):
        table.add_row(
            str(pos), str(len(entry.components)), entry.output_hash[:12], entry.file_name
        )

    console.print(table)


@cli.command("trim")
@cache_dir_option
@verbose_option
def cache_trim(cache_dir: str | None, verbose: int) -> None:
    """Evict entries beyond the configured capacities."""
    mgr = _open_manager(cache_dir, verbose)
    evicted = mgr.trim()
    console.print(f"[green]Trimmed {evicted} entries.[/green]")


@cli.command("clear")
@cache_dir_option
@verbose_option
@click.confirmation_option(prompt="Are you sure you want to clear the cache?")
def cache_clear(cache_dir: str | None, verbose: int) -> None:
    """Delete all cached data."""
    mgr = _open_manager(cache_dir, verbose)
    removed = mgr.clear()
    console.print(f"[green]Cache cleared ({removed} entries).[/green]")


def main() -> None:
    """Entry point for the CLI."""
    cli()
