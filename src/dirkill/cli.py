"""CLI interface for dirkill."""

import logging
import sys
import time
from typing import Optional

import typer

from dirkill import __version__
from dirkill.config import CONFIG_FILE, Config, load_config
from dirkill.coordinator import Coordinator
from dirkill.display import (
    confirm_action,
    console,
    format_size,
    show_deletion_result,
    show_deletion_summary,
    show_directories,
    show_scan_summary,
)
from dirkill.matcher import IgnorePatterns, InvalidPatternError
from dirkill.models import DeletionStatus, DirectoryEntry, ScanStatus

# Create Typer app
app = typer.Typer(
    name="dirkill",
    help="Find and delete directories like node_modules, .venv or target",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"dirkill version {__version__}")
        raise typer.Exit()


def setup_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0, "--verbose", "-V", count=True, help="Increase log output (repeatable)."
    ),
) -> None:
    """dirkill - find and delete directories like node_modules."""
    setup_logging(verbose)


def _resolve_patterns(pattern: Optional[str], config: Config) -> list[str]:
    if pattern is None:
        return list(config.patterns)
    return [p.strip() for p in pattern.split(",") if p.strip()]


def _resolve_ignore(ignore: Optional[str], config: Config) -> IgnorePatterns:
    try:
        if ignore is None:
            return IgnorePatterns(config.ignore_patterns)
        return IgnorePatterns.parse(ignore)
    except InvalidPatternError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _wait(coordinator: Coordinator, interval: float, auto_size: bool = True) -> None:
    """Poll the coordinator until every worker has reported."""
    with console.status("[bold blue]Scanning...[/bold blue]") as status:
        while True:
            coordinator.drain_events()
            if auto_size:
                coordinator.request_sizes()
            if not coordinator.is_busy:
                break
            status.update(
                f"[bold blue]Scanning...[/bold blue] {len(coordinator)} found, "
                f"{coordinator.sized_count} sized"
            )
            time.sleep(interval)


def _scan(
    coordinator: Coordinator,
    path: str,
    patterns: list[str],
    ignore: IgnorePatterns,
    config: Config,
) -> list[DirectoryEntry]:
    coordinator.start_scan(path, patterns, ignore)
    _wait(coordinator, config.refresh_interval, auto_size=config.auto_size)

    if coordinator.scan_status == ScanStatus.FAILED:
        console.print(f"[red]Error: {coordinator.scan_error}[/red]")
        raise typer.Exit(1)

    return coordinator.snapshot()


@app.command()
def ls(
    pattern: Optional[str] = typer.Argument(
        None, help="Directory name pattern(s), comma-separated (e.g. node_modules)"
    ),
    path: str = typer.Argument(".", help="Directory to search"),
    ignore: Optional[str] = typer.Option(
        None, "--ignore", "-i", help="Comma-separated regexes of directory names to skip"
    ),
    text: bool = typer.Option(False, "--text", help="Print a table instead of the interactive UI"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Simulate deletion without deleting"),
) -> None:
    """List matching directories (interactive by default)."""
    config = load_config()
    patterns = _resolve_patterns(pattern, config)
    ignore_patterns = _resolve_ignore(ignore, config)

    if not patterns:
        console.print("[red]Error: Pattern cannot be empty[/red]")
        raise typer.Exit(1)

    if not text and sys.stdout.isatty():
        from dirkill.tui import run_tui

        run_tui(
            path,
            patterns,
            ignore_patterns,
            config=config,
            dry_run=dry_run or config.dry_run,
        )
        return

    console.print(f"[bold]Searching for {', '.join(patterns)} in {path}[/bold]")
    if len(ignore_patterns):
        console.print(f"[dim]Ignoring: {', '.join(ignore_patterns.patterns)}[/dim]")
    console.print()

    with Coordinator(size_workers=config.size_workers) as coordinator:
        entries = _scan(coordinator, path, patterns, ignore_patterns, config)

        if not entries:
            console.print(f"[yellow]No directories found matching {', '.join(patterns)}[/yellow]")
            return

        show_directories(entries, title=f"Found {len(entries)} directories")
        show_scan_summary(entries, coordinator.scan_duration, len(coordinator.scan_errors))


@app.command()
def clean(
    pattern: Optional[str] = typer.Argument(
        None, help="Directory name pattern(s), comma-separated (e.g. node_modules)"
    ),
    path: str = typer.Argument(".", help="Directory to search"),
    ignore: Optional[str] = typer.Option(
        None, "--ignore", "-i", help="Comma-separated regexes of directory names to skip"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Simulate without deleting"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompts"),
) -> None:
    """Delete every matching directory."""
    config = load_config()
    patterns = _resolve_patterns(pattern, config)
    ignore_patterns = _resolve_ignore(ignore, config)
    dry_run = dry_run or config.dry_run

    if not patterns:
        console.print("[red]Error: Pattern cannot be empty[/red]")
        raise typer.Exit(1)

    with Coordinator(size_workers=config.size_workers, dry_run=dry_run) as coordinator:
        entries = _scan(coordinator, path, patterns, ignore_patterns, config)

        if not entries:
            console.print(f"[yellow]No directories found matching {', '.join(patterns)}[/yellow]")
            raise typer.Exit(0)

        if dry_run:
            console.print("[yellow]DRY RUN - No files will be deleted[/yellow]\n")
        show_directories(entries, title="Cleanup Preview")
        console.print(f"\n[bold]Total to clean: {format_size(coordinator.total_size)}[/bold]")

        if not yes and not dry_run:
            console.print()
            if not confirm_action(f"Delete {len(entries)} directories?"):
                console.print("[yellow]Cancelled[/yellow]")
                raise typer.Exit(0)

        console.print("\n[bold]Deleting...[/bold]")
        coordinator.select_all()
        coordinator.delete_selected()
        _wait(coordinator, config.refresh_interval, auto_size=False)

        results = coordinator.snapshot()
        for entry in results:
            show_deletion_result(entry)
        show_deletion_summary(results, dry_run=dry_run)

        if any(e.deletion_status == DeletionStatus.FAILED for e in results):
            raise typer.Exit(1)


@app.command()
def config() -> None:
    """Show the effective configuration."""
    current = load_config()
    source = CONFIG_FILE if CONFIG_FILE.exists() else "defaults"
    console.print(f"[bold]Configuration[/bold] [dim]({source})[/dim]\n")
    for key, value in current.model_dump().items():
        console.print(f"  [bold]{key}[/bold]: {value}")


if __name__ == "__main__":
    app()
