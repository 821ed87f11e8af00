"""Rich terminal display for dirkill."""

import os
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from dirkill.models import DeletionStatus, DirectoryEntry

console = Console()


def format_size(size_bytes: int) -> str:
    """Format bytes to human-readable string (binary units)."""
    units = ["B", "KB", "MB", "GB"]
    size = float(size_bytes)
    unit = 0
    while size >= 1024 and unit < len(units) - 1:
        size /= 1024
        unit += 1

    if unit == 0:
        return f"{size_bytes} B"
    return f"{size:.1f} {units[unit]}"


def _plural(count: int, unit: str) -> str:
    return f"1 {unit} ago" if count == 1 else f"{count} {unit}s ago"


def format_last_modified(when: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Relative time like "3 days ago"."""
    if when is None:
        return "Unknown"

    seconds = ((now or datetime.now()) - when).total_seconds()
    days = int(seconds // 86400)

    if days >= 365:
        return _plural(days // 365, "year")
    if days >= 30:
        return _plural(days // 30, "month")
    if days >= 7:
        return _plural(days // 7, "week")
    if days >= 1:
        return _plural(days, "day")
    if seconds >= 3600:
        return _plural(int(seconds // 3600), "hour")
    if seconds >= 60:
        return _plural(int(seconds // 60), "minute")
    return "Just now"


def format_duration(seconds: Optional[float]) -> str:
    if seconds is None:
        return "-"
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    return f"{int(seconds // 60)}m {int(seconds % 60)}s"


def clean_path(path: str) -> str:
    """Show paths under the working directory relative to it."""
    cwd = os.getcwd()
    if path.startswith(cwd + os.sep):
        return "." + path[len(cwd):]
    return path


def status_icon(entry: DirectoryEntry) -> str:
    """Icon for an entry's deletion or sizing state."""
    icons = {
        DeletionStatus.DELETING: "[yellow]…[/yellow]",
        DeletionStatus.DELETED: "[green]✓[/green]",
        DeletionStatus.FAILED: "[red]✗[/red]",
    }
    if entry.deletion_status in icons:
        return icons[entry.deletion_status]
    if entry.size_error:
        return "[red]![/red]"
    if not entry.has_size:
        return "[dim]⧗[/dim]"
    return " "


def size_label(entry: DirectoryEntry) -> str:
    if entry.has_size:
        return format_size(entry.size_bytes)
    if entry.size_error:
        return "[red]error[/red]"
    return "[dim]…[/dim]"


def show_directories(entries: list[DirectoryEntry], title: str = "Directories") -> None:
    """Display discovered directories with their sizes."""
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("", width=2)
    table.add_column("Path")
    table.add_column("Size", justify="right")
    table.add_column("Modified", justify="right", style="dim")

    for entry in entries:
        table.add_row(
            status_icon(entry),
            clean_path(entry.path),
            size_label(entry),
            format_last_modified(entry.last_modified),
        )

    console.print(table)


def show_scan_summary(
    entries: list[DirectoryEntry],
    duration: Optional[float] = None,
    errors: int = 0,
) -> None:
    """Display totals for a finished scan."""
    total = sum(e.size_bytes or 0 for e in entries)
    lines = [
        f"[bold]Found:[/bold] {len(entries)} directories",
        f"[bold]Total size:[/bold] {format_size(total)}",
    ]
    if duration is not None:
        lines.append(f"[bold]Scan time:[/bold] {format_duration(duration)}")
    if errors:
        lines.append(f"[yellow]Skipped {errors} unreadable directories[/yellow]")

    console.print(Panel("\n".join(lines), title="Summary", border_style="blue"))


def show_deletion_result(entry: DirectoryEntry) -> None:
    """Display the outcome of deleting a single directory."""
    if entry.deletion_status == DeletionStatus.DELETED:
        freed = f": {format_size(entry.size_bytes)} freed" if entry.has_size else ""
        console.print(f"  [green]✓[/green] {clean_path(entry.path)}{freed}")
    elif entry.deletion_status == DeletionStatus.FAILED:
        console.print(f"  [red]✗[/red] {clean_path(entry.path)}: {entry.deletion_error}")


def show_deletion_summary(entries: list[DirectoryEntry], dry_run: bool = False) -> None:
    """Display totals after a deletion batch."""
    deleted = [e for e in entries if e.deletion_status == DeletionStatus.DELETED]
    failed = [e for e in entries if e.deletion_status == DeletionStatus.FAILED]
    freed = sum(e.size_bytes or 0 for e in deleted)

    console.print()
    if dry_run:
        console.print("[yellow]DRY RUN complete - no files were deleted[/yellow]")
    console.print(f"[bold green]Deleted {len(deleted)} directories, {format_size(freed)} freed[/bold green]")
    if failed:
        console.print(f"[red]Failed: {len(failed)}[/red]")


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message)
