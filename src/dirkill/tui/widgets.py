"""Custom widgets for the dirkill TUI."""

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from dirkill.coordinator import Coordinator
from dirkill.display import (
    clean_path,
    format_duration,
    format_last_modified,
    format_size,
)
from dirkill.models import DeletionStatus, DirectoryEntry, ScanStatus


class ScanHeader(Static):
    """Search parameters and live scan progress."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.coordinator: Coordinator | None = None
        self.dry_run = False

    def update_from(self, coordinator: Coordinator, dry_run: bool = False) -> None:
        self.coordinator = coordinator
        self.dry_run = dry_run
        self.refresh()

    def render(self) -> str:
        co = self.coordinator
        if co is None or co.root is None:
            return "[dim]Ready[/dim]"

        if co.scan_status == ScanStatus.SCANNING:
            status = f"[yellow]Scanning... {len(co)} found[/yellow]"
        elif co.scan_status == ScanStatus.FAILED:
            status = f"[red]Error: {co.scan_error}[/red]"
        else:
            status = f"[green]Done: {len(co)} found[/green]"

        lines = [
            f"[bold]Pattern:[/bold] [cyan]{', '.join(co.patterns)}[/cyan] "
            f"[bold]in[/bold] [cyan]{co.root}[/cyan]",
            f"{status}  [dim]Scan time: {format_duration(co.scan_duration)}[/dim]",
            f"[bold]Total size:[/bold] {format_size(co.total_size)} "
            f"[dim]({co.sized_count}/{len(co)} calculated)[/dim]",
        ]
        if co.scan_errors:
            lines[1] += f"  [yellow]{len(co.scan_errors)} unreadable[/yellow]"
        if self.dry_run:
            lines.append("[yellow]DRY RUN - No files will be deleted[/yellow]")
        return "\n".join(lines)


class EntryDetail(VerticalScroll):
    """Panel showing everything known about the highlighted directory."""

    def compose(self) -> ComposeResult:
        yield Static("Select a directory to see details", id="detail-content")

    def show_entry(self, entry: DirectoryEntry | None) -> None:
        if entry is None:
            self._update_content("[dim]No directory selected[/dim]")
            return

        if entry.has_size:
            size = f"{format_size(entry.size_bytes)} ({entry.file_count} files)"
        elif entry.size_error:
            size = f"[red]{entry.size_error}[/red]"
        else:
            size = "[dim]calculating...[/dim]"

        status_color = {
            DeletionStatus.NORMAL: "white",
            DeletionStatus.DELETING: "yellow",
            DeletionStatus.DELETED: "green",
            DeletionStatus.FAILED: "red",
        }[entry.deletion_status]

        content_parts = [
            f"[bold]{clean_path(entry.path)}[/bold]",
            "",
            f"[bold cyan]Pattern[/bold cyan]  {entry.matched_pattern}",
            f"[bold cyan]Size[/bold cyan]     {size}",
            f"[bold cyan]Modified[/bold cyan] {format_last_modified(entry.last_modified)}",
            f"[bold cyan]Status[/bold cyan]   "
            f"[{status_color}]{entry.deletion_status.value}[/{status_color}]",
        ]
        if entry.deletion_error:
            content_parts.append("")
            content_parts.append(f"[bold red]Error[/bold red]\n{entry.deletion_error}")

        self._update_content("\n".join(content_parts))

    def _update_content(self, content: str) -> None:
        detail = self.query_one("#detail-content", Static)
        detail.update(content)
