"""TUI screens for dirkill."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, DataTable, Footer, Header, Static

from dirkill.display import (
    clean_path,
    format_last_modified,
    format_size,
    size_label,
    status_icon,
)
from dirkill.models import DirectoryEntry
from dirkill.tui.widgets import EntryDetail, ScanHeader


def _row_cells(entry: DirectoryEntry) -> tuple[str, str, str, str, str]:
    checkbox = "[green]✓[/green]" if entry.selected else " "
    return (
        checkbox,
        status_icon(entry),
        clean_path(entry.path),
        size_label(entry),
        format_last_modified(entry.last_modified),
    )


_COLUMNS = ("sel", "status", "path", "size", "modified")


class MainScreen(Screen):
    """Live list of matching directories."""

    BINDINGS = [
        Binding("space", "toggle_select", "Select"),
        Binding("a", "select_all", "Select All"),
        Binding("d", "deselect_all", "Deselect All"),
        Binding("f", "delete_current", "Delete"),
        Binding("c", "delete_selected", "Delete Selected"),
        Binding("x", "clear_deleted", "Clear Deleted"),
        Binding("r", "rescan", "Rescan"),
    ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._rows: set[str] = set()

    def compose(self) -> ComposeResult:
        yield Header()

        with Container(id="main-container"):
            yield ScanHeader(id="scan-header")

            with Horizontal(id="content"):
                with Vertical(id="left-panel"):
                    yield DataTable(id="directory-table")
                    yield Static("", id="selection-info")

                with Vertical(id="right-panel"):
                    yield EntryDetail(id="entry-detail")

        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#directory-table", DataTable)
        table.cursor_type = "row"
        table.add_column("", key="sel")
        table.add_column("", key="status")
        table.add_column("Path", key="path")
        table.add_column("Size", key="size")
        table.add_column("Modified", key="modified")

        self.app.start_scan()
        self.set_interval(self.app.app_config.refresh_interval, self.poll)

    @property
    def coordinator(self):
        return self.app.coordinator

    def poll(self) -> None:
        """Fold worker events into the table; called at a fixed cadence."""
        coordinator = self.coordinator
        changed = coordinator.drain_events()
        if self.app.app_config.auto_size:
            coordinator.request_sizes()

        self._refresh_rows(changed)
        self.query_one("#scan-header", ScanHeader).update_from(coordinator, self.app.dry_run)
        self._update_selection_info()

        current = self._current_path()
        if current is not None and current in changed:
            self._show_detail(current)

    def _refresh_rows(self, paths: set[str]) -> None:
        if not paths:
            return
        table = self.query_one("#directory-table", DataTable)

        # New rows go in discovery order
        for path in self.coordinator.paths:
            if path not in paths:
                continue
            entry = self.coordinator.get(path)
            cells = _row_cells(entry)
            if path in self._rows:
                for column, value in zip(_COLUMNS, cells):
                    table.update_cell(path, column, value)
            else:
                table.add_row(*cells, key=path)
                self._rows.add(path)

    def _current_path(self) -> str | None:
        table = self.query_one("#directory-table", DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key(table.cursor_coordinate).row_key
        return str(row_key.value)

    def _show_detail(self, path: str | None) -> None:
        entry = self.coordinator.get(path) if path is not None else None
        self.query_one("#entry-detail", EntryDetail).show_entry(entry)

    def _update_selection_info(self) -> None:
        info = self.query_one("#selection-info", Static)
        count = self.coordinator.selected_count
        if not count:
            info.update("[dim]No directories selected[/dim]")
            return
        size = format_size(self.coordinator.selected_size)
        info.update(f"[bold]{count}[/bold] selected: [cyan]{size}[/cyan]")

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if event.row_key is None:
            return
        self._show_detail(str(event.row_key.value))

    def action_toggle_select(self) -> None:
        path = self._current_path()
        if path is not None and self.coordinator.toggle_selection(path):
            self._refresh_rows({path})
            self._update_selection_info()

    def action_select_all(self) -> None:
        self._refresh_rows(self.coordinator.select_all())
        self._update_selection_info()

    def action_deselect_all(self) -> None:
        self._refresh_rows(self.coordinator.deselect_all())
        self._update_selection_info()

    def action_delete_current(self) -> None:
        path = self._current_path()
        if path is not None and self.coordinator.delete_one(path):
            self._refresh_rows({path})
            self._show_detail(path)

    def action_delete_selected(self) -> None:
        coordinator = self.coordinator
        if not coordinator.selected_count:
            self.notify("No directories selected", severity="warning")
            return

        def on_confirm(confirmed: bool) -> None:
            if not confirmed:
                return
            started = coordinator.delete_selected()
            self._refresh_rows(set(started))
            self._update_selection_info()
            self.notify(f"Deleting {len(started)} directories")

        self.app.push_screen(
            ConfirmDeleteScreen(coordinator.selected_count, coordinator.selected_size),
            on_confirm,
        )

    def action_clear_deleted(self) -> None:
        table = self.query_one("#directory-table", DataTable)
        for path in self.coordinator.acknowledge_deleted():
            table.remove_row(path)
            self._rows.discard(path)

    def action_rescan(self) -> None:
        table = self.query_one("#directory-table", DataTable)
        table.clear()
        self._rows.clear()
        self.app.start_scan()
        self._show_detail(None)
        self.notify("Rescanning...", timeout=2)


class ConfirmDeleteScreen(ModalScreen[bool]):
    """Confirmation before deleting the selected directories."""

    BINDINGS = [
        Binding("y", "confirm", "Yes, Delete"),
        Binding("n", "cancel", "Cancel"),
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, count: int, size_bytes: int):
        super().__init__()
        self.count = count
        self.size_bytes = size_bytes

    def compose(self) -> ComposeResult:
        with Container(id="confirm-container"):
            yield Static(
                f"[bold]Delete {self.count} directories?[/bold]\n"
                f"Total size: [cyan]{format_size(self.size_bytes)}[/cyan]",
                id="confirm-message",
            )
            if self.app.dry_run:
                yield Static("[yellow]DRY RUN - No files will be deleted[/yellow]")
            with Horizontal(id="confirm-buttons"):
                yield Button("Delete", variant="error", id="btn-delete")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-delete":
            self.action_confirm()
        else:
            self.action_cancel()

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
