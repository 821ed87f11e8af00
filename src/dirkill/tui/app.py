"""Main TUI application for dirkill."""

from pathlib import Path
from typing import Optional

from textual.app import App
from textual.binding import Binding

from dirkill.config import Config
from dirkill.coordinator import Coordinator
from dirkill.matcher import IgnorePatterns
from dirkill.tui.screens import MainScreen


class DirKillApp(App):
    """Interactive directory finder and remover."""

    TITLE = "dirkill"
    SUB_TITLE = "Find and delete directories"

    CSS_PATH = "styles.tcss"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("?", "help", "Help"),
        Binding("escape", "back", "Back", show=False),
    ]

    SCREENS = {
        "main": MainScreen,
    }

    def __init__(
        self,
        root: str | Path,
        patterns: list[str],
        ignore_patterns: IgnorePatterns,
        app_config: Optional[Config] = None,
        dry_run: bool = False,
    ):
        super().__init__()
        self.scan_root = str(root)
        self.patterns = patterns
        self.ignore_patterns = ignore_patterns
        self.app_config = app_config or Config()
        self.dry_run = dry_run
        self.coordinator = Coordinator(size_workers=self.app_config.size_workers, dry_run=dry_run)

    def on_mount(self) -> None:
        self.push_screen("main")

    def on_unmount(self) -> None:
        self.coordinator.shutdown()

    def start_scan(self) -> None:
        self.coordinator.start_scan(self.scan_root, self.patterns, self.ignore_patterns)

    def action_back(self) -> None:
        if len(self.screen_stack) > 2:
            self.pop_screen()

    def action_help(self) -> None:
        self.notify(
            "Space select, A select all, D deselect all, F delete current, "
            "C delete selected, X clear deleted, R rescan",
            title="Help",
            timeout=5,
        )


def run_tui(
    root: str | Path,
    patterns: list[str],
    ignore_patterns: IgnorePatterns,
    config: Optional[Config] = None,
    dry_run: bool = False,
) -> None:
    """Run the interactive TUI.

    Args:
        root: Directory to scan
        patterns: Directory name patterns to look for
        ignore_patterns: Directory names never to enter
        config: Loaded configuration
        dry_run: If True, don't actually delete anything
    """
    app = DirKillApp(root, patterns, ignore_patterns, app_config=config, dry_run=dry_run)
    app.run()
