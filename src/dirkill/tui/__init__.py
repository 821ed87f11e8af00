"""Interactive terminal UI for dirkill."""

from dirkill.tui.app import DirKillApp, run_tui

__all__ = ["DirKillApp", "run_tui"]
