"""Tests for display module."""

import os
from datetime import datetime, timedelta
from unittest.mock import patch

from dirkill.display import (
    clean_path,
    format_duration,
    format_last_modified,
    format_size,
    show_deletion_summary,
    show_directories,
    show_scan_summary,
    size_label,
    status_icon,
)
from dirkill.models import DeletionStatus, DirectoryEntry


def make_entry(**kwargs):
    defaults = {"path": "/p/node_modules", "matched_pattern": "node_modules"}
    defaults.update(kwargs)
    return DirectoryEntry(**defaults)


class TestFormatSize:
    def test_bytes(self):
        assert format_size(0) == "0 B"
        assert format_size(500) == "500 B"

    def test_kilobytes(self):
        assert format_size(1024) == "1.0 KB"
        assert format_size(1536) == "1.5 KB"

    def test_megabytes(self):
        assert format_size(5 * 1024 * 1024) == "5.0 MB"

    def test_gigabytes(self):
        assert format_size(3 * 1024**3) == "3.0 GB"

    def test_caps_at_gigabytes(self):
        assert format_size(2048 * 1024**3) == "2048.0 GB"


class TestFormatLastModified:
    now = datetime(2024, 6, 1, 12, 0, 0)

    def test_unknown(self):
        assert format_last_modified(None) == "Unknown"

    def test_just_now(self):
        assert format_last_modified(self.now - timedelta(seconds=30), self.now) == "Just now"

    def test_minutes_and_hours(self):
        assert format_last_modified(self.now - timedelta(minutes=1), self.now) == "1 minute ago"
        assert format_last_modified(self.now - timedelta(hours=5), self.now) == "5 hours ago"

    def test_days_and_weeks(self):
        assert format_last_modified(self.now - timedelta(days=3), self.now) == "3 days ago"
        assert format_last_modified(self.now - timedelta(days=14), self.now) == "2 weeks ago"

    def test_months_and_years(self):
        assert format_last_modified(self.now - timedelta(days=60), self.now) == "2 months ago"
        assert format_last_modified(self.now - timedelta(days=400), self.now) == "1 year ago"


class TestFormatDuration:
    def test_unknown(self):
        assert format_duration(None) == "-"

    def test_milliseconds(self):
        assert format_duration(0.25) == "250ms"

    def test_seconds(self):
        assert format_duration(12.34) == "12.3s"

    def test_minutes(self):
        assert format_duration(125) == "2m 5s"


class TestCleanPath:
    def test_path_under_cwd_is_relative(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        cwd = os.getcwd()
        assert clean_path(os.path.join(cwd, "a", "node_modules")) == "./a/node_modules"

    def test_other_paths_unchanged(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert clean_path("/elsewhere/node_modules") == "/elsewhere/node_modules"


class TestEntryLabels:
    def test_pending_size(self):
        entry = make_entry()
        assert "⧗" in status_icon(entry)
        assert "…" in size_label(entry)

    def test_known_size(self):
        entry = make_entry(size_bytes=2048)
        assert size_label(entry) == "2.0 KB"
        assert status_icon(entry) == " "

    def test_size_error(self):
        entry = make_entry(size_error="Permission denied: x")
        assert "error" in size_label(entry)
        assert "!" in status_icon(entry)

    def test_deletion_states(self):
        assert "✓" in status_icon(make_entry(deletion_status=DeletionStatus.DELETED))
        assert "✗" in status_icon(make_entry(deletion_status=DeletionStatus.FAILED))
        assert "…" in status_icon(make_entry(deletion_status=DeletionStatus.DELETING))


class TestShowFunctions:
    def test_show_directories(self):
        with patch("dirkill.display.console") as mock_console:
            show_directories([make_entry(size_bytes=10)], title="Found 1 directories")
            mock_console.print.assert_called_once()

    def test_show_scan_summary_mentions_errors(self):
        with patch("dirkill.display.console") as mock_console:
            show_scan_summary([make_entry(size_bytes=10)], duration=1.5, errors=2)
            panel = mock_console.print.call_args[0][0]
            assert "Skipped 2 unreadable directories" in panel.renderable

    def test_show_deletion_summary_dry_run(self):
        entries = [
            make_entry(size_bytes=1024, deletion_status=DeletionStatus.DELETED),
            make_entry(path="/q/node_modules", deletion_status=DeletionStatus.FAILED),
        ]
        with patch("dirkill.display.console") as mock_console:
            show_deletion_summary(entries, dry_run=True)
            printed = " ".join(str(call.args[0]) for call in mock_console.print.call_args_list if call.args)
            assert "DRY RUN" in printed
            assert "Deleted 1 directories, 1.0 KB freed" in printed
            assert "Failed: 1" in printed
