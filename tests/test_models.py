"""Tests for data models."""

import pytest
from pydantic import ValidationError

from dirkill.models import (
    DeletionStatus,
    DirectoryEntry,
    DirectoryFound,
    ScanCompleted,
    SizeComputed,
)


class TestDeletionStatus:
    def test_forward_transitions(self):
        assert DeletionStatus.NORMAL.can_transition_to(DeletionStatus.DELETING)
        assert DeletionStatus.DELETING.can_transition_to(DeletionStatus.DELETED)
        assert DeletionStatus.DELETING.can_transition_to(DeletionStatus.FAILED)

    def test_no_skipping_deleting(self):
        assert not DeletionStatus.NORMAL.can_transition_to(DeletionStatus.DELETED)
        assert not DeletionStatus.NORMAL.can_transition_to(DeletionStatus.FAILED)

    def test_terminal_states_are_final(self):
        for status in DeletionStatus:
            assert not DeletionStatus.DELETED.can_transition_to(status)
            assert not DeletionStatus.FAILED.can_transition_to(status)

    def test_is_terminal(self):
        assert DeletionStatus.DELETED.is_terminal
        assert DeletionStatus.FAILED.is_terminal
        assert not DeletionStatus.NORMAL.is_terminal
        assert not DeletionStatus.DELETING.is_terminal


class TestDirectoryEntry:
    def test_defaults(self):
        entry = DirectoryEntry(path="/p/node_modules", matched_pattern="node_modules")
        assert entry.size_bytes is None
        assert not entry.has_size
        assert not entry.selected
        assert entry.deletion_status == DeletionStatus.NORMAL
        assert entry.is_selectable

    def test_zero_size_is_known(self):
        entry = DirectoryEntry(path="/p/x", matched_pattern="x", size_bytes=0)
        assert entry.has_size

    def test_deleting_entry_not_selectable(self):
        entry = DirectoryEntry(
            path="/p/x", matched_pattern="x", deletion_status=DeletionStatus.DELETING
        )
        assert not entry.is_selectable

    def test_failed_entry_not_selectable(self):
        entry = DirectoryEntry(
            path="/p/x",
            matched_pattern="x",
            deletion_status=DeletionStatus.FAILED,
            deletion_error="Permission denied: x",
        )
        assert not entry.is_selectable

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            DirectoryEntry(path="/p/x", matched_pattern="x", size_bytes=-1)


class TestEvents:
    def test_events_are_frozen(self):
        event = DirectoryFound(path="/p/node_modules", matched_pattern="node_modules")
        with pytest.raises(ValidationError):
            event.path = "/other"

    def test_kind_discriminator(self):
        assert ScanCompleted().kind == "completed"
        assert SizeComputed(path="/p", size_bytes=1).kind == "size_computed"

    def test_events_compare_by_value(self):
        assert ScanCompleted(cancelled=True) == ScanCompleted(cancelled=True)
        assert ScanCompleted() != ScanCompleted(cancelled=True)
