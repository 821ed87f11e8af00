"""Data models for dirkill."""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class DeletionStatus(str, Enum):
    """Lifecycle of a directory deletion."""

    NORMAL = "normal"
    DELETING = "deleting"
    DELETED = "deleted"
    FAILED = "failed"

    def can_transition_to(self, target: "DeletionStatus") -> bool:
        """Whether moving to ``target`` keeps the lifecycle moving forward."""
        return target in _DELETION_TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return self in (DeletionStatus.DELETED, DeletionStatus.FAILED)


_DELETION_TRANSITIONS = {
    DeletionStatus.NORMAL: frozenset({DeletionStatus.DELETING}),
    DeletionStatus.DELETING: frozenset({DeletionStatus.DELETED, DeletionStatus.FAILED}),
    DeletionStatus.DELETED: frozenset(),
    DeletionStatus.FAILED: frozenset(),
}


class ScanStatus(str, Enum):
    """State of the current scan session."""

    IDLE = "idle"
    SCANNING = "scanning"
    COMPLETE = "complete"
    FAILED = "failed"  # Root could not be read


class DirectoryEntry(BaseModel):
    """A discovered directory and everything known about it so far."""

    path: str = Field(..., description="Absolute path, unique within a scan")
    matched_pattern: str = Field(..., description="Pattern that matched the directory name")
    size_bytes: Optional[int] = Field(None, ge=0, description="Total size, absent until computed")
    file_count: Optional[int] = Field(None, ge=0, description="Number of files, set with size")
    size_error: Optional[str] = Field(None, description="Error message if sizing failed")
    last_modified: Optional[datetime] = Field(
        None, description="Modification time of the directory containing the match"
    )
    selected: bool = Field(False, description="Whether the entry is marked for deletion")
    deletion_status: DeletionStatus = Field(DeletionStatus.NORMAL, description="Deletion state")
    deletion_error: Optional[str] = Field(None, description="Error message if deletion failed")

    @property
    def has_size(self) -> bool:
        return self.size_bytes is not None

    @property
    def is_selectable(self) -> bool:
        """Only entries that a deletion could still start on can be selected."""
        return self.deletion_status == DeletionStatus.NORMAL


# =============================================================================
# Events
#
# Workers never touch DirectoryEntry; they emit these and the Coordinator
# applies them.
# =============================================================================


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class DirectoryFound(_Event):
    kind: Literal["found"] = "found"
    path: str
    matched_pattern: str
    last_modified: Optional[datetime] = None


class ScanCompleted(_Event):
    kind: Literal["completed"] = "completed"
    cancelled: bool = False


class ScanError(_Event):
    """Traversal error. ``fatal`` errors end the scan with no ScanCompleted."""

    kind: Literal["scan_error"] = "scan_error"
    path: str
    message: str
    fatal: bool = False


class SizeComputed(_Event):
    kind: Literal["size_computed"] = "size_computed"
    path: str
    size_bytes: int = Field(..., ge=0)
    file_count: int = Field(0, ge=0)


class SizeError(_Event):
    kind: Literal["size_error"] = "size_error"
    path: str
    message: str


class DeleteStarted(_Event):
    kind: Literal["delete_started"] = "delete_started"
    path: str


class DeleteSucceeded(_Event):
    kind: Literal["delete_succeeded"] = "delete_succeeded"
    path: str


class DeleteFailed(_Event):
    kind: Literal["delete_failed"] = "delete_failed"
    path: str
    message: str


ScanEvent = Union[DirectoryFound, ScanCompleted, ScanError]
SizeEvent = Union[SizeComputed, SizeError]
DeleteEvent = Union[DeleteStarted, DeleteSucceeded, DeleteFailed]
Event = Union[ScanEvent, SizeEvent, DeleteEvent]
