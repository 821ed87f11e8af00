"""Owner of scan results and the workers that produce them.

Scanning, sizing and deletion run on background threads. They never touch
the entry map: each worker puts ``(generation, event)`` pairs on a single
queue, and only ``drain_events`` applies them. The consumer (a TUI frame
loop, the CLI, a test) calls every public method from one thread and
``drain_events`` never blocks.
"""

import logging
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Optional

from dirkill.cleaner import delete
from dirkill.matcher import IgnorePatterns
from dirkill.models import (
    DeleteFailed,
    DeleteStarted,
    DeleteSucceeded,
    DeletionStatus,
    DirectoryEntry,
    DirectoryFound,
    Event,
    ScanCompleted,
    ScanError,
    ScanStatus,
    SizeComputed,
    SizeError,
)
from dirkill.scanner import scan
from dirkill.sizer import compute_size

log = logging.getLogger(__name__)


class Coordinator:
    """Discovered directories plus their size, selection and deletion state."""

    def __init__(self, size_workers: int = 4, dry_run: bool = False):
        self.dry_run = dry_run
        self._events: queue.SimpleQueue[tuple[int, Event]] = queue.SimpleQueue()
        self._entries: dict[str, DirectoryEntry] = {}
        self._sizing: set[str] = set()
        self._size_pool = ThreadPoolExecutor(
            max_workers=size_workers, thread_name_prefix="dirkill-size"
        )
        self._generation = 0
        self._cancel: Optional[threading.Event] = None
        self._closed = False

        self.root: Optional[str] = None
        self.patterns: list[str] = []
        self.scan_status = ScanStatus.IDLE
        self.scan_error: Optional[str] = None
        self.scan_errors: list[ScanError] = []
        self._scan_started: Optional[float] = None
        self._scan_finished: Optional[float] = None

    # -------------------------------------------------------------------------
    # Scanning
    # -------------------------------------------------------------------------

    @property
    def generation(self) -> int:
        return self._generation

    def start_scan(
        self,
        root: str | Path,
        patterns: Iterable[str],
        ignore_patterns: IgnorePatterns | Iterable[str] | None = None,
    ) -> int:
        """
        Start a new scan session, discarding the previous one.

        Args:
            root: Directory to scan
            patterns: Target name patterns
            ignore_patterns: Ignore regexes, compiled before anything starts

        Returns:
            The new session's generation

        Raises:
            InvalidPatternError: If an ignore pattern doesn't compile
            RuntimeError: If the coordinator has been shut down
        """
        if self._closed:
            raise RuntimeError("Coordinator has been shut down")

        if not isinstance(ignore_patterns, IgnorePatterns):
            ignore_patterns = IgnorePatterns(ignore_patterns or ())
        patterns = list(patterns)

        if self._cancel is not None:
            self._cancel.set()

        self._generation += 1
        generation = self._generation
        self._entries.clear()
        self._sizing.clear()

        self.root = str(root)
        self.patterns = patterns
        self.scan_status = ScanStatus.SCANNING
        self.scan_error = None
        self.scan_errors = []
        self._scan_started = time.monotonic()
        self._scan_finished = None

        cancel = threading.Event()
        self._cancel = cancel
        thread = threading.Thread(
            target=self._run_scan,
            args=(generation, root, patterns, ignore_patterns, cancel),
            name=f"dirkill-scan-{generation}",
            daemon=True,
        )
        thread.start()
        log.debug("Started scan generation %d of %s", generation, root)
        return generation

    def _run_scan(self, generation, root, patterns, ignore_patterns, cancel) -> None:
        try:
            for event in scan(root, patterns, ignore_patterns, cancel):
                self._events.put((generation, event))
        except Exception as e:
            log.exception("Scanner for %s crashed", root)
            self._events.put(
                (generation, ScanError(path=str(root), message=str(e), fatal=True))
            )

    @property
    def is_scanning(self) -> bool:
        return self.scan_status == ScanStatus.SCANNING

    @property
    def scan_duration(self) -> Optional[float]:
        """Seconds spent scanning so far, or in total once finished."""
        if self._scan_started is None:
            return None
        end = self._scan_finished if self._scan_finished is not None else time.monotonic()
        return end - self._scan_started

    # -------------------------------------------------------------------------
    # Sizing
    # -------------------------------------------------------------------------

    def request_size(self, path: str) -> bool:
        """
        Start computing the size of an entry.

        No-op if the size is already known or a computation is in flight.

        Returns:
            True if a computation was started
        """
        entry = self._entries.get(path)
        if entry is None or entry.has_size or path in self._sizing:
            return False
        if entry.deletion_status == DeletionStatus.DELETED or self._closed:
            return False

        self._sizing.add(path)
        entry.size_error = None
        self._size_pool.submit(self._run_size, self._generation, path)
        return True

    def request_sizes(self, paths: Iterable[str] | None = None) -> list[str]:
        """Request sizes for ``paths``, or every entry still waiting for one."""
        if paths is None:
            paths = self.pending_sizes
        return [path for path in paths if self.request_size(path)]

    @property
    def pending_sizes(self) -> list[str]:
        """Entries with no size, no computation in flight and no prior failure."""
        return [
            path
            for path, entry in self._entries.items()
            if not entry.has_size
            and entry.size_error is None
            and path not in self._sizing
            and entry.deletion_status != DeletionStatus.DELETED
        ]

    def _run_size(self, generation: int, path: str) -> None:
        try:
            for event in compute_size(path):
                self._events.put((generation, event))
        except Exception as e:
            log.exception("Size computation for %s crashed", path)
            self._events.put((generation, SizeError(path=path, message=str(e))))

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def toggle_selection(self, path: str) -> bool:
        """
        Flip the selection of an entry.

        Returns:
            True if the entry's selection changed
        """
        entry = self._entries.get(path)
        if entry is None or not entry.is_selectable:
            return False
        entry.selected = not entry.selected
        return True

    def select_all(self) -> set[str]:
        """Select every selectable entry and return the paths that changed."""
        changed = set()
        for path, entry in self._entries.items():
            if entry.is_selectable and not entry.selected:
                entry.selected = True
                changed.add(path)
        return changed

    def deselect_all(self) -> set[str]:
        changed = set()
        for path, entry in self._entries.items():
            if entry.selected:
                entry.selected = False
                changed.add(path)
        return changed

    # -------------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------------

    def delete_one(self, path: str) -> bool:
        """
        Start deleting a single entry.

        Returns:
            True if a deletion was started
        """
        return bool(self._start_deletion([path]))

    def delete_selected(self) -> list[str]:
        """Start one deletion batch over every selected entry."""
        return self._start_deletion([p for p, e in self._entries.items() if e.selected])

    def _start_deletion(self, paths: list[str]) -> list[str]:
        batch = []
        for path in paths:
            entry = self._entries.get(path)
            if entry is None:
                continue
            entry.selected = False
            if not entry.deletion_status.can_transition_to(DeletionStatus.DELETING):
                continue
            entry.deletion_status = DeletionStatus.DELETING
            batch.append(path)

        if not batch:
            return []

        thread = threading.Thread(
            target=self._run_delete,
            args=(self._generation, batch),
            name="dirkill-delete",
            daemon=True,
        )
        thread.start()
        log.debug("Started deletion of %d directories", len(batch))
        return batch

    def _run_delete(self, generation: int, paths: list[str]) -> None:
        pending = list(paths)
        try:
            for event in delete(paths, dry_run=self.dry_run):
                self._events.put((generation, event))
                if not isinstance(event, DeleteStarted):
                    pending.remove(event.path)
        except Exception as e:
            log.exception("Deletion batch crashed")
            for path in pending:
                self._events.put((generation, DeleteFailed(path=path, message=str(e))))

    def acknowledge_deleted(self, paths: Iterable[str] | None = None) -> list[str]:
        """
        Remove deleted entries from the visible list.

        Args:
            paths: Entries to acknowledge, or all deleted entries if None

        Returns:
            The paths that were removed
        """
        candidates = list(self._entries) if paths is None else list(paths)
        removed = []
        for path in candidates:
            entry = self._entries.get(path)
            if entry is not None and entry.deletion_status == DeletionStatus.DELETED:
                del self._entries[path]
                removed.append(path)
        return removed

    # -------------------------------------------------------------------------
    # Event application
    # -------------------------------------------------------------------------

    def drain_events(self, limit: int | None = None) -> set[str]:
        """
        Apply every event already delivered by the workers, without waiting.

        Args:
            limit: Optional cap on how many events to apply in this call

        Returns:
            Paths of entries that were added or changed
        """
        changed: set[str] = set()
        processed = 0

        while limit is None or processed < limit:
            try:
                generation, event = self._events.get_nowait()
            except queue.Empty:
                break
            processed += 1

            if generation != self._generation:
                log.debug("Discarding %s from stale generation %d", event.kind, generation)
                continue

            path = self._apply(event)
            if path is not None:
                changed.add(path)

        return changed

    def _apply(self, event: Event) -> Optional[str]:
        if isinstance(event, DirectoryFound):
            if event.path in self._entries:
                return None
            self._entries[event.path] = DirectoryEntry(
                path=event.path,
                matched_pattern=event.matched_pattern,
                last_modified=event.last_modified,
            )
            return event.path

        if isinstance(event, ScanCompleted):
            self.scan_status = ScanStatus.COMPLETE
            self._scan_finished = time.monotonic()
            return None

        if isinstance(event, ScanError):
            if event.fatal:
                self.scan_status = ScanStatus.FAILED
                self.scan_error = event.message
                self._scan_finished = time.monotonic()
            else:
                self.scan_errors.append(event)
            return None

        if isinstance(event, SizeComputed):
            self._sizing.discard(event.path)
            entry = self._entries.get(event.path)
            if entry is None or entry.has_size or entry.deletion_status == DeletionStatus.DELETED:
                return None
            entry.size_bytes = event.size_bytes
            entry.file_count = event.file_count
            entry.size_error = None
            return event.path

        if isinstance(event, SizeError):
            self._sizing.discard(event.path)
            entry = self._entries.get(event.path)
            if entry is None or entry.has_size or entry.deletion_status == DeletionStatus.DELETED:
                return None
            entry.size_error = event.message
            return event.path

        if isinstance(event, DeleteStarted):
            return self._transition(event.path, DeletionStatus.DELETING)

        if isinstance(event, DeleteSucceeded):
            return self._transition(event.path, DeletionStatus.DELETED)

        if isinstance(event, DeleteFailed):
            return self._transition(event.path, DeletionStatus.FAILED, event.message)

        return None

    def _transition(
        self, path: str, status: DeletionStatus, error: Optional[str] = None
    ) -> Optional[str]:
        entry = self._entries.get(path)
        if entry is None or not entry.deletion_status.can_transition_to(status):
            return None
        entry.deletion_status = status
        entry.deletion_error = error
        if status == DeletionStatus.DELETED:
            entry.selected = False
        return path

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    def snapshot(self) -> list[DirectoryEntry]:
        """Copies of all entries in discovery order."""
        return [entry.model_copy() for entry in self._entries.values()]

    def get(self, path: str) -> Optional[DirectoryEntry]:
        entry = self._entries.get(path)
        return entry.model_copy() if entry is not None else None

    @property
    def paths(self) -> list[str]:
        """Entry paths in discovery order."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    @property
    def selected_count(self) -> int:
        return sum(1 for e in self._entries.values() if e.selected)

    @property
    def selected_size(self) -> int:
        return sum(e.size_bytes or 0 for e in self._entries.values() if e.selected)

    @property
    def total_size(self) -> int:
        return sum(e.size_bytes or 0 for e in self._entries.values())

    @property
    def sized_count(self) -> int:
        return sum(1 for e in self._entries.values() if e.has_size)

    @property
    def is_busy(self) -> bool:
        """Whether any worker of the current generation may still report."""
        return (
            self.is_scanning
            or bool(self._sizing)
            or any(e.deletion_status == DeletionStatus.DELETING for e in self._entries.values())
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def shutdown(self) -> None:
        """Cancel the live scan and stop accepting size work."""
        if self._closed:
            return
        self._closed = True
        if self._cancel is not None:
            self._cancel.set()
        self._size_pool.shutdown(wait=False, cancel_futures=True)
        # Cancelled jobs never report back
        self._sizing.clear()

    def __enter__(self) -> "Coordinator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()
