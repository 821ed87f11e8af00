"""Discovery of directories matching name patterns.

This module walks a directory tree and streams a DirectoryFound event for
every directory whose name matches (like node_modules, .venv, target).
A matched directory is never entered, so nested matches such as a
node_modules inside another node_modules are not reported.
"""

import logging
import os
import threading
from datetime import datetime
from pathlib import Path
from typing import Generator, Iterable, Optional

from dirkill.errors import describe_os_error
from dirkill.matcher import IgnorePatterns, PatternMatcher
from dirkill.models import DirectoryFound, ScanCompleted, ScanError, ScanEvent

log = logging.getLogger(__name__)


def expand_path(path: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))


def _last_modified(path: str) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(os.stat(path).st_mtime)
    except OSError:
        return None


def scan(
    root: str | Path,
    patterns: Iterable[str],
    ignore_patterns: IgnorePatterns | Iterable[str] | None = None,
    cancel: threading.Event | None = None,
) -> Generator[ScanEvent, None, None]:
    """
    Walk ``root`` and stream discovery events.

    Uses os.scandir with an explicit stack instead of recursion, so deep
    trees cannot exhaust the interpreter's recursion limit.

    Args:
        root: Directory to start searching from
        patterns: Target name patterns (case-insensitive substrings)
        ignore_patterns: Regular expressions for directory names to skip
        cancel: Optional event; once set the scan stops at the next
            directory boundary

    Yields:
        DirectoryFound for each match, ScanError for each unreadable
        subdirectory, then ScanCompleted. A root that cannot be read yields
        a single fatal ScanError and nothing else.
    """
    matcher = PatternMatcher(patterns, ignore_patterns)
    root_path = os.path.abspath(expand_path(str(root)))

    if matcher.is_empty:
        yield ScanCompleted()
        return

    if not os.path.exists(root_path):
        yield ScanError(path=root_path, message=f"Path '{root}' does not exist", fatal=True)
        return
    if not os.path.isdir(root_path):
        yield ScanError(path=root_path, message=f"Path '{root}' is not a directory", fatal=True)
        return

    log.debug("Scanning %s for %s (ignore: %s)", root_path, matcher.patterns, matcher.ignore)
    found = 0
    stack = [root_path]

    while stack:
        if cancel is not None and cancel.is_set():
            log.debug("Scan of %s cancelled after %d matches", root_path, found)
            yield ScanCompleted(cancelled=True)
            return

        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            if current == root_path:
                yield ScanError(path=current, message=describe_os_error(e), fatal=True)
                return
            # Unreadable subtree, keep going with the rest
            yield ScanError(path=current, message=describe_os_error(e))
            continue

        parent_mtime: Optional[datetime] = None
        subdirs = []
        for entry in entries:
            try:
                # Symlinked directories are never followed
                if not entry.is_dir(follow_symlinks=False):
                    continue
            except OSError:
                continue

            result = matcher.match(entry.name)
            if result.ignored:
                continue

            if result.matched:
                if cancel is not None and cancel.is_set():
                    break
                if parent_mtime is None:
                    parent_mtime = _last_modified(current)
                found += 1
                yield DirectoryFound(
                    path=entry.path,
                    matched_pattern=result.pattern,
                    last_modified=parent_mtime,
                )
                # Don't recurse into the match
                continue

            subdirs.append(entry.path)

        # Reversed so children pop in name order
        stack.extend(reversed(subdirs))

    if cancel is not None and cancel.is_set():
        log.debug("Scan of %s cancelled after %d matches", root_path, found)
        yield ScanCompleted(cancelled=True)
        return

    log.debug("Scan of %s complete: %d matches", root_path, found)
    yield ScanCompleted()
