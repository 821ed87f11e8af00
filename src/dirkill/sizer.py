"""Directory size calculation for dirkill."""

import logging
import os
from pathlib import Path
from typing import Generator

from dirkill.errors import describe_os_error
from dirkill.models import SizeComputed, SizeError, SizeEvent

log = logging.getLogger(__name__)


def get_directory_size(path: str | Path) -> tuple[int, int]:
    """
    Sum the sizes of all regular files under a directory.

    Symlinks are counted neither as files nor followed as directories.
    Subdirectories that can't be read contribute nothing.

    Args:
        path: Directory to measure

    Returns:
        Tuple of (total_bytes, file_count)

    Raises:
        OSError: If ``path`` itself cannot be listed
    """
    root = str(path)
    total_size = 0
    file_count = 0
    stack = [root]

    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            total_size += entry.stat(follow_symlinks=False).st_size
                            file_count += 1
                        elif entry.is_dir(follow_symlinks=False):
                            stack.append(entry.path)
                    except OSError:
                        continue
        except OSError:
            if current == root:
                raise
            continue

    return total_size, file_count


def compute_size(path: str | Path) -> Generator[SizeEvent, None, None]:
    """
    Measure a directory and report the outcome as exactly one event.

    Args:
        path: Directory to measure

    Yields:
        SizeComputed with the total, or SizeError if the directory itself
        could not be read
    """
    path_str = str(path)
    try:
        size, files = get_directory_size(path_str)
    except OSError as e:
        log.debug("Size of %s failed: %s", path_str, e)
        yield SizeError(path=path_str, message=describe_os_error(e))
        return

    log.debug("Size of %s: %d bytes in %d files", path_str, size, files)
    yield SizeComputed(path=path_str, size_bytes=size, file_count=files)
