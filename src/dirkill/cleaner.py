"""Deletion of discovered directories with safety checks."""

import logging
import os
import shutil
from pathlib import Path
from typing import Generator, Iterable

from dirkill.errors import describe_os_error
from dirkill.models import DeleteEvent, DeleteFailed, DeleteStarted, DeleteSucceeded

log = logging.getLogger(__name__)


def is_path_safe(path: Path) -> bool:
    """
    Check if a path is safe to delete.

    The filesystem root and the home directory are never deleted.

    Args:
        path: Path to check

    Returns:
        True if safe to delete, False otherwise
    """
    absolute = Path(os.path.abspath(path))

    if absolute.parent == absolute:
        return False

    if absolute == Path(os.path.abspath(Path.home())):
        return False

    return True


def delete_path(path: Path, dry_run: bool = False) -> str | None:
    """
    Delete a path (directory, file or symlink).

    A path that does not exist counts as already deleted.

    Args:
        path: Path to delete
        dry_run: If True, don't actually delete

    Returns:
        Error message, or None on success
    """
    if not os.path.lexists(path):
        return None

    if not is_path_safe(path):
        return f"Refusing to delete protected path: {path}"

    if dry_run:
        return None

    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as e:
        return describe_os_error(e)

    return None


def delete(
    paths: Iterable[str | Path],
    dry_run: bool = False,
) -> Generator[DeleteEvent, None, None]:
    """
    Delete each path in turn, reporting a Started/terminal pair per path.

    A failure on one path does not stop the rest of the batch.

    Args:
        paths: Paths to delete
        dry_run: If True, report success without deleting

    Yields:
        DeleteStarted, then DeleteSucceeded or DeleteFailed, for every path
    """
    for path in paths:
        path_str = str(path)
        yield DeleteStarted(path=path_str)

        error = delete_path(Path(path_str), dry_run=dry_run)
        if error:
            log.warning("Failed to delete %s: %s", path_str, error)
            yield DeleteFailed(path=path_str, message=error)
        else:
            log.debug("Deleted %s%s", path_str, " (dry run)" if dry_run else "")
            yield DeleteSucceeded(path=path_str)
