"""Shared fixtures for dirkill tests."""

import time

import pytest


def _write(path, size):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)


@pytest.fixture
def make_file():
    """Create a file of ``size`` bytes, creating parent directories."""
    return _write


@pytest.fixture
def project_tree(tmp_path):
    """
    A project with nested node_modules:

        proj/node_modules/            (a.js 10, b.js 20, lib/c.js 30)
        proj/sub/node_modules/inner/node_modules/
        proj/src/
    """
    proj = tmp_path / "proj"
    _write(proj / "node_modules" / "a.js", 10)
    _write(proj / "node_modules" / "b.js", 20)
    _write(proj / "node_modules" / "lib" / "c.js", 30)
    (proj / "sub" / "node_modules" / "inner" / "node_modules").mkdir(parents=True)
    (proj / "src").mkdir()
    return proj


@pytest.fixture
def drain_until_idle():
    """Poll a coordinator the way a UI would until its workers are done."""

    def _drain(coordinator, timeout=5.0):
        changed = set()
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            changed |= coordinator.drain_events()
            if not coordinator.is_busy:
                return changed
            time.sleep(0.01)
        raise AssertionError("Coordinator did not become idle")

    return _drain
