"""Discovery of the project root used to display file paths."""

from __future__ import annotations

from pathlib import Path

# Files or directories whose presence marks a project root.
ROOT_MARKERS = [".git", ".hg", ".svn", "pyproject.toml", "package.json", "Cargo.toml", "go.mod"]


def find_project_root(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a directory containing one of
    `ROOT_MARKERS`. Returns the first such directory, or `None`.
    """
    current = start_dir.resolve()
    while True:
        if any((current / marker).exists() for marker in ROOT_MARKERS):
            return current
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None
