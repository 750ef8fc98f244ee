"""
FileResolver — main entry point for file discovery.

Resolves a mix of files and directories into a flat list of concrete file paths,
in entry order, recursing into directories in sorted-by-name order and pruning
hidden entries at every depth.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Sequence
from pathlib import Path

import pathspec

from llmpack.file_resolver.gitignore import load_gitignore, load_tool_ignore
from llmpack.file_resolver.types import FileResolverConfig

HIDDEN_PREFIX = "."


def is_hidden(name: str) -> bool:
    """A file or directory name is hidden if it starts with a dot."""
    return name.startswith(HIDDEN_PREFIX)


class FileResolver:
    """
    Expands entry points into files. Directories are walked depth-first with
    children in name order; a subdirectory's files appear at the subdirectory's
    position in its parent listing. Files named directly are always included,
    hidden or not.

    No deduplication is done: a file reachable from two entry points appears twice.
    """

    def __init__(self, config: FileResolverConfig | None = None) -> None:
        self._config: FileResolverConfig = config or FileResolverConfig()
        self._exclude_spec: pathspec.PathSpec | None = (
            pathspec.GitIgnoreSpec.from_lines(self._config.effective_exclude)
            if self._config.effective_exclude
            else None
        )
        # Cache gitignore specs per directory to avoid re-reading from disk.
        self._gitignore_cache: dict[Path, pathspec.PathSpec | None] = {}

    def resolve(self, paths: Sequence[str | Path]) -> list[Path]:
        """
        Resolve input paths into a list of absolute file paths.

        Each input is handled as:
        - Existing directory → recursively walked with all filters applied
        - Anything else that exists (or is a dangling symlink) → included directly
        - Otherwise → `FileNotFoundError`

        Any `OSError` raised while listing a directory aborts the whole call.
        """
        result: list[Path] = []

        for raw_path in paths:
            p = Path(os.path.abspath(raw_path))

            if p.is_dir():
                result.extend(self._walk_directory(p))
            elif p.exists() or p.is_symlink():
                result.append(p)
            else:
                raise FileNotFoundError(f"Path not found: {raw_path}")

        return result

    def _walk_directory(self, root: Path) -> Iterator[Path]:
        tool_ignore: tuple[Path, pathspec.PathSpec] | None = None
        found = load_tool_ignore(self._config.tool_name, root)
        if found is not None:
            ignore_dir, spec = found
            # Paths are matched relative to the ignore file's directory.
            prefix = Path(os.path.realpath(root)).relative_to(ignore_dir)
            tool_ignore = (prefix, spec)
        yield from self._walk(root, root, tool_ignore, frozenset())

    def _walk(
        self,
        directory: Path,
        root: Path,
        tool_ignore: tuple[Path, pathspec.PathSpec] | None,
        ancestors: frozenset[str],
    ) -> Iterator[Path]:
        """
        Visit one directory. `ancestors` holds the real paths of every directory
        on the current descent stack, so a symlink back up the tree is not entered.
        """
        real = os.path.realpath(directory)
        if real in ancestors:
            return
        ancestors = ancestors | {real}

        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)

        gitignore_specs: list[tuple[Path, pathspec.PathSpec]] = []
        if self._config.respect_gitignore:
            gitignore_specs = self._get_gitignore_chain(directory, root)

        for entry in entries:
            if is_hidden(entry.name):
                continue
            path = directory / entry.name

            if entry.is_dir():
                if entry.is_symlink() and not self._config.follow_symlinks:
                    continue
                if self._is_excluded(path, root, True, gitignore_specs, tool_ignore):
                    continue
                yield from self._walk(path, root, tool_ignore, ancestors)
            elif entry.is_file() or (entry.is_symlink() and not path.exists()):
                # Dangling symlinks are kept so the read failure gets reported later.
                # Symlinks to FIFOs, sockets or devices are skipped like the targets.
                if self._is_excluded(path, root, False, gitignore_specs, tool_ignore):
                    continue
                yield path

    def _is_excluded(
        self,
        path: Path,
        root: Path,
        is_dir: bool,
        gitignore_specs: list[tuple[Path, pathspec.PathSpec]],
        tool_ignore: tuple[Path, pathspec.PathSpec] | None,
    ) -> bool:
        """Check a path found during traversal against all exclusion sources."""
        suffix = "/" if is_dir else ""
        rel = path.relative_to(root).as_posix() + suffix

        if self._exclude_spec is not None and self._exclude_spec.match_file(rel):
            return True
        if tool_ignore is not None:
            prefix, spec = tool_ignore
            if spec.match_file((prefix / path.relative_to(root)).as_posix() + suffix):
                return True
        for spec_dir, spec in gitignore_specs:
            if spec.match_file(path.relative_to(spec_dir).as_posix() + suffix):
                return True
        return False

    def _get_gitignore(self, directory: Path) -> pathspec.PathSpec | None:
        """Load and cache gitignore for a directory."""
        if directory not in self._gitignore_cache:
            self._gitignore_cache[directory] = load_gitignore(directory)
        return self._gitignore_cache[directory]

    def _get_gitignore_chain(
        self, directory: Path, walk_root: Path
    ) -> list[tuple[Path, pathspec.PathSpec]]:
        """Collect gitignore specs from walk_root down to directory (inclusive)."""
        specs: list[tuple[Path, pathspec.PathSpec]] = []
        current = walk_root
        for part in (Path(),) + tuple(Path(p) for p in directory.relative_to(walk_root).parts):
            current = current / part
            spec = self._get_gitignore(current)
            if spec is not None:
                specs.append((current, spec))
        return specs
