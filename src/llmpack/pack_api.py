"""
Packing entry point: resolve entry points to files, then format them.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from llmpack.file_resolver import FileResolver, FileResolverConfig
from llmpack.formatter import PackResult, format_files


class PackError(Exception):
    """Base class for packing conditions reported to the user."""


class NothingToPackError(PackError):
    """No entry points were given, or they resolved to no files."""


def resolve_paths(
    paths: Sequence[str | Path], config: FileResolverConfig | None = None
) -> list[Path]:
    """
    Expand entry points into the list of files to pack.

    Raises `NothingToPackError` if there are no entry points or no files, and
    `OSError` if an entry point is missing or a directory can't be listed.
    """
    if not paths:
        raise NothingToPackError("No files or folders selected to pack.")
    files = FileResolver(config).resolve(paths)
    if not files:
        raise NothingToPackError("No files found in the selected resources.")
    return files


def pack_paths(
    paths: Sequence[str | Path],
    project_root: str | Path | None = None,
    *,
    config: FileResolverConfig | None = None,
    generated_at: datetime | None = None,
) -> PackResult:
    """
    Resolve `paths` and pack every resulting file into one document.

    Per-file read problems end up in `PackResult.warnings`; resolution errors
    propagate and nothing is produced.
    """
    files = resolve_paths(paths, config)
    return format_files(files, project_root, generated_at=generated_at)
