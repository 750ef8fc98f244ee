"""
Rendering of a resolved file list into a single packed document.

Layout:

- Title, total file count and generation time
- Numbered table of contents, one display path per line
- One block per file: a `#` banner with index, size, modification time and
  (when known) language, then the raw content, fenced when the language is known

Read failures don't stop the document. They are collected as warnings in the
`PackResult` and the file's block is left out.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from llmpack.languages import language_id

DIVIDER_LENGTH = 80

TITLE = "# Project Files Pack for LLM"


@dataclass
class PackResult:
    """
    Result of packing a list of files.

    Warnings are collected here rather than printed, so callers decide how to
    surface them.
    """

    text: str
    """The packed document."""

    files_packed: int
    """Number of file blocks actually written."""

    warnings: list[str] = field(default_factory=list)
    """One message per file that could not be read."""


def iso_timestamp(dt: datetime) -> str:
    """ISO 8601 in UTC with millisecond precision and a `Z` suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_size_kb(size: int) -> str:
    """Byte count as KB with one decimal, rounding halves up."""
    kb = (Decimal(size) / Decimal(1024)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{kb}"


def display_path(path: str | Path, project_root: Path | None) -> str:
    """Path relative to `project_root` if the file lies under it, else absolute."""
    path = Path(os.path.abspath(path))
    if project_root is not None:
        try:
            return str(path.relative_to(project_root))
        except ValueError:
            pass
    return str(path)


def _file_block(
    index: int, total: int, shown: str, lang: str, content: str, size: int, mtime: float
) -> str:
    divider = "#" * DIVIDER_LENGTH
    modified = iso_timestamp(datetime.fromtimestamp(mtime, tz=timezone.utc))

    parts = [
        f"{divider}\n",
        f"# FILE {index}/{total}: {shown}\n",
        f"# Size: {format_size_kb(size)} KB | Last modified: {modified}\n",
    ]
    if lang:
        parts.append(f"# Language: {lang}\n")
    parts.append(f"{divider}\n\n")

    if lang:
        parts.append(f"```{lang}\n{content}\n```\n\n")
    else:
        parts.append(f"{content}\n\n")

    parts.append("\n" + "=" * DIVIDER_LENGTH + "\n\n")
    return "".join(parts)


def format_files(
    files: Sequence[str | Path],
    project_root: str | Path | None = None,
    *,
    generated_at: datetime | None = None,
) -> PackResult:
    """
    Pack the given files into one document.

    `project_root` controls how paths are displayed. `generated_at` defaults to
    now; pass a fixed value for reproducible output.
    """
    paths = [Path(f) for f in files]
    root = Path(os.path.abspath(project_root)) if project_root is not None else None
    total = len(paths)
    if generated_at is None:
        generated_at = datetime.now(timezone.utc)

    shown_paths = [display_path(p, root) for p in paths]

    out: list[str] = [
        f"{TITLE}\n",
        f"# Total files: {total}\n",
        f"# Generated: {iso_timestamp(generated_at)}\n\n",
        "## Files included:\n",
    ]
    for index, shown in enumerate(shown_paths, start=1):
        out.append(f"{index}. {shown}\n")
    out.append("\n" + "=" * DIVIDER_LENGTH + "\n\n")

    warnings: list[str] = []
    files_packed = 0
    for index, (path, shown) in enumerate(zip(paths, shown_paths), start=1):
        try:
            content = path.read_bytes().decode("utf-8")
            stat = path.stat()
        except (OSError, UnicodeDecodeError) as e:
            warnings.append(f"Error reading file {shown}: {e}")
            continue

        out.append(
            _file_block(
                index, total, shown, language_id(path), content, stat.st_size, stat.st_mtime
            )
        )
        files_packed += 1

    return PackResult(text="".join(out), files_packed=files_packed, warnings=warnings)
