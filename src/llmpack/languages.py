"""
Language identifiers used to annotate packed files.

The identifiers are the ones editors and Markdown renderers use for syntax
highlighting, so they double as code fence info strings.
"""

from __future__ import annotations

import os
from pathlib import Path

LANGUAGE_IDS: dict[str, str] = {
    ".js": "javascript",
    ".ts": "typescript",
    ".py": "python",
    ".html": "html",
    ".css": "css",
    ".json": "json",
    ".md": "markdown",
    ".java": "java",
    ".cpp": "cpp",
    ".c": "c",
    ".go": "go",
    ".rb": "ruby",
    ".php": "php",
    ".rs": "rust",
    ".swift": "swift",
    ".sh": "shell",
    ".jsx": "javascriptreact",
    ".tsx": "typescriptreact",
    ".vue": "vue",
}


def language_id(path: str | Path) -> str:
    """Language identifier for a file's extension, or "" if unmapped."""
    ext = os.path.splitext(path)[1].lower()
    return LANGUAGE_IDS.get(ext, "")
