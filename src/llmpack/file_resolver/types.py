"""Configuration types for file resolution."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class FileResolverConfig:
    """
    Configuration for file discovery and filtering.

    Hidden entries (names starting with `.`) are always pruned during directory
    traversal; the options here only add further exclusions.

    `tool_name` determines the ignore file name (e.g., `.llmpackignore`).
    Exclusion patterns use gitignore syntax and never apply to files named
    explicitly as entry points.
    """

    tool_name: str = "llmpack"
    exclude: list[str] = field(default_factory=list)
    extend_exclude: list[str] = field(default_factory=list)
    respect_gitignore: bool = False
    follow_symlinks: bool = True

    @property
    def effective_exclude(self) -> list[str]:
        """Combined exclude patterns: `exclude + extend_exclude`."""
        return self.exclude + self.extend_exclude
