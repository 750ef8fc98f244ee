"""
TOML-based config file loading for llmpack.

Searches for `.llmpack.toml`, `llmpack.toml`, or `pyproject.toml [tool.llmpack]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


@dataclass
class PackConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    # File discovery
    exclude: list[str] | None = None
    extend_exclude: list[str] | None = None
    respect_gitignore: bool | None = None
    follow_symlinks: bool | None = None
    # Output
    root: str | None = None
    output: str | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".llmpack.toml", "llmpack.toml", "pyproject.toml"]

# Mapping from TOML kebab-case keys to Python snake_case field names
_KEBAB_TO_SNAKE: dict[str, str] = {
    "extend-exclude": "extend_exclude",
    "respect-gitignore": "respect_gitignore",
    "follow-symlinks": "follow_symlinks",
}

_VALID_FIELDS = {f.name for f in fields(PackConfig)}

# Expected TOML value type per field
_FIELD_KINDS: dict[str, str] = {
    "exclude": "a list of strings",
    "extend_exclude": "a list of strings",
    "respect_gitignore": "a boolean",
    "follow_symlinks": "a boolean",
    "root": "a string",
    "output": "a string",
}


def _has_expected_type(field_name: str, value: Any) -> bool:
    kind = _FIELD_KINDS[field_name]
    if kind == "a list of strings":
        return isinstance(value, list) and all(
            isinstance(item, str) for item in cast(list[Any], value)
        )
    if kind == "a boolean":
        return isinstance(value, bool)
    return isinstance(value, str)


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.llmpack.toml` >
    `llmpack.toml` > `pyproject.toml` (only if it has `[tool.llmpack]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_llmpack_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_llmpack_section(path: Path) -> bool:
    """Check if a pyproject.toml has a [tool.llmpack] section."""
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        return "llmpack" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError):
        return False


def load_config(config_path: Path) -> PackConfig:
    """
    Load a `PackConfig` from a TOML file. Supports both standalone
    `llmpack.toml` / `.llmpack.toml` and `pyproject.toml` (extracts
    `[tool.llmpack]`). TOML kebab-case keys are mapped to Python snake_case.

    A file that can't be parsed yields an empty config and a warning on stderr.
    """
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        print(f"Warning: could not read config file {config_path}: {e}", file=sys.stderr)
        return PackConfig()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("llmpack", {})

    return _parse_config_data(data, config_path)


def _parse_config_data(data: dict[str, Any], source: Path | None = None) -> PackConfig:
    """Parse a flat or sectioned TOML dict into PackConfig."""
    # Flatten sections: [file-discovery] and [output] merge into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    where = f" in {source}" if source else ""
    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = _KEBAB_TO_SNAKE.get(key, key.replace("-", "_"))
        if snake_key not in _VALID_FIELDS:
            print(f"Warning: unrecognized config key '{key}'{where}", file=sys.stderr)
        elif not _has_expected_type(snake_key, value):
            print(
                f"Warning: ignoring config key '{key}'{where}: "
                f"expected {_FIELD_KINDS[snake_key]}, got {value!r}",
                file=sys.stderr,
            )
        else:
            mapped[snake_key] = value

    return PackConfig(**mapped)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: PackConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(PackConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config

        # Skip if CLI explicitly set this flag
        if cfg_field.name in explicit_flags:
            continue

        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
