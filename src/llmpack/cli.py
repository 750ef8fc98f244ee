#!/usr/bin/env python3
"""
llmpack: Pack project files into one annotated document for LLM context

Common usage:
  llmpack src/ README.md
  llmpack . -o packed.md
  llmpack --root . src/app.py tests/
  llmpack --list-files .

Hidden files and directories (names starting with '.') are skipped inside
directories. Files named explicitly are always included.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import sys
from dataclasses import dataclass
from pathlib import Path

from strif import atomic_output_file

from llmpack.config import find_config_file, load_config, merge_cli_with_config
from llmpack.file_resolver import FileResolverConfig
from llmpack.formatter import format_files
from llmpack.pack_api import NothingToPackError, resolve_paths
from llmpack.project_root import find_project_root


@dataclass
class Options:
    """Command-line options for the llmpack tool."""

    paths: list[str]
    output: str
    root: str | None
    version: bool
    # File discovery options
    exclude: list[str] | None
    extend_exclude: list[str]
    respect_gitignore: bool
    follow_symlinks: bool
    list_files: bool


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags` tracks
    which flags the user explicitly passed (for config merge precedence).
    """
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="llmpack",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=str,
        default=[],
        help="Files or directories to pack (use '.' for current directory)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default="-",
        help="Output file (use '-' for stdout, the default)",
    )
    parser.add_argument(
        "--root",
        type=str,
        default=None,
        metavar="DIR",
        help="Project root that displayed paths are relative to "
        "(default: nearest enclosing repository or project directory)",
    )
    # File discovery options
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Exclude paths matching this gitignore-style pattern inside directories. "
        "Replaces patterns from config. Can be repeated",
    )
    parser.add_argument(
        "--extend-exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Add to exclusion patterns (e.g., 'vendor/'). Can be repeated",
    )
    parser.add_argument(
        "--respect-gitignore",
        action="store_true",
        dest="respect_gitignore",
        help="Also skip files ignored by .gitignore files inside directories",
    )
    parser.add_argument(
        "--no-follow-symlinks",
        action="store_true",
        dest="no_follow_symlinks",
        help="Do not descend into symlinked directories",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print resolved file paths without packing",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    # Track which flags the user explicitly set (for config merge precedence).
    # Sentinel defaults detect actual CLI presence even when the user passes the
    # default value.
    _SENTINEL = object()
    _tracked_flags: dict[str, str] = {
        # argparse dest name -> Options field name
        "output": "output",
        "root": "root",
        "exclude": "exclude",
        "extend_exclude": "extend_exclude",
        "respect_gitignore": "respect_gitignore",
        "no_follow_symlinks": "follow_symlinks",
    }
    # append actions use None as sentinel (argparse creates a list when the flag is used).
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument("-o", "--output", default=_SENTINEL)
    sentinel_parser.add_argument("--root", default=_SENTINEL)
    sentinel_parser.add_argument("--exclude", action="append", default=None)
    sentinel_parser.add_argument("--extend-exclude", action="append", default=None)
    sentinel_parser.add_argument(
        "--respect-gitignore", dest="respect_gitignore", action="store_true", default=_SENTINEL
    )
    sentinel_parser.add_argument(
        "--no-follow-symlinks", dest="no_follow_symlinks", action="store_true", default=_SENTINEL
    )
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    explicit_flags: set[str] = set()
    for dest_name, field_name in _tracked_flags.items():
        val = getattr(sentinel_opts, dest_name, _SENTINEL)
        # For append actions, None means not supplied; a list means supplied
        if dest_name in ("exclude", "extend_exclude"):
            if val is not None:
                explicit_flags.add(field_name)
        elif val is not _SENTINEL:
            explicit_flags.add(field_name)

    return (
        Options(
            paths=opts.paths,
            output=opts.output,
            root=opts.root,
            version=opts.version,
            exclude=opts.exclude,
            extend_exclude=opts.extend_exclude,
            respect_gitignore=opts.respect_gitignore,
            follow_symlinks=not opts.no_follow_symlinks,
            list_files=opts.list_files,
        ),
        explicit_flags,
    )


def _apply_config(options: Options, explicit_flags: set[str]) -> None:
    """Merge settings from the nearest config file, if any, into `options`."""
    config_path = find_config_file(Path.cwd())
    if not config_path:
        return
    config = load_config(config_path)
    # A configured root is relative to the config file, not the working directory.
    if config.root is not None:
        config.root = str(config_path.parent / config.root)
    merge_cli_with_config(options, config, explicit_flags)


def _write_output(text: str, output: str) -> None:
    """Write the packed document to stdout or atomically to a file."""
    if output == "-":
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    with atomic_output_file(Path(output), make_parents=True) as tmp_path:
        Path(tmp_path).write_bytes(text.encode("utf-8"))


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the llmpack CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 when there is nothing to pack, 2 for errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("llmpack")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    _apply_config(options, explicit_flags)

    resolver_config = FileResolverConfig(
        exclude=options.exclude or [],
        extend_exclude=options.extend_exclude,
        respect_gitignore=options.respect_gitignore,
        follow_symlinks=options.follow_symlinks,
    )
    try:
        files = resolve_paths(options.paths, resolver_config)
    except NothingToPackError as e:
        print(f"Warning: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if options.list_files:
        for f in files:
            print(f)
        return 0

    project_root = Path(options.root) if options.root else find_project_root(Path.cwd())
    result = format_files(files, project_root)

    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    try:
        _write_output(result.text, options.output)
    except OSError as e:
        print(f"Error: could not write output: {e}", file=sys.stderr)
        return 2

    print(f"Packed {result.files_packed} of {len(files)} files.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
