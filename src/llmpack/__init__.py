"""
llmpack: pack a set of files and directories into one annotated text document
for use as LLM context.
"""

from llmpack.file_resolver import FileResolver, FileResolverConfig
from llmpack.formatter import PackResult, format_files
from llmpack.languages import LANGUAGE_IDS, language_id
from llmpack.pack_api import NothingToPackError, PackError, pack_paths, resolve_paths

__all__ = [
    "LANGUAGE_IDS",
    "FileResolver",
    "FileResolverConfig",
    "NothingToPackError",
    "PackError",
    "PackResult",
    "format_files",
    "language_id",
    "pack_paths",
    "resolve_paths",
]
