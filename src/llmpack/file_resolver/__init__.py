"""
Self-contained file discovery for packing: expands files and directories into
a flat, ordered list of concrete file paths, pruning hidden entries.

No imports from `llmpack` outside this package.

Usage::

    from llmpack.file_resolver import FileResolver, FileResolverConfig

    resolver = FileResolver(FileResolverConfig(extend_exclude=["vendor/"]))
    files = resolver.resolve(["src", "README.md"])
"""

from llmpack.file_resolver.resolver import FileResolver, is_hidden
from llmpack.file_resolver.types import FileResolverConfig

__all__ = [
    "FileResolver",
    "FileResolverConfig",
    "is_hidden",
]
