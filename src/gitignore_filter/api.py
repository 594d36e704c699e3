"""
Entry points: build a gitignore predicate for a directory tree, or list the
top-level directories that are not ignored. Each comes in an async and a
blocking form with identical results.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

from gitignore_filter.discovery import (
    build_filter,
    find_gitignore_files,
    find_gitignore_files_sync,
    list_root_directories,
    list_root_directories_sync,
)
from gitignore_filter.filesystem import FileSystem
from gitignore_filter.types import GitignoreFilterConfig, IsIgnored


def normalize_config(
    config: GitignoreFilterConfig | None = None,
    cwd: str | os.PathLike[str] | None = None,
    ignore: Sequence[str] | None = None,
) -> GitignoreFilterConfig:
    """
    Accept either a ready `GitignoreFilterConfig` or the `cwd` / `ignore`
    shortcuts, never both.
    """
    if isinstance(ignore, str):
        raise TypeError(f"`ignore` must be a list of patterns, not a string: {ignore!r}")
    if config is None:
        return GitignoreFilterConfig(
            cwd=Path(cwd) if cwd is not None else None, ignore=list(ignore or [])
        )
    if not isinstance(config, GitignoreFilterConfig):
        raise TypeError(f"Expected GitignoreFilterConfig, got {type(config).__name__}")
    if cwd is not None or ignore is not None:
        raise TypeError("Pass either `config` or `cwd`/`ignore`, not both")
    return config


async def gitignore_filter(
    config: GitignoreFilterConfig | None = None,
    *,
    cwd: str | os.PathLike[str] | None = None,
    ignore: Sequence[str] | None = None,
    fs: FileSystem | None = None,
) -> IsIgnored:
    """
    Aggregate every `.gitignore` under the root into one predicate.

    The predicate takes absolute paths or paths relative to the root. Extra
    `ignore` patterns and the defaults only limit where `.gitignore` files are
    looked for; they are not part of the predicate.
    """
    opts = normalize_config(config, cwd, ignore)
    files = await find_gitignore_files(opts, fs)
    return build_filter(files, opts.root)


def gitignore_filter_sync(
    config: GitignoreFilterConfig | None = None,
    *,
    cwd: str | os.PathLike[str] | None = None,
    ignore: Sequence[str] | None = None,
    fs: FileSystem | None = None,
) -> IsIgnored:
    """Blocking form of `gitignore_filter()`."""
    opts = normalize_config(config, cwd, ignore)
    files = find_gitignore_files_sync(opts, fs)
    return build_filter(files, opts.root)


async def list_directories(
    config: GitignoreFilterConfig | None = None,
    *,
    cwd: str | os.PathLike[str] | None = None,
    ignore: Sequence[str] | None = None,
    fs: FileSystem | None = None,
    include_patterns: bool = False,
) -> list[str]:
    """
    Top-level directories of the root, as `name/`, that neither the root
    `.gitignore` nor the ignore patterns exclude.
    """
    opts = normalize_config(config, cwd, ignore)
    return await list_root_directories(opts, fs, include_patterns)


def list_directories_sync(
    config: GitignoreFilterConfig | None = None,
    *,
    cwd: str | os.PathLike[str] | None = None,
    ignore: Sequence[str] | None = None,
    fs: FileSystem | None = None,
    include_patterns: bool = False,
) -> list[str]:
    opts = normalize_config(config, cwd, ignore)
    return list_root_directories_sync(opts, fs, include_patterns)
