"""
Locating the `.gitignore` files to aggregate.

Discovery first builds a bootstrap filter from the root `.gitignore` alone so
that subtrees the root already ignores are never searched, and their own
nested ignore rules are never consulted.

The filtering logic lives in the plain functions at the top of this module.
The `*_sync` drivers call the `FileSystem` directly; the async drivers run the
same calls in worker threads and fan out with `asyncio.gather`, which keeps
results in request order.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Sequence
from pathlib import Path

from gitignore_filter.defaults import GITIGNORE_FILENAME
from gitignore_filter.filesystem import DirEntry, FileSystem, LocalFileSystem
from gitignore_filter.gitignore import IgnoreMatcher, get_is_ignored_predicate, reduce_ignore
from gitignore_filter.types import GitignoreFilterConfig, IgnoreFile, IsIgnored

log = logging.getLogger(__name__)

GITIGNORE_GLOB = f"**/{GITIGNORE_FILENAME}"

_GLOB_SPECIAL = re.compile(r"([\[\]*?\\!#])")


def _entry_path(entry: DirEntry) -> str:
    # Trailing slash lets directory-only patterns like `dist/` match.
    return entry.name + "/" if entry.is_dir else entry.name


def _escape_glob(name: str) -> str:
    """Escape a literal entry name so it matches only itself as a gitignore pattern."""
    escaped = _GLOB_SPECIAL.sub(r"\\\1", name)
    # Unescaped trailing spaces are dropped by gitignore.
    stripped = escaped.rstrip(" ")
    return stripped + "\\ " * (len(escaped) - len(stripped))


def build_filter(files: Sequence[IgnoreFile], cwd: Path) -> IsIgnored:
    return get_is_ignored_predicate(reduce_ignore(files), cwd)


def exclusion_list(
    entries: Sequence[DirEntry], is_ignored: IsIgnored, extra: Sequence[str]
) -> list[str]:
    """
    Glob exclusions for the `.gitignore` search: root entries the bootstrap
    filter ignores, anchored to the root, followed by `extra`.
    """
    ignored = [
        "/" + _escape_glob(e.name) + ("/" if e.is_dir else "")
        for e in entries
        if is_ignored(_entry_path(e))
    ]
    return ignored + list(extra)


def surviving_directories(
    entries: Sequence[DirEntry], is_ignored: IsIgnored, extra: Sequence[str]
) -> list[str]:
    """Root subdirectories (as `name/`) not ignored by `is_ignored` or `extra`."""
    extra_matcher = IgnoreMatcher(extra)
    dirs = [_entry_path(e) for e in sorted(entries, key=lambda e: e.name) if e.is_dir]
    return [d for d in dirs if not is_ignored(d) and not extra_matcher.ignores(d)]


def _read_ignore_file_sync(fs: FileSystem, cwd: Path, relative: str) -> IgnoreFile:
    file_path = cwd / relative
    return IgnoreFile(content=fs.read_text(file_path), cwd=cwd, file_path=file_path)


async def _read_ignore_file(fs: FileSystem, cwd: Path, relative: str) -> IgnoreFile:
    file_path = cwd / relative
    content = await asyncio.to_thread(fs.read_text, file_path)
    return IgnoreFile(content=content, cwd=cwd, file_path=file_path)


def _root_files_sync(fs: FileSystem, cwd: Path) -> list[IgnoreFile]:
    try:
        return [_read_ignore_file_sync(fs, cwd, GITIGNORE_FILENAME)]
    except (OSError, UnicodeDecodeError) as e:
        log.debug("No usable root %s in %s: %s", GITIGNORE_FILENAME, cwd, e)
        return []


async def _root_files(fs: FileSystem, cwd: Path) -> list[IgnoreFile]:
    try:
        return [await _read_ignore_file(fs, cwd, GITIGNORE_FILENAME)]
    except (OSError, UnicodeDecodeError) as e:
        log.debug("No usable root %s in %s: %s", GITIGNORE_FILENAME, cwd, e)
        return []


def bootstrap_filter_sync(fs: FileSystem, cwd: Path) -> IsIgnored:
    """Filter built from the root `.gitignore` only; empty when it is missing."""
    return build_filter(_root_files_sync(fs, cwd), cwd)


async def bootstrap_filter(fs: FileSystem, cwd: Path) -> IsIgnored:
    return build_filter(await _root_files(fs, cwd), cwd)


def find_gitignore_files_sync(
    config: GitignoreFilterConfig, fs: FileSystem | None = None
) -> list[IgnoreFile]:
    """Read every `.gitignore` under the root that discovery is allowed to see."""
    fs = fs or LocalFileSystem()
    cwd = config.root

    entries = fs.list_dir(cwd)
    is_ignored = bootstrap_filter_sync(fs, cwd)
    ignore = exclusion_list(entries, is_ignored, config.effective_ignore)
    log.debug("Searching %s for %s, excluding %s", cwd, GITIGNORE_GLOB, ignore)

    paths = fs.glob(cwd, GITIGNORE_GLOB, ignore)
    log.debug("Found %d %s files under %s", len(paths), GITIGNORE_FILENAME, cwd)
    return [_read_ignore_file_sync(fs, cwd, p) for p in paths]


async def find_gitignore_files(
    config: GitignoreFilterConfig, fs: FileSystem | None = None
) -> list[IgnoreFile]:
    fs = fs or LocalFileSystem()
    cwd = config.root

    entries, is_ignored = await asyncio.gather(
        asyncio.to_thread(fs.list_dir, cwd), bootstrap_filter(fs, cwd)
    )
    ignore = exclusion_list(entries, is_ignored, config.effective_ignore)
    log.debug("Searching %s for %s, excluding %s", cwd, GITIGNORE_GLOB, ignore)

    paths = await asyncio.to_thread(fs.glob, cwd, GITIGNORE_GLOB, ignore)
    log.debug("Found %d %s files under %s", len(paths), GITIGNORE_FILENAME, cwd)
    return list(await asyncio.gather(*(_read_ignore_file(fs, cwd, p) for p in paths)))


def _directory_listing(
    entries: Sequence[DirEntry],
    is_ignored: IsIgnored,
    config: GitignoreFilterConfig,
    include_patterns: bool,
) -> list[str]:
    dirs = surviving_directories(entries, is_ignored, config.effective_ignore)
    return dirs + config.effective_ignore if include_patterns else dirs


def list_root_directories_sync(
    config: GitignoreFilterConfig,
    fs: FileSystem | None = None,
    include_patterns: bool = False,
) -> list[str]:
    """
    Top-level directories of the root that are not ignored, as `name/`.

    With `include_patterns`, the effective ignore patterns follow the
    directory names.
    """
    fs = fs or LocalFileSystem()
    cwd = config.root
    entries = fs.list_dir(cwd)
    is_ignored = bootstrap_filter_sync(fs, cwd)
    return _directory_listing(entries, is_ignored, config, include_patterns)


async def list_root_directories(
    config: GitignoreFilterConfig,
    fs: FileSystem | None = None,
    include_patterns: bool = False,
) -> list[str]:
    fs = fs or LocalFileSystem()
    cwd = config.root
    entries, is_ignored = await asyncio.gather(
        asyncio.to_thread(fs.list_dir, cwd), bootstrap_filter(fs, cwd)
    )
    return _directory_listing(entries, is_ignored, config, include_patterns)
