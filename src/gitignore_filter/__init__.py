"""
Aggregate every `.gitignore` in a directory tree into a single
"is this path ignored?" predicate.

Usage::

    from gitignore_filter import gitignore_filter_sync

    is_ignored = gitignore_filter_sync(cwd="/path/to/project", ignore=["vendor/**"])
    is_ignored("/path/to/project/build/out.txt")

`gitignore_filter()` is the async form. `list_directories()` and
`list_directories_sync()` return the top-level directories that are not ignored.
"""

from gitignore_filter.api import (
    gitignore_filter,
    gitignore_filter_sync,
    list_directories,
    list_directories_sync,
)
from gitignore_filter.config import find_config_file, load_config
from gitignore_filter.defaults import DEFAULT_IGNORE
from gitignore_filter.filesystem import DirEntry, FileSystem, LocalFileSystem
from gitignore_filter.gitignore import IgnoreMatcher, parse_gitignore
from gitignore_filter.types import GitignoreFilterConfig, IgnoreFile, IsIgnored

__all__ = [
    "DEFAULT_IGNORE",
    "DirEntry",
    "FileSystem",
    "GitignoreFilterConfig",
    "IgnoreFile",
    "IgnoreMatcher",
    "IsIgnored",
    "LocalFileSystem",
    "find_config_file",
    "gitignore_filter",
    "gitignore_filter_sync",
    "list_directories",
    "list_directories_sync",
    "load_config",
    "parse_gitignore",
]
