"""
Gitignore parsing and aggregation using pathspec.

Each `.gitignore` is rewritten so its patterns are relative to the aggregation
root instead of the file's own directory, then all files are folded, in
discovery order, into one `IgnoreMatcher`. Gitignore pattern semantics
(wildcards, anchoring, negation, last-match-wins) are left to `pathspec`.
"""

from __future__ import annotations

import logging
import os
import posixpath
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

import pathspec

from gitignore_filter.types import IgnoreFile, IsIgnored

log = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n")


def _to_posix(path: str) -> str:
    return path.replace(os.sep, "/") if os.sep != "/" else path


def join_pattern(base: str, pattern: str) -> str:
    """
    Join a pattern onto a forward-slash base directory.

    Behaves like POSIX path joining with normalization: `.`, `..` and doubled
    slashes collapse, a leading `/` on the pattern is absorbed, and a trailing
    `/` is kept since gitignore uses it to mean "directories only". An empty
    base returns the pattern unchanged.
    """
    if not base:
        return pattern
    joined = posixpath.normpath(f"{base}/{pattern}")
    if pattern.endswith("/") and not joined.endswith("/"):
        joined += "/"
    return joined


def parse_gitignore(content: str, cwd: Path, file_path: Path) -> list[str]:
    """
    Rewrite the lines of one `.gitignore` into patterns anchored at `cwd`.

    Empty lines and lines starting with `#` are dropped. An escaped `\\#` at
    the start of a line is not recognized and is kept as a pattern.
    """
    base = _to_posix(os.path.relpath(os.path.dirname(file_path), cwd))
    if base == ".":
        base = ""

    patterns: list[str] = []
    for line in _LINE_SPLIT.split(content):
        if not line or line[0] == "#":
            continue
        if line.startswith("!"):
            patterns.append("!" + join_pattern(base, line[1:]))
        else:
            patterns.append(join_pattern(base, line))
    return patterns


class IgnoreMatcher:
    """
    Ordered gitignore rule set backed by a compiled `pathspec.PathSpec`.

    Patterns added later take precedence over earlier ones for the same path,
    and `!` patterns re-include paths excluded before them.
    """

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        self._patterns: list[str] = []
        # Compiled on first query; reset whenever patterns are added.
        self._spec: pathspec.PathSpec | None = None
        self.add(patterns)

    def add(self, patterns: Iterable[str]) -> IgnoreMatcher:
        added = list(patterns)
        if added:
            self._patterns.extend(added)
            self._spec = None
        return self

    @property
    def patterns(self) -> list[str]:
        return list(self._patterns)

    def ignores(self, relative_path: str) -> bool:
        """Check a root-relative, forward-slash path."""
        if self._spec is None:
            self._spec = pathspec.PathSpec.from_lines("gitignore", self._patterns)
        return self._spec.match_file(relative_path)


def reduce_ignore(files: Sequence[IgnoreFile]) -> IgnoreMatcher:
    """Fold ignore files, in the order given, into a single matcher."""
    matcher = IgnoreMatcher()
    for file in files:
        matcher.add(parse_gitignore(file.content, file.cwd, file.file_path))
    return matcher


def relative_to_root(path: str | os.PathLike[str], root: str) -> str | None:
    """
    Express `path` relative to the absolute `root` with forward slashes.

    Relative inputs are taken as already root-relative. Returns `None` for the
    root itself and for anything outside it.
    """
    raw = os.fspath(path)
    is_dir = raw.endswith(("/", os.sep))
    try:
        rel = os.path.relpath(os.path.join(root, raw), root)
    except ValueError:
        # Different drive on Windows.
        return None
    rel = _to_posix(rel)
    if rel == "." or rel == ".." or rel.startswith("../"):
        return None
    return rel + "/" if is_dir else rel


def get_is_ignored_predicate(matcher: IgnoreMatcher, cwd: Path | str) -> IsIgnored:
    """Wrap a built matcher into a `path -> bool` test relative to `cwd`."""
    root = os.path.abspath(cwd)

    def is_ignored(path: str | os.PathLike[str]) -> bool:
        rel = relative_to_root(path, root)
        if rel is None:
            log.debug("Path outside of %s is never ignored: %s", root, path)
            return False
        return matcher.ignores(rel)

    return is_ignored
