"""Configuration and value types for gitignore aggregation."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from gitignore_filter.defaults import DEFAULT_IGNORE

IsIgnored = Callable[[str | os.PathLike[str]], bool]
"""Predicate returned by the entry points: path -> "is ignored"."""


@dataclass
class GitignoreFilterConfig:
    """
    Configuration for one aggregation pass.

    `cwd=None` means the process working directory at construction time.
    `ignore` holds extra gitignore-style patterns that limit discovery;
    `DEFAULT_IGNORE` is always appended after them.
    """

    cwd: Path | None = None
    ignore: list[str] = field(default_factory=list)
    default_ignore: tuple[str, ...] = field(default=DEFAULT_IGNORE, repr=False)

    def __post_init__(self) -> None:
        self.cwd = Path.cwd() if self.cwd is None else Path(self.cwd)
        if isinstance(self.ignore, str):
            raise TypeError(f"`ignore` must be a list of patterns, not a string: {self.ignore!r}")
        self.ignore = list(self.ignore)

    @property
    def root(self) -> Path:
        assert self.cwd is not None
        return self.cwd

    @property
    def effective_ignore(self) -> list[str]:
        """Combined discovery exclusions: `ignore + DEFAULT_IGNORE`."""
        return self.ignore + list(self.default_ignore)


@dataclass(frozen=True)
class IgnoreFile:
    """Contents of one `.gitignore` plus the root its patterns are rewritten against."""

    content: str
    cwd: Path
    file_path: Path
