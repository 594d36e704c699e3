"""
Filesystem access used by discovery.

Everything that touches the disk goes through the `FileSystem` protocol so the
discovery logic can be run against a fake in tests. `LocalFileSystem` is the
real implementation; all of its methods block.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import pathspec


@dataclass(frozen=True)
class DirEntry:
    """One immediate child of a directory."""

    name: str
    is_dir: bool


class FileSystem(Protocol):
    def read_text(self, path: Path) -> str:
        """Read a whole file as UTF-8, keeping line endings as written."""
        ...

    def list_dir(self, directory: Path) -> list[DirEntry]:
        """List immediate children of `directory`."""
        ...

    def glob(self, root: Path, pattern: str, ignore: Sequence[str]) -> list[str]:
        """
        Root-relative forward-slash paths of files under `root` matching the
        gitignore-style `pattern`, skipping anything matched by `ignore`.
        """
        ...


class LocalFileSystem:
    """Blocking `FileSystem` on the local disk."""

    def read_text(self, path: Path) -> str:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()

    def list_dir(self, directory: Path) -> list[DirEntry]:
        with os.scandir(directory) as it:
            return [DirEntry(entry.name, entry.is_dir()) for entry in it]

    def glob(self, root: Path, pattern: str, ignore: Sequence[str]) -> list[str]:
        return list(
            walk_glob(
                root,
                pathspec.PathSpec.from_lines("gitignore", [pattern]),
                pathspec.PathSpec.from_lines("gitignore", ignore),
            )
        )


def walk_glob(
    root: Path, include_spec: pathspec.PathSpec, exclude_spec: pathspec.PathSpec
) -> Iterable[str]:
    """
    Walk `root` top-down with `os.walk()`, pruning excluded directories in-place
    so they are never entered. Directories and files are visited in name order.
    """
    # os.walk() skips unreadable directories silently unless told otherwise.
    def on_error(err: OSError) -> None:
        raise err

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else rel_dir + "/"

        dirnames[:] = sorted(d for d in dirnames if not exclude_spec.match_file(f"{prefix}{d}/"))

        for filename in sorted(filenames):
            rel_path = prefix + filename
            if include_spec.match_file(rel_path) and not exclude_spec.match_file(rel_path):
                yield rel_path
