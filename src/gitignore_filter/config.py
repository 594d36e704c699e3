"""
TOML-based config file loading.

Searches for `.gitignore-filter.toml`, `gitignore-filter.toml`, or
`pyproject.toml [tool.gitignore-filter]` walking up from a start directory.
The only recognized key is `ignore`, a list of extra discovery exclusions.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

from gitignore_filter.types import GitignoreFilterConfig

TOOL_NAME = "gitignore-filter"

# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [f".{TOOL_NAME}.toml", f"{TOOL_NAME}.toml", "pyproject.toml"]


def _tool_table(path: Path) -> dict[str, Any] | None:
    """
    Settings table of a config file: the whole document for our own files,
    `[tool.gitignore-filter]` for `pyproject.toml` (`None` when absent).
    """
    data: dict[str, Any] = tomllib.loads(path.read_text())
    if path.name != "pyproject.toml":
        return data
    table = data.get("tool", {}).get(TOOL_NAME)
    return cast(dict[str, Any], table) if isinstance(table, dict) else None


def _is_config_file(candidate: Path) -> bool:
    if not candidate.is_file():
        return False
    if candidate.name != "pyproject.toml":
        return True
    # A broken or unrelated pyproject.toml is skipped, not reported.
    try:
        return _tool_table(candidate) is not None
    except (tomllib.TOMLDecodeError, OSError):
        return False


def find_config_file(start_dir: Path) -> Path | None:
    """
    Look in `start_dir` and each of its parents for a config file; the first
    match wins. A `pyproject.toml` only counts if it has a
    `[tool.gitignore-filter]` table.
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        for filename in _CONFIG_FILENAMES:
            if _is_config_file(directory / filename):
                return directory / filename
    return None


def load_config(config_path: Path, cwd: Path | None = None) -> GitignoreFilterConfig:
    """
    Load a `GitignoreFilterConfig` from a TOML file. `cwd` defaults to the
    directory holding the config file. Unknown keys are ignored.
    """
    table = _tool_table(config_path) or {}

    ignore = table.get("ignore", [])
    if not isinstance(ignore, list) or not all(isinstance(p, str) for p in ignore):
        raise ValueError(f"`ignore` must be a list of strings in {config_path}")

    return GitignoreFilterConfig(
        cwd=cwd if cwd is not None else config_path.parent.resolve(),
        ignore=cast(list[str], ignore),
    )
