"""
Default exclusion patterns for `.gitignore` discovery.

These patterns use gitignore syntax and only limit where discovery looks for
`.gitignore` files. They are never added to the returned predicate.
"""

from __future__ import annotations

# Dependency managers, coverage output, generated type stubs and version control.
# Matching directories are pruned during the search (never entered).
DEFAULT_IGNORE: tuple[str, ...] = (
    "**/node_modules/**",
    "**/bower_components/**",
    "**/flow-typed/**",
    "**/coverage/**",
    "**/.git",
)

GITIGNORE_FILENAME = ".gitignore"
