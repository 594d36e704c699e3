"""Tests for gitignore parsing, aggregation and the path predicate."""

from __future__ import annotations

from pathlib import Path

import pathspec
import pytest

from gitignore_filter.gitignore import (
    IgnoreMatcher,
    get_is_ignored_predicate,
    join_pattern,
    parse_gitignore,
    reduce_ignore,
    relative_to_root,
)
from gitignore_filter.types import IgnoreFile

ROOT = Path("/project")


def test_parse_root_gitignore_unchanged():
    content = "*.log\r\nbuild/\n\n# comment\n!keep.log\n"
    patterns = parse_gitignore(content, ROOT, ROOT / ".gitignore")
    assert patterns == ["*.log", "build/", "!keep.log"]


def test_parse_nested_gitignore_prefixes_directory():
    content = "*.log\n!keep.log\nbuild/\n/anchored\n"
    patterns = parse_gitignore(content, ROOT, ROOT / "sub" / "dir" / ".gitignore")
    assert patterns == [
        "sub/dir/*.log",
        "!sub/dir/keep.log",
        "sub/dir/build/",
        "sub/dir/anchored",
    ]


def test_parse_escaped_hash_is_kept_as_pattern():
    patterns = parse_gitignore("\\#file\n#real comment\n", ROOT, ROOT / ".gitignore")
    assert patterns == ["\\#file"]


def test_parse_whitespace_only_line_is_kept():
    patterns = parse_gitignore("  \nfoo\n", ROOT, ROOT / ".gitignore")
    assert patterns == ["  ", "foo"]


def test_parse_empty_content():
    assert parse_gitignore("", ROOT, ROOT / ".gitignore") == []
    assert parse_gitignore("\n\r\n", ROOT, ROOT / "a" / ".gitignore") == []


def test_join_pattern():
    assert join_pattern("", "x/") == "x/"
    assert join_pattern("", "/x") == "/x"
    assert join_pattern("a", "b") == "a/b"
    assert join_pattern("a", "./b/") == "a/b/"
    assert join_pattern("a/b", "../c") == "a/c"
    assert join_pattern("a", "/") == "a/"
    assert join_pattern("a", "**/x") == "a/**/x"


def test_matcher_later_negation_wins():
    matcher = IgnoreMatcher(["*.log"])
    assert matcher.add(["!keep.log"]) is matcher
    assert matcher.ignores("debug.log")
    assert not matcher.ignores("keep.log")
    assert matcher.patterns == ["*.log", "!keep.log"]


def test_matcher_empty_ignores_nothing():
    matcher = IgnoreMatcher()
    assert not matcher.ignores("a.txt")
    assert not matcher.ignores("node_modules/x.js")


def test_reduce_ignore_folds_in_order():
    files = [
        IgnoreFile(content="*.log\n", cwd=ROOT, file_path=ROOT / ".gitignore"),
        IgnoreFile(content="!keep.log\n", cwd=ROOT, file_path=ROOT / "sub" / ".gitignore"),
    ]
    matcher = reduce_ignore(files)
    assert matcher.patterns == ["*.log", "!sub/keep.log"]
    assert matcher.ignores("sub/other.log")
    assert not matcher.ignores("sub/keep.log")
    # The negation only re-includes inside sub/.
    assert matcher.ignores("keep.log")


def test_reduce_ignore_reversed_order_changes_result():
    files = [
        IgnoreFile(content="!keep.log\n", cwd=ROOT, file_path=ROOT / "sub" / ".gitignore"),
        IgnoreFile(content="*.log\n", cwd=ROOT, file_path=ROOT / ".gitignore"),
    ]
    assert reduce_ignore(files).ignores("sub/keep.log")


def test_nested_patterns_stay_inside_their_directory():
    files = [IgnoreFile(content="*.txt\n", cwd=ROOT, file_path=ROOT / "sub" / ".gitignore")]
    is_ignored = get_is_ignored_predicate(reduce_ignore(files), ROOT)
    assert is_ignored("sub/a.txt")
    assert not is_ignored("a.txt")
    assert not is_ignored("other/a.txt")


def test_relative_to_root():
    root = "/project"
    assert relative_to_root("/project/a/b.txt", root) == "a/b.txt"
    assert relative_to_root("a/./b.txt", root) == "a/b.txt"
    assert relative_to_root("build/", root) == "build/"
    assert relative_to_root(Path("/project/build"), root) == "build"
    assert relative_to_root("/project", root) is None
    assert relative_to_root(".", root) is None
    assert relative_to_root("/elsewhere/x", root) is None
    assert relative_to_root("../x", root) is None


def test_predicate_absolute_and_relative_agree():
    files = [IgnoreFile(content="a/\n", cwd=ROOT, file_path=ROOT / ".gitignore")]
    is_ignored = get_is_ignored_predicate(reduce_ignore(files), ROOT)
    assert is_ignored("/project/a/b.txt") is True
    assert is_ignored("a/b.txt") is True
    assert is_ignored("/project/c/b.txt") is False
    assert is_ignored("c/b.txt") is False


def test_predicate_directory_only_pattern():
    files = [IgnoreFile(content="build/\n", cwd=ROOT, file_path=ROOT / ".gitignore")]
    is_ignored = get_is_ignored_predicate(reduce_ignore(files), ROOT)
    assert is_ignored("build/")
    assert is_ignored("build/out.txt")
    assert not is_ignored("build")


def test_predicate_outside_root_is_not_ignored():
    files = [IgnoreFile(content="*\n", cwd=ROOT, file_path=ROOT / ".gitignore")]
    is_ignored = get_is_ignored_predicate(reduce_ignore(files), ROOT)
    assert is_ignored("/project/anything")
    assert not is_ignored("/elsewhere/anything")
    assert not is_ignored("/project")


def test_predicate_is_idempotent():
    files = [IgnoreFile(content="*.log\n", cwd=ROOT, file_path=ROOT / ".gitignore")]
    is_ignored = get_is_ignored_predicate(reduce_ignore(files), ROOT)
    first = is_ignored("x/y.log")
    second = is_ignored("x/y.log")
    assert first is second is True


def test_matcher_compiles_once_after_all_files_are_added(monkeypatch: pytest.MonkeyPatch):
    compiled: list[list[str]] = []
    from_lines = pathspec.PathSpec.from_lines

    def counting_from_lines(pattern_factory, lines):
        compiled.append(list(lines))
        return from_lines(pattern_factory, lines)

    monkeypatch.setattr(pathspec.PathSpec, "from_lines", counting_from_lines)

    files = [
        IgnoreFile(content=f"*.{i}\n", cwd=ROOT, file_path=ROOT / f"d{i}" / ".gitignore")
        for i in range(20)
    ]
    matcher = reduce_ignore(files)
    assert compiled == []

    assert matcher.ignores("d3/x.3")
    assert not matcher.ignores("d3/x.4")
    assert len(compiled) == 1

    matcher.add(["!d3/x.3"])
    assert not matcher.ignores("d3/x.3")
    assert len(compiled) == 2
