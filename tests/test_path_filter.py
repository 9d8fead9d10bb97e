"""Tests for codesum.path_filter."""

from __future__ import annotations

from pathlib import Path

from codesum import path_filter as path_filter_module
from codesum.path_filter import PathFilter


def test_skip_directories_are_exact_case_sensitive_matches() -> None:
    path_filter = PathFilter()

    assert path_filter.should_skip_directory("node_modules")
    assert path_filter.should_skip_directory(".git")
    assert path_filter.should_skip_directory("__pycache__")
    assert not path_filter.should_skip_directory("Node_Modules")
    assert not path_filter.should_skip_directory("node_modules_backup")
    assert not path_filter.should_skip_directory("src")


def test_nothing_is_ignored_without_patterns(tmp_path: Path) -> None:
    path_filter = PathFilter.for_root(tmp_path)

    assert path_filter.patterns == []
    assert not path_filter.is_ignored("index.js")
    assert not path_filter.is_ignored("deep/nested/file.py")


def test_gitignore_semantics(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text(
        "# comment\n*.log\n!keep.log\nlogs/\n/anchored.txt\ndocs/**/draft.md\n",
        encoding="utf-8",
    )
    path_filter = PathFilter.for_root(tmp_path)

    assert path_filter.is_ignored("debug.log")
    assert path_filter.is_ignored("nested/trace.log")
    assert not path_filter.is_ignored("keep.log")
    assert path_filter.is_ignored("logs/output.txt")
    assert path_filter.is_ignored("anchored.txt")
    assert not path_filter.is_ignored("sub/anchored.txt")
    assert path_filter.is_ignored("docs/a/b/draft.md")
    assert not path_filter.is_ignored("src/main.py")


def test_extra_patterns_are_appended(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("*.log\n", encoding="utf-8")
    path_filter = PathFilter.for_root(tmp_path, ["fixtures/"])

    assert path_filter.is_ignored("fixtures/sample.js")
    assert path_filter.is_ignored("app.log")
    assert not path_filter.is_ignored("src/app.js")


def test_unreadable_ignore_file_fails_open(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / ".gitignore").write_text("*.js\n", encoding="utf-8")

    def _boom(self, *args, **kwargs):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(path_filter_module.Path, "read_text", _boom)

    path_filter = PathFilter.for_root(tmp_path)

    assert path_filter.patterns == []
    assert not path_filter.is_ignored("index.js")


def test_ignore_and_config_files_are_skipped() -> None:
    path_filter = PathFilter()

    assert path_filter.should_skip_file(".gitignore")
    assert path_filter.should_skip_file(".codesum.yml")
    assert not path_filter.should_skip_file("index.js")
