"""Skip-list and .gitignore rules deciding which paths discovery may yield."""

from __future__ import annotations

from pathlib import Path
from typing import AbstractSet, Iterable, List

import pathspec

from .errors import classify
from .logging import get_logger

IGNORE_FILENAME = ".gitignore"

SKIP_DIRECTORIES: frozenset[str] = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        "bower_components",
        ".venv",
        "venv",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".tox",
        ".idea",
        ".vscode",
        "dist",
        "build",
        "coverage",
        ".next",
        "target",
    }
)

SKIP_FILES: frozenset[str] = frozenset(
    {
        IGNORE_FILENAME,
        ".codesum.yml",
        ".DS_Store",
        "Thumbs.db",
    }
)

_LOGGER = get_logger("path_filter")


def _read_ignore_lines(path: Path) -> List[str]:
    if not path.exists():
        return []
    try:
        return path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        error = classify(exc)
        _LOGGER.warning(
            "Ignoring unreadable %s (%s): %s", path.name, error.code, error.message
        )
        return []


class PathFilter:
    """Answers whether a directory is pruned or a relative file path is ignored."""

    def __init__(
        self,
        patterns: Iterable[str] = (),
        *,
        skip_directories: AbstractSet[str] = SKIP_DIRECTORIES,
        skip_files: AbstractSet[str] = SKIP_FILES,
    ) -> None:
        self.patterns = list(patterns)
        self.skip_directories = frozenset(skip_directories)
        self.skip_files = frozenset(skip_files)
        self._spec = pathspec.GitIgnoreSpec.from_lines(self.patterns)

    @classmethod
    def for_root(cls, root: str | Path, extra_patterns: Iterable[str] = ()) -> "PathFilter":
        """Load the root's ignore file once; a missing or unreadable file adds nothing."""
        lines = _read_ignore_lines(Path(root) / IGNORE_FILENAME)
        lines.extend(extra_patterns)
        return cls(lines)

    def should_skip_directory(self, name: str) -> bool:
        return name in self.skip_directories

    def should_skip_file(self, name: str) -> bool:
        return name in self.skip_files

    def is_ignored(self, relative_path: str) -> bool:
        if not self.patterns:
            return False
        return self._spec.match_file(relative_path)


__all__ = ["IGNORE_FILENAME", "PathFilter", "SKIP_DIRECTORIES", "SKIP_FILES"]
