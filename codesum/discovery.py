"""Recursive file discovery honouring the skip-list and ignore rules."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from .errors import FileSystemError, classify
from .logging import get_logger
from .models import FileRecord
from .path_filter import PathFilter

_LOGGER = get_logger("discovery")


def _list_directory(path: str) -> List[os.DirEntry]:
    with os.scandir(path) as iterator:
        return list(iterator)


def _walk(
    directory: str,
    rel_dir: str,
    path_filter: PathFilter,
    records: List[FileRecord],
    *,
    strict: bool = False,
) -> None:
    try:
        entries = _list_directory(directory)
    except OSError as exc:
        if strict:
            raise FileSystemError(
                f"Scan root is not readable: {directory}", context={"path": directory}
            ) from exc
        error = classify(exc)
        _LOGGER.debug("Skipping unreadable directory %s: %s", directory, error.message)
        return

    for entry in entries:
        rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = not is_dir and entry.is_file()
        except OSError as exc:
            error = classify(exc)
            _LOGGER.debug("Skipping %s: %s", rel_path, error.message)
            continue

        if is_dir:
            if path_filter.should_skip_directory(entry.name):
                continue
            _walk(entry.path, rel_path, path_filter, records)
        elif is_file:
            if path_filter.should_skip_file(entry.name) or path_filter.is_ignored(rel_path):
                continue
            records.append(FileRecord(absolute_path=entry.path, relative_path=rel_path))


def discover(root: str | Path, path_filter: PathFilter | None = None) -> List[FileRecord]:
    """Return every eligible file below ``root`` in depth-first listing order.

    Skip-listed directories are pruned before they are opened. Unreadable
    subdirectories contribute nothing; an unusable root raises
    :class:`FileSystemError`.
    """
    root_path = Path(root).expanduser().resolve()
    if not root_path.exists():
        raise FileSystemError(
            f"Scan root not found: {root}", context={"path": str(root_path)}
        )
    if not root_path.is_dir():
        raise FileSystemError(
            f"Scan root is not a directory: {root}", context={"path": str(root_path)}
        )

    active_filter = path_filter or PathFilter.for_root(root_path)
    records: List[FileRecord] = []
    _walk(str(root_path), "", active_filter, records, strict=True)
    _LOGGER.debug("Discovered %d files under %s", len(records), root_path)
    return records


__all__ = ["discover"]
