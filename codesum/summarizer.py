"""Per-file summarization with size guard and failure containment."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Optional

from .config import DEFAULT_MAX_FILE_SIZE
from .errors import classify
from .languages import detect_language
from .llm.summarizer import Summarizer
from .logging import get_logger
from .models import FileSummary, SummaryOptions

TOO_LARGE_SUMMARY = "File is too large to summarize."

_LOGGER = get_logger("summarizer")


def relative_report_path(path: str | Path, scan_root: str | Path) -> str:
    """Return ``path`` relative to ``scan_root`` using forward slashes."""
    return Path(os.path.relpath(path, scan_root)).as_posix()


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as handle:
        return handle.read()


async def summarize_file(
    path: str | Path,
    scan_root: str | Path,
    capability: Summarizer,
    max_bytes: int = DEFAULT_MAX_FILE_SIZE,
    options: Optional[SummaryOptions] = None,
) -> FileSummary:
    """Summarize one file; always returns a record, never raises.

    Files larger than ``max_bytes`` are neither read nor sent to the backend.
    """
    file_path = str(path)
    relative_path = relative_report_path(file_path, scan_root)
    loop = asyncio.get_running_loop()

    try:
        stat_result = await loop.run_in_executor(None, os.stat, file_path)
        if stat_result.st_size > max_bytes:
            _LOGGER.debug(
                "Skipping %s: %d bytes exceeds limit of %d",
                relative_path,
                stat_result.st_size,
                max_bytes,
            )
            return FileSummary(relative_path=relative_path, summary=TOO_LARGE_SUMMARY)

        content = await loop.run_in_executor(None, _read_text, file_path)
        language = detect_language(file_path)
        summary = await capability.summarize(content, language, options)
    except Exception as exc:
        error = classify(exc)
        _LOGGER.warning("Unable to summarize %s [%s]: %s", relative_path, error.code, error.message)
        return FileSummary(
            relative_path=relative_path,
            summary=f"Unable to summarize file ({error.code}): {error.message}",
        )

    return FileSummary(relative_path=relative_path, summary=summary)


__all__ = ["TOO_LARGE_SUMMARY", "relative_report_path", "summarize_file"]
