"""Bounded-concurrency batch scheduling of per-file summaries."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional, Sequence, TypeVar

from .config import DEFAULT_BATCH_SIZE, DEFAULT_MAX_FILE_SIZE
from .errors import ConfigError
from .llm.summarizer import Summarizer
from .logging import get_logger
from .models import FileSummary, SummaryOptions
from .summarizer import summarize_file

T = TypeVar("T")

_LOGGER = get_logger("batch")


def chunked(items: Sequence[T], size: int) -> List[Sequence[T]]:
    """Split ``items`` into consecutive chunks of at most ``size`` entries."""
    return [items[index : index + size] for index in range(0, len(items), size)]


def validate_batch_size(batch_size: object) -> int:
    if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
        raise ConfigError(
            "batch_size must be a positive integer", context={"batch_size": batch_size}
        )
    return batch_size


def validate_max_file_size(max_file_size: object) -> int:
    if isinstance(max_file_size, bool) or not isinstance(max_file_size, int) or max_file_size <= 0:
        raise ConfigError(
            "max_file_size must be a positive integer",
            context={"max_file_size": max_file_size},
        )
    return max_file_size


async def summarize_files(
    paths: Sequence[str | Path],
    scan_root: str | Path,
    capability: Summarizer,
    batch_size: int = DEFAULT_BATCH_SIZE,
    options: Optional[SummaryOptions] = None,
    *,
    max_bytes: int = DEFAULT_MAX_FILE_SIZE,
) -> List[FileSummary]:
    """Summarize ``paths`` chunk by chunk, preserving input order.

    Files inside a chunk run concurrently; the next chunk starts only after
    every file of the current one has finished, so at most ``batch_size``
    backend calls are outstanding at once.
    """
    size = validate_batch_size(batch_size)
    chunks = chunked(list(paths), size)
    results: List[FileSummary] = []

    for index, chunk in enumerate(chunks, start=1):
        _LOGGER.debug("Summarizing batch %d/%d (%d files)", index, len(chunks), len(chunk))
        chunk_results = await asyncio.gather(
            *(
                summarize_file(path, scan_root, capability, max_bytes, options)
                for path in chunk
            )
        )
        results.extend(chunk_results)
        _LOGGER.info("Processed %d/%d files", len(results), len(paths))

    return results


__all__ = ["chunked", "summarize_files", "validate_batch_size", "validate_max_file_size"]
