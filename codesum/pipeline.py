"""Pipeline orchestration: discover, summarize in batches, write the report."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Mapping, Optional

from .batch import summarize_files, validate_batch_size, validate_max_file_size
from .config import CodeSumConfig, load_config, resolve_api_key
from .discovery import discover
from .errors import FileSystemError
from .llm.runner import LLMRunner
from .llm.summarizer import FAILED_SUMMARY, LLMSummarizer, Summarizer
from .logging import get_logger
from .models import FileRecord, FileSummary, SummaryOptions
from .path_filter import PathFilter
from .report import write_summaries
from .summarizer import TOO_LARGE_SUMMARY

_FAILURE_PREFIX = "Unable to summarize file ("

SummarizerFactory = Callable[[CodeSumConfig], Summarizer]


@dataclass
class RunResult:
    """Outcome of a summarization run."""

    output_path: Path
    summaries: List[FileSummary]
    failed: int


def is_failure_summary(summary: str) -> bool:
    """Return True when ``summary`` is one of the sentinel failure texts."""
    return summary in (FAILED_SUMMARY, TOO_LARGE_SUMMARY) or summary.startswith(_FAILURE_PREFIX)


def default_summarizer_factory(
    environ: Mapping[str, str] | None = None,
) -> SummarizerFactory:
    """Return a factory building the runner-backed summarizer from config."""

    def _factory(config: CodeSumConfig) -> Summarizer:
        llm = config.llm
        runner = LLMRunner(
            resolve_api_key(environ),
            model=llm.model,
            base_url=llm.base_url,
            temperature=llm.temperature if llm.temperature is not None else 0.2,
            max_tokens=llm.max_tokens,
            request_timeout=llm.request_timeout or 60.0,
        )
        return LLMSummarizer(runner)

    return _factory


def _discover_records(
    root: Path, exclude_paths: List[str], output_path: Path
) -> List[FileRecord]:
    path_filter = PathFilter.for_root(root, exclude_paths)
    return [
        record
        for record in discover(root, path_filter)
        if Path(record.absolute_path) != output_path
    ]


class SummaryPipeline:
    """Coordinates a single stateless summarization run."""

    def __init__(
        self,
        summarizer_factory: SummarizerFactory | None = None,
        *,
        model: str | None = None,
    ) -> None:
        self._summarizer_factory = summarizer_factory or default_summarizer_factory()
        self._model_override = model
        self.logger = get_logger("pipeline")

    async def arun(
        self,
        root: str | Path,
        output: str | Path | None = None,
        *,
        batch_size: Optional[int] = None,
        options: Optional[SummaryOptions] = None,
        max_file_size: Optional[int] = None,
    ) -> RunResult:
        root_path = Path(root).expanduser().resolve()
        if not root_path.is_dir():
            raise FileSystemError(
                f"Scan root is not a directory: {root}", context={"path": str(root_path)}
            )
        loop = asyncio.get_running_loop()
        config = await loop.run_in_executor(None, load_config, root_path)
        if self._model_override:
            config.llm.model = self._model_override

        effective_options = options or SummaryOptions(
            detail_level=config.summary.detail_level,
            max_length=config.summary.max_length,
        )
        effective_batch = validate_batch_size(
            batch_size if batch_size is not None else config.batch_size
        )
        effective_max_size = validate_max_file_size(
            max_file_size if max_file_size is not None else config.max_file_size
        )
        output_path = Path(output).expanduser().resolve() if output else config.output_path

        capability = self._summarizer_factory(config)

        self.logger.info("Scanning %s", root_path)
        records = await loop.run_in_executor(
            None, _discover_records, root_path, config.exclude_paths, output_path
        )
        self.logger.info("Found %d files to summarize", len(records))

        summaries = await summarize_files(
            [record.absolute_path for record in records],
            root_path,
            capability,
            effective_batch,
            effective_options,
            max_bytes=effective_max_size,
        )

        written = await loop.run_in_executor(None, write_summaries, summaries, output_path)
        failed = sum(1 for item in summaries if is_failure_summary(item.summary))
        if failed:
            self.logger.warning("%d of %d files could not be summarized", failed, len(summaries))
        self.logger.info("Summaries written to %s", written)
        return RunResult(output_path=written, summaries=summaries, failed=failed)

    def run(
        self,
        root: str | Path,
        output: str | Path | None = None,
        *,
        batch_size: Optional[int] = None,
        options: Optional[SummaryOptions] = None,
        max_file_size: Optional[int] = None,
    ) -> RunResult:
        """Synchronous wrapper around :meth:`arun`."""
        return asyncio.run(
            self.arun(
                root,
                output,
                batch_size=batch_size,
                options=options,
                max_file_size=max_file_size,
            )
        )


__all__ = [
    "RunResult",
    "SummarizerFactory",
    "SummaryPipeline",
    "default_summarizer_factory",
    "is_failure_summary",
]
