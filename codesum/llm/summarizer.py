"""Summarization capabilities: the abstract contract and the runner-backed version."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Optional, Protocol

from ..errors import LLMError, classify
from ..logging import get_logger
from ..models import SummaryOptions, SummaryOutcome
from ..prompting.builder import build_summary_prompt

FAILED_SUMMARY = "Failed to generate summary."

_logger = get_logger("llm.summarizer")


class PromptRunner(Protocol):
    def run(self, prompt: str, *, system: str | None = None) -> str: ...


class Summarizer(ABC):
    """Produces a short description of a unit of source text.

    Implementations must be safe to call concurrently and must never raise
    from :meth:`summarize`; failures are reported through the outcome.
    """

    @abstractmethod
    async def summarize_result(
        self,
        source: str,
        language: str,
        options: Optional[SummaryOptions] = None,
    ) -> SummaryOutcome:
        """Return the summary text together with any contained failure."""

    async def summarize(
        self,
        source: str,
        language: str,
        options: Optional[SummaryOptions] = None,
    ) -> str:
        try:
            outcome = await self.summarize_result(source, language, options)
        except Exception as exc:
            error = classify(exc)
            _logger.warning("Summary generation failed [%s]: %s", error.code, error.message)
            return FAILED_SUMMARY
        return outcome.summary


class LLMSummarizer(Summarizer):
    """Summarizer backed by a blocking prompt runner executed off the event loop."""

    def __init__(self, runner: PromptRunner) -> None:
        self.runner = runner
        self.logger = _logger

    async def summarize_result(
        self,
        source: str,
        language: str,
        options: Optional[SummaryOptions] = None,
    ) -> SummaryOutcome:
        try:
            request = build_summary_prompt(source, language, options)
            loop = asyncio.get_running_loop()
            text = await loop.run_in_executor(
                None, lambda: self.runner.run(request.prompt, system=request.system)
            )
            if not isinstance(text, str) or not text.strip():
                raise LLMError("Backend returned an empty summary")
        except Exception as exc:
            error = classify(exc)
            self.logger.warning("Summary generation failed [%s]: %s", error.code, error.message)
            return SummaryOutcome(summary=FAILED_SUMMARY, error=error)
        return SummaryOutcome(summary=text.strip())


__all__ = ["FAILED_SUMMARY", "LLMSummarizer", "PromptRunner", "Summarizer"]
