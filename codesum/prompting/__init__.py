"""Prompt construction for the summarization backend."""

from .builder import SYSTEM_PROMPT, SummaryPrompt, build_summary_prompt

__all__ = ["SYSTEM_PROMPT", "SummaryPrompt", "build_summary_prompt"]
