"""Summarization backend adapters."""

from .runner import LLMRequest, LLMRunner
from .summarizer import FAILED_SUMMARY, LLMSummarizer, Summarizer

__all__ = ["FAILED_SUMMARY", "LLMRequest", "LLMRunner", "LLMSummarizer", "Summarizer"]
