"""Batched, failure-isolated source file summarization."""

from .batch import summarize_files
from .discovery import discover
from .errors import classify, report
from .models import FileRecord, FileSummary, SummaryOptions, SummaryOutcome
from .path_filter import PathFilter
from .pipeline import RunResult, SummaryPipeline
from .report import write_summaries
from .summarizer import summarize_file

__version__ = "1.0.0"

__all__ = [
    "FileRecord",
    "FileSummary",
    "PathFilter",
    "RunResult",
    "SummaryOptions",
    "SummaryOutcome",
    "SummaryPipeline",
    "classify",
    "discover",
    "report",
    "summarize_file",
    "summarize_files",
    "write_summaries",
]
