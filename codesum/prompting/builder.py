"""Builds summarization prompts for the backend model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from ..models import SummaryOptions

SYSTEM_PROMPT = (
    "You are a senior engineer writing a one-paragraph description of a source file. "
    "Describe what the code does, stay grounded in the code shown, and answer with plain prose."
)

_DETAIL_INSTRUCTIONS: Dict[str, str] = {
    "low": "Provide a very brief overview of the following {language} code.",
    "medium": "Summarize the following {language} code.",
    "high": "Provide a detailed analysis of the following {language} code.",
}


@dataclass(frozen=True)
class SummaryPrompt:
    """System and user messages for a single summarization call."""

    system: str
    prompt: str


def build_summary_prompt(
    source: str,
    language: str,
    options: Optional[SummaryOptions] = None,
) -> SummaryPrompt:
    """Return the prompt asking the model to summarize ``source``."""
    effective = options or SummaryOptions()
    instruction = _DETAIL_INSTRUCTIONS[effective.detail_level].format(language=language)
    lines = [
        instruction,
        f"Keep the summary to approximately {effective.max_length} characters.",
        "Focus on the file's purpose, its main components, and how they fit together.",
        "",
        "```",
        source,
        "```",
    ]
    return SummaryPrompt(system=SYSTEM_PROMPT, prompt="\n".join(lines))


__all__ = ["SYSTEM_PROMPT", "SummaryPrompt", "build_summary_prompt"]
