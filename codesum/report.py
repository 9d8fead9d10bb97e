"""Plain-text report serialization."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .errors import FileSystemError
from .models import FileSummary


def render_summaries(summaries: Iterable[FileSummary]) -> str:
    """Render entries as ``path\\nsummary\\n`` joined by a blank line."""
    return "\n".join(f"{item.relative_path}\n{item.summary}\n" for item in summaries)


def write_summaries(summaries: Iterable[FileSummary], output_path: str | Path) -> Path:
    """Write the report as UTF-8, replacing any existing file."""
    target = Path(output_path)
    content = render_summaries(summaries)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FileSystemError(
            f"Unable to write report to {target}: {exc.strerror or exc}",
            context={"path": str(target)},
        ) from exc
    return target


__all__ = ["render_summaries", "write_summaries"]
