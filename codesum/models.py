"""Core data models shared across codesum components."""

from dataclasses import dataclass
from typing import Optional

from .errors import ClassifiedError, ConfigError

DETAIL_LEVELS = ("low", "medium", "high")
DEFAULT_DETAIL_LEVEL = "medium"
DEFAULT_MAX_LENGTH = 500


@dataclass(frozen=True)
class FileRecord:
    """A discovered file, addressed both absolutely and relative to the scan root."""

    absolute_path: str
    relative_path: str


@dataclass(frozen=True)
class SummaryOptions:
    """How much detail to ask for and the approximate character budget."""

    detail_level: str = DEFAULT_DETAIL_LEVEL
    max_length: int = DEFAULT_MAX_LENGTH

    def __post_init__(self) -> None:
        if self.detail_level not in DETAIL_LEVELS:
            raise ConfigError(
                f"detail_level must be one of {', '.join(DETAIL_LEVELS)}",
                context={"detail_level": self.detail_level},
            )
        if (
            isinstance(self.max_length, bool)
            or not isinstance(self.max_length, int)
            or self.max_length <= 0
        ):
            raise ConfigError(
                "max_length must be a positive integer",
                context={"max_length": self.max_length},
            )


@dataclass(frozen=True)
class FileSummary:
    """One report entry."""

    relative_path: str
    summary: str


@dataclass(frozen=True)
class SummaryOutcome:
    """Result of one summarization call: the text plus any contained failure."""

    summary: str
    error: Optional[ClassifiedError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
