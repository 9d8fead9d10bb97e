"""Error taxonomy used to classify and report failures across the pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Type

from .logging import get_logger

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred"

_LOGGER = get_logger("errors")


class CodeSumError(Exception):
    """Base error carrying a category code plus retry and severity hints."""

    code = "UNKNOWN_ERROR"
    status_code = 500
    is_retryable_default = False
    severity_default = logging.ERROR

    def __init__(
        self,
        message: str,
        *,
        is_retryable: Optional[bool] = None,
        status_code: Optional[int] = None,
        severity: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.is_retryable = (
            self.is_retryable_default if is_retryable is None else is_retryable
        )
        if status_code is not None:
            self.status_code = status_code
        self.severity = self.severity_default if severity is None else severity
        self.context = dict(context) if context else None

    def __str__(self) -> str:
        return self.message


class AuthError(CodeSumError):
    """The backend rejected the caller's credentials."""

    code = "AUTH_ERROR"
    status_code = 401


class ApiKeyError(CodeSumError):
    """The backend credential is missing or malformed."""

    code = "INVALID_API_KEY"
    status_code = 401


class LLMError(CodeSumError):
    """The summarization backend failed or returned something unusable."""

    code = "LLM_ERROR"
    status_code = 502
    is_retryable_default = True
    severity_default = logging.WARNING


class FileSystemError(CodeSumError):
    """A file or directory could not be read or written."""

    code = "FILE_SYSTEM_ERROR"
    severity_default = logging.WARNING


class ConfigError(CodeSumError):
    """Configuration is missing, malformed, or out of range."""

    code = "CONFIG_ERROR"


class UnknownError(CodeSumError):
    """Fallback category for failures no rule recognises."""


ClassifiedError = CodeSumError


def _message_of(raw: BaseException | object) -> str:
    if isinstance(raw, OSError) and raw.strerror:
        if raw.filename is not None:
            return f"{raw.strerror}: {raw.filename}"
        return raw.strerror
    return str(raw)


def _contains(*markers: str) -> Callable[[BaseException | object, str], bool]:
    def _predicate(_: BaseException | object, message: str) -> bool:
        return any(marker in message for marker in markers)

    return _predicate


def _is_os_error(raw: BaseException | object, _: str) -> bool:
    return isinstance(raw, OSError)


# Evaluated top to bottom; the first matching rule decides the category.
CLASSIFICATION_RULES: Sequence[
    Tuple[Callable[[BaseException | object, str], bool], Type[CodeSumError]]
] = (
    (_is_os_error, FileSystemError),
    (_contains("API key", "apiKey"), ApiKeyError),
    (_contains("Unauthorized", "unauthenticated"), AuthError),
    (_contains("file not found", "ENOENT"), FileSystemError),
    (_contains("config", "configuration"), ConfigError),
)


def classify(raw: BaseException | object) -> ClassifiedError:
    """Map an arbitrary failure onto one error category.

    Already classified errors are returned unchanged, so classifying twice is
    harmless. The raw failure is chained as ``__cause__`` of the result.
    """
    if isinstance(raw, CodeSumError):
        return raw

    message = _message_of(raw)
    category: Type[CodeSumError] = UnknownError
    for predicate, candidate in CLASSIFICATION_RULES:
        if predicate(raw, message):
            category = candidate
            break

    context: Dict[str, Any] = {"type": type(raw).__name__}
    if isinstance(raw, OSError) and raw.filename is not None:
        context["path"] = str(raw.filename)

    classified = category(message or DEFAULT_ERROR_MESSAGE, context=context)
    if isinstance(raw, BaseException):
        classified.__cause__ = raw
    return classified


@dataclass(frozen=True)
class ErrorReport:
    """Stable, serializable view of a classified failure."""

    message: str
    code: str
    status: int

    def as_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "code": self.code, "status": self.status}


def report(raw: BaseException | object, logger: logging.Logger | None = None) -> ErrorReport:
    """Classify ``raw``, log it with its context, and return a presentable triple."""
    error = classify(raw)
    target = logger or _LOGGER
    if error.context:
        target.log(error.severity, "[%s] %s %s", error.code, error.message, error.context)
    else:
        target.log(error.severity, "[%s] %s", error.code, error.message)
    return ErrorReport(message=error.message, code=error.code, status=error.status_code)


__all__ = [
    "ApiKeyError",
    "AuthError",
    "CLASSIFICATION_RULES",
    "ClassifiedError",
    "CodeSumError",
    "ConfigError",
    "DEFAULT_ERROR_MESSAGE",
    "ErrorReport",
    "FileSystemError",
    "LLMError",
    "UnknownError",
    "classify",
    "report",
]
