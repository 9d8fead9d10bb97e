"""Configuration loading for codesum (.codesum.yml) and credential lookup."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .errors import ConfigError
from .models import DEFAULT_DETAIL_LEVEL, DEFAULT_MAX_LENGTH

CONFIG_FILENAME = ".codesum.yml"
DEFAULT_BATCH_SIZE = 5
DEFAULT_MAX_FILE_SIZE = 500 * 1024
DEFAULT_OUTPUT_NAME = "code-summaries.txt"
API_KEY_ENV_KEYS = ("CODESUM_API_KEY", "GOOGLE_API_KEY", "GEMINI_API_KEY")


@dataclass
class LLMConfig:
    """Backend settings from .codesum.yml."""

    model: Optional[str] = None
    base_url: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None


@dataclass
class SummaryConfig:
    """Default summary shaping."""

    detail_level: str = DEFAULT_DETAIL_LEVEL
    max_length: int = DEFAULT_MAX_LENGTH


@dataclass
class CodeSumConfig:
    """Represents the settings defined in .codesum.yml."""

    root: Path
    llm: LLMConfig = field(default_factory=LLMConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    batch_size: int = DEFAULT_BATCH_SIZE
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    output: Optional[Path] = None
    exclude_paths: List[str] = field(default_factory=list)

    @property
    def output_path(self) -> Path:
        return self.output or self.root / DEFAULT_OUTPUT_NAME


def load_config(config_path: Path) -> CodeSumConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CodeSumConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(
            f"{CONFIG_FILENAME} must contain a mapping at the root",
            context={"path": str(config_file)},
        )

    llm_data = _as_dict(data.get("llm"))
    llm = LLMConfig(
        model=_as_str(llm_data.get("model")),
        base_url=_as_str(llm_data.get("base_url")),
        temperature=_as_float(llm_data.get("temperature")),
        max_tokens=_as_int(llm_data.get("max_tokens")),
        request_timeout=_as_float(llm_data.get("request_timeout")),
    )

    summary_data = _as_dict(data.get("summary"))
    summary = SummaryConfig(
        detail_level=_or_default(_as_str(summary_data.get("detail_level")), DEFAULT_DETAIL_LEVEL),
        max_length=_or_default(_as_int(summary_data.get("max_length")), DEFAULT_MAX_LENGTH),
    )

    output_str = _as_str(data.get("output"))
    output = (root / output_str).resolve() if output_str else None

    return CodeSumConfig(
        root=root,
        llm=llm,
        summary=summary,
        batch_size=_or_default(_as_int(data.get("batch_size")), DEFAULT_BATCH_SIZE),
        max_file_size=_or_default(_as_int(data.get("max_file_size")), DEFAULT_MAX_FILE_SIZE),
        output=output,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
    )


def resolve_api_key(environ: Mapping[str, str] | None = None) -> Optional[str]:
    """Return the first backend credential found in the environment."""
    env = os.environ if environ is None else environ
    for key in API_KEY_ENV_KEYS:
        value = env.get(key)
        if value:
            return value
    return None


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(
            f"Unable to read {path.name}: {exc}", context={"path": str(path)}
        ) from exc
    if not text.strip():
        return {}

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(
            f"Failed to parse {path.name}: {exc}", context={"path": str(path)}
        ) from exc
    return loaded or {}


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
