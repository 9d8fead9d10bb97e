"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from codesum import cli
from codesum.cli import _build_parser, _summary_options
from codesum.models import SummaryOptions
from codesum.pipeline import SummaryPipeline
from tests._fixtures.summarizers import RecordingSummarizer


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "summarize"])
    assert args.verbose is True
    assert args.command == "summarize"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["summarize", "--verbose"])
    assert args.verbose is True
    assert args.command == "summarize"


def test_cli_parses_summary_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        [
            "summarize",
            "src",
            "-o",
            "out.txt",
            "-b",
            "3",
            "--detail-level",
            "high",
            "--max-length",
            "750",
            "--max-file-size",
            "4096",
            "--model",
            "gemini-1.5-pro",
        ]
    )
    assert args.path == "src"
    assert args.output == "out.txt"
    assert args.batch_size == 3
    assert args.max_file_size == 4096
    assert args.model == "gemini-1.5-pro"
    assert _summary_options(args) == SummaryOptions(detail_level="high", max_length=750)


def test_cli_leaves_options_unset_without_flags() -> None:
    args = _build_parser().parse_args(["summarize"])
    assert _summary_options(args) is None


@pytest.mark.parametrize("value", ["0", "-2", "many"])
def test_cli_rejects_non_positive_batch_size(value: str) -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["summarize", "--batch-size", value])


def test_cli_rejects_unknown_detail_level() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["summarize", "--detail-level", "extreme"])


def test_cli_accepts_serve_options() -> None:
    args = _build_parser().parse_args(["serve", "--port", "9000"])
    assert args.command == "serve"
    assert args.port == 9000
    assert args.host == "127.0.0.1"


def test_main_runs_pipeline_and_reports(tmp_path: Path, monkeypatch, capsys) -> None:
    root = tmp_path / "repo"
    root.mkdir()
    (root / "main.py").write_text("print('hi')\n", encoding="utf-8")
    capability = RecordingSummarizer()

    monkeypatch.setattr(
        cli,
        "SummaryPipeline",
        lambda model=None: SummaryPipeline(summarizer_factory=lambda config: capability),
    )

    cli.main(["summarize", str(root), "--detail-level", "low"])

    out = capsys.readouterr().out
    assert "Summarized 1 files (0 failed)" in out
    report = (root / "code-summaries.txt").read_text(encoding="utf-8")
    assert report == "main.py\nPython file starting with \"print('hi')\"\n"
    assert capability.calls[0]["options"] == SummaryOptions(detail_level="low")


def test_main_exits_with_error_code_on_structural_failure(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(
        cli,
        "SummaryPipeline",
        lambda model=None: SummaryPipeline(summarizer_factory=lambda config: RecordingSummarizer()),
    )

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["summarize", str(tmp_path / "missing")])

    assert excinfo.value.code == 1
    assert "[FILE_SYSTEM_ERROR]" in capsys.readouterr().err


def test_main_reports_missing_api_key(tmp_path: Path, monkeypatch, capsys) -> None:
    for key in ("CODESUM_API_KEY", "GOOGLE_API_KEY", "GEMINI_API_KEY"):
        monkeypatch.delenv(key, raising=False)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["summarize", str(tmp_path)])

    assert excinfo.value.code == 1
    assert "[INVALID_API_KEY]" in capsys.readouterr().err
