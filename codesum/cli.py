"""CLI entrypoints for codesum commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .errors import CodeSumError, report
from .logging import configure_logging, get_logger
from .models import DETAIL_LEVELS, SummaryOptions
from .pipeline import SummaryPipeline


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codesum",
        description="Summarize every source file in a directory tree into one report.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    summarize_parser = subparsers.add_parser(
        "summarize",
        help="Summarize the files under a directory and write the report.",
    )
    _add_verbose_option(summarize_parser, suppress_default=True)
    summarize_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to scan (defaults to current directory).",
    )
    summarize_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Report file path (defaults to code-summaries.txt in the scanned directory).",
    )
    summarize_parser.add_argument(
        "-b",
        "--batch-size",
        type=_positive_int,
        default=None,
        help="Number of files summarized concurrently per batch.",
    )
    summarize_parser.add_argument(
        "--detail-level",
        choices=DETAIL_LEVELS,
        default=None,
        help="How much detail each summary should contain.",
    )
    summarize_parser.add_argument(
        "--max-length",
        type=_positive_int,
        default=None,
        help="Approximate character budget per summary.",
    )
    summarize_parser.add_argument(
        "--max-file-size",
        type=_positive_int,
        default=None,
        help="Files larger than this many bytes are not summarized.",
    )
    summarize_parser.add_argument(
        "--model",
        default=None,
        help="Backend model name.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing summarization.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def _summary_options(args: argparse.Namespace) -> SummaryOptions | None:
    if args.detail_level is None and args.max_length is None:
        return None
    defaults = SummaryOptions()
    return SummaryOptions(
        detail_level=args.detail_level or defaults.detail_level,
        max_length=args.max_length or defaults.max_length,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for codesum commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))
    logger = get_logger("cli")

    if args.command == "summarize":
        try:
            pipeline = SummaryPipeline(model=args.model)
            result = pipeline.run(
                args.path,
                args.output,
                batch_size=args.batch_size,
                options=_summary_options(args),
                max_file_size=args.max_file_size,
            )
        except CodeSumError as exc:
            details = report(exc, logger)
            parser.exit(1, f"codesum summarize failed [{details.code}]: {details.message}\n")
        except Exception as exc:  # pragma: no cover - unexpected failure
            details = report(exc, logger)
            parser.exit(
                1,
                f"codesum summarize failed [{details.code}]: {details.message}\n"
                "Run with --verbose for more details.\n",
            )
        rel_path = _relativize(result.output_path)
        print(f"Summarized {len(result.summaries)} files ({result.failed} failed) into {rel_path}")
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
