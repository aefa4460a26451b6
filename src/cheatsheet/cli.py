"""CLI argument parsing and command dispatch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn

from .constants import (
    APP_NAME,
    CLI_DESCRIPTION,
    CLI_EPILOG,
    CLI_HELP_HINT,
    DEFAULT_SOURCE,
    STDERR_ERROR_PREFIX,
    STDERR_TOPIC_NOT_FOUND_PREFIX,
    STDOUT_UNCHANGED_PREFIX,
    STDOUT_WRITTEN_PREFIX,
)
from .errors import CheatsheetError, PathMappingError, StartupValidationError
from .formatter import format_search_results, format_topic_list, print_segment
from .logging import log_event, setup_logging
from .models import OutputFormat
from .path_mapping import map_path
from .renderer import render, render_section, write_output
from .store import find_by_topic, load_path, search


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=CLI_EPILOG,
    )
    parser.add_argument(
        "--source", "-s",
        default=DEFAULT_SOURCE,
        help="Markdown cheat sheet to load (default: the bundled React document)",
    )
    parser.add_argument(
        "--log",
        help="Write structured logs to this file",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Commands")

    parser_render = subparsers.add_parser("render", help="Render the whole cheat sheet")
    parser_render.add_argument(
        "--format", "-f",
        default=OutputFormat.TEXT.value,
        help="Output format: text, html, or json (default: text)",
    )
    parser_render.add_argument(
        "--out", "-o",
        help="Write output to this file instead of standard output",
    )
    parser_render.add_argument(
        "--indent",
        type=int,
        help="Pretty-print JSON with this indentation",
    )

    subparsers.add_parser("topics", help="List section titles")

    parser_show = subparsers.add_parser("show", help="Show one section by topic name or prefix")
    parser_show.add_argument("topic", help="Section title or title prefix (case-insensitive)")
    parser_show.add_argument(
        "--format", "-f",
        default=OutputFormat.TEXT.value,
        help="Output format: text, html, or json (default: text)",
    )

    parser_search = subparsers.add_parser("search", help="Search questions, answers, code and tables")
    parser_search.add_argument("term", help="Text to look for (case-insensitive)")

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Application entry point."""
    args = parse_args(argv)

    try:
        log_path = _resolve_path(args.log, "--log") if args.log else None
        source_path = _resolve_path(args.source, "--source")
    except StartupValidationError as exc:
        _die(str(exc))

    setup_logging(log_path)

    try:
        exit_code = run_command(args, source_path)
    except CheatsheetError as exc:
        log_event("command_failed", level=logging.ERROR, command=args.command, error=str(exc))
        print(f"{STDERR_ERROR_PREFIX}{exc}", file=sys.stderr)
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        log_event("command_failed", level=logging.ERROR, command=args.command, error=repr(exc))
        print(f"{STDERR_ERROR_PREFIX}Unexpected: {exc}", file=sys.stderr)
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


def run_command(args: argparse.Namespace, source_path: Path) -> int:
    """Run the parsed subcommand against the document at source_path."""
    if args.command == "render":
        # Validate the format before touching the source.
        fmt = OutputFormat.parse(args.format)
        document = load_path(source_path)
        content = render(document, fmt, indent=args.indent)
        if args.out:
            out_path = _resolve_path(args.out, "--out")
            if write_output(content, out_path):
                print(f"{STDOUT_WRITTEN_PREFIX}{out_path}")
            else:
                print(f"{STDOUT_UNCHANGED_PREFIX}{out_path}")
        else:
            _write_stdout(content)
        return 0

    if args.command == "show":
        fmt = OutputFormat.parse(args.format)
        document = load_path(source_path)
        section = find_by_topic(document, args.topic)
        if section is None:
            print(f"{STDERR_TOPIC_NOT_FOUND_PREFIX}{args.topic}", file=sys.stderr)
            return 1
        _write_stdout(render_section(section, fmt))
        return 0

    document = load_path(source_path)
    if args.command == "topics":
        print_segment(format_topic_list(document))
    else:
        print_segment(format_search_results(search(document, args.term)))
    return 0


def _write_stdout(content: str) -> None:
    sys.stdout.write(content if content.endswith("\n") else content + "\n")


def _resolve_path(raw: str, arg_name: str) -> Path:
    try:
        return map_path(raw)
    except PathMappingError as exc:
        raise StartupValidationError(f"{arg_name} path is invalid: {exc}") from exc


def _die(message: str) -> NoReturn:
    print(f"{STDERR_ERROR_PREFIX}{message}", file=sys.stderr)
    print(CLI_HELP_HINT, file=sys.stderr)
    sys.exit(1)
