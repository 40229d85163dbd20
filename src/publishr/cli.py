"""Command-line interface for PublishR documents.

Usage:
    publishr extract chapter.page              # list translatable segments
    publishr translate chapter.page -m tm.json # translate with a JSON memory
    publishr structure "Let's **try** it"      # show formatting structure
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from publishr import __version__, setup_logging
from publishr.config import get_settings
from publishr.filter.pipeline import ShortcutFilter, TranslationError, extract_segments
from publishr.formatting.formatter import Formatter

if TYPE_CHECKING:
    from collections.abc import Callable

    from publishr.config import FilterConfig

logger = logging.getLogger(__name__)

console = Console()


def _read_document(path: Path) -> str:
    # newline="" keeps CRLF/CR line breaks intact
    with path.open(encoding="utf-8", newline="") as handle:
        return handle.read()


def _load_memory(path: Path | None) -> dict[str, str]:
    """Load a JSON object mapping source segments to translations."""
    if path is None:
        return {}
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        msg = f"Translation memory must be a JSON object: {path}"
        raise ValueError(msg)
    return {str(source): str(target) for source, target in data.items()}


def memory_translator(memory: dict[str, str]) -> Callable[[str, str | None], str]:
    """Translate by exact lookup; unknown segments are kept as they are."""

    def _translate(text: str, _comment: str | None) -> str:
        return memory.get(text, text)

    return _translate


def _filter_config(plain: bool) -> FilterConfig:
    config = get_settings().filter
    if plain:
        config = config.model_copy(update={"plain_shortcuts": True})
    return config


def _extract(args: argparse.Namespace) -> None:
    text = _read_document(args.file)
    segments = extract_segments(text, _filter_config(args.plain))
    for number, segment in enumerate(segments, start=1):
        console.print(f"[dim]{number:>4}[/] {escape(segment)}", highlight=False)
    console.print(f"[green]{len(segments)} segment(s)[/]")


def _translate(args: argparse.Namespace) -> None:
    text = _read_document(args.file)
    memory = _load_memory(args.memory)
    result = ShortcutFilter(_filter_config(args.plain)).process_text(
        text, memory_translator(memory)
    )
    if args.output is None:
        sys.stdout.write(result)
        return
    with args.output.open("w", encoding="utf-8", newline="") as handle:
        handle.write(result)
    console.print(f"Wrote [bold]{args.output}[/]")


def _structure(args: argparse.Namespace) -> None:
    spans = Formatter().parse_structure(args.text, True, args.shortcuts)
    table = Table(title="Formatting structure")
    table.add_column("Begin", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Type")
    table.add_column("Element")
    table.add_column("Text")
    for span in spans:
        table.add_row(
            str(span.begin),
            str(span.end),
            span.block_type.value,
            span.element.value if span.element is not None else "",
            escape(span.text_of(args.text)),
        )
    console.print(table)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="publishr",
        description="Convert PublishR markup to translation shortcuts and back.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", help="List translatable segments.")
    extract.add_argument("file", type=Path)
    extract.add_argument(
        "--plain", action="store_true", help="Use legacy plain shortcuts."
    )
    extract.set_defaults(handler=_extract)

    translate = subparsers.add_parser(
        "translate", help="Translate a document with a JSON translation memory."
    )
    translate.add_argument("file", type=Path)
    translate.add_argument("-m", "--memory", type=Path, default=None)
    translate.add_argument("-o", "--output", type=Path, default=None)
    translate.add_argument(
        "--plain", action="store_true", help="Use legacy plain shortcuts."
    )
    translate.set_defaults(handler=_translate)

    structure = subparsers.add_parser(
        "structure", help="Show the formatting structure of a string."
    )
    structure.add_argument("text")
    structure.add_argument(
        "--shortcuts", action="store_true", help="Also report shortcut tags."
    )
    structure.set_defaults(handler=_structure)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = _build_parser().parse_args(argv)
    setup_logging(get_settings().app.log_dir)

    try:
        args.handler(args)
    except TranslationError as exc:
        console.print(f"[red]Error:[/] {escape(str(exc))}")
        sys.exit(1)
    except (OSError, ValueError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error:[/] {escape(str(exc))}")
        sys.exit(1)
