"""Command line interface for trace-deck.

Status lines, headers and tables are written to stderr through a Rich
console; document payloads (JSON, extracted text) go to stdout so they can be
piped.
"""

from __future__ import annotations

import argparse
import time
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from config.settings import settings
from . import __version__
from .classifiers.format_classifier import FORMAT_DESCRIPTIONS, FORMAT_FAMILIES
from .errors import DocumentIOError, TraceDeckError
from .models import DocumentResult
from .pipeline import process_document
from .utils.batch import collect_files, run_batch
from .utils.formatting import format_duration, format_size
from .utils.logging_config import configure_logging

APP_NAME = "trace-deck"

COMMANDS: Sequence[Tuple[str, str]] = (
    ("process", "Full document analysis"),
    ("extract", "Text extraction"),
    ("batch", "Multi-file processing"),
    ("formats", "Supported formats"),
    ("info", "System information"),
    ("export", "Export results"),
)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog=APP_NAME, description="Advanced document processing engine.")
    p.add_argument("--version", action="version", version=f"{APP_NAME} {__version__}")
    p.add_argument(
        "--log-level",
        default=None,
        help="Console log level (default: WARNING, DEBUG with --verbose).",
    )
    sub = p.add_subparsers(dest="command", metavar="COMMAND")

    proc = sub.add_parser("process", help="Process a document with full analysis")
    proc.add_argument("file", type=Path)
    proc.add_argument("-f", "--format", choices=["json", "pretty"], default="pretty", help="JSON layout.")
    proc.add_argument("-t", "--timing", action="store_true", help="Show performance metrics.")
    proc.add_argument("-v", "--verbose", action="store_true", help="Show document statistics.")

    ext = sub.add_parser("extract", help="Extract text content from a document")
    ext.add_argument("file", type=Path)
    ext.add_argument("-t", "--text-only", action="store_true", help="Print only the extracted text.")

    batch = sub.add_parser("batch", help="Process every file in a directory")
    batch.add_argument("dir", type=Path)
    batch.add_argument("-e", "--ext", default=None, help="Only process files with this extension.")
    batch.add_argument("-w", "--workers", type=int, default=None, help="Concurrent documents.")
    batch.add_argument("--timeout", type=float, default=None, help="Per-file timeout in seconds.")

    sub.add_parser("formats", help="Show supported formats")
    sub.add_parser("info", help="Display application information")

    exp = sub.add_parser("export", help="Write processing results to a JSON file")
    exp.add_argument("file", type=Path)
    exp.add_argument("-o", "--output", type=Path, required=True, help="Destination JSON file.")
    return p


# ---------------------------------------------------------------------------
# Console helpers
# ---------------------------------------------------------------------------

def _header(console: Console) -> None:
    console.print()
    console.print(f"[bold cyan]{APP_NAME}[/] [bright_black]v{__version__}[/]")
    console.rule(style="cyan")


def _status(console: Console, kind: str, message: str) -> None:
    symbol = {
        "ok": "[green][+][/]",
        "err": "[red][-][/]",
        "warn": "[yellow][!][/]",
        "info": "[bright_blue][*][/]",
    }.get(kind, "[bright_black][?][/]")
    console.print(f"  {symbol} {escape(message)}")


def _pairs(console: Console, items: Iterable[Tuple[str, str]]) -> None:
    for key, value in items:
        console.print(f"  [bright_black]{escape(key + ':'):<25}[/] {escape(value)}")


def _table(title: str, headers: Sequence[str], rows: Iterable[Sequence[str]]) -> Table:
    table = Table(title=title, title_style="bold cyan", title_justify="left")
    for header in headers:
        table.add_column(header, style="bold" if header == headers[0] else None)
    for row in rows:
        table.add_row(*row)
    return table


def _require_file(console: Console, path: Path) -> bool:
    if not path.exists():
        _status(console, "err", f"File not found: {path}")
        return False
    return True


def _run(console: Console, path: Path) -> Optional[DocumentResult]:
    try:
        return process_document(path)
    except TraceDeckError as exc:
        _status(console, "err", str(exc))
        return None


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _cmd_process(args: argparse.Namespace, console: Console) -> int:
    if not _require_file(console, args.file):
        return 1

    _header(console)
    _status(console, "info", "Processing document...")
    _pairs(console, [
        ("Path", str(args.file)),
        ("Size", format_size(args.file.stat().st_size)),
        ("Type", args.file.suffix.lstrip(".") or "unknown"),
    ])

    start = time.perf_counter()
    result = _run(console, args.file)
    if result is None:
        return 1
    elapsed_ms = int((time.perf_counter() - start) * 1000)
    _status(console, "ok", f"Processing completed in {format_duration(elapsed_ms)}")

    print(result.to_json(indent=None if args.format == "json" else 2))

    if args.timing:
        console.rule(style="bright_black")
        _pairs(console, [
            ("Pipeline Time", format_duration(result.processing_time_ms)),
            ("Total Time", format_duration(elapsed_ms)),
            ("Status", "Completed"),
        ])
    if args.verbose:
        console.rule(style="bright_black")
        structure = result.processed.structure
        _pairs(console, [
            ("Text Blocks", str(len(result.processed.text_blocks))),
            ("Visual Elements", str(len(result.processed.visual_elements))),
            ("Tables", str(len(result.extracted.tables))),
            ("Sections", str(len(structure.sections))),
            ("Pages", str(structure.total_pages)),
            ("Language", structure.language or "unknown"),
            ("Analyzed Size", format_size(result.extracted.metadata.file_size)),
        ])
    return 0


def _cmd_extract(args: argparse.Namespace, console: Console) -> int:
    if not _require_file(console, args.file):
        return 1

    if not args.text_only:
        _header(console)
        _status(console, "info", "Extracting text...")
        _pairs(console, [("Path", str(args.file))])

    result = _run(console, args.file)
    if result is None:
        return 1

    extracted = result.extracted
    print(extracted.text)
    if args.text_only:
        return 0

    meta = extracted.metadata
    rows: List[Tuple[str, str]] = [
        ("Type", meta.file_type.value),
        ("Size", format_size(meta.file_size)),
    ]
    if meta.pages is not None:
        rows.append(("Pages", str(meta.pages)))
    for label, value in (("Title", meta.title), ("Author", meta.author), ("Created", meta.created_at)):
        if value is not None:
            rows.append((label, value))
    console.print(_table("Document Metadata", ["Property", "Value"], rows))

    if extracted.images:
        _status(console, "info", f"Found {len(extracted.images)} images")
    if extracted.tables:
        _status(console, "info", f"Found {len(extracted.tables)} tables")
    return 0


def _cmd_batch(args: argparse.Namespace, console: Console) -> int:
    if not args.dir.is_dir():
        _status(console, "err", f"Directory not found: {args.dir}")
        return 1

    _header(console)
    _status(console, "info", "Starting batch processing...")
    workers = args.workers or settings.batch.max_workers
    config = [("Directory", str(args.dir)), ("Workers", str(workers))]
    if args.ext:
        config.append(("Filter", args.ext))
    _pairs(console, config)

    files = collect_files(args.dir, args.ext)
    if not files:
        _status(console, "warn", "No files found")
        return 0
    _status(console, "info", f"Found {len(files)} files")

    with Progress(
        TextColumn("  [progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=False,
    ) as progress:
        task = progress.add_task("Processing", total=len(files))
        report = run_batch(
            files,
            max_workers=workers,
            timeout_s=args.timeout,
            on_progress=lambda _outcome: progress.advance(task),
        )

    console.print(_table("Results", ["Metric", "Count"], [
        ("Total Files", str(report.total)),
        ("Processed", str(report.processed)),
        ("Failed", str(report.failed)),
        ("Success Rate", f"{report.success_rate:.1f}%"),
    ]))
    for outcome in report.outcomes:
        if not outcome.ok:
            _status(console, "err", f"{outcome.path.name}: {outcome.error}")

    if report.failed == 0:
        _status(console, "ok", "All files processed successfully")
    else:
        _status(console, "warn", f"{report.failed} files failed")
    return 0


def _cmd_formats(args: argparse.Namespace, console: Console) -> int:
    _header(console)
    rows = [
        (fmt.value.upper(), f".{fmt.value}", FORMAT_FAMILIES[fmt].value, FORMAT_DESCRIPTIONS[fmt])
        for fmt in FORMAT_DESCRIPTIONS
    ]
    console.print(_table("Supported Formats", ["Format", "Extension", "Family", "Description"], rows))
    return 0


def _cmd_info(args: argparse.Namespace, console: Console) -> int:
    _header(console)
    _pairs(console, [
        ("Name", APP_NAME),
        ("Version", __version__),
        ("Environment", settings.environment),
        ("Workers", str(settings.batch.max_workers)),
        ("Timeout", f"{settings.batch.timeout_s:g} s"),
        ("Max File Size", format_size(settings.processing.max_file_size_mb * 1024 * 1024)),
    ])
    formats = ", ".join(fmt.value.upper() for fmt in FORMAT_DESCRIPTIONS)
    console.print(_table("Capabilities", ["Category", "Features"], [
        ("Input", formats),
        ("Output", "JSON (structured)"),
        ("Processing", "Text, metadata, images, tables, sections, language"),
    ]))
    console.print(_table("Available Commands", ["Command", "Description"], COMMANDS))
    return 0


def _cmd_export(args: argparse.Namespace, console: Console) -> int:
    if not _require_file(console, args.file):
        return 1

    _header(console)
    _status(console, "info", f"Exporting {args.file} -> {args.output}")
    result = _run(console, args.file)
    if result is None:
        return 1
    try:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(result.to_json(indent=2), encoding="utf-8")
    except OSError as exc:
        _status(console, "err", str(DocumentIOError(f"{args.output}: {exc.strerror or exc}")))
        return 1
    except TraceDeckError as exc:
        _status(console, "err", str(exc))
        return 1
    _status(console, "ok", f"Wrote {format_size(args.output.stat().st_size)} to {args.output}")
    return 0


_HANDLERS = {
    "process": _cmd_process,
    "extract": _cmd_extract,
    "batch": _cmd_batch,
    "formats": _cmd_formats,
    "info": _cmd_info,
    "export": _cmd_export,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 2

    level = args.log_level or ("DEBUG" if getattr(args, "verbose", False) else "WARNING")
    configure_logging(settings.logging, level=level)

    console = Console(stderr=True, highlight=False)
    return _HANDLERS[args.command](args, console)


if __name__ == "__main__":
    raise SystemExit(main())
