# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""CLI harness for hardcoded text detection, migration, and label docs."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, TextIO, cast

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table
from rich.text import Text

from hts.config import DEFAULT_DIRS_TO_SCAN, OutputFormat, ScanConfig
from hts.label_docs import generate_label_docs
from hts.labels import StoreWriteError
from hts.migrator import AbortSignal, LabelMigrator, NoSourceFilesError
from hts.model import DetectionRun, MigrationResult, StrategyName
from hts.report import (
    ReportWriteError,
    build_detection_payload,
    build_migration_payload,
    render_detection_markdown,
    render_migration_markdown,
    write_report,
)
from hts.store import SQLiteLabelStore

logger = logging.getLogger(__name__)

SUGGESTIONS: tuple[str, ...] = (
    "Replace hardcoded text with labels from the multilingual system",
    "Use the useLocalizedView hook for page components",
    "Use the useComponentLabels hook for shared components",
    "Define label types in the appropriate interface files",
    "Add the new labels to the database for all supported languages",
)

CLASSIFICATION_TITLES: dict[str, str] = {
    "cjk": "Chinese",
    "jsx_text": "English",
    "jsx_attribute": "English attribute",
}


class ValidationError(RuntimeError):
    """Represent user input validation failure."""


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="hts")
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect_parser = subparsers.add_parser(
        "detect", help="Report hardcoded text without changing files."
    )
    _add_scan_arguments(detect_parser)
    detect_parser.add_argument(
        "--report", help="Optional Markdown report output path."
    )

    migrate_parser = subparsers.add_parser(
        "migrate", help="Move hardcoded text into the label store and rewrite files."
    )
    _add_scan_arguments(migrate_parser)
    migrate_parser.add_argument(
        "--db", required=True, help="SQLite label store path."
    )
    migrate_parser.add_argument(
        "--report", help="Optional Markdown migration report output path."
    )

    docs_parser = subparsers.add_parser(
        "docs", help="Render Markdown documentation of stored labels."
    )
    docs_parser.add_argument("--db", required=True, help="SQLite label store path.")
    docs_parser.add_argument("--output", help="Optional output file path.")
    docs_parser.add_argument(
        "--no-types",
        action="store_true",
        help="Omit TypeScript interface definitions.",
    )
    return parser


def _add_scan_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root", default="src", help="Root directory scan directories are under."
    )
    parser.add_argument(
        "--dir",
        action="append",
        dest="dirs",
        help="Directory to scan, relative to the root; repeatable.",
    )
    parser.add_argument(
        "--format", choices=("text", "json"), default="text", help="Output format."
    )
    parser.add_argument(
        "--no-chinese", action="store_true", help="Skip CJK text detection."
    )
    parser.add_argument(
        "--no-english", action="store_true", help="Skip English JSX text detection."
    )
    parser.add_argument(
        "--no-line-numbers",
        action="store_true",
        help="Hide line and column numbers in text output.",
    )
    parser.add_argument(
        "--strategy",
        default="ast,line",
        help="Comma-separated detection strategies from ast,line.",
    )
    parser.add_argument(
        "--min-length", type=int, default=2, help="Minimum text length."
    )
    parser.add_argument(
        "--language", help="Language code for stored labels (default: zh or en)."
    )
    parser.add_argument(
        "--default-scope", default="common", help="Scope without enclosing name."
    )
    parser.add_argument(
        "--workers", type=int, default=1, help="Files processed concurrently."
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Stop scheduling new files after this many seconds.",
    )


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.command == "detect":
        return _run_detect(args=args, stdout=stdout, stderr=stderr)
    if args.command == "migrate":
        return _run_migrate(args=args, stdout=stdout, stderr=stderr)
    if args.command == "docs":
        return _run_docs(args=args, stdout=stdout, stderr=stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def build_config(args: argparse.Namespace) -> ScanConfig:
    """Map parsed scan arguments onto a validated configuration.

    Raises:
        ValidationError: If paths or tunables are invalid.
    """
    root = Path(args.root).resolve()
    if not root.is_dir():
        raise ValidationError(f"Root path must be a directory: {root}")
    dirs = (
        tuple(_strip_root_prefix(entry) for entry in args.dirs)
        if args.dirs
        else DEFAULT_DIRS_TO_SCAN
    )
    strategies = tuple(
        cast(StrategyName, name.strip())
        for name in args.strategy.split(",")
        if name.strip()
    )
    try:
        return ScanConfig(
            root_dir=root,
            dirs_to_scan=dirs,
            min_text_length=args.min_length,
            detect_cjk=not args.no_chinese,
            detect_jsx_english=not args.no_english,
            output_format=cast(OutputFormat, args.format),
            include_line_numbers=not args.no_line_numbers,
            strategies=strategies,
            default_scope=args.default_scope,
            language_code=args.language,
            max_workers=args.workers,
        )
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc


def _run_detect(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    try:
        config = build_config(args)
        abort = AbortSignal(timeout_seconds=args.timeout)
    except (ValidationError, ValueError) as exc:
        logger.warning(f"Validation failed (error={exc})")
        stderr.write(f"{exc}\n")
        return 2
    console = Console(
        file=stdout, force_terminal=False, color_system="truecolor", highlight=False
    )
    if config.output_format == "text":
        console.print("Scanning for hardcoded text...")
        console.print(f"Directories to scan: {', '.join(config.dirs_to_scan)}")

    try:
        detection = LabelMigrator(config, abort=abort).detect_directory()
    except NoSourceFilesError as exc:
        logger.warning(f"Detection failed (error={exc})")
        stderr.write(f"{exc}\n")
        return 2

    if config.output_format == "json":
        _write_json(build_detection_payload(detection), console=console)
    else:
        _write_detection_table(
            detection, console=console, include_line_numbers=config.include_line_numbers
        )
    if args.report:
        try:
            write_report(
                Path(args.report),
                render_detection_markdown(
                    detection, include_line_numbers=config.include_line_numbers
                ),
            )
        except ReportWriteError as exc:
            stderr.write(f"{exc}\n")
            return 2
    return 0


def _run_migrate(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    try:
        config = build_config(args)
        abort = AbortSignal(timeout_seconds=args.timeout)
    except (ValidationError, ValueError) as exc:
        logger.warning(f"Validation failed (error={exc})")
        stderr.write(f"{exc}\n")
        return 2
    console = Console(
        file=stdout, force_terminal=False, color_system="truecolor", highlight=False
    )
    store = SQLiteLabelStore(Path(args.db))
    migrator = LabelMigrator(config, store=store, abort=abort)
    try:
        result = migrator.migrate_directory()
    except NoSourceFilesError as exc:
        logger.warning(f"Migration failed (error={exc})")
        stderr.write(f"{exc}\n")
        return 2

    if config.output_format == "json":
        _write_json(build_migration_payload(result), console=console)
    else:
        _write_migration_summary(result, console=console)
    if args.report:
        try:
            write_report(Path(args.report), render_migration_markdown(result))
        except ReportWriteError as exc:
            stderr.write(f"{exc}\n")
            return 2
    return 0


def _run_docs(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    store = SQLiteLabelStore(Path(args.db))
    try:
        document = generate_label_docs(
            store, include_type_definitions=not args.no_types
        )
    except StoreWriteError as exc:
        logger.warning(f"Label documentation failed (error={exc})")
        stderr.write(f"Cannot read label store: {exc}\n")
        return 2
    if args.output:
        try:
            write_report(Path(args.output), document)
        except ReportWriteError as exc:
            stderr.write(f"{exc}\n")
            return 2
        return 0
    stdout.write(document)
    return 0


def _write_json(payload: dict[str, Any], console: Console) -> None:
    console.print(
        json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False),
        markup=False,
        highlight=False,
        emoji=False,
        soft_wrap=True,
    )


def _write_detection_table(
    detection: DetectionRun, console: Console, include_line_numbers: bool
) -> None:
    """Write findings grouped by file, then warnings and suggestions.

    Args:
        detection: Detection results.
        console: Output console.
        include_line_numbers: Whether to include line and column columns.
    """
    scans = [scan for scan in detection.scans if scan.findings]
    if not scans:
        console.print("No hardcoded text detected!")
    else:
        console.print(
            f"Detected {detection.occurrence_count} potential hardcoded text "
            f"issues in {len(scans)} files:"
        )
    for scan in scans:
        console.rule(
            f"{scan.file_path} ({len(scan.findings)} issues)",
            style=Style(color="cyan"),
            characters="-",
        )
        table = Table(show_header=True, show_lines=True, expand=True)
        if include_line_numbers:
            table.add_column("line", ratio=1, justify="right", overflow="fold")
            table.add_column("column", ratio=1, justify="right", overflow="fold")
        table.add_column("type", ratio=2, overflow="fold")
        table.add_column("text", ratio=5, overflow="fold")
        table.add_column("key", ratio=4, overflow="fold")
        table.add_column("scope", ratio=3, overflow="fold")
        for finding in scan.findings:
            occurrence = finding.occurrence
            row: list[str | Text] = []
            if include_line_numbers:
                row.extend([str(occurrence.line), str(occurrence.column)])
            row.extend(
                [
                    CLASSIFICATION_TITLES[occurrence.classification],
                    Text(occurrence.raw_text),
                    finding.identity.key if finding.identity else "",
                    finding.identity.scope if finding.identity else "",
                ]
            )
            table.add_row(*row)
        console.print(table)

    warnings = list(detection.warnings)
    for scan in detection.scans:
        warnings.extend(scan.warnings)
    for warning in warnings:
        console.print(f"warning: {warning}", markup=False, highlight=False)
    if scans:
        console.print("Suggestions:")
        for number, suggestion in enumerate(SUGGESTIONS, start=1):
            console.print(f"{number}. {suggestion}")


def _write_migration_summary(result: MigrationResult, console: Console) -> None:
    for error in result.errors:
        console.print(f"error: {error}", markup=False, highlight=False)
    for warning in result.warnings:
        console.print(f"warning: {warning}", markup=False, highlight=False)
    console.print(
        f"migrated_labels_count={result.migrated_labels_count} "
        f"migrated_files_count={result.migrated_files_count} "
        f"errors={len(result.errors)} warnings={len(result.warnings)}"
    )
    console.print(f"status={'success' if result.success else 'failed'}")


def _strip_root_prefix(entry: str) -> str:
    normalized = entry.replace("\\", "/").rstrip("/")
    return normalized[len("src/") :] if normalized.startswith("src/") else normalized


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
