# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Machine-readable and Markdown reports for detection and migration runs."""

import logging
import re
from dataclasses import asdict
from pathlib import Path
from typing import Any

from hts.model import DetectionRun, FileScan, Finding, MigrationResult

logger = logging.getLogger(__name__)

NO_FINDINGS_TEXT = "未发现硬编码文本"

_DETECTION_HEADER = "| 行号 | 列号 | 硬编码文本 | 建议的标签键 | 建议的作用域 |"
_DETECTION_RULE = "|------|------|------------|--------------|--------------|"
_LINE_BREAKS = re.compile(r"\r\n|\r|\n")


class ReportWriteError(RuntimeError):
    """Represent a report file that cannot be written."""


def escape_cell(value: str) -> str:
    """Make text safe for a single Markdown table cell."""
    escaped = value.replace("|", "\\|")
    return _LINE_BREAKS.sub("<br>", escaped)


def build_migration_payload(result: MigrationResult) -> dict[str, Any]:
    """Convert a migration result into a JSON-serializable mapping."""
    return asdict(result)


def render_migration_markdown(result: MigrationResult) -> str:
    """Render a migration result as a Markdown report.

    Args:
        result: Merged run result.

    Returns:
        Markdown with status, counters, errors, and warnings sections.
    """
    lines = ["# 标签迁移报告", "", "## 迁移状态", ""]
    lines.append("✅ 迁移成功" if result.success else "❌ 迁移失败")
    lines.extend(
        [
            "",
            "## 迁移统计",
            "",
            f"- 迁移的标签数量: {result.migrated_labels_count}",
            f"- 迁移的文件数量: {result.migrated_files_count}",
            "",
        ]
    )
    if result.errors:
        lines.extend(["## 错误", ""])
        lines.extend(f"- {_single_line(error)}" for error in result.errors)
        lines.append("")
    if result.warnings:
        lines.extend(["## 警告", ""])
        lines.extend(f"- {_single_line(warning)}" for warning in result.warnings)
        lines.append("")
    return "\n".join(lines)


def build_detection_payload(run: DetectionRun) -> dict[str, Any]:
    """Convert detection results into a JSON-serializable mapping.

    Files without findings or warnings are omitted.
    """
    files = [
        {
            "file_path": scan.file_path,
            "occurrences": [_finding_payload(finding) for finding in scan.findings],
            "warnings": list(scan.warnings),
        }
        for scan in run.scans
        if scan.findings or scan.warnings
    ]
    return {
        "files_scanned": len(run.scans),
        "occurrence_count": run.occurrence_count,
        "files": files,
        "warnings": list(run.warnings),
    }


def render_detection_markdown(
    run: DetectionRun, include_line_numbers: bool = True
) -> str:
    """Render detection results as per-file Markdown tables.

    Args:
        run: Detection results.
        include_line_numbers: Keep the line and column columns.

    Returns:
        Markdown document; an explicit no-findings line when nothing matched.
    """
    lines = ["# 硬编码文本检测报告", ""]
    scans_with_findings = [scan for scan in run.scans if scan.findings]
    if not scans_with_findings:
        lines.extend([NO_FINDINGS_TEXT, ""])
    for scan in scans_with_findings:
        lines.extend([f"## {scan.file_path}", ""])
        lines.extend(_detection_table(scan, include_line_numbers))
        lines.append("")
    warnings = list(run.warnings)
    for scan in run.scans:
        warnings.extend(scan.warnings)
    if warnings:
        lines.extend(["## 警告", ""])
        lines.extend(f"- {_single_line(warning)}" for warning in warnings)
        lines.append("")
    return "\n".join(lines)


def write_report(path: Path, text: str) -> None:
    """Write a report file, creating parent directories.

    Raises:
        ReportWriteError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        logger.warning(f"Failed writing report (path={path} error={exc})")
        raise ReportWriteError(f"Cannot write report {path}: {exc}") from exc


def _detection_table(scan: FileScan, include_line_numbers: bool) -> list[str]:
    if include_line_numbers:
        rows = [_DETECTION_HEADER, _DETECTION_RULE]
    else:
        rows = [
            "| 硬编码文本 | 建议的标签键 | 建议的作用域 |",
            "|------------|--------------|--------------|",
        ]
    for finding in scan.findings:
        occurrence = finding.occurrence
        key = finding.identity.key if finding.identity else ""
        scope = finding.identity.scope if finding.identity else ""
        cells = [escape_cell(occurrence.raw_text), escape_cell(key), escape_cell(scope)]
        if include_line_numbers:
            cells = [str(occurrence.line), str(occurrence.column), *cells]
        rows.append(f"| {' | '.join(cells)} |")
    return rows


def _finding_payload(finding: Finding) -> dict[str, Any]:
    occurrence = finding.occurrence
    return {
        "line": occurrence.line,
        "column": occurrence.column,
        "span": list(occurrence.span),
        "text": occurrence.raw_text,
        "classification": occurrence.classification,
        "strategy": occurrence.strategy,
        "context_name": occurrence.context_name,
        "rewritable": occurrence.is_rewritable,
        "suggested_key": finding.identity.key if finding.identity else None,
        "suggested_scope": finding.identity.scope if finding.identity else None,
    }


def _single_line(text: str) -> str:
    return _LINE_BREAKS.sub(" ", text)
