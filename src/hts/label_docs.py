# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Markdown documentation of the labels held in a label store."""

import logging
from collections.abc import Iterable

from hts.labels import LabelStore
from hts.model import LabelRecord
from hts.report import escape_cell

logger = logging.getLogger(__name__)


def group_by_scope(
    records: Iterable[LabelRecord],
) -> dict[str, dict[str, dict[str, str]]]:
    """Group records as ``scope -> key -> language_code -> text``."""
    grouped: dict[str, dict[str, dict[str, str]]] = {}
    for record in records:
        translations = grouped.setdefault(record.scope, {}).setdefault(record.key, {})
        translations[record.language_code] = record.translated_text
    return grouped


def render_label_docs(
    records: Iterable[LabelRecord],
    languages: tuple[str, ...] = ("en", "zh"),
    include_type_definitions: bool = True,
) -> str:
    """Render a label catalogue with one table per scope.

    Args:
        records: Stored label records.
        languages: Language columns, in display order.
        include_type_definitions: Append a TypeScript interface per scope.

    Returns:
        Markdown document.
    """
    grouped = group_by_scope(records)
    lines = [
        "# 标签系统文档",
        "",
        "## 概述",
        "",
        f"共 {len(grouped)} 个作用域，"
        f"{sum(len(keys) for keys in grouped.values())} 个标签键。",
        "",
        "## 标签列表",
        "",
    ]
    headers = [_language_title(code) for code in languages]
    for scope in sorted(grouped):
        lines.extend([f"### {scope}", ""])
        lines.append(f"| 标签键 | {' | '.join(headers)} |")
        lines.append(f"|--------|{'|'.join('------' for _ in headers)}|")
        for key in sorted(grouped[scope]):
            translations = grouped[scope][key]
            cells = [escape_cell(translations.get(code, "")) for code in languages]
            lines.append(f"| {key} | {' | '.join(cells)} |")
        lines.append("")
    if include_type_definitions:
        lines.extend(["## 类型定义", ""])
        for scope in sorted(grouped):
            lines.extend([f"### {scope}", "", "```typescript"])
            lines.append(f"interface {scope}Labels {{")
            lines.extend(f"  {key}: string;" for key in sorted(grouped[scope]))
            lines.extend(["}", "```", ""])
    return "\n".join(lines)


def generate_label_docs(
    store: LabelStore, include_type_definitions: bool = True
) -> str:
    """Render documentation for every record in a store.

    Raises:
        StoreWriteError: If the store cannot be read.
    """
    records = list(store.iter_records())
    logger.info(f"Generating label documentation (records={len(records)})")
    return render_label_docs(records, include_type_definitions=include_type_definitions)


def _language_title(code: str) -> str:
    return {"en": "英文", "zh": "中文"}.get(code, code)
