# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Replace migrated text spans with label references."""

import logging
from dataclasses import dataclass, field

from hts.model import Occurrence

logger = logging.getLogger(__name__)


class RewriteError(RuntimeError):
    """Represent an edit whose span no longer matches the source text."""


class AmbiguousSpanError(RuntimeError):
    """Represent an edit that overlaps an edit already applied."""


@dataclass(frozen=True)
class Edit:
    """Describe one span replacement.

    Args:
        start: First replaced text offset.
        end: Offset past the last replaced character.
        replacement: Text inserted in place of the span.
        expected: Text the span must hold before replacement.
    """

    start: int
    end: int
    replacement: str
    expected: str


@dataclass(frozen=True)
class RewriteResult:
    """Store rewritten text and the edits that did not apply.

    Args:
        text: Source text after all applied edits.
        applied: Edits applied, rightmost first.
        dropped: Overlap errors for edits that were skipped.
    """

    text: str
    applied: list[Edit]
    dropped: list[AmbiguousSpanError] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


def reference_for(key: str, style: str, reference_name: str = "labels") -> str:
    """Render the label reference expression for one key."""
    reference = f"{reference_name}.{key}"
    return f"{{{reference}}}" if style == "jsx_expression" else reference


def build_edit(
    occurrence: Occurrence, source_text: str, key: str, reference_name: str = "labels"
) -> Edit:
    """Build the edit that migrates one occurrence.

    Args:
        occurrence: Rewritable occurrence.
        source_text: Text the occurrence was detected in.
        key: Synthesized label key.
        reference_name: Object name used in the reference.

    Returns:
        Edit covering the occurrence's replace span.

    Raises:
        RewriteError: If the occurrence cannot be rewritten.
    """
    if occurrence.replace_span is None:
        raise RewriteError(
            f"Occurrence is not rewritable: {occurrence.file_path}:"
            f"{occurrence.line}:{occurrence.column}"
        )
    start, end = occurrence.replace_span
    return Edit(
        start=start,
        end=end,
        replacement=reference_for(key, occurrence.reference_style, reference_name),
        expected=source_text[start:end],
    )


def rewrite_source(source_text: str, edits: list[Edit]) -> RewriteResult:
    """Apply edits from the rightmost start offset to the leftmost.

    Only text right of an applied edit shifts, so the offsets of every edit
    still pending stay valid. An edit overlapping one already applied is
    dropped. Identical duplicate edits collapse into one.

    Args:
        source_text: Text all edit offsets refer to.
        edits: Edits in any order.

    Returns:
        Rewritten text plus the applied and dropped edits.

    Raises:
        RewriteError: If any edit's span does not hold its expected text;
            no edit is applied in that case.
    """
    for edit in edits:
        if edit.start < 0 or edit.end > len(source_text) or edit.start > edit.end:
            raise RewriteError(
                f"Edit span [{edit.start}, {edit.end}) outside text of length "
                f"{len(source_text)}"
            )
        actual = source_text[edit.start : edit.end]
        if actual != edit.expected:
            logger.warning(
                f"Stale edit span (start={edit.start} end={edit.end} "
                f"expected={edit.expected!r} actual={actual!r})"
            )
            raise RewriteError(
                f"Span [{edit.start}, {edit.end}) holds {actual!r}, "
                f"expected {edit.expected!r}"
            )

    ordered = sorted(set(edits), key=lambda item: (item.start, item.end), reverse=True)
    applied: list[Edit] = []
    dropped: list[AmbiguousSpanError] = []
    chunks: list[str] = []
    cursor = len(source_text)
    for edit in ordered:
        if edit.end > cursor:
            message = (
                f"Edit [{edit.start}, {edit.end}) overlaps an applied edit "
                f"starting at {cursor}; dropped"
            )
            logger.warning(message)
            dropped.append(AmbiguousSpanError(message))
            continue
        chunks.append(source_text[edit.end : cursor])
        chunks.append(edit.replacement)
        cursor = edit.start
        applied.append(edit)
    chunks.append(source_text[:cursor])
    return RewriteResult(
        text="".join(reversed(chunks)), applied=applied, dropped=dropped
    )
