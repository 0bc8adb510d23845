# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Detection strategy interface and result merging."""

from typing import Protocol

from hts.model import Occurrence, StrategyName
from hts.source import SourceFile


class DetectionStrategy(Protocol):
    """Source-text detector contract shared by the line and AST strategies."""

    name: StrategyName

    def scan(self, source: SourceFile) -> list[Occurrence]:
        """Return candidate occurrences found in one file."""


def union_occurrences(results: list[list[Occurrence]]) -> list[Occurrence]:
    """Merge strategy outputs, keeping the first occurrence per span.

    An occurrence from a later strategy that lies inside the replaced region
    of an earlier strategy's occurrence is dropped as well, so a partial CJK
    run is not reported next to the whole literal that contains it.

    Args:
        results: Occurrence lists in strategy priority order.

    Returns:
        De-duplicated occurrences sorted by position.
    """
    merged: dict[tuple[int, int], Occurrence] = {}
    for occurrences in results:
        covered = [item.replace_span or item.span for item in merged.values()]
        for occurrence in occurrences:
            if occurrence.span in merged:
                continue
            start, end = occurrence.span
            if any(
                outer_start <= start and end <= outer_end
                for outer_start, outer_end in covered
            ):
                continue
            merged[occurrence.span] = occurrence
    return sorted(merged.values(), key=lambda item: (item.span, item.strategy))
