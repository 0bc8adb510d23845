# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Detection strategies for hardcoded UI text."""

from hts.config import ScanConfig
from hts.detector import DetectionStrategy
from hts.detectors.line import LineDetector
from hts.detectors.tree import ParseError, TreeSitterDetector
from hts.ignore import IgnorePatternFilter


def build_strategies(
    config: ScanConfig, ignore_filter: IgnorePatternFilter | None = None
) -> list[DetectionStrategy]:
    """Instantiate the configured strategies in priority order."""
    ignore_filter = ignore_filter or IgnorePatternFilter(
        reference_name=config.reference_name
    )
    strategies: list[DetectionStrategy] = []
    for name in config.strategies:
        if name == "ast":
            strategies.append(TreeSitterDetector(config, ignore_filter))
        else:
            strategies.append(LineDetector(config, ignore_filter))
    return strategies


__all__ = [
    "LineDetector",
    "ParseError",
    "TreeSitterDetector",
    "build_strategies",
]
