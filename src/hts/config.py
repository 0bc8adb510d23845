# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Scan and migration configuration."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from hts.model import StrategyName

logger = logging.getLogger(__name__)

OutputFormat = Literal["text", "json"]

DEFAULT_DIRS_TO_SCAN: tuple[str, ...] = ("components", "pages", "features")
DEFAULT_EXTENSIONS: tuple[str, ...] = (".tsx", ".ts", ".jsx", ".js")
DEFAULT_EXCLUDE_DIRS: tuple[str, ...] = ("node_modules", "dist", "build", ".git")
DEFAULT_STRATEGIES: tuple[StrategyName, ...] = ("ast", "line")

LOCALIZABLE_ATTRIBUTES: frozenset[str] = frozenset(
    {
        "placeholder",
        "title",
        "alt",
        "aria-label",
        "aria-description",
        "aria-placeholder",
        "label",
        "tooltip",
    }
)

COMMON_TAG_WORDS: frozenset[str] = frozenset(
    {
        "div", "span", "button", "input", "form", "label", "select", "option",
        "table", "tr", "td", "th", "ul", "li", "ol", "nav", "header", "footer",
        "main", "section", "article", "aside", "details", "summary", "figure",
        "figcaption", "time", "mark", "audio", "video", "source", "track",
        "canvas", "map", "area", "svg", "math", "data", "object", "param",
        "embed", "iframe",
    }
)

LABEL_IDENTITY_PROPERTIES: frozenset[str] = frozenset(
    {"labelKey", "scopeKey", "label_key", "scope_key"}
)


@dataclass(frozen=True)
class ScanConfig:
    """Describe one scan or migration run.

    Attributes:
        root_dir: Root directory that ``dirs_to_scan`` are relative to.
        dirs_to_scan: Sub-directories to scan; empty means the root itself.
        extensions: File suffixes to include.
        exclude_dirs: Directory names or gitignore-style patterns to skip.
        min_text_length: Minimum candidate length in characters.
        detect_cjk: Report runs of CJK ideographs.
        detect_jsx_english: Report English JSX text and attribute values.
        output_format: CLI output format.
        include_line_numbers: Show line numbers in text output.
        strategies: Detection strategies, in de-duplication priority order.
        localizable_attributes: JSX attributes whose values are user-facing.
        common_tag_words: Tag-like words never reported as English text.
        default_scope: Scope used when no enclosing declaration is known.
        language_code: Language for stored labels; ``None`` selects ``zh``
            for CJK text and ``en`` otherwise.
        reference_name: Object name used in rewritten references.
        max_workers: Number of files processed concurrently.
        respect_gitignore: Also skip paths matched by ``.gitignore`` files.
    """

    root_dir: Path
    dirs_to_scan: tuple[str, ...] = DEFAULT_DIRS_TO_SCAN
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    exclude_dirs: tuple[str, ...] = DEFAULT_EXCLUDE_DIRS
    min_text_length: int = 2
    detect_cjk: bool = True
    detect_jsx_english: bool = True
    output_format: OutputFormat = "text"
    include_line_numbers: bool = True
    strategies: tuple[StrategyName, ...] = DEFAULT_STRATEGIES
    localizable_attributes: frozenset[str] = LOCALIZABLE_ATTRIBUTES
    common_tag_words: frozenset[str] = COMMON_TAG_WORDS
    default_scope: str = "common"
    language_code: str | None = None
    reference_name: str = "labels"
    max_workers: int = 1
    respect_gitignore: bool = True

    def __post_init__(self) -> None:
        if self.min_text_length < 1:
            raise ValueError("min_text_length must be > 0")
        if self.max_workers <= 0:
            raise ValueError("max_workers must be > 0")
        if not self.strategies:
            raise ValueError("at least one detection strategy is required")
        unknown = sorted(set(self.strategies) - {"line", "ast"})
        if unknown:
            raise ValueError(f"Unsupported strategies: {', '.join(unknown)}")
        if self.output_format not in ("text", "json"):
            raise ValueError(f"Unsupported output format: {self.output_format}")
        if not self.default_scope:
            raise ValueError("default_scope must not be empty")
        if not self.reference_name.isidentifier():
            raise ValueError("reference_name must be an identifier")

    def language_for(self, classification: str) -> str:
        """Return the language code labels of a classification are stored as."""
        if self.language_code:
            return self.language_code
        return "zh" if classification == "cjk" else "en"
