# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Line-oriented regex detector for hardcoded UI text."""

import logging
import re

from hts.config import ScanConfig
from hts.ignore import IgnorePatternFilter, Span, literal_spans
from hts.model import Classification, Occurrence, ReferenceStyle, StrategyName
from hts.source import SourceFile, SourceLine

logger = logging.getLogger(__name__)

# CJK Unified Ideographs and Extension A. A run may start or end with CJK
# punctuation and may be joined across punctuation or whitespace.
CJK_CHARS = r"\u3400-\u4dbf\u4e00-\u9fff"
CJK_PUNCTUATION = r"\u3000-\u303f\uff00-\uffef"
CJK_RUN = re.compile(
    rf"[{CJK_PUNCTUATION}]*[{CJK_CHARS}]+"
    rf"(?:[\s{CJK_PUNCTUATION}]*[{CJK_CHARS}]+)*[{CJK_PUNCTUATION}]*"
)
HAS_CJK = re.compile(rf"[{CJK_CHARS}]")

# JSX text must sit between a tag that closes right before it and a tag that
# opens right after it; comparisons and generics never qualify.
_TAG_CLOSE = r"(?:<[A-Za-z][\w.:-]*(?:\s[^<>]*)?/?|</[A-Za-z][\w.:-]*\s*)>"
_JSX_TEXT = re.compile(rf"{_TAG_CLOSE}([^<>]+)(?=</?[A-Za-z])")
_ENDS_WITH_TAG = re.compile(rf"{_TAG_CLOSE}\s*$")
_STARTS_WITH_TAG = re.compile(r"^\s*</?[A-Za-z]")
_NON_MARKUP_SUFFIXES: frozenset[str] = frozenset({".ts", ".mts", ".cts"})
_JSX_EXPRESSION = re.compile(r"\{[^{}]*\}")
_ATTRIBUTE = re.compile(r"(?<![\w-])([\w:-]+)\s*=\s*([\"'])([^\"'{}]*)\2")
_JSX_ATTRIBUTE_PREFIX = re.compile(
    r"(?:<[A-Za-z][\w.:-]*\b[^<>]*\s|^\s*)[\w:-]+=$"
)
_CODE_PUNCTUATION = re.compile(r"[=;(){}\[\]&|`$]")
_ASCII_LETTER = re.compile(r"[A-Za-z]")


class LineDetector:
    """Detect hardcoded text by scanning raw lines.

    The detector is fast and approximate: it has no syntax tree, so enclosing
    declarations are unknown and every occurrence falls back to the default
    scope.
    """

    name: StrategyName = "line"

    def __init__(
        self, config: ScanConfig, ignore_filter: IgnorePatternFilter | None = None
    ) -> None:
        """Initialize the detector.

        Args:
            config: Scan configuration.
            ignore_filter: Suppression filter; defaults to the standard set.
        """
        self._config = config
        self._filter = ignore_filter or IgnorePatternFilter(
            reference_name=config.reference_name
        )

    def scan(self, source: SourceFile) -> list[Occurrence]:
        """Scan every line of a file.

        Args:
            source: Loaded source file.

        Returns:
            Occurrences in file order.
        """
        comments = self._filter.comment_spans(source.text)
        markup = source.path.suffix.lower() not in _NON_MARKUP_SUFFIXES
        occurrences: list[Occurrence] = []
        for line in source.lines():
            if not line.text.strip() or self._filter.line_is_suppressed(line.text):
                continue
            suppressed = self._filter.suppressed_spans(line.text)
            suppressed.extend(_line_relative(comments, line))
            literals = literal_spans(line.text)
            if self._config.detect_cjk:
                occurrences.extend(
                    self._scan_cjk(source, line, suppressed, literals, markup)
                )
            if not markup or not self._config.detect_jsx_english:
                continue
            if "<" in line.text:
                occurrences.extend(
                    self._scan_jsx_text(source, line, suppressed, literals)
                )
            occurrences.extend(
                self._scan_attributes(source, line, suppressed, literals)
            )
        return occurrences

    def _scan_cjk(
        self,
        source: SourceFile,
        line: SourceLine,
        suppressed: list[Span],
        literals: list[tuple[int, int, str]],
        markup: bool,
    ) -> list[Occurrence]:
        found: list[Occurrence] = []
        for match in CJK_RUN.finditer(line.text):
            raw = match.group(0)
            if len(raw) < self._config.min_text_length:
                continue
            if self._filter.overlaps(match.span(), suppressed):
                continue
            replace_span, style = _cjk_replacement(
                line.text, match.span(), literals, markup
            )
            found.append(
                self._occurrence(
                    source=source,
                    line=line,
                    span=match.span(),
                    raw=raw,
                    classification="cjk",
                    replace_span=replace_span,
                    style=style,
                )
            )
        return found

    def _scan_jsx_text(
        self,
        source: SourceFile,
        line: SourceLine,
        suppressed: list[Span],
        literals: list[tuple[int, int, str]],
    ) -> list[Occurrence]:
        found: list[Occurrence] = []
        for match in _JSX_TEXT.finditer(line.text):
            text_start = match.start(1)
            for chunk_start, chunk_end in _outside_expressions(match.group(1)):
                start = text_start + chunk_start
                end = text_start + chunk_end
                chunk = line.text[start:end]
                stripped = chunk.strip()
                if not stripped:
                    continue
                start += len(chunk) - len(chunk.lstrip())
                end = start + len(stripped)
                if not self._is_english_text(stripped):
                    continue
                if _inside_literal((start, end), literals):
                    continue
                if self._filter.overlaps((start, end), suppressed):
                    continue
                found.append(
                    self._occurrence(
                        source=source,
                        line=line,
                        span=(start, end),
                        raw=stripped,
                        classification="jsx_text",
                        replace_span=(start, end),
                        style="jsx_expression",
                    )
                )
        return found

    def _scan_attributes(
        self,
        source: SourceFile,
        line: SourceLine,
        suppressed: list[Span],
        literals: list[tuple[int, int, str]],
    ) -> list[Occurrence]:
        found: list[Occurrence] = []
        literal_starts = {start for start, _, _ in literals}
        for match in _ATTRIBUTE.finditer(line.text):
            if match.group(1).lower() not in self._config.localizable_attributes:
                continue
            value = match.group(3)
            if not self._is_english_text(value.strip()):
                continue
            if match.start(2) not in literal_starts:
                continue
            if not _JSX_ATTRIBUTE_PREFIX.search(line.text[: match.start(2)]):
                continue
            span = match.span(3)
            if self._filter.overlaps(span, suppressed):
                continue
            found.append(
                self._occurrence(
                    source=source,
                    line=line,
                    span=span,
                    raw=value,
                    classification="jsx_attribute",
                    replace_span=(match.start(2), match.end()),
                    style="jsx_expression",
                )
            )
        return found

    def _is_english_text(self, text: str) -> bool:
        if len(text) < self._config.min_text_length:
            return False
        if not _ASCII_LETTER.search(text) or HAS_CJK.search(text):
            return False
        if _CODE_PUNCTUATION.search(text):
            return False
        if text.lower() in self._config.common_tag_words:
            return False
        return not self._filter.is_non_text_value(text)

    def _occurrence(
        self,
        source: SourceFile,
        line: SourceLine,
        span: Span,
        raw: str,
        classification: Classification,
        replace_span: Span | None,
        style: ReferenceStyle,
    ) -> Occurrence:
        start, end = span
        return Occurrence(
            file_path=source.display_path,
            line=line.number,
            column=start + 1,
            span=(line.start + start, line.start + end),
            raw_text=raw,
            classification=classification,
            context_name=None,
            replace_span=(
                None
                if replace_span is None
                else (line.start + replace_span[0], line.start + replace_span[1])
            ),
            reference_style=style,
            strategy=self.name,
        )


def _cjk_replacement(
    line: str, span: Span, literals: list[tuple[int, int, str]], markup: bool
) -> tuple[Span | None, ReferenceStyle]:
    """Decide how a CJK run can be rewritten.

    A run is rewritable only when it is the entire content of a string
    literal or, in files that may hold JSX, the entire trimmed text between
    a closing and an opening tag.
    """
    start, end = span
    for literal_start, literal_end, quote in literals:
        if not (literal_start < start and end < literal_end):
            continue
        inner = line[literal_start + 1 : literal_end - 1]
        if inner != line[start:end] or (quote == "`" and "${" in inner):
            return None, "expression"
        if markup and _JSX_ATTRIBUTE_PREFIX.search(line[:literal_start]):
            return (literal_start, literal_end), "jsx_expression"
        return (literal_start, literal_end), "expression"
    if not markup:
        return None, "expression"
    if _ENDS_WITH_TAG.search(line[:start]) and _STARTS_WITH_TAG.match(line[end:]):
        return span, "jsx_expression"
    return None, "expression"


def _outside_expressions(text: str) -> list[Span]:
    """Split JSX text into chunks that lie outside ``{...}`` containers."""
    chunks: list[Span] = []
    cursor = 0
    for match in _JSX_EXPRESSION.finditer(text):
        chunks.append((cursor, match.start()))
        cursor = match.end()
    chunks.append((cursor, len(text)))
    return [(start, end) for start, end in chunks if end > start]


def _inside_literal(span: Span, literals: list[tuple[int, int, str]]) -> bool:
    start, end = span
    return any(
        literal_start < start and end <= literal_end
        for literal_start, literal_end, _ in literals
    )


def _line_relative(spans: list[Span], line: SourceLine) -> list[Span]:
    line_end = line.start + len(line.text)
    return [
        (max(start, line.start) - line.start, min(end, line_end) - line.start)
        for start, end in spans
        if start < line_end and end > line.start
    ]
