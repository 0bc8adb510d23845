# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Structural patterns that mark text as code rather than user-facing copy."""

import logging
import re
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger(__name__)

IgnoreScope = Literal["line", "span"]
LiteralRole = Literal[
    "value",
    "module_source",
    "property_key",
    "label_identity_value",
    "css_class",
    "type_literal",
    "console_argument",
    "subscript_key",
    "comparison_operand",
    "enum_value",
]

Span = tuple[int, int]

_SUPPRESSED_ROLES: frozenset[str] = frozenset(
    {
        "module_source",
        "property_key",
        "label_identity_value",
        "css_class",
        "type_literal",
        "console_argument",
        "subscript_key",
        "comparison_operand",
        "enum_value",
    }
)

_URL_VALUE = re.compile(r"^[a-zA-Z][\w+.-]*://\S*$")
_PATH_VALUE = re.compile(r"^(?:\.{1,2}/|/)[\w@~.\-/\[\]:]*$")


@dataclass(frozen=True)
class IgnorePattern:
    """Describe one suppression pattern.

    Args:
        name: Pattern name used in logs.
        regex: Compiled pattern applied to a single line.
        scope: ``line`` suppresses every candidate on a matching line;
            ``span`` suppresses candidates overlapping the matched group.
        group: Regex group whose span is suppressed for ``span`` patterns.
    """

    name: str
    regex: re.Pattern[str]
    scope: IgnoreScope
    group: int = 0


def default_patterns(reference_name: str = "labels") -> tuple[IgnorePattern, ...]:
    """Build the default pattern set.

    Args:
        reference_name: Object name used by migrated label references.

    Returns:
        Patterns in evaluation order.
    """
    return (
        IgnorePattern(
            name="import_statement",
            regex=re.compile(
                r"^\s*(?:import|export)\b.*?\bfrom\s*['\"]"
                r"|^\s*import\s*['\"]"
                r"|^\s*\}\s*from\s*['\"]"
            ),
            scope="line",
        ),
        IgnorePattern(
            name="console_call",
            regex=re.compile(r"\bconsole\.(?:log|warn|error|info|debug)\s*\("),
            scope="line",
        ),
        IgnorePattern(
            name="type_declaration",
            regex=re.compile(
                r"^\s*(?:export\s+)?(?:declare\s+)?(?:const\s+)?"
                r"(?:type|interface|enum)\s+[\w$]+"
            ),
            scope="line",
        ),
        IgnorePattern(
            name="module_reference",
            regex=re.compile(r"\b(?:require|import)\s*\(\s*(['\"`])[^'\"`]*\1\s*\)"),
            scope="span",
        ),
        IgnorePattern(
            name="declaration_header",
            regex=re.compile(
                r"\b(?:const|let|var)\s+[\w$]+(?:\s*:\s*[\w$.<>\[\]|, ]+?)?\s*="
                r"|\bfunction\s*\*?\s*[\w$]*\s*\("
                r"|\bclass\s+[\w$]+"
            ),
            scope="span",
        ),
        IgnorePattern(
            name="url",
            regex=re.compile(r"\b[a-zA-Z][\w+.-]*://[^\s'\"`<>)]+"),
            scope="span",
        ),
        IgnorePattern(
            name="relative_path",
            regex=re.compile(r"(['\"`])\.{1,2}/[^'\"`]*\1"),
            scope="span",
        ),
        IgnorePattern(
            name="css_class",
            regex=re.compile(r"\bclass(?:Name)?\s*=\s*\{?\s*(['\"`])[^'\"`]*\1"),
            scope="span",
        ),
        IgnorePattern(
            name="component_tag",
            regex=re.compile(r"</?[A-Z][\w$.]*"),
            scope="span",
        ),
        IgnorePattern(
            name="property_key",
            regex=re.compile(r"(?:^|[{,])\s*((['\"]?)[\w$-]+\2)\s*:(?![:=])"),
            scope="span",
            group=1,
        ),
        IgnorePattern(
            name="label_identity_value",
            regex=re.compile(
                r"\b(?:labelKey|scopeKey|label_key|scope_key)['\"]?\s*[:=]\s*"
                r"(['\"`])[^'\"`]*\1"
            ),
            scope="span",
        ),
        IgnorePattern(
            name="comparison_operand",
            regex=re.compile(
                r"(?:[=!]==?)\s*(['\"`])[^'\"`]*\1"
                r"|(['\"`])[^'\"`]*\2\s*(?:[=!]==?)"
                r"|\bcase\s+(['\"`])[^'\"`]*\3\s*:"
            ),
            scope="span",
        ),
        IgnorePattern(
            name="label_reference",
            regex=re.compile(rf"\b{re.escape(reference_name)}\.[A-Za-z_$][\w$]*"),
            scope="span",
        ),
    )


class IgnorePatternFilter:
    """Decide whether candidate text is structural code instead of copy.

    When a candidate overlaps any suppressed region it is dropped; missing a
    string is preferable to corrupting code.
    """

    def __init__(
        self,
        patterns: tuple[IgnorePattern, ...] | None = None,
        reference_name: str = "labels",
    ) -> None:
        """Initialize the filter.

        Args:
            patterns: Pattern set; defaults to ``default_patterns``.
            reference_name: Object name used by migrated label references.
        """
        self._patterns = (
            patterns if patterns is not None else default_patterns(reference_name)
        )
        self._line_patterns = [p for p in self._patterns if p.scope == "line"]
        self._span_patterns = [p for p in self._patterns if p.scope == "span"]
        self._reference_value = re.compile(
            rf"^{re.escape(reference_name)}\.[A-Za-z_$][\w$]*$"
        )

    def line_is_suppressed(self, line: str) -> bool:
        """Check whether every candidate on a line must be dropped."""
        return any(pattern.regex.search(line) for pattern in self._line_patterns)

    def suppressed_spans(self, line: str) -> list[Span]:
        """Collect line-relative spans covered by span-scoped patterns."""
        spans: list[Span] = []
        for pattern in self._span_patterns:
            for match in pattern.regex.finditer(line):
                start, end = match.span(pattern.group)
                if end > start:
                    spans.append((start, end))
        return spans

    def is_suppressed_role(self, role: LiteralRole) -> bool:
        """Check whether a literal in the given syntactic role is code."""
        return role in _SUPPRESSED_ROLES

    def is_non_text_value(self, value: str) -> bool:
        """Check whether a literal's content is a URL, path, or label reference."""
        stripped = value.strip()
        if not stripped:
            return True
        if _URL_VALUE.match(stripped):
            return True
        if _PATH_VALUE.match(stripped):
            return True
        return bool(self._reference_value.match(stripped))

    @staticmethod
    def overlaps(span: Span, spans: list[Span]) -> bool:
        """Check whether a half-open span intersects any of ``spans``."""
        start, end = span
        return any(
            start < other_end and other_start < end for other_start, other_end in spans
        )

    @staticmethod
    def comment_spans(text: str) -> list[Span]:
        """Locate line and block comments in JavaScript-family source.

        Quoted strings are skipped so ``"http://host"`` is not a comment.
        Single and double quoted strings end at a line break, which keeps
        apostrophes in JSX text from swallowing the rest of the file.

        Args:
            text: Whole file text.

        Returns:
            Comment spans as text offsets.
        """
        spans: list[Span] = []
        length = len(text)
        index = 0
        quote: str | None = None
        while index < length:
            char = text[index]
            if quote is not None:
                if char == "\\":
                    index += 2
                    continue
                if char == quote or (char == "\n" and quote != "`"):
                    quote = None
                index += 1
                continue
            if char in "'\"`" and not _is_apostrophe(text, index):
                quote = char
                index += 1
                continue
            if text.startswith("//", index):
                end = text.find("\n", index)
                end = length if end == -1 else end
                spans.append((index, end))
                index = end
                continue
            if text.startswith("/*", index):
                end = text.find("*/", index + 2)
                end = length if end == -1 else end + 2
                spans.append((index, end))
                index = end
                continue
            index += 1
        return spans


def literal_spans(line: str) -> list[tuple[int, int, str]]:
    """Locate quoted string literals on one line.

    Unterminated quotes are ignored, and an apostrophe directly after a
    letter or digit (``Don't``) never opens a literal.

    Args:
        line: Line text without terminator.

    Returns:
        ``(start, end, quote)`` tuples where ``end`` is past the closing quote.
    """
    spans: list[tuple[int, int, str]] = []
    length = len(line)
    index = 0
    while index < length:
        char = line[index]
        if char in "'\"`" and not _is_apostrophe(line, index):
            end = _literal_end(line, index)
            if end is None:
                index += 1
                continue
            spans.append((index, end, char))
            index = end
            continue
        if line.startswith("//", index):
            break
        index += 1
    return spans


def _literal_end(line: str, start: int) -> int | None:
    quote = line[start]
    index = start + 1
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index + 1
        index += 1
    return None


def _is_apostrophe(text: str, index: int) -> bool:
    return text[index] == "'" and index > 0 and text[index - 1].isalnum()
