# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Syntax-tree detector for hardcoded UI text built on tree-sitter."""

import functools
import logging
import re
from collections.abc import Callable

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from hts.config import LABEL_IDENTITY_PROPERTIES, ScanConfig
from hts.detectors.line import HAS_CJK
from hts.ignore import IgnorePatternFilter, LiteralRole, Span
from hts.model import Classification, Occurrence, ReferenceStyle, StrategyName
from hts.source import SourceFile

logger = logging.getLogger(__name__)

_LANGUAGE_LOADERS: dict[str, Callable[[], object]] = {
    ".ts": tree_sitter_typescript.language_typescript,
    ".tsx": tree_sitter_typescript.language_tsx,
    ".js": tree_sitter_javascript.language,
    ".jsx": tree_sitter_javascript.language,
    ".mjs": tree_sitter_javascript.language,
    ".cjs": tree_sitter_javascript.language,
}

_LITERAL_TYPES: frozenset[str] = frozenset({"string", "template_string"})
_NAMED_SCOPES: frozenset[str] = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "class_declaration",
        "abstract_class_declaration",
        "class",
        "function_expression",
        "function",
    }
)
_FUNCTION_VALUES: frozenset[str] = frozenset(
    {"arrow_function", "function_expression", "function", "class"}
)
_MODULE_PARENTS: frozenset[str] = frozenset(
    {"import_statement", "export_statement", "import_require_clause", "module"}
)
_COMPARISON_OPERATORS: frozenset[str] = frozenset({"==", "===", "!=", "!==", "in"})
_CLASS_ATTRIBUTES: frozenset[str] = frozenset({"className", "class"})
_RAW_TEXT_ELEMENTS: frozenset[str] = frozenset({"style", "script"})
_ASCII_LETTER = re.compile(r"[A-Za-z]")
_ENTITY_ONLY = re.compile(r"^(?:&#?\w+;|\s)+$")


class ParseError(RuntimeError):
    """Represent a file the syntax-tree strategy cannot parse."""


@functools.lru_cache(maxsize=None)
def _language(suffix: str) -> Language:
    return Language(_LANGUAGE_LOADERS[suffix]())


def supports(suffix: str) -> bool:
    """Check whether a file suffix has a bundled grammar."""
    return suffix.lower() in _LANGUAGE_LOADERS


class TreeSitterDetector:
    """Detect hardcoded text by visiting string and JSX text nodes.

    Every occurrence carries the name of its nearest enclosing function,
    class, or component, which drives scope synthesis.
    """

    name: StrategyName = "ast"

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
        """Parse a file and collect candidate literals.

        Args:
            source: Loaded source file.

        Returns:
            Occurrences in file order.

        Raises:
            ParseError: If the suffix is unsupported or the tree has errors.
        """
        root = self._parse(source)
        comments: list[Span] = []
        candidates: list[Node] = []
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "comment":
                comments.append(_text_span(source, node))
                continue
            if node.type in _LITERAL_TYPES or node.type == "jsx_text":
                candidates.append(node)
                if node.type == "string":
                    continue
            stack.extend(reversed(node.children))

        occurrences: list[Occurrence] = []
        for node in candidates:
            if node.type == "jsx_text":
                occurrence = self._jsx_text_occurrence(source, node)
            else:
                occurrence = self._literal_occurrence(source, node)
            if occurrence is None:
                continue
            if self._filter.overlaps(occurrence.span, comments):
                continue
            occurrences.append(occurrence)
        occurrences.sort(key=lambda item: item.span)
        return occurrences

    def _parse(self, source: SourceFile) -> Node:
        suffix = source.path.suffix.lower()
        if not supports(suffix):
            raise ParseError(f"No grammar for {source.display_path}")
        parser = Parser(_language(suffix))
        tree = parser.parse(source.encoded())
        if tree.root_node.has_error:
            logger.warning(
                f"Syntax tree contains errors (path={source.display_path})"
            )
            raise ParseError(f"Cannot parse {source.display_path}")
        return tree.root_node

    def _literal_occurrence(
        self, source: SourceFile, node: Node
    ) -> Occurrence | None:
        if node.type == "template_string" and any(
            child.type == "template_substitution" for child in node.children
        ):
            return None
        role, attribute = _literal_role(node)
        if self._filter.is_suppressed_role(role):
            return None
        start, end = _text_span(source, node)
        value = source.text[start + 1 : end - 1]
        if len(value.strip()) < self._config.min_text_length:
            return None
        if self._filter.is_non_text_value(value):
            return None

        classification: Classification
        if HAS_CJK.search(value):
            if not self._config.detect_cjk:
                return None
            classification = "cjk"
        elif (
            attribute is not None
            and attribute.lower() in self._config.localizable_attributes
        ):
            if not self._config.detect_jsx_english or not self._is_english(value):
                return None
            classification = "jsx_attribute"
        else:
            return None

        style: ReferenceStyle = "jsx_expression" if attribute else "expression"
        return self._occurrence(
            source=source,
            node=node,
            span=(start + 1, end - 1),
            classification=classification,
            replace_span=(start, end),
            style=style,
        )

    def _jsx_text_occurrence(
        self, source: SourceFile, node: Node
    ) -> Occurrence | None:
        if _element_name(node.parent) in _RAW_TEXT_ELEMENTS:
            return None
        start, end = _text_span(source, node)
        chunk = source.text[start:end]
        stripped = chunk.strip()
        if not stripped or _ENTITY_ONLY.match(stripped):
            return None
        start += len(chunk) - len(chunk.lstrip())
        end = start + len(stripped)

        classification: Classification
        if HAS_CJK.search(stripped):
            if not self._config.detect_cjk:
                return None
            if len(stripped) < self._config.min_text_length:
                return None
            classification = "cjk"
        else:
            if not self._config.detect_jsx_english or not self._is_english(stripped):
                return None
            classification = "jsx_text"
        return self._occurrence(
            source=source,
            node=node,
            span=(start, end),
            classification=classification,
            replace_span=(start, end),
            style="jsx_expression",
        )

    def _is_english(self, text: str) -> bool:
        stripped = text.strip()
        if len(stripped) < self._config.min_text_length:
            return False
        if not _ASCII_LETTER.search(stripped):
            return False
        if stripped.lower() in self._config.common_tag_words:
            return False
        return not self._filter.is_non_text_value(stripped)

    def _occurrence(
        self,
        source: SourceFile,
        node: Node,
        span: Span,
        classification: Classification,
        replace_span: Span,
        style: ReferenceStyle,
    ) -> Occurrence:
        line, column = source.position_of(span[0])
        return Occurrence(
            file_path=source.display_path,
            line=line,
            column=column,
            span=span,
            raw_text=source.text[span[0] : span[1]],
            classification=classification,
            context_name=enclosing_name(node),
            replace_span=replace_span,
            reference_style=style,
            strategy=self.name,
        )


def enclosing_name(node: Node) -> str | None:
    """Find the nearest named function, class, or component around a node.

    Anonymous functions and classes take the name of the variable they are
    bound to, including through wrapper calls such as ``memo(() => ...)``.

    Args:
        node: Node to start from.

    Returns:
        Declared name, or ``None`` at module level.
    """
    passed_function = False
    current = node.parent
    while current is not None:
        if current.type in _NAMED_SCOPES:
            name_node = current.child_by_field_name("name")
            if name_node is not None:
                return _node_text(name_node)
        if current.type in _FUNCTION_VALUES:
            passed_function = True
        if current.type == "variable_declarator" and passed_function:
            name_node = current.child_by_field_name("name")
            if name_node is not None and name_node.type == "identifier":
                return _node_text(name_node)
        current = current.parent
    return None


def _literal_role(node: Node) -> tuple[LiteralRole, str | None]:
    """Classify the syntactic position of a string literal.

    Returns:
        The role and, for JSX attribute values, the attribute name.
    """
    parent = node.parent
    if parent is None:
        return "value", None
    if parent.type in _MODULE_PARENTS and _is_field(parent, "source", node):
        return "module_source", None
    if parent.type == "module":
        return "module_source", None
    if parent.type == "literal_type":
        return "type_literal", None
    if parent.type == "pair":
        if _is_field(parent, "key", node):
            return "property_key", None
        key = parent.child_by_field_name("key")
        if key is not None and _key_name(key) in LABEL_IDENTITY_PROPERTIES:
            return "label_identity_value", None
        return "value", None
    if parent.type in (
        "method_definition",
        "public_field_definition",
        "property_signature",
    ):
        return "property_key", None
    if parent.type == "enum_assignment":
        if _is_field(parent, "name", node):
            return "property_key", None
        return "enum_value", None
    if parent.type == "enum_body":
        return "property_key", None
    if parent.type == "subscript_expression":
        return "subscript_key", None
    if parent.type == "assignment_expression":
        left = parent.child_by_field_name("left")
        if left is not None and left.type == "member_expression":
            prop = left.child_by_field_name("property")
            if prop is not None and _node_text(prop) in LABEL_IDENTITY_PROPERTIES:
                return "label_identity_value", None
        return "value", None
    if parent.type == "binary_expression":
        operator = parent.child_by_field_name("operator")
        if operator is not None and operator.type in _COMPARISON_OPERATORS:
            return "comparison_operand", None
        return "value", None
    if parent.type == "switch_case":
        return "comparison_operand", None
    if parent.type == "arguments":
        return _argument_role(parent), None
    if parent.type == "jsx_attribute":
        name = _attribute_name(parent)
        if name in _CLASS_ATTRIBUTES:
            return "css_class", None
        if name in LABEL_IDENTITY_PROPERTIES:
            return "label_identity_value", None
        return "value", name
    return "value", None


def _argument_role(arguments: Node) -> LiteralRole:
    call = arguments.parent
    if call is None or call.type != "call_expression":
        return "value"
    function = call.child_by_field_name("function")
    if function is None:
        return "value"
    if function.type == "import" or (
        function.type == "identifier" and _node_text(function) == "require"
    ):
        return "module_source"
    if function.type == "member_expression":
        target = function.child_by_field_name("object")
        if target is not None and _node_text(target) == "console":
            return "console_argument"
    return "value"


def _attribute_name(attribute: Node) -> str | None:
    for child in attribute.named_children:
        return _node_text(child)
    return None


def _element_name(node: Node | None) -> str | None:
    if node is None or node.type != "jsx_element":
        return None
    opening = node.child_by_field_name("open_tag")
    if opening is None:
        return None
    name = opening.child_by_field_name("name")
    return None if name is None else _node_text(name)


def _key_name(key: Node) -> str:
    text = _node_text(key)
    if key.type == "string":
        return text[1:-1]
    return text


def _is_field(parent: Node, field_name: str, node: Node) -> bool:
    child = parent.child_by_field_name(field_name)
    return (
        child is not None
        and child.start_byte == node.start_byte
        and child.end_byte == node.end_byte
    )


def _node_text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""


def _text_span(source: SourceFile, node: Node) -> Span:
    return (
        source.text_offset_from_byte(node.start_byte),
        source.text_offset_from_byte(node.end_byte),
    )
