# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for structural ignore patterns."""

from hts.ignore import IgnorePatternFilter, literal_spans


def _covered(line: str, needle: str, ignore_filter: IgnorePatternFilter) -> bool:
    start = line.index(needle)
    span = (start, start + len(needle))
    return ignore_filter.overlaps(span, ignore_filter.suppressed_spans(line))


def test_ph1_ign_001_import_console_and_type_lines_are_suppressed() -> None:
    ignore_filter = IgnorePatternFilter()

    assert ignore_filter.line_is_suppressed("import Foo from './Foo'")
    assert ignore_filter.line_is_suppressed("import './styles.css';")
    assert ignore_filter.line_is_suppressed("export { Bar } from \"./Bar\";")
    assert ignore_filter.line_is_suppressed('  console.warn("出错了");')
    assert ignore_filter.line_is_suppressed('type Mode = "编辑" | "查看";')
    assert not ignore_filter.line_is_suppressed("<p>确认</p>")


def test_ph1_ign_002_span_patterns_cover_only_structural_regions() -> None:
    ignore_filter = IgnorePatternFilter()
    line = '<Button className="primary" title="Save">保存</Button>'

    assert _covered(line, "primary", ignore_filter)
    assert _covered(line, "Button", ignore_filter)
    assert not _covered(line, "Save", ignore_filter)
    assert not _covered(line, "保存", ignore_filter)


def test_ph1_ign_003_property_keys_are_covered_but_values_are_not() -> None:
    ignore_filter = IgnorePatternFilter()
    line = '{ "title": "设置", subtitle: "副标题" }'

    assert _covered(line, '"title"', ignore_filter)
    assert _covered(line, "subtitle", ignore_filter)
    assert not _covered(line, "设置", ignore_filter)
    assert not _covered(line, "副标题", ignore_filter)


def test_ph1_ign_004_label_references_comparisons_and_identity_values() -> None:
    ignore_filter = IgnorePatternFilter()

    assert _covered("<p>{labels.save}</p>", "labels.save", ignore_filter)
    assert _covered('if (status === "完成") {', "完成", ignore_filter)
    assert _covered('case "草稿":', "草稿", ignore_filter)
    assert _covered('{ labelKey: "确认", scope: x }', "确认", ignore_filter)
    assert _covered('const url = "https://example.com";', "https", ignore_filter)
    assert _covered("const icon = require('./icon.png');", "icon.png", ignore_filter)


def test_ph1_ign_005_comment_spans_skip_strings_and_cover_block_comments() -> None:
    text = 'const a = "http://x"; // 注释\n/* 多行\n注释 */ <p>确认</p>\n'

    spans = IgnorePatternFilter.comment_spans(text)

    assert len(spans) == 2
    line_comment = text[spans[0][0] : spans[0][1]]
    block_comment = text[spans[1][0] : spans[1][1]]
    assert line_comment == "// 注释"
    assert block_comment == "/* 多行\n注释 */"


def test_ph1_ign_006_apostrophes_in_text_do_not_open_literals() -> None:
    text = "<p>Don't panic</p> // note\n"

    spans = IgnorePatternFilter.comment_spans(text)

    assert [text[start:end] for start, end in spans] == ["// note"]
    assert literal_spans("<p>Don't panic</p>") == []


def test_ph1_ign_007_literal_spans_include_quotes() -> None:
    line = "const a = 'x', b = \"确认\";"

    spans = literal_spans(line)

    assert [line[start:end] for start, end, _ in spans] == ["'x'", '"确认"']


def test_ph1_ign_008_role_and_value_checks() -> None:
    ignore_filter = IgnorePatternFilter()

    assert ignore_filter.is_suppressed_role("module_source")
    assert ignore_filter.is_suppressed_role("comparison_operand")
    assert not ignore_filter.is_suppressed_role("value")
    assert ignore_filter.is_non_text_value("https://example.com/a")
    assert ignore_filter.is_non_text_value("./images/logo.png")
    assert ignore_filter.is_non_text_value("labels.confirm")
    assert not ignore_filter.is_non_text_value("Enter name")
