# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the tree-sitter detector."""

from pathlib import Path

import pytest

from hts.config import ScanConfig
from hts.detectors import ParseError, TreeSitterDetector
from hts.source import SourceFile

COMPONENT = """import React from 'react';
import { Button } from './Button';

export function Greeting() {
  const title = "欢迎使用";
  if (status === "已完成") {
    console.log("调试信息");
  }
  return (
    <div className="greeting">
      {/* 注释 */}
      <h1>{title}</h1>
      <p>确认</p>
      <input placeholder="Enter name" />
      <Button>Save changes</Button>
    </div>
  );
}
"""


def _source(text: str, name: str = "Greeting.tsx") -> SourceFile:
    return SourceFile(path=Path(name), display_path=name, text=text)


def _detector(tmp_path: Path, **overrides: object) -> TreeSitterDetector:
    config = ScanConfig(root_dir=tmp_path, **overrides)  # type: ignore[arg-type]
    return TreeSitterDetector(config)


def test_ph1_ast_001_component_literals_are_classified_with_context(
    tmp_path: Path,
) -> None:
    source = _source(COMPONENT)

    occurrences = _detector(tmp_path).scan(source)

    found = [(item.raw_text, item.classification) for item in occurrences]
    assert found == [
        ("欢迎使用", "cjk"),
        ("确认", "cjk"),
        ("Enter name", "jsx_attribute"),
        ("Save changes", "jsx_text"),
    ]
    assert {item.context_name for item in occurrences} == {"Greeting"}
    assert all(item.strategy == "ast" for item in occurrences)
    for occurrence in occurrences:
        start, end = occurrence.span
        assert COMPONENT[start:end] == occurrence.raw_text


def test_ph1_ast_002_replace_spans_and_reference_styles(tmp_path: Path) -> None:
    source = _source(COMPONENT)

    occurrences = _detector(tmp_path).scan(source)
    by_text = {item.raw_text: item for item in occurrences}

    title = by_text["欢迎使用"]
    start, end = title.replace_span or (0, 0)
    assert COMPONENT[start:end] == '"欢迎使用"'
    assert title.reference_style == "expression"
    placeholder = by_text["Enter name"]
    start, end = placeholder.replace_span or (0, 0)
    assert COMPONENT[start:end] == '"Enter name"'
    assert placeholder.reference_style == "jsx_expression"
    assert by_text["确认"].reference_style == "jsx_expression"


def test_ph1_ast_003_positions_are_one_based_character_columns(
    tmp_path: Path,
) -> None:
    source = _source(COMPONENT)

    occurrences = _detector(tmp_path).scan(source)
    confirm = next(item for item in occurrences if item.raw_text == "确认")

    assert confirm.line == 13
    assert confirm.column == 10


def test_ph1_ast_004_arrow_components_and_classes_provide_context(
    tmp_path: Path,
) -> None:
    text = (
        "const Card = () => <p>卡片</p>;\n"
        "const Wrapped = memo(function () { return <p>包装</p>; });\n"
        "class Panel extends React.Component {\n"
        "  render() { return <p>面板</p>; }\n"
        "}\n"
        'const greeting = "你好";\n'
    )

    occurrences = _detector(tmp_path).scan(_source(text, "Views.tsx"))

    contexts = {item.raw_text: item.context_name for item in occurrences}
    assert contexts == {
        "卡片": "Card",
        "包装": "Wrapped",
        "面板": "Panel",
        "你好": None,
    }


def test_ph1_ast_005_code_roles_are_skipped(tmp_path: Path) -> None:
    text = (
        'type Mode = "编辑" | "查看";\n'
        'const labels = { labelKey: "确认按钮", "中文键": 1 };\n'
        'const value = map["映射键"];\n'
        'const lazy = import("./页面");\n'
        "switch (mode) {\n"
        '  case "草稿":\n'
        "    break;\n"
        "}\n"
    )

    occurrences = _detector(tmp_path).scan(_source(text, "roles.ts"))

    assert occurrences == []


def test_ph1_ast_006_english_code_strings_are_not_reported(tmp_path: Path) -> None:
    text = 'const mode = "Enter name";\nconst Tag = () => <img alt="Company logo" />;\n'

    occurrences = _detector(tmp_path).scan(_source(text, "mode.jsx"))

    assert [item.raw_text for item in occurrences] == ["Company logo"]


def test_ph1_ast_007_template_with_substitution_is_skipped(tmp_path: Path) -> None:
    text = "const a = `共有${count}项`;\nconst b = `全部完成`;\n"

    occurrences = _detector(tmp_path).scan(_source(text, "t.ts"))

    assert [item.raw_text for item in occurrences] == ["全部完成"]
    start, end = occurrences[0].replace_span or (0, 0)
    assert text[start:end] == "`全部完成`"


def test_ph1_ast_008_syntax_errors_and_unknown_suffixes_raise(tmp_path: Path) -> None:
    detector = _detector(tmp_path)

    with pytest.raises(ParseError):
        detector.scan(_source("const x = <p>确认</p\n", "Broken.tsx"))
    with pytest.raises(ParseError):
        detector.scan(_source("<p>确认</p>\n", "page.vue"))


def test_ph1_ast_009_enum_members_are_code(tmp_path: Path) -> None:
    text = (
        "export enum Msg {\n"
        "  Ok = '确认',\n"
        '  Cancel = "取消",\n'
        "}\n"
        "const enum Level { Low = '低级' }\n"
        "const notice = '保存成功';\n"
    )

    occurrences = _detector(tmp_path).scan(_source(text, "messages.ts"))

    assert [item.raw_text for item in occurrences] == ["保存成功"]
