import pytest

from hts.model import Occurrence
from hts.rewriter import (
    AmbiguousSpanError,
    Edit,
    RewriteError,
    build_edit,
    reference_for,
    rewrite_source,
)

TEXT = "const a = 'OK' + ' ' + 'Nope' ;"


def _edit(text: str, start: int, end: int, replacement: str) -> Edit:
    return Edit(start=start, end=end, replacement=replacement, expected=text[start:end])


def test_ph2_rew_001_edits_apply_rightmost_first() -> None:
    text = "x" * 10 + "abcd" + "y" * 6 + "efghi" + "zz"
    left = _edit(text, 10, 14, "labels.first")
    right = _edit(text, 20, 25, "labels.second")

    result = rewrite_source(text, [left, right])

    assert result.applied == [right, left]
    assert result.text == "x" * 10 + "labels.first" + "y" * 6 + "labels.second" + "zz"
    assert result.dropped == []
    assert result.changed is True


def test_ph2_rew_002_overlapping_edit_is_dropped() -> None:
    text = "0123456789abcdefghij"
    outer = _edit(text, 10, 16, "A")
    inner = _edit(text, 12, 18, "B")

    result = rewrite_source(text, [outer, inner])

    assert result.applied == [inner]
    assert result.text == "0123456789ab" + "B" + "ij"
    assert len(result.dropped) == 1
    assert isinstance(result.dropped[0], AmbiguousSpanError)


def test_ph2_rew_003_duplicate_edits_collapse() -> None:
    edit = _edit(TEXT, 10, 14, "labels.ok")

    result = rewrite_source(TEXT, [edit, edit])

    assert result.applied == [edit]
    assert result.text == "const a = labels.ok + ' ' + 'Nope' ;"


def test_ph2_rew_004_stale_span_rejects_every_edit() -> None:
    good = _edit(TEXT, 10, 14, "labels.ok")
    stale = Edit(start=23, end=29, replacement="labels.nope", expected="'Yes!'")

    with pytest.raises(RewriteError):
        rewrite_source(TEXT, [good, stale])
    with pytest.raises(RewriteError):
        rewrite_source(TEXT, [Edit(start=30, end=40, replacement="x", expected="")])


def test_ph2_rew_005_reference_styles() -> None:
    assert reference_for("save", "expression") == "labels.save"
    assert reference_for("save", "jsx_expression") == "{labels.save}"
    assert reference_for("save", "expression", reference_name="t") == "t.save"


def test_ph2_rew_006_build_edit_uses_replace_span() -> None:
    text = '<input placeholder="Enter name" />'
    occurrence = Occurrence(
        file_path="Form.tsx",
        line=1,
        column=21,
        span=(20, 30),
        raw_text="Enter name",
        classification="jsx_attribute",
        replace_span=(19, 31),
        reference_style="jsx_expression",
        strategy="ast",
    )

    edit = build_edit(occurrence, source_text=text, key="enter_name")
    result = rewrite_source(text, [edit])

    assert edit.expected == '"Enter name"'
    assert result.text == "<input placeholder={labels.enter_name} />"


def test_ph2_rew_007_partial_text_cannot_be_rewritten() -> None:
    occurrence = Occurrence(
        file_path="List.tsx",
        line=1,
        column=5,
        span=(4, 6),
        raw_text="共有",
        classification="cjk",
    )

    with pytest.raises(RewriteError):
        build_edit(occurrence, source_text="x = `共有${n}`", key="text_1")
