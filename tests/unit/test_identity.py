import hashlib

import pytest

from hts.identity import (
    IdentityError,
    LabelIdentitySynthesizer,
    normalize_key,
    scope_for,
)
from hts.model import Occurrence


def _occurrence(raw_text: str, context_name: str | None) -> Occurrence:
    return Occurrence(
        file_path="components/Settings.tsx",
        line=1,
        column=1,
        span=(0, len(raw_text)),
        raw_text=raw_text,
        classification="jsx_text",
        context_name=context_name,
    )


def test_ph2_idn_001_english_text_becomes_snake_case_key() -> None:
    assert normalize_key("Save changes") == "save_changes"
    assert normalize_key("  Enter your e-mail!  ") == "enter_your_e_mail"
    assert normalize_key("Step 2 of 3") == "step_2_of_3"


def test_ph2_idn_002_cjk_text_uses_stable_hash_key() -> None:
    digest = hashlib.md5("确认".encode("utf-8")).hexdigest()[:8]

    assert normalize_key("确认") == f"text_{digest}"
    assert normalize_key("确认") == normalize_key("确认")
    assert normalize_key("确认") != normalize_key("取消")


def test_ph2_idn_003_mixed_text_keeps_ascii_slug_and_hash() -> None:
    digest = hashlib.md5("OK 确认".encode("utf-8")).hexdigest()[:8]

    assert normalize_key("OK 确认") == f"ok_{digest}"


def test_ph2_idn_004_leading_digit_is_prefixed() -> None:
    assert normalize_key("404 Not found") == "text_404_not_found"


def test_ph2_idn_005_symbol_only_text_is_rejected() -> None:
    with pytest.raises(IdentityError):
        normalize_key("--> !!")


def test_ph2_idn_006_scope_follows_enclosing_name() -> None:
    assert scope_for("Settings") == "settingsView"
    assert scope_for("UserProfile") == "userProfileView"
    assert scope_for(None) == "common"
    assert scope_for(None, default_scope="shared") == "shared"


def test_ph2_idn_007_synthesizer_is_deterministic() -> None:
    synthesizer = LabelIdentitySynthesizer(default_scope="shared")

    first = synthesizer.synthesize(_occurrence("Save changes", "Settings"))
    second = synthesizer.synthesize(_occurrence("Save changes", "Settings"))
    orphan = synthesizer.synthesize(_occurrence("Save changes", None))

    assert first == second
    assert (first.scope, first.key) == ("settingsView", "save_changes")
    assert orphan.scope == "shared"
