# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Every shipped module carries the project license header."""

from pathlib import Path

HEADER = (
    "# Copyright 2026 Zsolt Kulcsar and Contributors. "
    "Licensed under the EUPL-1.2 or later"
)


def test_ph0_lic_001_source_modules_start_with_license_header() -> None:
    src_root = Path(__file__).resolve().parents[2] / "src"
    modules = sorted(src_root.rglob("*.py"))

    missing = [
        str(path.relative_to(src_root))
        for path in modules
        if path.read_text(encoding="utf-8").splitlines()[:1] != [HEADER]
    ]

    assert modules
    assert missing == []
