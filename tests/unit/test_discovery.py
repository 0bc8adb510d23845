from pathlib import Path

from hts.config import ScanConfig
from hts.discovery import IgnoreMatcher, discover_files


def _touch(path: Path, text: str = "export {};\n") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_ph3_dis_001_discovers_configured_dirs_and_extensions(tmp_path: Path) -> None:
    _touch(tmp_path / "components" / "Button.tsx")
    _touch(tmp_path / "components" / "nested" / "Card.jsx")
    _touch(tmp_path / "components" / "styles.css")
    _touch(tmp_path / "pages" / "index.ts")
    _touch(tmp_path / "scripts" / "tool.js")

    result = discover_files(ScanConfig(root_dir=tmp_path))

    assert [item.display_path for item in result.files] == [
        "components/Button.tsx",
        "components/nested/Card.jsx",
        "pages/index.ts",
    ]
    assert result.warnings == [
        f"Directory not found, skipped: {tmp_path.resolve() / 'features'}"
    ]


def test_ph3_dis_002_exclude_dirs_match_at_any_depth(tmp_path: Path) -> None:
    _touch(tmp_path / "components" / "App.tsx")
    _touch(tmp_path / "components" / "node_modules" / "lib" / "index.js")
    _touch(tmp_path / "components" / "dist" / "bundle.js")

    result = discover_files(ScanConfig(root_dir=tmp_path, dirs_to_scan=()))

    assert [item.display_path for item in result.files] == ["components/App.tsx"]
    assert result.warnings == []


def test_ph3_dis_003_gitignore_files_are_honored(tmp_path: Path) -> None:
    _touch(tmp_path / ".gitignore", "*.generated.ts\n")
    _touch(tmp_path / "src" / "api.generated.ts")
    _touch(tmp_path / "src" / "App.tsx")
    _touch(tmp_path / "src" / "legacy" / ".gitignore", "old/\nkeep.ts\n")
    _touch(tmp_path / "src" / "legacy" / "old" / "Page.tsx")
    _touch(tmp_path / "src" / "legacy" / "keep.ts")
    _touch(tmp_path / "src" / "legacy" / "Current.tsx")
    _touch(tmp_path / "src" / "other" / "keep.ts")

    result = discover_files(ScanConfig(root_dir=tmp_path, dirs_to_scan=("src",)))

    assert [item.display_path for item in result.files] == [
        "src/App.tsx",
        "src/legacy/Current.tsx",
        "src/other/keep.ts",
    ]


def test_ph3_dis_004_gitignore_can_be_disabled(tmp_path: Path) -> None:
    _touch(tmp_path / ".gitignore", "*.ts\n")
    _touch(tmp_path / "pages" / "index.ts")

    config = ScanConfig(
        root_dir=tmp_path, dirs_to_scan=("pages",), respect_gitignore=False
    )
    result = discover_files(config)

    assert [item.display_path for item in result.files] == ["pages/index.ts"]


def test_ph3_dis_005_overlapping_dirs_are_reported_once(tmp_path: Path) -> None:
    _touch(tmp_path / "features" / "cart" / "Cart.tsx")

    config = ScanConfig(root_dir=tmp_path, dirs_to_scan=("features", "features/cart"))
    result = discover_files(config)

    assert [item.display_path for item in result.files] == ["features/cart/Cart.tsx"]


def test_ph3_dis_006_ignore_matcher_handles_patterns() -> None:
    matcher = IgnoreMatcher.from_exclude_dirs(("node_modules", "build/", "*.test.tsx"))

    assert matcher.matches("a/node_modules", is_dir=True) is True
    assert matcher.matches("build", is_dir=True) is True
    assert matcher.matches("components/Button.test.tsx", is_dir=False) is True
    assert matcher.matches("components/Button.tsx", is_dir=False) is False
    assert matcher.matches("", is_dir=True) is False
