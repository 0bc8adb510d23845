# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Source file discovery honoring exclude lists and .gitignore files."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import pathspec

from hts.config import ScanConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveredFile:
    """Represent one source file selected for scanning.

    Args:
        path: Absolute file path.
        display_path: Root-relative POSIX path used in reports.
    """

    path: Path
    display_path: str


@dataclass(frozen=True)
class DiscoveryResult:
    """Store discovered files and non-fatal discovery problems."""

    files: list[DiscoveredFile]
    warnings: list[str] = field(default_factory=list)


class IgnoreMatcher:
    """Match root-relative paths against exclude and gitignore patterns."""

    def __init__(self, lines: list[str]) -> None:
        """Initialize matcher.

        Args:
            lines: Root-relative gitignore-style pattern lines.
        """
        self._lines = lines
        self._spec = pathspec.GitIgnoreSpec.from_lines(lines)

    @classmethod
    def from_exclude_dirs(cls, exclude_dirs: tuple[str, ...]) -> "IgnoreMatcher":
        """Build a matcher where bare names match directories at any depth."""
        lines: list[str] = []
        for entry in exclude_dirs:
            stripped = entry.strip()
            if not stripped:
                continue
            if "/" in stripped.rstrip("/") or any(c in stripped for c in "*?["):
                lines.append(stripped)
            else:
                lines.append(f"{stripped.rstrip('/')}/")
        return cls(lines=lines)

    def extended(self, ignore_lines: list[str], base: str) -> "IgnoreMatcher":
        """Return a matcher that also applies one nested .gitignore file.

        Args:
            ignore_lines: Lines of the .gitignore file.
            base: Root-relative directory holding the file.
        """
        translated = [
            _translate_gitignore_line(line=line, base=base) for line in ignore_lines
        ]
        return IgnoreMatcher(lines=[*self._lines, *translated])

    def matches(self, relative_path: str, is_dir: bool) -> bool:
        """Check whether a path should be skipped.

        Args:
            relative_path: Root-relative POSIX path.
            is_dir: Whether the path is a directory.

        Returns:
            True when the path should be skipped.
        """
        normalized = relative_path.replace(os.sep, "/").strip("/")
        if not normalized:
            return False
        if self._spec.match_file(normalized):
            return True
        return is_dir and self._spec.match_file(f"{normalized}/")


def discover_files(config: ScanConfig) -> DiscoveryResult:
    """Collect scannable files under the configured directories.

    Missing sub-directories and unreadable .gitignore files are reported as
    warnings. Files reachable from several configured directories are
    returned once.

    Args:
        config: Scan configuration.

    Returns:
        Files sorted by display path, plus warnings.
    """
    root = config.root_dir.resolve()
    warnings: list[str] = []
    matcher = IgnoreMatcher.from_exclude_dirs(config.exclude_dirs)
    if config.respect_gitignore:
        matcher = _with_gitignore(matcher, root, root, warnings)

    starts = [root / name for name in config.dirs_to_scan] or [root]
    extensions = {suffix.lower() for suffix in config.extensions}
    found: dict[str, DiscoveredFile] = {}
    for start in starts:
        if not start.is_dir():
            message = f"Directory not found, skipped: {start}"
            logger.warning(message)
            warnings.append(message)
            continue
        for path in _walk(start, root, matcher, config.respect_gitignore, warnings):
            if path.suffix.lower() not in extensions:
                continue
            display = path.relative_to(root).as_posix()
            found.setdefault(display, DiscoveredFile(path=path, display_path=display))
    return DiscoveryResult(
        files=[found[key] for key in sorted(found)], warnings=warnings
    )


def _walk(
    start: Path,
    root: Path,
    matcher: IgnoreMatcher,
    respect_gitignore: bool,
    warnings: list[str],
) -> list[Path]:
    """Walk a directory breadth first, applying nested .gitignore files."""
    files: list[Path] = []
    queue: list[tuple[Path, IgnoreMatcher]] = [(start, matcher)]
    while queue:
        current, current_matcher = queue.pop(0)
        if respect_gitignore and current != root:
            current_matcher = _with_gitignore(current_matcher, current, root, warnings)
        try:
            children = sorted(current.iterdir(), key=lambda item: item.name)
        except OSError as exc:
            message = f"Cannot list directory, skipped: {current} ({exc})"
            logger.warning(message)
            warnings.append(message)
            continue
        for child in children:
            relative = child.relative_to(root).as_posix()
            if child.name == ".git":
                continue
            is_dir = child.is_dir()
            if current_matcher.matches(relative_path=relative, is_dir=is_dir):
                continue
            if is_dir:
                if not child.is_symlink():
                    queue.append((child, current_matcher))
                continue
            if child.is_file():
                files.append(child)
    return files


def _with_gitignore(
    matcher: IgnoreMatcher, directory: Path, root: Path, warnings: list[str]
) -> IgnoreMatcher:
    ignore_path = directory / ".gitignore"
    if not ignore_path.is_file():
        return matcher
    try:
        lines = ignore_path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        message = f"Failed reading {ignore_path}, ignored: {exc}"
        logger.warning(message)
        warnings.append(message)
        return matcher
    base = directory.relative_to(root).as_posix()
    return matcher.extended(ignore_lines=lines, base="" if base == "." else base)


def _translate_gitignore_line(line: str, base: str) -> str:
    """Translate one .gitignore line to a root-relative pattern.

    Patterns without an inner slash match at any depth below ``base``.

    Args:
        line: Original .gitignore line.
        base: Parent directory relative to the scan root.

    Returns:
        Root-relative pattern line.
    """
    if not base or not line.strip():
        return line
    if line.lstrip().startswith("#"):
        return line
    if line.startswith(r"\!") or line.startswith(r"\#"):
        return f"{base}/{line[1:]}"
    is_negation = line.startswith("!")
    pattern = line[1:] if is_negation else line
    anchored = "/" in pattern.rstrip("/")
    normalized = pattern.lstrip("/")
    if anchored:
        prefixed = f"/{base}/{normalized}"
    else:
        prefixed = f"/{base}/**/{normalized}"
    return f"!{prefixed}" if is_negation else prefixed
