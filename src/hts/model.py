# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for hardcoded text detection and migration."""

from dataclasses import dataclass, field
from typing import Literal

Classification = Literal["cjk", "jsx_text", "jsx_attribute"]
ReferenceStyle = Literal["expression", "jsx_expression"]
StrategyName = Literal["line", "ast"]


@dataclass(frozen=True)
class Occurrence:
    """Represent one detected span of candidate hardcoded text.

    Attributes:
        file_path: Project-relative or absolute source file path.
        line: Start line of ``raw_text`` (1-based).
        column: Start column of ``raw_text`` in characters (1-based).
        span: ``(start, end)`` text offsets such that
            ``text[start:end] == raw_text`` at detection time.
        raw_text: Exact matched substring.
        classification: Detection tag for the text.
        context_name: Nearest enclosing named declaration, if known.
        replace_span: Source span replaced on migration; ``None`` when the
            occurrence cannot be rewritten safely.
        reference_style: Whether the reference is emitted bare or wrapped
            in a JSX expression container.
        strategy: Detector that produced the occurrence.
    """

    file_path: str
    line: int
    column: int
    span: tuple[int, int]
    raw_text: str
    classification: Classification
    context_name: str | None = None
    replace_span: tuple[int, int] | None = None
    reference_style: ReferenceStyle = "expression"
    strategy: StrategyName = "line"

    @property
    def is_rewritable(self) -> bool:
        return self.replace_span is not None


@dataclass(frozen=True)
class LabelIdentity:
    """Represent a synthesized ``(scope, key)`` label identity."""

    scope: str
    key: str


@dataclass(frozen=True)
class LabelRecord:
    """Represent one persisted label row.

    Attributes:
        scope: Label scope, e.g. ``settingsView``.
        key: Label key within the scope.
        language_code: Language of ``translated_text``.
        translated_text: Stored text for the language.
    """

    scope: str
    key: str
    language_code: str
    translated_text: str

    @property
    def identity(self) -> tuple[str, str, str]:
        return (self.scope, self.key, self.language_code)


@dataclass(frozen=True)
class Finding:
    """Pair one occurrence with its synthesized identity."""

    occurrence: Occurrence
    identity: LabelIdentity | None


@dataclass(frozen=True)
class FileScan:
    """Represent detection-only results for one file."""

    file_path: str
    findings: list[Finding]
    warnings: list[str] = field(default_factory=list)


@dataclass
class MigrationResult:
    """Accumulate the outcome of one migration invocation.

    Per-file results are merged into the run result by the coordinating
    caller; counters only ever grow.
    """

    success: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    migrated_labels_count: int = 0
    migrated_files_count: int = 0

    def add_error(self, message: str) -> None:
        self.success = False
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def merge(self, other: "MigrationResult") -> None:
        """Fold another result into this one.

        Args:
            other: Result produced for one file or sub-run.
        """
        if not other.success:
            self.success = False
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.migrated_labels_count += other.migrated_labels_count
        self.migrated_files_count += other.migrated_files_count


@dataclass(frozen=True)
class DetectionRun:
    """Represent the outcome of a detection-only run over a directory.

    Attributes:
        scans: Per-file results in display-path order.
        warnings: Run-level warnings such as missing directories.
    """

    scans: list[FileScan]
    warnings: list[str] = field(default_factory=list)

    @property
    def occurrence_count(self) -> int:
        return sum(len(scan.findings) for scan in self.scans)
