# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Detection and migration orchestration over a source tree."""

import concurrent.futures
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from hts.config import ScanConfig
from hts.detector import DetectionStrategy, union_occurrences
from hts.detectors import ParseError, build_strategies
from hts.discovery import DiscoveredFile, discover_files
from hts.identity import IdentityError, LabelIdentitySynthesizer
from hts.labels import LabelStore, StoreWriteError
from hts.model import (
    DetectionRun,
    FileScan,
    Finding,
    LabelRecord,
    MigrationResult,
)
from hts.rewriter import Edit, RewriteError, build_edit, rewrite_source
from hts.source import SourceFile, SourceIOError, read_source, write_source_atomically
from hts.writer import LabelStoreWriter

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class NoSourceFilesError(RuntimeError):
    """Represent a run that found nothing to scan."""


class AbortSignal:
    """Stop scheduling new files on request or once a deadline passes.

    Files already being processed always run to completion.
    """

    def __init__(self, timeout_seconds: float | None = None) -> None:
        """Initialize the signal.

        Args:
            timeout_seconds: Optional run deadline measured from now.

        Raises:
            ValueError: If ``timeout_seconds`` is not greater than zero.
        """
        if timeout_seconds is not None and timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        self._event = threading.Event()
        self._deadline = (
            time.monotonic() + timeout_seconds if timeout_seconds is not None else None
        )

    def abort(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._event.set()
            return True
        return False


@dataclass
class _FileDetection:
    source: SourceFile | None
    findings: list[Finding] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    tree_parsed: bool = False


class LabelMigrator:
    """Run detection and migration for files under one configuration."""

    def __init__(
        self,
        config: ScanConfig,
        store: LabelStore | None = None,
        strategies: list[DetectionStrategy] | None = None,
        abort: AbortSignal | None = None,
    ) -> None:
        """Initialize the migrator.

        Args:
            config: Scan configuration.
            store: Label store; required for migration only.
            strategies: Detection strategies; defaults to ``config.strategies``.
            abort: Cancellation signal checked before each file is scheduled.
        """
        self._config = config
        self._strategies = (
            strategies if strategies is not None else build_strategies(config)
        )
        self._writer = LabelStoreWriter(store) if store is not None else None
        self._synthesizer = LabelIdentitySynthesizer(config.default_scope)
        self._abort = abort or AbortSignal()

    def detect_file(self, file: DiscoveredFile) -> FileScan:
        """Detect occurrences in one file without modifying anything."""
        detection = self._detect(file)
        return FileScan(
            file_path=file.display_path,
            findings=detection.findings,
            warnings=detection.warnings,
        )

    def detect_directory(self) -> DetectionRun:
        """Detect occurrences in every discovered file.

        Returns:
            Per-file scans and run-level warnings.

        Raises:
            NoSourceFilesError: If no scannable file exists.
        """
        discovery = discover_files(self._config)
        if not discovery.files:
            raise NoSourceFilesError(
                f"No source files found under {self._config.root_dir}"
            )
        warnings = list(discovery.warnings)
        scans, unscheduled = self._map_files(discovery.files, self.detect_file)
        if unscheduled:
            warnings.append(_abort_message(unscheduled))
        logger.info(
            f"Detection finished (files={len(scans)} "
            f"occurrences={sum(len(scan.findings) for scan in scans)})"
        )
        return DetectionRun(scans=scans, warnings=warnings)

    def migrate_file(self, file: DiscoveredFile) -> MigrationResult:
        """Migrate one file: store its labels, then rewrite its source.

        The file is rewritten only after every label it will reference has
        been persisted. If the rewrite fails, the labels this file inserted
        are deleted again.

        Args:
            file: File to migrate.

        Returns:
            Result for this file only.

        Raises:
            RuntimeError: If the migrator was created without a label store.
        """
        if self._writer is None:
            raise RuntimeError("A label store is required for migration")
        result = MigrationResult()
        detection = self._detect(file)
        for warning in detection.warnings:
            result.add_warning(warning)
        if detection.source is None:
            return result
        source = detection.source

        records_by_edit: dict[Edit, list[LabelRecord]] = {}
        for finding in detection.findings:
            occurrence = finding.occurrence
            location = f"{file.display_path}:{occurrence.line}:{occurrence.column}"
            if not occurrence.is_rewritable or finding.identity is None:
                result.add_warning(
                    f"{location}: text is part of a larger expression, "
                    f"not rewritten: {occurrence.raw_text!r}"
                )
                continue
            if occurrence.strategy == "line" and detection.tree_parsed:
                result.add_warning(
                    f"{location}: line match not confirmed by the syntax tree, "
                    f"not rewritten: {occurrence.raw_text!r}"
                )
                continue
            edit = build_edit(
                occurrence,
                source_text=source.text,
                key=finding.identity.key,
                reference_name=self._config.reference_name,
            )
            records_by_edit.setdefault(edit, []).append(
                LabelRecord(
                    scope=finding.identity.scope,
                    key=finding.identity.key,
                    language_code=self._config.language_for(occurrence.classification),
                    translated_text=occurrence.raw_text,
                )
            )
        if not records_by_edit:
            return result

        try:
            rewrite = rewrite_source(source.text, list(records_by_edit))
        except RewriteError as exc:
            result.add_error(f"{file.display_path}: {exc}")
            return result
        for dropped in rewrite.dropped:
            result.add_warning(f"{file.display_path}: {dropped}")

        records = [
            record for edit in rewrite.applied for record in records_by_edit[edit]
        ]
        try:
            outcome, store_warnings = self._writer.write(
                records,
                commit=lambda: write_source_atomically(source.path, rewrite.text),
            )
        except StoreWriteError as exc:
            result.add_error(
                f"{file.display_path}: label store write failed, "
                f"file not rewritten: {exc}"
            )
            return result
        except SourceIOError as exc:
            result.add_error(
                f"{file.display_path}: {exc}; file not rewritten, "
                f"stored labels reverted"
            )
            return result
        for warning in store_warnings:
            result.add_warning(f"{file.display_path}: {warning}")
        result.migrated_labels_count += len(rewrite.applied)
        result.migrated_files_count += 1
        logger.info(
            f"Migrated file (path={file.display_path} "
            f"labels={len(rewrite.applied)} written={outcome.written_count})"
        )
        return result

    def migrate_directory(self) -> MigrationResult:
        """Migrate every discovered file and merge the per-file results.

        Raises:
            NoSourceFilesError: If no scannable file exists.
        """
        discovery = discover_files(self._config)
        if not discovery.files:
            raise NoSourceFilesError(
                f"No source files found under {self._config.root_dir}"
            )
        result = MigrationResult()
        for warning in discovery.warnings:
            result.add_warning(warning)
        file_results, unscheduled = self._map_files(
            discovery.files, self.migrate_file
        )
        for file_result in file_results:
            result.merge(file_result)
        if unscheduled:
            result.add_warning(_abort_message(unscheduled))
        logger.info(
            f"Migration finished (files={result.migrated_files_count} "
            f"labels={result.migrated_labels_count} errors={len(result.errors)})"
        )
        return result

    def _detect(self, file: DiscoveredFile) -> _FileDetection:
        try:
            source = read_source(file.path, display_path=file.display_path)
        except SourceIOError as exc:
            return _FileDetection(source=None, warnings=[f"{file.display_path}: {exc}"])

        detection = _FileDetection(source=source)
        has_line = any(strategy.name == "line" for strategy in self._strategies)
        results = []
        for strategy in self._strategies:
            try:
                results.append(strategy.scan(source))
            except ParseError as exc:
                fallback = "using line-based detection" if has_line else "file skipped"
                detection.warnings.append(f"{file.display_path}: {exc}; {fallback}")
                continue
            if strategy.name == "ast":
                detection.tree_parsed = True

        for occurrence in union_occurrences(results):
            try:
                identity = self._synthesizer.synthesize(occurrence)
            except IdentityError as exc:
                detection.warnings.append(
                    f"{file.display_path}:{occurrence.line}:{occurrence.column}: "
                    f"{exc}; dropped"
                )
                continue
            detection.findings.append(Finding(occurrence=occurrence, identity=identity))
        return detection

    def _map_files(
        self, files: list[DiscoveredFile], task: Callable[[DiscoveredFile], _T]
    ) -> tuple[list[_T], int]:
        """Run ``task`` per file, scheduling no new file once aborted.

        Returns:
            Results in file order and the number of files never scheduled.
        """
        max_workers = self._config.max_workers
        results: dict[int, _T] = {}
        future_to_index: dict[concurrent.futures.Future[_T], int] = {}
        pending: set[concurrent.futures.Future[_T]] = set()
        next_index = 0
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            while True:
                while (
                    next_index < len(files)
                    and len(pending) < max_workers
                    and not self._abort.is_set()
                ):
                    future = executor.submit(task, files[next_index])
                    future_to_index[future] = next_index
                    pending.add(future)
                    next_index += 1
                if not pending:
                    break
                done, pending = concurrent.futures.wait(
                    pending, return_when=concurrent.futures.FIRST_COMPLETED
                )
                for future in done:
                    results[future_to_index[future]] = future.result()
        unscheduled = len(files) - next_index
        if unscheduled:
            logger.warning(
                f"Run aborted before all files ran (unscheduled={unscheduled})"
            )
        return [results[index] for index in sorted(results)], unscheduled


def _abort_message(unscheduled: int) -> str:
    return f"Run aborted: {unscheduled} file(s) were not processed"
