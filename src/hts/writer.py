# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Serialized label store writes shared by migration workers."""

import logging
import threading
from collections.abc import Callable

from hts.labels import LabelStore, WriteOutcome
from hts.model import LabelRecord
from hts.source import SourceIOError

logger = logging.getLogger(__name__)

_WRITE_LOCK = threading.Lock()


def dedupe_records(records: list[LabelRecord]) -> list[LabelRecord]:
    """Keep the first record per ``(scope, key, language_code)`` identity."""
    unique: dict[tuple[str, str, str], LabelRecord] = {}
    for record in records:
        unique.setdefault(record.identity, record)
    return list(unique.values())


class LabelStoreWriter:
    """Write label batches one file at a time.

    All writers in the process share one lock, so batches from parallel
    workers never interleave.
    """

    def __init__(self, store: LabelStore) -> None:
        """Initialize the writer.

        Args:
            store: Label store receiving the records.
        """
        self._store = store

    def write(
        self,
        records: list[LabelRecord],
        commit: Callable[[], None] | None = None,
    ) -> tuple[WriteOutcome, list[str]]:
        """Persist one file's records atomically.

        When ``commit`` is given it runs under the write lock right after the
        batch is stored. If it raises ``SourceIOError`` the records inserted
        by this batch are deleted again before the error propagates.

        Args:
            records: Records extracted from one file.
            commit: Follow-up step, usually the source file rewrite.

        Returns:
            The store outcome and one warning per skipped record.

        Raises:
            StoreWriteError: If the store rejects the batch or the revert.
            SourceIOError: If ``commit`` fails.
        """
        batch = dedupe_records(records)
        warnings: list[str] = []
        kept = {record.identity: record for record in batch}
        for record in records:
            first = kept[record.identity]
            if record.translated_text != first.translated_text:
                warnings.append(
                    f"Different texts share one label, kept first: "
                    f"{record.scope}.{record.key} ({record.language_code}) "
                    f"kept={first.translated_text!r} "
                    f"dropped={record.translated_text!r}"
                )
        with _WRITE_LOCK:
            outcome = self._store.put_many(batch) if batch else WriteOutcome()
            if commit is not None:
                try:
                    commit()
                except SourceIOError:
                    removed = self._store.delete_many(outcome.written)
                    logger.warning(f"Reverted label batch (removed={removed})")
                    raise
        for record in outcome.existing:
            warnings.append(
                f"Label already exists, skipped: "
                f"{record.scope}.{record.key} ({record.language_code})"
            )
        for record, stored_text in outcome.conflicting:
            warnings.append(
                f"Label already exists with different text, kept stored value: "
                f"{record.scope}.{record.key} ({record.language_code}) "
                f"stored={stored_text!r} found={record.translated_text!r}"
            )
        return outcome, warnings


def seed_scope(store: LabelStore, scope: str, records: list[LabelRecord]) -> int:
    """Seed a scope's labels only when the scope is still empty.

    Args:
        store: Label store to seed.
        scope: Scope being initialized.
        records: Records to insert; records of other scopes are ignored.

    Returns:
        Number of records inserted; ``0`` when the scope was already seeded.

    Raises:
        StoreWriteError: If the store cannot be read or written.
    """
    with _WRITE_LOCK:
        if store.count_by_scope(scope) > 0:
            logger.info(f"Scope already seeded, skipping (scope={scope})")
            return 0
        batch = [record for record in dedupe_records(records) if record.scope == scope]
        outcome = store.put_many(batch)
    logger.info(f"Seeded scope (scope={scope} count={outcome.written_count})")
    return outcome.written_count
