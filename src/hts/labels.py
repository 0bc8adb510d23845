# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Label store contracts."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Protocol

from hts.model import LabelRecord

logger = logging.getLogger(__name__)


class StoreWriteError(RuntimeError):
    """Represent a failed label store write."""


@dataclass(frozen=True)
class WriteOutcome:
    """Summarize one batched label write.

    Attributes:
        written: Records newly inserted.
        existing: Records skipped because the identity already existed with
            the same text.
        conflicting: Records skipped because the identity already existed
            with different text, paired with the stored text.
    """

    written: list[LabelRecord] = field(default_factory=list)
    existing: list[LabelRecord] = field(default_factory=list)
    conflicting: list[tuple[LabelRecord, str]] = field(default_factory=list)

    @property
    def written_count(self) -> int:
        return len(self.written)


class LabelStore(Protocol):
    """Define the contract of a ``(scope, key, language)`` keyed text store."""

    def put(self, scope: str, key: str, language_code: str, text: str) -> bool:
        """Insert one label; return ``False`` when it already existed."""

    def get(self, scope: str, key: str, language_code: str) -> str | None:
        """Return stored text for one identity, if any."""

    def count_by_scope(self, scope: str) -> int:
        """Count records stored under a scope."""

    def put_many(self, records: list[LabelRecord]) -> WriteOutcome:
        """Insert records atomically, skipping identities that exist."""

    def delete_many(self, records: list[LabelRecord]) -> int:
        """Delete the identities of ``records`` atomically; return rows removed."""

    def iter_records(self) -> Iterator[LabelRecord]:
        """Yield every stored record ordered by scope, key, and language."""
