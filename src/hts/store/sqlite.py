# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""SQLite implementation of the label store."""

import logging
import sqlite3
from collections.abc import Iterator
from pathlib import Path

from hts.labels import StoreWriteError, WriteOutcome
from hts.model import LabelRecord

logger = logging.getLogger(__name__)


class SQLiteLabelStore:
    """Persist labels in a ``ui_labels`` table keyed by scope, key, and language."""

    def __init__(self, db_path: Path) -> None:
        """Initialize the store.

        Args:
            db_path: SQLite database file path.
        """
        self._db_path = db_path

    def put(self, scope: str, key: str, language_code: str, text: str) -> bool:
        """Insert one label unless its identity already exists.

        Returns:
            ``True`` if a row was inserted.

        Raises:
            StoreWriteError: If the database cannot be written.
        """
        outcome = self.put_many(
            [
                LabelRecord(
                    scope=scope,
                    key=key,
                    language_code=language_code,
                    translated_text=text,
                )
            ]
        )
        return outcome.written_count == 1

    def put_many(self, records: list[LabelRecord]) -> WriteOutcome:
        """Insert records in one transaction.

        Existing identities are left untouched and reported in the outcome.
        On any database failure the whole batch is rolled back.

        Args:
            records: Records to insert.

        Returns:
            Inserted, existing, and conflicting records.

        Raises:
            StoreWriteError: If schema setup or any insert fails.
        """
        existing: list[LabelRecord] = []
        conflicting: list[tuple[LabelRecord, str]] = []
        written: list[LabelRecord] = []
        connection = self._connect()
        try:
            self._ensure_schema(connection=connection)
            connection.execute("BEGIN")
            for record in records:
                row = connection.execute(
                    "SELECT translated_text FROM ui_labels "
                    "WHERE scope_key = ? AND label_key = ? AND language_code = ?",
                    record.identity,
                ).fetchone()
                if row is not None:
                    if row[0] == record.translated_text:
                        existing.append(record)
                    else:
                        conflicting.append((record, row[0]))
                    continue
                cursor = connection.execute(
                    "INSERT OR IGNORE INTO ui_labels ("
                    "scope_key, label_key, language_code, translated_text"
                    ") VALUES (?, ?, ?, ?)",
                    (*record.identity, record.translated_text),
                )
                if cursor.rowcount == 1:
                    written.append(record)
            connection.commit()
        except sqlite3.DatabaseError as exc:
            connection.rollback()
            logger.warning(
                f"SQLite label write failed (db_path={self._db_path} error={exc})"
            )
            raise StoreWriteError(str(exc)) from exc
        finally:
            connection.close()
        return WriteOutcome(written=written, existing=existing, conflicting=conflicting)

    def delete_many(self, records: list[LabelRecord]) -> int:
        """Delete the identities of records in one transaction.

        Used to revert a batch whose source rewrite could not be completed.

        Args:
            records: Records whose identities are removed.

        Returns:
            Number of rows deleted.

        Raises:
            StoreWriteError: If any delete fails; the batch is rolled back.
        """
        deleted = 0
        connection = self._connect()
        try:
            self._ensure_schema(connection=connection)
            connection.execute("BEGIN")
            for record in records:
                cursor = connection.execute(
                    "DELETE FROM ui_labels "
                    "WHERE scope_key = ? AND label_key = ? AND language_code = ?",
                    record.identity,
                )
                deleted += cursor.rowcount
            connection.commit()
        except sqlite3.DatabaseError as exc:
            connection.rollback()
            logger.warning(
                f"SQLite label delete failed (db_path={self._db_path} error={exc})"
            )
            raise StoreWriteError(str(exc)) from exc
        finally:
            connection.close()
        return deleted

    def get(self, scope: str, key: str, language_code: str) -> str | None:
        """Return the stored text for one identity.

        Raises:
            StoreWriteError: If the database cannot be read.
        """
        rows = self._query(
            "SELECT translated_text FROM ui_labels "
            "WHERE scope_key = ? AND label_key = ? AND language_code = ?",
            (scope, key, language_code),
        )
        return rows[0][0] if rows else None

    def count_by_scope(self, scope: str) -> int:
        """Count labels stored under one scope.

        Raises:
            StoreWriteError: If the database cannot be read.
        """
        rows = self._query(
            "SELECT COUNT(*) FROM ui_labels WHERE scope_key = ?", (scope,)
        )
        return int(rows[0][0])

    def iter_records(self) -> Iterator[LabelRecord]:
        """Yield every stored label ordered by scope, key, and language.

        Raises:
            StoreWriteError: If the database cannot be read.
        """
        rows = self._query(
            "SELECT scope_key, label_key, language_code, translated_text "
            "FROM ui_labels ORDER BY scope_key, label_key, language_code",
            (),
        )
        for scope, key, language_code, text in rows:
            yield LabelRecord(
                scope=scope, key=key, language_code=language_code, translated_text=text
            )

    def _query(self, sql: str, params: tuple[str, ...]) -> list[tuple]:
        connection = self._connect()
        try:
            self._ensure_schema(connection=connection)
            return connection.execute(sql, params).fetchall()
        except sqlite3.DatabaseError as exc:
            logger.warning(
                f"SQLite label query failed (db_path={self._db_path} error={exc})"
            )
            raise StoreWriteError(str(exc)) from exc
        finally:
            connection.close()

    def _connect(self) -> sqlite3.Connection:
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            return sqlite3.connect(self._db_path)
        except (OSError, sqlite3.Error) as exc:
            logger.warning(
                f"SQLite connection failed (db_path={self._db_path} error={exc})"
            )
            raise StoreWriteError(str(exc)) from exc

    def _ensure_schema(self, connection: sqlite3.Connection) -> None:
        """Create the label table and its unique index when missing.

        Args:
            connection: Open SQLite connection.
        """
        connection.execute(
            "CREATE TABLE IF NOT EXISTS ui_labels ("
            "id INTEGER PRIMARY KEY, "
            "scope_key TEXT NOT NULL, "
            "label_key TEXT NOT NULL, "
            "language_code TEXT NOT NULL, "
            "translated_text TEXT NOT NULL"
            ")"
        )
        connection.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS idx_ui_labels_identity "
            "ON ui_labels(scope_key, label_key, language_code)"
        )
        connection.execute(
            "CREATE INDEX IF NOT EXISTS idx_ui_labels_scope ON ui_labels(scope_key)"
        )
