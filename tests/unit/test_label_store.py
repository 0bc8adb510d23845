import sqlite3
from pathlib import Path

import pytest

from hts.labels import StoreWriteError
from hts.model import LabelRecord
from hts.source import SourceIOError
from hts.store import SQLiteLabelStore
from hts.writer import LabelStoreWriter, dedupe_records, seed_scope


def _record(
    key: str = "save_changes",
    text: str = "Save changes",
    scope: str = "settingsView",
    language_code: str = "en",
) -> LabelRecord:
    return LabelRecord(
        scope=scope, key=key, language_code=language_code, translated_text=text
    )


def test_ph2_sto_001_put_and_get_round_trip(tmp_path: Path) -> None:
    store = SQLiteLabelStore(db_path=tmp_path / "db" / "labels.sqlite")

    inserted = store.put("settingsView", "save_changes", "en", "Save changes")

    assert inserted is True
    assert store.get("settingsView", "save_changes", "en") == "Save changes"
    assert store.get("settingsView", "save_changes", "zh") is None
    assert store.count_by_scope("settingsView") == 1
    assert store.count_by_scope("otherView") == 0


def test_ph2_sto_002_existing_identity_is_never_overwritten(tmp_path: Path) -> None:
    db_path = tmp_path / "labels.sqlite"
    store = SQLiteLabelStore(db_path=db_path)
    store.put("settingsView", "save_changes", "en", "Save changes")

    inserted = store.put("settingsView", "save_changes", "en", "Save all changes")

    assert inserted is False
    assert store.get("settingsView", "save_changes", "en") == "Save changes"
    connection = sqlite3.connect(db_path)
    try:
        rows = connection.execute("SELECT COUNT(*) FROM ui_labels").fetchall()
    finally:
        connection.close()
    assert rows == [(1,)]


def test_ph2_sto_003_put_many_reports_existing_and_conflicting(
    tmp_path: Path,
) -> None:
    store = SQLiteLabelStore(db_path=tmp_path / "labels.sqlite")
    store.put_many([_record(), _record(key="cancel", text="Cancel")])

    outcome = store.put_many(
        [
            _record(),
            _record(key="cancel", text="Abort"),
            _record(key="delete", text="Delete"),
        ]
    )

    assert outcome.written_count == 1
    assert outcome.existing == [_record()]
    assert outcome.conflicting == [(_record(key="cancel", text="Abort"), "Cancel")]
    assert [record.key for record in store.iter_records()] == [
        "cancel",
        "delete",
        "save_changes",
    ]


def test_ph2_sto_004_writer_warns_about_skipped_records(tmp_path: Path) -> None:
    store = SQLiteLabelStore(db_path=tmp_path / "labels.sqlite")
    store.put_many([_record(key="cancel", text="Cancel")])
    writer = LabelStoreWriter(store)

    outcome, warnings = writer.write(
        [
            _record(),
            _record(text="Save changes!"),
            _record(key="cancel", text="Abort"),
        ]
    )

    assert outcome.written_count == 1
    assert len(warnings) == 2
    assert warnings[0].startswith("Different texts share one label, kept first")
    assert "kept stored value" in warnings[1]
    assert store.get("settingsView", "save_changes", "en") == "Save changes"
    assert store.get("settingsView", "cancel", "en") == "Cancel"


def test_ph2_sto_005_dedupe_keeps_first_per_identity() -> None:
    records = [
        _record(),
        _record(text="Other"),
        _record(language_code="zh", text="保存"),
    ]

    assert dedupe_records(records) == [records[0], records[2]]


def test_ph2_sto_006_seed_scope_runs_once(tmp_path: Path) -> None:
    store = SQLiteLabelStore(db_path=tmp_path / "labels.sqlite")
    records = [
        _record(),
        _record(key="cancel", text="Cancel"),
        _record(scope="otherView"),
    ]

    first = seed_scope(store, "settingsView", records)
    second = seed_scope(store, "settingsView", [_record(key="retry", text="Retry")])

    assert first == 2
    assert second == 0
    assert store.count_by_scope("settingsView") == 2
    assert store.count_by_scope("otherView") == 0


def test_ph2_sto_007_unwritable_database_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    store = SQLiteLabelStore(db_path=blocker / "labels.sqlite")

    with pytest.raises(StoreWriteError):
        store.put_many([_record()])


def test_ph2_sto_008_delete_many_removes_only_given_identities(
    tmp_path: Path,
) -> None:
    store = SQLiteLabelStore(db_path=tmp_path / "labels.sqlite")
    outcome = store.put_many([_record(), _record(key="cancel", text="Cancel")])

    removed = store.delete_many([_record(), _record(key="missing", text="Gone")])

    assert outcome.written == [_record(), _record(key="cancel", text="Cancel")]
    assert removed == 1
    assert [record.key for record in store.iter_records()] == ["cancel"]


def test_ph2_sto_009_writer_reverts_batch_when_commit_fails(tmp_path: Path) -> None:
    store = SQLiteLabelStore(db_path=tmp_path / "labels.sqlite")
    store.put_many([_record(key="cancel", text="Cancel")])
    writer = LabelStoreWriter(store)

    def fail() -> None:
        raise SourceIOError("Cannot write View.tsx: read-only file system")

    with pytest.raises(SourceIOError):
        writer.write([_record(), _record(key="cancel", text="Cancel")], commit=fail)

    assert store.get("settingsView", "save_changes", "en") is None
    assert store.get("settingsView", "cancel", "en") == "Cancel"


def test_ph2_sto_010_writer_runs_commit_after_store_write(tmp_path: Path) -> None:
    store = SQLiteLabelStore(db_path=tmp_path / "labels.sqlite")
    writer = LabelStoreWriter(store)
    seen: list[int] = []

    outcome, warnings = writer.write(
        [_record()], commit=lambda: seen.append(store.count_by_scope("settingsView"))
    )
    writer.write([], commit=lambda: seen.append(-1))

    assert outcome.written_count == 1
    assert warnings == []
    assert seen == [1, -1]
