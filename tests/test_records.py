from __future__ import annotations

import json
import uuid
from pathlib import Path

from core.files import FileSynchronizer, SqliteRecordStore, UuidValidator, uuid_to_string


def test_store_initializes_empty(record_store: SqliteRecordStore) -> None:
    assert record_store.list_records() == []
    assert record_store.find_by_id(1) is None
    assert record_store.find_by_path("files/missing.jpg") is None


def test_add_file_and_lookups(project, record_store: SqliteRecordStore) -> None:
    record = record_store.add_file(project.absolute, meta={"en": {"title": "foo"}})

    assert record.path == "files/public/foo.jpg"
    assert record.name == "foo.jpg"
    assert record.is_file
    assert UuidValidator().is_valid(record.uuid)

    assert record_store.find_by_id(record.id) == record
    assert record_store.find_by_uuid(record.uuid) == record
    assert record_store.find_by_uuid(uuid.UUID(record.uuid).bytes) == record
    assert record_store.find_by_path(project.absolute) == record
    assert record_store.find_by_path(project.relative) == record
    assert json.loads(record.meta) == {"en": {"title": "foo"}}


def test_add_file_is_idempotent_per_path(project, record_store: SqliteRecordStore) -> None:
    first = record_store.add_file(project.relative)
    second = record_store.add_file(project.absolute)

    assert first.id == second.id
    assert len(record_store.list_records()) == 1


def test_update_meta_and_remove(project, record_store: SqliteRecordStore) -> None:
    record = record_store.add_file(project.relative)

    record_store.update_meta(record.id, {"de": {"alt": "bar"}})
    assert json.loads(record_store.find_by_id(record.id).meta) == {"de": {"alt": "bar"}}

    record_store.remove(record.id)
    assert record_store.find_by_id(record.id) is None


def test_folder_records(record_store: SqliteRecordStore) -> None:
    record = record_store.add_file("files/public", type="folder")

    assert not record_store.find_by_id(record.id).is_file


def test_uuid_validator() -> None:
    validator = UuidValidator()

    assert validator.is_valid("1d902bf1-2683-406e-b004-f0b59095e5a1")
    assert validator.is_valid("1D902BF1-2683-406E-B004-F0B59095E5A1")
    assert validator.is_valid(b"\x00" * 16)
    assert not validator.is_valid("foo-uuid")
    assert not validator.is_valid("5")
    assert not validator.is_valid(5)


def test_uuid_to_string() -> None:
    value = uuid.UUID("1d902bf1-2683-406e-b004-f0b59095e5a1")

    assert uuid_to_string(value.bytes) == str(value)
    assert uuid_to_string(str(value).upper()) == str(value)
    assert uuid_to_string(None) is None
    assert uuid_to_string("") is None


def test_synchronizer_registers_new_images(project, record_store: SqliteRecordStore) -> None:
    synchronizer = FileSynchronizer(project.project_dir, "files", record_store, extensions=("jpg", "png"))

    scanned = synchronizer.scan()
    first = synchronizer.sync()
    second = synchronizer.sync()

    assert [path.name for path in scanned] == ["bar.jpg", "foo (bar).jpg", "foo.jpg"]
    assert first == 3
    assert second == 0
    assert {record.path for record in record_store.list_records()} == {
        "files/public/bar.jpg",
        "files/public/foo (bar).jpg",
        "files/public/foo.jpg",
    }


def test_synchronizer_without_upload_folder(tmp_path: Path, record_store: SqliteRecordStore) -> None:
    synchronizer = FileSynchronizer(tmp_path, "missing", record_store)

    assert synchronizer.scan() == []
    assert synchronizer.sync() == 0
