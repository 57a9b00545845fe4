from __future__ import annotations

import uuid
from pathlib import Path

import pytest

from core.files import UuidValidator
from core.models import FileRecord, NumericKey, PathString, UniqueId, classify_identifier
from core.studio import (
    NotAFileError,
    RecordNotFoundError,
    ResolvedResource,
    ResourceNotFoundError,
    ResourceResolver,
)


def _resolver(project, record_store=None) -> ResourceResolver:
    return ResourceResolver(project.project_dir, "files", record_store=record_store, validator=UuidValidator())


def test_resolve_record(project) -> None:
    record = FileRecord(id=1, uuid=None, type="file", path=project.relative)

    result = _resolver(project).resolve_record(record)

    assert isinstance(result, ResolvedResource)
    assert result.absolute_path == project.absolute
    assert result.record is record


def test_resolve_record_rejects_folders(project) -> None:
    result = _resolver(project).resolve_record(FileRecord(id=1, uuid=None, type="folder", path="foo"))

    assert isinstance(result, NotAFileError)
    assert str(result) == "DBAFS item 'foo' is not a file."


def test_resolve_record_with_missing_file(project) -> None:
    record = FileRecord(id=1, uuid=None, type="file", path="this/does/not/exist.jpg")

    result = _resolver(project).resolve_record(record)

    assert isinstance(result, ResourceNotFoundError)
    assert str(result).startswith("No resource could be located at path ")


def test_resolve_uuid_and_id_through_record_store(project, record_store) -> None:
    record = record_store.add_file(project.relative)
    resolver = _resolver(project, record_store)

    by_uuid = resolver.resolve_uuid(record.uuid)
    by_id = resolver.resolve_id(record.id)

    assert by_uuid.absolute_path == project.absolute
    assert by_id.absolute_path == project.absolute
    assert by_uuid.record.id == record.id


def test_unknown_uuid_and_id_messages(project, record_store) -> None:
    resolver = _resolver(project, record_store)

    missing_uuid = resolver.resolve_uuid("invalid-uuid")
    missing_id = resolver.resolve_id(99)

    assert isinstance(missing_uuid, RecordNotFoundError)
    assert str(missing_uuid) == "DBAFS item with UUID 'invalid-uuid' could not be found."
    assert isinstance(missing_id, RecordNotFoundError)
    assert str(missing_id) == "DBAFS item with ID '99' could not be found."


def test_lookups_without_record_store_fail(project) -> None:
    assert isinstance(_resolver(project).resolve_id(5), RecordNotFoundError)


def test_binary_uuid_is_reported_as_text(project, record_store) -> None:
    value = uuid.UUID("1d902bf1-2683-406e-b004-f0b59095e5a1")

    result = _resolver(project, record_store).resolve_uuid(value.bytes)

    assert str(result) == f"DBAFS item with UUID '{value}' could not be found."


def test_malformed_binary_uuid_is_reported_as_hex(project, record_store) -> None:
    result = _resolver(project, record_store).resolve_uuid(b"abc")

    assert isinstance(result, RecordNotFoundError)
    assert str(result) == "DBAFS item with UUID '616263' could not be found."


@pytest.mark.parametrize("auto_detect", [True, False])
def test_resolve_relative_and_absolute_paths(project, auto_detect: bool) -> None:
    resolver = _resolver(project)

    assert resolver.resolve_path(project.relative, auto_detect).absolute_path == project.absolute
    assert resolver.resolve_path(str(project.absolute), auto_detect).absolute_path == project.absolute


def test_resolve_path_is_canonicalized(project) -> None:
    result = _resolver(project).resolve_path("files/public/../public/./foo.jpg")

    assert result.absolute_path == project.absolute


def test_resolve_path_detects_records_in_upload_folder(project, record_store) -> None:
    record = record_store.add_file(project.absolute)
    resolver = _resolver(project, record_store)

    detected = resolver.resolve_path(project.absolute)
    plain = resolver.resolve_path(project.absolute, auto_detect_records=False)

    assert detected.record is not None and detected.record.id == record.id
    assert plain.record is None


@pytest.mark.parametrize("auto_detect", [True, False])
def test_resolve_missing_path(project, auto_detect: bool) -> None:
    result = _resolver(project).resolve_path(project.project_dir / "this/does/not/exist.png", auto_detect)

    assert isinstance(result, ResourceNotFoundError)
    assert "No resource could be located at path" in str(result)


def test_resolve_directory_is_not_found(project) -> None:
    assert isinstance(_resolver(project).resolve_path("files/public"), ResourceNotFoundError)


def test_resolve_image_outside_upload_folder(project, make_image) -> None:
    image = make_image(str(project.project_dir / "images/dummy.jpg"))

    result = _resolver(project).resolve_image(image)

    assert result.absolute_path == project.project_dir / "images/dummy.jpg"
    assert image.calls == 1


def test_resolve_image_with_missing_file(project, make_image) -> None:
    result = _resolver(project).resolve_image(make_image("/this/does/not/exist.png"))

    assert isinstance(result, ResourceNotFoundError)


def test_every_identifier_shape_resolves_to_the_same_file(project, record_store, make_image) -> None:
    record = record_store.add_file(project.relative)
    resolver = _resolver(project, record_store)
    identifiers = [
        record,
        make_image(str(project.absolute)),
        record.uuid,
        record.id,
        str(record.id),
        project.relative,
        str(project.absolute),
        project.absolute,
    ]

    paths = {resolver.resolve(identifier).absolute_path for identifier in identifiers}

    assert paths == {project.absolute}


def test_classify_raw_strings() -> None:
    validator = UuidValidator()

    assert isinstance(classify_identifier("1d902bf1-2683-406e-b004-f0b59095e5a1", validator), UniqueId)
    assert classify_identifier("5", validator) == NumericKey(5)
    assert isinstance(classify_identifier("files/5.jpg", validator), PathString)
    assert classify_identifier(Path("a.jpg"), validator).kind == "path"


def test_classify_rejects_unsupported_types() -> None:
    with pytest.raises(TypeError):
        classify_identifier(1.5, UuidValidator())


def test_lightbox_targets(project) -> None:
    resolver = _resolver(project)
    extensions = ("jpg", "png")

    assert resolver.resolve_lightbox_target(project.relative, extensions) == (project.absolute, None)
    assert resolver.resolve_lightbox_target("https://example.com/a.PNG", extensions) == (None, "https://example.com/a.PNG")
    assert resolver.resolve_lightbox_target("https://example.com/a.xml", extensions) == (None, None)
    assert resolver.resolve_lightbox_target("this/does/not/exist.png", extensions) == (None, None)
    assert resolver.resolve_lightbox_target("files/public/foo%20%28bar%29.jpg", extensions) == (
        project.project_dir / "files/public/foo (bar).jpg",
        None,
    )
