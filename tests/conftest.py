from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple

import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.files import SqliteRecordStore, UuidValidator  # noqa: E402
from core.studio import FigureBuilder, ImageResult, ImageStudio, LightboxResult, ResourceResolver  # noqa: E402

UPLOAD_PATH = "files"
RELATIVE_FILE_PATH = "files/public/foo.jpg"
VALID_EXTENSIONS = ("jpg", "png")


@dataclass
class ProjectPaths:
    project_dir: Path
    absolute: Path
    relative: str

    @property
    def second(self) -> Path:
        return self.project_dir / "files/public/bar.jpg"


def _write_image(path: Path, size: Tuple[int, int] = (200, 100), color: str = "red") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color=color).save(path)
    return path


@pytest.fixture()
def project(tmp_path: Path) -> ProjectPaths:
    """
    Build a throwaway project tree with JPEG fixtures below files/ and images/.
    """
    _write_image(tmp_path / "files/public/foo.jpg")
    _write_image(tmp_path / "files/public/bar.jpg", color="blue")
    _write_image(tmp_path / "files/public/foo (bar).jpg", color="green")
    _write_image(tmp_path / "images/dummy.jpg", size=(50, 50))
    (tmp_path / "files/public/notes.xml").write_text("<notes/>", encoding="utf-8")
    return ProjectPaths(project_dir=tmp_path, absolute=tmp_path / RELATIVE_FILE_PATH, relative=RELATIVE_FILE_PATH)


@pytest.fixture()
def record_store(tmp_path: Path) -> SqliteRecordStore:
    return SqliteRecordStore(tmp_path / "var/files.sqlite3", project_dir=tmp_path)


class RecordingStudio(ImageStudio):
    """ImageStudio that records its calls and hands out lightweight results."""

    def __init__(self) -> None:
        self.image_calls: List[Tuple[Any, ...]] = []
        self.lightbox_calls: List[Tuple[Any, ...]] = []

    def create_image(self, path, size=None, resize_options=None) -> ImageResult:
        self.image_calls.append((path, size, resize_options))
        return ImageResult(Path(str(path)), size, resize_options)

    def create_lightbox_image(self, resource, url=None, size=None, group_identifier=None, resize_options=None) -> LightboxResult:
        self.lightbox_calls.append((resource, url, size, group_identifier, resize_options))
        image = None
        if resource is not None:
            source = resource.get_path() if hasattr(resource, "get_path") else resource
            image = ImageResult(Path(str(source)), size, resize_options)
        return LightboxResult(image=image, url=url, group_identifier=group_identifier)


class FakeImage:
    """Minimal in-memory image handle."""

    def __init__(self, path: str) -> None:
        self.path = path
        self.calls = 0

    def get_path(self) -> str:
        self.calls += 1
        return self.path


@pytest.fixture()
def studio() -> RecordingStudio:
    return RecordingStudio()


@pytest.fixture()
def make_builder(project: ProjectPaths, studio: RecordingStudio):
    def factory(record_store: Optional[SqliteRecordStore] = None, **kwargs: Any) -> FigureBuilder:
        resolver = ResourceResolver(
            project_dir=project.project_dir,
            upload_path=UPLOAD_PATH,
            record_store=record_store,
            validator=UuidValidator(),
        )
        return FigureBuilder(resolver, studio, valid_extensions=VALID_EXTENSIONS, **kwargs)

    return factory


@pytest.fixture()
def make_image():
    return FakeImage
