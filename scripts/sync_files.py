# Path: scripts/sync_files.py
# Purpose: CLI tool to register the images of the upload folder in the file record database.
# Layer: scripts.
# Details: Wires settings, the SQLite record store, and the upload folder synchronizer together.

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from config import StudioSettings
from core.files import FileSynchronizer, SqliteRecordStore


def main() -> None:
    """Synchronize the upload folder into the record database."""

    parser = argparse.ArgumentParser(description="Register uploaded images as file records")
    parser.add_argument("--project-dir", type=Path, default=None, help="Project root containing the upload folder")
    parser.add_argument("--upload-path", default=None, help="Upload folder relative to the project root")
    args = parser.parse_args()

    overrides = {}
    if args.project_dir is not None:
        overrides["project_dir"] = args.project_dir
    if args.upload_path is not None:
        overrides["upload_path"] = args.upload_path
    settings = StudioSettings.from_env(**overrides)
    logging.basicConfig(level=settings.log_level)

    store = SqliteRecordStore(settings.record_database, project_dir=settings.project_dir)
    synchronizer = FileSynchronizer(
        settings.project_dir,
        settings.upload_path,
        store,
        extensions=settings.normalized_extensions(),
    )
    added = synchronizer.sync(show_progress=True)
    print(f"Registered {added} new file(s) from {settings.upload_dir} in {settings.record_database}")


if __name__ == "__main__":
    main()
