# Path: scripts/build_figure.py
# Purpose: CLI tool to build a figure for any file identifier and print it as JSON.
# Layer: scripts.
# Details: Demonstrates how to wire settings, record store, image studio, and figure builder.

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from config import StudioSettings
from core.files import SqliteRecordStore
from core.models import LocaleContext
from core.studio import FigureBuilder, InvalidResourceError, PillowImageStudio


def main() -> None:
    """Resolve an identifier (uuid, id, or path) and print the resulting figure."""

    parser = argparse.ArgumentParser(description="Build a figure for a file identifier")
    parser.add_argument("identifier", help="File uuid, numeric record id, or absolute/project relative path")
    parser.add_argument("--project-dir", type=Path, default=None, help="Project root containing the upload folder")
    parser.add_argument("--size", type=int, nargs=2, metavar=("WIDTH", "HEIGHT"), default=None, help="Target size")
    parser.add_argument("--mode", default="proportional", choices=["proportional", "crop", "box"], help="Resize mode")
    parser.add_argument("--locale", default=None, help="Locale used to pick the file metadata")
    parser.add_argument("--fallback-locale", default=None, help="Fallback locale of the page")
    parser.add_argument("--lightbox", action="store_true", help="Attach a lightbox variant")
    parser.add_argument("--resize", action="store_true", help="Write the resized image into the cache folder")
    args = parser.parse_args()

    overrides = {"project_dir": args.project_dir} if args.project_dir is not None else {}
    settings = StudioSettings.from_env(**overrides)
    logging.basicConfig(level=settings.log_level)

    store = SqliteRecordStore(settings.record_database, project_dir=settings.project_dir)
    studio = PillowImageStudio(
        cache_dir=settings.project_dir / settings.cache_dir,
        predefined_sizes=settings.predefined_sizes,
    )
    builder = FigureBuilder.from_settings(
        settings,
        studio,
        record_store=store,
        locale_context=LocaleContext(page_locale=args.locale, page_fallback_locale=args.fallback_locale),
    )

    builder.from_(args.identifier).enable_lightbox(args.lightbox)
    if args.size:
        builder.set_size((args.size[0], args.size[1], args.mode))

    try:
        figure = builder.build()
    except InvalidResourceError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    payload = figure.to_dict()
    if args.resize:
        payload["image"]["resized_path"] = str(figure.image.resize())
    print(json.dumps(payload, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
