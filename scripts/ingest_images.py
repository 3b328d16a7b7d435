"""Ingesta de imágenes locales hacia S3 + colección `images`.

Cada archivo nuevo se registra y se sube una sola vez a `{KEY}/{extension}/{nombre}`;
los ya registrados se reportan como conflicto y no se vuelven a subir.

Env vars requeridas:
  BUCKET_REGION, ACCESS_KEY, SECRET_ACCESS_KEY, BUCKET_NAME, KEY, MONGO_URI

Uso:
  PYTHONPATH=. python scripts/ingest_images.py ./images --uploaded-by system
"""
from __future__ import annotations

import argparse
import sys

from helpdesk.core.config import settings
from helpdesk.core.exceptions import ConfigurationError
from helpdesk.core.logging import setup_logging
from helpdesk.infrastructure.db.bootstrap import ensure_image_indexes
from helpdesk.infrastructure.db.mongo import close_mongo, db_ready, init_mongo
from helpdesk.infrastructure.storage.s3 import ObjectStorage
from helpdesk.services.image_ingest_service import ingest_directory


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Sube a S3 las imágenes nuevas de un directorio")
    parser.add_argument("path", nargs="?", default=settings.images_dir, help="Directorio con imágenes")
    parser.add_argument("--uploaded-by", default=settings.ingest_uploader_id, help="Id del usuario que sube")
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        storage = ObjectStorage.from_settings(settings)
    except ConfigurationError as e:
        print(f"Config incompleta: {e.message}", file=sys.stderr)
        return 2

    init_mongo()
    if not db_ready():
        print("Mongo no accesible; abortando", file=sys.stderr)
        return 2
    try:
        # Sin el índice único no se garantiza una sola subida por imagen
        ensure_image_indexes()
        report = ingest_directory(storage, args.path, uploaded_by=args.uploaded_by)
    finally:
        close_mongo()

    for o in report.outcomes:
        line = f"{o.status:<8} {o.name}"
        if o.key:
            line += f" -> {o.key}"
        elif o.detail:
            line += f" ({o.detail})"
        print(line)
    print(report.summary())
    return 0 if report.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
