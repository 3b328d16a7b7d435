"""Ingesta de imágenes desde un directorio local hacia Mongo + S3.

Para cada archivo del directorio (en el orden del listado):
  1. intenta crear el registro (domainame = nombre sin extensión);
  2. si se creó, sube los bytes a `{namespace}/{extension}/{nombre}` -> `created`;
  3. si ya existía, no sube nada -> `conflict`.

Cada archivo es independiente: una falla se registra como `error` en el reporte y
se continúa con el resto. Si el directorio no se puede listar, no se procesa nada
y el reporte lleva `fatal_error`.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from helpdesk.infrastructure.storage.s3 import ObjectStorage
from helpdesk.services import image_service

_log = logging.getLogger("helpdesk.ingest")

CREATED = "created"
CONFLICT = "conflict"
SKIPPED = "skipped"
ERROR = "error"


@dataclass
class FileOutcome:
    name: str
    status: str
    key: Optional[str] = None
    detail: Optional[str] = None


@dataclass
class IngestReport:
    directory: str
    outcomes: List[FileOutcome] = field(default_factory=list)
    fatal_error: Optional[str] = None

    def count(self, status: str) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def ok(self) -> bool:
        return self.fatal_error is None and self.count(ERROR) == 0

    def summary(self) -> str:
        if self.fatal_error:
            return f"{self.directory}: no se pudo listar ({self.fatal_error})"
        return (
            f"{self.directory}: created={self.count(CREATED)} conflict={self.count(CONFLICT)} "
            f"skipped={self.count(SKIPPED)} error={self.count(ERROR)}"
        )


def _ingest_file(storage: ObjectStorage, directory: str, name: str, uploaded_by: str) -> FileOutcome:
    path = os.path.join(directory, name)
    if name.startswith(".") or not os.path.isfile(path):
        return FileOutcome(name, SKIPPED, detail="no es un archivo")

    domainame, extension = image_service.split_name(name)
    if extension not in image_service.ALLOWED_EXTENSIONS:
        return FileOutcome(name, SKIPPED, detail=f"extensión no soportada: {extension or '(ninguna)'}")

    with open(path, "rb") as fh:
        data = fh.read()
    stored = image_service.store_new_image(storage, data, name, uploaded_by)
    if stored is None:
        return FileOutcome(name, CONFLICT, detail="ya registrada")
    return FileOutcome(name, CREATED, key=stored["key"])


def ingest_directory(storage: ObjectStorage, directory: str, uploaded_by: str = "system") -> IngestReport:
    report = IngestReport(directory=directory)
    try:
        names = os.listdir(directory)
    except OSError as e:
        _log.error("No se pudo listar %s: %s", directory, e)
        report.fatal_error = str(e)
        return report

    for name in names:
        try:
            outcome = _ingest_file(storage, directory, name, uploaded_by)
        except Exception as e:
            _log.exception("Falló la ingesta de %s", name)
            outcome = FileOutcome(name, ERROR, detail=str(e))
        else:
            _log.info("ingest file=%s status=%s key=%s", name, outcome.status, outcome.key)
        report.outcomes.append(outcome)

    _log.info("Ingesta terminada %s", report.summary())
    return report
