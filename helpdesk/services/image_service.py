"""Servicio de imágenes: metadatos en Mongo, bytes en S3 y lectura vía CloudFront."""
from __future__ import annotations

import logging
import mimetypes
import os
from typing import Any, Dict, List, Optional, Tuple

from helpdesk.infrastructure.storage.cloudfront import CdnSigner
from helpdesk.infrastructure.storage.s3 import ObjectStorage
from helpdesk.repositories import images_repo

_log = logging.getLogger("helpdesk.images")

ALLOWED_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp", "svg"})


def split_name(filename: str) -> Tuple[str, str]:
    """`Acme.PNG` -> (`Acme`, `png`). Sin extensión devuelve (`nombre`, ``)."""
    stem, ext = os.path.splitext(os.path.basename(filename or ""))
    return stem, ext.lstrip(".").lower()


def create_image_data(domainame: str, uploaded_by: str, extension: str) -> Optional[Dict[str, Any]]:
    """Crea el registro de la imagen.

    Devuelve `{id, created_at, updated_at}` si se creó, o None si ya existía.
    """
    created = images_repo.insert_image(domainame, uploaded_by, extension)
    if created is None:
        _log.info("Imagen ya registrada domainame=%s extension=%s", domainame, extension)
    return created


def upload_image(storage: ObjectStorage, data: bytes, name: str, extension: str) -> str:
    """Sube los bytes bajo `{namespace}/{extension}/{name}` y devuelve la clave."""
    key = storage.key_for(extension, name)
    content_type, _ = mimetypes.guess_type(name)
    return storage.put_bytes(key, data, content_type=content_type)


def store_new_image(
    storage: ObjectStorage, data: bytes, filename: str, uploaded_by: str
) -> Optional[Dict[str, Any]]:
    """Registra y sube una imagen nueva.

    Devuelve el registro más la clave, o None si ya existía (sin subir nada).
    Si la subida falla se elimina el registro para poder reintentar.
    """
    domainame, extension = split_name(filename)
    created = create_image_data(domainame, uploaded_by, extension)
    if created is None:
        return None
    try:
        key = upload_image(storage, data, f"{domainame}.{extension}", extension)
    except Exception:
        try:
            images_repo.delete_image(created["id"])
        except Exception:
            # Se conserva el error de la subida; el registro queda huérfano
            _log.exception("No se pudo eliminar el registro %s tras la falla de subida", created["id"])
        raise
    return {**created, "key": key}


def fetch_image_by_company(cdn: CdnSigner, company: str, extension: str = "png") -> Optional[str]:
    """URL firmada de la imagen de `company`, o None si no hay registro."""
    image = images_repo.find_image(company, extension)
    if not image:
        return None
    path = f"/{extension}/{image['domainame']}.{extension}"
    return cdn.signed_url(path)


def get_images_by_user(user_id: str) -> Optional[List[Dict[str, Any]]]:
    images = images_repo.find_images_by_uploader(user_id)
    return images or None
