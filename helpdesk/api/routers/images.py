"""Endpoints de imágenes: subida a S3 con metadatos en Mongo y URLs firmadas vía CDN."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from helpdesk.api.deps import get_cdn, get_current_user, get_storage
from helpdesk.api.schemas.images import ImageCreatedOut, ImageItem, ImageListOut, SignedUrlOut
from helpdesk.services import image_service

_log = logging.getLogger("helpdesk.images")

router = APIRouter(prefix="/images", tags=["Images"])


@router.post("", response_model=ImageCreatedOut, status_code=status.HTTP_201_CREATED, summary="Subir imagen (S3)")
async def upload(
    file: UploadFile = File(...),
    user=Depends(get_current_user),
    storage=Depends(get_storage),
) -> ImageCreatedOut:
    filename = file.filename or ""
    domainame, extension = image_service.split_name(filename)
    if not domainame or extension not in image_service.ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Extensión no permitida: {extension or '(ninguna)'}",
        )
    data = await file.read()
    try:
        stored = image_service.store_new_image(storage, data, filename, str(user["_id"]))
    except Exception:
        _log.exception("No se pudo subir la imagen %s", filename)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="No se pudo subir la imagen")
    if stored is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="La imagen ya existe")
    return ImageCreatedOut(message="ok", **stored)


@router.get("/mine", response_model=ImageListOut, summary="Imágenes subidas por el usuario")
def my_images(user=Depends(get_current_user)) -> ImageListOut:
    images = image_service.get_images_by_user(str(user["_id"])) or []
    return ImageListOut(images=[ImageItem(**i) for i in images])


@router.get("/company/{company}", response_model=SignedUrlOut, summary="URL firmada de la imagen de una empresa")
def company_image(
    company: str,
    extension: str = Query("png", pattern="^[a-z0-9]{2,5}$"),
    cdn=Depends(get_cdn),
) -> SignedUrlOut:
    url = image_service.fetch_image_by_company(cdn, company, extension)
    if not url:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Imagen no encontrada")
    return SignedUrlOut(url=url)
