"""Schemas para endpoints de imágenes."""
from typing import List, Optional
from pydantic import BaseModel


class ImageCreatedOut(BaseModel):
    message: str
    id: str
    key: str
    created_at: str
    updated_at: str


class ImageItem(BaseModel):
    domainame: str
    id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ImageListOut(BaseModel):
    images: List[ImageItem]


class SignedUrlOut(BaseModel):
    url: str
