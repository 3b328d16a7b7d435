"""
Esquemas Pydantic para el perfil de usuario.
"""
from typing import Optional
from pydantic import BaseModel, Field


class UserProfileUpdate(BaseModel):
    """
    Esquema para actualización parcial del perfil.
    Nota: sólo se aplican los campos enviados (exclude_none en el router).
    """
    full_name: Optional[str] = Field(default=None, max_length=120)
    phone: Optional[str] = Field(default=None, max_length=32)
    company: Optional[str] = Field(default=None, max_length=120)
    tz: Optional[str] = None  # America/Mexico_City
    language: Optional[str] = Field(default=None, max_length=8)


class ProfileOut(BaseModel):
    message: Optional[str] = None
    profile: dict
