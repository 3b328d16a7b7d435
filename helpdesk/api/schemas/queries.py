"""
Esquemas Pydantic para consultas de clientes y la acción de respuesta.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


class QueryOut(BaseModel):
    id: str
    email: str
    message: str
    created_at: str
    responded: bool = False
    reply: Optional[str] = None


class QueryListOut(BaseModel):
    queries: list[QueryOut]


class ReplyIn(BaseModel):
    """Payload de `PUT /revert`."""
    id: str = Field(min_length=1)
    email: EmailStr
    reply: str

    @field_validator("reply")
    @classmethod
    def _reply_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("La respuesta no puede estar vacía")
        return v


class ReplyOut(BaseModel):
    message: str
    id: str
    emailed: bool = False
