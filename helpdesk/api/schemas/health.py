"""Schemas para endpoints de health/debug."""
from pydantic import BaseModel


class PingOut(BaseModel):
    message: str


class HealthOut(BaseModel):
    ok: bool
    db: bool


class DebugStatusOut(BaseModel):
    app_name: str
    api_prefix: str
    db_ready: bool
    storage_ready: bool
    cdn_ready: bool
    smtp_configured: bool
