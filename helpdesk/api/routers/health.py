"""Health y debug (sin auth), salidas tipadas y estables."""
from fastapi import APIRouter, Request, status

from helpdesk.core.config import settings
from helpdesk.infrastructure.db.mongo import db_ready
from helpdesk.api.schemas.health import PingOut, HealthOut, DebugStatusOut


router = APIRouter(tags=["Health"])


@router.get("/ping", response_model=PingOut, summary="Ping básico")
def ping() -> PingOut:
    return PingOut(message="pong")


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthOut, summary="Salud básica")
def health() -> HealthOut:
    return HealthOut(ok=True, db=db_ready())


@router.get("/_debug/status", response_model=DebugStatusOut, summary="Estado de configuración")
def debug_status(request: Request) -> DebugStatusOut:
    state = request.app.state
    return DebugStatusOut(
        app_name=settings.app_name,
        api_prefix=settings.api_prefix,
        db_ready=db_ready(),
        storage_ready=getattr(state, "storage", None) is not None,
        cdn_ready=getattr(state, "cdn", None) is not None,
        smtp_configured=settings.smtp_configured,
    )
