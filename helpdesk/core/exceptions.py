"""
Errores de aplicación y handlers globales para respuestas de API consistentes.
"""
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ConfigurationError(RuntimeError):
    """Falta (o es inválida) configuración requerida por un cliente externo (S3, CDN...).

    Es fatal al arranque: no se degrada silenciosamente.
    """

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        self.message = message
        self.missing = list(missing or [])
        super().__init__(message)


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("helpdesk.errors")

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        body: Dict[str, Any] = {"message": exc.detail or "HTTP error"}
        rid = _req_id(request)
        if rid:
            body["request_id"] = rid
        return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        body: Dict[str, Any] = {"message": "Validation error", "errors": _jsonable_errors(exc)}
        rid = _req_id(request)
        if rid:
            body["request_id"] = rid
        return JSONResponse(status_code=422, content=body)

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        rid = _req_id(request)
        log.exception("Unhandled error request_id=%s", rid)
        body: Dict[str, Any] = {"message": "Internal server error"}
        if rid:
            body["request_id"] = rid
        return JSONResponse(status_code=500, content=body)


def _jsonable_errors(exc: RequestValidationError) -> list[Dict[str, Any]]:
    # `ctx` puede traer excepciones (p.ej. ValueError) que no serializan a JSON
    out = []
    for err in exc.errors():
        item = {k: v for k, v in err.items() if k != "ctx"}
        if "ctx" in err:
            item["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        out.append(item)
    return out
