"""
Dependencias reutilizables para routers (FastAPI Depends).

- Autenticación: extrae y valida el Access Token, devuelve el usuario actual.
- Clientes externos: storage S3 y firmador CDN construidos en el startup.
- Mantener esta capa delgada: sin lógica de negocio pesada.
"""
from typing import Optional, Dict, Any

import jwt as pyjwt
from fastapi import HTTPException, Header, Request, Depends
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN, HTTP_503_SERVICE_UNAVAILABLE

from helpdesk.infrastructure.security.token_service import verify_access_token
from helpdesk.infrastructure.storage.cloudfront import CdnSigner
from helpdesk.infrastructure.storage.s3 import ObjectStorage
from helpdesk.repositories import user_repo as repo

OPERATOR_ROLES = frozenset({"operator", "admin"})


def get_current_user(authorization: Optional[str] = Header(default=None)) -> Dict[str, Any]:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Falta token")
    token = authorization.split(" ", 1)[1]
    try:
        payload = verify_access_token(token)
    except pyjwt.PyJWTError:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Token inválido")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Token inválido")

    u = repo.get_user_by_id(user_id)
    if not u:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Usuario no encontrado")
    if u.get("token_version", 0) != payload.get("token_version"):
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Token expirado")
    if not u.get("is_active"):
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Usuario inactivo")
    return u


def get_current_operator(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if user.get("role") not in OPERATOR_ROLES:
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Requiere rol de operador")
    return user


def get_storage(request: Request) -> ObjectStorage:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise HTTPException(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="Storage no disponible")
    return storage


def get_cdn(request: Request) -> CdnSigner:
    cdn = getattr(request.app.state, "cdn", None)
    if cdn is None:
        raise HTTPException(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="CDN no disponible")
    return cdn
