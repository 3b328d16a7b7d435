"""
Creación y verificación de JWTs de acceso (Bearer).
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from uuid import uuid4

import jwt as pyjwt

from helpdesk.core.config import settings


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(*, user: Dict[str, Any]) -> str:
    """
    Genera un JWT válido por ACCESS_TOKEN_EXPIRE_MINUTES.
    Claims: sub(user_id), email, role, token_version, iat, exp, jti.
    """
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET no configurado")
    now = _now_utc()
    exp = now + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": str(user["_id"]),
        "email": user.get("email"),
        "role": user.get("role"),
        "token_version": user.get("token_version", 0),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
        "jti": str(uuid4()),
    }
    return pyjwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Decodifica y valida firma/expiración. Devuelve payload.
    """
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET no configurado")
    return pyjwt.decode(token, key=settings.jwt_secret, algorithms=[settings.jwt_algorithm])
