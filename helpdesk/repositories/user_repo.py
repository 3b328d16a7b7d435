"""
Repositorio para la colección `user`.
"""
from typing import Any, Dict, Optional
from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from helpdesk.infrastructure.db.mongo import get_db

COLLECTION = "user"


def _now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def insert_user(doc: Dict[str, Any]) -> str:
    """
    Inserta un usuario y retorna el string del inserted_id.
    - Normaliza `email` a minúsculas.
    - Define valores por defecto (role, is_active, token_version).
    """
    data = dict(doc)
    if data.get("email"):
        data["email"] = str(data["email"]).lower()
    data.setdefault("role", "customer")
    data.setdefault("is_active", True)
    data.setdefault("token_version", 0)
    data.setdefault("profile", {})
    now = _now_iso()
    data.setdefault("created_at", now)
    data["updated_at"] = now
    res = get_db()[COLLECTION].insert_one(data)
    return str(res.inserted_id)


def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    """Obtiene usuario por id (str)."""
    try:
        oid = ObjectId(user_id)
    except (InvalidId, TypeError):
        return None
    return get_db()[COLLECTION].find_one({"_id": oid})


def update_user_profile(user_id: str, profile_update: Dict[str, Any]) -> Dict[str, Any]:
    """
    Actualiza parcialmente el subdocumento `profile` del usuario y retorna el perfil actualizado.
    - Solo aplica campos presentes en `profile_update` (exclude_none en el caller).
    """
    set_ops: Dict[str, Any] = {"updated_at": _now_iso()}
    for k, v in (profile_update or {}).items():
        set_ops[f"profile.{k}"] = v

    doc = get_db()[COLLECTION].find_one_and_update(
        {"_id": ObjectId(user_id)},
        {"$set": set_ops},
        return_document=ReturnDocument.AFTER,
        projection={"profile": 1, "_id": 0},
    )
    return (doc or {}).get("profile") or {}
