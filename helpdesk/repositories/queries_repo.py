"""Repositorio de consultas de clientes.

Colección: queries
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional
from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId

from helpdesk.infrastructure.db.mongo import get_db

COLLECTION = "queries"


def _now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _oid(query_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(query_id)
    except (InvalidId, TypeError):
        return None


def _iso(value: Any) -> str:
    # Consultas creadas fuera de la app pueden traer `created_at` como fecha BSON
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    return str(value) if value is not None else ""


def _out(d: Dict[str, Any]) -> Dict[str, Any]:
    d = dict(d)
    d["id"] = str(d.pop("_id"))
    d["created_at"] = _iso(d.get("created_at"))
    return d


def insert_query(email: str, message: str, created_at: Optional[str] = None) -> str:
    """Inserta una consulta sin responder (usado por seeds y tests)."""
    data = {
        "email": str(email).lower(),
        "message": message,
        "responded": False,
        "reply": None,
        "created_at": created_at or _now_iso(),
    }
    res = get_db()[COLLECTION].insert_one(data)
    return str(res.inserted_id)


def list_queries() -> List[Dict[str, Any]]:
    """Todas las consultas, más recientes primero."""
    rows = get_db()[COLLECTION].find({}).sort("created_at", -1)
    return [_out(r) for r in rows]


def get_query(query_id: str) -> Optional[Dict[str, Any]]:
    oid = _oid(query_id)
    if oid is None:
        return None
    d = get_db()[COLLECTION].find_one({"_id": oid})
    return _out(d) if d else None


def mark_responded(query_id: str, reply: str, replied_by: Optional[str] = None) -> bool:
    """Registra la respuesta y marca `responded=True`.

    La actualización es condicional a `responded=False`: una consulta sólo se
    responde una vez. Devuelve False si no había nada que actualizar.
    """
    oid = _oid(query_id)
    if oid is None:
        return False
    res = get_db()[COLLECTION].update_one(
        {"_id": oid, "responded": False},
        {"$set": {
            "responded": True,
            "reply": reply,
            "replied_at": _now_iso(),
            "replied_by": replied_by,
        }},
    )
    return res.modified_count == 1
