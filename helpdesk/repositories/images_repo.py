"""Repositorio de metadatos de imágenes.

Colección: images. El índice único (domainame, extension) vive en
`infrastructure/db/bootstrap.py`.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional
from datetime import datetime, timezone

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from helpdesk.infrastructure.db.mongo import get_db

COLL = "images"


def _now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def insert_image(domainame: str, uploaded_by: str, extension: str) -> Optional[Dict[str, Any]]:
    """Crea el registro; devuelve None si ya existe uno para (domainame, extension)."""
    now = _now_iso()
    data = {
        "domainame": domainame,
        "uploaded_by": str(uploaded_by),
        "extension": extension,
        "created_at": now,
        "updated_at": now,
    }
    try:
        res = get_db()[COLL].insert_one(data)
    except DuplicateKeyError:
        return None
    return {"id": str(res.inserted_id), "created_at": now, "updated_at": now}


def delete_image(image_id: str) -> None:
    get_db()[COLL].delete_one({"_id": ObjectId(image_id)})


def find_image(domainame: str, extension: str) -> Optional[Dict[str, Any]]:
    d = get_db()[COLL].find_one({"domainame": domainame, "extension": extension})
    if not d:
        return None
    d["id"] = str(d.pop("_id"))
    return d


def find_images_by_uploader(uploaded_by: str) -> List[Dict[str, Any]]:
    rows = get_db()[COLL].find({"uploaded_by": str(uploaded_by)}).sort("created_at", 1)
    return [
        {
            "domainame": r["domainame"],
            "id": str(r["_id"]),
            "created_at": r.get("created_at"),
            "updated_at": r.get("updated_at"),
        }
        for r in rows
    ]
