"""
Bootstrap de la base Mongo: define y aplica validadores (JSON Schema) e índices.
Se ejecuta al inicio de la app (y del script de ingesta) para asegurar colecciones
mínimas y consistencia.
No tumba la app si algo falla; deja warnings en casos no críticos.
"""
from __future__ import annotations

from typing import Any, Dict, List
import logging

from pymongo.errors import PyMongoError

from helpdesk.infrastructure.db.mongo import get_db

_log = logging.getLogger("helpdesk.mongo.bootstrap")


def _collmod_or_create(name: str, validator: Dict[str, Any] | None) -> None:
    db = get_db()
    try:
        if validator:
            db.command({
                "collMod": name,
                "validator": {"$jsonSchema": validator},
                "validationLevel": "moderate",
            })
        else:
            db.create_collection(name)
    except PyMongoError:
        # Si collMod falla (no existe la colección), intenta crear con validator
        try:
            if name not in db.list_collection_names():
                if validator:
                    db.create_collection(name, validator={"$jsonSchema": validator})
                else:
                    db.create_collection(name)
        except PyMongoError as e:
            _log.warning("No se pudo aplicar validator en '%s': %s", name, e)


def _ensure_indexes(name: str, indexes: List[Dict[str, Any]]) -> None:
    coll = get_db()[name]
    for ix in indexes:
        ix = dict(ix)
        keys = ix.pop("keys")
        try:
            coll.create_index(keys, **ix)
        except PyMongoError as e:
            # Ignora fallas de índice (e.g., ya existe o datos no únicos previos)
            _log.warning("No se pudo crear índice en '%s' (%s): %s", name, keys, e)


QUERY_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["email", "message", "responded", "created_at"],
    "properties": {
        "email": {"bsonType": "string", "minLength": 3},
        "message": {"bsonType": "string"},
        "responded": {"bsonType": "bool"},
        "reply": {"bsonType": ["string", "null"]},
        "replied_at": {"bsonType": ["string", "null"]},
        "replied_by": {"bsonType": ["string", "null"]},
        "created_at": {"bsonType": "string", "minLength": 10},
    },
    # responded == true  <=>  hay respuesta registrada
    "oneOf": [
        {"properties": {"responded": {"enum": [True]}, "reply": {"bsonType": "string"}}, "required": ["reply"]},
        {"properties": {"responded": {"enum": [False]}, "reply": {"bsonType": "null"}}},
    ],
    "additionalProperties": True,
}

IMAGE_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["domainame", "uploaded_by", "extension", "created_at", "updated_at"],
    "properties": {
        "domainame": {"bsonType": "string", "minLength": 1},
        "uploaded_by": {"bsonType": "string"},
        "extension": {"bsonType": "string", "minLength": 1},
        "created_at": {"bsonType": "string", "minLength": 10},
        "updated_at": {"bsonType": "string", "minLength": 10},
    },
    "additionalProperties": True,
}


def ensure_image_indexes() -> None:
    """Índice único (domainame, extension): garantiza un único registro canónico por imagen."""
    _ensure_indexes(
        "images",
        [
            {"keys": [("domainame", 1), ("extension", 1)], "unique": True, "name": "uniq_domainame_extension"},
            {"keys": [("uploaded_by", 1)], "name": "ix_uploaded_by"},
        ],
    )


def ensure_collections() -> None:
    """
    Garantiza colecciones, validadores e índices mínimos.
    """
    _collmod_or_create("user", None)
    _ensure_indexes("user", [{"keys": [("email", 1)], "unique": True, "name": "uniq_email"}])

    _collmod_or_create("queries", QUERY_VALIDATOR)
    _ensure_indexes(
        "queries",
        [{"keys": [("responded", 1), ("created_at", -1)], "name": "ix_responded_created_at"}],
    )

    _collmod_or_create("images", IMAGE_VALIDATOR)
    ensure_image_indexes()
