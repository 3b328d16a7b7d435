"""Cliente S3 para almacenar imágenes.

El handle se construye una sola vez (startup de la app o inicio del script) y se
pasa explícitamente a cada operación que lo necesita.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config

from helpdesk.core.config import Settings
from helpdesk.core.exceptions import ConfigurationError

_log = logging.getLogger("helpdesk.storage")

# (campo en Settings, variable de entorno esperada)
_REQUIRED = (
    ("bucket_region", "BUCKET_REGION"),
    ("access_key", "ACCESS_KEY"),
    ("secret_access_key", "SECRET_ACCESS_KEY"),
    ("bucket_name", "BUCKET_NAME"),
    ("key_prefix", "KEY"),
)


def object_key(namespace: str, extension: str, name: str) -> str:
    """Clave determinística `{namespace}/{extension}/{name}`."""
    return f"{namespace.strip('/')}/{extension}/{name}"


class ObjectStorage:
    """Handle de storage: cliente boto3 + bucket + prefijo de claves."""

    def __init__(self, client: Any, bucket: str, namespace: str) -> None:
        self.client = client
        self.bucket = bucket
        self.namespace = namespace

    @classmethod
    def from_settings(cls, settings: Settings) -> "ObjectStorage":
        missing = [env for field, env in _REQUIRED if not getattr(settings, field)]
        if missing:
            raise ConfigurationError(
                f"Storage S3 no configurado; faltan: {', '.join(missing)}", missing=missing
            )
        # Reintentos acotados con backoff exponencial para fallas transitorias
        cfg = Config(
            signature_version="s3v4",
            retries={"total_max_attempts": max(1, int(settings.s3_max_attempts)), "mode": "standard"},
        )
        client = boto3.client(
            "s3",
            aws_access_key_id=settings.access_key,
            aws_secret_access_key=settings.secret_access_key,
            region_name=settings.bucket_region,
            endpoint_url=settings.s3_endpoint or None,
            config=cfg,
        )
        return cls(client, settings.bucket_name, settings.key_prefix)

    def key_for(self, extension: str, name: str) -> str:
        return object_key(self.namespace, extension, name)

    def put_bytes(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Sube `data` bajo `key`. Los errores del cliente se propagan al caller."""
        params = {"Bucket": self.bucket, "Key": key, "Body": data}
        if content_type:
            params["ContentType"] = content_type
        self.client.put_object(**params)
        _log.info("Objeto subido bucket=%s key=%s bytes=%s", self.bucket, key, len(data))
        return key
