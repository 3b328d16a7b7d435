"""URLs firmadas de CloudFront para servir imágenes desde el CDN."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from botocore.signers import CloudFrontSigner
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding

from helpdesk.core.config import Settings
from helpdesk.core.exceptions import ConfigurationError


def _load_private_key(pem: bytes):
    return serialization.load_pem_private_key(pem, password=None)


class CdnSigner:
    """Genera URLs firmadas (canned policy) para rutas del distribution."""

    def __init__(self, domain: str, key_pair_id: str, private_key_pem: bytes, default_expires: int = 3600) -> None:
        self.base_url = domain if domain.startswith("http") else f"https://{domain}"
        self.base_url = self.base_url.rstrip("/")
        self.default_expires = int(default_expires)
        key = _load_private_key(private_key_pem)

        def _rsa_signer(message: bytes) -> bytes:
            # CloudFront exige RSA-SHA1
            return key.sign(message, padding.PKCS1v15(), hashes.SHA1())

        self._signer = CloudFrontSigner(key_pair_id, _rsa_signer)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CdnSigner":
        missing = []
        if not settings.cloudfront_domain:
            missing.append("CLOUDFRONT_DOMAIN")
        if not settings.cloudfront_key_pair_id:
            missing.append("CLOUDFRONT_KEY_PAIR_ID")
        if not (settings.cloudfront_private_key or settings.cloudfront_private_key_path):
            missing.append("CLOUDFRONT_PRIVATE_KEY")
        if missing:
            raise ConfigurationError(f"CDN no configurado; faltan: {', '.join(missing)}", missing=missing)

        if settings.cloudfront_private_key:
            # Permite PEM en una sola línea con '\n' escapados en el .env
            pem = settings.cloudfront_private_key.replace("\\n", "\n").encode("utf-8")
        else:
            path = Path(settings.cloudfront_private_key_path)
            if not path.is_file():
                raise ConfigurationError(
                    f"CLOUDFRONT_PRIVATE_KEY_PATH no existe: {path}", missing=["CLOUDFRONT_PRIVATE_KEY_PATH"]
                )
            pem = path.read_bytes()
        try:
            return cls(
                settings.cloudfront_domain,
                settings.cloudfront_key_pair_id,
                pem,
                default_expires=settings.cloudfront_url_expire_seconds,
            )
        except ValueError as e:
            raise ConfigurationError(f"Llave privada de CloudFront inválida: {e}") from e

    def signed_url(self, path: str, expires_in: Optional[int] = None) -> str:
        """Devuelve la URL firmada para `path` (p.ej. `/png/acme.png`), válida `expires_in` segundos."""
        seconds = self.default_expires if expires_in is None else int(expires_in)
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=seconds)
        url = f"{self.base_url}/{path.lstrip('/')}"
        return self._signer.generate_presigned_url(url, date_less_than=expires_at)
