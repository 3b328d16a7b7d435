"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del proyecto.
- Agrupa ajustes por área: App, CORS, Mongo, Auth/JWT, Email, Storage (S3), CDN e ingesta.
"""
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resuelve el .env ubicado en la raíz del proyecto (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Conjunto de variables de configuración con valores por defecto razonables.

    Nota: los valores pueden sobreescribirse vía variables de entorno (.env).
    Las credenciales de storage/CDN no tienen default: su ausencia se detecta
    al construir los clientes (ver `infrastructure/storage`).
    """
    # App
    app_name: str = "Helpdesk API"
    api_prefix: str = ""
    log_level: str = "INFO"

    # CORS (consola de operadores en localhost)
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    cors_allow_any: bool = False

    # Mongo
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "helpdesk"
    mongo_tls: bool = False
    # TLS relax options (dev only)
    mongo_tls_insecure: bool = False
    mongo_tls_allow_invalid_hostnames: bool = False

    # Auth / JWT
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Email / SMTP (respuestas a clientes)
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_pass: Optional[str] = None
    smtp_from_email: Optional[str] = None
    smtp_from_name: str = "Soporte"
    smtp_use_tls: bool = True

    # Storage (S3). Acepta los nombres históricos del .env (BUCKET_REGION, ACCESS_KEY, ...)
    bucket_region: Optional[str] = Field(
        None, validation_alias=AliasChoices("BUCKET_REGION", "S3_REGION")
    )
    access_key: Optional[str] = Field(
        None, validation_alias=AliasChoices("ACCESS_KEY", "S3_ACCESS_KEY")
    )
    secret_access_key: Optional[str] = Field(
        None, validation_alias=AliasChoices("SECRET_ACCESS_KEY", "S3_SECRET_KEY")
    )
    bucket_name: Optional[str] = Field(
        None, validation_alias=AliasChoices("BUCKET_NAME", "S3_BUCKET")
    )
    key_prefix: Optional[str] = Field(
        None, validation_alias=AliasChoices("KEY", "S3_KEY_PREFIX")
    )
    s3_endpoint: Optional[str] = None  # sólo para proveedores S3-compatibles
    s3_max_attempts: int = 5

    # CDN (CloudFront signed URLs)
    cloudfront_domain: Optional[str] = None
    cloudfront_key_pair_id: Optional[str] = None
    cloudfront_private_key: Optional[str] = None  # PEM en línea
    cloudfront_private_key_path: Optional[str] = None
    cloudfront_url_expire_seconds: int = 3600

    # Ingesta de imágenes
    images_dir: str = "./images"
    ingest_uploader_id: str = "system"

    # --- Utilidades derivadas / helpers ---
    @property
    def api_prefix_normalized(self) -> str:
        """Devuelve `api_prefix` con formato consistente.

        - Siempre inicia con '/'
        - Sin '/' final (excepto cuando es solo '/')
        - Si está vacío, devuelve ""
        """
        pref = (self.api_prefix or "").strip()
        if not pref:
            return ""
        if not pref.startswith('/'):
            pref = '/' + pref
        if len(pref) > 1 and pref.endswith('/'):
            pref = pref[:-1]
        return pref

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_pass)

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # no fallar si hay variables no usadas
        populate_by_name=True,
    )


settings = Settings()
