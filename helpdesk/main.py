"""Entrada principal de la app FastAPI (configura middlewares, excepciones, clientes y routers)."""
import logging

from fastapi import FastAPI

from helpdesk.api.router import api_router
from helpdesk.core.config import settings
from helpdesk.core.exceptions import register_exception_handlers
from helpdesk.core.logging import setup_logging
from helpdesk.core.middleware import add_middlewares
from helpdesk.infrastructure.db.bootstrap import ensure_collections
from helpdesk.infrastructure.db.mongo import close_mongo, db_ready, init_mongo
from helpdesk.infrastructure.storage.cloudfront import CdnSigner
from helpdesk.infrastructure.storage.s3 import ObjectStorage

_log = logging.getLogger("helpdesk.startup")

setup_logging(settings.log_level)
app = FastAPI(title=settings.app_name)

add_middlewares(app)
register_exception_handlers(app)


@app.on_event("startup")
def on_startup():
    # Clientes externos: se construyen una vez y viven en app.state.
    # Config incompleta -> ConfigurationError y la app no arranca.
    app.state.storage = ObjectStorage.from_settings(settings)
    app.state.cdn = CdnSigner.from_settings(settings)

    init_mongo()
    if db_ready():
        ensure_collections()
    else:
        _log.warning("Mongo no listo; omitiendo ensure_collections()")


@app.on_event("shutdown")
def on_shutdown():
    close_mongo()


# Monta routers bajo el prefijo configurado
app.include_router(api_router, prefix=settings.api_prefix_normalized)
