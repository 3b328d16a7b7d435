"""
Configuración de logging para la aplicación, los scripts y la integración con Uvicorn.
"""
import logging


def setup_logging(level: str = "INFO") -> None:
    lvl = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(lvl)
    # botocore es muy verboso en DEBUG/INFO
    logging.getLogger("botocore").setLevel(max(lvl, logging.WARNING))
