"""Servicio de consultas: listado para la consola y respuesta del operador.

Reglas:
- Una consulta se responde una sola vez (`responded` pasa de False a True).
- El correo del payload debe coincidir con el de la consulta.
- El envío del correo al cliente es best-effort: la respuesta ya quedó registrada.
"""
import logging
from typing import Any, Dict, List

from helpdesk.api.schemas.queries import ReplyIn
from helpdesk.core.config import settings
from helpdesk.infrastructure.email.email_client import send_reply_email
from helpdesk.repositories import queries_repo

_log = logging.getLogger("helpdesk.queries")


class QueryNotFoundError(ValueError):
    pass


class EmailMismatchError(ValueError):
    pass


class AlreadyRespondedError(ValueError):
    pass


def list_queries() -> List[Dict[str, Any]]:
    return queries_repo.list_queries()


def respond_to_query(payload: ReplyIn, operator: Dict[str, Any]) -> Dict[str, Any]:
    q = queries_repo.get_query(payload.id)
    if not q:
        raise QueryNotFoundError("Consulta no encontrada")
    if str(q.get("email", "")).lower() != str(payload.email).lower():
        raise EmailMismatchError("El correo no corresponde a la consulta")
    if q.get("responded"):
        raise AlreadyRespondedError("La consulta ya fue respondida")

    operator_id = str(operator.get("_id")) if operator else None
    if not queries_repo.mark_responded(payload.id, payload.reply, replied_by=operator_id):
        # Otro operador respondió entre la lectura y la escritura
        raise AlreadyRespondedError("La consulta ya fue respondida")
    _log.info("Consulta respondida id=%s operator=%s", payload.id, operator_id)

    emailed = False
    message = "Respuesta registrada"
    if settings.smtp_configured:
        try:
            send_reply_email(q["email"], q.get("message") or "", payload.reply)
            emailed = True
            message = "Respuesta enviada al cliente"
        except Exception as e:
            _log.warning("No se pudo enviar el correo de respuesta id=%s: %s", payload.id, e)
            message = "Respuesta registrada; no se pudo enviar el correo"
    else:
        _log.info("SMTP no configurado; respuesta id=%s sin correo", payload.id)

    return {"message": message, "id": payload.id, "emailed": emailed}
