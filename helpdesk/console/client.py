"""Cliente HTTP de la consola de operadores (requests + Bearer token)."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from helpdesk.api.schemas.queries import QueryOut

FALLBACK_ERROR = "No se pudo enviar la respuesta. Inténtalo de nuevo."


class ReplyError(Exception):
    """Falla al responder: `message` es el del servidor o el genérico."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _server_message(resp: requests.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str) and body["message"].strip():
        return body["message"]
    return None


class HelpdeskClient:
    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        })

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def list_queries(self) -> List[QueryOut]:
        r = self.session.get(self._url("/queries"), timeout=self.timeout)
        r.raise_for_status()
        return [QueryOut(**q) for q in (r.json() or {}).get("queries", [])]

    def respond(self, query_id: str, email: str, reply: str) -> Dict[str, Any]:
        """`PUT /revert`; devuelve el JSON de éxito o lanza ReplyError."""
        payload = {"id": query_id, "email": email, "reply": reply}
        try:
            r = self.session.put(self._url("/revert"), json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise ReplyError(FALLBACK_ERROR) from e
        if not r.ok:
            raise ReplyError(_server_message(r) or FALLBACK_ERROR, status_code=r.status_code)
        return r.json()
