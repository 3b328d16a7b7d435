"""Estado de la vista de triage de la consola de operadores.

La vista separa las consultas en dos pestañas (activas = sin responder,
archivadas = respondidas), pagina de 5 en 5 y permite responder la consulta
seleccionada. No renderiza nada: expone el estado y las acciones que la UI
dispara (click, tecla, blur).
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Protocol, Sequence, Tuple, TypeVar

from helpdesk.api.schemas.queries import QueryOut
from helpdesk.console.client import FALLBACK_ERROR, ReplyError

_log = logging.getLogger("helpdesk.console")

PAGE_SIZE = 5
PREVIEW_CHARS = 100
ACTIVE = "ACTIVE"
ARCHIVED = "ARCHIVED"
EMPTY_MESSAGE = "No hay consultas disponibles."

T = TypeVar("T")


class ReplySender(Protocol):
    def respond(self, query_id: str, email: str, reply: str) -> dict: ...


def partition(queries: Sequence[QueryOut]) -> Tuple[List[QueryOut], List[QueryOut]]:
    """(activas, archivadas) conservando el orden de entrada."""
    active = [q for q in queries if not q.responded]
    archived = [q for q in queries if q.responded]
    return active, archived


def total_pages(n: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(n / page_size)


def page_slice(items: Sequence[T], page: int, page_size: int = PAGE_SIZE) -> List[T]:
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


def truncate_text(text: str, max_length: int = PREVIEW_CHARS) -> str:
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text


class TriageView:
    def __init__(self, queries: Sequence[QueryOut] = ()) -> None:
        self.queries: List[QueryOut] = list(queries)
        self.tab = ACTIVE
        self.current_page = 1
        self.input_page = "1"
        self.selected: Optional[QueryOut] = None
        self.draft = ""
        self.error = ""
        self.sending = False

    # --- listado / paginación ---
    def partition_for_tab(self) -> List[QueryOut]:
        active, archived = partition(self.queries)
        return active if self.tab == ACTIVE else archived

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.partition_for_tab()))

    def visible_queries(self) -> List[QueryOut]:
        return page_slice(self.partition_for_tab(), self.current_page)

    @property
    def empty(self) -> bool:
        return not self.visible_queries()

    @property
    def show_pagination(self) -> bool:
        return len(self.partition_for_tab()) > PAGE_SIZE

    def previews(self) -> List[Tuple[QueryOut, str]]:
        return [(q, truncate_text(q.message)) for q in self.visible_queries()]

    def switch_tab(self, tab: str) -> None:
        if tab not in (ACTIVE, ARCHIVED):
            raise ValueError(f"Pestaña desconocida: {tab}")
        self.tab = tab
        self._go_to(1)

    def next_page(self) -> None:
        if self.current_page < self.total_pages:
            self._go_to(self.current_page + 1)

    def prev_page(self) -> None:
        if self.current_page > 1:
            self._go_to(self.current_page - 1)

    def type_page_input(self, value: str) -> None:
        """Sólo acepta vacío o un entero positivo mientras se escribe."""
        if value == "" or (value.isascii() and value.isdigit() and int(value) > 0):
            self.input_page = value

    def commit_page_input(self) -> None:
        """Blur o Enter: aplica la página si es válida, si no revierte el input."""
        page = int(self.input_page) if self.input_page else 0
        if 1 <= page <= self.total_pages:
            self._go_to(page)
        else:
            self.input_page = str(self.current_page)

    def _go_to(self, page: int) -> None:
        self.current_page = page
        self.input_page = str(page)

    # --- detalle / respuesta ---
    def open(self, query: QueryOut) -> None:
        self.selected = query

    def close(self) -> None:
        self.selected = None
        self.draft = ""
        self.error = ""

    def set_draft(self, text: str) -> None:
        self.draft = text

    def send_reply(self, client: ReplySender) -> Optional[str]:
        """Envía la respuesta de la consulta seleccionada.

        Devuelve el mensaje del servidor si tuvo éxito; None si no se envió
        o falló (el error queda en `self.error`).
        """
        if self.selected is None or self.sending:
            return None
        if not self.draft.strip():
            self.error = "Escribe una respuesta antes de enviar."
            return None

        query = self.selected
        self.sending = True
        self.error = ""
        try:
            data = client.respond(query.id, query.email, self.draft)
        except ReplyError as e:
            self.error = e.message
            return None
        except Exception:
            _log.exception("Falla inesperada al responder id=%s", query.id)
            self.error = FALLBACK_ERROR
            return None
        finally:
            self.sending = False

        self._mark_answered(query, self.draft)
        self.close()
        return (data or {}).get("message") or ""

    def _mark_answered(self, query: QueryOut, reply: str) -> None:
        answered = query.model_copy(update={"responded": True, "reply": reply})
        self.queries = [answered if q.id == query.id else q for q in self.queries]
        # La consulta sale de "activas": no dejar la página fuera de rango
        last = max(1, self.total_pages)
        if self.current_page > last:
            self._go_to(last)
