"""
Endpoints de consultas para la consola de operadores.

- `GET /queries`: todas las consultas (la consola separa activas/archivadas).
- `PUT /revert`: registra la respuesta del operador y notifica al cliente.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from helpdesk.api.deps import get_current_operator
from helpdesk.api.schemas.queries import QueryListOut, QueryOut, ReplyIn, ReplyOut
from helpdesk.services import query_service

router = APIRouter(tags=["Queries"])


@router.get("/queries", response_model=QueryListOut, summary="Listar consultas")
def get_queries(operator=Depends(get_current_operator)) -> QueryListOut:
    items = query_service.list_queries()
    return QueryListOut(queries=[QueryOut(**q) for q in items])


@router.put("/revert", response_model=ReplyOut, status_code=status.HTTP_200_OK, summary="Responder consulta")
def revert(payload: ReplyIn, operator=Depends(get_current_operator)) -> ReplyOut:
    try:
        out = query_service.respond_to_query(payload, operator)
    except query_service.QueryNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except query_service.EmailMismatchError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except query_service.AlreadyRespondedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return ReplyOut(**out)
