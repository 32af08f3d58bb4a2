"""
Import (Importação) router.

Mounts under ``/api/importacao`` (prefix set in ``main.py``).

The persisted dataset is replaced wholesale: by a balancete extraction, by a
JSON array sent back by the client, or cleared.  A failed import never
touches the current dataset.

Endpoints
---------
POST   /balancete — Upload a balancete PDF for extraction.
GET    /dados     — Raw persisted fichas (camelCase JSON array).
PUT    /dados     — Replace the dataset from a JSON array.
DELETE /dados     — Clear the dataset.
GET    /historico — Past import attempts, most recent first.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from controle_loa.database import get_db
from controle_loa.routers.orcamento import get_repositorio
from controle_loa.schemas.common import MessageResponse
from controle_loa.schemas.importacao import HistoricoImportacao, ImportacaoResponse
from controle_loa.services import importacao_service
from controle_loa.services.repositorio import RepositorioFichas

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Importação"])


def _as_http(exc: Exception) -> HTTPException:
    """Map service exceptions to HTTP errors (422 for input, 500 otherwise)."""
    if isinstance(exc, ValueError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


# ---------------------------------------------------------------------------
# POST /balancete
# ---------------------------------------------------------------------------


@router.post(
    "/balancete",
    response_model=ImportacaoResponse,
    status_code=status.HTTP_200_OK,
    summary="Importar balancete (PDF)",
    description=(
        "Envia o balancete em PDF para extração das fichas orçamentárias. Em caso de "
        "sucesso o conjunto de dados atual é substituído por completo; em caso de falha "
        "permanece inalterado."
    ),
    responses={
        200: {"description": "Quantidade de fichas e crédito total auditado."},
        422: {"description": "Arquivo vazio, não PDF, ou extração sem fichas."},
        500: {"description": "Falha ao gravar os dados."},
    },
)
async def upload_balancete(
    file: Annotated[UploadFile, File(description="Balancete em PDF")],
    db: Annotated[Session, Depends(get_db)],
    repositorio: Annotated[RepositorioFichas, Depends(get_repositorio)],
) -> ImportacaoResponse:
    logger.info(
        "upload_balancete: file='%s' content_type='%s'", file.filename, file.content_type
    )
    try:
        return await importacao_service.processar_upload(db, file, repositorio)
    except (ValueError, RuntimeError) as exc:
        raise _as_http(exc) from exc


# ---------------------------------------------------------------------------
# /dados
# ---------------------------------------------------------------------------


@router.get(
    "/dados",
    response_model=list[dict[str, Any]],
    summary="Conjunto de dados persistido",
    description="Fichas brutas no formato de armazenamento (camelCase), para backup.",
)
def get_dados(
    repositorio: Annotated[RepositorioFichas, Depends(get_repositorio)],
) -> list[dict[str, Any]]:
    return [ficha.to_storage() for ficha in repositorio.load()]


@router.put(
    "/dados",
    response_model=ImportacaoResponse,
    summary="Substituir o conjunto de dados",
    description=(
        "Substitui as fichas por um array JSON (mesmo formato de GET /dados). "
        "Um array vazio limpa os dados."
    ),
    responses={422: {"description": "Conteúdo sem fichas válidas."}},
)
def put_dados(
    payload: Annotated[Any, Body(description="Array JSON de fichas.")],
    repositorio: Annotated[RepositorioFichas, Depends(get_repositorio)],
) -> ImportacaoResponse:
    try:
        return importacao_service.substituir_dados(payload, repositorio)
    except (ValueError, RuntimeError) as exc:
        raise _as_http(exc) from exc


@router.delete(
    "/dados",
    response_model=MessageResponse,
    summary="Limpar o conjunto de dados",
)
def delete_dados(
    repositorio: Annotated[RepositorioFichas, Depends(get_repositorio)],
) -> MessageResponse:
    try:
        repositorio.clear()
    except RuntimeError as exc:
        raise _as_http(exc) from exc
    logger.info("delete_dados: dataset cleared")
    return MessageResponse(message="Dados removidos.")


# ---------------------------------------------------------------------------
# GET /historico
# ---------------------------------------------------------------------------


@router.get(
    "/historico",
    response_model=list[HistoricoImportacao],
    summary="Histórico de importações",
)
def get_historico(
    db: Annotated[Session, Depends(get_db)],
) -> list[HistoricoImportacao]:
    return importacao_service.get_historico(db)
