"""
Export (Exportação) router.

Mounts under ``/api/exportar`` (prefix set in ``main.py``).

Takes the same query parameters as the dashboard (``mes``, ``base``,
``busca``, ``funcional``, ``vinculo``) so that a report always matches the
screen.  Files are streamed with ``StreamingResponse``; Excel and PDF are
sent as attachments, the print view inline so the browser opens it.

Endpoints
---------
GET /excel     — Audit workbook (.xlsx).
GET /pdf       — Condensed audit table (.pdf).
GET /impressao — Grouped print report (.pdf, inline).
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable, Sequence
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from controle_loa.routers.orcamento import get_repositorio, parametros_painel
from controle_loa.schemas.orcamento import FichaOrcamentaria
from controle_loa.services import exportacao_service
from controle_loa.services.painel_service import ParametrosPainel
from controle_loa.services.repositorio import RepositorioFichas

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Exportação"])

_MEDIA_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
_MEDIA_PDF = "application/pdf"

Exportador = Callable[[Sequence[FichaOrcamentaria], ParametrosPainel], bytes]


def _make_filename(relatorio: str, extension: str) -> str:
    """Build a dated download filename, e.g. ``controle_loa_auditoria_20260615.xlsx``."""
    return f"controle_loa_{relatorio}_{date.today().strftime('%Y%m%d')}.{extension}"


def _stream(
    exportador: Exportador,
    repositorio: RepositorioFichas,
    parametros: ParametrosPainel,
    *,
    relatorio: str,
    extension: str,
    media_type: str,
    disposition: str = "attachment",
) -> StreamingResponse:
    logger.info(
        "GET /exportar/%s mes=%s base=%s", relatorio, parametros.mes_atual, parametros.base.value
    )
    try:
        file_bytes = exportador(repositorio.load(), parametros)
    except Exception as exc:
        logger.exception("export '%s' failed", relatorio)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Erro ao gerar o arquivo: {exc}",
        ) from exc

    filename = _make_filename(relatorio, extension)
    headers = {
        "Content-Disposition": f'{disposition}; filename="{filename}"',
        "Content-Length": str(len(file_bytes)),
    }
    return StreamingResponse(io.BytesIO(file_bytes), media_type=media_type, headers=headers)


@router.get(
    "/excel",
    response_class=StreamingResponse,
    summary="Exportar auditoria para Excel (.xlsx)",
    responses={
        200: {"content": {_MEDIA_XLSX: {}}, "description": "Planilha gerada."},
        500: {"description": "Erro ao gerar o arquivo."},
    },
)
def export_excel(
    parametros: Annotated[ParametrosPainel, Depends(parametros_painel)],
    repositorio: Annotated[RepositorioFichas, Depends(get_repositorio)],
) -> StreamingResponse:
    return _stream(
        exportacao_service.export_excel, repositorio, parametros,
        relatorio="auditoria", extension="xlsx", media_type=_MEDIA_XLSX,
    )


@router.get(
    "/pdf",
    response_class=StreamingResponse,
    summary="Exportar auditoria para PDF",
    responses={
        200: {"content": {_MEDIA_PDF: {}}, "description": "PDF gerado."},
        500: {"description": "Erro ao gerar o arquivo."},
    },
)
def export_pdf(
    parametros: Annotated[ParametrosPainel, Depends(parametros_painel)],
    repositorio: Annotated[RepositorioFichas, Depends(get_repositorio)],
) -> StreamingResponse:
    return _stream(
        exportacao_service.export_pdf, repositorio, parametros,
        relatorio="auditoria", extension="pdf", media_type=_MEDIA_PDF,
    )


@router.get(
    "/impressao",
    response_class=StreamingResponse,
    summary="Relatório para impressão, agrupado por vínculo",
    responses={
        200: {"content": {_MEDIA_PDF: {}}, "description": "PDF exibido no navegador."},
        500: {"description": "Erro ao gerar o arquivo."},
    },
)
def export_impressao(
    parametros: Annotated[ParametrosPainel, Depends(parametros_painel)],
    repositorio: Annotated[RepositorioFichas, Depends(get_repositorio)],
) -> StreamingResponse:
    return _stream(
        exportacao_service.export_impressao, repositorio, parametros,
        relatorio="relatorio", extension="pdf", media_type=_MEDIA_PDF,
        disposition="inline",
    )
