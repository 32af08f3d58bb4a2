"""
Budget dashboard (Orçamento) router.

Mounts under ``/api/orcamento`` (prefix set in ``main.py``).

Every endpoint loads the persisted dataset and recomputes it for the
requested month, projection basis and filters; nothing derived is cached.
Query parameters are shared with the export endpoints so that a download
always matches what the screen shows.

Endpoints
---------
GET /painel   — Full payload: fichas, groups, summary and vínculo chips.
GET /fichas   — Filtered derived fichas.
GET /grupos   — One summary per vínculo over the filtered fichas.
GET /resumo   — Consolidated totals over the filtered fichas.
GET /vinculos — Sorted vínculo labels of the whole dataset.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from controle_loa.config import get_settings
from controle_loa.database import get_db
from controle_loa.schemas.common import FilterParams
from controle_loa.schemas.orcamento import (
    BaseProjecao,
    FichaCalculada,
    PainelResponse,
    ResumoGeral,
    ResumoGrupo,
)
from controle_loa.services import painel_service
from controle_loa.services.painel_service import ParametrosPainel
from controle_loa.services.repositorio import RepositorioFichas, RepositorioSql
from controle_loa.services.vinculo_service import listar_vinculos

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Orçamento"])


# ---------------------------------------------------------------------------
# Shared dependencies
# ---------------------------------------------------------------------------


def get_repositorio(db: Annotated[Session, Depends(get_db)]) -> RepositorioFichas:
    """Repository bound to the request session and the configured storage key."""
    return RepositorioSql(db, get_settings().STORAGE_KEY)


def parametros_painel(
    mes: Annotated[
        int | None,
        Query(description="Mês de referência (1=Janeiro … 12=Dezembro). Padrão: mês atual.",
              ge=1, le=12),
    ] = None,
    base: Annotated[
        BaseProjecao,
        Query(description="Base de projeção: 'media' (média mensal) ou 'mes' (liquidado no mês)."),
    ] = BaseProjecao.MEDIA,
    busca: Annotated[
        str,
        Query(description="Busca livre por ficha, elemento ou ação.", max_length=200),
    ] = "",
    funcional: Annotated[
        str,
        Query(description="Ação específica, ex. '2048'.", max_length=100),
    ] = "",
    vinculo: Annotated[
        str | None,
        Query(description="Rótulo do vínculo, ex. '70% FUNDEB'. Omitir para todos.",
              max_length=200),
    ] = None,
) -> ParametrosPainel:
    """Assemble ``ParametrosPainel`` from URL query parameters.

    Used by the dashboard and export routers alike.
    """
    return ParametrosPainel(
        mes_atual=mes if mes is not None else date.today().month,
        base=base,
        filtros=FilterParams(busca=busca, funcional=funcional, vinculo=vinculo or None),
    )


# ---------------------------------------------------------------------------
# GET /painel
# ---------------------------------------------------------------------------


@router.get(
    "/painel",
    response_model=PainelResponse,
    summary="Painel completo de auditoria",
    description=(
        "Recalcula todas as fichas para o mês e a base de projeção informados, aplica "
        "os filtros e retorna fichas, resumos por vínculo, totais consolidados e a "
        "lista de vínculos presentes no conjunto de dados."
    ),
)
def get_painel(
    parametros: Annotated[ParametrosPainel, Depends(parametros_painel)],
    repositorio: Annotated[RepositorioFichas, Depends(get_repositorio)],
) -> PainelResponse:
    logger.debug(
        "GET /painel mes=%s base=%s filtros=%s",
        parametros.mes_atual, parametros.base.value, parametros.filtros,
    )
    return painel_service.montar_painel(repositorio.load(), parametros)


# ---------------------------------------------------------------------------
# GET /fichas, /grupos, /resumo, /vinculos
# ---------------------------------------------------------------------------


@router.get(
    "/fichas",
    response_model=list[FichaCalculada],
    summary="Fichas calculadas e filtradas",
)
def get_fichas(
    parametros: Annotated[ParametrosPainel, Depends(parametros_painel)],
    repositorio: Annotated[RepositorioFichas, Depends(get_repositorio)],
) -> list[FichaCalculada]:
    logger.debug("GET /fichas mes=%s base=%s", parametros.mes_atual, parametros.base.value)
    return painel_service.calcular_filtradas(repositorio.load(), parametros)


@router.get(
    "/grupos",
    response_model=list[ResumoGrupo],
    summary="Resumo por vínculo",
    description="Uma linha por vínculo presente nas fichas filtradas, na ordem de aparição.",
)
def get_grupos(
    parametros: Annotated[ParametrosPainel, Depends(parametros_painel)],
    repositorio: Annotated[RepositorioFichas, Depends(get_repositorio)],
) -> list[ResumoGrupo]:
    logger.debug("GET /grupos mes=%s base=%s", parametros.mes_atual, parametros.base.value)
    return painel_service.get_grupos(repositorio.load(), parametros)


@router.get(
    "/resumo",
    response_model=ResumoGeral,
    summary="Totais consolidados",
)
def get_resumo(
    parametros: Annotated[ParametrosPainel, Depends(parametros_painel)],
    repositorio: Annotated[RepositorioFichas, Depends(get_repositorio)],
) -> ResumoGeral:
    logger.debug("GET /resumo mes=%s base=%s", parametros.mes_atual, parametros.base.value)
    return painel_service.get_resumo(repositorio.load(), parametros)


@router.get(
    "/vinculos",
    response_model=list[str],
    summary="Vínculos do conjunto de dados",
    description="Rótulos distintos de vínculo, em ordem alfabética, ignorando filtros.",
)
def get_vinculos(
    repositorio: Annotated[RepositorioFichas, Depends(get_repositorio)],
) -> list[str]:
    return listar_vinculos(repositorio.load())
