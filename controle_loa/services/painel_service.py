"""
Dashboard (Painel) service layer.

Assembles the full dashboard payload for the ``/api/orcamento`` endpoints:
the persisted fichas are recomputed, filtered, grouped and summed in a single
synchronous pass on every request.

Design notes
------------
- There is no incremental recomputation: a change in the dataset, the
  current month or the projection basis simply produces a new payload.
- The funding-source chip list is built from the unfiltered dataset so that
  selecting one chip never hides the others.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from controle_loa.schemas.common import FilterParams
from controle_loa.schemas.orcamento import (
    BaseProjecao,
    FichaCalculada,
    FichaOrcamentaria,
    PainelResponse,
    ResumoGeral,
    ResumoGrupo,
)
from controle_loa.services.agregacao_service import agrupar_e_somar, somar_tudo
from controle_loa.services.calculo_service import calcular_fichas, clamp_mes
from controle_loa.services.filtro_service import filtrar_fichas
from controle_loa.services.vinculo_service import listar_vinculos

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParametrosPainel:
    """The three recomputation inputs besides the dataset itself.

    Attributes:
        mes_atual: Current month (1–12), defaults to today's month.
        base: Projection basis.
        filtros: Dashboard filter criteria.
    """

    mes_atual: int = field(default_factory=lambda: date.today().month)
    base: BaseProjecao = BaseProjecao.MEDIA
    filtros: FilterParams = field(default_factory=FilterParams)


def calcular_filtradas(
    fichas: Sequence[FichaOrcamentaria],
    parametros: ParametrosPainel,
) -> list[FichaCalculada]:
    """Recompute the dataset and apply the filters."""
    calculadas = calcular_fichas(fichas, parametros.mes_atual, parametros.base)
    return filtrar_fichas(calculadas, parametros.filtros)


def get_grupos(
    fichas: Sequence[FichaOrcamentaria],
    parametros: ParametrosPainel,
) -> list[ResumoGrupo]:
    """Return one summary per funding source over the filtered fichas."""
    return list(agrupar_e_somar(calcular_filtradas(fichas, parametros)).values())


def get_resumo(
    fichas: Sequence[FichaOrcamentaria],
    parametros: ParametrosPainel,
) -> ResumoGeral:
    """Return the consolidated totals over the filtered fichas."""
    return somar_tudo(calcular_filtradas(fichas, parametros))


def montar_painel(
    fichas: Sequence[FichaOrcamentaria],
    parametros: ParametrosPainel,
) -> PainelResponse:
    """Build the complete dashboard payload.

    Args:
        fichas: Raw persisted fichas (possibly empty).
        parametros: Current month, projection basis and filters.

    Returns:
        A ``PainelResponse`` with the filtered derived fichas, their group
        and global summaries, and the funding-source labels of the dataset.
    """
    filtradas = calcular_filtradas(fichas, parametros)
    grupos = agrupar_e_somar(filtradas)
    resumo = somar_tudo(filtradas)

    logger.debug(
        "montar_painel: total=%d filtradas=%d grupos=%d criticas=%d",
        len(fichas), len(filtradas), len(grupos), resumo.quantidade_critica,
    )

    return PainelResponse(
        mes_atual=clamp_mes(parametros.mes_atual),
        base=parametros.base,
        fichas=filtradas,
        grupos=list(grupos.values()),
        resumo=resumo,
        vinculos=listar_vinculos(fichas),
    )
