"""
Aggregation of derived fichas into funding-source groups and totals.

Group keys are resolved vínculo labels kept in first-seen order; sorting the
sections is left to the presentation layer.  Every summary field is a plain
sum, so the groups always partition the global totals.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from controle_loa.schemas.orcamento import FichaCalculada, ResumoGeral, ResumoGrupo
from controle_loa.services.vinculo_service import resolver_vinculo

logger = logging.getLogger(__name__)

# Fields reduced by summation, shared by group and global summaries
CAMPOS_SOMADOS: tuple[str, ...] = (
    "total_credito",
    "empenhado_acumulado",
    "liquidado_mes",
    "liquidado_acumulado",
    "saldo_a_liquidar",
    "diferenca_projetada",
)


def _acumulador() -> dict[str, float]:
    totais: dict[str, float] = dict.fromkeys(CAMPOS_SOMADOS, 0.0)
    totais["quantidade"] = 0
    totais["quantidade_critica"] = 0
    return totais


def _acumular(totais: dict[str, float], ficha: FichaCalculada) -> None:
    for campo in CAMPOS_SOMADOS:
        totais[campo] += getattr(ficha, campo)
    totais["quantidade"] += 1
    if ficha.status_critico:
        totais["quantidade_critica"] += 1


def agrupar_e_somar(fichas: Iterable[FichaCalculada]) -> dict[str, ResumoGrupo]:
    """Group fichas by resolved vínculo label and sum each group.

    Args:
        fichas: Derived (usually already filtered) fichas.

    Returns:
        Mapping of label → ``ResumoGrupo``, in order of first appearance.
    """
    grupos: dict[str, dict[str, float]] = {}
    for ficha in fichas:
        rotulo = resolver_vinculo(ficha.vinculo)
        if rotulo not in grupos:
            grupos[rotulo] = _acumulador()
        _acumular(grupos[rotulo], ficha)

    logger.debug("agrupar_e_somar: %d grupos", len(grupos))
    return {
        rotulo: ResumoGrupo(vinculo=rotulo, **totais)
        for rotulo, totais in grupos.items()
    }


def somar_tudo(fichas: Iterable[FichaCalculada]) -> ResumoGeral:
    """Sum every field over all ``fichas``; an empty input gives all zeros."""
    totais = _acumulador()
    for ficha in fichas:
        _acumular(totais, ficha)
    return ResumoGeral(**totais)
