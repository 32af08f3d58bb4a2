"""
Derived-metrics calculator.

Turns a raw ``FichaOrcamentaria`` into a ``FichaCalculada`` for a given
current month and projection basis.  The functions here are pure: the same
three inputs always produce the same output and nothing is mutated.

Design notes
------------
- The projection assumes the chosen monthly run rate (``base_calculo``)
  continues for every remaining month of the year, plus one extra month for
  13th-month elements.
- Division guards are explicit and return fixed sentinels: the execution
  ratio is 0 without credit, and the months-to-exhaustion figure is 99 when
  the run rate is not positive.  Display code reads ``> 12`` as
  "Saldo Seguro", so 99 must not change.
- ``mes_atual`` is clamped to 1–12 so that a zero month can never divide.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from controle_loa.schemas.orcamento import BaseProjecao, FichaCalculada, FichaOrcamentaria
from controle_loa.services.classificador import is_treze_meses
from controle_loa.services.vinculo_service import resolver_vinculo
from controle_loa.utils.constants import (
    MES_ADICIONAL_13,
    MESES_NO_ANO,
    PREVISAO_SEM_ESGOTAMENTO,
)

logger = logging.getLogger(__name__)

# Raw fields copied onto the derived record; a FichaCalculada passed back in
# is recomputed from these alone.
_CAMPOS_BRUTOS: set[str] = set(FichaOrcamentaria.model_fields)


def clamp_mes(mes: int) -> int:
    """Clamp a month number to the 1–12 range."""
    return max(1, min(MESES_NO_ANO, int(mes)))


def _safe_pct(numerator: float, denominator: float) -> float:
    """Return numerator / denominator × 100, or 0.0 if the denominator is not positive.

    Unlike a KPI gauge the ratio is not capped: over-execution shows as > 100.
    """
    if denominator <= 0:
        return 0.0
    return numerator / denominator * 100


def calcular_ficha(
    ficha: FichaOrcamentaria,
    mes_atual: int,
    base: BaseProjecao | str = BaseProjecao.MEDIA,
) -> FichaCalculada:
    """Compute every derived metric for one ficha.

    Args:
        ficha: Raw budget line.
        mes_atual: Current month (1–12); values outside are clamped.
        base: ``MEDIA`` to project with the average monthly settlement,
            ``MES`` to project with this month's settlement.

    Returns:
        A new ``FichaCalculada`` carrying the raw fields plus the metrics.
    """
    mes = clamp_mes(mes_atual)
    base = BaseProjecao(base)

    saldo_a_liquidar = ficha.total_credito - ficha.liquidado_acumulado
    media_liquidada = ficha.liquidado_acumulado / mes
    media_empenhada = ficha.empenhado_acumulado / mes

    base_calculo = media_liquidada if base is BaseProjecao.MEDIA else ficha.liquidado_mes

    is_13 = is_treze_meses(ficha.elemento)
    meses_para_executar = (MESES_NO_ANO - mes) + (MES_ADICIONAL_13 if is_13 else 0)

    gasto_futuro_projetado = base_calculo * meses_para_executar
    diferenca_projetada = saldo_a_liquidar - gasto_futuro_projetado

    if base_calculo > 0:
        previsao_esgotamento = saldo_a_liquidar / base_calculo
    else:
        previsao_esgotamento = PREVISAO_SEM_ESGOTAMENTO

    return FichaCalculada(
        **ficha.model_dump(include=_CAMPOS_BRUTOS),
        vinculo_rotulo=resolver_vinculo(ficha.vinculo),
        saldo_a_liquidar=saldo_a_liquidar,
        percentual_execucao=_safe_pct(ficha.liquidado_acumulado, ficha.total_credito),
        media_liquidada=media_liquidada,
        media_empenhada=media_empenhada,
        base_calculo=base_calculo,
        is_13_meses=is_13,
        meses_para_executar=meses_para_executar,
        gasto_futuro_projetado=gasto_futuro_projetado,
        diferenca_projetada=diferenca_projetada,
        status_critico=diferenca_projetada < 0 and base_calculo > 0,
        previsao_esgotamento=previsao_esgotamento,
    )


def calcular_fichas(
    fichas: Iterable[FichaOrcamentaria],
    mes_atual: int,
    base: BaseProjecao | str = BaseProjecao.MEDIA,
) -> list[FichaCalculada]:
    """Recompute the full derived dataset, preserving input order."""
    base = BaseProjecao(base)
    calculadas = [calcular_ficha(ficha, mes_atual, base) for ficha in fichas]
    logger.debug(
        "calcular_fichas: %d fichas mes=%d base=%s",
        len(calculadas), clamp_mes(mes_atual), base.value,
    )
    return calculadas
