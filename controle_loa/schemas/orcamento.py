"""
Pydantic v2 schemas for the budget (Orçamento) module.

``FichaOrcamentaria`` is the raw ledger line as delivered by the extraction
step or loaded from storage; ``FichaCalculada`` adds the derived metrics.
Python attributes are snake_case while the JSON shape keeps the camelCase
keys of the persisted dataset (``totalCredito``, ``liquidadoAcumulado`` …),
so a stored array round-trips without loss.

Coercion happens here and only here: missing or non-numeric amounts become
``0.0`` and missing text fields become ``""``.  Everything downstream can
assume clean values.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


_MILHAR_SEM_DECIMAIS = re.compile(r"^-?\d{1,3}(\.\d{3})+$")


def _parse_numero(text: str) -> float:
    """Parse a numeric string in plain (``1234.5``) or pt-BR (``1.234,50``) form.

    Without a decimal comma, dots in groups of three (``1.234.567``,
    ``120.000``) are thousands separators.
    """
    cleaned = text.replace("R$", "").replace("\xa0", "").replace(" ", "").strip()
    if not cleaned:
        return 0.0
    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    elif _MILHAR_SEM_DECIMAIS.match(cleaned):
        cleaned = cleaned.replace(".", "")
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def to_float(value: Any) -> float:
    """Coerce any raw value to a finite float, defaulting to ``0.0``."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        number = _parse_numero(value)
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_text(value: Any) -> str:
    """Coerce any raw value to a stripped string, ``None`` becoming ``""``."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


# ---------------------------------------------------------------------------
# Projection basis
# ---------------------------------------------------------------------------


class BaseProjecao(str, Enum):
    """Run rate used to project spending until year end.

    ``MEDIA`` uses the average monthly settlement so far; ``MES`` uses the
    amount settled in the current month.  The English spellings
    ``"average"`` and ``"thisMonth"`` are accepted as aliases.
    """

    MEDIA = "media"
    MES = "mes"

    @classmethod
    def _missing_(cls, value: object) -> BaseProjecao | None:
        if not isinstance(value, str):
            return None
        aliases = {
            "media": cls.MEDIA,
            "média": cls.MEDIA,
            "average": cls.MEDIA,
            "mes": cls.MES,
            "mês": cls.MES,
            "thismonth": cls.MES,
        }
        return aliases.get(value.strip().lower())


# ---------------------------------------------------------------------------
# Raw ledger line
# ---------------------------------------------------------------------------


_NUMERIC_FIELDS = (
    "total_credito",
    "empenhado_acumulado",
    "liquidado_mes",
    "liquidado_acumulado",
    "saldo_orcamentario",
)
_TEXT_FIELDS = ("id", "elemento", "funcional", "vinculo")


class FichaOrcamentaria(BaseModel):
    """One budget line ("ficha") of the balancete.

    Attributes:
        id: Ficha number.  Not guaranteed unique.
        elemento: Expense element code, dotted (``3.1.90.11``) or compact
            (``319011``).
        funcional: Budget action code.
        vinculo: Funding-source code, looked up in ``VINCULO_MAP``.
        total_credito: Updated allocation for the fiscal year.
        empenhado_acumulado: Cumulative committed amount.
        liquidado_mes: Amount settled in the current month.
        liquidado_acumulado: Cumulative settled amount.
        saldo_orcamentario: Residual reported by the statement.  Informational
            only; no derived metric reads it.
        observacoes: Optional free-text note.
    """

    id: str = ""
    elemento: str = ""
    funcional: str = ""
    vinculo: str = ""
    total_credito: float = Field(default=0.0, alias="totalCredito")
    empenhado_acumulado: float = Field(default=0.0, alias="empenhadoAcumulado")
    liquidado_mes: float = Field(default=0.0, alias="liquidadoMes")
    liquidado_acumulado: float = Field(default=0.0, alias="liquidadoAcumulado")
    saldo_orcamentario: float = Field(default=0.0, alias="saldoOrcamentario")
    observacoes: str | None = None

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "id": "1215",
                "elemento": "3.1.90.11.00.00.00.00",
                "funcional": "12.361.0002.2048",
                "vinculo": "00101",
                "totalCredito": 120_000.0,
                "empenhadoAcumulado": 110_000.0,
                "liquidadoMes": 10_000.0,
                "liquidadoAcumulado": 60_000.0,
                "saldoOrcamentario": 10_000.0,
            }
        },
    )

    @field_validator(*_NUMERIC_FIELDS, mode="before")
    @classmethod
    def _coerce_numero(cls, value: Any) -> float:
        return to_float(value)

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _coerce_texto(cls, value: Any) -> str:
        return to_text(value)

    @field_validator("observacoes", mode="before")
    @classmethod
    def _coerce_observacoes(cls, value: Any) -> str | None:
        if value is None:
            return None
        return to_text(value) or None

    def to_storage(self) -> dict[str, Any]:
        """Return the camelCase mapping used for persistence and export."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Derived ledger line
# ---------------------------------------------------------------------------


class FichaCalculada(FichaOrcamentaria):
    """A ficha with every derived dashboard metric.

    Attributes:
        vinculo_rotulo: Resolved funding-source label.
        saldo_a_liquidar: ``total_credito - liquidado_acumulado``; negative on
            over-execution.
        percentual_execucao: Settled / credit × 100, or 0 without credit.
        media_liquidada: Average settled per elapsed month.
        media_empenhada: Average committed per elapsed month.
        base_calculo: Monthly run rate used for the projection.
        is_13_meses: Whether the element incurs the extra 13th-month cycle.
        meses_para_executar: Months left in the year, plus one for 13th-month
            lines.
        gasto_futuro_projetado: ``base_calculo × meses_para_executar``.
        diferenca_projetada: Remaining balance minus projected spend;
            negative means a projected shortfall.
        status_critico: Shortfall projected under a positive run rate.
        previsao_esgotamento: Months until the balance runs out, or 99 when
            nothing is being spent.
    """

    vinculo_rotulo: str = Field(default="", alias="vinculoRotulo")
    saldo_a_liquidar: float = Field(default=0.0, alias="saldoALiquidar")
    percentual_execucao: float = Field(default=0.0, alias="percentualExecucao")
    media_liquidada: float = Field(default=0.0, alias="mediaLiquidada")
    media_empenhada: float = Field(default=0.0, alias="mediaEmpenhada")
    base_calculo: float = Field(default=0.0, alias="baseCalculo")
    is_13_meses: bool = Field(default=False, alias="is13Meses")
    meses_para_executar: int = Field(default=0, alias="mesesParaExecutar")
    gasto_futuro_projetado: float = Field(default=0.0, alias="gastoFuturoProjetado")
    diferenca_projetada: float = Field(default=0.0, alias="valorDiferencaProjetada")
    status_critico: bool = Field(default=False, alias="statusCritico")
    previsao_esgotamento: float = Field(default=99.0, alias="previsaoEsgotamento")


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------


class ResumoGeral(BaseModel):
    """Field-wise totals over a set of derived fichas.

    Attributes:
        quantidade: Number of fichas summed.
        quantidade_critica: How many of them are in critical status.
        total_credito: Sum of credit.
        empenhado_acumulado: Sum of committed amounts.
        liquidado_mes: Sum of amounts settled this month.
        liquidado_acumulado: Sum of cumulative settled amounts.
        saldo_a_liquidar: Sum of remaining balances.
        diferenca_projetada: Sum of projected year-end differences.
    """

    quantidade: int = Field(default=0, ge=0)
    quantidade_critica: int = Field(default=0, ge=0, alias="quantidadeCritica")
    total_credito: float = Field(default=0.0, alias="totalCredito")
    empenhado_acumulado: float = Field(default=0.0, alias="empenhadoAcumulado")
    liquidado_mes: float = Field(default=0.0, alias="liquidadoMes")
    liquidado_acumulado: float = Field(default=0.0, alias="liquidadoAcumulado")
    saldo_a_liquidar: float = Field(default=0.0, alias="saldoALiquidar")
    diferenca_projetada: float = Field(default=0.0, alias="valorDiferencaProjetada")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "quantidade": 248,
                "quantidadeCritica": 17,
                "totalCredito": 50_345_666.5,
                "empenhadoAcumulado": 31_200_000.0,
                "liquidadoMes": 3_900_000.0,
                "liquidadoAcumulado": 24_100_000.0,
                "saldoALiquidar": 26_245_666.5,
                "valorDiferencaProjetada": -1_320_000.0,
            }
        },
    )


class ResumoGrupo(ResumoGeral):
    """Totals of one funding-source group.

    Attributes:
        vinculo: Resolved funding-source label that keys the group.
    """

    vinculo: str = Field(..., description="Rótulo do vínculo do grupo.")


# ---------------------------------------------------------------------------
# Dashboard payload
# ---------------------------------------------------------------------------


class PainelResponse(BaseModel):
    """Everything the dashboard screen needs for one set of parameters.

    Attributes:
        mes_atual: Current month used for the projection (1–12).
        base: Projection basis used.
        fichas: Filtered derived fichas, in dataset order.
        grupos: One summary per funding source, in first-seen order.
        resumo: Totals over the filtered fichas.
        vinculos: Sorted labels present in the whole (unfiltered) dataset.
    """

    mes_atual: int = Field(..., ge=1, le=12, alias="mesAtual")
    base: BaseProjecao
    fichas: list[FichaCalculada]
    grupos: list[ResumoGrupo]
    resumo: ResumoGeral
    vinculos: list[str]

    model_config = ConfigDict(populate_by_name=True)
