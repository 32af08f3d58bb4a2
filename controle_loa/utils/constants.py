"""
Application-wide constants for the Controle LOA system.

Defines the funding-source taxonomy, the 13th-month classifier codes, the
fiscal-calendar constants and the sentinels the dashboard depends on.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Funding sources (vínculos)
# ---------------------------------------------------------------------------

VINCULO_MAP: Final[dict[str, str]] = {
    "00000": "Recursos Livres",
    "00101": "70% FUNDEB",
    "00102": "30% FUNDEB",
    "00103": "5% MDE",
    "00104": "25% MDE / Recursos Próprios",
    "00107": "Salário Educação",
    "10146": "PNAE (Merenda)",
    "10147": "Apoio ao Transporte (PNATE)",
    "10231": "VAAR (FUNDEB)",
}

# Prefix for codes missing from VINCULO_MAP, e.g. "Fonte 99999"
PREFIXO_VINCULO_DESCONHECIDO: Final[str] = "Fonte "

# ---------------------------------------------------------------------------
# 13th-month category (personnel-type expense elements)
# ---------------------------------------------------------------------------

# Personnel expenses, dotted and compact code formats
PREFIXOS_PESSOAL: Final[tuple[str, ...]] = ("3.1", "31")

# Substitute / temporary personnel sub-element
ELEMENTOS_PESSOAL_TEMPORARIO: Final[tuple[str, ...]] = ("3.3.90.08", "339008")

# ---------------------------------------------------------------------------
# Fiscal calendar
# ---------------------------------------------------------------------------

MESES_NO_ANO: Final[int] = 12
MES_ADICIONAL_13: Final[int] = 1

# Months-to-exhaustion sentinel meaning "not exhausting"; anything above
# LIMITE_SALDO_SEGURO is displayed as "Saldo Seguro".
PREVISAO_SEM_ESGOTAMENTO: Final[float] = 99.0
LIMITE_SALDO_SEGURO: Final[int] = 12

MESES_LABELS: Final[list[str]] = [
    "",
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
]

# ---------------------------------------------------------------------------
# Status labels
# ---------------------------------------------------------------------------

STATUS_CRITICO: Final[str] = "CRÍTICO"
STATUS_SEGURO: Final[str] = "SEGURO"

ESTADO_IMPORTACAO_SUCESSO: Final[str] = "SUCESSO"
ESTADO_IMPORTACAO_FALHA: Final[str] = "FALHA"
