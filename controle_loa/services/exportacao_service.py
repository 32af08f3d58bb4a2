"""
Export service layer.

Builds the downloadable reports from the same filtered, recomputed dataset
the dashboard shows, then hands rows to ``ExcelExporter`` / ``PdfExporter``.

Reports
-------
- Excel: full audit table with status column and critical rows highlighted.
- PDF: condensed audit table.
- Print view (``impressao``): PDF with one section per vínculo, each closed
  by a "Soma do Grupo" row, followed by the consolidated summary.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Any

from controle_loa.config import get_settings
from controle_loa.exporters.excel_exporter import ExcelExporter
from controle_loa.exporters.pdf_exporter import PdfExporter
from controle_loa.schemas.orcamento import (
    BaseProjecao,
    FichaCalculada,
    FichaOrcamentaria,
    ResumoGeral,
)
from controle_loa.services.agregacao_service import agrupar_e_somar, somar_tudo
from controle_loa.services.calculo_service import clamp_mes
from controle_loa.services.painel_service import ParametrosPainel, calcular_filtradas
from controle_loa.utils.constants import (
    LIMITE_SALDO_SEGURO,
    MESES_LABELS,
    STATUS_CRITICO,
    STATUS_SEGURO,
)
from controle_loa.utils.formatacao import formatar_moeda, formatar_percentual

logger = logging.getLogger(__name__)

_BASE_LABELS: dict[BaseProjecao, str] = {
    BaseProjecao.MEDIA: "Média mensal",
    BaseProjecao.MES: "Liquidado no mês",
}


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _titulo(relatorio: str) -> str:
    return f"{relatorio} LOA {get_settings().ANO_FISCAL}"


def _filtros_aplicados(parametros: ParametrosPainel) -> dict[str, str]:
    """Human-readable description of the parameters behind a report."""
    filtros = {
        "Mês de referência": MESES_LABELS[clamp_mes(parametros.mes_atual)],
        "Base de projeção": _BASE_LABELS[BaseProjecao(parametros.base)],
    }
    criterios = parametros.filtros
    if criterios.busca:
        filtros["Busca"] = criterios.busca
    if criterios.funcional:
        filtros["Ação"] = criterios.funcional
    if criterios.vinculo:
        filtros["Vínculo"] = criterios.vinculo
    return filtros


def _kpis(resumo: ResumoGeral) -> dict[str, Any]:
    return {
        "Crédito Auditado": resumo.total_credito,
        "Total Empenhado": resumo.empenhado_acumulado,
        "Total Liquidado": resumo.liquidado_acumulado,
        "Saldo a Liquidar": resumo.saldo_a_liquidar,
        "Resultado Projetado": resumo.diferenca_projetada,
        "Déficits": resumo.quantidade_critica,
    }


def _kpis_formatados(resumo: ResumoGeral) -> dict[str, str]:
    return {
        label: formatar_moeda(valor) if isinstance(valor, float) else str(valor)
        for label, valor in _kpis(resumo).items()
    }


def _criticas(fichas: Sequence[FichaCalculada]) -> set[int]:
    return {i for i, ficha in enumerate(fichas) if ficha.status_critico}


def rotulo_esgotamento(ficha: FichaCalculada) -> str:
    """Per-line note of the print view.

    ``"Saldo Seguro"`` when the balance outlasts the year, otherwise the
    months until exhaustion rounded up; 13th-month lines are prefixed with
    ``"Incluso 13º"``.

    >>> rotulo_esgotamento(FichaCalculada(previsao_esgotamento=99))
    'Saldo Seguro'
    """
    if ficha.previsao_esgotamento > LIMITE_SALDO_SEGURO:
        rotulo = "Saldo Seguro"
    else:
        meses = max(0, math.ceil(ficha.previsao_esgotamento))
        rotulo = f"{meses} {'mês' if meses == 1 else 'meses'}"
    if ficha.is_13_meses:
        return f"Incluso 13º | {rotulo}"
    return rotulo


# ---------------------------------------------------------------------------
# Excel
# ---------------------------------------------------------------------------

_EXCEL_HEADERS = [
    "Ficha", "Elemento", "Ação", "Vínculo", "Crédito Total", "Empenhado Acum.",
    "Liquidado Mês", "Liquidado Acum.", "Saldo a Liquidar", "Projeção 31/12", "Status",
]
_EXCEL_MONEY_COLS = {4, 5, 6, 7, 8, 9}


def export_excel(
    fichas: Sequence[FichaOrcamentaria],
    parametros: ParametrosPainel,
) -> bytes:
    """Build the audit workbook for the filtered dataset.

    Args:
        fichas: Raw persisted fichas.
        parametros: Month, projection basis and filters, as on the dashboard.

    Returns:
        The ``.xlsx`` file content.
    """
    calculadas = calcular_filtradas(fichas, parametros)
    resumo = somar_tudo(calculadas)

    rows = [
        [
            f.id, f.elemento, f.funcional, f.vinculo_rotulo,
            f.total_credito, f.empenhado_acumulado, f.liquidado_mes,
            f.liquidado_acumulado, f.saldo_a_liquidar, f.diferenca_projetada,
            STATUS_CRITICO if f.status_critico else STATUS_SEGURO,
        ]
        for f in calculadas
    ]

    exporter = ExcelExporter(title=_titulo("Auditoria"), filters=_filtros_aplicados(parametros))
    exporter.add_header()
    exporter.add_kpi_row(_kpis(resumo))
    exporter.add_data_table(
        _EXCEL_HEADERS, rows,
        money_cols=_EXCEL_MONEY_COLS,
        highlight_rows=_criticas(calculadas),
    )
    content = exporter.finalize()
    logger.info("export_excel: %d fichas, %d bytes", len(rows), len(content))
    return content


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------

_PDF_HEADERS = ["Ficha", "Elemento", "Ação", "Crédito", "Liq. Acum", "Saldo Liq.", "Projeção"]
_PDF_NUMERIC_COLS = {3, 4, 5, 6}
_PDF_WIDTHS = [1.2, 2.4, 1.2, 1.6, 1.6, 1.6, 1.6]


def export_pdf(
    fichas: Sequence[FichaOrcamentaria],
    parametros: ParametrosPainel,
) -> bytes:
    """Build the condensed audit PDF for the filtered dataset."""
    calculadas = calcular_filtradas(fichas, parametros)
    resumo = somar_tudo(calculadas)

    rows = [
        [
            f.id, f.elemento, f.funcional,
            formatar_moeda(f.total_credito),
            formatar_moeda(f.liquidado_acumulado),
            formatar_moeda(f.saldo_a_liquidar),
            formatar_moeda(f.diferenca_projetada),
        ]
        for f in calculadas
    ]

    exporter = PdfExporter(title=_titulo("Auditoria"), filters=_filtros_aplicados(parametros))
    exporter.add_header()
    exporter.add_kpi_section(_kpis_formatados(resumo))
    exporter.add_section_title("Detalhamento por Ficha")
    exporter.add_table(
        _PDF_HEADERS, rows,
        numeric_cols=_PDF_NUMERIC_COLS,
        col_widths=_PDF_WIDTHS,
        highlight_rows=_criticas(calculadas),
    )
    content = exporter.build()
    logger.info("export_pdf: %d fichas, %d bytes", len(rows), len(content))
    return content


# ---------------------------------------------------------------------------
# Print view
# ---------------------------------------------------------------------------

_IMPRESSAO_HEADERS = [
    "Ficha", "Elemento", "Ação", "Crédito", "Liq. Acum", "Exec.",
    "Saldo a Liquidar", "Projeção 31/12", "Esgotamento",
]
_IMPRESSAO_NUMERIC_COLS = {3, 4, 5, 6, 7}
_IMPRESSAO_WIDTHS = [1.0, 2.2, 1.0, 1.6, 1.6, 0.8, 1.6, 1.6, 1.8]


def export_impressao(
    fichas: Sequence[FichaOrcamentaria],
    parametros: ParametrosPainel,
) -> bytes:
    """Build the grouped print report.

    Sections are ordered by vínculo label; each lists its fichas and a
    "Soma do Grupo" subtotal.  The consolidated KPIs close the report.
    """
    calculadas = calcular_filtradas(fichas, parametros)
    grupos = agrupar_e_somar(calculadas)
    resumo = somar_tudo(calculadas)

    exporter = PdfExporter(title=_titulo("Relatório de Auditoria"),
                           filters=_filtros_aplicados(parametros))
    exporter.add_header()

    for rotulo in sorted(grupos):
        membros = [f for f in calculadas if f.vinculo_rotulo == rotulo]
        soma = grupos[rotulo]
        rows = [
            [
                f.id, f.elemento, f.funcional,
                formatar_moeda(f.total_credito),
                formatar_moeda(f.liquidado_acumulado),
                formatar_percentual(f.percentual_execucao),
                formatar_moeda(f.saldo_a_liquidar),
                formatar_moeda(f.diferenca_projetada),
                rotulo_esgotamento(f),
            ]
            for f in membros
        ]
        total_row = [
            "Soma do Grupo", "", "",
            formatar_moeda(soma.total_credito),
            formatar_moeda(soma.liquidado_acumulado),
            "",
            formatar_moeda(soma.saldo_a_liquidar),
            formatar_moeda(soma.diferenca_projetada),
            f"{soma.quantidade_critica} déficit(s)",
        ]
        exporter.add_section_title(f"{rotulo} ({soma.quantidade} fichas)")
        exporter.add_table(
            _IMPRESSAO_HEADERS, rows,
            numeric_cols=_IMPRESSAO_NUMERIC_COLS,
            col_widths=_IMPRESSAO_WIDTHS,
            highlight_rows=_criticas(membros),
            total_row=total_row,
        )

    exporter.add_section_title("Resumo Consolidado")
    exporter.add_kpi_section(_kpis_formatados(resumo))

    content = exporter.build()
    logger.info(
        "export_impressao: %d grupos, %d fichas, %d bytes",
        len(grupos), len(calculadas), len(content),
    )
    return content
