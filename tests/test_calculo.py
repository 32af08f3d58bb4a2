"""Tests for the derived-metrics calculator."""

from __future__ import annotations

import pytest

from controle_loa.schemas.orcamento import BaseProjecao, FichaCalculada, FichaOrcamentaria
from controle_loa.services.calculo_service import calcular_ficha, calcular_fichas, clamp_mes


def _ficha(**kwargs) -> FichaOrcamentaria:
    base = {
        "id": "1215",
        "elemento": "3.1.90.11.00.00.00.00",
        "funcional": "2048",
        "vinculo": "00101",
        "totalCredito": 120000,
        "empenhadoAcumulado": 90000,
        "liquidadoMes": 10000,
        "liquidadoAcumulado": 60000,
    }
    base.update(kwargs)
    return FichaOrcamentaria.model_validate(base)


def test_average_basis_scenario():
    calc = calcular_ficha(_ficha(), 6, BaseProjecao.MEDIA)

    assert calc.saldo_a_liquidar == pytest.approx(60000)
    assert calc.media_liquidada == pytest.approx(10000)
    assert calc.media_empenhada == pytest.approx(15000)
    assert calc.base_calculo == pytest.approx(10000)
    assert calc.is_13_meses is True
    assert calc.meses_para_executar == 7
    assert calc.gasto_futuro_projetado == pytest.approx(70000)
    assert calc.diferenca_projetada == pytest.approx(-10000)
    assert calc.status_critico is True
    assert calc.previsao_esgotamento == pytest.approx(6)
    assert calc.percentual_execucao == pytest.approx(50)
    assert calc.vinculo_rotulo == "70% FUNDEB"


def test_current_month_basis_scenario():
    calc = calcular_ficha(_ficha(liquidadoMes=20000), 6, BaseProjecao.MES)

    assert calc.base_calculo == pytest.approx(20000)
    assert calc.gasto_futuro_projetado == pytest.approx(140000)
    assert calc.diferenca_projetada == pytest.approx(-80000)
    assert calc.status_critico is True
    assert calc.previsao_esgotamento == pytest.approx(3)


def test_non_personnel_element_has_no_extra_month():
    calc = calcular_ficha(_ficha(elemento="4.4.90.52.00.00.00.00"), 6)
    assert calc.is_13_meses is False
    assert calc.meses_para_executar == 6
    assert calc.diferenca_projetada == pytest.approx(0)
    assert calc.status_critico is False


def test_december_projection_only_counts_13th_month():
    assert calcular_ficha(_ficha(), 12).meses_para_executar == 1
    assert calcular_ficha(_ficha(elemento="339039"), 12).meses_para_executar == 0


def test_zero_credit_gives_zero_execution():
    calc = calcular_ficha(_ficha(totalCredito=0), 6)
    assert calc.percentual_execucao == 0


def test_over_execution_is_not_capped():
    calc = calcular_ficha(_ficha(totalCredito=50000), 6)
    assert calc.percentual_execucao == pytest.approx(120)


def test_zero_run_rate_is_never_critical_and_uses_sentinel():
    calc = calcular_ficha(_ficha(liquidadoAcumulado=0, liquidadoMes=0), 6)
    assert calc.base_calculo == 0
    assert calc.status_critico is False
    assert calc.previsao_esgotamento == 99


def test_current_month_basis_with_nothing_settled_this_month():
    calc = calcular_ficha(_ficha(liquidadoMes=0), 6, "mes")
    assert calc.base_calculo == 0
    assert calc.gasto_futuro_projetado == 0
    assert calc.status_critico is False
    assert calc.previsao_esgotamento == 99


def test_positive_run_rate_gives_months_to_exhaustion():
    calc = calcular_ficha(_ficha(totalCredito=180000), 6)
    assert calc.previsao_esgotamento == pytest.approx(12)
    assert calc.status_critico is False


def test_negative_run_rate_is_never_critical_and_uses_sentinel():
    calc = calcular_ficha(_ficha(liquidadoMes=-5000), 6, BaseProjecao.MES)
    assert calc.base_calculo == -5000
    assert calc.status_critico is False
    assert calc.previsao_esgotamento == 99


def test_negative_credit_is_handled():
    calc = calcular_ficha(_ficha(totalCredito=-1000), 6)
    assert calc.percentual_execucao == 0.0
    assert calc.saldo_a_liquidar == pytest.approx(-61000)
    assert calc.status_critico is True
    assert calc.previsao_esgotamento == pytest.approx(-6.1)


@pytest.mark.parametrize("mes, esperado", [(0, 1), (-3, 1), (1, 1), (12, 12), (13, 12)])
def test_clamp_mes(mes, esperado):
    assert clamp_mes(mes) == esperado


def test_month_zero_does_not_divide_by_zero():
    calc = calcular_ficha(_ficha(), 0)
    assert calc.media_liquidada == pytest.approx(60000)


def test_english_basis_aliases_are_accepted():
    assert calcular_ficha(_ficha(), 6, "average").base_calculo == pytest.approx(10000)
    assert calcular_ficha(_ficha(liquidadoMes=20000), 6, "thisMonth").base_calculo == pytest.approx(20000)


def test_raw_fields_are_carried_over():
    ficha = _ficha(observacoes="revisar")
    calc = calcular_ficha(ficha, 6)
    assert isinstance(calc, FichaCalculada)
    assert calc.id == ficha.id
    assert calc.total_credito == ficha.total_credito
    assert calc.observacoes == "revisar"


def test_recomputing_a_derived_ficha_is_deterministic():
    primeira = calcular_ficha(_ficha(), 6)
    segunda = calcular_ficha(primeira, 6)
    assert segunda == primeira


def test_calcular_fichas_preserves_order_and_empty_input(fichas_exemplo):
    calculadas = calcular_fichas(fichas_exemplo, 6)
    assert [c.id for c in calculadas] == [f.id for f in fichas_exemplo]
    assert calcular_fichas([], 6) == []
