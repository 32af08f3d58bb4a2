"""Tests for group and global aggregation."""

from __future__ import annotations

import pytest

from controle_loa.services.agregacao_service import CAMPOS_SOMADOS, agrupar_e_somar, somar_tudo
from controle_loa.services.calculo_service import calcular_fichas


@pytest.fixture()
def calculadas(fichas_exemplo):
    return calcular_fichas(fichas_exemplo, 6)


def test_groups_in_first_seen_order(calculadas):
    grupos = agrupar_e_somar(calculadas)
    assert list(grupos) == ["70% FUNDEB", "PNAE (Merenda)", "Fonte 99999"]


def test_group_sums(calculadas):
    fundeb = agrupar_e_somar(calculadas)["70% FUNDEB"]
    assert fundeb.vinculo == "70% FUNDEB"
    assert fundeb.quantidade == 2
    assert fundeb.quantidade_critica == 1
    assert fundeb.total_credito == pytest.approx(170000)
    assert fundeb.saldo_a_liquidar == pytest.approx(104000)
    assert fundeb.diferenca_projetada == pytest.approx(28000)


def test_global_summary(calculadas):
    resumo = somar_tudo(calculadas)
    assert resumo.quantidade == 4
    assert resumo.quantidade_critica == 2
    assert resumo.total_credito == pytest.approx(280000)
    assert resumo.empenhado_acumulado == pytest.approx(148000)
    assert resumo.liquidado_mes == pytest.approx(14000)
    assert resumo.liquidado_acumulado == pytest.approx(84000)
    assert resumo.saldo_a_liquidar == pytest.approx(196000)
    assert resumo.diferenca_projetada == pytest.approx(99000)


@pytest.mark.parametrize("mes", [1, 6, 12])
@pytest.mark.parametrize("base", ["media", "mes"])
def test_groups_partition_the_global_summary(fichas_exemplo, mes, base):
    calculadas = calcular_fichas(fichas_exemplo, mes, base)
    grupos = agrupar_e_somar(calculadas).values()
    resumo = somar_tudo(calculadas)
    for campo in CAMPOS_SOMADOS:
        assert sum(getattr(g, campo) for g in grupos) == pytest.approx(getattr(resumo, campo))
    assert sum(g.quantidade for g in grupos) == resumo.quantidade
    assert sum(g.quantidade_critica for g in grupos) == resumo.quantidade_critica


def test_empty_input_gives_zeros():
    assert agrupar_e_somar([]) == {}
    resumo = somar_tudo([])
    assert resumo.quantidade == 0
    assert all(getattr(resumo, campo) == 0 for campo in CAMPOS_SOMADOS)


def test_summary_serialises_with_camel_case_keys(calculadas):
    payload = somar_tudo(calculadas).model_dump(by_alias=True)
    assert {"totalCredito", "saldoALiquidar", "valorDiferencaProjetada", "quantidadeCritica"} <= set(payload)
