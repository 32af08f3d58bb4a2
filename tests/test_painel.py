"""Tests for the dashboard payload assembly."""

from __future__ import annotations

import pytest

from controle_loa.schemas.common import FilterParams
from controle_loa.schemas.orcamento import BaseProjecao
from controle_loa.services.painel_service import (
    ParametrosPainel,
    get_grupos,
    get_resumo,
    montar_painel,
)


def test_full_payload(fichas_exemplo):
    painel = montar_painel(fichas_exemplo, ParametrosPainel(mes_atual=6))
    assert painel.mes_atual == 6
    assert painel.base is BaseProjecao.MEDIA
    assert len(painel.fichas) == 4
    assert [g.vinculo for g in painel.grupos] == ["70% FUNDEB", "PNAE (Merenda)", "Fonte 99999"]
    assert painel.resumo.quantidade_critica == 2
    assert painel.vinculos == ["70% FUNDEB", "Fonte 99999", "PNAE (Merenda)"]


def test_chip_list_ignores_filters(fichas_exemplo):
    parametros = ParametrosPainel(mes_atual=6, filtros=FilterParams(vinculo="PNAE (Merenda)"))
    painel = montar_painel(fichas_exemplo, parametros)
    assert [f.id for f in painel.fichas] == ["1300"]
    assert len(painel.grupos) == 1
    assert painel.resumo.total_credito == pytest.approx(80000)
    assert len(painel.vinculos) == 3


def test_month_is_clamped_in_payload(fichas_exemplo):
    assert montar_painel(fichas_exemplo, ParametrosPainel(mes_atual=14)).mes_atual == 12


def test_empty_dataset():
    painel = montar_painel([], ParametrosPainel(mes_atual=3))
    assert painel.fichas == []
    assert painel.grupos == []
    assert painel.vinculos == []
    assert painel.resumo.quantidade == 0


def test_grupos_and_resumo_agree(fichas_exemplo):
    parametros = ParametrosPainel(mes_atual=9, base=BaseProjecao.MES)
    grupos = get_grupos(fichas_exemplo, parametros)
    resumo = get_resumo(fichas_exemplo, parametros)
    assert sum(g.total_credito for g in grupos) == pytest.approx(resumo.total_credito)


def test_payload_serialises_with_aliases(fichas_exemplo):
    payload = montar_painel(fichas_exemplo, ParametrosPainel(mes_atual=6)).model_dump(
        by_alias=True, mode="json"
    )
    assert payload["mesAtual"] == 6
    assert payload["base"] == "media"
    assert payload["fichas"][0]["statusCritico"] is True
    assert payload["fichas"][0]["valorDiferencaProjetada"] == pytest.approx(-10000)
