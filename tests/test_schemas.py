"""Tests for raw ficha coercion and serialisation."""

from __future__ import annotations

import pytest

from controle_loa.schemas.orcamento import BaseProjecao, FichaOrcamentaria, to_float, to_text


@pytest.mark.parametrize(
    "valor, esperado",
    [
        (None, 0.0),
        (True, 0.0),
        (12, 12.0),
        (1234.5, 1234.5),
        ("1234.5", 1234.5),
        ("1.234,56", 1234.56),
        ("R$ 10.000,00", 10000.0),
        ("1.234.567", 1234567.0),
        ("120.000", 120000.0),
        ("-1.500", -1500.0),
        ("12.5", 12.5),
        ("1234.567", 1234.567),
        ("abc", 0.0),
        ("", 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
        ([1, 2], 0.0),
    ],
)
def test_to_float(valor, esperado):
    assert to_float(valor) == pytest.approx(esperado)


@pytest.mark.parametrize(
    "valor, esperado",
    [(None, ""), (1215, "1215"), (1215.0, "1215"), ("  2048 ", "2048")],
)
def test_to_text(valor, esperado):
    assert to_text(valor) == esperado


def test_missing_fields_default_to_zero_and_empty():
    ficha = FichaOrcamentaria.model_validate({"id": 10})
    assert ficha.id == "10"
    assert ficha.elemento == ""
    assert ficha.vinculo == ""
    assert ficha.total_credito == 0.0
    assert ficha.liquidado_acumulado == 0.0
    assert ficha.observacoes is None


def test_accepts_aliases_and_field_names():
    por_alias = FichaOrcamentaria.model_validate({"totalCredito": "100"})
    por_nome = FichaOrcamentaria(total_credito=100)
    assert por_alias.total_credito == por_nome.total_credito == 100.0


def test_unknown_keys_are_ignored():
    ficha = FichaOrcamentaria.model_validate({"id": "1", "foo": "bar"})
    assert not hasattr(ficha, "foo")


def test_ficha_is_immutable():
    ficha = FichaOrcamentaria(id="1")
    with pytest.raises(Exception):
        ficha.id = "2"


def test_to_storage_uses_camel_case_and_drops_empty_note():
    storage = FichaOrcamentaria(id="1", liquidado_mes=5).to_storage()
    assert storage["liquidadoMes"] == 5.0
    assert "observacoes" not in storage
    assert "liquidado_mes" not in storage


@pytest.mark.parametrize(
    "valor, esperado",
    [
        ("media", BaseProjecao.MEDIA),
        ("Média", BaseProjecao.MEDIA),
        ("average", BaseProjecao.MEDIA),
        ("mes", BaseProjecao.MES),
        ("thisMonth", BaseProjecao.MES),
    ],
)
def test_base_projecao_aliases(valor, esperado):
    assert BaseProjecao(valor) is esperado


def test_base_projecao_rejects_unknown():
    with pytest.raises(ValueError):
        BaseProjecao("anual")
