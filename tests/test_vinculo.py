"""Tests for funding-source label resolution."""

from __future__ import annotations

from types import SimpleNamespace

from controle_loa.services.vinculo_service import listar_vinculos, resolver_vinculo
from controle_loa.utils.constants import VINCULO_MAP


def test_known_codes_resolve_to_map_labels():
    for codigo, rotulo in VINCULO_MAP.items():
        assert resolver_vinculo(codigo) == rotulo


def test_unknown_codes_get_distinct_fallback_labels():
    assert resolver_vinculo("99999") == "Fonte 99999"
    assert resolver_vinculo("88888") == "Fonte 88888"
    assert resolver_vinculo("99999") != resolver_vinculo("88888")


def test_empty_code_falls_back():
    assert resolver_vinculo("") == "Fonte "


def test_listar_vinculos_sorted_and_deduplicated():
    fichas = [
        SimpleNamespace(vinculo="10146"),
        SimpleNamespace(vinculo="00101"),
        SimpleNamespace(vinculo="00101"),
        SimpleNamespace(vinculo="99999"),
    ]
    assert listar_vinculos(fichas) == ["70% FUNDEB", "Fonte 99999", "PNAE (Merenda)"]


def test_listar_vinculos_empty():
    assert listar_vinculos([]) == []


def test_vinculo_map_labels_are_unique():
    assert len(set(VINCULO_MAP.values())) == len(VINCULO_MAP)
