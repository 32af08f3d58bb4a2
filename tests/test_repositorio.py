"""Tests for the persisted dataset repository."""

from __future__ import annotations

import json

import pytest

from controle_loa.models.armazenamento_local import ArmazenamentoLocal
from controle_loa.services.repositorio import (
    RepositorioMemoria,
    RepositorioSql,
    desserializar,
    serializar,
)

CHAVE = "controle_loa_2026_data_v2"


def test_load_without_data_returns_empty(db):
    assert RepositorioSql(db, CHAVE).load() == []


def test_save_then_load(db, fichas_exemplo):
    repo = RepositorioSql(db, CHAVE)
    repo.save(fichas_exemplo)
    assert repo.load() == fichas_exemplo


def test_save_replaces_wholesale(db, fichas_exemplo):
    repo = RepositorioSql(db, CHAVE)
    repo.save(fichas_exemplo)
    repo.save(fichas_exemplo[:1])
    assert [f.id for f in repo.load()] == ["1215"]
    assert db.query(ArmazenamentoLocal).count() == 1


def test_stored_value_is_camel_case_json(db, fichas_exemplo):
    RepositorioSql(db, CHAVE).save(fichas_exemplo)
    valor = json.loads(db.get(ArmazenamentoLocal, CHAVE).valor)
    assert valor[0]["totalCredito"] == 120000
    assert valor[0]["liquidadoAcumulado"] == 60000


def test_saving_empty_list_removes_the_key(db, fichas_exemplo):
    repo = RepositorioSql(db, CHAVE)
    repo.save(fichas_exemplo)
    repo.save([])
    assert db.get(ArmazenamentoLocal, CHAVE) is None
    assert repo.load() == []


def test_corrupt_data_is_discarded(db):
    db.add(ArmazenamentoLocal(chave=CHAVE, valor="{not json"))
    db.commit()
    repo = RepositorioSql(db, CHAVE)
    assert repo.load() == []
    assert db.get(ArmazenamentoLocal, CHAVE) is None


def test_non_list_data_is_discarded(db):
    db.add(ArmazenamentoLocal(chave=CHAVE, valor='{"fichas": []}'))
    db.commit()
    assert RepositorioSql(db, CHAVE).load() == []


def test_keys_are_isolated(db, fichas_exemplo):
    RepositorioSql(db, CHAVE).save(fichas_exemplo)
    assert RepositorioSql(db, "outra_chave").load() == []


def test_clear_is_noop_when_absent(db):
    RepositorioSql(db, CHAVE).clear()


def test_desserializar_errors():
    with pytest.raises(ValueError):
        desserializar("nope")
    with pytest.raises(ValueError):
        desserializar("42")
    with pytest.raises(ValueError):
        desserializar("[1, 2]")


def test_serializar_round_trip(fichas_exemplo):
    assert desserializar(serializar(fichas_exemplo)) == fichas_exemplo


def test_memory_repository(fichas_exemplo):
    repo = RepositorioMemoria(fichas_exemplo)
    assert repo.load() == fichas_exemplo
    repo.clear()
    assert repo.load() == []
