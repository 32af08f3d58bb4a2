"""Tests for the import orchestration service."""

from __future__ import annotations

import pytest
from conftest import RAW_FICHAS

from controle_loa.config import get_settings
from controle_loa.models.registro_importacao import RegistroImportacao
from controle_loa.services.importacao_service import (
    _validar_pdf,
    get_historico,
    substituir_dados,
)
from controle_loa.services.repositorio import RepositorioMemoria, RepositorioSql


def test_validar_pdf_accepts_pdf_header():
    _validar_pdf(b"%PDF-1.7 ...", "application/octet-stream")


def test_validar_pdf_rejects_empty():
    with pytest.raises(ValueError, match="vazio"):
        _validar_pdf(b"", "application/pdf")


def test_validar_pdf_rejects_other_documents():
    with pytest.raises(ValueError, match="PDF"):
        _validar_pdf(b"PK\x03\x04", "application/zip")


def test_validar_pdf_tolerates_declared_pdf_without_header():
    _validar_pdf(b"\x00\x01", "application/pdf")


def test_validar_pdf_rejects_oversized(monkeypatch):
    monkeypatch.setattr(get_settings(), "MAX_UPLOAD_MB", 0)
    with pytest.raises(ValueError, match="limite"):
        _validar_pdf(b"%PDF-1.4", "application/pdf")


def test_substituir_dados_replaces_dataset(fichas_exemplo):
    repo = RepositorioMemoria(fichas_exemplo)
    resposta = substituir_dados(RAW_FICHAS[:2], repo)
    assert resposta.quantidade == 2
    assert resposta.total_credito == pytest.approx(170000)
    assert [f.id for f in repo.load()] == ["1215", "1216"]


def test_substituir_dados_with_empty_list_clears(fichas_exemplo):
    repo = RepositorioMemoria(fichas_exemplo)
    resposta = substituir_dados([], repo)
    assert resposta.quantidade == 0
    assert repo.load() == []


def test_substituir_dados_invalid_payload_keeps_dataset(fichas_exemplo):
    repo = RepositorioMemoria(fichas_exemplo)
    with pytest.raises(ValueError):
        substituir_dados({"nada": 1}, repo)
    assert repo.load() == fichas_exemplo


def test_get_historico_most_recent_first(db):
    for nome in ("a.pdf", "b.pdf"):
        db.add(RegistroImportacao(arquivo_nome=nome, registros=1, total_credito=1.0, estado="SUCESSO"))
        db.commit()
    assert [h.arquivo_nome for h in get_historico(db)] == ["b.pdf", "a.pdf"]


def test_repositorio_sql_is_used_for_substituir(db):
    repo = RepositorioSql(db, "k")
    substituir_dados(RAW_FICHAS, repo)
    assert len(repo.load()) == 4
