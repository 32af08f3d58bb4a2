"""Shared pytest fixtures.

Provides:
- db: per-test SQLAlchemy session on a fresh in-memory SQLite schema
- client: FastAPI TestClient wired to the same database
- fichas_exemplo: small raw dataset covering three funding sources
- openai_stub: replaces ``extracao_service.OpenAI`` with a recording stub
"""

from __future__ import annotations

import os

# Settings are cached on first import: point them at an in-memory database
# and a dummy key before anything from controle_loa is loaded.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENAI_API_KEY"] = "test-key"

from typing import Any  # noqa: E402

import pytest  # noqa: E402
from starlette.testclient import TestClient  # noqa: E402

from controle_loa.database import Base, SessionLocal, engine  # noqa: E402
from controle_loa.main import app  # noqa: E402
from controle_loa.schemas.orcamento import FichaOrcamentaria  # noqa: E402
from controle_loa.services import extracao_service  # noqa: E402

import controle_loa.models  # noqa: E402,F401


# ── Database ───────────────────────────────────────────────────────────────

@pytest.fixture()
def db():
    """Fresh schema per test; the session is closed and tables dropped after."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    """TestClient sharing the in-memory database with ``db``."""
    with TestClient(app) as test_client:
        yield test_client


# ── Sample data ────────────────────────────────────────────────────────────

RAW_FICHAS: list[dict[str, Any]] = [
    {
        "id": "1215",
        "elemento": "3.1.90.11.00.00.00.00",
        "funcional": "12.361.0002.2048",
        "vinculo": "00101",
        "totalCredito": 120000,
        "empenhadoAcumulado": 110000,
        "liquidadoMes": 10000,
        "liquidadoAcumulado": 60000,
        "saldoOrcamentario": 10000,
    },
    {
        "id": "1216",
        "elemento": "3.3.90.39.00.00.00.00",
        "funcional": "12.361.0002.2048",
        "vinculo": "00101",
        "totalCredito": 50000,
        "empenhadoAcumulado": 20000,
        "liquidadoMes": 1000,
        "liquidadoAcumulado": 6000,
        "saldoOrcamentario": 30000,
    },
    {
        "id": "1300",
        "elemento": "4.4.90.52.00.00.00.00",
        "funcional": "12.365.0003.1010",
        "vinculo": "10146",
        "totalCredito": 80000,
        "empenhadoAcumulado": 0,
        "liquidadoMes": 0,
        "liquidadoAcumulado": 0,
        "saldoOrcamentario": 80000,
    },
    {
        "id": "A-77",
        "elemento": "339008",
        "funcional": "12.122.0001.2001",
        "vinculo": "99999",
        "totalCredito": 30000,
        "empenhadoAcumulado": 18000,
        "liquidadoMes": 3000,
        "liquidadoAcumulado": 18000,
        "saldoOrcamentario": 12000,
    },
]


@pytest.fixture()
def fichas_exemplo() -> list[FichaOrcamentaria]:
    return [FichaOrcamentaria.model_validate(item) for item in RAW_FICHAS]


# ── OpenAI stub ────────────────────────────────────────────────────────────

class RespostaStub:
    """Minimal Responses API result exposing ``output_text``."""

    def __init__(self, output_text: str) -> None:
        self.output_text = output_text


class OpenAIStub:
    """Records ``responses.create`` kwargs and replays a canned result.

    Set ``resposta`` to a response object, or ``erro`` to an exception to raise.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.resposta: Any = RespostaStub("[]")
        self.erro: Exception | None = None
        self.responses = self

    def __call__(self, *args: Any, **kwargs: Any) -> OpenAIStub:
        return self

    def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.erro is not None:
            raise self.erro
        return self.resposta


@pytest.fixture()
def openai_stub(monkeypatch: pytest.MonkeyPatch) -> OpenAIStub:
    stub = OpenAIStub()
    monkeypatch.setattr(extracao_service, "OpenAI", stub)
    return stub
