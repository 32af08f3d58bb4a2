"""
Persistence of the raw fichas dataset.

The dataset is stored as one JSON array under a fixed storage key, replaced
wholesale on every save.  Callers depend on the ``RepositorioFichas``
protocol; ``RepositorioSql`` is the production implementation and
``RepositorioMemoria`` serves tests and embedding.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any, Protocol

from pydantic import ValidationError
from sqlalchemy.orm import Session

from controle_loa.models.armazenamento_local import ArmazenamentoLocal
from controle_loa.schemas.orcamento import FichaOrcamentaria

logger = logging.getLogger(__name__)


class RepositorioFichas(Protocol):
    """Owner of the persisted dataset."""

    def load(self) -> list[FichaOrcamentaria]: ...

    def save(self, fichas: Sequence[FichaOrcamentaria]) -> None: ...

    def clear(self) -> None: ...


def serializar(fichas: Sequence[FichaOrcamentaria]) -> str:
    """Serialise fichas to the camelCase JSON array used in storage."""
    return json.dumps([ficha.to_storage() for ficha in fichas], ensure_ascii=False)


def desserializar(valor: str) -> list[FichaOrcamentaria]:
    """Parse a stored JSON array back into fichas.

    Raises:
        ValueError: If ``valor`` is not valid JSON, is not an array, or holds
            a non-object entry.
    """
    try:
        dados: Any = json.loads(valor)
    except json.JSONDecodeError as exc:
        raise ValueError(f"JSON inválido no armazenamento: {exc}") from exc
    if not isinstance(dados, list):
        raise ValueError("O conteúdo armazenado não é uma lista de fichas.")
    try:
        return [FichaOrcamentaria.model_validate(item) for item in dados]
    except ValidationError as exc:
        raise ValueError(f"Ficha armazenada inválida: {exc}") from exc


class RepositorioSql:
    """Dataset stored in the ``armazenamento_local`` table.

    Args:
        db: Active SQLAlchemy session.
        chave: Storage key under which the JSON array lives.
    """

    def __init__(self, db: Session, chave: str) -> None:
        self._db = db
        self._chave = chave

    def load(self) -> list[FichaOrcamentaria]:
        """Return the stored fichas, or ``[]`` when absent or corrupt.

        A corrupt entry is removed so the next import starts clean.
        """
        registro = self._db.get(ArmazenamentoLocal, self._chave)
        if registro is None:
            return []
        try:
            return desserializar(registro.valor)
        except ValueError as exc:
            logger.error("Could not load stored dataset (key=%s): %s", self._chave, exc)
            self.clear()
            return []

    def save(self, fichas: Sequence[FichaOrcamentaria]) -> None:
        """Replace the stored dataset in a single commit.

        Saving an empty list removes the key.

        Raises:
            RuntimeError: If the commit fails (the session is rolled back).
        """
        if not fichas:
            self.clear()
            return
        try:
            registro = self._db.get(ArmazenamentoLocal, self._chave)
            valor = serializar(fichas)
            if registro is None:
                self._db.add(ArmazenamentoLocal(chave=self._chave, valor=valor))
            else:
                registro.valor = valor
            self._db.commit()
        except Exception as exc:
            self._db.rollback()
            logger.exception("Failed to save %d fichas (key=%s)", len(fichas), self._chave)
            raise RuntimeError(f"Erro ao salvar os dados: {exc}") from exc
        logger.info("Dataset saved: key=%s fichas=%d", self._chave, len(fichas))

    def clear(self) -> None:
        """Delete the stored dataset, if any."""
        registro = self._db.get(ArmazenamentoLocal, self._chave)
        if registro is None:
            return
        try:
            self._db.delete(registro)
            self._db.commit()
        except Exception as exc:
            self._db.rollback()
            logger.exception("Failed to clear dataset (key=%s)", self._chave)
            raise RuntimeError(f"Erro ao remover os dados: {exc}") from exc
        logger.info("Dataset cleared: key=%s", self._chave)


class RepositorioMemoria:
    """Dict-backed repository keeping the same serialised form as storage."""

    def __init__(self, fichas: Sequence[FichaOrcamentaria] = ()) -> None:
        self._valor: str | None = None
        if fichas:
            self.save(fichas)

    def load(self) -> list[FichaOrcamentaria]:
        if self._valor is None:
            return []
        return desserializar(self._valor)

    def save(self, fichas: Sequence[FichaOrcamentaria]) -> None:
        self._valor = serializar(fichas) if fichas else None

    def clear(self) -> None:
        self._valor = None
