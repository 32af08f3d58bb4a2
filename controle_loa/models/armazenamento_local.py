"""ArmazenamentoLocal model — key/value store for the persisted dataset."""

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from controle_loa.database import Base


class ArmazenamentoLocal(Base):
    """One serialised dataset per storage key.

    The whole list of fichas is stored as a single JSON array so that an
    import replaces it in one write.

    Attributes:
        chave: Storage key, e.g. ``"controle_loa_2026_data_v2"``.
        valor: JSON-serialised array of fichas (camelCase keys).
        atualizado_em: Timestamp of the last write.
    """

    __tablename__ = "armazenamento_local"

    chave = Column(String(100), primary_key=True)
    valor = Column(Text, nullable=False)
    atualizado_em = Column(
        DateTime, default=func.now(), onupdate=func.now(), nullable=False
    )
