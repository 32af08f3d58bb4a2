"""RegistroImportacao model — audit log of every balancete import attempt."""

from sqlalchemy import Column, DateTime, Float, Integer, String, Text
from sqlalchemy.sql import func

from controle_loa.database import Base


class RegistroImportacao(Base):
    """Persistent audit record written after each upload, successful or not.

    Attributes:
        id: Primary key.
        arquivo_nome: Original filename submitted by the client.
        data: Timestamp when the import was processed.
        registros: Number of fichas accepted (0 on failure).
        total_credito: Sum of ``totalCredito`` over the accepted fichas.
        estado: ``"SUCESSO"`` or ``"FALHA"``.
        erro: Failure reason reported by the extraction step, if any.
    """

    __tablename__ = "registro_importacao"

    id = Column(Integer, primary_key=True, autoincrement=True)
    arquivo_nome = Column(String(500), nullable=False)
    data = Column(DateTime, default=func.now(), nullable=False)
    registros = Column(Integer, default=0, nullable=False)
    total_credito = Column(Float, default=0.0, nullable=False)
    estado = Column(String(20), nullable=False)  # SUCESSO | FALHA
    erro = Column(Text, nullable=True)
