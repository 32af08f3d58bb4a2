"""
Pydantic v2 schemas for the Import (Importação) module.

Covers:
- Upload response after a balancete has been processed.
- Historical record for GET /api/importacao/historico.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ImportacaoResponse(BaseModel):
    """Summary returned after the dataset has been replaced."""

    arquivo: str = Field(..., description="Nome do arquivo importado.")
    quantidade: int = Field(..., ge=0, description="Fichas aceitas.")
    total_credito: float = Field(
        ...,
        alias="totalCredito",
        description="Soma dos créditos auditados das fichas aceitas.",
    )
    estado: str = Field(..., description="SUCESSO ou FALHA.")
    avisos: list[str] = Field(default_factory=list)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "arquivo": "balancete_junho_2026.pdf",
                "quantidade": 248,
                "totalCredito": 50_345_666.5,
                "estado": "SUCESSO",
                "avisos": ["Registro 17 ignorado: não é um objeto."],
            }
        },
    )


class HistoricoImportacao(BaseModel):
    """Single row in the import history list."""

    id: int = Field(..., description="PK do registro de histórico.")
    arquivo_nome: str
    data: datetime
    registros: int = Field(..., ge=0)
    total_credito: float
    estado: str
    erro: str | None = None

    model_config = ConfigDict(from_attributes=True)
