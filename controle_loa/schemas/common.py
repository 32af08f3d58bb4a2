"""
Shared Pydantic v2 schemas reused across multiple modules.

Provides the dashboard filter criteria and the generic message response so
that the budget, export and import routers compose them without duplicating
field definitions.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FilterParams(BaseModel):
    """Filter criteria applied to the derived fichas.

    Empty strings and ``None`` mean "no restriction on that axis".

    Attributes:
        busca: Free text matched against ficha number (case-insensitive),
            elemento and funcional (case-sensitive substrings).
        funcional: Substring the ficha's action code must contain.
        vinculo: Resolved funding-source label that must match exactly,
            e.g. ``"70% FUNDEB"`` or ``"Fonte 99999"``.
    """

    busca: str = Field(
        default="",
        max_length=200,
        description="Busca livre por ficha, elemento ou ação.",
    )
    funcional: str = Field(
        default="",
        max_length=100,
        description="Ação específica (ex. '2048').",
    )
    vinculo: str | None = Field(
        default=None,
        max_length=200,
        description="Rótulo do vínculo ativo. None = todos os vínculos.",
    )

    model_config = ConfigDict(frozen=True)


class MessageResponse(BaseModel):
    """Generic message envelope for operations that do not return a resource.

    Attributes:
        message: Short human-readable result summary.
        detail: Optional extended information (error description, hint, etc.).
    """

    message: str = Field(..., description="Resumo do resultado da operação.")
    detail: str | None = Field(
        default=None,
        description="Informação adicional (contexto de erro, sugestão, etc.).",
    )
