"""Funding-source (vínculo) label resolution."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from controle_loa.utils.constants import PREFIXO_VINCULO_DESCONHECIDO, VINCULO_MAP


def resolver_vinculo(codigo: Any) -> str:
    """Map a funding-source code to its display label.

    Unknown codes get ``"Fonte <codigo>"`` so each one keeps its own stable
    group instead of collapsing into a shared "unknown" bucket.

    Args:
        codigo: Raw source code, e.g. ``"00101"``.

    Returns:
        The label from ``VINCULO_MAP`` or the prefixed fallback.
    """
    codigo_str = "" if codigo is None else str(codigo)
    rotulo = VINCULO_MAP.get(codigo_str)
    if rotulo is not None:
        return rotulo
    return f"{PREFIXO_VINCULO_DESCONHECIDO}{codigo_str}"


def listar_vinculos(fichas: Iterable[Any]) -> list[str]:
    """Return the sorted, de-duplicated labels present in ``fichas``.

    Used to build the funding-source filter chips.
    """
    return sorted({resolver_vinculo(ficha.vinculo) for ficha in fichas})
