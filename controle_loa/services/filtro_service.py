"""Dashboard filter engine over derived fichas."""

from __future__ import annotations

from collections.abc import Iterable

from controle_loa.schemas.common import FilterParams
from controle_loa.schemas.orcamento import FichaCalculada
from controle_loa.services.vinculo_service import resolver_vinculo


def _match_vinculo(ficha: FichaCalculada, vinculo: str | None) -> bool:
    return not vinculo or resolver_vinculo(ficha.vinculo) == vinculo


def _match_busca(ficha: FichaCalculada, busca: str) -> bool:
    # Ficha number is matched case-insensitively, codes as typed
    if not busca:
        return True
    return (
        busca.lower() in ficha.id.lower()
        or busca in ficha.elemento
        or busca in ficha.funcional
    )


def _match_funcional(ficha: FichaCalculada, funcional: str) -> bool:
    return not funcional or funcional in ficha.funcional


def filtrar_fichas(
    fichas: Iterable[FichaCalculada],
    filtros: FilterParams,
) -> list[FichaCalculada]:
    """Keep the fichas that satisfy every active criterion.

    Matching is by substring so that partial codes ("2048", "3.1.90")
    find every line they belong to.  Input order is preserved and applying
    the same filters twice yields the same list.

    Args:
        fichas: Derived fichas to filter.
        filtros: Free text, action code and active funding-source label.

    Returns:
        A new list with the matching fichas.
    """
    return [
        ficha
        for ficha in fichas
        if _match_vinculo(ficha, filtros.vinculo)
        and _match_busca(ficha, filtros.busca)
        and _match_funcional(ficha, filtros.funcional)
    ]
