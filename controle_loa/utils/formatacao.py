"""Brazilian number formatting for the PDF and print exports."""

from __future__ import annotations


def formatar_numero(valor: float, casas: int = 2) -> str:
    """Format ``valor`` with ``.`` thousands and ``,`` decimal separators.

    >>> formatar_numero(1234567.891)
    '1.234.567,89'
    """
    texto = f"{valor:,.{casas}f}"
    return texto.replace(",", "_").replace(".", ",").replace("_", ".")


def formatar_moeda(valor: float) -> str:
    """Format ``valor`` as Brazilian reais, e.g. ``R$ 1.234,56`` or ``-R$ 10,00``."""
    sinal = "-" if round(valor, 2) < 0 else ""
    return f"{sinal}R$ {formatar_numero(abs(valor))}"


def formatar_percentual(valor: float) -> str:
    """Format a 0–100 ratio as ``45,3%``."""
    return f"{formatar_numero(valor, 1)}%"
