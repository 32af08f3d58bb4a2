"""
13th-month category classifier.

Personnel-type expense elements incur one extra disbursement cycle at the end
of the year (the 13th salary payroll).  Which elements qualify is decided by
an explicit rule table rather than inline string checks, so that a new code
family only needs a new ``RegraTrezeMeses`` instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from controle_loa.utils.constants import (
    ELEMENTOS_PESSOAL_TEMPORARIO,
    PREFIXOS_PESSOAL,
)


@dataclass(frozen=True)
class RegraTrezeMeses:
    """Rule set selecting the elements that get the 13th-month bonus cycle.

    Attributes:
        prefixos: An element matches when it starts with any of these.
        contem: An element matches when it contains any of these.
    """

    prefixos: tuple[str, ...] = PREFIXOS_PESSOAL
    contem: tuple[str, ...] = ELEMENTOS_PESSOAL_TEMPORARIO

    def aplica(self, elemento: Any) -> bool:
        """Return True when ``elemento`` belongs to the 13th-month category.

        Empty, ``None`` and non-string values never match.
        """
        if not isinstance(elemento, str) or not elemento:
            return False
        codigo = elemento.strip()
        if codigo.startswith(self.prefixos):
            return True
        return any(trecho in codigo for trecho in self.contem)


REGRA_13_PADRAO = RegraTrezeMeses()


def is_treze_meses(elemento: Any, regra: RegraTrezeMeses = REGRA_13_PADRAO) -> bool:
    """Classify an expense element code.

    Args:
        elemento: Expense element code, e.g. ``"3.1.90.11.00.00.00.00"`` or
            ``"319011"``.
        regra: Rule table to apply (defaults to the personnel rules).

    Returns:
        ``True`` for personnel (``3.1``/``31``) and substitute-personnel
        (``3.3.90.08``/``339008``) elements, ``False`` otherwise.
    """
    return regra.aplica(elemento)
