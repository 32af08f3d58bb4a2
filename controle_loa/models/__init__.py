"""SQLAlchemy models package for Controle LOA.

Importing all models here ensures that SQLAlchemy's mapper registry is
populated before ``Base.metadata.create_all()`` runs.

Usage from other modules:
    from controle_loa.models import ArmazenamentoLocal
"""

from controle_loa.models.armazenamento_local import ArmazenamentoLocal  # noqa: F401
from controle_loa.models.registro_importacao import RegistroImportacao  # noqa: F401

__all__ = [
    "ArmazenamentoLocal",
    "RegistroImportacao",
]
