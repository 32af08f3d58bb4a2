"""Controle LOA 2026 — budget-execution audit dashboard backend."""

__version__ = "1.0.0"
