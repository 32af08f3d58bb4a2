"""
Import (Importação) service layer.

Handles the balancete upload flow end to end:

1. Read and validate the uploaded bytes (non-empty, PDF, size limit).
2. Hand the document to the extraction service.
3. On success replace the persisted dataset wholesale; on failure leave it
   untouched.
4. Write one ``RegistroImportacao`` audit row per attempt.

Also exposes ``substituir_dados`` for restoring a dataset from a JSON array
(the same sanitisation as an extraction) and the import history query.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import UploadFile
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from controle_loa.config import get_settings
from controle_loa.models.registro_importacao import RegistroImportacao
from controle_loa.schemas.importacao import HistoricoImportacao, ImportacaoResponse
from controle_loa.services import extracao_service
from controle_loa.services.extracao_service import ExtracaoOk, sanitizar_registros
from controle_loa.services.repositorio import RepositorioFichas
from controle_loa.utils.constants import (
    ESTADO_IMPORTACAO_FALHA,
    ESTADO_IMPORTACAO_SUCESSO,
)

logger = logging.getLogger(__name__)

_PDF_MAGIC = b"%PDF"
_PDF_CONTENT_TYPES: frozenset[str] = frozenset({"application/pdf", "application/x-pdf"})


def _validar_pdf(raw: bytes, content_type: str | None) -> None:
    """Raise ``ValueError`` if ``raw`` is not an acceptable PDF upload."""
    if not raw:
        raise ValueError("O arquivo está vazio.")

    limite = get_settings().MAX_UPLOAD_MB * 1024 * 1024
    if len(raw) > limite:
        raise ValueError(
            f"O arquivo excede o limite de {get_settings().MAX_UPLOAD_MB} MB."
        )

    if not raw.lstrip().startswith(_PDF_MAGIC):
        if (content_type or "") not in _PDF_CONTENT_TYPES:
            raise ValueError("O arquivo enviado não é um PDF.")
        # Declared as PDF but without the magic header; let the model try.
        logger.warning("Upload declared as PDF without a PDF header, proceeding anyway")


def _write_audit_log(
    db: Session,
    *,
    arquivo_nome: str,
    registros: int,
    total_credito: float,
    estado: str,
    erro: str | None = None,
) -> None:
    """Persist one audit row.

    Raises:
        RuntimeError: If the commit fails (the session is rolled back).
    """
    try:
        db.add(
            RegistroImportacao(
                arquivo_nome=arquivo_nome,
                registros=registros,
                total_credito=total_credito,
                estado=estado,
                erro=erro,
            )
        )
        db.commit()
    except Exception as exc:
        db.rollback()
        logger.exception("Failed to write audit log for import '%s'", arquivo_nome)
        raise RuntimeError(f"Erro ao salvar o registro de importação: {exc}") from exc


async def processar_upload(
    db: Session,
    file: UploadFile,
    repositorio: RepositorioFichas,
) -> ImportacaoResponse:
    """Process an uploaded balancete PDF end to end.

    Args:
        db: Active SQLAlchemy session (audit log).
        file: The uploaded document.
        repositorio: Dataset owner; replaced only on success.

    Returns:
        An ``ImportacaoResponse`` with the number of fichas and credit total.

    Raises:
        ValueError: Empty, oversized or non-PDF upload, or failed extraction.
        RuntimeError: Persistence failure.
    """
    raw: bytes = await file.read()
    filename: str = file.filename or "balancete.pdf"

    _validar_pdf(raw, file.content_type)
    logger.info("processar_upload: file='%s' bytes=%d", filename, len(raw))

    # The OpenAI call blocks for the whole extraction: keep it off the event loop.
    resultado = await run_in_threadpool(extracao_service.extrair_fichas, raw, filename=filename)

    if not isinstance(resultado, ExtracaoOk):
        _write_audit_log(
            db,
            arquivo_nome=filename,
            registros=0,
            total_credito=0.0,
            estado=ESTADO_IMPORTACAO_FALHA,
            erro=resultado.motivo,
        )
        raise ValueError(resultado.motivo)

    repositorio.save(resultado.fichas)
    try:
        _write_audit_log(
            db,
            arquivo_nome=filename,
            registros=len(resultado.fichas),
            total_credito=resultado.total_credito,
            estado=ESTADO_IMPORTACAO_SUCESSO,
        )
    except RuntimeError:
        # The dataset is already replaced; a missing audit row does not undo it.
        logger.warning("Import of '%s' succeeded without an audit row", filename)

    return ImportacaoResponse(
        arquivo=filename,
        quantidade=len(resultado.fichas),
        total_credito=resultado.total_credito,
        estado=ESTADO_IMPORTACAO_SUCESSO,
        avisos=resultado.avisos,
    )


def substituir_dados(
    payload: Any,
    repositorio: RepositorioFichas,
) -> ImportacaoResponse:
    """Replace the dataset with a JSON array supplied directly by the client.

    An empty array clears the dataset.

    Raises:
        ValueError: If the payload holds no usable fichas.
    """
    if isinstance(payload, list) and not payload:
        repositorio.clear()
        return ImportacaoResponse(
            arquivo="", quantidade=0, total_credito=0.0, estado=ESTADO_IMPORTACAO_SUCESSO
        )

    resultado = sanitizar_registros(payload)
    if not isinstance(resultado, ExtracaoOk):
        raise ValueError(resultado.motivo)

    repositorio.save(resultado.fichas)
    logger.info("substituir_dados: %d fichas", len(resultado.fichas))
    return ImportacaoResponse(
        arquivo="",
        quantidade=len(resultado.fichas),
        total_credito=resultado.total_credito,
        estado=ESTADO_IMPORTACAO_SUCESSO,
        avisos=resultado.avisos,
    )


def get_historico(db: Session) -> list[HistoricoImportacao]:
    """Return the import history, most recent first."""
    registros = (
        db.query(RegistroImportacao)
        .order_by(RegistroImportacao.data.desc(), RegistroImportacao.id.desc())
        .all()
    )
    return [HistoricoImportacao.model_validate(rec) for rec in registros]
