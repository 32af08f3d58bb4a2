"""
Extraction of fichas from a balancete PDF via the OpenAI Responses API.

The model output is untrusted: it may be wrapped in Markdown fences, nested
under an object key, partially populated or not JSON at all.  Everything is
funnelled through ``sanitizar_registros``, which is the only place where a
``ResultadoExtracao`` is built, so downstream code receives either a clean
list of ``FichaOrcamentaria`` or an explicit failure reason.

No retry, timeout or cancellation logic lives here beyond the SDK defaults;
a failed call is reported as ``ExtracaoFalhou`` and the caller decides what
to show the user.
"""

from __future__ import annotations

import base64
import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from openai import OpenAI

from controle_loa.config import get_settings
from controle_loa.schemas.orcamento import FichaOrcamentaria

logger = logging.getLogger(__name__)

PROMPT_AUDITOR = """VOCÊ É UM AUDITOR FISCAL SÊNIOR. EXTRAIA PRECISAMENTE CADA UMA DAS FICHAS DESTE BALANCETE.

REGRAS DE PRECISÃO:
1. NÃO RESUMA. Capture cada linha de despesa (ex: fichas 1215, 1216, etc.) individualmente.
2. VALOR DO CRÉDITO: localize a "Dotação Atualizada". Ela está à direita ou abaixo do número da ficha.
3. FUNDEB 70%: capture todos os elementos (319011, 319013, 319094, etc.) sem agrupar.
4. Mantenha os valores decimais originais.

Retorne APENAS um JSON Array, sem comentários, no formato:
[{
  "id": "número da ficha",
  "elemento": "código do elemento de despesa",
  "funcional": "código da ação",
  "vinculo": "código da fonte de recurso",
  "totalCredito": 0.00,
  "empenhadoAcumulado": 0.00,
  "liquidadoMes": 0.00,
  "liquidadoAcumulado": 0.00,
  "saldoOrcamentario": 0.00
}]
Use ponto como separador decimal e remova os pontos de milhar."""

# Keys under which a model sometimes nests the array
_CHAVES_ENVELOPE: tuple[str, ...] = ("fichas", "items", "data")

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Result variant
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExtracaoOk:
    """Successful extraction.

    Attributes:
        fichas: Sanitised fichas, never empty.
        avisos: Non-fatal notes (skipped entries).
    """

    fichas: list[FichaOrcamentaria]
    avisos: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return True

    @property
    def total_credito(self) -> float:
        """Audited credit total, shown in the import summary."""
        return sum(ficha.total_credito for ficha in self.fichas)


@dataclass(frozen=True)
class ExtracaoFalhou:
    """Failed extraction; the current dataset must stay untouched.

    Attributes:
        motivo: Human-readable reason.
    """

    motivo: str

    @property
    def ok(self) -> bool:
        return False


ResultadoExtracao = ExtracaoOk | ExtracaoFalhou


# ---------------------------------------------------------------------------
# Sanitisation
# ---------------------------------------------------------------------------


def limpar_json(texto: str) -> str:
    """Remove Markdown code fences around a JSON payload."""
    return _FENCE_RE.sub("", texto).strip()


def _desembrulhar(payload: Any) -> Any:
    if isinstance(payload, Mapping):
        for chave in _CHAVES_ENVELOPE:
            if isinstance(payload.get(chave), list):
                return payload[chave]
    return payload


def sanitizar_registros(payload: Any) -> ResultadoExtracao:
    """Build a ``ResultadoExtracao`` from raw decoded model output.

    Args:
        payload: A JSON array of record objects, or an object wrapping one
            under ``fichas``/``items``/``data``.

    Returns:
        ``ExtracaoOk`` with one ``FichaOrcamentaria`` per mapping entry, or
        ``ExtracaoFalhou`` if no usable record was found.
    """
    registros = _desembrulhar(payload)
    if not isinstance(registros, list):
        return ExtracaoFalhou(
            "A IA não conseguiu estruturar os dados. Verifique o arquivo."
        )

    fichas: list[FichaOrcamentaria] = []
    avisos: list[str] = []
    for posicao, item in enumerate(registros, start=1):
        if not isinstance(item, Mapping):
            aviso = f"Registro {posicao} ignorado: não é um objeto."
            logger.warning("sanitizar_registros: record %d skipped, not an object", posicao)
            avisos.append(aviso)
            continue
        fichas.append(FichaOrcamentaria.model_validate(dict(item)))

    if not fichas:
        return ExtracaoFalhou(
            "Nenhuma ficha foi encontrada no documento. Verifique o arquivo."
        )
    return ExtracaoOk(fichas=fichas, avisos=avisos)


def decodificar_resposta(texto: str) -> ResultadoExtracao:
    """Decode the model's text output and sanitise it."""
    try:
        payload = json.loads(limpar_json(texto))
    except json.JSONDecodeError as exc:
        logger.warning("Model output is not valid JSON: %s", exc)
        return ExtracaoFalhou("A resposta da IA não é um JSON válido.")
    return sanitizar_registros(payload)


# ---------------------------------------------------------------------------
# OpenAI call
# ---------------------------------------------------------------------------


def _create_client() -> OpenAI:
    settings = get_settings()
    if not settings.OPENAI_API_KEY:
        raise RuntimeError("Chave de API não configurada no ambiente.")
    return OpenAI(api_key=settings.OPENAI_API_KEY)


def _texto_resposta(resp: Any) -> str:
    """Locate the text output of a Responses API result.

    Prefers ``resp.output_text`` and falls back to
    ``resp.output[0].content[0].text``.

    Raises:
        ValueError: If no text output can be found.
    """
    texto = getattr(resp, "output_text", None)
    if not texto:
        saida = getattr(resp, "output", None) or []
        conteudo = getattr(saida[0], "content", None) if saida else None
        if conteudo:
            texto = getattr(conteudo[0], "text", None)
    if not texto or not isinstance(texto, str):
        raise ValueError("Formato inesperado da resposta da IA; nenhum texto encontrado.")
    return texto


def extrair_fichas(
    pdf_bytes: bytes,
    filename: str = "balancete.pdf",
    mime_type: str = "application/pdf",
) -> ResultadoExtracao:
    """Send a balancete to the model and return the sanitised fichas.

    Args:
        pdf_bytes: Raw document bytes.
        filename: Original filename, forwarded to the API.
        mime_type: Document MIME type.

    Returns:
        ``ExtracaoOk`` or ``ExtracaoFalhou``; never raises for API, network
        or decoding problems.
    """
    settings = get_settings()
    conteudo_b64 = base64.b64encode(pdf_bytes).decode("ascii")

    logger.info(
        "extrair_fichas: file='%s' bytes=%d model=%s",
        filename, len(pdf_bytes), settings.EXTRACTION_MODEL,
    )

    try:
        client = _create_client()
        resp = client.responses.create(
            model=settings.EXTRACTION_MODEL,
            instructions=PROMPT_AUDITOR,
            input=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "input_file",
                            "filename": filename,
                            "file_data": f"data:{mime_type};base64,{conteudo_b64}",
                        },
                        {
                            "type": "input_text",
                            "text": "Extraia todas as fichas orçamentárias deste balancete.",
                        },
                    ],
                }
            ],
        )
        texto = _texto_resposta(resp)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Extraction call failed for '%s'", filename)
        return ExtracaoFalhou(f"Erro durante o processamento: {exc}")

    resultado = decodificar_resposta(texto)
    if isinstance(resultado, ExtracaoOk):
        logger.info(
            "extrair_fichas: %d fichas credito_total=%.2f",
            len(resultado.fichas), resultado.total_credito,
        )
    else:
        logger.warning("extrair_fichas: failed: %s", resultado.motivo)
    return resultado
