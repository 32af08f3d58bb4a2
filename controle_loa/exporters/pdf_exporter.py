"""
PDF export builder on top of reportlab.

``PdfExporter`` assembles a platypus story (header band, KPI cards, one or
more tables) into an in-memory A4 document and returns its bytes.

Usage example::

    exporter = PdfExporter(title="Auditoria LOA 2026", filters={"Mês": "Junho"})
    exporter.add_header()
    exporter.add_kpi_section({"Crédito Auditado": "R$ 1.250.000,00"})
    exporter.add_table(headers, rows, numeric_cols={3, 4})
    file_bytes = exporter.build()

Cells are rendered as given: callers pass already formatted strings (see
``controle_loa.utils.formatacao``), so the builder never decides on number
or currency formats itself.
"""

from __future__ import annotations

import io
from collections.abc import Sequence
from datetime import datetime
from typing import Any
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import cm, mm
from reportlab.platypus import (
    HRFlowable,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

_PRIMARY = colors.HexColor("#0F172A")
_ACCENT = colors.HexColor("#2563EB")
_ZEBRA = colors.HexColor("#F8FAFC")
_BORDER = colors.HexColor("#E2E8F0")
_MUTED = colors.HexColor("#94A3B8")
_TEXT = colors.HexColor("#0F172A")
_DANGER_BG = colors.HexColor("#FEE2E2")
_TOTAL_BG = colors.HexColor("#E2E8F0")
_KPI_BG = colors.HexColor("#F1F5F9")


def _style(name: str, **kwargs: Any) -> ParagraphStyle:
    base = {"fontName": "Helvetica", "fontSize": 8, "textColor": _TEXT, "leading": 10}
    base.update(kwargs)
    return ParagraphStyle(name, **base)


_STYLES: dict[str, ParagraphStyle] = {
    "title": _style("loa_title", fontName="Helvetica-Bold", fontSize=16, leading=20,
                    textColor=colors.white),
    "subtitle": _style("loa_subtitle", textColor=colors.white),
    "filter": _style("loa_filter", textColor=colors.HexColor("#334155")),
    "kpi_label": _style("loa_kpi_label", fontName="Helvetica-Bold", fontSize=7,
                        textColor=colors.HexColor("#475569"), alignment=TA_CENTER),
    "kpi_value": _style("loa_kpi_value", fontName="Helvetica-Bold", fontSize=11, leading=14,
                        alignment=TA_CENTER),
    "section": _style("loa_section", fontName="Helvetica-Bold", fontSize=11, leading=14,
                      spaceBefore=6, spaceAfter=3),
    "th": _style("loa_th", fontName="Helvetica-Bold", fontSize=7.5, textColor=colors.white,
                 alignment=TA_CENTER),
    "td": _style("loa_td", fontSize=7.5, alignment=TA_LEFT),
    "td_right": _style("loa_td_right", fontSize=7.5, alignment=TA_RIGHT),
    "td_bold": _style("loa_td_bold", fontName="Helvetica-Bold", fontSize=7.5, alignment=TA_LEFT),
    "td_bold_right": _style("loa_td_bold_right", fontName="Helvetica-Bold", fontSize=7.5,
                            alignment=TA_RIGHT),
}


def _p(text: Any, style: str) -> Paragraph:
    return Paragraph(escape("" if text is None else str(text)), _STYLES[style])


class PdfExporter:
    """A4 document builder for the audit exports.

    Args:
        title: Document title shown in the header band.
        filters: Applied filters as ``{label: value}``.
        landscape_mode: A4 landscape when ``True`` (the default, since the
            detail tables are wide), portrait otherwise.
    """

    def __init__(
        self,
        title: str,
        filters: dict[str, str] | None = None,
        landscape_mode: bool = True,
    ) -> None:
        self._title = title
        self._filters = filters or {}

        self._buffer = io.BytesIO()
        self._doc = SimpleDocTemplate(
            self._buffer,
            pagesize=landscape(A4) if landscape_mode else A4,
            leftMargin=1.2 * cm,
            rightMargin=1.2 * cm,
            topMargin=1.2 * cm,
            bottomMargin=1.6 * cm,
            title=title,
            author="Controle LOA",
        )
        self._story: list[Any] = []
        self._gerado = datetime.now().strftime("%d/%m/%Y %H:%M")

    # -----------------------------------------------------------------------
    # Page template
    # -----------------------------------------------------------------------

    def _on_page(self, canvas: Any, doc: Any) -> None:
        canvas.saveState()
        canvas.setFont("Helvetica", 7)
        canvas.setFillColor(_MUTED)
        canvas.drawString(doc.leftMargin, 0.8 * cm, f"{self._title}  |  Gerado em {self._gerado}")
        canvas.drawRightString(
            doc.pagesize[0] - doc.rightMargin, 0.8 * cm, f"Página {doc.page}"
        )
        canvas.restoreState()

    # -----------------------------------------------------------------------
    # Builder
    # -----------------------------------------------------------------------

    def add_header(self) -> PdfExporter:
        """Add the title band and, when present, the applied filters."""
        width = self._doc.width
        band = Table(
            [[_p(self._title, "title")], [_p(f"Gerado em {self._gerado}", "subtitle")]],
            colWidths=[width],
        )
        band.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (0, 0), _PRIMARY),
            ("BACKGROUND", (0, 1), (0, 1), _ACCENT),
            ("LEFTPADDING", (0, 0), (-1, -1), 10),
            ("TOPPADDING", (0, 0), (-1, -1), 6),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ]))
        self._story.append(band)
        self._story.append(Spacer(1, 3 * mm))

        if self._filters:
            linha = "   ".join(f"{k}: {v}" for k, v in self._filters.items())
            self._story.append(_p(linha, "filter"))
            self._story.append(Spacer(1, 4 * mm))
        return self

    def add_kpi_section(self, kpis: dict[str, str]) -> PdfExporter:
        """Add one row of KPI cards; values are already formatted strings."""
        if not kpis:
            return self
        col_width = self._doc.width / len(kpis)
        table = Table(
            [
                [_p(label, "kpi_label") for label in kpis],
                [_p(value, "kpi_value") for value in kpis.values()],
            ],
            colWidths=[col_width] * len(kpis),
        )
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), _KPI_BG),
            ("BOX", (0, 0), (-1, -1), 0.5, _BORDER),
            ("INNERGRID", (0, 0), (-1, -1), 0.5, colors.white),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))
        self._story.append(table)
        self._story.append(Spacer(1, 5 * mm))
        return self

    def add_section_title(self, title: str) -> PdfExporter:
        """Add a heading followed by an accent rule."""
        self._story.append(_p(title, "section"))
        self._story.append(HRFlowable(width="100%", thickness=1, color=_ACCENT))
        self._story.append(Spacer(1, 2 * mm))
        return self

    def add_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
        numeric_cols: set[int] | None = None,
        col_widths: Sequence[float] | None = None,
        highlight_rows: set[int] | None = None,
        total_row: Sequence[Any] | None = None,
    ) -> PdfExporter:
        """Add a zebra-striped table with a repeating header row.

        Args:
            headers: Column titles.
            rows: Formatted cell values.
            numeric_cols: Zero-based indices of right-aligned columns.
            col_widths: Relative column weights; spread evenly when ``None``.
            highlight_rows: Zero-based indices (into ``rows``) painted as
                critical.
            total_row: Optional bold subtotal row appended at the end.

        Returns:
            ``self`` for chaining.
        """
        numeric_cols = numeric_cols or set()
        highlight_rows = highlight_rows or set()
        width = self._doc.width

        if col_widths:
            total = float(sum(col_widths))
            widths = [width * w / total for w in col_widths]
        else:
            widths = [width / len(headers)] * len(headers)

        def render(row: Sequence[Any], bold: bool = False) -> list[Paragraph]:
            prefix = "td_bold" if bold else "td"
            return [
                _p(value, f"{prefix}_right" if ci in numeric_cols else prefix)
                for ci, value in enumerate(row)
            ]

        data: list[list[Any]] = [[_p(h, "th") for h in headers]]
        data.extend(render(row) for row in rows)
        if total_row is not None:
            data.append(render(total_row, bold=True))

        commands: list[tuple[Any, ...]] = [
            ("BACKGROUND", (0, 0), (-1, 0), _PRIMARY),
            ("GRID", (0, 0), (-1, -1), 0.25, _BORDER),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, -1), 2.5),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 2.5),
            ("LEFTPADDING", (0, 0), (-1, -1), 3),
            ("RIGHTPADDING", (0, 0), (-1, -1), 3),
        ]
        for ri in range(len(rows)):
            line = ri + 1
            if ri in highlight_rows:
                commands.append(("BACKGROUND", (0, line), (-1, line), _DANGER_BG))
            elif ri % 2 == 1:
                commands.append(("BACKGROUND", (0, line), (-1, line), _ZEBRA))
        if total_row is not None:
            commands.append(("BACKGROUND", (0, -1), (-1, -1), _TOTAL_BG))
            commands.append(("LINEABOVE", (0, -1), (-1, -1), 0.8, _PRIMARY))

        table = Table(data, colWidths=widths, repeatRows=1)
        table.setStyle(TableStyle(commands))
        self._story.append(table)
        self._story.append(Spacer(1, 5 * mm))
        return self

    def build(self) -> bytes:
        """Render the story and return the ``.pdf`` bytes."""
        if not self._story:
            self._story.append(Spacer(1, 1))
        self._doc.build(self._story, onFirstPage=self._on_page, onLaterPages=self._on_page)
        self._buffer.seek(0)
        return self._buffer.read()
