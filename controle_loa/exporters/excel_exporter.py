"""
Excel export builder on top of xlsxwriter.

``ExcelExporter`` writes a single-sheet audit workbook in memory and returns
its bytes, ready to stream from a FastAPI ``StreamingResponse``.

Usage example::

    exporter = ExcelExporter(title="Auditoria LOA 2026", filters={"Mês": "Junho"})
    exporter.add_header()
    exporter.add_kpi_row({"Crédito Auditado": 1_250_000.0, "Déficits": 3})
    exporter.add_data_table(headers, rows, money_cols={4, 5}, highlight_rows={0})
    file_bytes = exporter.finalize()

Notes
-----
- Money cells use the Brazilian real format ``R$ #,##0.00``; Excel renders
  the separators according to the reader's locale.
- Rows listed in ``highlight_rows`` are painted red; they mark fichas whose
  projected balance is negative.
- Column widths follow the longest value written, capped at 50 characters.
"""

from __future__ import annotations

import io
from collections.abc import Sequence
from datetime import datetime
from typing import Any

import xlsxwriter

_COLOR_PRIMARY = "#0F172A"      # slate-900, dashboard header
_COLOR_ACCENT = "#2563EB"       # blue-600
_COLOR_DANGER_BG = "#FEE2E2"    # red-100
_COLOR_DANGER_TEXT = "#B91C1C"  # red-700
_COLOR_ZEBRA = "#F8FAFC"
_COLOR_BORDER = "#E2E8F0"
_COLOR_WHITE = "#FFFFFF"

_FMT_MOEDA = 'R$ #,##0.00;[Red]-R$ #,##0.00'

_MAX_COL_WIDTH = 50
_MIN_COL_WIDTH = 9


class ExcelExporter:
    """Single-sheet workbook builder for the audit exports.

    Args:
        title: Title shown in the header band, e.g. ``"Auditoria LOA 2026"``.
        filters: Applied filters as ``{label: value}``, listed under the title.
        sheet_name: Worksheet tab name.
    """

    def __init__(
        self,
        title: str,
        filters: dict[str, str] | None = None,
        sheet_name: str = "Auditoria",
    ) -> None:
        self._title = title
        self._filters = filters or {}

        self._buffer = io.BytesIO()
        self._workbook = xlsxwriter.Workbook(
            self._buffer, {"in_memory": True, "strings_to_formulas": False}
        )
        self._worksheet = self._workbook.add_worksheet(sheet_name)

        self._current_row = 0
        self._num_cols = 11
        self._formats = self._build_formats()

    # -----------------------------------------------------------------------
    # Formats
    # -----------------------------------------------------------------------

    def _build_formats(self) -> dict[str, Any]:
        wb = self._workbook
        cell = {"font_size": 9, "valign": "vcenter", "border": 1, "border_color": _COLOR_BORDER}

        def fmt(**props: Any) -> Any:
            return wb.add_format(props)

        return {
            "title": fmt(bold=True, font_size=15, font_color=_COLOR_WHITE,
                         bg_color=_COLOR_PRIMARY, align="left", valign="vcenter", indent=1),
            "subtitle": fmt(italic=True, font_size=9, font_color=_COLOR_WHITE,
                            bg_color=_COLOR_ACCENT, align="left", valign="vcenter", indent=1),
            "filter_key": fmt(bold=True, font_size=9, font_color="#334155", align="right"),
            "filter_value": fmt(font_size=9, font_color="#0F172A", align="left"),
            "kpi_label": fmt(bold=True, font_size=8, font_color="#475569", bg_color="#F1F5F9",
                             align="center", valign="vcenter", border=1, border_color=_COLOR_BORDER,
                             text_wrap=True),
            "kpi_money": fmt(bold=True, font_size=11, font_color=_COLOR_PRIMARY, align="center",
                             valign="vcenter", num_format=_FMT_MOEDA, border=1,
                             border_color=_COLOR_BORDER),
            "kpi_text": fmt(bold=True, font_size=11, font_color=_COLOR_DANGER_TEXT, align="center",
                            valign="vcenter", border=1, border_color=_COLOR_BORDER),
            "col_header": fmt(bold=True, font_size=9, font_color=_COLOR_WHITE,
                              bg_color=_COLOR_PRIMARY, align="center", valign="vcenter",
                              border=1, border_color=_COLOR_BORDER, text_wrap=True),
            "text": fmt(**cell, align="left", bg_color=_COLOR_WHITE),
            "text_alt": fmt(**cell, align="left", bg_color=_COLOR_ZEBRA),
            "text_critico": fmt(**cell, align="left", bg_color=_COLOR_DANGER_BG,
                                font_color=_COLOR_DANGER_TEXT, bold=True),
            "money": fmt(**cell, align="right", num_format=_FMT_MOEDA, bg_color=_COLOR_WHITE),
            "money_alt": fmt(**cell, align="right", num_format=_FMT_MOEDA, bg_color=_COLOR_ZEBRA),
            "money_critico": fmt(**cell, align="right", num_format=_FMT_MOEDA,
                                 bg_color=_COLOR_DANGER_BG, font_color=_COLOR_DANGER_TEXT),
        }

    # -----------------------------------------------------------------------
    # Builder
    # -----------------------------------------------------------------------

    def add_header(self) -> ExcelExporter:
        """Write the title band, generation timestamp and filter lines."""
        ws = self._worksheet
        last_col = self._num_cols - 1

        ws.set_row(self._current_row, 28)
        ws.merge_range(self._current_row, 0, self._current_row, last_col,
                       self._title, self._formats["title"])
        self._current_row += 1

        gerado = datetime.now().strftime("%d/%m/%Y %H:%M")
        ws.merge_range(self._current_row, 0, self._current_row, last_col,
                       f"Gerado em {gerado}", self._formats["subtitle"])
        self._current_row += 1

        for key, value in self._filters.items():
            ws.write(self._current_row, 0, f"{key}:", self._formats["filter_key"])
            ws.write(self._current_row, 1, value, self._formats["filter_value"])
            self._current_row += 1

        self._current_row += 1
        return self

    def add_kpi_row(self, kpis: dict[str, Any]) -> ExcelExporter:
        """Write KPI labels above their values, one column per KPI.

        Floats use the money format; anything else is written as-is.
        """
        ws = self._worksheet
        ws.set_row(self._current_row, 24)
        ws.set_row(self._current_row + 1, 22)
        for col, (label, value) in enumerate(kpis.items()):
            ws.write(self._current_row, col, label, self._formats["kpi_label"])
            value_fmt = self._formats["kpi_money"] if isinstance(value, float) else self._formats["kpi_text"]
            ws.write(self._current_row + 1, col, value, value_fmt)
        self._current_row += 3
        return self

    def add_data_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
        money_cols: set[int] | None = None,
        highlight_rows: set[int] | None = None,
    ) -> ExcelExporter:
        """Write the detail table.

        Args:
            headers: Column titles.
            rows: Cell values, one sequence per row.
            money_cols: Zero-based indices of monetary columns.
            highlight_rows: Zero-based indices (into ``rows``) painted as
                critical.

        Returns:
            ``self`` for chaining.
        """
        ws = self._worksheet
        money_cols = money_cols or set()
        highlight_rows = highlight_rows or set()
        self._num_cols = len(headers)

        widths = [len(str(h)) for h in headers]

        ws.set_row(self._current_row, 30)
        for ci, header in enumerate(headers):
            ws.write(self._current_row, ci, header, self._formats["col_header"])
        header_row = self._current_row
        self._current_row += 1

        for ri, row in enumerate(rows):
            if ri in highlight_rows:
                suffix = "_critico"
            elif ri % 2 == 1:
                suffix = "_alt"
            else:
                suffix = ""
            for ci, value in enumerate(row):
                kind = "money" if ci in money_cols else "text"
                ws.write(self._current_row, ci, value, self._formats[kind + suffix])
                shown = f"R$ {value:,.2f}" if ci in money_cols and isinstance(value, float) else str(value)
                widths[ci] = min(_MAX_COL_WIDTH, max(widths[ci], len(shown)))
            self._current_row += 1

        for ci, width in enumerate(widths):
            ws.set_column(ci, ci, max(width + 2, _MIN_COL_WIDTH))

        if rows:
            ws.autofilter(header_row, 0, self._current_row - 1, len(headers) - 1)
        ws.freeze_panes(header_row + 1, 0)
        return self

    def finalize(self) -> bytes:
        """Close the workbook and return the ``.xlsx`` bytes."""
        self._workbook.close()
        self._buffer.seek(0)
        return self._buffer.read()
