"""Spreadsheet export of a simulation result."""

from __future__ import annotations

import math
from datetime import date
from io import BytesIO
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from simulator.schemas.simulation import SimulationResult

SHEET_TITLE = "Simulação de Investimentos"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

CURRENCY_FORMAT = '"R$ "#,##0.00'
RATE_FORMAT = "0.00"
PERCENT_FORMAT = "0.00%"

DARK = "FF2C3E50"
SECTION = "FF18BC9C"
COLUMN_HEADER = "FF34495E"
TOTALS = "FFECF0F1"
WHITE = "FFFFFFFF"

COLUMN_WIDTHS = {"A": 20, "B": 18, "C": 18, "D": 18, "E": 18}

_THIN = Side(style="thin")
_BORDER = Border(top=_THIN, left=_THIN, bottom=_THIN, right=_THIN)


def export_filename(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"simulacao-investimentos-{day.isoformat()}.xlsx"


def _number(value: Optional[float]) -> Optional[float]:
    """Overflowed amounts become empty cells; xlsx has no Infinity/NaN."""
    if value is None or not math.isfinite(value):
        return None
    return value


def _fill(argb: str) -> PatternFill:
    return PatternFill(fill_type="solid", start_color=argb, end_color=argb)


def _section_header(ws: Worksheet, title: str, last_column: str, fill: str, white: bool = False) -> int:
    ws.append([title])
    row = ws.max_row
    ws.merge_cells(f"A{row}:{last_column}{row}")
    cell = ws.cell(row=row, column=1)
    cell.font = Font(bold=True, size=12, color=WHITE if white else None)
    cell.fill = _fill(fill)
    if white:
        cell.alignment = Alignment(horizontal="center")
    return row


def _months(result: SimulationResult) -> int:
    """Months actually projected (the engine clamps out-of-range horizons)."""
    return len(result.projection)


def _labelled_rows(ws: Worksheet, rows) -> None:
    """Two-column label/value rows; ``rows`` is [(label, value, number_format)]."""
    for label, value, number_format in rows:
        ws.append([label, value])
        ws.cell(row=ws.max_row, column=2).number_format = number_format


def build_workbook(result: SimulationResult) -> Workbook:
    """
    Layout:
      1) Title banner.
      2) Simulation parameters (4 rows).
      3) Financial summary (4 rows).
      4) Monthly table with a trailing TOTAL row.
    """
    inputs = result.input
    summary = result.summary

    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    for column, width in COLUMN_WIDTHS.items():
        ws.column_dimensions[column].width = width

    # 1) title
    ws.merge_cells("A1:E1")
    title = ws["A1"]
    title.value = "SIMULAÇÃO DE INVESTIMENTOS"
    title.font = Font(size=16, bold=True, color=WHITE)
    title.fill = _fill(DARK)
    title.alignment = Alignment(horizontal="center", vertical="center")
    ws.row_dimensions[1].height = 30

    # 2) parameters
    ws.append([])
    _section_header(ws, "PARÂMETROS DA SIMULAÇÃO", "B", SECTION)
    _labelled_rows(
        ws,
        [
            ("Valor Inicial (R$)", _number(inputs.initial_balance), CURRENCY_FORMAT),
            ("Taxa Mensal (%)", _number(inputs.monthly_rate), RATE_FORMAT),
            ("Aporte Mensal (R$)", _number(inputs.monthly_contribution), CURRENCY_FORMAT),
            ("Número de Meses", _months(result), "0"),
        ],
    )

    # 3) summary; the percentage cell holds a fraction so that 0.00% renders it
    yield_fraction = summary.yield_percent / 100 if summary.yield_percent is not None else None
    ws.append([])
    _section_header(ws, "RESUMO FINANCEIRO", "B", SECTION)
    _labelled_rows(
        ws,
        [
            ("Total Investido (R$)", _number(summary.total_contributed), CURRENCY_FORMAT),
            ("Saldo Final (R$)", _number(summary.final_balance), CURRENCY_FORMAT),
            ("Rendimento Total (R$)", _number(summary.total_yield), CURRENCY_FORMAT),
            ("Rentabilidade (%)", yield_fraction, PERCENT_FORMAT),
        ],
    )

    # 4) monthly table
    ws.append([])
    _section_header(ws, "EVOLUÇÃO MENSAL", "E", DARK, white=True)

    ws.append(["Mês", "Saldo Inicial (R$)", "Aporte (R$)", "Rendimento (R$)", "Saldo Final (R$)"])
    for cell in ws[ws.max_row]:
        cell.font = Font(bold=True, color=WHITE)
        cell.fill = _fill(COLUMN_HEADER)
        cell.alignment = Alignment(horizontal="center")

    for record in result.projection:
        ws.append(
            [
                record.index,
                _number(record.opening_balance),
                _number(record.contribution),
                _number(record.yield_amount),
                _number(record.closing_balance),
            ]
        )
        for column in range(2, 6):
            ws.cell(row=ws.max_row, column=column).number_format = CURRENCY_FORMAT

    ws.append(
        [
            "TOTAL",
            "",
            _number(inputs.monthly_contribution * _months(result)),
            _number(summary.total_yield),
            _number(summary.final_balance),
        ]
    )
    for cell in ws[ws.max_row]:
        cell.font = Font(bold=True)
        cell.fill = _fill(TOTALS)
        if cell.column >= 3:
            cell.number_format = CURRENCY_FORMAT

    for row in ws.iter_rows(min_row=2):
        for cell in row:
            if cell.value is not None:
                cell.border = _BORDER

    return wb


def workbook_bytes(result: SimulationResult) -> bytes:
    buffer = BytesIO()
    build_workbook(result).save(buffer)
    return buffer.getvalue()
