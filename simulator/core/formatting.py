"""pt-BR display formatting for currency (BRL) and percentages."""

from __future__ import annotations

import math
from typing import Dict, List, Optional

from simulator.schemas.simulation import SimulationResult

NBSP = "\u00a0"
UNDEFINED = "-"


def _pt_br_number(value: float, decimals: int = 2) -> str:
    """1234567.891 -> '1.234.567,89'"""
    us_style = f"{abs(value):,.{decimals}f}"
    return us_style.replace(",", "_").replace(".", ",").replace("_", ".")


def _is_negative(value: float) -> bool:
    # like Intl signDisplay "auto": -0.001 and -0.0 still print a minus sign
    return math.copysign(1.0, value) < 0


def _is_undefined(value: Optional[float]) -> bool:
    return value is None or not math.isfinite(value)


def format_currency(value: Optional[float]) -> str:
    if _is_undefined(value):
        return UNDEFINED
    text = f"R${NBSP}{_pt_br_number(value)}"
    return f"-{text}" if _is_negative(value) else text


def format_percent(value: Optional[float]) -> str:
    """``value`` is already in percent units: 0.84 -> '0,84%'."""
    if _is_undefined(value):
        return UNDEFINED
    text = f"{_pt_br_number(value)}%"
    return f"-{text}" if _is_negative(value) else text


def format_result(result: SimulationResult) -> Dict[str, object]:
    """Formatted strings for the summary figures and the monthly table."""
    summary = result.summary
    rows: List[Dict[str, str]] = [
        {
            "index": str(row.index),
            "opening_balance": format_currency(row.opening_balance),
            "contribution": format_currency(row.contribution),
            "yield": format_currency(row.yield_amount),
            "closing_balance": format_currency(row.closing_balance),
        }
        for row in result.projection
    ]
    return {
        "summary": {
            "total_contributed": format_currency(summary.total_contributed),
            "final_balance": format_currency(summary.final_balance),
            "total_yield": format_currency(summary.total_yield),
            "yield_percent": format_percent(summary.yield_percent),
        },
        "monthly_rate": format_percent(result.input.monthly_rate),
        "projection": rows,
    }
