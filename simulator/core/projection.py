from __future__ import annotations

import math
from typing import List, Optional

from simulator.schemas.simulation import (
    MAX_PERIODS,
    PeriodRecord,
    SimulationInput,
    SimulationResult,
    SummaryResult,
)


def _horizon(inputs: SimulationInput) -> int:
    # periods <= 0 means an empty projection, never more than MAX_PERIODS
    return min(max(inputs.periods, 0), MAX_PERIODS)


def project(inputs: SimulationInput) -> List[PeriodRecord]:
    """
    Build the month-by-month table for months 1..periods.

    Order of operations (per month):
      1) Opening balance is the initial balance (month 1) or last month's closing.
      2) Add the monthly contribution at the START of the month.
      3) Yield = (opening + contribution) * rate / 100, so the deposit earns this month.
      4) Closing = opening + contribution + yield.

    Values are kept unrounded; rounding happens only when formatting.
    """
    rate = inputs.monthly_rate / 100
    contribution = inputs.monthly_contribution

    rows: List[PeriodRecord] = []
    balance = inputs.initial_balance
    for index in range(1, _horizon(inputs) + 1):
        opening = balance
        yield_amount = (opening + contribution) * rate
        balance = opening + contribution + yield_amount

        rows.append(
            PeriodRecord(
                index=index,
                opening_balance=opening,
                contribution=contribution,
                yield_amount=yield_amount,
                closing_balance=balance,
            )
        )

    return rows


def summarize(inputs: SimulationInput, projection: List[PeriodRecord]) -> SummaryResult:
    """Totals shown next to the table: invested, final, yield and yield %."""
    total_contributed = inputs.initial_balance + inputs.monthly_contribution * _horizon(inputs)
    final_balance = projection[-1].closing_balance if projection else 0.0
    total_yield = final_balance - total_contributed

    return SummaryResult(
        total_contributed=total_contributed,
        final_balance=final_balance,
        total_yield=total_yield,
        yield_percent=_yield_percent(total_yield, total_contributed),
    )


def _yield_percent(total_yield: float, total_contributed: float) -> Optional[float]:
    if total_contributed == 0:
        return None
    percent = total_yield / total_contributed * 100
    return percent if math.isfinite(percent) else None


def simulate(inputs: SimulationInput) -> SimulationResult:
    """Recompute everything for one input snapshot."""
    projection = project(inputs)
    return SimulationResult(
        input=inputs,
        projection=projection,
        summary=summarize(inputs, projection),
    )


__all__ = [
    "project",
    "summarize",
    "simulate",
]
