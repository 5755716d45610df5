from __future__ import annotations

from math import isclose

import pytest

from simulator.core.projection import project, simulate, summarize
from simulator.schemas.simulation import MAX_PERIODS, SimulationInput


def default_input(**overrides) -> SimulationInput:
    values = {
        "initial_balance": 10000.0,
        "monthly_rate": 0.8,
        "monthly_contribution": 500.0,
        "periods": 24,
    }
    values.update(overrides)
    return SimulationInput(**values)


def test_first_months_match_hand_calculation():
    rows = project(default_input())

    first = rows[0]
    assert first.index == 1
    assert first.opening_balance == 10000.0
    assert first.contribution == 500.0
    assert isclose(first.yield_amount, 84.0, abs_tol=1e-9)
    assert isclose(first.closing_balance, 10584.0, abs_tol=1e-9)
    assert rows[1].opening_balance == first.closing_balance
    assert isclose(rows[1].opening_balance, 10584.0, abs_tol=1e-9)


@pytest.mark.parametrize("periods", [1, 2, 24, 120, 360])
def test_projection_length_matches_periods(periods):
    rows = project(default_input(periods=periods))

    assert len(rows) == periods
    assert [row.index for row in rows] == list(range(1, periods + 1))


def test_opening_balance_chains_previous_closing_exactly():
    rows = project(default_input(periods=360, monthly_rate=1.37, monthly_contribution=123.45))

    assert rows[0].opening_balance == 10000.0
    for previous, current in zip(rows, rows[1:]):
        assert current.opening_balance == previous.closing_balance


def test_each_row_balances():
    rows = project(default_input(periods=360, monthly_rate=0.65))

    for row in rows:
        assert isclose(
            row.closing_balance,
            row.opening_balance + row.contribution + row.yield_amount,
            rel_tol=1e-9,
        )
        assert isclose(
            row.yield_amount,
            (row.opening_balance + row.contribution) * 0.65 / 100,
            rel_tol=1e-9,
        )


def test_zero_periods_is_empty_and_summary_falls_back_to_zero():
    inputs = default_input(periods=0)
    rows = project(inputs)

    assert rows == []
    summary = summarize(inputs, rows)
    assert summary.final_balance == 0.0
    assert summary.total_contributed == 10000.0
    assert summary.total_yield == -10000.0


def test_engine_clamps_horizon_above_maximum():
    inputs = default_input(periods=MAX_PERIODS + 100)
    result = simulate(inputs)

    assert len(result.projection) == MAX_PERIODS
    assert result.summary.total_contributed == 10000.0 + 500.0 * MAX_PERIODS


def test_negative_rate_shrinks_balance():
    rows = project(default_input(monthly_rate=-1.0, monthly_contribution=0.0, periods=12))

    assert all(row.yield_amount < 0 for row in rows)
    assert rows[-1].closing_balance < 10000.0


def test_project_is_deterministic():
    inputs = default_input(periods=60)

    assert project(inputs) == project(inputs)
