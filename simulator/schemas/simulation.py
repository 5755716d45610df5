"""Data contracts for the monthly investment simulation."""

from __future__ import annotations

import math
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

MIN_PERIODS = 1
MAX_PERIODS = 360


def clamp_periods(value: float) -> int:
    """Clamp a month count into the supported horizon, dropping any fraction."""
    return int(min(max(value, MIN_PERIODS), MAX_PERIODS))


def _parse_number(value: Any) -> Optional[float]:
    """Float value of a raw field, None when it is not a number at all.

    Integers too large for a float become signed infinity.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, float):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _coerce_number(value: Any, fallback: float) -> float:
    """Lenient numeric parse: anything unusable becomes ``fallback``."""
    number = _parse_number(value)
    if number is None or not math.isfinite(number) or number == 0:
        return fallback
    return number


def _finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


class SimulationInput(BaseModel):
    """Immutable snapshot consumed by one recomputation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    initial_balance: float = Field(..., description="Balance at the start of month 1.")
    monthly_rate: float = Field(
        ...,
        description="Monthly yield in percent (0.8 means 0.8% a month). May be negative.",
    )
    monthly_contribution: float = Field(..., description="Deposit added every month.")
    periods: int = Field(..., description="Number of months to project.")


class PeriodRecord(BaseModel):
    """Single row of the month-by-month projection."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    index: int = Field(..., ge=1)
    opening_balance: float
    contribution: float
    yield_amount: float = Field(..., alias="yield")
    closing_balance: float

    @field_serializer("opening_balance", "contribution", "yield_amount", "closing_balance")
    def _serialize_amount(self, value: float) -> Optional[float]:
        # overflowed balances serialize as null, never as Infinity/NaN
        return _finite_or_none(value)


class SummaryResult(BaseModel):
    """Aggregates derived from the inputs and the projection.

    ``yield_percent`` is ``None`` when nothing was contributed, since the
    percentage is undefined in that case.
    """

    model_config = ConfigDict(frozen=True)

    total_contributed: float
    final_balance: float
    total_yield: float
    yield_percent: Optional[float] = None

    @field_serializer("total_contributed", "final_balance", "total_yield", "yield_percent")
    def _serialize_total(self, value: Optional[float]) -> Optional[float]:
        return None if value is None else _finite_or_none(value)


class SimulationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    input: SimulationInput
    projection: List[PeriodRecord]
    summary: SummaryResult


class SimulationForm(BaseModel):
    """Raw form fields as typed by the user.

    Nothing is ever rejected: empty or non-numeric values become 0 (1 for the
    month count) and the month count is clamped to [1, 360].
    """

    model_config = ConfigDict(extra="ignore")

    initial_balance: float = 0.0
    monthly_rate: float = 0.0
    monthly_contribution: float = 0.0
    periods: int = MIN_PERIODS

    @field_validator("initial_balance", "monthly_rate", "monthly_contribution", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> float:
        return _coerce_number(value, 0.0)

    @field_validator("periods", mode="before")
    @classmethod
    def _coerce_periods(cls, value: Any) -> int:
        number = _parse_number(value)
        if number is None or math.isnan(number) or number == 0:
            return MIN_PERIODS
        # an overflowing count still means "as long as possible"
        return clamp_periods(number)

    def to_input(self) -> SimulationInput:
        return SimulationInput(
            initial_balance=self.initial_balance,
            monthly_rate=self.monthly_rate,
            monthly_contribution=self.monthly_contribution,
            periods=self.periods,
        )


class SimulationFormPatch(SimulationForm):
    """Partial form edit; only the fields actually sent are applied."""

    def changes(self) -> dict:
        return self.model_dump(include=self.model_fields_set)


class ReferenceRate(BaseModel):
    """Published annual rate and its monthly equivalent."""

    model_config = ConfigDict(frozen=True)

    annual_rate: float
    monthly_rate: float = Field(..., description="Monthly equivalent, rounded to 2 decimals.")
    reference_date: Optional[str] = None
