"""Response bodies returned by the HTTP API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from simulator.schemas.simulation import (
    PeriodRecord,
    ReferenceRate,
    SimulationInput,
    SummaryResult,
)


class PingResponse(BaseModel):
    message: str


class SimulationResponse(BaseModel):
    """Projection table, totals, and their pt-BR formatted display strings."""

    input: SimulationInput
    projection: List[PeriodRecord]
    summary: SummaryResult
    display: Dict[str, Any]


class SessionState(SimulationResponse):
    rate_source: str = Field(..., description="unset, auto or manual.")
    loading_rate: bool
    reference_rate: Optional[ReferenceRate] = None
