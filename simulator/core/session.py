from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from simulator.core.projection import simulate
from simulator.schemas.simulation import ReferenceRate, SimulationInput, SimulationResult

logger = logging.getLogger(__name__)

Listener = Callable[[SimulationResult], None]
RateFetcher = Callable[[], Optional[ReferenceRate]]


class RateSource(str, Enum):
    UNSET = "unset"    # configured default, nothing fetched yet
    AUTO = "auto"      # taken from the reference rate fetch
    MANUAL = "manual"  # typed by the user; sticky until an explicit refresh


@dataclass(frozen=True)
class SessionSnapshot:
    """Consistent view of a session taken under its lock."""

    result: SimulationResult
    rate_source: RateSource
    loading_rate: bool
    reference_rate: Optional[ReferenceRate]


class SimulatorSession:
    """
    Current inputs plus the derived simulation, recomputed on every change.

    Rate precedence:
      - A manual edit always wins; a fetch that completes afterwards is ignored.
      - Only an explicit refresh clears the manual flag.
      - Each fetch gets a ticket; only the latest ticket may apply its rate.
    """

    def __init__(self, inputs: SimulationInput):
        self._lock = threading.RLock()
        self._inputs = inputs
        self._rate_source = RateSource.UNSET
        self._loading_rate = False
        self._reference_rate: Optional[ReferenceRate] = None
        self._ticket = 0
        self._listeners: List[Listener] = []
        self._result = simulate(inputs)

    @property
    def inputs(self) -> SimulationInput:
        return self._inputs

    @property
    def result(self) -> SimulationResult:
        return self._result

    @property
    def rate_source(self) -> RateSource:
        return self._rate_source

    @property
    def loading_rate(self) -> bool:
        return self._loading_rate

    @property
    def reference_rate(self) -> Optional[ReferenceRate]:
        return self._reference_rate

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                result=self._result,
                rate_source=self._rate_source,
                loading_rate=self._loading_rate,
                reference_rate=self._reference_rate,
            )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback for every recomputation; returns an unsubscribe hook."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes) -> SimulationResult:
        """Apply user edits. Touching ``monthly_rate`` marks the rate as manual."""
        unknown = set(changes) - set(SimulationInput.model_fields)
        if unknown:
            raise ValueError(f"unknown simulation fields: {', '.join(sorted(unknown))}")

        with self._lock:
            if "monthly_rate" in changes:
                self._rate_source = RateSource.MANUAL
            self._set_inputs(self._inputs.model_copy(update=changes))
            return self._result

    def begin_rate_refresh(self, explicit: bool = False) -> int:
        """Start a fetch and return its ticket. An explicit refresh drops the manual flag."""
        with self._lock:
            if explicit and self._rate_source is RateSource.MANUAL:
                self._rate_source = RateSource.UNSET
            self._ticket += 1
            self._loading_rate = True
            return self._ticket

    def apply_reference_rate(self, ticket: int, rate: Optional[ReferenceRate]) -> bool:
        """Apply a fetched rate if it is still wanted. Returns True when applied."""
        with self._lock:
            if ticket != self._ticket:
                logger.info(f"Ignoring stale reference rate response (ticket {ticket})")
                return False

            self._loading_rate = False

            if rate is None:
                # Unavailable: keep whatever rate is configured
                return False

            self._reference_rate = rate

            if self._rate_source is RateSource.MANUAL:
                logger.info("Reference rate arrived after a manual edit; keeping manual rate")
                return False

            self._rate_source = RateSource.AUTO
            self._set_inputs(self._inputs.model_copy(update={"monthly_rate": rate.monthly_rate}))
            return True

    def refresh_reference_rate(self, fetcher: RateFetcher, explicit: bool = True) -> bool:
        ticket = self.begin_rate_refresh(explicit=explicit)
        return self.apply_reference_rate(ticket, fetcher())

    def _set_inputs(self, inputs: SimulationInput) -> None:
        self._inputs = inputs
        self._result = simulate(inputs)
        for listener in list(self._listeners):
            listener(self._result)
