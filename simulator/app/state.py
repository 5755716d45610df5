"""Access to the per-app simulator session and rate fetcher."""

from __future__ import annotations

from typing import Callable, Optional

from flask import Flask, current_app

from simulator.core.reference_rate import fetch_reference_rate
from simulator.core.session import SimulatorSession
from simulator.schemas.simulation import ReferenceRate

SESSION_KEY = "simulator_session"


def get_session() -> SimulatorSession:
    return current_app.extensions[SESSION_KEY]


def rate_fetcher(app: Optional[Flask] = None) -> Callable[[], Optional[ReferenceRate]]:
    """Zero-argument fetcher bound to the app's source URL and timeout."""
    app = app or current_app
    url = app.config["SELIC_URL"]
    timeout = app.config["RATE_FETCH_TIMEOUT"]
    return lambda: fetch_reference_rate(url=url, timeout=timeout)
