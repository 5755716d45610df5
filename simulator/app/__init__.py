"""Application factory and app-wide configuration."""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping, Optional

from flask import Flask
from flask_cors import CORS

from simulator.app.api.routes import api_bp
from simulator.app.state import SESSION_KEY, rate_fetcher
from simulator.config import default_config
from simulator.core.session import SimulatorSession
from simulator.logger import setup_logger
from simulator.schemas.simulation import SimulationInput

logger = logging.getLogger(__name__)


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    """Build the Flask app instance."""
    app = Flask(__name__)
    app.config.from_mapping(default_config())
    if config:
        app.config.from_mapping(config)

    setup_logger("simulator", app.config["LOG_LEVEL"])

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        expose_headers=["Content-Disposition"],
    )

    app.extensions[SESSION_KEY] = SimulatorSession(
        SimulationInput(
            initial_balance=app.config["DEFAULT_INITIAL_BALANCE"],
            monthly_rate=app.config["DEFAULT_MONTHLY_RATE"],
            monthly_contribution=app.config["DEFAULT_MONTHLY_CONTRIBUTION"],
            periods=app.config["DEFAULT_PERIODS"],
        )
    )

    app.register_blueprint(api_bp, url_prefix="/api")

    if app.config["FETCH_RATE_ON_STARTUP"]:
        _start_rate_fetch(app)

    return app


def _start_rate_fetch(app: Flask) -> threading.Thread:
    """Fire-and-forget fetch at startup; a manual edit in the meantime wins."""
    session: SimulatorSession = app.extensions[SESSION_KEY]
    ticket = session.begin_rate_refresh(explicit=False)
    fetcher = rate_fetcher(app)

    def run() -> None:
        session.apply_reference_rate(ticket, fetcher())

    logger.info("Fetching reference rate in the background")
    thread = threading.Thread(target=run, name="reference-rate", daemon=True)
    thread.start()
    return thread
