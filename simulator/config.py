"""Default settings, overridable through SIMULATOR_* environment variables."""

from __future__ import annotations

import os
from typing import Any, Dict, List


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(f"SIMULATOR_{name}")
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(f"SIMULATOR_{name}")
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(f"SIMULATOR_{name}")
    if not raw:
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]


# Meta SELIC (COPOM target), BCB SGS series 432
SELIC_URL = os.getenv(
    "SIMULATOR_SELIC_URL",
    "https://api.bcb.gov.br/dados/serie/bcdata.sgs.432/dados/ultimos/1?formato=json",
)

DEFAULT_INITIAL_BALANCE = _env_float("DEFAULT_INITIAL_BALANCE", 10000.0)
DEFAULT_MONTHLY_RATE = _env_float("DEFAULT_MONTHLY_RATE", 0.8)
DEFAULT_MONTHLY_CONTRIBUTION = _env_float("DEFAULT_MONTHLY_CONTRIBUTION", 500.0)
DEFAULT_PERIODS = int(_env_float("DEFAULT_PERIODS", 24))

RATE_FETCH_TIMEOUT = _env_float("RATE_FETCH_TIMEOUT", 10.0)
FETCH_RATE_ON_STARTUP = _env_bool("FETCH_RATE_ON_STARTUP", True)

CORS_ORIGINS = _env_list(
    "CORS_ORIGINS",
    [
        "http://localhost:4200",
        "http://localhost:5173",
        "http://127.0.0.1:4200",
        "http://127.0.0.1:5173",
    ],
)

LOG_LEVEL = os.getenv("SIMULATOR_LOG_LEVEL", "INFO").upper()


def default_config() -> Dict[str, Any]:
    """Settings mapping handed to ``app.config.from_mapping``."""
    return {
        "SELIC_URL": SELIC_URL,
        "DEFAULT_INITIAL_BALANCE": DEFAULT_INITIAL_BALANCE,
        "DEFAULT_MONTHLY_RATE": DEFAULT_MONTHLY_RATE,
        "DEFAULT_MONTHLY_CONTRIBUTION": DEFAULT_MONTHLY_CONTRIBUTION,
        "DEFAULT_PERIODS": DEFAULT_PERIODS,
        "RATE_FETCH_TIMEOUT": RATE_FETCH_TIMEOUT,
        "FETCH_RATE_ON_STARTUP": FETCH_RATE_ON_STARTUP,
        "CORS_ORIGINS": CORS_ORIGINS,
        "LOG_LEVEL": LOG_LEVEL,
    }
