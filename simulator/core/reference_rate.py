"""Reference interest rate (SELIC target) from the Banco Central public API."""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

import requests

from simulator import config
from simulator.schemas.simulation import ReferenceRate

logger = logging.getLogger(__name__)


def annual_to_monthly(annual_rate: float) -> float:
    """Equivalent monthly rate in percent: (1 + annual/100)^(1/12) - 1."""
    return ((1 + annual_rate / 100) ** (1 / 12) - 1) * 100


def parse_reference_rate(payload: Any) -> Optional[ReferenceRate]:
    """
    Read the first entry of an SGS series response.

    Format: [{"data": "19/10/2026", "valor": "10.50"}, ...]; the English keys
    ``date``/``value`` are accepted as well. Returns None when there is no
    usable entry; a non-numeric value raises ValueError.
    """
    if not isinstance(payload, list) or not payload:
        return None

    entry = payload[0]
    if not isinstance(entry, dict):
        return None

    raw_value = entry.get("valor", entry.get("value"))
    if raw_value is None:
        return None

    annual = float(raw_value)
    if not math.isfinite(annual) or annual <= -100:
        return None

    monthly = annual_to_monthly(annual)
    reference_date = entry.get("data", entry.get("date"))

    return ReferenceRate(
        annual_rate=annual,
        monthly_rate=round(monthly, 2),
        reference_date=str(reference_date) if reference_date is not None else None,
    )


def fetch_reference_rate(
    url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Optional[ReferenceRate]:
    """
    Fetch the latest published annual rate and convert it to a monthly one.
    Returns None when the rate is unavailable; callers keep their current rate.
    """
    url = url or config.SELIC_URL
    timeout = timeout if timeout is not None else config.RATE_FETCH_TIMEOUT

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        rate = parse_reference_rate(response.json())
    except requests.RequestException as e:
        logger.warning(f"Reference rate fetch failed, keeping current rate: {e}")
        return None
    except (ValueError, TypeError) as e:
        logger.warning(f"Reference rate response malformed, keeping current rate: {e}")
        return None

    if rate is None:
        logger.info("Reference rate response empty, keeping current rate")
        return None

    logger.info(
        f"SELIC target: annual {rate.annual_rate}% / monthly "
        f"{annual_to_monthly(rate.annual_rate):.4f}% (date {rate.reference_date})"
    )
    return rate
