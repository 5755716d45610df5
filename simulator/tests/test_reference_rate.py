from __future__ import annotations

from math import isclose

import pytest
import requests

from simulator.core.reference_rate import (
    annual_to_monthly,
    fetch_reference_rate,
    parse_reference_rate,
)


def test_annual_to_monthly_compounds_back_to_annual():
    monthly = annual_to_monthly(10.5)

    assert isclose(monthly, (1.105 ** (1 / 12) - 1) * 100, rel_tol=1e-12)
    assert isclose((1 + monthly / 100) ** 12, 1.105, rel_tol=1e-12)


def test_parse_rounds_monthly_rate_to_two_decimals(selic_payload):
    rate = parse_reference_rate(selic_payload)

    assert rate is not None
    assert rate.annual_rate == 10.5
    assert rate.monthly_rate == 0.84
    assert rate.reference_date == "17/09/2026"


def test_parse_accepts_english_keys_and_uses_first_entry_only():
    rate = parse_reference_rate(
        [
            {"date": "2026-09-17", "value": "15.00"},
            {"date": "2026-08-01", "value": "99.00"},
        ]
    )

    assert rate is not None
    assert rate.annual_rate == 15.0
    assert rate.monthly_rate == round(annual_to_monthly(15.0), 2)
    assert rate.reference_date == "2026-09-17"


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {},
        None,
        ["10.5"],
        [{"data": "17/09/2026"}],
    ],
)
def test_parse_returns_none_for_unusable_payloads(payload):
    assert parse_reference_rate(payload) is None


def test_fetch_success(stub_requests, selic_payload):
    calls = stub_requests(selic_payload)

    rate = fetch_reference_rate(url="https://example.test/selic", timeout=3)

    assert rate is not None
    assert rate.monthly_rate == 0.84
    assert calls == [{"url": "https://example.test/selic", "timeout": 3}]


def test_fetch_network_error_is_unavailable(stub_requests):
    stub_requests(error=requests.ConnectionError("offline"))

    assert fetch_reference_rate(url="https://example.test/selic") is None


def test_fetch_http_error_is_unavailable(stub_requests):
    stub_requests([], status_code=503)

    assert fetch_reference_rate(url="https://example.test/selic") is None


@pytest.mark.parametrize(
    "payload",
    [
        [],
        [{"data": "17/09/2026", "valor": "n/a"}],
        ValueError("not json"),
    ],
)
def test_fetch_malformed_response_is_unavailable(stub_requests, payload):
    stub_requests(payload)

    assert fetch_reference_rate(url="https://example.test/selic") is None
