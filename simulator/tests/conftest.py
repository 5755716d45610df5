from __future__ import annotations

import pytest
import requests
from flask.testing import FlaskClient

from simulator.app import create_app


class FakeResponse:
    def __init__(self, payload, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture()
def app():
    return create_app({"FETCH_RATE_ON_STARTUP": False})


@pytest.fixture()
def client(app) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def selic_payload() -> list:
    return [{"data": "17/09/2026", "valor": "10.50"}]


@pytest.fixture()
def stub_requests(monkeypatch):
    """Replace requests.get for the reference rate module; returns the recorded calls."""

    calls: list = []

    def install(payload=None, status_code: int = 200, error: Exception = None):
        def fake_get(url, timeout=None):
            calls.append({"url": url, "timeout": timeout})
            if error is not None:
                raise error
            return FakeResponse(payload, status_code)

        monkeypatch.setattr("simulator.core.reference_rate.requests.get", fake_get)
        return calls

    return install
