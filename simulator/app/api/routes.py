"""HTTP routes for the Flask API."""

from http import HTTPStatus
from io import BytesIO
from typing import Any, Dict

from flask import Blueprint, jsonify, request, send_file
from pydantic import ValidationError

from simulator.app.state import get_session, rate_fetcher
from simulator.core.export import XLSX_MIMETYPE, export_filename, workbook_bytes
from simulator.core.formatting import format_result
from simulator.core.projection import simulate
from simulator.schemas.responses import PingResponse, SessionState, SimulationResponse
from simulator.schemas.simulation import (
    SimulationForm,
    SimulationFormPatch,
    SimulationResult,
)

api_bp = Blueprint("api", __name__)


class BadPayload(ValueError):
    """Request body is not a JSON object."""


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": exc.errors()}), HTTPStatus.BAD_REQUEST


@api_bp.errorhandler(BadPayload)
def _handle_bad_payload(exc: BadPayload):
    return jsonify({"detail": str(exc)}), HTTPStatus.BAD_REQUEST


def _json_object() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None and not request.get_data():
        return {}
    if not isinstance(payload, dict):
        raise BadPayload("request body must be a JSON object")
    return payload


def _simulation_body(result: SimulationResult) -> Dict[str, Any]:
    response = SimulationResponse(
        input=result.input,
        projection=result.projection,
        summary=result.summary,
        display=format_result(result),
    )
    return response.model_dump(by_alias=True)


def _session_body() -> Dict[str, Any]:
    snapshot = get_session().snapshot()
    result = snapshot.result
    state = SessionState(
        input=result.input,
        projection=result.projection,
        summary=result.summary,
        display=format_result(result),
        rate_source=snapshot.rate_source.value,
        loading_rate=snapshot.loading_rate,
        reference_rate=snapshot.reference_rate,
    )
    return state.model_dump(by_alias=True)


def _xlsx_response(result: SimulationResult):
    return send_file(
        BytesIO(workbook_bytes(result)),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=export_filename(),
    )


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message="pong")
    return jsonify(response.model_dump())


@api_bp.post("/simulation")
def simulation() -> Any:
    """Stateless projection of the posted form fields."""
    form = SimulationForm.model_validate(_json_object())
    return jsonify(_simulation_body(simulate(form.to_input())))


@api_bp.post("/simulation/export")
def simulation_export() -> Any:
    form = SimulationForm.model_validate(_json_object())
    return _xlsx_response(simulate(form.to_input()))


@api_bp.get("/reference-rate")
def reference_rate() -> Any:
    """Fetch the reference rate now, without touching the session."""
    rate = rate_fetcher()()
    if rate is None:
        return jsonify({"detail": "reference rate unavailable"}), HTTPStatus.SERVICE_UNAVAILABLE
    return jsonify(rate.model_dump())


@api_bp.get("/session")
def session_state() -> Any:
    return jsonify(_session_body())


@api_bp.patch("/session")
def session_update() -> Any:
    """Apply edited fields; editing the rate makes it manual until the next refresh."""
    patch = SimulationFormPatch.model_validate(_json_object())
    changes = patch.changes()
    if changes:
        get_session().update(**changes)
    return jsonify(_session_body())


@api_bp.post("/session/refresh-rate")
def session_refresh_rate() -> Any:
    get_session().refresh_reference_rate(rate_fetcher(), explicit=True)
    return jsonify(_session_body())


@api_bp.get("/session/export")
def session_export() -> Any:
    return _xlsx_response(get_session().result)
