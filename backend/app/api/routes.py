"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from backend.core.projection import project_input, results_payload, summarize
from backend.database import (
    CalculationNotFound,
    StorageError,
    get_calculation,
    list_calculations,
    save_calculation,
)
from backend.schemas.calculation import (
    PARAMETERS_BY_KIND,
    CalculationCreate,
    CalculationKind,
    CalculatorResponse,
    RetirementParameters,
    SavedCalculation,
    parameters_for,
)
from backend.schemas.projection import ProjectionInput, ProjectionResponse

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


class BadPayload(ValueError):
    """Request body is not a JSON object."""


def _json_body(allow_empty: bool = False) -> Dict[str, Any]:
    if allow_empty and not request.get_data():
        return {}
    payload = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict):
        raise BadPayload("request body must be a JSON object")
    return payload


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return (
        jsonify({"detail": exc.errors(include_url=False, include_context=False)}),
        HTTPStatus.UNPROCESSABLE_ENTITY,
    )


@api_bp.errorhandler(BadPayload)
def _handle_bad_payload(exc: BadPayload):
    return jsonify({"detail": str(exc)}), HTTPStatus.BAD_REQUEST


@api_bp.errorhandler(CalculationNotFound)
def _handle_not_found(exc: CalculationNotFound):
    return jsonify({"detail": str(exc)}), HTTPStatus.NOT_FOUND


@api_bp.errorhandler(StorageError)
def _handle_storage_error(exc: StorageError):
    logger.exception("Calculation store failure")
    return jsonify({"detail": str(exc)}), HTTPStatus.SERVICE_UNAVAILABLE


@api_bp.get("/health")
def health() -> Any:
    return jsonify({"status": "ok"})


@api_bp.get("/calc/defaults")
def defaults() -> Any:
    """Default form values for each calculator."""
    return jsonify(
        {kind.value: model().model_dump() for kind, model in PARAMETERS_BY_KIND.items()}
    )


@api_bp.post("/calc/projection")
def projection() -> Any:
    """Project a raw parameter set."""
    payload = ProjectionInput.model_validate(_json_body())
    series = project_input(payload)
    response = ProjectionResponse(series=series, summary=summarize(series))
    return jsonify(response.model_dump(mode="json"))


@api_bp.post("/calc/<kind>")
def calculator(kind: str) -> Any:
    """Project one use case; fields left out of the body take their defaults."""
    try:
        calc_kind = CalculationKind(kind)
    except ValueError:
        return jsonify({"detail": f"unknown calculator {kind!r}"}), HTTPStatus.NOT_FOUND

    params = parameters_for(calc_kind, _json_body(allow_empty=True))
    series = project_input(params.to_projection_input())
    response = CalculatorResponse(
        kind=calc_kind,
        parameters=params.model_dump(),
        series=series,
        summary=summarize(series),
        retirementAge=(
            params.retirement_age if isinstance(params, RetirementParameters) else None
        ),
    )
    body = response.model_dump(mode="json")
    if body["retirementAge"] is None:
        del body["retirementAge"]
    return jsonify(body)


@api_bp.get("/calculations")
def calculations() -> Any:
    """Saved calculation history, newest first."""
    records = list_calculations(current_app.config["DATABASE_PATH"])
    return jsonify(
        [SavedCalculation.model_validate(record).model_dump(mode="json") for record in records]
    )


@api_bp.post("/calculations")
def create_calculation() -> Any:
    payload = CalculationCreate.model_validate(_json_body())
    if payload.results is None:
        params = parameters_for(payload.kind, payload.parameters)
        results = results_payload(project_input(params.to_projection_input()))
    else:
        results = payload.results.model_dump()

    record = save_calculation(
        current_app.config["DATABASE_PATH"],
        kind=payload.kind.value,
        parameters=payload.parameters,
        results=results,
    )
    saved = SavedCalculation.model_validate(record)
    return jsonify(saved.model_dump(mode="json")), HTTPStatus.CREATED


@api_bp.get("/calculations/<int:calculation_id>")
def calculation(calculation_id: int) -> Any:
    record = get_calculation(current_app.config["DATABASE_PATH"], calculation_id)
    return jsonify(SavedCalculation.model_validate(record).model_dump(mode="json"))
