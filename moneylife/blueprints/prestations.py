"""
Prestations blueprint for benefit projections and third-pillar pricing.

This module adapts JSON requests to the benefit engine. It supplies today's
date when the caller gives no reference date; the engine itself never reads
the clock.
"""

from datetime import date
from typing import Any, Dict, Optional

from flask import Blueprint, current_app, jsonify, request
from pydantic import BaseModel, Field, ValidationError, model_validator

from moneylife.config import get_global_settings
from moneylife.models.client import ClientData
from moneylife.models.third_pillar import ClientHealthSnapshot, ThirdPillarConfig
from moneylife.services.prestations_service import NeedTargets, PrestationsService

prestations_bp = Blueprint("prestations", __name__, url_prefix="/api")


class PrestationsRequest(BaseModel):
    """Either a typed client or a raw Firestore document."""

    client: Optional[ClientData] = None
    firestore: Optional[Dict[str, Any]] = None
    reference_date: Optional[date] = None
    targets: NeedTargets = Field(default_factory=NeedTargets)
    include_timelines: bool = False

    @model_validator(mode="after")
    def require_client(self) -> "PrestationsRequest":
        if self.client is None and self.firestore is None:
            raise ValueError("Either 'client' or 'firestore' must be provided")
        return self

    def resolved_client(self) -> ClientData:
        if self.client is not None:
            return self.client
        return ClientData.from_firestore(self.firestore or {})


class PricingRequest(BaseModel):
    config: ThirdPillarConfig
    client: ClientHealthSnapshot = Field(default_factory=ClientHealthSnapshot)
    as_of: Optional[date] = None


def _service() -> PrestationsService:
    """Service bound to the app, built once from the settings."""
    service = current_app.extensions.get("prestations_service")
    if service is None:
        service = PrestationsService.from_settings(get_global_settings())
        current_app.extensions["prestations_service"] = service
    return service


def _validation_error(exc: ValidationError) -> Any:
    return (
        jsonify(
            {
                "error": "Invalid request",
                "details": exc.errors(include_url=False, include_context=False),
            }
        ),
        400,
    )


@prestations_bp.route("/prestations", methods=["POST"])
def compute_prestations() -> Any:
    """Compute every life-event benefit for a client.

    Returns:
        JSON summary with event results and coverage gaps
    """
    try:
        payload = PrestationsRequest.model_validate(request.get_json(silent=True) or {})
        client = payload.resolved_client()
        reference_date = payload.reference_date or date.today()

        service = _service()
        summary = service.compute(client, reference_date, payload.targets)
        body = summary.model_dump(mode="json")

        if payload.include_timelines:
            body["timelines"] = {
                name: timeline.model_dump(mode="json")
                for name, timeline in service.timelines(client, reference_date).items()
            }

        return jsonify(body)

    except ValidationError as e:
        current_app.logger.info(f"Rejected prestations request: {e.error_count()} errors")
        return _validation_error(e)
    except Exception as e:
        current_app.logger.error(f"Error computing prestations: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@prestations_bp.route("/3epilier/pricing", methods=["POST"])
def price_third_pillar() -> Any:
    """Split a third-pillar premium into its risk and savings parts.

    Returns:
        JSON with the risk premium, the net savings premium and the breakdown
    """
    try:
        payload = PricingRequest.model_validate(request.get_json(silent=True) or {})
        split = _service().price_third_pillar(
            payload.config, payload.client, payload.as_of or date.today()
        )
        return jsonify(split.model_dump(mode="json"))

    except ValidationError as e:
        current_app.logger.info(f"Rejected pricing request: {e.error_count()} errors")
        return _validation_error(e)
    except Exception as e:
        current_app.logger.error(f"Error pricing third pillar: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500
