"""
Projection blueprint for the life plan simulator.

This module exposes the projection engine over JSON. The API is stateless:
every request carries the plan it operates on and receives the recomputed
result, so no session is stored server-side.
"""

import logging
from typing import Any, Dict, Tuple
from urllib.parse import quote

from flask import Blueprint, Response, current_app, jsonify, request
from pydantic import ValidationError

from lifeplan.errors import (
    HorizonTooLongError,
    LineItemNotFoundError,
    UnknownCommandError,
)
from lifeplan.models.derived_metrics import net_asset_points
from lifeplan.models.household import Household, Parameters
from lifeplan.models.life_events import LifeEvent
from lifeplan.models.line_items import LineItemStore
from lifeplan.services.export_service import export_cash_flow_csv, export_filename
from lifeplan.services.simulator_service import (
    SimulatorService,
    SimulatorState,
    parse_command,
)

logger = logging.getLogger(__name__)

projections_bp = Blueprint("projections", __name__, url_prefix="/api")


def _service() -> SimulatorService:
    return SimulatorService(
        max_horizon_years=current_app.config.get("MAX_HORIZON_YEARS", 121)
    )


def _state_from_payload(data: Dict[str, Any]) -> SimulatorState:
    """Build a projected state from a request body.

    A body without ``store`` starts from the default line items; the
    generated living, housing and education amounts are always refreshed.
    """
    household = Household.model_validate(data.get("household") or {})
    parameters = Parameters.model_validate(data.get("parameters") or {})
    store = (
        LineItemStore.model_validate(data["store"]) if data.get("store") else None
    )
    state = _service().initial_state(household, parameters, store)
    events = [LifeEvent.model_validate(e) for e in data.get("life_events") or []]
    return state.model_copy(update={"life_events": events})


def _validation_error(error: ValidationError) -> Tuple[Response, int]:
    details = [
        {"loc": list(err["loc"]), "msg": err["msg"]} for err in error.errors()
    ]
    return jsonify({"error": "Invalid input", "details": details}), 400


@projections_bp.route("/projections", methods=["POST"])
def create_projection() -> Any:
    """Project a plan.

    Returns:
        JSON response with the cash-flow series and net assets per year
    """
    try:
        state = _state_from_payload(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _validation_error(e)
    except HorizonTooLongError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify(
        {
            "cash_flow": state.cash_flow.model_dump(mode="json")["records"],
            "net_assets": [
                point.model_dump()
                for point in net_asset_points(state.cash_flow, state.store)
            ],
            "store": state.store.model_dump(mode="json"),
        }
    )


@projections_bp.route("/projections/commands", methods=["POST"])
def apply_command() -> Any:
    """Apply one command to a state.

    Returns:
        JSON response with the new state
    """
    data = request.get_json(silent=True) or {}
    try:
        state = SimulatorState.model_validate(data.get("state") or {})
        command = parse_command(data.get("command") or {})
        new_state = _service().apply(state, command)
    except ValidationError as e:
        return _validation_error(e)
    except LineItemNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except (HorizonTooLongError, UnknownCommandError) as e:
        return jsonify({"error": str(e)}), 400

    logger.info(f"Applied command {command.kind}")
    return jsonify({"state": new_state.model_dump(mode="json")})


@projections_bp.route("/projections/export", methods=["POST"])
def export_projection() -> Any:
    """Project a plan and return it as a CSV attachment."""
    try:
        state = _state_from_payload(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _validation_error(e)
    except HorizonTooLongError as e:
        return jsonify({"error": str(e)}), 400

    content = export_cash_flow_csv(
        state, include_bom=current_app.config.get("CSV_INCLUDE_BOM", True)
    )
    response = Response(content, mimetype="text/csv")
    response.headers["Content-Type"] = "text/csv; charset=utf-8"
    response.headers["Content-Disposition"] = (
        "attachment; filename=\"cashflow.csv\"; "
        f"filename*=UTF-8''{quote(export_filename())}"
    )
    return response
