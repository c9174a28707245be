"""Health check blueprint."""

from flask import Blueprint, Response, current_app, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.route("/healthz")
def health_check() -> Response:
    """Liveness probe reporting the projection horizon limit in force."""
    return jsonify(
        {
            "status": "ok",
            "max_horizon_years": current_app.config.get("MAX_HORIZON_YEARS"),
        }
    )
