"""
System Routes - health, stats and recent additions
"""

from flask import Blueprint, jsonify

from retrodex.api_responses import handle_api_errors, success_response
from retrodex.app_services.read_service import ReadService
from retrodex.constants import BUILD_VERSION

system_bp = Blueprint("system", __name__, url_prefix="/api")


@system_bp.route("/health", methods=["GET"])
def health_check_api():
    """
    Health check endpoint for monitoring.
    Runs a one-row query against the consoles table.
    """
    payload, healthy = ReadService.health()
    payload["version"] = BUILD_VERSION
    return jsonify(payload), 200 if healthy else 503


@system_bp.route("/stats", methods=["GET"])
@handle_api_errors
def stats():
    return success_response(ReadService.stats())


@system_bp.route("/recent", methods=["GET"])
@handle_api_errors
def recent():
    return success_response(ReadService.recent())
