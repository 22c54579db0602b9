from flask import Blueprint, current_app, jsonify
from werkzeug.exceptions import HTTPException

from .errors import (
    AppError,
    AuthenticationError,
    ForbiddenError,
    RateLimitError,
    UpstreamError,
    ValidationError,
)

error_handlers_bp = Blueprint("error_handlers", __name__)


def _error_response(error, status_code, message=None):
    payload = {"error": error}
    if message:
        payload["message"] = message
    return jsonify(payload), status_code


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors with a 400 JSON body."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(AuthenticationError)
def handle_authentication_error(error):
    """Handles missing or forged sync tokens."""
    current_app.logger.warning(f"Authentication Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(ForbiddenError)
def handle_forbidden_error(error):
    """Handles requests aimed outside the allowed hosts."""
    current_app.logger.warning(f"Forbidden: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(RateLimitError)
def handle_rate_limit_error(error):
    """Handles exhausted request budgets."""
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(UpstreamError)
def handle_upstream_error(error):
    """Handles failures of the federation site."""
    current_app.logger.error(f"Scrape error: {error.message}")
    return _error_response("Scraping failed", error.status_code, error.message)


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    """Renders werkzeug HTTP errors (404, 405, ...) as JSON."""
    return _error_response(e.name, e.code, e.description)


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    # Avoid exposing raw exception details to the client
    return _error_response("Internal server error", 500)
