from flask import current_app, jsonify
from .errors import BookingError, ConflictError, NotFoundError, ValidationError


def jerror(status: int, code: str, message: str, details=None):
    """JSON error body: ``{"code", "message"}`` plus ``details`` when there are any."""
    body = {"code": code, "message": message}
    if details:
        body["details"] = details
    return jsonify(body), status


def status_for(err: BookingError) -> int:
    if isinstance(err, ValidationError):
        return 400
    if isinstance(err, ConflictError):
        return current_app.config["CONFLICT_STATUS"]
    if isinstance(err, NotFoundError):
        return 404
    return 500


def jbooking_error(err: BookingError):
    return jerror(status_for(err), err.code, err.message, err.details)
