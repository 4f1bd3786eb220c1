import logging
from datetime import date
from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from ..availability import disabled_time_slots
from ..http import jerror

bp = Blueprint("gestionale", __name__)
logger = logging.getLogger(__name__)


@bp.get("/get-disabled-time-slots/")
def get_disabled_time_slots():
    date_str = request.args.get("date")
    if not date_str:
        return jerror(400, "MISSING_DATE", "Missing 'date' query parameter (YYYY-MM-DD).")
    try:
        day = date.fromisoformat(date_str)
    except ValueError as e:
        return jerror(400, "BAD_DATE", "Invalid date format. Use YYYY-MM-DD.", str(e))

    try:
        slots = disabled_time_slots(day)
    except SQLAlchemyError:
        logger.exception("Disabled time slots lookup failed for %s", day)
        return jerror(500, "STORAGE_ERROR", "Server error.")

    return jsonify(disabled_time_slots=[slot.to_dict() for slot in slots])
