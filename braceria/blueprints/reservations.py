import logging
from flask import Blueprint, request, jsonify, current_app, render_template
from ..booking import create_reservation, cancel_reservation
from ..errors import ValidationError, ConflictError, NotFoundError, StorageError
from ..http import jerror, jbooking_error
from ..notifications import notify_customer, notify_restaurant
from ..schemas import ReservationRequest

bp = Blueprint("reservations", __name__)
logger = logging.getLogger(__name__)


def _notify(reservation: dict, req: ReservationRequest, token: str) -> None:
    try:
        notify_customer(reservation, req.email, token)
        notify_restaurant(reservation, req.email, req.phone_number)
    except Exception:
        logger.exception("Could not queue emails for reservation %s", reservation["reservation_id"])


@bp.post("/prenota")
def create():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jerror(400, "INVALID_PAYLOAD", "Missing or invalid JSON payload.")

    try:
        req = ReservationRequest.from_payload(payload)
    except ValidationError as e:
        logger.info("Rejected booking: %s", e.code)
        return jbooking_error(e)

    try:
        saved = create_reservation(req)
    except (ConflictError, StorageError) as e:
        return jbooking_error(e)

    data = saved.data
    _notify(data, req, saved.cancel_token)

    return jsonify(
        success=True,
        id=data["reservation_id"],
        message="Reservation confirmed.",
        data=data,
    ), 201


@bp.get("/annulla/<int:reservation_id>/<token>")
def cancel(reservation_id: int, token: str):
    restaurant = current_app.config["RESTAURANT_NAME"]
    try:
        cancelled = cancel_reservation(reservation_id, token)
    except NotFoundError:
        return render_template("cancel_page.html", status="not_found", restaurant=restaurant), 200
    except StorageError:
        return render_template("cancel_page.html", status="error", restaurant=restaurant), 500

    return render_template("cancel_page.html", status="cancelled", reservation=cancelled, restaurant=restaurant), 200
