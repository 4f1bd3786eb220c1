import hmac
import logging
import secrets
from dataclasses import dataclass
from flask import current_app
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from .availability import is_date_blocked, is_slot_blocked
from .errors import ConflictError, NotFoundError, StorageError
from .extensions import db
from .models import Customer, Reservation
from .schemas import ReservationRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedReservation:
    """What a committed reservation returns to its caller, read before the commit."""

    data: dict
    cancel_token: str

    @property
    def id(self) -> int:
        return self.data["reservation_id"]


_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _begin():
    level = current_app.config.get("RESERVATION_ISOLATION_LEVEL")
    if not level:
        return
    # The isolation level only applies to a fresh transaction; close a read-only one.
    session = db.session()
    if session.in_transaction() and not (session.new or session.dirty or session.deleted):
        session.rollback()
    session.connection(execution_options={"isolation_level": level})


def upsert_customer(first_name: str, last_name: str, phone_number: str) -> None:
    """
    Inserts the customer with one booking, or bumps the booking count of the
    existing row with the same phone number.
    """
    dialect = db.session.get_bind().dialect.name
    insert = _INSERTS.get(dialect)
    if insert is None:
        raise StorageError(f"Customer upsert is not supported on {dialect}.")

    t = Customer.__table__
    ins = insert(t).values(
        first_name=first_name,
        last_name=last_name,
        phone_number=phone_number,
        numero_prenotazioni=1,
    )

    update_set = {t.c.numero_prenotazioni: t.c.numero_prenotazioni + 1}
    if current_app.config["CUSTOMER_REFRESH_NAMES"]:
        update_set[t.c.first_name] = ins.excluded.first_name
        update_set[t.c.last_name] = ins.excluded.last_name

    db.session.execute(ins.on_conflict_do_update(index_elements=[t.c.phone_number], set_=update_set))


def create_reservation(req: ReservationRequest) -> SavedReservation:
    """
    Checks availability and stores the reservation in a single transaction.

    Raises ConflictError when the date or the time is blocked and
    StorageError when the database fails; either way nothing is written.
    """
    try:
        _begin()

        if is_date_blocked(req.reservation_date):
            logger.info("Rejected booking: %s is disabled", req.reservation_date)
            raise ConflictError("Date unavailable.", code="DATE_UNAVAILABLE")

        if is_slot_blocked(req.reservation_date, req.reservation_time):
            logger.info(
                "Rejected booking: %s %s falls in a disabled slot",
                req.reservation_date,
                req.reservation_time,
            )
            raise ConflictError("Time unavailable.", code="TIME_UNAVAILABLE")

        reservation = Reservation(
            restaurant_id=current_app.config["RESTAURANT_ID"],
            first_name=req.first_name,
            last_name=req.last_name,
            phone_number=req.phone_number,
            email=req.email,
            guests=req.guests,
            reservation_date=req.reservation_date,
            reservation_time=req.reservation_time,
            cookie_consent=req.cookie_consent,
            profiling_consent=req.profiling_consent,
            promotional_sms_consent=req.promotional_sms_consent,
            accept_all=req.accept_all,
            cancel_token=secrets.token_urlsafe(32),
        )
        db.session.add(reservation)
        db.session.flush()
        saved = SavedReservation(data=reservation.to_dict(), cancel_token=reservation.cancel_token)

        if req.profiling_consent:
            upsert_customer(req.first_name, req.last_name, req.phone_number)

        db.session.commit()
    except ConflictError:
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Reservation insert failed")
        raise StorageError("Could not save the reservation.") from e

    logger.info("Reservation %s saved for %s %s", saved.id, req.reservation_date, req.reservation_time)
    return saved


def cancel_reservation(reservation_id: int, token: str | None = None) -> dict:
    """
    Deletes a reservation of this restaurant and returns what it held.

    A token, when given, must match the one issued with the reservation;
    a mismatch is reported exactly like a missing reservation.
    """
    try:
        reservation = db.session.execute(
            select(Reservation)
            .where(
                Reservation.id == reservation_id,
                Reservation.restaurant_id == current_app.config["RESTAURANT_ID"],
            )
            .with_for_update()
        ).scalar_one_or_none()

        if reservation is None or (token is not None and not _token_matches(reservation, token)):
            db.session.rollback()
            raise NotFoundError("Reservation already cancelled or not found.")

        cancelled = reservation.to_dict()
        db.session.delete(reservation)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Cancellation of reservation %s failed", reservation_id)
        raise StorageError("Could not cancel the reservation.") from e

    logger.info("Reservation %s cancelled", reservation_id)
    return cancelled


def _token_matches(reservation: Reservation, token: str) -> bool:
    if not reservation.cancel_token:
        return False
    return hmac.compare_digest(reservation.cancel_token.encode(), token.encode())
