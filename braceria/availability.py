"""Blocked-date and blocked-slot lookups.

Every query runs on the current ``db.session`` so the checks share the
caller's transaction with the insert that follows them.
"""
from datetime import date, time
from sqlalchemy import select, exists
from .extensions import db
from .models import DisabledDate, DisabledTimeSlot


def is_date_blocked(day: date) -> bool:
    stmt = select(exists().where(DisabledDate.date == day))
    return bool(db.session.execute(stmt).scalar())


def is_slot_blocked(day: date, at: time) -> bool:
    """True when ``at`` falls in ``[start_time, end_time)`` of a slot on ``day``."""
    stmt = select(
        exists().where(
            DisabledTimeSlot.date == day,
            DisabledTimeSlot.start_time <= at,
            DisabledTimeSlot.end_time > at,
        )
    )
    return bool(db.session.execute(stmt).scalar())


def disabled_time_slots(day: date) -> list[DisabledTimeSlot]:
    stmt = (
        select(DisabledTimeSlot)
        .where(DisabledTimeSlot.date == day)
        .order_by(DisabledTimeSlot.start_time.asc())
    )
    return list(db.session.execute(stmt).scalars())
