
from sqlalchemy import func
from .extensions import db

class DisabledDate(db.Model):
    __tablename__ = "gestionale_disableddate"
    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, unique=True, index=True)

class DisabledTimeSlot(db.Model):
    __tablename__ = "gestionale_disabledtimeslot"
    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, index=True)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)
    reason = db.Column(db.String(255))

    def to_dict(self) -> dict:
        return {
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "reason": self.reason,
        }

class Reservation(db.Model):
    __tablename__ = "gestionale_reservation"
    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(db.String(50), nullable=False, index=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    phone_number = db.Column(db.String(32), nullable=False)
    email = db.Column(db.String(254), nullable=False)
    guests = db.Column(db.Integer, nullable=False, default=1)
    reservation_date = db.Column(db.Date, nullable=False, index=True)
    reservation_time = db.Column(db.Time, nullable=False)
    cookie_consent = db.Column(db.Boolean, nullable=False, default=False)
    profiling_consent = db.Column(db.Boolean, nullable=False, default=False)
    promotional_sms_consent = db.Column(db.Boolean, nullable=False, default=False)
    accept_all = db.Column(db.Boolean, nullable=False, default=False)
    cancel_token = db.Column(db.String(64), index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())

    def to_dict(self) -> dict:
        return {
            "reservation_id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "reservation_date": self.reservation_date.isoformat(),
            "reservation_time": self.reservation_time.strftime("%H:%M"),
            "guests": self.guests,
        }

class Customer(db.Model):
    __tablename__ = "gestionale_customer"
    id = db.Column(db.Integer, primary_key=True)
    phone_number = db.Column(db.String(32), nullable=False, unique=True, index=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    numero_prenotazioni = db.Column(db.Integer, nullable=False, default=1)
