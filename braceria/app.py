import logging
from datetime import date, datetime, time, timedelta, timezone
import click
from flask import Flask, jsonify
from flask.cli import with_appcontext
from flask_cors import CORS
from .extensions import db, migrate, notifier
from .config import Config, engine_options, validate_config
from .booking import cancel_reservation
from .errors import NotFoundError
from .blueprints.reservations import bp as reservations_bp, create as create_reservation_view
from .blueprints.gestionale import bp as gestionale_bp
from .models import DisabledDate, DisabledTimeSlot

SERVICE_NAME = "braceria-backend"
VERSION = "1.0.0"

def create_app(overrides: dict | None = None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    validate_config(app.config)
    app.config.setdefault(
        "SQLALCHEMY_ENGINE_OPTIONS",
        engine_options(app.config["SQLALCHEMY_DATABASE_URI"], app.config["DB_TIMEOUT_SECONDS"]),
    )

    logging.basicConfig(
        level=str(app.config["LOG_LEVEL"]).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    origins = [o.strip() for o in app.config["CORS_ORIGINS"].split(",") if o.strip()]
    CORS(app, origins=origins or "*")

    db.init_app(app)
    migrate.init_app(app, db)
    notifier.init_app(app)

    app.register_blueprint(reservations_bp, url_prefix="/api/braceria")
    app.register_blueprint(gestionale_bp, url_prefix="/gestionale")
    app.add_url_rule("/prenotazioni", endpoint="prenotazioni", view_func=create_reservation_view, methods=["POST"])

    @app.get("/health")
    def health():
        return jsonify(
            status="ok",
            service=SERVICE_NAME,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    @app.get("/")
    def index():
        return jsonify(
            service=f"Backend Prenotazioni {app.config['RESTAURANT_NAME']}",
            version=VERSION,
            endpoints={
                "health": "GET /health",
                "disabledSlots": "GET /gestionale/get-disabled-time-slots/?date=YYYY-MM-DD",
                "createReservation": "POST /api/braceria/prenota",
                "cancelReservation": "GET /api/braceria/annulla/<id>/<token>",
            },
        )

    @click.command("seed")
    @with_appcontext
    def seed_command():
        """Creates sample disabled dates and time slots."""
        db.session.query(DisabledTimeSlot).delete()
        db.session.query(DisabledDate).delete()
        db.session.commit()
        click.echo("Cleared existing disabled dates and time slots.")

        today = date.today()
        closed = [today + timedelta(days=offset) for offset in (7, 14)]
        db.session.add_all(DisabledDate(date=day) for day in closed)

        slots = [
            DisabledTimeSlot(
                date=today + timedelta(days=offset),
                start_time=time(20, 0),
                end_time=time(21, 30),
                reason="Evento privato",
            )
            for offset in (1, 3)
        ]
        db.session.add_all(slots)
        db.session.commit()
        click.echo(f"Created {len(closed)} disabled dates and {len(slots)} disabled time slots.")

    @click.command("cancel-reservation")
    @click.argument("reservation_id", type=int)
    @with_appcontext
    def cancel_command(reservation_id):
        """Cancels a reservation without its customer token."""
        try:
            cancelled = cancel_reservation(reservation_id)
        except NotFoundError as e:
            raise click.ClickException(e.message)
        click.echo(
            f"Cancelled reservation {cancelled['reservation_id']} "
            f"({cancelled['reservation_date']} {cancelled['reservation_time']})."
        )

    app.cli.add_command(seed_command)
    app.cli.add_command(cancel_command)

    return app
