import smtplib

from braceria.extensions import db, notifier
from braceria.models import Reservation
import braceria.notifications as notifications
from conftest import booking_payload, make_app


class _RecordingSMTP:
    sent = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port, self.timeout = host, port, timeout

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        pass

    def sendmail(self, sender, recipients, body):
        _RecordingSMTP.sent.append((sender, recipients, body))


class _RefusingSMTP:
    def __init__(self, *args, **kwargs):
        raise ConnectionRefusedError("smtp down")


def test_emails_queued_for_customer_and_restaurant(app, client):
    reservation_id = client.post("/api/braceria/prenota", json=booking_payload()).get_json()["id"]
    with app.app_context():
        token = db.session.get(Reservation, reservation_id).cancel_token

    assert [m.to for m in notifier.outbox] == ["a@example.com", "sala@braceria.example"]
    customer, restaurant = notifier.outbox
    link = f"https://braceria.example/api/braceria/annulla/{reservation_id}/{token}"
    assert link in customer.text
    assert link in customer.html
    assert "333000111" in restaurant.text
    assert "Anna Rossi" in restaurant.subject


def test_no_emails_for_rejected_booking(client):
    client.post("/api/braceria/prenota", json=booking_payload(cookie_consent=False))
    assert notifier.outbox == []


def test_no_emails_when_mail_disabled():
    app = make_app(MAIL_ENABLED=False)
    r = app.test_client().post("/api/braceria/prenota", json=booking_payload())
    assert r.status_code == 201
    assert notifier.outbox == []


def test_emails_sent_only_after_commit(app, client, monkeypatch):
    seen = []

    def _send(message):
        rows = db.session.query(Reservation).count()
        seen.append(rows)

    monkeypatch.setattr(notifier, "send", _send)
    r = client.post("/api/braceria/prenota", json=booking_payload())
    assert r.status_code == 201
    assert seen == [1, 1]


def test_smtp_delivery(monkeypatch):
    _RecordingSMTP.sent.clear()
    monkeypatch.setattr(notifications.smtplib, "SMTP", _RecordingSMTP)
    app = make_app(MAIL_SUPPRESS_SEND=False)
    r = app.test_client().post("/api/braceria/prenota", json=booking_payload())
    assert r.status_code == 201
    recipients = [recipients for _, recipients, _ in _RecordingSMTP.sent]
    assert recipients == [["a@example.com"], ["sala@braceria.example"]]
    assert all(sender == "Braceria <noreply@braceria.example>" for sender, _, _ in _RecordingSMTP.sent)


def test_smtp_failure_does_not_undo_reservation(monkeypatch, caplog):
    monkeypatch.setattr(notifications.smtplib, "SMTP", _RefusingSMTP)
    app = make_app(MAIL_SUPPRESS_SEND=False)
    r = app.test_client().post("/api/braceria/prenota", json=booking_payload())
    assert r.status_code == 201
    with app.app_context():
        assert db.session.query(Reservation).count() == 1
    assert "smtp down" in caplog.text


def test_deliver_reports_failure(monkeypatch):
    settings = notifications.SmtpSettings(
        host="localhost", port=1, user=None, password=None, use_tls=False, sender="x@example.com", timeout=1,
    )
    message = notifications.Message(to="a@example.com", subject="s", text="t")

    def _raise(*args):
        raise smtplib.SMTPServerDisconnected("gone")

    monkeypatch.setattr(notifications, "_smtp_send", _raise)
    assert notifier._deliver(settings, message) is False


def test_async_delivery_crash_is_logged(monkeypatch, caplog):
    def _crash(self, settings, message):
        raise RuntimeError("template exploded")

    monkeypatch.setattr(notifications.Notifier, "_deliver", _crash)
    app = make_app(MAIL_ASYNC=True, MAIL_SUPPRESS_SEND=False)
    try:
        with app.app_context():
            notifier.send(notifications.Message(to="a@example.com", subject="s", text="t"))
    finally:
        notifier.shutdown()
    assert "Email delivery crashed" in caplog.text
    assert "template exploded" in caplog.text
