"""
Reservation emails over SMTP.

Delivery runs on a small thread pool after the reservation is committed.
A failed send is logged and dropped; it never reaches the HTTP response.
"""
import atexit
import logging
import smtplib
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from flask import current_app, render_template, url_for
from .errors import NotifierError

logger = logging.getLogger(__name__)


@dataclass
class Message:
    to: str
    subject: str
    text: str
    html: str | None = None


@dataclass
class SmtpSettings:
    host: str
    port: int
    user: str | None
    password: str | None
    use_tls: bool
    sender: str
    timeout: int


class Notifier:
    def __init__(self, app=None):
        self.outbox: list[Message] = []
        self._executor: ThreadPoolExecutor | None = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        app.extensions["notifier"] = self
        if app.config["MAIL_ENABLED"] and app.config["MAIL_ASYNC"] and self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="mail")
            atexit.register(self.shutdown)

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def send(self, message: Message) -> None:
        config = current_app.config
        if not config["MAIL_ENABLED"]:
            return
        if config["MAIL_SUPPRESS_SEND"]:
            self.outbox.append(message)
            return

        settings = SmtpSettings(
            host=config["SMTP_HOST"],
            port=config["SMTP_PORT"],
            user=config["SMTP_USER"],
            password=config["SMTP_PASSWORD"],
            use_tls=config["SMTP_USE_TLS"],
            sender=config["MAIL_FROM"] or config["SMTP_USER"] or config["RESTAURANT_EMAIL"],
            timeout=config["MAIL_TIMEOUT_SECONDS"],
        )
        if self._executor is not None:
            future = self._executor.submit(self._deliver, settings, message)
            future.add_done_callback(_log_crash)
        else:
            self._deliver(settings, message)

    def _deliver(self, settings: SmtpSettings, message: Message) -> bool:
        try:
            _smtp_send(settings, message)
        except (smtplib.SMTPException, OSError) as e:
            err = NotifierError(f"Email to {message.to} failed: {e}")
            logger.exception("%s", err.message)
            return False
        logger.info("Email '%s' sent to %s", message.subject, message.to)
        return True


def _log_crash(future) -> None:
    err = future.exception()
    if err is not None:
        logger.error("Email delivery crashed", exc_info=err)


def _smtp_send(settings: SmtpSettings, message: Message) -> None:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = message.subject
    msg["From"] = settings.sender
    msg["To"] = message.to
    msg.attach(MIMEText(message.text, "plain", "utf-8"))
    if message.html:
        msg.attach(MIMEText(message.html, "html", "utf-8"))

    with smtplib.SMTP(settings.host, settings.port, timeout=settings.timeout) as server:
        if settings.use_tls:
            server.starttls()
        if settings.user and settings.password:
            server.login(settings.user, settings.password)
        server.sendmail(settings.sender, [message.to], msg.as_string())


def cancellation_link(reservation: dict, token: str) -> str:
    base = current_app.config["PUBLIC_BASE_URL"].rstrip("/")
    path = url_for("reservations.cancel", reservation_id=reservation["reservation_id"], token=token)
    return base + path


def notify_customer(reservation: dict, email: str, token: str) -> None:
    ctx = {
        "reservation": reservation,
        "restaurant": current_app.config["RESTAURANT_NAME"],
        "cancel_url": cancellation_link(reservation, token),
    }
    current_app.extensions["notifier"].send(Message(
        to=email,
        subject=f"{ctx['restaurant']}: prenotazione confermata",
        text=render_template("email/customer_confirmation.txt", **ctx),
        html=render_template("email/customer_confirmation.html", **ctx),
    ))


def notify_restaurant(reservation: dict, email: str, phone_number: str) -> None:
    ctx = {"reservation": reservation, "email": email, "phone_number": phone_number}
    current_app.extensions["notifier"].send(Message(
        to=current_app.config["RESTAURANT_EMAIL"],
        subject=(
            f"Nuova prenotazione: {reservation['first_name']} {reservation['last_name']} "
            f"{reservation['reservation_date']} {reservation['reservation_time']}"
        ),
        text=render_template("email/restaurant_alert.txt", **ctx),
    ))
