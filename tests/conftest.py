import pytest
from sqlalchemy import func, select

from braceria import create_app
from braceria.extensions import db, notifier

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "DB_HOST": None,
    "PUBLIC_BASE_URL": "https://braceria.example/",
    "RESTAURANT_EMAIL": "sala@braceria.example",
    "MAIL_ENABLED": True,
    "MAIL_SUPPRESS_SEND": True,
    "MAIL_ASYNC": False,
    "SMTP_HOST": "smtp.braceria.example",
    "MAIL_FROM": "Braceria <noreply@braceria.example>",
    "LOG_LEVEL": "WARNING",
}


def make_app(**overrides):
    config = dict(TEST_CONFIG)
    config.update(overrides)
    app = create_app(config)
    with app.app_context():
        db.create_all()
    return app


@pytest.fixture(autouse=True)
def _clear_outbox():
    notifier.outbox.clear()
    yield
    notifier.outbox.clear()


@pytest.fixture
def app():
    app = make_app()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def add_rows(app):
    def _add(*rows):
        with app.app_context():
            db.session.add_all(rows)
            db.session.commit()
    return _add


@pytest.fixture
def count_rows(app):
    def _count(model, *where):
        with app.app_context():
            stmt = select(func.count()).select_from(model)
            if where:
                stmt = stmt.where(*where)
            return db.session.execute(stmt).scalar_one()
    return _count


def booking_payload(**overrides) -> dict:
    payload = {
        "first_name": "Anna",
        "last_name": "Rossi",
        "phone_number": "333000111",
        "email": "a@example.com",
        "reservation_date": "2025-06-01",
        "reservation_time": "20:00",
        "cookie_consent": True,
    }
    payload.update(overrides)
    return payload
