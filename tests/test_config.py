import pytest

from braceria import create_app
from braceria.config import ConfigError, engine_options
from conftest import TEST_CONFIG


def _config(**overrides):
    config = dict(TEST_CONFIG)
    config.update(overrides)
    return config


def test_missing_database_fails_fast():
    with pytest.raises(ConfigError, match="DATABASE_URL"):
        create_app(_config(SQLALCHEMY_DATABASE_URI=None))


def test_missing_public_base_url_fails_fast():
    with pytest.raises(ConfigError, match="PUBLIC_BASE_URL"):
        create_app(_config(PUBLIC_BASE_URL=""))


def test_mail_settings_required_when_enabled():
    with pytest.raises(ConfigError) as exc:
        create_app(_config(SMTP_HOST=None, RESTAURANT_EMAIL=None))
    assert "SMTP_HOST" in str(exc.value)
    assert "RESTAURANT_EMAIL" in str(exc.value)


def test_mail_settings_optional_when_disabled():
    app = create_app(_config(MAIL_ENABLED=False, SMTP_HOST=None, RESTAURANT_EMAIL=None))
    assert app.config["MAIL_ENABLED"] is False


def test_conflict_status_limited_to_400_or_409():
    with pytest.raises(ConfigError, match="CONFLICT_STATUS"):
        create_app(_config(CONFLICT_STATUS=418))


def test_postgres_engine_gets_timeouts():
    options = engine_options("postgresql+psycopg2://u:p@db:5432/braceria", 5)
    assert options["connect_args"]["connect_timeout"] == 5
    assert options["connect_args"]["options"] == "-c statement_timeout=5000"
    assert options["pool_pre_ping"] is True


def test_sqlite_engine_gets_busy_timeout():
    assert engine_options("sqlite:///local.db", 7) == {"connect_args": {"timeout": 7}}


def test_log_level_is_case_insensitive():
    app = create_app(_config(LOG_LEVEL="info"))
    assert app.config["LOG_LEVEL"] == "info"


def test_db_parts_must_be_complete():
    with pytest.raises(ConfigError) as exc:
        create_app(_config(
            SQLALCHEMY_DATABASE_URI="postgresql+psycopg2://db:5432",
            DATABASE_URL=None,
            DB_HOST="db",
            DB_NAME=None,
            DB_USER=None,
        ))
    assert "DB_NAME" in str(exc.value)
    assert "DB_USER" in str(exc.value)
