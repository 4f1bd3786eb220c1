
import os
from pathlib import Path
from dotenv import load_dotenv
from sqlalchemy.engine import URL, make_url

load_dotenv(Path(__file__).resolve().parents[1] / ".env")


class ConfigError(RuntimeError):
    pass


def _bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _database_uri() -> str | None:
    url = os.getenv("DATABASE_URL")
    if url and url.strip():
        return url.strip()
    host = os.getenv("DB_HOST")
    if not host:
        return None
    query = {}
    if os.getenv("DB_SSLMODE"):
        query["sslmode"] = os.getenv("DB_SSLMODE")
    return URL.create(
        "postgresql+psycopg2",
        username=os.getenv("DB_USER"),
        password=os.getenv("DB_PASSWORD"),
        host=host,
        port=int(os.getenv("DB_PORT", "5432")),
        database=os.getenv("DB_NAME"),
        query=query,
    ).render_as_string(hide_password=False)


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    DATABASE_URL = os.getenv("DATABASE_URL")
    DB_HOST = os.getenv("DB_HOST")
    DB_NAME = os.getenv("DB_NAME")
    DB_USER = os.getenv("DB_USER")
    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DB_TIMEOUT_SECONDS = int(os.getenv("DB_TIMEOUT_SECONDS", "10"))
    RESERVATION_ISOLATION_LEVEL = os.getenv("RESERVATION_ISOLATION_LEVEL", "SERIALIZABLE")

    RESTAURANT_ID = os.getenv("RESTAURANT_ID", "BRACERIA")
    RESTAURANT_NAME = os.getenv("RESTAURANT_NAME", "Braceria San Frediano")
    CONFLICT_STATUS = int(os.getenv("CONFLICT_STATUS", "409"))
    CUSTOMER_REFRESH_NAMES = _bool("CUSTOMER_REFRESH_NAMES", True)
    PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL")

    MAIL_ENABLED = _bool("MAIL_ENABLED", False)
    MAIL_ASYNC = _bool("MAIL_ASYNC", True)
    MAIL_SUPPRESS_SEND = _bool("MAIL_SUPPRESS_SEND", False)
    MAIL_FROM = os.getenv("MAIL_FROM")
    MAIL_TIMEOUT_SECONDS = int(os.getenv("MAIL_TIMEOUT_SECONDS", "10"))
    SMTP_HOST = os.getenv("SMTP_HOST")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USER = os.getenv("SMTP_USER")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_USE_TLS = _bool("SMTP_USE_TLS", True)
    RESTAURANT_EMAIL = os.getenv("RESTAURANT_EMAIL")

    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    PORT = int(os.getenv("PORT", "3000"))


def engine_options(uri: str, timeout: int) -> dict:
    """Per-backend connect and statement timeouts for the SQLAlchemy engine."""
    backend = make_url(uri).get_backend_name()
    if backend == "postgresql":
        return {
            "pool_pre_ping": True,
            "connect_args": {
                "connect_timeout": timeout,
                "options": f"-c statement_timeout={timeout * 1000}",
            },
        }
    if backend == "sqlite":
        return {"connect_args": {"timeout": timeout}}
    return {"pool_pre_ping": True}


def validate_config(config) -> None:
    """Raises ConfigError naming every mandatory setting that is absent."""
    missing = []
    if not config.get("SQLALCHEMY_DATABASE_URI"):
        missing.append("DATABASE_URL (or DB_HOST/DB_NAME/DB_USER/DB_PASSWORD)")
    elif config.get("DB_HOST") and not config.get("DATABASE_URL"):
        missing.extend(key for key in ("DB_NAME", "DB_USER") if not config.get(key))
    if not config.get("PUBLIC_BASE_URL"):
        missing.append("PUBLIC_BASE_URL")
    if config.get("MAIL_ENABLED"):
        for key in ("SMTP_HOST", "RESTAURANT_EMAIL"):
            if not config.get(key):
                missing.append(key)
    if missing:
        raise ConfigError("Missing required settings: " + ", ".join(missing))

    if config.get("CONFLICT_STATUS") not in (400, 409):
        raise ConfigError("CONFLICT_STATUS must be 400 or 409")
