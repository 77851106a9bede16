"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.engine import URL


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def resolve_database_url() -> str:
    """Resolve DB connection string.

    Priority:
      1) DATABASE_URL (explicit)
      2) Build from PG* env vars (common Postgres convention)
      3) Fallback to local sqlite
    """

    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    host = os.getenv("PGHOST")
    user = os.getenv("PGUSER")
    database = os.getenv("PGDATABASE")
    port_raw = os.getenv("PGPORT")

    if host and user and database:
        password = os.getenv("PGPASSWORD")
        sslmode = os.getenv("PGSSLMODE", "require")

        try:
            port = int(port_raw) if port_raw else 5432
        except ValueError:
            port = 5432

        query = {"sslmode": sslmode} if sslmode else {}
        url = URL.create(
            drivername="postgresql+psycopg2",
            username=user,
            password=password,
            host=host,
            port=port,
            database=database,
            query=query,
        )
        return url.render_as_string(hide_password=False)

    return "sqlite:///./ssq.db"


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret")
    DATABASE_URL: str = resolve_database_url()
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Ingestion
    FETCH_TIMEOUT_SECONDS: float = _env_float("FETCH_TIMEOUT_SECONDS", 10.0)
    FETCH_RETRIES: int = _env_int("FETCH_RETRIES", 2)
    FETCH_BACKOFF: float = _env_float("FETCH_BACKOFF", 0.3)
    FETCH_DELAY_MIN: float = _env_float("FETCH_DELAY_MIN", 0.5)
    FETCH_DELAY_MAX: float = _env_float("FETCH_DELAY_MAX", 1.5)
    SYNTHETIC_FALLBACK_ENABLED: bool = _env_bool("SYNTHETIC_FALLBACK_ENABLED", True)
    SYNTHETIC_FALLBACK_COUNT: int = _env_int("SYNTHETIC_FALLBACK_COUNT", 10)
    INGEST_TOKEN: str | None = os.getenv("INGEST_TOKEN") or None

    # Generation
    GENERATION_MAX_ATTEMPTS: int = _env_int("GENERATION_MAX_ATTEMPTS", 1000)
    DEFAULT_USER_ID: int = _env_int("DEFAULT_USER_ID", 1)


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


@dataclass(frozen=True)
class TestingConfig(BaseConfig):
    """Test configuration: in-memory database, no pacing delay."""

    # Keeps pytest from collecting the class by its name.
    __test__ = False

    TESTING: bool = True
    DEBUG: bool = False
    DATABASE_URL: str = "sqlite://"
    FETCH_DELAY_MIN: float = 0.0
    FETCH_DELAY_MAX: float = 0.0


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
