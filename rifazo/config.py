"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.engine import URL


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


def resolve_database_url() -> str:
    """Resolve SQL connection string.

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

    if host and user and database:
        sslmode = os.getenv("PGSSLMODE", "require")
        url = URL.create(
            drivername="postgresql+psycopg2",
            username=user,
            password=os.getenv("PGPASSWORD"),
            host=host,
            port=_env_int("PGPORT", 5432),
            database=database,
            query={"sslmode": sslmode} if sslmode else {},
        )
        return url.render_as_string(hide_password=False)

    return "sqlite:///./rifazo.db"


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret")
    TESTING: bool = False
    DB_BACKEND: str = (
        os.getenv("DB_BACKEND")
        or ("mongo" if os.getenv("MONGODB_URI") else "sql")
    ).lower().strip()  # "sql" | "mongo"

    # SQL backend
    DATABASE_URL: str = resolve_database_url()

    # Mongo backend
    MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DB: str = os.getenv("MONGODB_DB", "rifazo")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Platform
    SUPPORT_WHATSAPP_NUMBER: str = os.getenv("SUPPORT_WHATSAPP_NUMBER", "584141135956")
    PAGE_LOADER_DELAY_MS: int = _env_int("PAGE_LOADER_DELAY_MS", 500)
    MAX_FAILED_LOGIN_ATTEMPTS: int = _env_int("MAX_FAILED_LOGIN_ATTEMPTS", 5)
    LOCKOUT_MINUTES: int = _env_int("LOCKOUT_MINUTES", 15)

    # Seed accounts, created only when the users collection is empty.
    SEED_INITIAL_USERS: bool = _env_bool("SEED_INITIAL_USERS", True)
    SEED_FOUNDER_PASSWORD: str = os.getenv("SEED_FOUNDER_PASSWORD", "27978916")
    SEED_SUPPORT_PASSWORD: str = os.getenv("SEED_SUPPORT_PASSWORD", "soporte2025")


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
    """Test configuration: in-memory sqlite, no seeding."""

    APP_ENV: str = "testing"
    TESTING: bool = True
    DEBUG: bool = False
    DB_BACKEND: str = "sql"
    DATABASE_URL: str = "sqlite:///:memory:"
    SEED_INITIAL_USERS: bool = False
    SECRET_KEY: str = "test-secret"


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
