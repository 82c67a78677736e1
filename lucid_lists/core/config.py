# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration: env-driven, read once at startup.
Every key has a default, so loading never fails.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

SERVICE_NAME = "lucid-lists-backend"

DEFAULT_JWT_SECRET = "your-super-secret-jwt-key-change-in-production"
DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173,"
    "http://localhost:3000,"
    "http://localhost:8080,"
    "http://localhost:8082,"
    "http://localhost:8081"
)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    # Database
    DATABASE_URL: str = ""  # full URL for hosted deployments
    DB_HOST: str = "localhost"
    DB_PORT: str = "5432"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "password"
    DB_NAME: str = "lucid_lists"
    DB_SSLMODE: str = "disable"

    # Server
    SERVER_PORT: str = "8080"
    SERVER_HOST: str = "localhost"

    # Application
    APP_ENV: str = "development"
    LOG_LEVEL: str = "info"

    # Authentication
    JWT_SECRET: str = DEFAULT_JWT_SECRET

    # CORS
    CORS_ALLOWED_ORIGINS: tuple[str, ...] = tuple(DEFAULT_CORS_ORIGINS.split(","))

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def insecure_jwt_secret(self) -> bool:
        return self.JWT_SECRET == DEFAULT_JWT_SECRET


def _get_env(environ: Mapping[str, str], key: str, default: str) -> str:
    value = environ.get(key, "")
    return value if value else default


def _cors_origins(environ: Mapping[str, str]) -> tuple[str, ...]:
    origins = _get_env(environ, "CORS_ALLOWED_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
    frontend_port = _get_env(environ, "FRONTEND_PORT", "")
    if frontend_port:
        dynamic_origin = f"http://localhost:{frontend_port}"
        if all(origin.strip() != dynamic_origin for origin in origins):
            origins.append(dynamic_origin)
    return tuple(origins)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build a Settings value from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    return Settings(
        DATABASE_URL=_get_env(env, "DATABASE_URL", ""),
        DB_HOST=_get_env(env, "DB_HOST", "localhost"),
        DB_PORT=_get_env(env, "DB_PORT", "5432"),
        DB_USER=_get_env(env, "DB_USER", "postgres"),
        DB_PASSWORD=_get_env(env, "DB_PASSWORD", "password"),
        DB_NAME=_get_env(env, "DB_NAME", "lucid_lists"),
        DB_SSLMODE=_get_env(env, "DB_SSLMODE", "disable"),
        SERVER_PORT=_get_env(env, "PORT", "8080"),
        SERVER_HOST=_get_env(env, "SERVER_HOST", "localhost"),
        APP_ENV=_get_env(env, "APP_ENV", "development"),
        LOG_LEVEL=_get_env(env, "LOG_LEVEL", "info"),
        JWT_SECRET=_get_env(env, "JWT_SECRET", DEFAULT_JWT_SECRET),
        CORS_ALLOWED_ORIGINS=_cors_origins(env),
    )


settings = load_settings()
