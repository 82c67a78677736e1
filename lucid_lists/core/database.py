# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
SQLAlchemy connection pool bootstrap.

connect() runs three gates in order: parse the descriptor, create the
engine, probe the database. Any failure aborts with a DatabaseConnectError
subclass; there are no retries.
"""
from contextlib import ExitStack
from typing import Union

import psycopg2
import psycopg2.extensions
from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from lucid_lists.core.config import Settings
from lucid_lists.core.logging import get_logger
from lucid_lists.metrics import DB_CONNECT_ATTEMPTS, DB_CONNECT_DURATION

logger = get_logger("database")

DRIVER_NAME = "postgresql+psycopg2"
MAX_POOL_CONNECTIONS = 10
MIN_POOL_CONNECTIONS = 2
POOL_RECYCLE_SECONDS = 300

SSL_MODES = frozenset({"disable", "allow", "prefer", "require", "verify-ca", "verify-full"})


class DatabaseConnectError(Exception):
    """Base class for pool establishment failures."""

    stage = "connect"


class ConfigParseError(DatabaseConnectError):
    stage = "parse"


class PoolCreationError(DatabaseConnectError):
    stage = "create"


class ConnectivityError(DatabaseConnectError):
    stage = "probe"


def _parse_error(exc: Exception) -> ConfigParseError:
    return ConfigParseError(f"failed to parse database config: {exc}")


# ── Descriptor ────────────────────────────────────────────────────────────

def build_dsn(cfg: Settings) -> Union[str, URL]:
    """Return DATABASE_URL verbatim, or a URL assembled from the DB_* fields."""
    if cfg.DATABASE_URL:
        return cfg.DATABASE_URL
    try:
        return URL.create(
            drivername=DRIVER_NAME,
            username=cfg.DB_USER,
            password=cfg.DB_PASSWORD,
            host=cfg.DB_HOST,
            port=int(cfg.DB_PORT),
            database=cfg.DB_NAME,
            query={"sslmode": cfg.DB_SSLMODE},
        )
    except (ValueError, TypeError) as exc:
        raise _parse_error(exc) from exc


def _keyword_dsn_to_url(dsn: str) -> URL:
    """Translate a libpq ``key=value`` connection string into a URL."""
    params = psycopg2.extensions.parse_dsn(dsn)
    port = params.pop("port", None)
    return URL.create(
        drivername=DRIVER_NAME,
        username=params.pop("user", None),
        password=params.pop("password", None),
        host=params.pop("host", None),
        port=int(port) if port else None,
        database=params.pop("dbname", None),
        query=params,
    )


def _check_sslmode(url: URL) -> None:
    value = url.query.get("sslmode")
    if value is None:
        return
    for mode in value if isinstance(value, tuple) else (value,):
        if mode not in SSL_MODES:
            raise ConfigParseError(
                f"failed to parse database config: invalid sslmode value: {mode!r}"
            )


def parse_dsn(dsn: Union[str, URL]) -> URL:
    try:
        url = make_url(dsn)
    except (ArgumentError, ValueError) as exc:
        if not isinstance(dsn, str) or "=" not in dsn:
            raise _parse_error(exc) from exc
        try:
            url = _keyword_dsn_to_url(dsn)
        except (psycopg2.Error, ValueError, TypeError) as kw_exc:
            raise _parse_error(kw_exc) from kw_exc
    # Hosted Postgres providers still hand out postgres:// URLs.
    if url.drivername == "postgres":
        url = url.set(drivername="postgresql")
    if url.get_backend_name() == "postgresql":
        _check_sslmode(url)
    return url


def describe_url(url: URL) -> str:
    return url.render_as_string(hide_password=True)


# ── Pool ──────────────────────────────────────────────────────────────────

def create_pool(url: URL) -> Engine:
    try:
        return create_engine(
            url,
            pool_size=MIN_POOL_CONNECTIONS,
            max_overflow=MAX_POOL_CONNECTIONS - MIN_POOL_CONNECTIONS,
            pool_pre_ping=True,
            pool_recycle=POOL_RECYCLE_SECONDS,
        )
    except (SQLAlchemyError, ImportError, TypeError) as exc:
        raise PoolCreationError(f"failed to create connection pool: {exc}") from exc


def ping(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def warm_pool(engine: Engine, size: int = MIN_POOL_CONNECTIONS) -> None:
    """Open ``size`` connections at once so they stay pooled after release."""
    with ExitStack() as stack:
        for _ in range(size):
            stack.enter_context(engine.connect())


def close_pool(engine: Engine) -> None:
    engine.dispose()
    logger.info("Connection pool disposed")


# ── Entry point ───────────────────────────────────────────────────────────

def connect(cfg: Settings) -> Engine:
    """Parse, create and probe the pool. Returns a live engine or raises."""
    outcome = "error"
    try:
        with DB_CONNECT_DURATION.time():
            if cfg.DATABASE_URL:
                logger.info("Using DATABASE_URL for database connection")
            else:
                logger.info("Using individual DB components for database connection")

            try:
                url = parse_dsn(build_dsn(cfg))
            except ConfigParseError:
                outcome = "parse_error"
                raise

            try:
                engine = create_pool(url)
            except PoolCreationError:
                outcome = "pool_error"
                raise

            try:
                ping(engine)
                warm_pool(engine)
            except SQLAlchemyError as exc:
                outcome = "connectivity_error"
                engine.dispose()
                raise ConnectivityError(f"failed to ping database: {exc}") from exc

            logger.info(
                "Connected to %s (pool min=%d max=%d)",
                describe_url(url), MIN_POOL_CONNECTIONS, MAX_POOL_CONNECTIONS,
            )
            outcome = "ok"
            return engine
    finally:
        DB_CONNECT_ATTEMPTS.labels(outcome=outcome).inc()
