# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Lucid Lists Backend startup
===========================
Loads settings from the environment, then opens the PostgreSQL connection
pool and verifies it:

    settings ─► parse descriptor ─► create pool ─► ping

Run directly as a connectivity check: exits 0 when the pool is ready,
1 when any stage fails.
"""
import sys

from sqlalchemy.engine import Engine

from lucid_lists.core.config import Settings, settings
from lucid_lists.core.database import DatabaseConnectError, close_pool, connect
from lucid_lists.core.logging import get_logger

logger = get_logger()


def startup(cfg: Settings = settings) -> Engine:
    """Open the database pool for ``cfg``. Raises DatabaseConnectError."""
    logger.info(
        "Starting env=%s host=%s port=%s",
        cfg.APP_ENV, cfg.SERVER_HOST, cfg.SERVER_PORT,
    )
    if cfg.is_production and cfg.insecure_jwt_secret:
        logger.warning("JWT_SECRET is the placeholder default, set it before serving traffic")
    return connect(cfg)


def main(cfg: Settings = settings) -> int:
    try:
        engine = startup(cfg)
    except DatabaseConnectError as exc:
        logger.error("Database %s failed: %s", exc.stage, exc)
        return 1
    logger.info("Database connection pool ready")
    close_pool(engine)
    return 0


if __name__ == "__main__":
    sys.exit(main())
