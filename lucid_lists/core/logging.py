# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Structured JSON logging: machine-parseable, one JSON line per record.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from lucid_lists.core.config import SERVICE_NAME, settings


class JSONFormatter(logging.Formatter):
    """Emit every log record as a single JSON line tagged with its component."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "component": _component(record.name),
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_data["error"] = str(record.exc_info[1])
            log_data["error_type"] = type(record.exc_info[1]).__name__
        return json.dumps(log_data)


def _component(logger_name: str) -> str | None:
    prefix = SERVICE_NAME + "."
    if logger_name.startswith(prefix):
        return logger_name[len(prefix):]
    return None


def resolve_level(level: str) -> int:
    value = getattr(logging, level.strip().upper(), None)
    return value if isinstance(value, int) else logging.INFO


def get_logger(component: str | None = None) -> logging.Logger:
    """Return the service logger, or a child tagged with ``component``."""
    logger = logging.getLogger(SERVICE_NAME)
    if not any(isinstance(h.formatter, JSONFormatter) for h in logger.handlers):
        logger.setLevel(resolve_level(settings.LOG_LEVEL))
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    return logger.getChild(component) if component else logger
