"""Structured Logging — JSON formatter and setup for registrar observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (collection, entity_key, error_code, ...) surfaced when present
    - setup_logging is idempotent: a second call replaces, never duplicates, its handler

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called once on startup from bootstrap.init_registry
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS: tuple[str, ...] = (
    "collection", "entity_key", "error_code", "error_category", "severity",
    "recipient", "notification_type", "observer", "namespace", "path",
)

_HANDLER_NAME = "registrar"


class JSONFormatter(logging.Formatter):
    """Format logs as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure root logging for the application."""
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
