"""Observability tests — JSON log lines and idempotent setup."""

import json
import logging

from registrar.core.errors import PersistenceError
from registrar.infrastructure.observability import JSONFormatter, setup_logging


def _record(msg="hello", **extra):
    record = logging.LogRecord("registrar.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "registrar.test"
    assert payload["message"] == "hello"
    assert "timestamp" in payload


def test_formatter_surfaces_error_extras():
    err = PersistenceError("disk full", "grades")
    payload = json.loads(JSONFormatter().format(_record(err.message, **err.to_log_extra())))
    assert payload["error_code"] == "PERSISTENCE_WRITE_FAILED"
    assert payload["collection"] == "grades"
    assert payload["severity"] == "critical"


def test_formatter_keeps_non_ascii():
    line = JSONFormatter().format(_record("Génie Logiciel", recipient="10000001"))
    assert "Génie Logiciel" in line
    assert json.loads(line)["recipient"] == "10000001"


def test_setup_logging_replaces_its_own_handler():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        first = setup_logging("DEBUG", "json")
        second = setup_logging("WARNING", "text")
        ours = [h for h in root.handlers if h.get_name() == "registrar"]
        assert ours == [second]
        assert first not in root.handlers
        assert root.level == logging.WARNING
        assert not isinstance(second.formatter, JSONFormatter)
    finally:
        for handler in list(root.handlers):
            if handler not in before:
                root.removeHandler(handler)
        root.setLevel(level)
