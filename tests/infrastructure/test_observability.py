"""Structured logging tests — JSON formatter fields and handler setup."""

import json
import logging

from zargon_web.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord(
        "zargon_web.services.proxy", logging.WARNING, __file__, 1,
        "Backend error for %s", ("orders.list",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "WARNING"
    assert log["logger"] == "zargon_web.services.proxy"
    assert log["message"] == "Backend error for orders.list"
    assert "timestamp" in log


def test_json_formatter_surfaces_known_extras_only():
    log = json.loads(JSONFormatter().format(_record(
        route="orders.list", status_code=500, has_auth=True, token="secret",
    )))
    assert log["route"] == "orders.list"
    assert log["status_code"] == 500
    assert log["has_auth"] is True
    assert "token" not in log


def test_setup_logging_does_not_stack_handlers():
    before = len(logging.root.handlers)
    first = setup_logging("DEBUG", "json")
    setup_logging("WARNING", "text")
    try:
        ours = [h for h in logging.root.handlers if h.get_name() == "zargon"]
        assert len(ours) == 1
        assert logging.root.level == logging.WARNING
        assert isinstance(first.formatter, JSONFormatter)
    finally:
        for h in [h for h in logging.root.handlers if h.get_name() == "zargon"]:
            logging.root.removeHandler(h)
    assert len(logging.root.handlers) == before
