from __future__ import annotations

import json
import logging

from tokenauth.core.logger import JSONFormatter, configure_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("tokenauth.test", logging.INFO, __file__, 1, "Hello %s", ("x",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_renders_known_extras():
    payload = json.loads(JSONFormatter().format(_record(user_id=7, reason="expired", secret="s")))

    assert payload["message"] == "Hello x"
    assert payload["level"] == "INFO"
    assert payload["user_id"] == 7
    assert payload["reason"] == "expired"
    assert "secret" not in payload


def test_configure_logging_sets_root_level():
    root = logging.getLogger()
    previous = (root.level, list(root.handlers))
    try:
        configure_logging("debug")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
    finally:
        root.setLevel(previous[0])
        root.handlers[:] = previous[1]


def test_response_carries_request_id(client):
    resp = client.get("/api/v1/health")

    assert resp.headers.get("X-Request-ID")


def test_incoming_request_id_is_echoed(client):
    resp = client.get("/api/v1/health", headers={"X-Request-ID": "abc-123"})

    assert resp.headers["X-Request-ID"] == "abc-123"
