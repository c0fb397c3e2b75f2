import json
import logging

from rota_engine.core.logging import RotaJsonFormatter, request_id_var


def _format(message, level=logging.INFO):
    formatter = RotaJsonFormatter("%(timestamp) %(level) %(name) %(message)")
    record = logging.LogRecord("rota_engine.services.shift_placement", level, __file__, 1, message, None, None)
    return json.loads(formatter.format(record))


def test_record_carries_request_id_and_service():
    token = request_id_var.set("req-42")
    try:
        payload = _format("Shift 1 placed")
    finally:
        request_id_var.reset(token)

    assert payload["message"] == "Shift 1 placed"
    assert payload["request_id"] == "req-42"
    assert payload["service"] == "Rota Engine"
    assert payload["environment"] == "testing"
    assert payload["level"] == "INFO"
    assert payload["timestamp"]


def test_record_outside_a_request_has_no_request_id():
    payload = _format("startup", logging.WARNING)
    assert "request_id" not in payload
    assert payload["level"] == "WARNING"
