import json
import logging

from app.core.exceptions import ProductNotFoundError, StoreReadError
from app.core.logger import JsonFormatter
from app.core.monitoring import _before_send, _traces_sampler


def _record(**extra):
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "stock %s", (5,), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_tags_service_and_extra():
    formatter = JsonFormatter(service="Catalog", env="test")

    payload = json.loads(formatter.format(_record(sku="TEE-S")))

    assert payload["message"] == "stock 5"
    assert payload["service"] == "Catalog"
    assert payload["env"] == "test"
    assert payload["extra"] == {"sku": "TEE-S"}


def test_json_formatter_omits_empty_extra():
    payload = json.loads(JsonFormatter(service="Catalog", env="test").format(_record()))

    assert "extra" not in payload


def test_client_errors_are_not_sent_to_sentry():
    event = {"event_id": "abc"}
    exc = ProductNotFoundError(1)

    assert _before_send(event, {"exc_info": (type(exc), exc, None)}) is None


def test_server_errors_are_sent_to_sentry():
    event = {"event_id": "abc"}
    exc = StoreReadError("find_active_products")

    assert _before_send(event, {"exc_info": (type(exc), exc, None)}) is event
    assert _before_send(event, {}) is event


def test_probe_paths_are_not_traced():
    assert _traces_sampler({"asgi_scope": {"path": "/healthz"}}) == 0.0
    assert _traces_sampler({"asgi_scope": {"path": "/api/reports/low-stock"}}) == 0.1
    assert _traces_sampler({}) == 0.1
