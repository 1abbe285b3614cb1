import json

import pytest
from fastapi import HTTPException

from core import settings as settings_module
from core.errors import ConfigurationError, resource_not_found
from core.response_envelope import (
    error_payload,
    http_exception_response,
    internal_error_response,
    success_payload,
)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    settings_module.get_settings.cache_clear()
    yield
    settings_module.get_settings.cache_clear()


def _use_env(monkeypatch: pytest.MonkeyPatch, *, env: str, debug: bool) -> None:
    monkeypatch.setenv("ENV", env)
    monkeypatch.setenv("DEBUG_INCLUDE_ERROR_DETAILS", "true" if debug else "false")
    monkeypatch.setenv("PRICE_BOOK_BACKEND", "builtin")


def _price_book_read_error() -> ConfigurationError:
    return ConfigurationError(
        "Price book file could not be read",
        {"path": "/srv/pricing/pricing_matrix.json", "reason": "No such file or directory"},
    )


def test_success_payload_includes_meta_and_request_id():
    payload = success_payload(
        data={"value": 1},
        message="ok",
        meta={"currency": "USD"},
        request_id="req-123",
    )
    assert payload["success"] is True
    assert payload["meta"]["currency"] == "USD"
    assert payload["requestId"] == "req-123"


def test_error_payload_includes_request_id():
    payload = error_payload(
        message="failed",
        data={"code": "X"},
        request_id="req-999",
    )
    assert payload["success"] is False
    assert payload["data"]["code"] == "X"
    assert payload["requestId"] == "req-999"


def test_app_exception_is_unwrapped_into_code_and_details():
    response = http_exception_response(resource_not_found("Service package", "pkg-gold"))

    assert response.status_code == 404
    assert response.body == (
        b'{"success":false,"message":"Service package not found","data":'
        b'{"code":"RESOURCE_NOT_FOUND","details":{"resource":"Service package","resource_id":"pkg-gold"}}}'
    )


def test_configuration_error_details_are_hidden_in_production(monkeypatch: pytest.MonkeyPatch):
    _use_env(monkeypatch, env="production", debug=True)

    response = http_exception_response(_price_book_read_error())

    assert response.status_code == 500
    payload = json.loads(response.body)
    assert payload["message"] == "Price book file could not be read"
    assert payload["data"]["code"] == "PRICING_CONFIGURATION_ERROR"
    assert payload["data"]["details"] is None
    assert b"/srv/pricing" not in response.body


def test_configuration_error_details_are_hidden_without_debug_flag(monkeypatch: pytest.MonkeyPatch):
    _use_env(monkeypatch, env="development", debug=False)

    payload = json.loads(http_exception_response(_price_book_read_error()).body)

    assert payload["data"]["details"] is None


def test_configuration_error_details_are_shown_when_debugging_outside_production(
    monkeypatch: pytest.MonkeyPatch,
):
    _use_env(monkeypatch, env="development", debug=True)

    payload = json.loads(http_exception_response(_price_book_read_error()).body)

    assert payload["data"]["details"]["path"] == "/srv/pricing/pricing_matrix.json"


def test_client_error_details_are_always_returned(monkeypatch: pytest.MonkeyPatch):
    _use_env(monkeypatch, env="production", debug=False)

    payload = json.loads(http_exception_response(resource_not_found("Service package", "pkg-gold")).body)

    assert payload["data"]["details"]["resource_id"] == "pkg-gold"


def test_unhandled_error_message_is_hidden_in_production(monkeypatch: pytest.MonkeyPatch):
    _use_env(monkeypatch, env="production", debug=True)

    response = internal_error_response(RuntimeError("matrix path /srv/pricing is unreadable"))

    payload = json.loads(response.body)
    assert response.status_code == 500
    assert payload["data"] == {"code": "INTERNAL_ERROR", "details": None}


def test_plain_http_exception_keeps_message():
    response = http_exception_response(HTTPException(status_code=400, detail="Bad request"))

    assert response.status_code == 400
    assert b'"message":"Bad request"' in response.body
    assert b'"code":"HTTP_EXCEPTION"' in response.body
