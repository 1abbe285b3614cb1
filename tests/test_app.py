from __future__ import annotations

import dataclasses

import uvicorn
from fastapi.testclient import TestClient

import main
from core.price_book import PriceBookManager
from main import app


def test_health_reports_price_book():
    with TestClient(app) as client:
        response = client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["data"]["status"] == "healthy"
    assert payload["data"]["services"]["price_book"]["backend"] == "builtin"
    assert payload["data"]["services"]["price_book"]["packages"] == 3
    PriceBookManager.reset()


def test_request_id_is_echoed_in_error_envelope():
    with TestClient(app) as client:
        response = client.post(
            "/v1/pricing/calculate",
            headers={"X-Request-ID": "req-42"},
            json={
                "factors": {
                    "property_type": "single_family",
                    "square_footage": 2000,
                    "pest_type": "general",
                    "severity": "light",
                    "frequency": "one_time",
                    "number_of_units": 0,
                }
            },
        )

    assert response.status_code == 422
    assert response.headers["X-Request-ID"] == "req-42"
    payload = response.json()
    assert payload["success"] is False
    assert payload["requestId"] == "req-42"
    assert payload["data"]["code"] == "VALIDATION_FAILED"
    assert payload["data"]["details"] == {"field": "number_of_units", "value": 0}
    PriceBookManager.reset()


def test_request_validation_error_uses_envelope():
    with TestClient(app) as client:
        response = client.post("/v1/pricing/calculate", json={"factors": {"pest_type": "general"}})

    assert response.status_code == 422
    payload = response.json()
    assert payload["message"] == "Validation error"
    assert "factors.property_type" in payload["data"]["details"]["missingFields"]
    PriceBookManager.reset()


def test_serve_runs_uvicorn_with_app_path(monkeypatch):
    monkeypatch.setattr(main, "settings", dataclasses.replace(main.settings, env="development"))
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app_path, **kwargs: calls.append((app_path, kwargs)))

    main.serve(host="127.0.0.1", port=8123)

    assert calls == [("main:app", {"host": "127.0.0.1", "port": 8123, "reload": True})]
