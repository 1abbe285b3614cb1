from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.v1 import pricing_route
from core.price_book import PriceBook, PriceBookBackend
from core.pricing_rules import DEFAULT_PRICING_MATRIX, DEFAULT_SERVICE_PACKAGES


def _price_book(packages=None) -> PriceBook:
    return PriceBook.create(
        backend=PriceBookBackend.BUILTIN,
        matrix=DEFAULT_PRICING_MATRIX,
        packages=packages if packages is not None else DEFAULT_SERVICE_PACKAGES,
    )


def _build_app(price_book: PriceBook | None = None) -> FastAPI:
    book = price_book or _price_book()
    app = FastAPI()
    app.include_router(pricing_route.router, prefix="/v1")
    app.dependency_overrides[pricing_route.get_price_book] = lambda: book
    return app


def _factors(**overrides) -> dict:
    payload = {
        "property_type": "single_family",
        "square_footage": 2000,
        "pest_type": "general",
        "severity": "light",
        "frequency": "one_time",
    }
    payload.update(overrides)
    return payload


def test_calculate_route_returns_price_and_breakdown():
    client = TestClient(_build_app())

    response = client.post("/v1/pricing/calculate", json={"factors": _factors(severity="critical")})
    assert response.status_code == 200

    payload = response.json()
    assert payload["success"] is True
    assert payload["message"] == "Price calculated successfully"
    price = payload["data"]["price"]
    assert price["base_price"] == 17500
    assert price["suggested_price"] == 39375
    assert price["adjustments"][0]["name"] == "Infestation Level"
    assert payload["data"]["breakdown"].endswith("Total: $393.75")


def test_calculate_route_honours_is_recurring_flag():
    client = TestClient(_build_app())

    response = client.post(
        "/v1/pricing/calculate",
        json={"factors": _factors(frequency="quarterly", contract_length_months=24), "is_recurring": True},
    )
    assert response.status_code == 200
    price = response.json()["data"]["price"]
    assert price["suggested_price"] == 6056
    assert price["annual_value"] == 24224


def test_calculate_route_rejects_out_of_range_factor():
    client = TestClient(_build_app())

    response = client.post("/v1/pricing/calculate", json={"factors": _factors(square_footage=-10)})
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "VALIDATION_FAILED"
    assert response.json()["detail"]["details"]["field"] == "square_footage"


def test_calculate_route_rejects_unknown_enum_value():
    client = TestClient(_build_app())

    response = client.post("/v1/pricing/calculate", json={"factors": _factors(pest_type="dragons")})
    assert response.status_code == 422


def test_tiered_options_route_uses_all_packages_by_default():
    client = TestClient(_build_app())

    response = client.post("/v1/pricing/tiered-options", json={"factors": _factors()})
    assert response.status_code == 200

    options = response.json()["data"]
    assert [option["tier"] for option in options] == ["basic", "standard", "premium"]
    assert [option["is_recommended"] for option in options] == [False, True, False]
    assert options[0]["comparison_points"][0]["included"] == {
        "basic": False,
        "standard": True,
        "premium": True,
    }


def test_tiered_options_route_filters_by_package_ids():
    client = TestClient(_build_app())

    response = client.post(
        "/v1/pricing/tiered-options",
        json={"factors": _factors(), "package_ids": ["pkg-premium", "pkg-basic"]},
    )
    assert response.status_code == 200
    assert [option["name"] for option in response.json()["data"]] == ["Total Defense", "Basic Protection"]


def test_tiered_options_route_reports_unknown_package():
    client = TestClient(_build_app())

    response = client.post(
        "/v1/pricing/tiered-options",
        json={"factors": _factors(), "package_ids": ["pkg-gold"]},
    )
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "RESOURCE_NOT_FOUND"
    assert response.json()["detail"]["details"]["resource_id"] == "pkg-gold"


def test_quick_estimate_route_accepts_partial_assessment():
    client = TestClient(_build_app())

    response = client.post(
        "/v1/pricing/quick-estimate",
        json={
            "assessment": {"square_footage": 2000, "pest_findings": [{"pest_type": "ants", "severity": "light"}]},
            "pest_type": "ants",
            "frequency": "one_time",
        },
    )
    assert response.status_code == 200
    assert response.json()["data"]["suggested_price"] == 15000


def test_packages_route_hides_inactive_packages():
    basic, standard, premium = DEFAULT_SERVICE_PACKAGES
    book = _price_book([basic, standard.model_copy(update={"is_active": False}), premium])
    client = TestClient(_build_app(book))

    response = client.get("/v1/pricing/packages")
    assert response.status_code == 200
    assert [package["id"] for package in response.json()["data"]] == ["pkg-basic", "pkg-premium"]

    response = client.get("/v1/pricing/packages", params={"include_inactive": True})
    assert len(response.json()["data"]) == 3


def test_matrix_route_returns_active_matrix():
    client = TestClient(_build_app())

    response = client.get("/v1/pricing/matrix")
    assert response.status_code == 200

    matrix = response.json()["data"]
    assert matrix["currency"] == "USD"
    assert matrix["pest_base_prices"]["termites"]["one_time"] == 200000
    assert matrix["distance_pricing"]["max_charge"] == 7500
