from __future__ import annotations

from fastapi import APIRouter, Depends

from core.errors import resource_not_found
from core.price_book import PriceBook, PriceBookManager
from core.response_envelope import document_response
from schemas.quote import PriceCalculationRequest, QuickEstimateRequest, TieredOptionsRequest
from services.pricing_service import calculate_price, format_price_breakdown, generate_quick_estimate
from services.tiered_options_service import calculate_tiered_options

router = APIRouter(prefix="/pricing", tags=["Pricing"])

_PRICE_EXAMPLE = {
    "base_price": 17500,
    "adjustments": [],
    "subtotal": 17500,
    "suggested_price": 17500,
    "price_per_visit": 17500,
    "visits_per_year": 1,
    "annual_value": 17500,
    "currency": "USD",
    "clamp": None,
}

_CONFIGURATION_ERROR_EXAMPLE = {
    "success": False,
    "message": "Pricing matrix has no 'pest_base_prices' entry for 'termites'",
    "data": {
        "code": "PRICING_CONFIGURATION_ERROR",
        "details": None,
    },
}


def get_price_book() -> PriceBook:
    return PriceBookManager.get_instance().price_book


@router.get("/matrix")
@document_response(message="Pricing matrix fetched successfully")
async def get_pricing_matrix(price_book: PriceBook = Depends(get_price_book)):
    return price_book.matrix


@router.get("/packages")
@document_response(message="Service packages fetched successfully", success_example=[])
async def list_service_packages(
    include_inactive: bool = False,
    price_book: PriceBook = Depends(get_price_book),
):
    if include_inactive:
        return list(price_book.packages)
    return [package for package in price_book.packages if package.is_active]


@router.post("/calculate")
@document_response(
    message="Price calculated successfully",
    success_example={"price": _PRICE_EXAMPLE, "breakdown": "Base Price: $175.00\n\nTotal: $175.00"},
    response_codes={422: "Pricing factors are out of range"},
    error_examples={500: _CONFIGURATION_ERROR_EXAMPLE},
)
async def calculate_quote_price(
    payload: PriceCalculationRequest,
    price_book: PriceBook = Depends(get_price_book),
):
    price = calculate_price(payload.factors, price_book.matrix, payload.is_recurring)
    return {"price": price, "breakdown": format_price_breakdown(price)}


@router.post("/tiered-options")
@document_response(
    message="Tiered options calculated successfully",
    success_example=[],
    response_codes={404: "Service package not found", 422: "Pricing factors are out of range"},
)
async def calculate_quote_tiered_options(
    payload: TieredOptionsRequest,
    price_book: PriceBook = Depends(get_price_book),
):
    if payload.package_ids is None:
        packages = list(price_book.packages)
    else:
        packages = []
        for package_id in payload.package_ids:
            package = price_book.package_by_id(package_id)
            if package is None:
                raise resource_not_found("Service package", package_id)
            packages.append(package)

    return calculate_tiered_options(payload.factors, packages, price_book.matrix)


@router.post("/quick-estimate")
@document_response(message="Quick estimate calculated successfully", success_example=_PRICE_EXAMPLE)
async def calculate_quick_estimate(
    payload: QuickEstimateRequest,
    price_book: PriceBook = Depends(get_price_book),
):
    return generate_quick_estimate(
        payload.assessment,
        payload.pest_type,
        payload.frequency,
        price_book.matrix,
        service_month=payload.service_month,
    )
