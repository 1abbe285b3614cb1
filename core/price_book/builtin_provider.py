from __future__ import annotations

from core.price_book.provider import PriceBookProvider
from core.price_book.types import PriceBookBackend
from core.pricing_rules import DEFAULT_PRICING_MATRIX, DEFAULT_SERVICE_PACKAGES
from schemas.pricing_matrix import PricingMatrix
from schemas.service_package import ServicePackage


class BuiltinPriceBookProvider(PriceBookProvider):
    backend_name = PriceBookBackend.BUILTIN.value

    def load_matrix(self) -> PricingMatrix:
        return DEFAULT_PRICING_MATRIX

    def load_packages(self) -> list[ServicePackage]:
        return list(DEFAULT_SERVICE_PACKAGES)
