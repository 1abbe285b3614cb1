from __future__ import annotations

from typing import Protocol

from schemas.pricing_matrix import PricingMatrix
from schemas.service_package import ServicePackage


class PriceBookProvider(Protocol):
    backend_name: str

    def load_matrix(self) -> PricingMatrix:
        ...

    def load_packages(self) -> list[ServicePackage]:
        ...
