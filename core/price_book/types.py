from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from schemas.pricing_matrix import PricingMatrix
from schemas.service_package import ServicePackage


class PriceBookBackend(str, Enum):
    BUILTIN = "builtin"
    FILE = "file"


@dataclass(frozen=True)
class PriceBook:
    backend: PriceBookBackend
    matrix: PricingMatrix
    packages: tuple[ServicePackage, ...]
    loaded_at: str

    @classmethod
    def create(
        cls,
        *,
        backend: PriceBookBackend,
        matrix: PricingMatrix,
        packages: list[ServicePackage] | tuple[ServicePackage, ...],
    ) -> "PriceBook":
        return cls(
            backend=backend,
            matrix=matrix,
            packages=tuple(packages),
            loaded_at=datetime.now(timezone.utc).isoformat(),
        )

    def package_by_id(self, package_id: str) -> ServicePackage | None:
        return next((package for package in self.packages if package.id == package_id), None)
