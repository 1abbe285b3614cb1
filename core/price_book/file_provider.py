from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.errors import ConfigurationError
from core.price_book.loader import parse_pricing_matrix, parse_service_packages
from core.price_book.provider import PriceBookProvider
from core.price_book.types import PriceBookBackend
from schemas.pricing_matrix import PricingMatrix
from schemas.service_package import ServicePackage


class FilePriceBookProvider(PriceBookProvider):
    """Reads the matrix and the package catalog from JSON documents on disk."""

    backend_name = PriceBookBackend.FILE.value

    def __init__(self, *, matrix_path: str | Path, packages_path: str | Path) -> None:
        self._matrix_path = Path(matrix_path)
        self._packages_path = Path(packages_path)

    def load_matrix(self) -> PricingMatrix:
        return parse_pricing_matrix(self._read_json(self._matrix_path), source=self._matrix_path.name)

    def load_packages(self) -> list[ServicePackage]:
        return parse_service_packages(self._read_json(self._packages_path), source=self._packages_path.name)

    @staticmethod
    def _read_json(path: Path) -> Any:
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(
                message="Price book file could not be read",
                details={"path": str(path), "reason": exc.strerror or str(exc)},
            ) from exc
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                message="Price book file is not valid JSON",
                details={"path": str(path), "line": exc.lineno, "column": exc.colno},
            ) from exc
