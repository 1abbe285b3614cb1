from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter, ValidationError

from core.errors import ConfigurationError
from core.validation_errors import format_validation_error_details
from schemas.pricing_matrix import PricingMatrix
from schemas.service_package import ServicePackage

_PACKAGE_LIST = TypeAdapter(list[ServicePackage])


def _config_error(message: str, exc: ValidationError, source: str) -> ConfigurationError:
    details = format_validation_error_details(
        exc.errors(include_url=False, include_context=False),
        default_location=source,
        include_raw=False,
    )
    return ConfigurationError(message=message, details=details)


def parse_pricing_matrix(payload: Any, *, source: str = "pricing_matrix") -> PricingMatrix:
    try:
        matrix = PricingMatrix.model_validate(payload)
    except ValidationError as exc:
        raise _config_error("Pricing matrix is invalid", exc, source) from exc
    require_complete_matrix(matrix, source=source)
    return matrix


def require_complete_matrix(matrix: PricingMatrix, *, source: str = "pricing_matrix") -> None:
    missing = matrix.missing_keys()
    if missing:
        raise ConfigurationError(
            message="Pricing matrix is missing entries",
            details={"source": source, "missing": missing},
        )


def parse_service_packages(payload: Any, *, source: str = "service_packages") -> list[ServicePackage]:
    try:
        packages = _PACKAGE_LIST.validate_python(payload)
    except ValidationError as exc:
        raise _config_error("Service package catalog is invalid", exc, source) from exc

    seen: set[str] = set()
    duplicates: list[str] = []
    for package in packages:
        if package.id in seen:
            duplicates.append(package.id)
        seen.add(package.id)
    if duplicates:
        raise ConfigurationError(
            message="Service package ids must be unique",
            details={"source": source, "duplicates": sorted(set(duplicates))},
        )
    return packages
