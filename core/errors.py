from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    PRICING_CONFIGURATION_ERROR = "PRICING_CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(HTTPException):
    def __init__(
        self,
        *,
        status_code: int,
        code: ErrorCode,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        detail = {
            "message": message,
            "code": code.value,
            "details": details,
        }
        super().__init__(status_code=status_code, detail=detail, headers=headers)

    @property
    def code(self) -> str:
        return self.detail["code"]

    @property
    def message(self) -> str:
        return self.detail["message"]

    @property
    def details(self) -> Any:
        return self.detail["details"]


class ConfigurationError(AppException):
    """The active price book cannot price the request. Never degrade to a default price."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code=ErrorCode.PRICING_CONFIGURATION_ERROR,
            message=message,
            details=details,
        )


class PricingValidationError(AppException):
    """Caller-supplied pricing input is outside its domain."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            code=ErrorCode.VALIDATION_FAILED,
            message=message,
            details=details,
        )


def missing_matrix_entry(table: str, key: str) -> ConfigurationError:
    return ConfigurationError(
        message=f"Pricing matrix has no '{table}' entry for '{key}'",
        details={"table": table, "key": key},
    )


def invalid_factor(field: str, value: Any, reason: str) -> PricingValidationError:
    return PricingValidationError(
        message=f"Invalid pricing factor '{field}': {reason}",
        details={"field": field, "value": value},
    )


def resource_not_found(resource: str, resource_id: str | None = None) -> AppException:
    details = {"resource": resource}
    if resource_id:
        details["resource_id"] = resource_id
    return AppException(
        status_code=status.HTTP_404_NOT_FOUND,
        code=ErrorCode.RESOURCE_NOT_FOUND,
        message=f"{resource} not found",
        details=details,
    )
