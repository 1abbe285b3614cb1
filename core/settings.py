from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

SUPPORTED_PRICE_BOOK_BACKENDS = {"builtin", "file"}
SUPPORTED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _split_csv(value: str | None) -> tuple[str, ...]:
    if not value:
        return tuple()
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _env(name: str) -> str | None:
    raw_value = os.getenv(name)
    if raw_value is None:
        return None
    normalized = raw_value.strip()
    return normalized or None


def collect_missing_required_env_vars() -> list[str]:
    missing: list[str] = []

    price_book_backend = (_env("PRICE_BOOK_BACKEND") or "builtin").lower()
    if price_book_backend == "file":
        for var_name in ("PRICING_MATRIX_PATH", "SERVICE_PACKAGES_PATH"):
            if _env(var_name) is None:
                missing.append(var_name)

    return sorted(set(missing))


def collect_invalid_env_values() -> list[str]:
    invalid_values: list[str] = []

    price_book_backend = (_env("PRICE_BOOK_BACKEND") or "builtin").lower()
    if price_book_backend not in SUPPORTED_PRICE_BOOK_BACKENDS:
        invalid_values.append("PRICE_BOOK_BACKEND must be one of: builtin, file")

    log_level = (_env("LOG_LEVEL") or "INFO").upper()
    if log_level not in SUPPORTED_LOG_LEVELS:
        invalid_values.append("LOG_LEVEL must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL")

    env = (_env("ENV") or "development").lower()
    if env not in {"development", "test", "production"}:
        invalid_values.append("ENV must be one of: development, test, production")

    return invalid_values


def validate_required_environment() -> None:
    missing_vars = collect_missing_required_env_vars()
    invalid_values = collect_invalid_env_values()
    if not missing_vars and not invalid_values:
        return

    message_lines = ["Application startup blocked by invalid environment configuration."]
    if missing_vars:
        message_lines.append("")
        message_lines.append("Missing required environment variables:")
        message_lines.extend(f"- {name}" for name in missing_vars)
    if invalid_values:
        message_lines.append("")
        message_lines.append("Invalid environment values:")
        message_lines.extend(f"- {message}" for message in invalid_values)
    raise RuntimeError("\n".join(message_lines))


@dataclass(frozen=True)
class Settings:
    env: str
    cors_origins: tuple[str, ...]
    debug_include_error_details: bool
    log_level: str
    price_book_backend: str
    pricing_matrix_path: str | None
    service_packages_path: str | None

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    validate_required_environment()

    return Settings(
        env=(_env("ENV") or "development").lower(),
        cors_origins=_split_csv(os.getenv("CORS_ORIGINS")),
        debug_include_error_details=os.getenv("DEBUG_INCLUDE_ERROR_DETAILS", "false").lower()
        in {"1", "true", "yes"},
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
        price_book_backend=(_env("PRICE_BOOK_BACKEND") or "builtin").lower(),
        pricing_matrix_path=_env("PRICING_MATRIX_PATH"),
        service_packages_path=_env("SERVICE_PACKAGES_PATH"),
    )
