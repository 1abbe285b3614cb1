from __future__ import annotations

import logging
from threading import Lock

from core.price_book.builtin_provider import BuiltinPriceBookProvider
from core.price_book.file_provider import FilePriceBookProvider
from core.price_book.loader import require_complete_matrix
from core.price_book.provider import PriceBookProvider
from core.price_book.types import PriceBook, PriceBookBackend
from core.settings import get_settings
from schemas.pricing_matrix import PricingMatrix
from schemas.service_package import ServicePackage

logger = logging.getLogger(__name__)


class PriceBookManager:
    """Holds the active price book. Calculations read an immutable snapshot."""

    _instance: "PriceBookManager | None" = None
    _lock = Lock()

    def __init__(self, provider: PriceBookProvider) -> None:
        self._provider = provider
        self._price_book = self._load(provider)

    @staticmethod
    def _load(provider: PriceBookProvider) -> PriceBook:
        matrix = provider.load_matrix()
        require_complete_matrix(matrix, source=provider.backend_name)
        packages = provider.load_packages()
        price_book = PriceBook.create(
            backend=PriceBookBackend(provider.backend_name),
            matrix=matrix,
            packages=packages,
        )
        logger.info(
            "Loaded price book backend=%s packages=%s",
            provider.backend_name,
            len(price_book.packages),
        )
        return price_book

    @classmethod
    def configure(cls, provider: PriceBookProvider) -> "PriceBookManager":
        with cls._lock:
            cls._instance = cls(provider)
            return cls._instance

    @classmethod
    def configure_from_settings(cls) -> "PriceBookManager":
        settings = get_settings()
        if settings.price_book_backend == PriceBookBackend.FILE.value:
            if not settings.pricing_matrix_path or not settings.service_packages_path:
                raise RuntimeError(
                    "PRICING_MATRIX_PATH and SERVICE_PACKAGES_PATH are required when PRICE_BOOK_BACKEND=file"
                )
            provider: PriceBookProvider = FilePriceBookProvider(
                matrix_path=settings.pricing_matrix_path,
                packages_path=settings.service_packages_path,
            )
        else:
            provider = BuiltinPriceBookProvider()

        return cls.configure(provider)

    @classmethod
    def get_instance(cls) -> "PriceBookManager":
        if cls._instance is None:
            return cls.configure_from_settings()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            cls._instance = None

    def reload(self) -> PriceBook:
        price_book = self._load(self._provider)
        with self._lock:
            self._price_book = price_book
        return price_book

    @property
    def provider(self) -> PriceBookProvider:
        return self._provider

    @property
    def price_book(self) -> PriceBook:
        return self._price_book

    @property
    def matrix(self) -> PricingMatrix:
        return self._price_book.matrix

    @property
    def packages(self) -> tuple[ServicePackage, ...]:
        return self._price_book.packages
