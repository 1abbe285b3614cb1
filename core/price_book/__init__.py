from core.price_book.manager import PriceBookManager
from core.price_book.types import PriceBook, PriceBookBackend

__all__ = [
    "PriceBook",
    "PriceBookBackend",
    "PriceBookManager",
]
