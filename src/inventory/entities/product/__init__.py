"""Entity package: Product."""

from .entity import Product, ProductPayload
from .repository import InvalidSortField, ProductRepository
from .table import ProductTable

__all__ = [
    "InvalidSortField",
    "Product",
    "ProductPayload",
    "ProductRepository",
    "ProductTable",
]
