"""Entities organized by business concept.

Each entity package holds its domain model (entity.py), persistence
model (table.py) and data access layer (repository.py).
"""

from .product import InvalidSortField, Product, ProductPayload, ProductRepository, ProductTable

__all__ = [
    "InvalidSortField",
    "Product",
    "ProductPayload",
    "ProductRepository",
    "ProductTable",
]
