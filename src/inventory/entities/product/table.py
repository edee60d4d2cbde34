"""Product database table model."""

from decimal import Decimal

from sqlmodel import Field

from src.inventory.entities._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products.

    Rows are never deleted; ``active=False`` marks a soft-deleted product.
    """

    __tablename__ = "products"

    name: str = Field(max_length=255, nullable=False, index=True)
    description: str | None = Field(default=None, max_length=2000)
    price: Decimal = Field(max_digits=10, decimal_places=2, nullable=False)
    quantity: int = Field(default=0, nullable=False)
    active: bool = Field(default=True, nullable=False, index=True)
