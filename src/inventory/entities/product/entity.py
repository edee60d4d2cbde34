"""Entity: Product."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from src.inventory.entities._base import Entity


class Product(Entity):
    """A stocked product as stored, including soft-deleted ones."""

    name: str
    description: str | None = None
    price: Decimal
    quantity: int = 0
    active: bool = True

    @field_serializer("price", when_used="json")
    def _price_as_number(self, price: Decimal) -> float:
        return float(price)

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.description == other.description
            and self.price == other.price
            and self.quantity == other.quantity
            and self.active == other.active
        )

    def __hash__(self) -> int:
        return hash((self.id, self.name, self.price, self.quantity, self.active))


class ProductPayload(BaseModel):
    """Request body for create and full-replace update.

    Unknown keys (including a client-supplied ``id``) are ignored.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    quantity: int = Field(default=0, ge=0)
    active: bool = True

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value
