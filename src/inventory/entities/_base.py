from datetime import UTC, datetime
from math import ceil
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, computed_field
from pydantic import Field as PydanticField
from pydantic.alias_generators import to_camel
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Entity(BaseModel):
    """Base entity with a store-assigned integer identifier.

    Serialized with camelCase keys; snake_case is still accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int | None = PydanticField(
        default=None, description="Identifier assigned by the store"
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EntityTable(SQLModel, table=False):
    """Base table with an autoincrement primary key and audit timestamps."""

    id: int | None = Field(default=None, primary_key=True)

    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(
        default_factory=_utcnow,
        nullable=False,
        sa_column_kwargs={"onupdate": _utcnow},
    )


T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a sorted, filtered query."""

    items: list[T]
    total: int
    page: int
    size: int

    @computed_field
    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return ceil(self.total / self.size)
