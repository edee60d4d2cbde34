"""Product repository: hand-written queries over the products table."""

from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import Session, col, select
from sqlmodel.sql.expression import SelectOfScalar

from src.inventory.entities._base import Page
from src.inventory.entities.product.entity import Product
from src.inventory.entities.product.table import ProductTable

SORTABLE_FIELDS: dict[str, str] = {
    "id": "id",
    "name": "name",
    "description": "description",
    "price": "price",
    "quantity": "quantity",
    "active": "active",
    "created_at": "created_at",
    "createdAt": "created_at",
    "updated_at": "updated_at",
    "updatedAt": "updated_at",
}


class InvalidSortField(ValueError):
    """Raised when a caller asks to sort by a column that does not exist."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(
            f"Cannot sort by '{field}'; expected one of: "
            + ", ".join(sorted(set(SORTABLE_FIELDS.values())))
        )


def _order_by(sort_by: str, sort_dir: str) -> ColumnElement:
    try:
        column = col(getattr(ProductTable, SORTABLE_FIELDS[sort_by]))
    except KeyError:
        raise InvalidSortField(sort_by) from None
    return column.desc() if sort_dir.lower() == "desc" else column.asc()


class ProductRepository:
    """Data-access layer for products.

    Bound to a caller-owned session; never commits. Every query except
    ``get`` is restricted to active rows.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, row: ProductTable) -> Product:
        return Product.model_validate(row, from_attributes=True)

    def _active(self) -> SelectOfScalar[ProductTable]:
        return select(ProductTable).where(col(ProductTable.active).is_(True))

    def get_row(self, product_id: int, *, for_update: bool = False) -> ProductTable | None:
        """Fetch the mapped row, optionally locking it for the rest of the transaction."""
        statement = select(ProductTable).where(ProductTable.id == product_id)
        if for_update:
            statement = statement.with_for_update()
        return self._session.exec(statement).first()

    def get(self, product_id: int) -> Product | None:
        """Return the product with this id, active or not."""
        row = self.get_row(product_id)
        if row is None:
            return None
        return self._to_entity(row)

    def list_active(self) -> list[Product]:
        rows = self._session.exec(self._active()).all()
        return [self._to_entity(row) for row in rows]

    def count_active(self) -> int:
        statement = select(func.count()).select_from(ProductTable).where(
            col(ProductTable.active).is_(True)
        )
        return self._session.exec(statement).one()

    def _page(
        self,
        where: list[ColumnElement[bool]],
        page: int,
        size: int,
        sort_by: str,
        sort_dir: str,
    ) -> Page[Product]:
        order = _order_by(sort_by, sort_dir)

        count_statement = select(func.count()).select_from(ProductTable).where(*where)
        total = self._session.exec(count_statement).one()

        statement = (
            select(ProductTable)
            .where(*where)
            .order_by(order)
            .offset(page * size)
            .limit(size)
        )
        rows = self._session.exec(statement).all()
        return Page[Product](
            items=[self._to_entity(row) for row in rows],
            total=total,
            page=page,
            size=size,
        )

    def list_active_page(
        self, page: int, size: int, sort_by: str = "id", sort_dir: str = "asc"
    ) -> Page[Product]:
        return self._page(
            [col(ProductTable.active).is_(True)], page, size, sort_by, sort_dir
        )

    def search_by_name_active(
        self,
        name: str,
        page: int,
        size: int,
        sort_by: str = "id",
        sort_dir: str = "asc",
    ) -> Page[Product]:
        """Case-insensitive substring match on name, active rows only."""
        pattern = f"%{_escape_like(name.lower())}%"
        return self._page(
            [
                col(ProductTable.active).is_(True),
                func.lower(ProductTable.name).like(pattern, escape="\\"),
            ],
            page,
            size,
            sort_by,
            sort_dir,
        )

    def find_in_price_range(self, min_price: Decimal, max_price: Decimal) -> list[Product]:
        """Active products with ``min_price <= price <= max_price``."""
        statement = self._active().where(
            col(ProductTable.price).between(min_price, max_price)
        )
        rows = self._session.exec(statement).all()
        return [self._to_entity(row) for row in rows]

    def find_low_stock(self, threshold: int) -> list[Product]:
        """Active products with ``quantity <= threshold``."""
        statement = self._active().where(col(ProductTable.quantity) <= threshold)
        rows = self._session.exec(statement).all()
        return [self._to_entity(row) for row in rows]

    def save(self, product: Product) -> Product:
        """Insert when ``product.id`` is unset, otherwise overwrite the stored row.

        Raises:
            ValueError: If ``product.id`` is set but no such row exists.
        """
        fields = product.model_dump(exclude={"id", "created_at", "updated_at"})

        if product.id is None:
            row = ProductTable(**fields)
            self._session.add(row)
        else:
            row = self.get_row(product.id)
            if row is None:
                raise ValueError(f"Product with id {product.id} not found")
            for key, value in fields.items():
                setattr(row, key, value)
            self._session.add(row)

        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
