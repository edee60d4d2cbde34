"""Business rules for the product lifecycle.

Visibility: listing, search, range and count paths only ever see active
products; lookup by id sees soft-deleted products too. Deletion only flips
``active`` to False. Each call runs in its own transaction: reads in a
read-only scope, writes in a single read-write scope that covers the whole
read-modify-write.
"""

from decimal import Decimal

from loguru import logger

from src.inventory.core.services.database.db_session import DbSessionService
from src.inventory.entities._base import Page
from src.inventory.entities.product import Product, ProductPayload, ProductRepository


class ProductService:
    def __init__(self, database_service: DbSessionService) -> None:
        self._db = database_service

    def list_active(self) -> list[Product]:
        logger.info("Fetching all active products")
        with self._db.read_only_scope() as session:
            return ProductRepository(session).list_active()

    def list_active_page(
        self, page: int, size: int, sort_by: str = "id", sort_dir: str = "asc"
    ) -> Page[Product]:
        logger.info(
            "Fetching active products page={} size={} sort={} {}",
            page,
            size,
            sort_by,
            sort_dir,
        )
        with self._db.read_only_scope() as session:
            return ProductRepository(session).list_active_page(page, size, sort_by, sort_dir)

    def get_by_id(self, product_id: int) -> Product | None:
        """Return the product even when it has been soft-deleted."""
        logger.info("Fetching product with id: {}", product_id)
        with self._db.read_only_scope() as session:
            return ProductRepository(session).get(product_id)

    def create(self, data: ProductPayload) -> Product:
        logger.info("Creating new product: {}", data.name)
        product = Product(**data.model_dump())
        with self._db.session_scope() as session:
            return ProductRepository(session).save(product)

    def update(self, product_id: int, data: ProductPayload) -> Product | None:
        """Overwrite name, description, price, quantity and active.

        This is a full replace: fields the caller omitted take the payload
        defaults. Returns None when no product has this id.
        """
        logger.info("Updating product with id: {}", product_id)
        with self._db.session_scope() as session:
            repository = ProductRepository(session)
            row = repository.get_row(product_id, for_update=True)
            if row is None:
                return None
            replacement = Product(id=row.id, **data.model_dump())
            return repository.save(replacement)

    def delete(self, product_id: int) -> bool:
        """Soft delete. Returns False when no product has this id."""
        logger.info("Soft deleting product with id: {}", product_id)
        with self._db.session_scope() as session:
            repository = ProductRepository(session)
            row = repository.get_row(product_id, for_update=True)
            if row is None:
                return False
            current = Product.model_validate(row, from_attributes=True)
            repository.save(current.model_copy(update={"active": False}))
            return True

    def search_by_name(self, name: str, page: int, size: int) -> Page[Product]:
        logger.info("Searching products with name containing: {}", name)
        with self._db.read_only_scope() as session:
            return ProductRepository(session).search_by_name_active(name, page, size)

    def in_price_range(self, min_price: Decimal, max_price: Decimal) -> list[Product]:
        logger.info("Fetching products in price range: {} - {}", min_price, max_price)
        with self._db.read_only_scope() as session:
            return ProductRepository(session).find_in_price_range(min_price, max_price)

    def low_stock(self, threshold: int) -> list[Product]:
        logger.info("Fetching products with stock at or below: {}", threshold)
        with self._db.read_only_scope() as session:
            return ProductRepository(session).find_low_stock(threshold)

    def total_active_count(self) -> int:
        with self._db.read_only_scope() as session:
            return ProductRepository(session).count_active()
