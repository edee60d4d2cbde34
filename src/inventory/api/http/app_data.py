from dataclasses import dataclass

from src.inventory.core.services import DbSessionService, ProductService


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    product_service: ProductService

    @classmethod
    def from_database(cls, database_service: DbSessionService) -> "ApplicationDependencies":
        """Wire the service graph on top of one database service."""
        return cls(
            database_service=database_service,
            product_service=ProductService(database_service),
        )
