"""Product API router.

Maps HTTP verbs onto ProductService calls and wraps results in the JSON
envelope clients expect (``{"products": [...]}`` or ``{"product": {...}}``
plus paging and echo fields). Any failure from the service layer becomes a 500
envelope with an ``error``/``message`` pair; unknown ids become a 404 that
echoes the id, including ids too large for any stored row.
"""

from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, Path, Query, Request
from loguru import logger
from starlette.responses import JSONResponse

from src.inventory.api.http.deps import get_product_service, require_api_key
from src.inventory.api.http.errors import not_found, store_failure, validation_failure
from src.inventory.core.services import ProductService
from src.inventory.entities.product import InvalidSortField, Product, ProductPayload
from src.inventory.runtime.context import get_config

# Largest value a 64-bit store integer column can hold
STORE_INT_MAX = 2**63 - 1

router = APIRouter(
    prefix="/products",
    tags=["products"],
    dependencies=[Depends(require_api_key)],
)


def _dump(product: Product) -> dict[str, Any]:
    return product.model_dump(mode="json", by_alias=True)


def _dump_all(products: list[Product]) -> list[dict[str, Any]]:
    return [_dump(product) for product in products]


def _page_size(page: int, size: int | None) -> int | JSONResponse:
    api = get_config().api
    if size is None:
        size = api.default_page_size
    if size > api.max_page_size:
        return validation_failure(
            "Invalid page size", f"size must be at most {api.max_page_size}"
        )
    if page * size > STORE_INT_MAX:
        return validation_failure("Invalid page", "page is beyond the last possible row")
    return size


def _storable(product_id: int) -> bool:
    return -STORE_INT_MAX - 1 <= product_id <= STORE_INT_MAX


@router.get("", response_model=None)
def list_products(
    request: Request,
    page: int = Query(0, ge=0, le=STORE_INT_MAX),
    size: int | None = Query(None, ge=1),
    sort_by: str = Query("id", alias="sortBy"),
    sort_dir: str = Query("asc", alias="sortDir"),
    service: ProductService = Depends(get_product_service),
) -> dict[str, Any] | JSONResponse:
    """List active products, paged and sorted."""
    page_size = _page_size(page, size)
    if isinstance(page_size, JSONResponse):
        return page_size

    logger.info(
        "GET /products - page: {}, size: {}, sortBy: {}, sortDir: {}",
        page,
        page_size,
        sort_by,
        sort_dir,
    )
    try:
        result = service.list_active_page(page, page_size, sort_by, sort_dir)
    except InvalidSortField as e:
        return validation_failure("Invalid sort field", str(e))
    except Exception as e:
        return store_failure(request, "Failed to fetch products", e)

    return {
        "products": _dump_all(result.items),
        "totalCount": result.total,
        "totalPages": result.total_pages,
        "currentPage": page,
        "pageSize": page_size,
    }


@router.get("/search", response_model=None)
def search_products(
    request: Request,
    name: str = Query(...),
    page: int = Query(0, ge=0, le=STORE_INT_MAX),
    size: int | None = Query(None, ge=1),
    service: ProductService = Depends(get_product_service),
) -> dict[str, Any] | JSONResponse:
    """Case-insensitive substring search over active product names."""
    page_size = _page_size(page, size)
    if isinstance(page_size, JSONResponse):
        return page_size

    logger.info("GET /products/search - name: {}, page: {}, size: {}", name, page, page_size)
    try:
        result = service.search_by_name(name, page, page_size)
    except Exception as e:
        return store_failure(request, "Failed to search products", e)

    return {
        "products": _dump_all(result.items),
        "totalElements": result.total,
        "totalPages": result.total_pages,
        "currentPage": page,
        "pageSize": page_size,
    }


@router.get("/price-range", response_model=None)
def products_in_price_range(
    request: Request,
    min_price: Decimal = Query(..., alias="minPrice"),
    max_price: Decimal = Query(..., alias="maxPrice"),
    service: ProductService = Depends(get_product_service),
) -> dict[str, Any] | JSONResponse:
    """Active products priced between the bounds, both inclusive."""
    logger.info("GET /products/price-range - min: {}, max: {}", min_price, max_price)
    try:
        products = service.in_price_range(min_price, max_price)
    except Exception as e:
        return store_failure(request, "Failed to fetch products in price range", e)

    return {
        "products": _dump_all(products),
        "count": len(products),
        "priceRange": {"min": float(min_price), "max": float(max_price)},
    }


@router.get("/low-stock", response_model=None)
def low_stock_products(
    request: Request,
    threshold: int | None = Query(None, ge=-STORE_INT_MAX - 1, le=STORE_INT_MAX),
    service: ProductService = Depends(get_product_service),
) -> dict[str, Any] | JSONResponse:
    """Active products whose quantity is at or below the threshold."""
    if threshold is None:
        threshold = get_config().api.default_low_stock_threshold

    logger.info("GET /products/low-stock - threshold: {}", threshold)
    try:
        products = service.low_stock(threshold)
    except Exception as e:
        return store_failure(request, "Failed to fetch low stock products", e)

    return {
        "products": _dump_all(products),
        "count": len(products),
        "threshold": threshold,
    }


@router.get("/{product_id}", response_model=None)
def get_product(
    request: Request,
    product_id: int = Path(...),
    service: ProductService = Depends(get_product_service),
) -> dict[str, Any] | JSONResponse:
    """Fetch one product by id, including soft-deleted ones."""
    logger.info("GET /products/{}", product_id)
    if not _storable(product_id):
        return not_found(product_id)
    try:
        product = service.get_by_id(product_id)
    except Exception as e:
        return store_failure(request, "Failed to fetch product", e)

    if product is None:
        return not_found(product_id)
    return {"product": _dump(product)}


@router.post("", status_code=201, response_model=None)
def create_product(
    request: Request,
    payload: ProductPayload,
    service: ProductService = Depends(get_product_service),
) -> dict[str, Any] | JSONResponse:
    logger.info("POST /products - Creating product: {}", payload.name)
    try:
        product = service.create(payload)
    except Exception as e:
        return store_failure(request, "Failed to create product", e)

    return {"product": _dump(product), "message": "Product created successfully"}


@router.put("/{product_id}", response_model=None)
def update_product(
    request: Request,
    payload: ProductPayload,
    product_id: int = Path(...),
    service: ProductService = Depends(get_product_service),
) -> dict[str, Any] | JSONResponse:
    """Replace every mutable field of a product; omitted fields take their defaults."""
    logger.info("PUT /products/{} - Updating product", product_id)
    if not _storable(product_id):
        return not_found(product_id)
    try:
        product = service.update(product_id, payload)
    except Exception as e:
        return store_failure(request, "Failed to update product", e)

    if product is None:
        return not_found(product_id)
    return {"product": _dump(product), "message": "Product updated successfully"}


@router.delete("/{product_id}", response_model=None)
def delete_product(
    request: Request,
    product_id: int = Path(...),
    service: ProductService = Depends(get_product_service),
) -> dict[str, Any] | JSONResponse:
    """Soft delete: the product stays retrievable by id with ``active: false``."""
    logger.info("DELETE /products/{}", product_id)
    if not _storable(product_id):
        return not_found(product_id)
    try:
        deleted = service.delete(product_id)
    except Exception as e:
        return store_failure(request, "Failed to delete product", e)

    if not deleted:
        return not_found(product_id)
    return {"message": "Product deleted successfully", "id": product_id}
