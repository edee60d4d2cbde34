"""Error kinds and the JSON error envelope returned by the product API."""

from enum import StrEnum
from typing import Any

from fastapi import Request
from loguru import logger
from starlette.responses import JSONResponse

from src.inventory.runtime.context import get_config


class ErrorKind(StrEnum):
    NOT_FOUND = "not_found"
    VALIDATION_FAILURE = "validation_failure"
    STORE_FAILURE = "store_failure"


_STATUS = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION_FAILURE: 400,
    ErrorKind.STORE_FAILURE: 500,
}


def error_response(kind: ErrorKind, error: str, **fields: Any) -> JSONResponse:
    """Build ``{"error": ..., "code": ..., **fields}`` with the status for ``kind``."""
    content = {"error": error, "code": kind.value, **fields}
    return JSONResponse(status_code=_STATUS[kind], content=content)


def not_found(product_id: int) -> JSONResponse:
    return error_response(ErrorKind.NOT_FOUND, "Product not found", id=product_id)


def validation_failure(error: str, message: str) -> JSONResponse:
    return error_response(ErrorKind.VALIDATION_FAILURE, error, message=message)


def store_failure(request: Request, error: str, exc: Exception) -> JSONResponse:
    """500 envelope for a failed service call (store, driver or conversion error).

    The exception text is echoed only when ``app.expose_error_details`` is on;
    otherwise the client gets the request id to correlate with server logs.
    """
    request_id = getattr(request.state, "request_id", "-")
    logger.bind(error_type=type(exc).__name__).opt(exception=exc).error(error)

    if get_config().app.expose_error_details:
        return error_response(ErrorKind.STORE_FAILURE, error, message=str(exc))
    return error_response(
        ErrorKind.STORE_FAILURE,
        error,
        message="Internal Server Error",
        request_id=request_id,
    )
