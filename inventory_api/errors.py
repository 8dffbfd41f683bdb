"""
Error translation for the HTTP layer.

Kernel exceptions become ``{"code", "message"}`` JSON bodies with a status
chosen by exception type.  Storage failures get a generic message so file
paths and OS error text never reach clients.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inventory_kernel.exceptions import (
    DuplicateSkuError,
    InventoryKernelError,
    ItemNotFoundError,
    StorageError,
    ValidationError,
)
from inventory_kernel.logging_config import get_logger

logger = get_logger("api.errors")

# Checked in order; the first matching class wins.
_STATUS_BY_TYPE: tuple[tuple[type[InventoryKernelError], int], ...] = (
    (ValidationError, 400),
    (ItemNotFoundError, 404),
    (DuplicateSkuError, 409),
    (StorageError, 500),
)


class ApiAuthError(Exception):
    """Authentication failure raised by the ``require_actor`` dependency."""

    def __init__(self, status_code: int, code: str, message: str):
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(message)


def error_body(code: str, message: str) -> dict[str, str]:
    return {"code": code, "message": message}


def status_for(exc: InventoryKernelError) -> int:
    for exc_type, status in _STATUS_BY_TYPE:
        if isinstance(exc, exc_type):
            return status
    return 500


async def _kernel_error(request: Request, exc: InventoryKernelError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.error(
            "request_failed",
            exc_info=exc,
            extra={"method": request.method, "path": request.url.path},
        )
        message = "Storage unavailable" if isinstance(exc, StorageError) else "Internal error"
    else:
        message = str(exc)
    return JSONResponse(status_code=status, content=error_body(exc.code, message))


async def _auth_error(request: Request, exc: ApiAuthError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.code, exc.message))


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"{location}: {first.get('msg', 'invalid request')}" if location else "Invalid request"
    return JSONResponse(status_code=400, content=error_body(ValidationError.code, message))


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # unmatched method or path
    if exc.status_code in (404, 405):
        body = error_body("NOT_FOUND", f"No API route {request.method} {request.url.path}")
        return JSONResponse(status_code=404, content=body)
    body = error_body(f"HTTP_{exc.status_code}", str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "request_failed",
        exc_info=exc,
        extra={"method": request.method, "path": request.url.path},
    )
    return JSONResponse(status_code=500, content=error_body("INTERNAL", "Internal error"))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InventoryKernelError, _kernel_error)
    app.add_exception_handler(ApiAuthError, _auth_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unexpected_error)
