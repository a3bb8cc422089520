"""Map domain exceptions to the storefront's JSON error bodies.

Every error body carries ``success: false``. Insufficient stock also reports
the units actually available so the client can offer a smaller quantity. A
write that lost a race on an order's event stream comes back as 409.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError

from storefront.errors import InsufficientStock

logger = structlog.get_logger(__name__)

GENERIC_ERROR = "Something went wrong, please try again"
VERSION_CONFLICT_ERROR = "The order was changed by another request, reload it and try again"


def _first_message(messages) -> str:
    if isinstance(messages, dict):
        for value in messages.values():
            if isinstance(value, list) and value:
                return str(value[0])
            if value:
                return str(value)
    return str(messages)


async def insufficient_stock_handler(request: Request, exc: InsufficientStock) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Insufficient stock",
            "available": exc.available,
        },
    )


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    # Protean's own ObjectNotFoundError only carries its payload in args
    messages = getattr(exc, "messages", None) or (exc.args[0] if exc.args else str(exc))
    return JSONResponse(
        status_code=404,
        content={"success": False, "error": _first_message(messages)},
    )


async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("Concurrent update rejected", path=request.url.path, method=request.method)
    return JSONResponse(status_code=409, content={"success": False, "error": VERSION_CONFLICT_ERROR})


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": _first_message(exc.messages),
            "details": exc.messages,
        },
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"success": False, "error": GENERIC_ERROR})


def register_error_handlers(app: FastAPI) -> None:
    """Install the handlers; the most specific exception type wins."""
    app.add_exception_handler(InsufficientStock, insufficient_stock_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
