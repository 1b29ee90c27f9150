"""
HTTP translation of domain errors.

Missing estates and denied access produce the same 404 body so a caller
cannot tell which estates exist.
"""
import logging

from fastapi import FastAPI, status
from starlette.requests import Request
from starlette.responses import JSONResponse

from estate_core.exceptions import (
    ForbiddenError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = "Not found"


async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse({"detail": NOT_FOUND_DETAIL}, status_code=status.HTTP_404_NOT_FOUND)


async def forbidden_handler(request: Request, exc: ForbiddenError):
    logger.info("access_denied path=%s estate_id=%s reason=%s", request.url.path, exc.estate_id, exc)
    return JSONResponse({"detail": NOT_FOUND_DETAIL}, status_code=status.HTTP_404_NOT_FOUND)


async def validation_handler(request: Request, exc: ValidationError):
    return JSONResponse({"detail": str(exc)}, status_code=422)


async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    logger.error("store_unavailable path=%s: %s", request.url.path, exc)
    return JSONResponse(
        {"detail": "Service temporarily unavailable"},
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ForbiddenError, forbidden_handler)
    app.add_exception_handler(ValidationError, validation_handler)
    app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)
