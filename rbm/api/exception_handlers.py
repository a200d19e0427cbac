"""Exception handlers for FastAPI application.

Every error leaves the service as ``{"error": "<message>"}``.
"""
import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rbm.exceptions import CryptoError, RBMError

logger = logging.getLogger(__name__)


def format_validation_message(exc: RequestValidationError) -> str:
    """Readable message naming the first offending field"""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field_path = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = str(first.get("msg", "invalid value")).removeprefix("Value error, ")
    if not field_path:
        return message
    return f"{field_path}: {message}"


async def rbm_error_handler(request: Request, exc: RBMError) -> JSONResponse:
    """Handle errors from the RBM taxonomy"""
    if isinstance(exc, CryptoError):
        logger.warning("Secret decryption failed on %s (%s)", request.url.path, type(exc).__name__)
    elif exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": format_validation_message(exc)},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle framework HTTP errors (404 routes, 405 methods)"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log and return a generic 500"""
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )
