"""Error handling middleware.

All failures are rendered into the ``{success: false, error}`` envelope.
"""

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppException

logger = structlog.get_logger(__name__)


def _error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle custom application exceptions.

    Args:
        request: Request object
        exc: Application exception

    Returns:
        JSON error response
    """
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request_error",
        error_type=exc.__class__.__name__,
        error=exc.message,
        path=request.url.path,
    )
    return _error_response(exc.status_code, exc.message)


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """
    Handle HTTP exceptions.

    Args:
        request: Request object
        exc: HTTP exception

    Returns:
        JSON error response
    """
    return _error_response(exc.status_code, str(exc.detail))


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle request validation errors.

    Args:
        request: Request object
        exc: Validation exception

    Returns:
        JSON error response with the first validation problem as message
    """
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{location}: {first.get('msg', 'invalid value')}"
    else:
        message = "Request validation failed"
    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, message)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Args:
        request: Request object
        exc: Exception

    Returns:
        JSON error response carrying the exception message
    """
    logger.exception("unhandled_exception", path=request.url.path, error=str(exc))
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(exc) or "Unknown error",
    )
