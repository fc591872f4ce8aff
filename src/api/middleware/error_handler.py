"""Error handling middleware and exception handlers.

Every failure leaves the API as the same JSON envelope::

    {"error": {"code": ..., "message": ..., "details": {...}, "request_id": ...}}
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from src.commons.telemetry.logger import get_logger
from src.domain.exceptions import BlobOperationException, DomainException

logger = get_logger(__name__)


class APIError(Exception):
    """Error raised by route handlers with an explicit code and status."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


def _error_body(
    request: Request,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
            "request_id": getattr(request.state, "request_id", "unknown"),
        }
    }


def _to_api_error(exc: Exception) -> APIError:
    """Translate any exception into an APIError, logging it on the way.

    Blob operation failures are client-visible 400s naming the failed
    operation. Anything unrecognized becomes an opaque 500.
    """
    if isinstance(exc, APIError):
        logger.warning(
            f"API error: {exc.code}",
            extra={"error_code": exc.code, "error_message": exc.message},
        )
        return exc

    if isinstance(exc, BlobOperationException):
        operation = exc.operation.value
        logger.warning(
            f"Blob operation failed: {exc}",
            extra={"operation": operation},
        )
        return APIError(
            code="BAD_REQUEST",
            message=exc.message,
            details={"operation": operation},
        )

    if isinstance(exc, DomainException):
        logger.warning(f"Domain error: {exc}")
        return APIError(code="DOMAIN_ERROR", message=str(exc))

    logger.exception(f"Unexpected error: {exc}")
    return APIError(
        code="INTERNAL_ERROR",
        message="An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _handle_exception(request: Request, exc: Exception) -> JSONResponse:
    error = _to_api_error(exc)
    return JSONResponse(
        status_code=error.status_code,
        content=_error_body(request, error.code, error.message, error.details),
    )


async def domain_exception_handler(request: Request, exc: Exception) -> Response:
    """Exception handler for errors raised inside route handlers."""
    return _handle_exception(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for API and domain errors on the application."""
    app.add_exception_handler(APIError, domain_exception_handler)
    app.add_exception_handler(DomainException, domain_exception_handler)


async def error_handler_middleware(
    request: Request,
    call_next: RequestResponseEndpoint,
) -> Response:
    """Middleware turning exceptions that escaped the handlers into JSON.

    Args:
        request: HTTP request.
        call_next: Next handler in chain.

    Returns:
        HTTP response.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        return _handle_exception(request, exc)
