"""
API error handling and exception mapping.

Converts deckwright errors into HTTP responses. Only the stable ``message`` of
an error reaches the client; upstream detail is logged.
"""

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from deckwright.api.schemas.base import ErrorResponse, IssueOut
from deckwright.domain.exceptions import (
    DeckwrightError,
    SchemaValidationError,
    SynthesisFailed,
    UpstreamReason,
    UpstreamUnavailable,
)
from deckwright.infra.config.logging_config import get_logger

logger = get_logger("api.errors")

STATUS_BY_CODE = {
    "EXTRACTION_ERROR": status.HTTP_502_BAD_GATEWAY,
    "SYNTHESIS_FAILED": status.HTTP_502_BAD_GATEWAY,
    "SCHEMA_VALIDATION_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "UPSTREAM_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    "RENDER_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "INSUFFICIENT_TOKENS": status.HTTP_402_PAYMENT_REQUIRED,
    "PLAN_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


def _status_for(exc: DeckwrightError) -> int:
    if isinstance(exc, UpstreamUnavailable) and exc.reason is UpstreamReason.RATE_LIMITED:
        return status.HTTP_429_TOO_MANY_REQUESTS
    return STATUS_BY_CODE.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def _json(status_code: int, body: ErrorResponse, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        headers=headers,
    )


async def deckwright_error_handler(request: Request, exc: DeckwrightError) -> JSONResponse:
    """Handle domain errors with their stable code and message."""
    status_code = _status_for(exc)
    logger.warning("api.error", code=exc.code, status=status_code, detail=exc.detail)

    issues = None
    if isinstance(exc, (SchemaValidationError, SynthesisFailed)) and exc.issues:
        issues = [IssueOut(path=i.path, message=i.message) for i in exc.issues]

    retry_after = exc.retry_after if isinstance(exc, UpstreamUnavailable) else None
    headers = {"Retry-After": str(retry_after)} if retry_after is not None else None

    body = ErrorResponse(
        error=exc.code, detail=exc.message, issues=issues, retry_after_seconds=retry_after
    )
    return _json(status_code, body, headers)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors."""
    logger.warning("api.request.invalid", errors=len(exc.errors()))
    issues = [
        IssueOut(
            path=".".join(str(part) for part in error["loc"]),
            message=error["msg"],
        )
        for error in exc.errors()
    ]
    body = ErrorResponse(
        error="VALIDATION_ERROR", detail="Request validation failed", issues=issues
    )
    return _json(status.HTTP_422_UNPROCESSABLE_ENTITY, body)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    logger.warning("api.http_exception", status=exc.status_code, detail=str(exc.detail))
    body = ErrorResponse(error=f"HTTP_{exc.status_code}", detail=str(exc.detail))
    return _json(exc.status_code, body, getattr(exc, "headers", None))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("api.unexpected", error_type=type(exc).__name__)
    body = ErrorResponse(
        error="INTERNAL_SERVER_ERROR",
        detail="An unexpected error occurred. Please try again later.",
    )
    return _json(status.HTTP_500_INTERNAL_SERVER_ERROR, body)


def setup_error_handlers(app) -> None:
    """
    Setup error handlers for the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(DeckwrightError, deckwright_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
