"""Error types for the rate layer and the FastAPI handlers that render them.

Provider-level failures (ProviderError) never leave the provider chain;
callers only ever see AllProvidersFailed, cache absence or a rejected
currency code. Handlers below make sure no raw provider message reaches
a response body.
"""

from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
import logging

logger = logging.getLogger("ratedesk.errors")


class RateDeskError(Exception):
    pass


class ProviderError(RateDeskError):
    """One provider attempt failed (HTTP status, malformed body, missing field)."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class AllProvidersFailed(RateDeskError):
    def __init__(self, operation: str, last_error: Optional[BaseException] = None):
        detail = f"all providers failed for {operation}"
        if last_error is not None:
            detail = f"{detail}: {last_error}"
        super().__init__(detail)
        self.operation = operation
        self.last_error = last_error


class CacheAbsentOrExpired(RateDeskError):
    pass


class OfflineError(CacheAbsentOrExpired):
    """No provider answered and no cached snapshot exists."""


class InvalidCurrencyCode(RateDeskError, ValueError):
    def __init__(self, code: str):
        super().__init__(f"unsupported currency code '{code}'")
        self.code = code


class ConversionFailed(RateDeskError):
    pass


def not_found_handler(request: Request, exc):  # type: ignore
    if exc.status_code != status.HTTP_404_NOT_FOUND:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "http_error", "detail": exc.detail},
        )
    detail = exc.detail
    if detail in (None, "Not Found"):
        detail = f"No route for {request.method} {request.url.path}"
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "not_found", "detail": detail},
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": exc.errors(),
        },
    )


def invalid_currency_handler(request: Request, exc: InvalidCurrencyCode):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "invalid_currency",
            "detail": "Use valid ISO codes (e.g., USD, PKR, EUR, AED)",
            "code": exc.code,
        },
    )


def offline_handler(request: Request, exc: OfflineError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": "offline",
            "detail": "No internet/providers and no cache available",
        },
    )


def providers_unavailable_handler(request: Request, exc: RateDeskError):  # type: ignore
    logger.warning("request failed after provider fallback: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": "providers_unavailable",
            "detail": "Rate providers are unavailable, try again later.",
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
