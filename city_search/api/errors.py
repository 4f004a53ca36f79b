import logging
from typing import Dict, Type

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from city_search.domain.geocoding.errors import (
    GeocodingError,
    InvalidQueryError,
    RateLimitExceededError,
    ResolveTimeoutError,
    UpstreamBadResponseError,
    UpstreamRateLimitedError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)


ERROR_STATUS: Dict[Type[GeocodingError], int] = {
    InvalidQueryError: status.HTTP_400_BAD_REQUEST,
    RateLimitExceededError: status.HTTP_429_TOO_MANY_REQUESTS,
    UpstreamRateLimitedError: status.HTTP_429_TOO_MANY_REQUESTS,
    UpstreamBadResponseError: status.HTTP_502_BAD_GATEWAY,
    UpstreamUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    UpstreamTimeoutError: status.HTTP_504_GATEWAY_TIMEOUT,
    ResolveTimeoutError: status.HTTP_504_GATEWAY_TIMEOUT,
}


def error_response(message: str, status_code: int, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": message,
            "code": code,
        },
    )


async def geocoding_error_handler(request: Request, exc: GeocodingError) -> JSONResponse:
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error(f"City search failed for {request.url.path}: {exc.code} {exc.message}")
    return error_response(exc.message, status_code, exc.code)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.url.path}")
    return error_response(
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GeocodingError, geocoding_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
