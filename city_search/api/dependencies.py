import logging

from fastapi import Depends, Request, Response

from city_search.domain.geocoding.errors import RateLimitExceededError
from city_search.security.rate_limiter import RateLimiter, get_client_ip
from city_search.services.location_service import LocationService

logger = logging.getLogger(__name__)


def get_location_service(request: Request) -> LocationService:
    """
    The application-wide resolver, built once at startup.
    """
    return request.app.state.location_service


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


async def enforce_rate_limit(
    request: Request,
    response: Response,
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> None:
    """
    Reject callers over their quota; annotate allowed responses.
    """
    client_ip = get_client_ip(request)
    status = limiter.check(client_ip)

    if not status.allowed:
        logger.warning(f"Rate limit exceeded for {client_ip}")
        raise RateLimitExceededError(reset_at=status.reset_at)

    response.headers["X-RateLimit-Remaining"] = str(status.remaining)
    response.headers["X-RateLimit-Reset"] = str(int(status.reset_at))
