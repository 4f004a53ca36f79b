from fastapi import APIRouter, Depends

from city_search.api.dependencies import get_location_service, get_rate_limiter
from city_search.config import settings
from city_search.security.rate_limiter import RateLimiter
from city_search.services.location_service import LocationService

router = APIRouter()


@router.get("/health", summary="Health check")
async def health_check(
    service: LocationService = Depends(get_location_service),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    """
    Basic health check endpoint with cache occupancy.
    """
    return {
        "status": "ok",
        "service": settings.APP_NAME,
        "cache": service.cache.stats(),
        "in_flight": len(service.coalescer),
        "rate_limited_clients": len(limiter),
    }
