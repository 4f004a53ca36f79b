import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from city_search.api.errors import register_error_handlers
from city_search.api.router import api_router
from city_search.config import settings
from city_search.security.rate_limiter import RateLimiter
from city_search.services.geocoding_client import GeocodingClient
from city_search.services.location_service import LocationService

logger = logging.getLogger(__name__)


def create_app(
    *,
    location_service: Optional[LocationService] = None,
    rate_limiter: Optional[RateLimiter] = None,
) -> FastAPI:
    """
    Build the API application.

    Services passed in are used as-is and left open on shutdown;
    otherwise they are built at startup and closed on shutdown.
    """
    logging.basicConfig(level=settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = location_service is None
        app.state.location_service = location_service or LocationService(
            client=GeocodingClient(),
        )
        app.state.rate_limiter = rate_limiter or RateLimiter()
        logger.info(f"{settings.APP_NAME} started ({settings.ENV})")
        try:
            yield
        finally:
            if owned:
                await app.state.location_service.aclose()

    app = FastAPI(title="City Search", lifespan=lifespan)

    # 1. Enable CORS for the search-box frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 2. Error mapping and API routes
    register_error_handlers(app)
    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--host", type=str, default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    print("Server starting...")
    print(f"Search API at: http://127.0.0.1:{args.port}/api/cities?q=tokyo")

    uvicorn.run("city_search.main:app", host=args.host, port=args.port, reload=settings.DEBUG)
