from fastapi import APIRouter

from city_search.api.routes.cities import router as cities_router
from city_search.api.routes.health import router as health_router

api_router = APIRouter()

# ─────────────────────────────────────────────
# Public Routes
# ─────────────────────────────────────────────

api_router.include_router(
    health_router,
    tags=["Health"],
)

api_router.include_router(
    cities_router,
    tags=["Cities"],
)
