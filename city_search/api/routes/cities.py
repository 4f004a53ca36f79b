from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from city_search.api.dependencies import enforce_rate_limit, get_location_service
from city_search.domain.geocoding.schemas import CitySearchResponse
from city_search.security.validators import validate_search_query
from city_search.services.location_service import LocationService

router = APIRouter()

CACHE_CONTROL = "public, max-age=3600"


@router.get(
    "/cities",
    response_model=CitySearchResponse,
    response_model_exclude_none=True,
    summary="Search for cities and countries by name",
    dependencies=[Depends(enforce_rate_limit)],
)
async def search_cities(
    response: Response,
    q: Optional[str] = Query(None, description="Search query (e.g. 'tok', 'japan', 'new york')"),
    service: LocationService = Depends(get_location_service),
):
    """
    Autocomplete search for the destination box.

    A country name returns that country's major cities, capital first;
    anything else returns matching cities ranked by relevance. An empty
    list is a valid answer for a query with no matches.
    """
    query = validate_search_query(q)

    cities = await service.resolve(query)

    response.headers["Cache-Control"] = CACHE_CONTROL
    response.headers["CDN-Cache-Control"] = CACHE_CONTROL

    return {"cities": cities}
