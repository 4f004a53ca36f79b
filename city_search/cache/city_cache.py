from typing import Any, Dict, List, Optional, Sequence, Tuple

from city_search.cache.base import BoundedCache
from city_search.cache.keys import CacheKeys
from city_search.cache.ttl import CacheTTL
from city_search.config import settings
from city_search.domain.geocoding.schemas import CityOption, RawPlace


class CitySearchCache:
    """
    Cache for ranked city lists and raw geocoding lookups.

    Values are stored as tuples so cached results cannot be mutated
    through a returned list.
    """

    def __init__(
        self,
        *,
        cities: Optional[BoundedCache[Tuple[CityOption, ...]]] = None,
        places: Optional[BoundedCache[Tuple[RawPlace, ...]]] = None,
    ):
        self.cities = cities or BoundedCache(
            max_size=settings.CITY_CACHE_MAX_SIZE,
            default_ttl=CacheTTL.CITY_SEARCH,
        )
        self.places = places or BoundedCache(
            max_size=settings.PLACES_CACHE_MAX_SIZE,
            default_ttl=CacheTTL.GEOCODE,
        )

    # ─────────────────────────────────────────────
    # Ranked city lists
    # ─────────────────────────────────────────────

    def get_cities(self, *, query: str) -> Optional[List[CityOption]]:
        cached = self.cities.get(CacheKeys.city_search(query))
        if cached is None:
            return None
        return list(cached)

    def set_cities(self, *, query: str, cities: Sequence[CityOption]) -> None:
        self.cities.set(CacheKeys.city_search(query), tuple(cities))

    # ─────────────────────────────────────────────
    # Raw geocoding lookups
    # ─────────────────────────────────────────────

    def get_places(self, *, query: str, count: int) -> Optional[List[RawPlace]]:
        cached = self.places.get(CacheKeys.geocode(query, count))
        if cached is None:
            return None
        return list(cached)

    def set_places(self, *, query: str, count: int, places: Sequence[RawPlace]) -> None:
        self.places.set(CacheKeys.geocode(query, count), tuple(places))

    def stats(self) -> Dict[str, Any]:
        return {
            "cities": self.cities.stats(),
            "places": self.places.stats(),
        }
