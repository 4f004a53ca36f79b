import asyncio
import logging
from typing import List, Optional

from city_search.cache.city_cache import CitySearchCache
from city_search.cache.coalescer import RequestCoalescer
from city_search.cache.keys import CacheKeys
from city_search.config import settings
from city_search.domain.geocoding.augmenter import CountryAugmenter
from city_search.domain.geocoding.classifier import QueryClassifier
from city_search.domain.geocoding.errors import InvalidQueryError, ResolveTimeoutError
from city_search.domain.geocoding.ranker import CandidateRanker
from city_search.domain.geocoding.schemas import CityOption, RawPlace
from city_search.services.geocoding_client import GeocodingClient

logger = logging.getLogger(__name__)


class LocationService:
    """
    Resolves a free-text search-box query into ranked city candidates.

    Flow:
    cache -> primary lookup -> classify -> (country) augment -> rank -> cache

    Built once per application and shared by request handlers. The cache and
    coalescer are the only shared mutable state.
    """

    MIN_QUERY_LENGTH = 2

    def __init__(
        self,
        *,
        client: GeocodingClient,
        cache: Optional[CitySearchCache] = None,
        coalescer: Optional[RequestCoalescer] = None,
        classifier: Optional[QueryClassifier] = None,
        augmenter: Optional[CountryAugmenter] = None,
        ranker: Optional[CandidateRanker] = None,
        resolve_timeout: Optional[float] = None,
        primary_count: Optional[int] = None,
        supplementary_count: Optional[int] = None,
        primary_timeout: Optional[float] = None,
        supplementary_timeout: Optional[float] = None,
    ):
        self.client = client
        self.cache = cache or CitySearchCache()
        self.coalescer = coalescer or RequestCoalescer()
        self.classifier = classifier or QueryClassifier()
        self.augmenter = augmenter or CountryAugmenter()
        self.ranker = ranker or CandidateRanker()

        self.resolve_timeout = (
            resolve_timeout
            if resolve_timeout is not None
            else settings.RESOLVE_TIMEOUT
        )
        self.primary_count = primary_count or settings.GEOCODING_RESULT_COUNT
        self.supplementary_count = (
            supplementary_count or settings.GEOCODING_SUPPLEMENTARY_COUNT
        )
        self.primary_timeout = (
            primary_timeout
            if primary_timeout is not None
            else settings.GEOCODING_TIMEOUT
        )
        self.supplementary_timeout = (
            supplementary_timeout
            if supplementary_timeout is not None
            else settings.GEOCODING_SUPPLEMENTARY_TIMEOUT
        )

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    async def resolve(self, query: str) -> List[CityOption]:
        """
        Return ranked candidates for `query`.

        Callers must reject queries shorter than two trimmed characters;
        such queries raise InvalidQueryError here as well.
        """
        trimmed = query.strip()
        if len(trimmed) < self.MIN_QUERY_LENGTH:
            raise InvalidQueryError("Query must be at least 2 characters long")

        cached = self.cache.get_cities(query=trimmed)
        if cached is not None:
            logger.debug(f"City search cache hit for '{CacheKeys.normalize(trimmed)}'")
            return cached

        cities = await self.coalescer.coalesce(
            CacheKeys.city_search(trimmed),
            lambda: self._resolve_uncached(trimmed),
        )
        return list(cities)

    async def aclose(self) -> None:
        await self.client.aclose()

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    async def _resolve_uncached(self, query: str) -> List[CityOption]:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.resolve_timeout

        try:
            primary = await asyncio.wait_for(
                self._lookup(query, self.primary_count, self.primary_timeout),
                timeout=self.resolve_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Primary lookup for '{query}' exceeded the resolution budget")
            raise ResolveTimeoutError(
                f"City search did not complete within {self.resolve_timeout:g}s"
            )

        classification = self.classifier.classify(query, primary)

        pool: List[RawPlace] = primary
        if classification.is_country_search:
            pool = await self.augmenter.augment(
                classification.target_country,
                primary,
                self._supplementary_lookup,
                deadline=deadline,
            )

        cities = self.ranker.rank(query, pool, classification)
        self.cache.set_cities(query=query, cities=cities)
        return cities

    async def _supplementary_lookup(self, query: str) -> List[RawPlace]:
        return await self._lookup(
            query,
            self.supplementary_count,
            self.supplementary_timeout,
        )

    async def _lookup(self, query: str, count: int, timeout: float) -> List[RawPlace]:
        """
        Provider lookup routed through the raw-places cache and the coalescer.
        """
        cached = self.cache.get_places(query=query, count=count)
        if cached is not None:
            return cached

        async def fetch() -> List[RawPlace]:
            places = await self.client.search(query, count=count, timeout=timeout)
            self.cache.set_places(query=query, count=count, places=places)
            return places

        places = await self.coalescer.coalesce(CacheKeys.geocode(query, count), fetch)
        return list(places)
