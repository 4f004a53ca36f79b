import asyncio
import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from city_search.config import settings
from city_search.domain.geocoding.errors import (
    UpstreamBadResponseError,
    UpstreamRateLimitedError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from city_search.domain.geocoding.schemas import RawPlace

logger = logging.getLogger(__name__)


class GeocodingClient:
    """
    Thin async client for the Open-Meteo Geocoding API.
    This API is free for non-commercial use and requires no API key.

    This class:
    - performs one GET per lookup under a hard timeout
    - maps transport and HTTP failures to typed errors
    - validates every hit into a RawPlace, failing closed
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url or settings.GEOCODING_API_URL
        self.timeout = timeout if timeout is not None else settings.GEOCODING_TIMEOUT
        self._client = http_client
        self._owns_client = http_client is None

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    async def search(
        self,
        query: str,
        *,
        count: int = 10,
        timeout: Optional[float] = None,
    ) -> List[RawPlace]:
        """
        Look up places by name. An absent `results` field means no matches.
        """
        limit = timeout if timeout is not None else self.timeout

        try:
            response = await asyncio.wait_for(
                self._get(query, count, limit),
                timeout=limit,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            raise UpstreamTimeoutError(
                f"Geocoding request timed out after {limit:g}s"
            )
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(f"Geocoding service unreachable: {exc}")

        if response.status_code == 429:
            raise UpstreamRateLimitedError("Geocoding service rate limit exceeded")
        if not response.is_success:
            raise UpstreamUnavailableError(
                f"Geocoding service returned HTTP {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError:
            raise UpstreamBadResponseError("Geocoding response is not valid JSON")

        return self._parse(data)

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def _get(self, query: str, count: int, timeout: float) -> httpx.Response:
        return await self.client.get(
            self.base_url,
            params={
                "name": query,
                "count": count,
                "language": "en",
                "format": "json",
            },
            timeout=timeout,
        )

    def _parse(self, data: Any) -> List[RawPlace]:
        if not isinstance(data, dict):
            raise UpstreamBadResponseError("Geocoding response is not a JSON object")

        results = data.get("results")
        if not isinstance(results, list):
            return []

        try:
            return [RawPlace.model_validate(item) for item in results]
        except ValidationError as exc:
            logger.error(f"Malformed geocoding result: {exc}")
            raise UpstreamBadResponseError("Geocoding response has malformed results")
