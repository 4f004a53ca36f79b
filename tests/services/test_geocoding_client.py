import asyncio
import unittest

import httpx

from city_search.domain.geocoding.errors import (
    UpstreamBadResponseError,
    UpstreamRateLimitedError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from city_search.services.geocoding_client import GeocodingClient

API_URL = "https://geocoding.test/v1/search"

TOKYO = {
    "id": 1850147,
    "name": "Tokyo",
    "latitude": 35.6895,
    "longitude": 139.69171,
    "feature_code": "PPLC",
    "country_code": "JP",
    "country": "Japan",
    "admin1": "Tokyo",
    "population": 8336599,
    "timezone": "Asia/Tokyo",
}


def make_client(handler, timeout: float = 1.0) -> GeocodingClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeocodingClient(base_url=API_URL, http_client=http_client, timeout=timeout)


class TestGeocodingClient(unittest.IsolatedAsyncioTestCase):
    async def test_sends_expected_query_parameters(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(dict(request.url.params))
            return httpx.Response(200, json={"results": [TOKYO]})

        client = make_client(handler)
        places = await client.search("Tokyo", count=50)

        self.assertEqual(
            seen,
            {"name": "Tokyo", "count": "50", "language": "en", "format": "json"},
        )
        self.assertEqual(len(places), 1)
        self.assertEqual(places[0].id, 1850147)
        self.assertEqual(places[0].feature_code, "PPLC")
        self.assertEqual(places[0].population, 8336599)

    async def test_missing_results_means_no_matches(self):
        client = make_client(lambda request: httpx.Response(200, json={"generationtime_ms": 0.5}))
        self.assertEqual(await client.search("xyzabc123notreal"), [])

    async def test_non_array_results_means_no_matches(self):
        client = make_client(lambda request: httpx.Response(200, json={"results": None}))
        self.assertEqual(await client.search("nowhere"), [])

    async def test_invalid_json_is_bad_response(self):
        client = make_client(lambda request: httpx.Response(200, content=b"<html>oops"))
        with self.assertRaises(UpstreamBadResponseError):
            await client.search("Tokyo")

    async def test_non_object_body_is_bad_response(self):
        client = make_client(lambda request: httpx.Response(200, json=[TOKYO]))
        with self.assertRaises(UpstreamBadResponseError):
            await client.search("Tokyo")

    async def test_malformed_result_fails_closed(self):
        broken = dict(TOKYO)
        del broken["latitude"]
        client = make_client(lambda request: httpx.Response(200, json={"results": [TOKYO, broken]}))

        with self.assertRaises(UpstreamBadResponseError):
            await client.search("Tokyo")

    async def test_http_429_is_rate_limited(self):
        client = make_client(lambda request: httpx.Response(429))
        with self.assertRaises(UpstreamRateLimitedError):
            await client.search("Tokyo")

    async def test_server_error_is_unavailable(self):
        client = make_client(lambda request: httpx.Response(503))
        with self.assertRaises(UpstreamUnavailableError):
            await client.search("Tokyo")

    async def test_transport_failure_is_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)
        with self.assertRaises(UpstreamUnavailableError):
            await client.search("Tokyo")

    async def test_transport_timeout_is_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        client = make_client(handler)
        with self.assertRaises(UpstreamTimeoutError):
            await client.search("Tokyo")

    async def test_hard_timeout_bounds_slow_provider(self):
        async def handler(request):
            await asyncio.sleep(1)
            return httpx.Response(200, json={"results": [TOKYO]})

        client = make_client(handler)
        with self.assertRaises(UpstreamTimeoutError) as ctx:
            await client.search("Tokyo", timeout=0.05)

        self.assertEqual(ctx.exception.code, "TIMEOUT")

    async def test_aclose_leaves_injected_client_open(self):
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={}))
        )
        client = GeocodingClient(base_url=API_URL, http_client=http_client)

        await client.aclose()

        self.assertFalse(http_client.is_closed)
        await http_client.aclose()


if __name__ == "__main__":
    unittest.main()
