import asyncio
import unittest

from city_search.domain.geocoding.errors import (
    InvalidQueryError,
    ResolveTimeoutError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from city_search.domain.geocoding.schemas import RawPlace
from city_search.services.location_service import LocationService


def place(id, name, country, feature_code="PPL", population=None, admin1=None) -> RawPlace:
    return RawPlace(
        id=id,
        name=name,
        country=country,
        feature_code=feature_code,
        population=population,
        admin1=admin1,
        latitude=0.0,
        longitude=0.0,
    )


class StubGeocodingClient:
    """
    Call-counting stand-in for GeocodingClient.
    """

    def __init__(self, answers=None, delay=0.0, errors=None, delays=None):
        self.answers = answers or {}
        self.delay = delay
        self.delays = delays or {}
        self.errors = errors or {}
        self.calls = []
        self.closed = False

    async def search(self, query, *, count=10, timeout=None):
        self.calls.append((query, count))
        delay = self.delays.get(query, self.delay)
        if delay:
            await asyncio.sleep(delay)
        if query in self.errors:
            raise self.errors[query]
        return list(self.answers.get(query, []))

    async def aclose(self):
        self.closed = True

    def primary_calls(self, query):
        return [c for c in self.calls if c == (query, 50)]


JAPAN_PRIMARY = [
    place(1861060, "Japan", "Japan", "PCLI"),
    place(1850147, "Tokyo", "Japan", "PPLC", 8_336_599),
    place(111, "Japan", "United States", "PPL", 300),
]

JAPAN_SUPPLEMENTARY = {
    "Tokyo": [place(1850147, "Tokyo", "Japan", "PPLC", 8_336_599)],
    "Osaka": [place(1853909, "Osaka", "Japan", "PPLA", 2_592_413, admin1="Osaka")],
    "Kyoto": [place(1857910, "Kyoto", "Japan", "PPLA", 1_459_640, admin1="Kyoto")],
    "Yokohama": [place(1848354, "Yokohama", "Japan", "PPLA", 3_574_443, admin1="Kanagawa")],
    "Nagoya": [place(1856057, "Nagoya", "Japan", "PPLA", 2_191_279, admin1="Aichi")],
}


class TestLocationService(unittest.IsolatedAsyncioTestCase):
    def make_service(self, client, **kwargs) -> LocationService:
        return LocationService(client=client, **kwargs)

    async def test_city_query_scenario(self):
        client = StubGeocodingClient({"Tokyo": [place(1850147, "Tokyo", "Japan", "PPLC")]})
        service = self.make_service(client)

        cities = await service.resolve("Tokyo")

        self.assertEqual(len(cities), 1)
        self.assertEqual(cities[0].name, "Tokyo")
        self.assertEqual(cities[0].country, "Japan")
        self.assertEqual(cities[0].display_name, "Tokyo, Japan")

    async def test_no_matches_is_empty_list(self):
        service = self.make_service(StubGeocodingClient())
        self.assertEqual(await service.resolve("xyzabc123notreal"), [])

    async def test_short_query_rejected_without_upstream_call(self):
        client = StubGeocodingClient()
        service = self.make_service(client)

        for query in ("", " ", "a", "  b  "):
            with self.assertRaises(InvalidQueryError):
                await service.resolve(query)

        self.assertEqual(client.calls, [])

    async def test_repeat_calls_are_cached(self):
        client = StubGeocodingClient({"paris": [place(2988507, "Paris", "France", "PPLC")]})
        service = self.make_service(client)

        first = await service.resolve("paris")
        second = await service.resolve("  PARIS ")

        self.assertEqual(first, second)
        self.assertEqual(len(client.calls), 1)

    async def test_returned_list_is_a_copy(self):
        client = StubGeocodingClient({"paris": [place(2988507, "Paris", "France", "PPLC")]})
        service = self.make_service(client)

        first = await service.resolve("paris")
        first.clear()

        self.assertEqual(len(await service.resolve("paris")), 1)

    async def test_concurrent_identical_queries_share_one_upstream_call(self):
        client = StubGeocodingClient(
            {"paris": [place(2988507, "Paris", "France", "PPLC")]},
            delay=0.02,
        )
        service = self.make_service(client)

        results = await asyncio.gather(*[service.resolve("paris") for _ in range(10)])

        self.assertEqual(len(client.calls), 1)
        self.assertTrue(all(r == results[0] for r in results))
        self.assertEqual(len(service.coalescer), 0)

    async def test_country_query_returns_major_cities_capital_first(self):
        answers = {"Japan": JAPAN_PRIMARY}
        answers.update(JAPAN_SUPPLEMENTARY)
        client = StubGeocodingClient(answers)
        service = self.make_service(client)

        cities = await service.resolve("Japan")

        self.assertTrue(1 <= len(cities) <= 25)
        self.assertTrue(all(c.country == "Japan" for c in cities))
        self.assertEqual(cities[0].name, "Tokyo")
        self.assertEqual(
            [c.name for c in cities],
            ["Tokyo", "Yokohama", "Osaka", "Nagoya", "Kyoto"],
        )
        names = [c.display_name for c in cities]
        self.assertEqual(len(names), len(set(names)))
        self.assertEqual(len(client.primary_calls("Japan")), 1)

    async def test_supplementary_failures_do_not_fail_resolution(self):
        answers = {"Japan": JAPAN_PRIMARY}
        client = StubGeocodingClient(
            answers,
            errors={
                "Osaka": UpstreamUnavailableError("down"),
                "Kyoto": UpstreamTimeoutError("slow"),
            },
        )
        service = self.make_service(client)

        cities = await service.resolve("Japan")

        self.assertEqual([c.name for c in cities], ["Tokyo"])

    async def test_supplementary_lookups_are_cached(self):
        answers = {"Japan": JAPAN_PRIMARY, "japan": JAPAN_PRIMARY}
        answers.update(JAPAN_SUPPLEMENTARY)
        client = StubGeocodingClient(answers)
        service = self.make_service(client)

        await service.resolve("Japan")
        calls_after_first = len(client.calls)
        service.cache.cities.clear()
        await service.resolve("Japan")

        self.assertEqual(len(client.calls), calls_after_first)

    async def test_primary_failure_propagates(self):
        client = StubGeocodingClient(errors={"Tokyo": UpstreamUnavailableError("down")})
        service = self.make_service(client)

        with self.assertRaises(UpstreamUnavailableError):
            await service.resolve("Tokyo")

        self.assertEqual(len(service.coalescer), 0)

    async def test_failed_resolution_is_not_cached(self):
        client = StubGeocodingClient(errors={"Tokyo": UpstreamUnavailableError("down")})
        service = self.make_service(client)

        with self.assertRaises(UpstreamUnavailableError):
            await service.resolve("Tokyo")

        client.errors.clear()
        client.answers["Tokyo"] = [place(1850147, "Tokyo", "Japan", "PPLC")]

        self.assertEqual(len(await service.resolve("Tokyo")), 1)
        self.assertEqual(len(client.calls), 2)

    async def test_slow_primary_exceeds_budget(self):
        client = StubGeocodingClient(delay=1.0)
        service = self.make_service(client, resolve_timeout=0.05)

        with self.assertRaises(ResolveTimeoutError) as ctx:
            await service.resolve("Tokyo")

        self.assertEqual(ctx.exception.code, "TIMEOUT")

    async def test_budget_expiry_keeps_finished_supplementary_lookups(self):
        answers = {"Japan": JAPAN_PRIMARY}
        answers.update(JAPAN_SUPPLEMENTARY)
        client = StubGeocodingClient(answers, delays={"Tokyo": 5})
        service = self.make_service(client, resolve_timeout=0.3)

        cities = await asyncio.wait_for(service.resolve("Japan"), timeout=2)

        self.assertEqual(
            [c.name for c in cities],
            ["Tokyo", "Yokohama", "Osaka", "Nagoya", "Kyoto"],
        )
        self.assertEqual(len(client.calls), 11)

    async def test_aclose_closes_client(self):
        client = StubGeocodingClient()
        service = self.make_service(client)

        await service.aclose()

        self.assertTrue(client.closed)


if __name__ == "__main__":
    unittest.main()
