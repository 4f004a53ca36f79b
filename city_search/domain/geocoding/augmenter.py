import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Set

from city_search.config import settings
from city_search.domain.geocoding.country_data import (
    CITY_FEATURE_CODES,
    GENERIC_QUERY_TEMPLATES,
    major_cities_for,
)
from city_search.domain.geocoding.errors import GeocodingError
from city_search.domain.geocoding.schemas import RawPlace

logger = logging.getLogger(__name__)

Lookup = Callable[[str], Awaitable[Sequence[RawPlace]]]


class _Pool:
    """
    Ordered candidate pool deduplicated by provider id.
    """

    def __init__(self, places: Sequence[RawPlace] = ()):
        self.places: List[RawPlace] = []
        self._ids: Set[int] = set()
        for place in places:
            self.add(place)

    def add(self, place: RawPlace) -> bool:
        if place.id in self._ids:
            return False
        self._ids.add(place.id)
        self.places.append(place)
        return True

    def __contains__(self, place: RawPlace) -> bool:
        return place.id in self._ids

    def __len__(self) -> int:
        return len(self.places)


class CountryAugmenter:
    """
    Builds a richer candidate pool for country searches.

    The provider answers a bare country name with the country record and a
    handful of incidental places. The pool is topped up with supplementary
    lookups: one per listed major city when the country is in the static
    table, otherwise a few generic queries.

    Supplementary lookups run on a small worker pool but are merged in
    submission order, so first-match-wins is reproducible. Failures of
    individual lookups are logged and ignored.
    """

    POPULATION_FLOOR = 50_000

    def __init__(
        self,
        *,
        concurrency: Optional[int] = None,
        target_size: Optional[int] = None,
        max_lookups: Optional[int] = None,
        population_floor: Optional[int] = None,
    ):
        self.concurrency = concurrency or settings.AUGMENT_CONCURRENCY
        self.target_size = target_size or settings.AUGMENT_TARGET_SIZE
        self.max_lookups = max_lookups or settings.AUGMENT_MAX_LOOKUPS
        self.population_floor = (
            population_floor
            if population_floor is not None
            else self.POPULATION_FLOOR
        )

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    def filter_primary(
        self,
        country: str,
        places: Sequence[RawPlace],
    ) -> List[RawPlace]:
        """
        Keep cities and towns of the target country above the population floor.
        Unknown population is accepted.
        """
        return [place for place in places if self._accepts(country, place)]

    async def augment(
        self,
        country: str,
        primary: Sequence[RawPlace],
        lookup: Lookup,
        *,
        deadline: Optional[float] = None,
    ) -> List[RawPlace]:
        """
        Return the filtered primary pool extended by supplementary lookups.

        `deadline` is an event-loop timestamp; once it passes, the pool
        built so far, plus any lookups that already finished, is returned.
        """
        pool = _Pool(self.filter_primary(country, primary))

        major_cities = major_cities_for(country)

        if major_cities:
            names = major_cities[: self.max_lookups]

            def merge_first_match(_: str, results: Sequence[RawPlace]) -> None:
                for place in results:
                    if _same_country(country, place) and place not in pool:
                        pool.add(place)
                        break

            await self._run_lookups(
                names,
                lookup,
                merge_first_match,
                is_full=None,
                deadline=deadline,
            )
        else:
            queries = [
                template.format(country=country)
                for template in GENERIC_QUERY_TEMPLATES
            ]

            def merge_filtered(_: str, results: Sequence[RawPlace]) -> None:
                for place in self.filter_primary(country, results):
                    pool.add(place)

            await self._run_lookups(
                queries,
                lookup,
                merge_filtered,
                is_full=lambda: len(pool) >= self.target_size,
                deadline=deadline,
            )

        logger.debug(f"Augmented pool for {country}: {len(pool)} places")
        return pool.places

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    def _accepts(self, country: str, place: RawPlace) -> bool:
        if not _same_country(country, place):
            return False
        if place.feature_code not in CITY_FEATURE_CODES:
            return False
        return place.population is None or place.population >= self.population_floor

    async def _safe_lookup(self, lookup: Lookup, query: str) -> Sequence[RawPlace]:
        try:
            return await lookup(query)
        except (GeocodingError, asyncio.TimeoutError) as exc:
            logger.warning(f"Supplementary lookup '{query}' failed: {exc!r}")
            return []

    async def _run_lookups(
        self,
        queries: Sequence[str],
        lookup: Lookup,
        merge: Callable[[str, Sequence[RawPlace]], None],
        *,
        is_full: Optional[Callable[[], bool]],
        deadline: Optional[float],
    ) -> None:
        """
        Worker pool with at most `concurrency` lookups in flight.

        Results are merged strictly in `queries` order. A new lookup starts
        only after finished results have been merged, so no lookup is issued
        once the pool is full. When the deadline passes, every lookup that
        has already finished is still merged, in `queries` order, and the
        unfinished ones are skipped.
        """
        loop = asyncio.get_running_loop()
        positions: Dict[asyncio.Future, int] = {}
        finished: Dict[int, Sequence[RawPlace]] = {}
        pending: Set[asyncio.Future] = set()
        next_index = 0
        cursor = 0

        def launch() -> None:
            nonlocal next_index
            while len(pending) < self.concurrency and next_index < len(queries):
                task = asyncio.ensure_future(self._safe_lookup(lookup, queries[next_index]))
                positions[task] = next_index
                pending.add(task)
                next_index += 1

        def collect(done) -> None:
            for task in done:
                pending.discard(task)
                finished[positions.pop(task)] = task.result()

        def merge_finished() -> None:
            collect([task for task in pending if task.done() and not task.cancelled()])
            skipped = sum(1 for index in range(cursor, next_index) if index not in finished)
            logger.warning(
                "Resolution budget exhausted during augmentation; "
                f"merging {len(finished)} finished lookups, skipping {skipped}"
            )
            for index in sorted(finished):
                merge(queries[index], finished.pop(index))
                if is_full is not None and is_full():
                    return

        try:
            launch()
            while pending:
                timeout = None
                if deadline is not None:
                    timeout = deadline - loop.time()
                    if timeout <= 0:
                        merge_finished()
                        return

                done, _ = await asyncio.wait(
                    pending,
                    timeout=timeout,
                    return_when=asyncio.FIRST_COMPLETED,
                )
                if not done:
                    merge_finished()
                    return

                collect(done)

                while cursor in finished:
                    merge(queries[cursor], finished.pop(cursor))
                    cursor += 1
                    if is_full is not None and is_full():
                        return

                launch()
        finally:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)


def _same_country(country: str, place: RawPlace) -> bool:
    return bool(place.country) and place.country.lower() == country.lower()
