import logging
from typing import Optional, Sequence

from city_search.domain.geocoding.country_data import is_country_code, resolve_alias
from city_search.domain.geocoding.schemas import QueryClassification, RawPlace

logger = logging.getLogger(__name__)


class QueryClassifier:
    """
    Decides whether a query targets a whole country or a city.

    Rules, first match wins:
    1. A country-level record among the first results whose name or
       country overlaps the query.
    2. An exact match between the query and a country named in the results.
    3. An exact match in the static alias table.
    4. Otherwise, a city search.
    """

    HEAD_SIZE = 10

    def classify(
        self,
        query: str,
        places: Sequence[RawPlace],
    ) -> QueryClassification:
        q = query.strip().lower()

        country = (
            self._match_country_record(q, places)
            or self._match_result_country(q, places)
            or resolve_alias(q)
        )

        if country:
            logger.info(f"Classified '{q}' as country search for {country}")
            return QueryClassification.country(country)

        return QueryClassification.city()

    # ─────────────────────────────────────────────
    # Rules
    # ─────────────────────────────────────────────

    def _match_country_record(
        self,
        q: str,
        places: Sequence[RawPlace],
    ) -> Optional[str]:
        for place in places[: self.HEAD_SIZE]:
            if not is_country_code(place.feature_code):
                continue
            for candidate in (place.name, place.country):
                if candidate and _overlaps(q, candidate.lower()):
                    return place.country or place.name
        return None

    def _match_result_country(
        self,
        q: str,
        places: Sequence[RawPlace],
    ) -> Optional[str]:
        for place in places:
            if place.country and place.country.lower() == q:
                return place.country
        return None


def _overlaps(query: str, value: str) -> bool:
    return query == value or query in value or value in query
