from typing import Iterable, List, Optional, Sequence, Tuple

from city_search.domain.geocoding.country_data import (
    ADMIN_TIERS,
    CAPITAL_FEATURE_CODE,
    is_country_code,
    is_populated_place,
    major_cities_for,
)
from city_search.domain.geocoding.schemas import CityOption, QueryClassification, RawPlace


def compose_display_name(
    name: str,
    admin1: Optional[str],
    country: Optional[str],
) -> str:
    """
    Build `name[, admin1][, country]`.
    admin1 is omitted when absent or equal to the country.
    """
    parts = [name]
    if admin1 and (not country or admin1.lower() != country.lower()):
        parts.append(admin1)
    if country:
        parts.append(country)
    return ", ".join(parts)


def feature_tier(feature_code: Optional[str]) -> int:
    """
    Higher is more significant: capital, admin seats by level,
    plain populated places, then everything else.
    """
    if feature_code in ADMIN_TIERS:
        return len(ADMIN_TIERS) - ADMIN_TIERS.index(feature_code) + 1
    if feature_code is not None and feature_code.startswith("PPL"):
        return 1
    return 0


class CandidateRanker:
    """
    Deduplicates, scores, sorts and truncates candidate places.
    """

    COUNTRY_LIMIT = 25
    CITY_LIMIT = 15

    def rank(
        self,
        query: str,
        places: Sequence[RawPlace],
        classification: QueryClassification,
    ) -> List[CityOption]:
        candidates = self._dedupe(places)

        if classification.is_country_search:
            capital = self._table_capital(classification.target_country)
            key = lambda item: self._country_score(item[1], capital)
            limit = self.COUNTRY_LIMIT
        else:
            q = query.strip().lower()
            candidates = [
                (display_name, place)
                for display_name, place in candidates
                if not is_country_code(place.feature_code)
                and is_populated_place(place.feature_code)
            ]
            key = lambda item: self._city_score(item[1], q)
            limit = self.CITY_LIMIT

        ranked = sorted(candidates, key=key)[:limit]

        return [
            self._to_option(place, display_name)
            for display_name, place in ranked
        ]

    # ─────────────────────────────────────────────
    # Scoring (sort keys, ascending = better)
    # ─────────────────────────────────────────────

    def _country_score(
        self,
        place: RawPlace,
        capital: Optional[str],
    ) -> Tuple:
        is_capital = place.feature_code == CAPITAL_FEATURE_CODE or (
            capital is not None and place.name.lower() == capital
        )
        return (
            not is_capital,
            -feature_tier(place.feature_code),
            -(place.population or 0),
            place.name.lower(),
        )

    def _city_score(self, place: RawPlace, q: str) -> Tuple:
        return (
            place.name.lower() != q,
            -feature_tier(place.feature_code),
            -(place.population or 0),
            place.name.lower(),
        )

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    def _dedupe(
        self,
        places: Iterable[RawPlace],
    ) -> List[Tuple[str, RawPlace]]:
        seen = set()
        unique = []
        for place in places:
            display_name = compose_display_name(place.name, place.admin1, place.country)
            if display_name in seen:
                continue
            seen.add(display_name)
            unique.append((display_name, place))
        return unique

    def _table_capital(self, country: Optional[str]) -> Optional[str]:
        if not country:
            return None
        cities = major_cities_for(country)
        return cities[0].lower() if cities else None

    def _to_option(self, place: RawPlace, display_name: str) -> CityOption:
        return CityOption(
            id=str(place.id),
            name=place.name,
            country=place.country,
            admin1=place.admin1,
            admin2=place.admin2,
            latitude=place.latitude,
            longitude=place.longitude,
            display_name=display_name,
        )
