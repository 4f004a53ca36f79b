from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ─────────────────────────────────────────────
# Provider records
# ─────────────────────────────────────────────

class RawPlace(BaseModel):
    """
    One geocoding provider hit.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    name: str
    latitude: float
    longitude: float
    feature_code: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    admin1: Optional[str] = None
    admin2: Optional[str] = None
    population: Optional[int] = None


# ─────────────────────────────────────────────
# Client-facing candidates
# ─────────────────────────────────────────────

class CityOption(BaseModel):
    """
    A ranked, deduplicated search candidate returned to the search box.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    country: Optional[str] = None
    admin1: Optional[str] = None
    admin2: Optional[str] = None
    latitude: float
    longitude: float
    display_name: str = Field(..., alias="displayName")


class CitySearchResponse(BaseModel):
    cities: List[CityOption]


# ─────────────────────────────────────────────
# Resolution modes
# ─────────────────────────────────────────────

class SearchMode(str, Enum):
    COUNTRY = "country"
    CITY = "city"


@dataclass(frozen=True)
class QueryClassification:
    mode: SearchMode
    target_country: Optional[str] = None

    @classmethod
    def country(cls, name: str) -> "QueryClassification":
        return cls(mode=SearchMode.COUNTRY, target_country=name)

    @classmethod
    def city(cls) -> "QueryClassification":
        return cls(mode=SearchMode.CITY)

    @property
    def is_country_search(self) -> bool:
        return self.mode is SearchMode.COUNTRY
