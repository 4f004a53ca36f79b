"""
Static reference data for country-level searches.

The major-city table is a curated enumeration, not an authoritative gazetteer.
Each list starts with the national capital so that capital-first ranking has
a stable anchor when the provider omits the PPLC code.
"""

from typing import Dict, FrozenSet, List, Optional


# ─────────────────────────────────────────────
# Feature codes (GeoNames classification)
# ─────────────────────────────────────────────

COUNTRY_FEATURE_CODES: FrozenSet[str] = frozenset(
    {"PCLI", "PCL", "PCLD", "PCLF", "PCLIX", "PCLS"}
)

CAPITAL_FEATURE_CODE = "PPLC"

# Ordered from most to least significant populated-place tier.
ADMIN_TIERS: List[str] = ["PPLC", "PPLA", "PPLA2", "PPLA3", "PPLA4"]

CITY_FEATURE_CODES: FrozenSet[str] = frozenset(ADMIN_TIERS + ["PPL"])

POPULATED_PLACE_PREFIX = "PPL"


# ─────────────────────────────────────────────
# Aliases
# ─────────────────────────────────────────────

COUNTRY_ALIASES: Dict[str, str] = {
    "usa": "United States",
    "us": "United States",
    "u.s.": "United States",
    "u.s.a.": "United States",
    "america": "United States",
    "united states of america": "United States",
    "uk": "United Kingdom",
    "u.k.": "United Kingdom",
    "britain": "United Kingdom",
    "great britain": "United Kingdom",
    "england": "United Kingdom",
    "uae": "United Arab Emirates",
    "holland": "The Netherlands",
    "netherlands": "The Netherlands",
    "south korea": "South Korea",
    "korea": "South Korea",
    "czechia": "Czechia",
    "czech republic": "Czechia",
}


# ─────────────────────────────────────────────
# Major cities per country (capital first)
# ─────────────────────────────────────────────

MAJOR_CITIES: Dict[str, List[str]] = {
    "Japan": [
        "Tokyo", "Osaka", "Kyoto", "Yokohama", "Nagoya",
        "Sapporo", "Fukuoka", "Kobe", "Hiroshima", "Sendai",
    ],
    "United States": [
        "Washington", "New York", "Los Angeles", "Chicago", "San Francisco",
        "Miami", "Seattle", "Boston", "Las Vegas", "New Orleans",
    ],
    "United Kingdom": [
        "London", "Edinburgh", "Manchester", "Birmingham", "Liverpool",
        "Glasgow", "Bristol", "Oxford", "Cambridge", "Cardiff",
    ],
    "France": [
        "Paris", "Marseille", "Lyon", "Nice", "Bordeaux",
        "Toulouse", "Strasbourg", "Nantes", "Lille", "Montpellier",
    ],
    "Germany": [
        "Berlin", "Munich", "Hamburg", "Frankfurt am Main", "Cologne",
        "Stuttgart", "Düsseldorf", "Dresden", "Leipzig", "Nuremberg",
    ],
    "Italy": [
        "Rome", "Milan", "Venice", "Florence", "Naples",
        "Turin", "Bologna", "Palermo", "Genoa", "Verona",
    ],
    "Spain": [
        "Madrid", "Barcelona", "Seville", "Valencia", "Málaga",
        "Bilbao", "Granada", "Palma", "Zaragoza", "San Sebastián",
    ],
    "China": [
        "Beijing", "Shanghai", "Guangzhou", "Shenzhen", "Chengdu",
        "Xi'an", "Hangzhou", "Chongqing", "Nanjing", "Wuhan",
    ],
    "India": [
        "New Delhi", "Mumbai", "Bengaluru", "Kolkata", "Chennai",
        "Hyderabad", "Jaipur", "Agra", "Goa", "Pune",
    ],
    "Australia": [
        "Canberra", "Sydney", "Melbourne", "Brisbane", "Perth",
        "Adelaide", "Gold Coast", "Hobart", "Darwin", "Cairns",
    ],
    "Canada": [
        "Ottawa", "Toronto", "Vancouver", "Montreal", "Calgary",
        "Quebec", "Edmonton", "Winnipeg", "Halifax", "Victoria",
    ],
    "Brazil": [
        "Brasília", "São Paulo", "Rio de Janeiro", "Salvador", "Fortaleza",
        "Belo Horizonte", "Manaus", "Curitiba", "Recife", "Florianópolis",
    ],
    "Mexico": [
        "Mexico City", "Guadalajara", "Monterrey", "Cancún", "Puebla",
        "Tijuana", "Oaxaca", "Mérida", "Puerto Vallarta", "Playa del Carmen",
    ],
    "Thailand": [
        "Bangkok", "Chiang Mai", "Phuket", "Pattaya", "Krabi",
        "Ayutthaya", "Hua Hin", "Chiang Rai", "Koh Samui", "Udon Thani",
    ],
    "South Korea": [
        "Seoul", "Busan", "Incheon", "Daegu", "Daejeon",
        "Gwangju", "Jeju City", "Suwon", "Ulsan", "Gyeongju",
    ],
    "The Netherlands": [
        "Amsterdam", "Rotterdam", "The Hague", "Utrecht", "Eindhoven",
        "Groningen", "Maastricht", "Haarlem", "Leiden", "Delft",
    ],
    "Portugal": [
        "Lisbon", "Porto", "Faro", "Coimbra", "Braga",
        "Funchal", "Évora", "Aveiro", "Lagos", "Sintra",
    ],
    "Greece": [
        "Athens", "Thessaloniki", "Heraklion", "Patras", "Rhodes",
        "Chania", "Corfu", "Larissa", "Volos", "Ioannina",
    ],
    "United Arab Emirates": [
        "Abu Dhabi", "Dubai", "Sharjah", "Al Ain", "Ajman",
        "Ras al-Khaimah", "Fujairah", "Umm al-Quwain",
    ],
    "Czechia": [
        "Prague", "Brno", "Ostrava", "Plzeň", "Olomouc",
        "Liberec", "České Budějovice", "Karlovy Vary", "Český Krumlov",
    ],
}


GENERIC_QUERY_TEMPLATES: List[str] = [
    "{country} capital",
    "{country} major cities",
    "{country} city",
]


def resolve_alias(query: str) -> Optional[str]:
    return COUNTRY_ALIASES.get(query.strip().lower())


def major_cities_for(country: str) -> Optional[List[str]]:
    """
    Case-insensitive lookup into the major-city table.
    """
    wanted = country.strip().lower()
    for name, cities in MAJOR_CITIES.items():
        if name.lower() == wanted:
            return cities
    return None


def is_country_code(feature_code: Optional[str]) -> bool:
    return feature_code in COUNTRY_FEATURE_CODES


def is_populated_place(feature_code: Optional[str]) -> bool:
    return feature_code is None or feature_code.startswith(POPULATED_PLACE_PREFIX)
