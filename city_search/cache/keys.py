class CacheKeys:
    """
    Centralized cache key builders.
    """

    @staticmethod
    def normalize(query: str) -> str:
        return query.strip().lower()

    # ─────────────────────────────────────────────
    # City search
    # ─────────────────────────────────────────────

    @staticmethod
    def city_search(query: str) -> str:
        return f"cities:{CacheKeys.normalize(query)}"

    # ─────────────────────────────────────────────
    # Raw geocoding lookups
    # ─────────────────────────────────────────────

    @staticmethod
    def geocode(query: str, count: int) -> str:
        return f"geocode:{count}:{CacheKeys.normalize(query)}"
