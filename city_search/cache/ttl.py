class CacheTTL:
    """
    TTL values (in seconds) for different cache types.
    """

    # Ranked city lists for a search-box query
    CITY_SEARCH = 60 * 60              # 1 hour

    # Raw provider responses (primary and supplementary lookups)
    GEOCODE = 60 * 60                  # 1 hour
