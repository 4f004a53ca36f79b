"""
Input validation for search queries.
"""

from typing import Optional

from city_search.domain.geocoding.errors import InvalidQueryError


MIN_QUERY_LENGTH = 2
MAX_QUERY_LENGTH = 200


def sanitize_string(value: str, max_length: int = 500) -> str:
    """
    Truncate, strip NUL bytes and surrounding whitespace.
    """
    value = value[:max_length]
    value = value.replace("\x00", "")
    return value.strip()


def validate_search_query(query: Optional[str]) -> str:
    """
    Validate a search-box query and return it trimmed.

    Raises InvalidQueryError when the query is missing, shorter than
    two characters once trimmed, or longer than 200 characters.
    """
    if query is None or not query.strip():
        raise InvalidQueryError(
            "Query must be at least 2 characters long",
            code="MISSING_QUERY",
        )

    if len(query) > MAX_QUERY_LENGTH:
        raise InvalidQueryError("Query too long", code="QUERY_TOO_LONG")

    query = sanitize_string(query, max_length=MAX_QUERY_LENGTH)

    if len(query) < MIN_QUERY_LENGTH:
        raise InvalidQueryError(
            "Query must be at least 2 characters long",
            code="INVALID_QUERY_LENGTH",
        )

    return query
