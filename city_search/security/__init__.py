"""
Security Module

Request validation and caller-level rate limiting for the search API.
"""

from city_search.security.rate_limiter import RateLimiter, RateLimitStatus, get_client_ip
from city_search.security.validators import sanitize_string, validate_search_query

__all__ = [
    "RateLimiter",
    "RateLimitStatus",
    "get_client_ip",
    "sanitize_string",
    "validate_search_query",
]
