class GeocodingError(Exception):
    """
    Base exception for all city-search domain errors.

    `code` is a stable machine-readable identifier surfaced to API clients.
    """

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class InvalidQueryError(GeocodingError):
    """
    Raised when a search query is missing, too short or too long.
    """

    code = "INVALID_QUERY_LENGTH"


class UpstreamTimeoutError(GeocodingError):
    """
    Raised when the geocoding provider does not answer within its timeout.
    """

    code = "TIMEOUT"


class UpstreamUnavailableError(GeocodingError):
    """
    Raised on transport failures or non-2xx provider responses.
    """

    code = "UPSTREAM_UNAVAILABLE"


class UpstreamRateLimitedError(GeocodingError):
    """
    Raised when the geocoding provider answers with HTTP 429.
    """

    code = "RATE_LIMIT_EXCEEDED"


class UpstreamBadResponseError(GeocodingError):
    """
    Raised when the provider response cannot be decoded into places.
    """

    code = "BAD_UPSTREAM_RESPONSE"


class ResolveTimeoutError(GeocodingError):
    """
    Raised when the overall resolution budget runs out before
    the primary lookup returned.
    """

    code = "TIMEOUT"


class RateLimitExceededError(GeocodingError):
    """
    Raised when a caller exceeds the per-client request quota.
    """

    code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, message: str = "Too many requests", *, reset_at: float | None = None):
        super().__init__(message)
        self.reset_at = reset_at
