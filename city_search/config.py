from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ─── App ──────────────────────────────
    APP_NAME: str = "city-search"
    ENV: str = "local"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # ─── Geocoding provider ───────────────
    GEOCODING_API_URL: str = "https://geocoding-api.open-meteo.com/v1/search"
    GEOCODING_RESULT_COUNT: int = 50
    GEOCODING_SUPPLEMENTARY_COUNT: int = 10
    GEOCODING_TIMEOUT: float = 10.0
    GEOCODING_SUPPLEMENTARY_TIMEOUT: float = 8.0

    # ─── Resolution ───────────────────────
    RESOLVE_TIMEOUT: float = 10.0
    AUGMENT_CONCURRENCY: int = 3
    AUGMENT_TARGET_SIZE: int = 20
    AUGMENT_MAX_LOOKUPS: int = 10

    # ─── In-memory cache ──────────────────
    CITY_CACHE_MAX_SIZE: int = 500
    PLACES_CACHE_MAX_SIZE: int = 1000

    # ─── Rate limiting ────────────────────
    RATE_LIMIT_MAX_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
