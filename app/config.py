"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the Tripz deal service."""
    model_config = SettingsConfigDict(env_prefix="TRIPZ_", env_file=".env", extra="ignore")

    flight_api_base: str = "https://tequila-api.kiwi.com"
    flight_api_key: str | None = None
    fx_api_base: str = "https://api.frankfurter.app"
    cache_redis_url: str | None = None
    cache_key_prefix: str = "tripz:"
    holiday_database_url: str = "sqlite:///./tripz.db"
    fx_ttl_seconds: int = 60 * 60 * 24
    search_ttl_seconds: int = 1800
    max_results: int = 20
    weekend_window_count: int = 12
    http_timeout_seconds: float = 10.0
    log_level: str = "INFO"

    @field_validator("flight_api_base", "fx_api_base", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")


settings = Settings()
