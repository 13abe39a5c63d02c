"""Application settings loaded from environment."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """YouTube Search Proxy configuration (env vars / .env)."""

    yt_api_key: str
    youtube_api_base_url: str = "https://www.googleapis.com/youtube/v3"
    upstream_timeout_seconds: float = 10.0
    region_code: str = "IN"

    default_query: str = "Chhattisgarhi song"
    default_page_size: int = 12
    max_page_size: int = 50
    # Applied when the caller sends no `channels` parameter; empty means no restriction
    default_allowed_channels: list[str] = []
    min_duration_seconds: int = 60

    # In-memory entry lifetimes
    search_cache_ttl_seconds: int = 1800
    empty_search_cache_ttl_seconds: int = 60
    videos_cache_ttl_seconds: int = 1800
    # Cache-Control max-age sent to clients
    search_max_age_seconds: int = 600
    empty_search_max_age_seconds: int = 60
    videos_max_age_seconds: int = 3600
    # Optional shared cache; the in-process cache is used when unset
    redis_url: str | None = None

    cors_origin: str = "*"
    rate_limit_max_requests: int = 80
    rate_limit_window_seconds: int = 60
    # Key clients on the first X-Forwarded-For address; enable only behind a reverse proxy
    trust_forwarded_for: bool = False

    app_host: str = "0.0.0.0"
    app_port: int = Field(default=3000, validation_alias="PORT")
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
