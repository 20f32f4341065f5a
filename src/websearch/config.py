"""Runtime settings for websearch.

Values come from ``WEBSEARCH_*`` environment variables, then a ``.env`` file
in the working directory, then the defaults below.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All tunables of the search aggregator.

    Politeness and suspension values are read once, when the service is
    built; changing them later needs ``reload_settings`` plus a new service.
    """

    model_config = SettingsConfigDict(
        env_prefix="WEBSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider Selection
    provider: Literal["duckduckgo", "brave"] = Field(
        default="duckduckgo",
        description="Primary search provider; the other one is used as fallback",
    )
    max_concurrent_requests: int = Field(
        default=4,
        description="Maximum number of concurrent search/fetch requests",
        ge=1,
        le=64,
    )

    # Politeness Settings
    rate_limit: int = Field(
        default=10,
        description="Maximum upstream requests per rate limit window",
        ge=1,
        le=1000,
    )
    rate_limit_window_seconds: int = Field(
        default=60,
        description="Length of the sliding rate limit window in seconds",
        ge=1,
        le=3600,
    )
    min_request_delay_ms: int = Field(
        default=2000,
        description="Minimum delay between two upstream requests in milliseconds",
        ge=0,
    )
    max_jitter_ms: int = Field(
        default=3000,
        description="Upper bound of the random delay added to each request in milliseconds",
        ge=0,
    )

    # Result Settings
    search_results_count: int = Field(
        default=10,
        description="Default number of search results to return",
        ge=1,
        le=50,
    )
    search_result_max_length: int = Field(
        default=400,
        description="Maximum length of each search result snippet",
        ge=50,
    )
    fetch_result_max_length: int = Field(
        default=5000,
        description="Maximum length of fetched page content",
        ge=100,
    )

    # HTTP Settings
    search_timeout_seconds: float = Field(
        default=15.0,
        description="Timeout for search requests in seconds",
        gt=0,
        le=120,
    )
    fetch_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for page fetch requests in seconds",
        gt=0,
        le=120,
    )

    # Suspension Settings
    suspension_duration_minutes: int = Field(
        default=20,
        description="Base duration to suspend the primary provider after a failure",
        ge=1,
    )
    max_suspension_multiplier: int = Field(
        default=6,
        description="Maximum multiplier for the exponential suspension backoff",
        ge=1,
    )

    # Query Enhancement
    preferred_sites_file: Path | None = Field(
        default=None,
        description="JSON file mapping keywords to preferred sites",
    )

    # Logging
    debug: bool = Field(
        default=False,
        description="Enable debug mode for detailed logging",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level for the application",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional file path to write logs (defaults to console only)",
    )

    @field_validator("preferred_sites_file", "log_file", mode="before")
    @classmethod
    def expand_paths(cls, v: str | Path | None) -> Path | None:
        if v in (None, ""):
            return None
        return Path(v).expanduser().resolve()

    @property
    def secondary_provider(self) -> str:
        """The provider tried when the primary one fails or is suspended."""
        return "brave" if self.provider == "duckduckgo" else "duckduckgo"

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level

    def model_dump_safe(self) -> dict[str, str | int | float | bool]:
        """Settings flattened to printable scalars, for ``websearch config``."""
        dumped = self.model_dump(mode="json")
        dumped["secondary_provider"] = self.secondary_provider
        dumped["log_level"] = self.effective_log_level
        return {key: "" if value is None else value for key, value in dumped.items()}


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Discard the cached settings and load them again from the environment."""
    global _settings
    _settings = Settings()
    return _settings
