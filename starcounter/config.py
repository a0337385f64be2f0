"""Configuration settings for the star counter service."""

import os
from dataclasses import asdict, dataclass, fields

from dotenv import load_dotenv

load_dotenv()

CONFIG_KEY = "gh_star_config"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Application settings."""

    github_token: str | None = None
    github_api_url: str = "https://api.github.com"
    cache_enabled: bool = True
    cache_duration_seconds: int = 86400  # 1 day
    max_cache_entries: int = 1000
    max_retry: int = 3
    retry_base_delay_seconds: float = 1.0
    debounce_seconds: float = 0.5
    max_page_sessions: int = 100
    store_path: str | None = None
    log_level: str = "INFO"
    cors_origins: list[str] | None = None

    def __post_init__(self):
        self.github_token = os.getenv("GITHUB_TOKEN", self.github_token)
        self.github_api_url = os.getenv("GITHUB_API_URL", self.github_api_url).rstrip("/")
        self.cache_enabled = _env_bool("STAR_CACHE_ENABLED", self.cache_enabled)
        self.cache_duration_seconds = int(
            os.getenv("STAR_CACHE_DURATION_SECONDS", self.cache_duration_seconds)
        )
        self.max_cache_entries = int(os.getenv("STAR_MAX_CACHE_ENTRIES", self.max_cache_entries))
        self.max_retry = int(os.getenv("STAR_MAX_RETRY", self.max_retry))
        self.retry_base_delay_seconds = float(
            os.getenv("STAR_RETRY_BASE_DELAY", self.retry_base_delay_seconds)
        )
        self.debounce_seconds = float(os.getenv("STAR_DEBOUNCE_SECONDS", self.debounce_seconds))
        self.max_page_sessions = int(os.getenv("STAR_MAX_PAGE_SESSIONS", self.max_page_sessions))
        self.store_path = os.getenv("STAR_STORE_PATH", self.store_path)
        self.log_level = os.getenv("LOG_LEVEL", self.log_level).upper()
        cors_env = os.getenv("CORS_ORIGINS", "*")
        self.cors_origins = [origin.strip() for origin in cors_env.split(",")]


@dataclass(frozen=True)
class StarConfig:
    """Runtime configuration read by the cache and the fetcher.

    Instances are immutable; an update builds a new object and the holder
    swaps the reference, so readers see either the old or the new value.
    """

    github_token: str | None = None
    cache_enabled: bool = True
    cache_duration_seconds: int = 86400
    max_cache_entries: int = 1000
    max_retry: int = 3

    def __post_init__(self):
        if self.cache_duration_seconds <= 0:
            raise ValueError("cache_duration_seconds must be positive")
        if self.max_cache_entries <= 0:
            raise ValueError("max_cache_entries must be positive")
        if self.max_retry < 0:
            raise ValueError("max_retry must not be negative")

    @classmethod
    def from_settings(cls, source: Settings) -> "StarConfig":
        return cls(
            github_token=source.github_token or None,
            cache_enabled=source.cache_enabled,
            cache_duration_seconds=source.cache_duration_seconds,
            max_cache_entries=source.max_cache_entries,
            max_retry=source.max_retry,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict, defaults: "StarConfig | None" = None) -> "StarConfig":
        """Build a config from a stored mapping, filling gaps from defaults."""
        base = asdict(defaults or cls())
        known = {f.name for f in fields(cls)}
        base.update({k: v for k, v in data.items() if k in known})
        return cls(**base)


settings = Settings()
