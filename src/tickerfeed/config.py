"""Configuration loading and validation using Pydantic."""

from pathlib import Path

from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class FeedConfig(BaseModel):
    page_size: int = Field(default=10, ge=1, le=100)
    start_page: int = Field(default=1, ge=0)
    refresh_debounce_seconds: float = Field(default=0.5, ge=0)


class ApiConfig(BaseModel):
    base_url: str
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_attempts: int = Field(default=3, ge=1, le=10)
    api_key_header: str = "x-api-key"

    @field_validator("base_url")
    @classmethod
    def normalize_base_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")


class StubConfig(BaseModel):
    """JSON fixture files served by the static fetch port."""

    news_path: Optional[str] = None
    tickers_path: Optional[str] = None
    videos_path: Optional[str] = None
    insights_path: Optional[str] = None
    tweets_path: Optional[str] = None


class ProvidersConfig(BaseModel):
    feed: Literal["rest", "stub"] = "rest"
    stub: StubConfig = Field(default_factory=StubConfig)


class DigestConfig(BaseModel):
    """Caps applied when building home, search and ticker detail sections."""

    news_limit: int = Field(default=5, ge=1)
    mentions_limit: int = Field(default=5, ge=1)
    videos_limit: int = Field(default=3, ge=1)
    search_limit: int = Field(default=4, ge=1)
    detail_news_limit: int = Field(default=4, ge=1)
    detail_videos_limit: int = Field(default=4, ge=1)
    detail_events_limit: int = Field(default=3, ge=1)
    tweets_limit: int = Field(default=5, ge=1)
    insights_limit: int = Field(default=10, ge=1)
    sentiment_days: int = Field(default=30, ge=1)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    app_log: str
    fetch_log: str
    max_bytes: int = 10485760
    backup_count: int = 5
    console_colors: bool = True
    quiet_loggers: list[str] = Field(default_factory=lambda: ["urllib3", "requests"])
    fetches_to_app_log: bool = True


class AppConfig(BaseModel):
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    api: ApiConfig
    feed: FeedConfig = Field(default_factory=FeedConfig)
    digest: DigestConfig = Field(default_factory=DigestConfig)
    logging: LoggingConfig


class Secrets(BaseSettings):
    """Loaded from .env file automatically."""

    feed_api_key: str = ""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def load_config(config_path: Path = Path("config/settings.yaml")) -> AppConfig:
    """Load and validate application configuration from YAML."""
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    return AppConfig(**raw)
