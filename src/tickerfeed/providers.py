"""Provider factory: creates the right fetch port based on config."""

from pathlib import Path
from typing import Optional

from tickerfeed.api.client import DekryptApiClient
from tickerfeed.config import AppConfig, Secrets
from tickerfeed.feed.base import FetchPort
from tickerfeed.models import Insight, NewsArticle, Ticker, Tweet, Video

REST_PORTS = {
    "news": "tickerfeed.api.news:NewsFeedPort",
    "tickers": "tickerfeed.api.tickers:TickerFeedPort",
    "videos": "tickerfeed.api.videos:VideoFeedPort",
    "insights": "tickerfeed.api.social:InsightFeedPort",
    "tweets": "tickerfeed.api.social:TweetFeedPort",
}

STUB_MODELS = {
    "news": NewsArticle,
    "tickers": Ticker,
    "videos": Video,
    "insights": Insight,
    "tweets": Tweet,
}


def _import_class(path: str):
    """Import a class from a 'module:ClassName' string."""
    module_path, class_name = path.split(":")
    import importlib

    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def create_api_client(config: AppConfig, secrets: Secrets) -> DekryptApiClient:
    return DekryptApiClient(config.api, secrets)


def create_fetch_port(
    feed: str,
    config: AppConfig,
    secrets: Secrets,
    client: Optional[DekryptApiClient] = None,
) -> FetchPort:
    """Create the fetch port for ``feed`` under config.providers.feed."""
    if feed not in REST_PORTS:
        raise ValueError(
            f"Unknown feed: '{feed}'. Available: {list(REST_PORTS.keys())}"
        )

    start_page = config.feed.start_page
    if config.providers.feed == "stub":
        path = getattr(config.providers.stub, f"{feed}_path")
        if not path:
            raise ValueError(f"providers.stub.{feed}_path is required when using the stub provider")
        from tickerfeed.api.static import StaticFetchPort

        return StaticFetchPort(Path(path), STUB_MODELS[feed], start_page=start_page)

    cls = _import_class(REST_PORTS[feed])
    return cls(client or create_api_client(config, secrets), start_page=start_page)
