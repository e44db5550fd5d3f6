"""Shared test fixtures."""

import asyncio
from datetime import datetime, timezone
from typing import Any

import pytest

from tickerfeed.config import AppConfig, FeedConfig, Secrets
from tickerfeed.feed.base import FetchPort
from tickerfeed.feed.keys import FeedKey
from tickerfeed.models import NewsArticle, Sentiment


class ScriptedPort(FetchPort):
    """In-memory fetch port with scripted pages and optional gates.

    A page result may be a list of items or an exception to raise. Pages that
    were never scripted come back empty.
    """

    def __init__(self):
        self.pages: dict[tuple[FeedKey, int], Any] = {}
        self.gates: dict[tuple[FeedKey, int], asyncio.Event] = {}
        self.calls: list[tuple[FeedKey, int, int, bool]] = []

    def set_page(self, key: FeedKey, page: int, result: Any) -> None:
        self.pages[(key, page)] = result

    def hold(self, key: FeedKey, page: int) -> asyncio.Event:
        """Block fetches of ``page`` until the returned event is set."""
        gate = asyncio.Event()
        self.gates[(key, page)] = gate
        return gate

    async def fetch_page(self, key, page, limit, force_refresh=False):
        self.calls.append((key, page, limit, force_refresh))
        gate = self.gates.get((key, page))
        if gate is not None:
            await gate.wait()
        result = self.pages.get((key, page), [])
        if isinstance(result, Exception):
            raise result
        return list(result)


def make_article(n: int, sentiment: Sentiment = Sentiment.NEUTRAL, topics=None) -> NewsArticle:
    return NewsArticle(
        id=f"n{n}",
        title=f"Headline {n}",
        url=f"https://example.com/news/{n}",
        sentiment=sentiment,
        topics=topics or [],
    )


def make_articles(start: int, end: int) -> list[NewsArticle]:
    """Articles n<start>..n<end>, inclusive."""
    return [make_article(n) for n in range(start, end + 1)]


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks run up to their next real suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def test_config() -> AppConfig:
    """Provide a test configuration with safe defaults."""
    return AppConfig(
        api={
            "base_url": "https://api.example.test/v1",
            "timeout_seconds": 5,
            "max_attempts": 2,
        },
        feed={
            "page_size": 10,
            "start_page": 1,
            "refresh_debounce_seconds": 0,
        },
        logging={
            "level": "DEBUG",
            "app_log": "/tmp/test_tickerfeed.log",
            "fetch_log": "/tmp/test_fetches.log",
        },
    )


@pytest.fixture
def feed_config(test_config) -> FeedConfig:
    return test_config.feed


@pytest.fixture
def mock_secrets() -> Secrets:
    """Provide a fake API key for unit tests."""
    return Secrets(feed_api_key="test-feed-key")


@pytest.fixture
def port() -> ScriptedPort:
    return ScriptedPort()


@pytest.fixture
def sample_article() -> NewsArticle:
    """Provide a realistic sample article."""
    return NewsArticle(
        id="article-001",
        title="Bitcoin ETF inflows hit record as price tops $70k",
        description="Spot bitcoin ETFs took in $1.1 billion on Tuesday, the largest single-day inflow since launch.",
        url="https://example.com/article-001",
        image_url="https://example.com/article-001.jpg",
        source="coindesk",
        published_at=datetime(2026, 3, 10, 14, 30, 0, tzinfo=timezone.utc),
        sentiment=Sentiment.POSITIVE,
        topics=["bitcoin", "etf"],
        tickers=["BTC"],
    )
