"""Hashable keys identifying a logical sub-feed."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from tickerfeed.models import Sentiment


class FeedKind(str, Enum):
    GENERAL = "general"
    SENTIMENT = "sentiment"
    TOPIC = "topic"
    SEARCH = "search"
    TICKER = "ticker"
    WATCHLIST = "watchlist"


@dataclass(frozen=True)
class FeedKey:
    """Identifies one sub-feed. Each key owns its own cursor and item list."""

    kind: FeedKind
    value: Optional[str] = None
    date: Optional[str] = None

    @classmethod
    def general(cls) -> "FeedKey":
        return cls(FeedKind.GENERAL)

    @classmethod
    def sentiment(cls, sentiment: Sentiment) -> "FeedKey":
        return cls(FeedKind.SENTIMENT, Sentiment(sentiment).value)

    @classmethod
    def topic(cls, name: str) -> "FeedKey":
        return cls(FeedKind.TOPIC, name.lower())

    @classmethod
    def search(cls, query: str) -> "FeedKey":
        return cls(FeedKind.SEARCH, query.strip())

    @classmethod
    def ticker(cls, symbol: str, date: Optional[str] = None) -> "FeedKey":
        return cls(FeedKind.TICKER, symbol.upper(), date)

    @classmethod
    def watchlist(cls) -> "FeedKey":
        return cls(FeedKind.WATCHLIST)

    @classmethod
    def parse(cls, kind: str, value: Optional[str] = None) -> "FeedKey":
        """Build a key from its textual parts, e.g. ``("ticker", "BTC")``."""
        feed_kind = FeedKind(kind.lower())
        if feed_kind in (FeedKind.GENERAL, FeedKind.WATCHLIST):
            return cls(feed_kind)
        if not value:
            raise ValueError(f"Feed kind '{feed_kind.value}' requires a value")
        if feed_kind == FeedKind.SENTIMENT:
            return cls.sentiment(Sentiment(value.lower()))
        if feed_kind == FeedKind.TOPIC:
            return cls.topic(value)
        if feed_kind == FeedKind.SEARCH:
            return cls.search(value)
        return cls.ticker(value)

    def __str__(self) -> str:
        parts = [self.kind.value]
        if self.value is not None:
            parts.append(self.value)
        if self.date is not None:
            parts.append(self.date)
        return ":".join(parts)
