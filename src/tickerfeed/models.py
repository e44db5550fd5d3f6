"""Domain models for the tickerfeed news and sentiment feeds."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class NewsArticle(BaseModel):
    """A news article as returned by the news backend."""

    id: str
    title: str
    description: Optional[str] = None
    url: str = ""
    image_url: Optional[str] = Field(None, alias="imageUrl")
    source: Optional[str] = None
    published_at: Optional[datetime] = Field(None, alias="publishedAt")
    sentiment: Optional[Sentiment] = None
    topics: list[str] = Field(default_factory=list)
    tickers: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @property
    def stable_key(self) -> str:
        return self.id


class Ticker(BaseModel):
    """A tradable coin or token."""

    symbol: str
    name: str = ""

    @property
    def stable_key(self) -> str:
        return self.symbol


class MentionTicker(BaseModel):
    """Social mention counts and sentiment for a ticker."""

    ticker: str
    name: str = ""
    total_mentions: int = Field(0, alias="totalMentions")
    sentiment_score: float = Field(0.0, alias="sentimentScore")

    model_config = {"populate_by_name": True}

    @property
    def stable_key(self) -> str:
        return self.ticker


class Video(BaseModel):
    id: str
    title: str
    url: str = ""
    thumbnail_url: Optional[str] = Field(None, alias="thumbnailUrl")

    model_config = {"populate_by_name": True}

    @property
    def stable_key(self) -> str:
        return self.id


class Event(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    date: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")

    model_config = {"populate_by_name": True}

    @property
    def stable_key(self) -> str:
        return self.id


class TrendingHeadline(BaseModel):
    """A trending headline, optionally backed by a full article."""

    id: str
    headline: str = ""
    news: Optional[NewsArticle] = None

    @property
    def stable_key(self) -> str:
        return self.id


class SocialHighlight(BaseModel):
    """Aggregate payload for the home screen. Every part may be missing."""

    news: Optional[list[NewsArticle]] = None
    events: Optional[list[Event]] = None
    top_mention: Optional[list[MentionTicker]] = Field(None, alias="topMention")
    headlines: Optional[list[TrendingHeadline]] = None

    model_config = {"populate_by_name": True}


class SentimentPoint(BaseModel):
    """Sentiment reading for one calendar day of a ticker's timeline."""

    sentiment: Optional[Sentiment] = None
    sentiment_score: Optional[float] = Field(None, alias="sentimentScore")

    model_config = {"populate_by_name": True}


class TickerSentiment(BaseModel):
    """Overall reading plus a per-day timeline keyed by ``YYYY-MM-DD``."""

    total: Optional[SentimentPoint] = None
    timeline: Optional[dict[str, SentimentPoint]] = None


class TickerDetail(BaseModel):
    """Detail payload for one ticker. Lists come from their own feeds."""

    ticker: Optional[Ticker] = None
    sentiment: Optional[TickerSentiment] = None
    events: Optional[list[Event]] = None


class Insight(BaseModel):
    """A digest card summarising social chatter."""

    id: str
    title: str = ""
    summary: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    tickers: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @property
    def stable_key(self) -> str:
        return self.id


class Tweet(BaseModel):
    status_id: str = Field(alias="statusId")
    text: str = ""
    user: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = {"populate_by_name": True}

    @property
    def stable_key(self) -> str:
        return self.status_id


class ApiEnvelope(BaseModel):
    """Wrapper every backend response comes in."""

    data: Any = None
    success: bool = True
    err: Optional[str] = None
