"""Composite home, search and ticker detail screens built from concurrent fetches."""

import asyncio
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Awaitable, Optional

import structlog

from tickerfeed.config import DigestConfig, FeedConfig
from tickerfeed.feed.base import FeedFetchError, FetchPort
from tickerfeed.feed.keys import FeedKey
from tickerfeed.feed.notifications import ErrorChannel, FeedNotification
from tickerfeed.feed.projection import (
    FeedSection,
    MentionRanking,
    leading_blanks,
    news_date_range,
    rank_mentions,
    section,
    sentiment_calendar,
)
from tickerfeed.models import SentimentPoint, SocialHighlight, TickerDetail, TickerSentiment

logger = structlog.get_logger(__name__)


class HomeSection(str, Enum):
    HEADLINES = "headlines"
    NEWS = "news"
    EVENTS = "events"
    TICKER_MENTIONS = "ticker_mentions"
    VIDEO = "video"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class SearchSection(str, Enum):
    TICKERS = "tickers"
    NEWS = "news"

    @property
    def label(self) -> str:
        return self.value.title()


class TickerDetailSection(str, Enum):
    METRICS = "metrics"
    SENTIMENT = "sentiment"
    NEWS = "news"
    EVENTS = "events"
    VIDEO = "video"
    INSIGHTS = "insights"
    TWEETS = "tweets"

    @property
    def label(self) -> str:
        return self.value.title()


@dataclass
class SentimentSummary:
    """Overall reading plus a month grid of daily readings."""

    total: SentimentPoint
    days: list[tuple[date, SentimentPoint]] = field(default_factory=list)
    leading_blanks: int = 0


async def _guarded(
    awaitable: Awaitable[Any],
    fallback: Any,
    component: str,
    errors: ErrorChannel,
) -> Any:
    """Await one component of a fan-out; failures become ``fallback`` plus a notification."""
    try:
        return await awaitable
    except FeedFetchError as e:
        logger.warning("digest.component_failed", component=component, error=str(e))
        errors.emit(FeedNotification(message=str(e), code="fetch_failed"))
    except Exception as e:
        logger.error("digest.component_crashed", component=component, error=str(e), exc_info=True)
        errors.emit(FeedNotification(message=str(e) or type(e).__name__, code="unexpected_error"))
    return fallback


class HomeDigestLoader:
    """Loads highlights and videos concurrently and lays out the home sections."""

    def __init__(
        self,
        highlights,
        videos: FetchPort,
        digest: DigestConfig,
        feed: FeedConfig,
        errors: Optional[ErrorChannel] = None,
    ):
        self._highlights = highlights
        self._videos = videos
        self._digest = digest
        self._feed = feed
        self._errors = errors if errors is not None else ErrorChannel()

    @property
    def errors(self) -> ErrorChannel:
        return self._errors

    async def load(self, refresh: bool = False) -> list[FeedSection]:
        highlight, videos = await asyncio.gather(
            _guarded(self._highlights.fetch(refresh=refresh), SocialHighlight(), "highlights", self._errors),
            _guarded(
                self._videos.fetch_page(
                    FeedKey.general(), self._feed.start_page, self._feed.page_size, refresh
                ),
                [],
                "videos",
                self._errors,
            ),
        )
        sections = self.build_sections(highlight, videos)
        logger.info(
            "digest.home_loaded",
            sections=[s.id for s in sections],
            videos=len(videos),
            refresh=refresh,
        )
        return sections

    def build_sections(self, highlight: SocialHighlight, videos: list[Any]) -> list[FeedSection]:
        sections = []

        if highlight.headlines is not None:
            with_image = [h for h in highlight.headlines if h.news is not None and h.news.image_url]
            sections.append(section(HomeSection.HEADLINES.value, HomeSection.HEADLINES.label, with_image))

        if highlight.news is not None:
            sections.append(
                section(
                    HomeSection.NEWS.value,
                    HomeSection.NEWS.label,
                    highlight.news,
                    limit=self._digest.news_limit,
                )
            )

        if highlight.events is not None:
            sections.append(section(HomeSection.EVENTS.value, HomeSection.EVENTS.label, highlight.events))

        if highlight.top_mention is not None:
            limit = self._digest.mentions_limit
            rankings = [
                section(r.value, r.value.title(), rank_mentions(highlight.top_mention, r, limit))
                for r in MentionRanking
            ]
            sections.append(
                FeedSection(
                    id=HomeSection.TICKER_MENTIONS.value,
                    title=HomeSection.TICKER_MENTIONS.label,
                    items=rankings,
                    has_more=len(highlight.top_mention) > limit,
                )
            )

        sections.append(
            section(HomeSection.VIDEO.value, HomeSection.VIDEO.label, videos, limit=self._digest.videos_limit)
        )
        return sections


class SearchDigestLoader:
    """Runs news and ticker search side by side for one query."""

    def __init__(
        self,
        news: FetchPort,
        tickers: FetchPort,
        digest: DigestConfig,
        feed: FeedConfig,
        errors: Optional[ErrorChannel] = None,
    ):
        self._news = news
        self._tickers = tickers
        self._digest = digest
        self._feed = feed
        self._errors = errors if errors is not None else ErrorChannel()

    @property
    def errors(self) -> ErrorChannel:
        return self._errors

    async def search(self, query: str) -> list[FeedSection]:
        """Sections for ``query``; blank queries and empty results yield no sections."""
        if not query or not query.strip():
            return []

        key = FeedKey.search(query)
        page, limit = self._feed.start_page, self._feed.page_size
        news, tickers = await asyncio.gather(
            _guarded(self._news.fetch_page(key, page, limit, True), [], "news_search", self._errors),
            _guarded(self._tickers.fetch_page(key, page, limit, True), [], "ticker_search", self._errors),
        )

        cap = self._digest.search_limit
        sections = []
        if news:
            sections.append(section(SearchSection.NEWS.value, SearchSection.NEWS.label, news, limit=cap))
        if tickers:
            sections.append(section(SearchSection.TICKERS.value, SearchSection.TICKERS.label, tickers, limit=cap))

        logger.info("digest.search_complete", query=key.value, news=len(news), tickers=len(tickers))
        return sections


class TickerDetailLoader:
    """Loads everything shown for one ticker in a single concurrent round.

    The detail payload, ticker news, videos, insights and tweets are fetched
    side by side. A failing part degrades to empty and is reported on
    ``errors``; the rest of the screen still renders.
    """

    def __init__(
        self,
        detail,
        news: FetchPort,
        videos: FetchPort,
        insights: FetchPort,
        tweets: FetchPort,
        digest: DigestConfig,
        feed: FeedConfig,
        errors: Optional[ErrorChannel] = None,
    ):
        self._detail = detail
        self._news = news
        self._videos = videos
        self._insights = insights
        self._tweets = tweets
        self._digest = digest
        self._feed = feed
        self._errors = errors if errors is not None else ErrorChannel()

    @property
    def errors(self) -> ErrorChannel:
        return self._errors

    @staticmethod
    def news_key(symbol: str) -> FeedKey:
        """Feed behind the news section's "view more"."""
        return FeedKey.ticker(symbol)

    @staticmethod
    def day_news_key(symbol: str, day: date) -> FeedKey:
        """Feed for one calendar day tapped in the sentiment grid."""
        return FeedKey.ticker(symbol, news_date_range(day))

    async def load(
        self,
        symbol: str,
        name: str = "",
        refresh: bool = False,
        today: Optional[date] = None,
    ) -> list[FeedSection]:
        key = self.news_key(symbol)
        page, size = self._feed.start_page, self._feed.page_size
        detail, news, videos, insights, tweets = await asyncio.gather(
            _guarded(
                self._detail.fetch(symbol, name, refresh=refresh),
                TickerDetail(),
                "ticker_detail",
                self._errors,
            ),
            _guarded(self._news.fetch_page(key, page, size, refresh), [], "ticker_news", self._errors),
            _guarded(
                self._videos.fetch_page(key, page, self._digest.detail_videos_limit, refresh),
                [],
                "ticker_videos",
                self._errors,
            ),
            _guarded(
                self._insights.fetch_page(key, page, self._digest.insights_limit, refresh),
                [],
                "ticker_insights",
                self._errors,
            ),
            _guarded(
                self._tweets.fetch_page(key, page, self._digest.tweets_limit, refresh),
                [],
                "ticker_tweets",
                self._errors,
            ),
        )
        sections = self.build_sections(detail, news, videos, insights, tweets, today or date.today())
        logger.info(
            "digest.ticker_loaded",
            ticker=key.value,
            sections=[s.id for s in sections],
            news=len(news),
            refresh=refresh,
        )
        return sections

    def build_sections(
        self,
        detail: TickerDetail,
        news: list[Any],
        videos: list[Any],
        insights: list[Any],
        tweets: list[Any],
        today: date,
    ) -> list[FeedSection]:
        sections = []

        if detail.ticker is not None:
            sections.append(
                section(TickerDetailSection.METRICS.value, TickerDetailSection.METRICS.label, [detail.ticker])
            )

        summary = self.summarize_sentiment(detail.sentiment, today)
        if summary is not None:
            sections.append(
                section(TickerDetailSection.SENTIMENT.value, TickerDetailSection.SENTIMENT.label, [summary])
            )

        parts = [
            (TickerDetailSection.NEWS, news, self._digest.detail_news_limit),
            (TickerDetailSection.EVENTS, detail.events or [], self._digest.detail_events_limit),
            (TickerDetailSection.VIDEO, videos, self._digest.detail_videos_limit),
            (TickerDetailSection.INSIGHTS, insights, self._digest.insights_limit),
            (TickerDetailSection.TWEETS, tweets, self._digest.tweets_limit),
        ]
        for part, items, limit in parts:
            if items:
                sections.append(section(part.value, part.label, items, limit=limit))
        return sections

    def summarize_sentiment(
        self, sentiment: Optional[TickerSentiment], today: date
    ) -> Optional[SentimentSummary]:
        """Calendar for the sentiment section, or None when there is nothing to plot."""
        if sentiment is None or sentiment.total is None or not sentiment.timeline:
            return None
        days = sentiment_calendar(sentiment.timeline, today, days=self._digest.sentiment_days)
        if not days:
            return None
        return SentimentSummary(total=sentiment.total, days=days, leading_blanks=leading_blanks(days[0][0]))
