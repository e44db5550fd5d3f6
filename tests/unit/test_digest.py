"""Tests for home, search and ticker detail digests."""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import ScriptedPort, make_article, make_articles
from tickerfeed.config import DigestConfig
from tickerfeed.digest import (
    HomeDigestLoader,
    HomeSection,
    SearchDigestLoader,
    SentimentSummary,
    TickerDetailLoader,
)
from tickerfeed.feed.base import FeedFetchError
from tickerfeed.feed.keys import FeedKey
from tickerfeed.models import (
    Event,
    Insight,
    MentionTicker,
    NewsArticle,
    Sentiment,
    SentimentPoint,
    SocialHighlight,
    Ticker,
    TickerDetail,
    TickerSentiment,
    TrendingHeadline,
    Tweet,
    Video,
)


def _mentions(count):
    return [
        MentionTicker(ticker=f"T{i}", total_mentions=i * 10, sentiment_score=(i - 3) / 10)
        for i in range(count)
    ]


class TestHomeDigestLoader:
    @pytest.fixture
    def highlights(self):
        service = MagicMock()
        service.fetch = AsyncMock(return_value=SocialHighlight())
        return service

    @pytest.fixture
    def loader(self, highlights, port, feed_config):
        return HomeDigestLoader(highlights, port, DigestConfig(), feed_config)

    @pytest.mark.asyncio
    async def test_full_layout(self, loader, highlights, port):
        highlights.fetch.return_value = SocialHighlight(
            headlines=[
                TrendingHeadline(
                    id="h1",
                    headline="ETF approved",
                    news=NewsArticle(id="n1", title="ETF", image_url="https://img/1.png"),
                ),
                TrendingHeadline(id="h2", headline="No image", news=NewsArticle(id="n2", title="x")),
                TrendingHeadline(id="h3", headline="No article"),
            ],
            news=make_articles(1, 7),
            events=[Event(id="e1", title="Halving")],
            top_mention=_mentions(7),
        )
        port.set_page(FeedKey.general(), 1, [Video(id=f"v{i}", title="clip") for i in range(4)])

        sections = await loader.load()

        assert [s.id for s in sections] == [
            "headlines",
            "news",
            "events",
            "ticker_mentions",
            "video",
        ]
        headlines, news, events, mentions, video = sections
        assert [h.id for h in headlines.items] == ["h1"]
        assert len(news.items) == 5
        assert news.has_more is True
        assert events.title == "Events"
        assert mentions.title == "Ticker Mentions"
        assert mentions.has_more is True
        assert [r.id for r in mentions.items] == ["top", "positive", "negative"]
        assert mentions.items[0].items[0].ticker == "T6"
        assert mentions.items[2].items[0].ticker == "T0"
        assert all(len(r.items) == 5 for r in mentions.items)
        assert len(video.items) == 3

    @pytest.mark.asyncio
    async def test_missing_parts_are_skipped(self, loader):
        sections = await loader.load()

        assert [s.id for s in sections] == [HomeSection.VIDEO.value]
        assert sections[0].items == []

    @pytest.mark.asyncio
    async def test_refresh_forces_both_fetches(self, loader, highlights, port):
        await loader.load(refresh=True)

        highlights.fetch.assert_awaited_once_with(refresh=True)
        assert port.calls == [(FeedKey.general(), 1, 10, True)]

    @pytest.mark.asyncio
    async def test_failed_component_degrades_to_fallback(self, loader, highlights, port):
        highlights.fetch.side_effect = FeedFetchError("highlights unavailable")
        port.set_page(FeedKey.general(), 1, [Video(id="v1", title="clip")])

        sections = await loader.load()

        assert [s.id for s in sections] == ["video"]
        assert [n.message for n in loader.errors.history] == ["highlights unavailable"]
        assert loader.errors.history[0].code == "fetch_failed"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self, loader, port):
        port.set_page(FeedKey.general(), 1, KeyError("boom"))

        sections = await loader.load()

        assert sections[-1].items == []
        assert loader.errors.history[0].code == "unexpected_error"


class TestSearchDigestLoader:
    @pytest.fixture
    def ticker_port(self):
        tickers = MagicMock()
        tickers.fetch_page = AsyncMock(return_value=[])
        return tickers

    @pytest.fixture
    def loader(self, port, ticker_port, feed_config):
        return SearchDigestLoader(port, ticker_port, DigestConfig(search_limit=2), feed_config)

    @pytest.mark.asyncio
    async def test_blank_query_fetches_nothing(self, loader, port, ticker_port):
        assert await loader.search("   ") == []
        assert port.calls == []
        ticker_port.fetch_page.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_news_then_tickers(self, loader, port, ticker_port):
        key = FeedKey.search("bitcoin")
        port.set_page(key, 1, [make_article(1), make_article(2), make_article(3)])
        ticker_port.fetch_page.return_value = [Ticker(symbol="BTC", name="Bitcoin")]

        sections = await loader.search(" bitcoin ")

        assert [s.id for s in sections] == ["news", "tickers"]
        assert len(sections[0].items) == 2
        assert sections[0].has_more is True
        assert port.calls == [(key, 1, 10, True)]
        ticker_port.fetch_page.assert_awaited_once_with(key, 1, 10, True)

    @pytest.mark.asyncio
    async def test_empty_results_omit_sections(self, loader, ticker_port):
        ticker_port.fetch_page.return_value = [Ticker(symbol="SOL")]

        sections = await loader.search("sol")

        assert [s.id for s in sections] == ["tickers"]

    @pytest.mark.asyncio
    async def test_one_side_failing_keeps_the_other(self, loader, port, ticker_port):
        key = FeedKey.search("eth")
        port.set_page(key, 1, [make_article(1)])
        ticker_port.fetch_page.side_effect = FeedFetchError("ticker search down")

        sections = await loader.search("eth")

        assert [s.id for s in sections] == ["news"]
        assert loader.errors.history[0].message == "ticker search down"


class TestTickerDetailLoader:
    TODAY = date(2026, 3, 4)
    BTC = FeedKey.ticker("BTC")

    @pytest.fixture
    def detail(self):
        service = MagicMock()
        service.fetch = AsyncMock(return_value=TickerDetail())
        return service

    @pytest.fixture
    def ports(self, port):
        return {"news": port, "videos": ScriptedPort(), "insights": ScriptedPort(), "tweets": ScriptedPort()}

    @pytest.fixture
    def loader(self, detail, ports, feed_config):
        return TickerDetailLoader(
            detail,
            ports["news"],
            ports["videos"],
            ports["insights"],
            ports["tweets"],
            DigestConfig(),
            feed_config,
        )

    @pytest.mark.asyncio
    async def test_full_layout(self, loader, detail, ports):
        detail.fetch.return_value = TickerDetail(
            ticker=Ticker(symbol="BTC", name="Bitcoin"),
            sentiment=TickerSentiment(
                total=SentimentPoint(sentiment=Sentiment.POSITIVE, sentiment_score=0.5),
                timeline={
                    "2026-03-01": SentimentPoint(sentiment=Sentiment.POSITIVE),
                    "2026-03-04": SentimentPoint(sentiment=Sentiment.NEGATIVE),
                },
            ),
            events=[Event(id=f"e{i}", title="Unlock") for i in range(5)],
        )
        ports["news"].set_page(self.BTC, 1, make_articles(1, 6))
        ports["videos"].set_page(self.BTC, 1, [Video(id=f"v{i}", title="clip") for i in range(4)])
        ports["insights"].set_page(self.BTC, 1, [Insight(id="i1", title="Whales")])
        ports["tweets"].set_page(self.BTC, 1, [Tweet(status_id=str(i)) for i in range(7)])

        sections = await loader.load("btc", "Bitcoin", today=self.TODAY)

        assert [s.id for s in sections] == [
            "metrics",
            "sentiment",
            "news",
            "events",
            "video",
            "insights",
            "tweets",
        ]
        metrics, sentiment, news, events, video, insights, tweets = sections
        assert metrics.items[0].name == "Bitcoin"
        summary = sentiment.items[0]
        assert isinstance(summary, SentimentSummary)
        assert summary.total.sentiment_score == 0.5
        assert [d for d, _ in summary.days] == [date(2026, 3, 1), date(2026, 3, 4)]
        assert summary.leading_blanks == 0
        assert len(news.items) == 4
        assert news.has_more is True
        assert len(events.items) == 3
        assert len(video.items) == 4
        assert video.has_more is False
        assert insights.title == "Insights"
        assert len(tweets.items) == 5
        assert loader.errors.history == []

    @pytest.mark.asyncio
    async def test_fetches_use_detail_caps(self, loader, detail, ports):
        await loader.load("eth", refresh=True, today=self.TODAY)

        eth = FeedKey.ticker("ETH")
        detail.fetch.assert_awaited_once_with("eth", "", refresh=True)
        assert ports["news"].calls == [(eth, 1, 10, True)]
        assert ports["videos"].calls == [(eth, 1, 4, True)]
        assert ports["insights"].calls == [(eth, 1, 10, True)]
        assert ports["tweets"].calls == [(eth, 1, 5, True)]

    @pytest.mark.asyncio
    async def test_empty_payload_yields_no_sections(self, loader):
        assert await loader.load("BTC", today=self.TODAY) == []

    @pytest.mark.asyncio
    async def test_sentiment_needs_total_and_timeline(self, loader, detail):
        detail.fetch.return_value = TickerDetail(
            sentiment=TickerSentiment(total=SentimentPoint(sentiment=Sentiment.NEUTRAL), timeline={})
        )

        sections = await loader.load("BTC", today=self.TODAY)

        assert sections == []

    @pytest.mark.asyncio
    async def test_failed_parts_degrade_and_notify(self, loader, detail, ports):
        detail.fetch.side_effect = FeedFetchError("detail unavailable")
        ports["tweets"].set_page(self.BTC, 1, FeedFetchError("tweets rate limited"))
        ports["videos"].set_page(self.BTC, 1, RuntimeError("boom"))
        ports["news"].set_page(self.BTC, 1, [make_article(1)])

        sections = await loader.load("BTC", today=self.TODAY)

        assert [s.id for s in sections] == ["news"]
        messages = [n.message for n in loader.errors.history]
        assert sorted(messages) == ["boom", "detail unavailable", "tweets rate limited"]
        codes = {n.message: n.code for n in loader.errors.history}
        assert codes["boom"] == "unexpected_error"
        assert codes["detail unavailable"] == "fetch_failed"

    def test_calendar_grid_offset(self, loader):
        sentiment = TickerSentiment(
            total=SentimentPoint(sentiment=Sentiment.POSITIVE),
            timeline={"2026-03-04": SentimentPoint(sentiment=Sentiment.POSITIVE)},
        )

        summary = loader.summarize_sentiment(sentiment, self.TODAY)

        assert summary.days[0][0] == date(2026, 3, 4)
        assert summary.leading_blanks == 3

    def test_news_keys(self):
        assert TickerDetailLoader.news_key("btc") == self.BTC
        day = TickerDetailLoader.day_news_key("btc", date(2026, 5, 7))
        assert day == FeedKey.ticker("BTC", "05072026-05072026")
