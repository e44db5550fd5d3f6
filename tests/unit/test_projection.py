"""Tests for presentation projection."""

from datetime import date

import pytest

from conftest import make_article
from tickerfeed.feed.keys import FeedKey
from tickerfeed.feed.projection import (
    MentionRanking,
    filter_by_tab,
    first,
    leading_blanks,
    news_date_range,
    project,
    rank_mentions,
    section,
    sentiment_calendar,
    unique_by_key,
)
from tickerfeed.feed.selector import NewsTab
from tickerfeed.models import MentionTicker, Sentiment, SentimentPoint


@pytest.fixture
def mixed_news():
    return [
        make_article(1, Sentiment.POSITIVE, ["bitcoin"]),
        make_article(2, Sentiment.NEGATIVE),
        make_article(3, Sentiment.NEUTRAL, ["Libra"]),
        make_article(4, Sentiment.POSITIVE),
    ]


@pytest.fixture
def mentions():
    return [
        MentionTicker(ticker="BTC", total_mentions=900, sentiment_score=0.2),
        MentionTicker(ticker="ETH", total_mentions=500, sentiment_score=0.7),
        MentionTicker(ticker="DOGE", total_mentions=1200, sentiment_score=-0.4),
        MentionTicker(ticker="SOL", total_mentions=300, sentiment_score=0.9),
    ]


class TestProject:
    def test_sentiment_key_subsets(self, mixed_news):
        shown = project(mixed_news, FeedKey.sentiment(Sentiment.POSITIVE))
        assert [a.id for a in shown] == ["n1", "n4"]

    def test_topic_key_matches_case_insensitively(self, mixed_news):
        shown = project(mixed_news, FeedKey.topic("libra"))
        assert [a.id for a in shown] == ["n3"]

    def test_general_key_passes_everything_through(self, mixed_news):
        assert project(mixed_news, FeedKey.general()) == mixed_news

    def test_does_not_mutate_input(self, mixed_news):
        before = list(mixed_news)
        project(mixed_news, FeedKey.sentiment(Sentiment.NEGATIVE))
        assert mixed_news == before

    def test_unknown_kind_raises(self, mixed_news):
        with pytest.raises(ValueError, match="Unhandled feed kind"):
            project(mixed_news, FeedKey("bogus"))


class TestFilterByTab:
    def test_all(self, mixed_news):
        assert len(filter_by_tab(mixed_news, NewsTab.ALL)) == 4

    def test_negative(self, mixed_news):
        assert [a.id for a in filter_by_tab(mixed_news, NewsTab.NEGATIVE)] == ["n2"]

    def test_libra(self, mixed_news):
        assert [a.id for a in filter_by_tab(mixed_news, NewsTab.LIBRA)] == ["n3"]

    def test_every_tab_is_a_subset(self, mixed_news):
        for tab in NewsTab:
            shown = filter_by_tab(mixed_news, tab)
            assert all(a in mixed_news for a in shown)


class TestRankMentions:
    def test_top_by_total_mentions(self, mentions):
        ranked = rank_mentions(mentions, MentionRanking.TOP, limit=2)
        assert [m.ticker for m in ranked] == ["DOGE", "BTC"]

    def test_positive_by_score_descending(self, mentions):
        ranked = rank_mentions(mentions, MentionRanking.POSITIVE)
        assert [m.ticker for m in ranked] == ["SOL", "ETH", "BTC", "DOGE"]

    def test_negative_by_score_ascending(self, mentions):
        ranked = rank_mentions(mentions, MentionRanking.NEGATIVE, limit=1)
        assert [m.ticker for m in ranked] == ["DOGE"]

    def test_no_limit(self, mentions):
        assert len(rank_mentions(mentions, MentionRanking.TOP, limit=None)) == 4


class TestHelpers:
    def test_first(self):
        assert first([1, 2, 3], 2) == [1, 2]
        assert first([1], 5) == [1]

    def test_unique_by_key(self):
        items = [make_article(1), make_article(2), make_article(1)]
        assert [a.id for a in unique_by_key(items)] == ["n1", "n2"]

    def test_section_caps_and_flags_more(self):
        capped = section("news", "News", [1, 2, 3, 4, 5, 6], limit=5)
        assert capped.items == [1, 2, 3, 4, 5]
        assert capped.has_more is True

        full = section("news", "News", [1, 2])
        assert full.has_more is False


class TestSentimentCalendar:
    def test_orders_last_days_and_skips_gaps(self):
        timeline = {
            "2026-03-01": SentimentPoint(sentiment=Sentiment.POSITIVE, sentiment_score=0.6),
            "2026-03-03": SentimentPoint(sentiment=Sentiment.NEGATIVE, sentiment_score=-0.2),
            "2026-01-01": SentimentPoint(sentiment=Sentiment.NEUTRAL),
        }

        calendar = sentiment_calendar(timeline, today=date(2026, 3, 3))

        assert [d for d, _ in calendar] == [date(2026, 3, 1), date(2026, 3, 3)]
        assert calendar[1][1].sentiment == Sentiment.NEGATIVE

    def test_leading_blanks_sunday_first(self):
        assert leading_blanks(date(2026, 3, 1)) == 0  # Sunday
        assert leading_blanks(date(2026, 3, 4)) == 3  # Wednesday
        assert leading_blanks(None) == 0

    def test_news_date_range(self):
        assert news_date_range(date(2026, 5, 7)) == "05072026-05072026"
