"""News feeds: general, per-sentiment, per-topic, search and per-ticker."""

from typing import Any

from tickerfeed.api.base import RestFetchPort
from tickerfeed.feed.keys import FeedKey, FeedKind
from tickerfeed.models import NewsArticle

GENERAL_NEWS_PATH = "news/general"
NEWS_SEARCH_PATH = "news/search"
TICKER_NEWS_PATH = "news/tickers"


class NewsFeedPort(RestFetchPort):
    """Serves NewsArticle pages for every news-bearing feed kind."""

    def _route(self, key: FeedKey, page: int, limit: int) -> tuple[str, dict, Any]:
        params: dict = {"page": page, "limit": limit}

        if key.kind == FeedKind.GENERAL:
            return GENERAL_NEWS_PATH, params, NewsArticle
        if key.kind == FeedKind.SENTIMENT:
            params["sentiment"] = key.value
            return GENERAL_NEWS_PATH, params, NewsArticle
        if key.kind == FeedKind.TOPIC:
            params["topic"] = key.value
            return NEWS_SEARCH_PATH, params, NewsArticle
        if key.kind == FeedKind.SEARCH:
            params["query"] = key.value
            return NEWS_SEARCH_PATH, params, NewsArticle
        if key.kind == FeedKind.TICKER:
            params["ticker"] = key.value
            # Per-day feeds pass an MMDDYYYY-MMDDYYYY range
            params["date"] = key.date
            return TICKER_NEWS_PATH, params, NewsArticle

        raise self._unsupported(key)
