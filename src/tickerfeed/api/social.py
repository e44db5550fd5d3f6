"""Social feeds: insight digests and per-ticker tweets."""

from typing import Any

from tickerfeed.api.base import RestFetchPort
from tickerfeed.feed.keys import FeedKey, FeedKind
from tickerfeed.models import Insight, Tweet

INSIGHTS_PATH = "social/insights"
TWEETS_PATH = "tweets"


class InsightFeedPort(RestFetchPort):
    def _route(self, key: FeedKey, page: int, limit: int) -> tuple[str, dict, Any]:
        params: dict = {"page": page, "limit": limit}
        if key.kind == FeedKind.GENERAL:
            return INSIGHTS_PATH, params, Insight
        if key.kind == FeedKind.TICKER:
            params["ticker"] = key.value
            return INSIGHTS_PATH, params, Insight

        raise self._unsupported(key)


class TweetFeedPort(RestFetchPort):
    """Recent tweets about one ticker, returned as a single page."""

    def fetch_page_sync(self, key: FeedKey, page: int, limit: int, force_refresh: bool = False) -> list[Any]:
        if page != self._start_page:
            return []
        return super().fetch_page_sync(key, page, limit, force_refresh)

    def _route(self, key: FeedKey, page: int, limit: int) -> tuple[str, dict, Any]:
        if key.kind == FeedKind.TICKER:
            return TWEETS_PATH, {"ticker": key.value, "limit": limit}, Tweet

        raise self._unsupported(key)
