"""Ticker lists: the watchlist and ticker search."""

from typing import Any

from tickerfeed.api.base import RestFetchPort
from tickerfeed.feed.keys import FeedKey, FeedKind
from tickerfeed.models import Ticker

ALL_TICKERS_PATH = "tickers"
TICKER_SEARCH_PATH = "tickers/search"


class TickerFeedPort(RestFetchPort):
    """Serves Ticker pages. The full ticker list is a single, unpaged response."""

    def fetch_page_sync(self, key: FeedKey, page: int, limit: int, force_refresh: bool = False) -> list[Any]:
        if key.kind == FeedKind.WATCHLIST and page != self._start_page:
            return []
        return super().fetch_page_sync(key, page, limit, force_refresh)

    def _route(self, key: FeedKey, page: int, limit: int) -> tuple[str, dict, Any]:
        if key.kind == FeedKind.WATCHLIST:
            return ALL_TICKERS_PATH, {}, Ticker
        if key.kind == FeedKind.SEARCH:
            return TICKER_SEARCH_PATH, {"query": key.value, "page": page, "limit": limit}, Ticker

        raise self._unsupported(key)
