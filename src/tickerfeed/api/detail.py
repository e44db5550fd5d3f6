"""Ticker detail: profile, sentiment timeline and events for one symbol."""

import asyncio

import structlog
from pydantic import ValidationError

from tickerfeed.api.client import DekryptApiClient
from tickerfeed.feed.base import FeedFetchError
from tickerfeed.models import TickerDetail

logger = structlog.get_logger(__name__)

TICKER_DETAIL_PATH = "tickers/detail"


class TickerDetailService:
    def __init__(self, client: DekryptApiClient):
        self._client = client

    async def fetch(self, symbol: str, name: str = "", refresh: bool = False) -> TickerDetail:
        return await asyncio.to_thread(self.fetch_sync, symbol, name, refresh)

    def fetch_sync(self, symbol: str, name: str = "", refresh: bool = False) -> TickerDetail:
        params = {"ticker": symbol.upper()}
        if name:
            params["name"] = name
        envelope = self._client.get(TICKER_DETAIL_PATH, params=params, force_refresh=refresh)
        if envelope.data is None:
            return TickerDetail()
        try:
            return TickerDetail.model_validate(envelope.data)
        except ValidationError as e:
            logger.error("api.parse_failed", path=TICKER_DETAIL_PATH, model="TickerDetail", error=str(e))
            raise FeedFetchError(f"Malformed TickerDetail payload from {TICKER_DETAIL_PATH}") from e
