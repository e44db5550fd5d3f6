"""Shared plumbing for fetch ports backed by the REST API."""

import asyncio
from abc import abstractmethod
from typing import Any

import structlog

from tickerfeed.api.client import DekryptApiClient, parse_items
from tickerfeed.feed.base import FeedFetchError, FetchPort
from tickerfeed.feed.keys import FeedKey

logger = structlog.get_logger(__name__)


class RestFetchPort(FetchPort):
    """Maps a FeedKey to an endpoint and runs the blocking call off the event loop."""

    provider = "rest"

    def __init__(self, client: DekryptApiClient, start_page: int = 1):
        self._client = client
        self._start_page = start_page

    @abstractmethod
    def _route(self, key: FeedKey, page: int, limit: int) -> tuple[str, dict, Any]:
        """Return ``(path, params, model)`` for one page of ``key``."""
        ...

    async def fetch_page(
        self,
        key: FeedKey,
        page: int,
        limit: int,
        force_refresh: bool = False,
    ) -> list[Any]:
        return await asyncio.to_thread(self.fetch_page_sync, key, page, limit, force_refresh)

    def fetch_page_sync(self, key: FeedKey, page: int, limit: int, force_refresh: bool = False) -> list[Any]:
        path, params, model = self._route(key, page, limit)
        envelope = self._client.get(path, params=params, force_refresh=force_refresh)
        items = parse_items(envelope, model, path)
        logger.debug(
            "api.page_fetched",
            port=type(self).__name__,
            key=str(key),
            page=page,
            count=len(items),
        )
        return items

    def _unsupported(self, key: FeedKey) -> FeedFetchError:
        return FeedFetchError(f"{type(self).__name__} does not serve '{key.kind.value}' feeds")
