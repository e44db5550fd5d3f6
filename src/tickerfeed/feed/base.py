"""Abstract base class for paged feed sources."""

from abc import ABC, abstractmethod
from typing import Any

from tickerfeed.feed.keys import FeedKey


class FeedFetchError(Exception):
    """Raised when a page cannot be fetched."""


class FetchPort(ABC):
    """Interface for fetching one page of a feed from any source."""

    @abstractmethod
    async def fetch_page(
        self,
        key: FeedKey,
        page: int,
        limit: int,
        force_refresh: bool = False,
    ) -> list[Any]:
        """Fetch a 1-based page of at most ``limit`` items for ``key``.

        Raises FeedFetchError on any failure. An empty list means there is no
        such page.
        """
        ...
