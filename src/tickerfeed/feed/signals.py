"""Pull-to-refresh and scroll-to-end triggers feeding the aggregator."""

import time
from typing import Any, Callable, Optional

import structlog

from tickerfeed.feed.aggregator import FeedAggregator
from tickerfeed.feed.keys import FeedKey

logger = structlog.get_logger(__name__)


class SignalBridge:
    """Turns raw UI gestures into aggregator calls for the active key.

    Only the edge from "not at end" to "at end" loads the next page, and no
    page is requested while the active key is refreshing. Refresh pulls that
    land within ``debounce_seconds`` of the previous one are dropped.
    """

    def __init__(
        self,
        aggregator: FeedAggregator,
        active_key: Callable[[], FeedKey],
        debounce_seconds: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._aggregator = aggregator
        self._active_key = active_key
        self._debounce = debounce_seconds
        self._clock = clock
        self._at_end = False
        self._last_refresh: Optional[float] = None

    @property
    def at_end(self) -> bool:
        return self._at_end

    async def pull_to_refresh(self) -> Optional[list[Any]]:
        """Refresh the active key. Returns None if the pull was debounced."""
        now = self._clock()
        if self._last_refresh is not None and now - self._last_refresh < self._debounce:
            logger.debug("signals.refresh_debounced", since_last=round(now - self._last_refresh, 3))
            return None
        self._last_refresh = now

        key = self._active_key()
        return await self._aggregator.refresh(key)

    async def scrolled(self, at_end: bool) -> Optional[list[Any]]:
        """Report scroll proximity. Returns the new list if a page was requested."""
        was_at_end, self._at_end = self._at_end, at_end
        if not at_end or was_at_end:
            return None

        key = self._active_key()
        if self._aggregator.is_refreshing(key):
            logger.debug("signals.next_page_suppressed", key=str(key), reason="refreshing")
            return None
        return await self._aggregator.load_next(key)

    def reset(self) -> None:
        self._at_end = False
