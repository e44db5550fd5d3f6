"""Active tab / filter selection."""

from enum import Enum
from typing import Callable, Optional

import structlog

from tickerfeed.feed.keys import FeedKey
from tickerfeed.models import Sentiment

logger = structlog.get_logger(__name__)

SelectionListener = Callable[[FeedKey, FeedKey], None]


class NewsTab(str, Enum):
    """Segment tabs shown above the news feed."""

    ALL = "all"
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    LIBRA = "libra"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def feed_key(self) -> FeedKey:
        if self in (NewsTab.POSITIVE, NewsTab.NEGATIVE, NewsTab.NEUTRAL):
            return FeedKey.sentiment(Sentiment(self.value))
        if self == NewsTab.LIBRA:
            return FeedKey.topic(self.value)
        return FeedKey.general()


class TabSelector:
    """Holds the active FeedKey and notifies listeners on distinct changes."""

    def __init__(self, initial: FeedKey):
        self._active = initial
        self._listeners: list[SelectionListener] = []

    @property
    def active(self) -> FeedKey:
        return self._active

    def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
        """Register ``listener(previous, current)``. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def select(self, key: FeedKey) -> bool:
        """Make ``key`` active. Returns False if it already was."""
        if key == self._active:
            return False

        previous, self._active = self._active, key
        logger.debug("selector.changed", previous=str(previous), current=str(key))
        for listener in list(self._listeners):
            listener(previous, key)
        return True

    def select_tab(self, tab: NewsTab) -> bool:
        return self.select(tab.feed_key())

    def reset(self, key: Optional[FeedKey] = None) -> None:
        """Drop all listeners, optionally moving to ``key`` without notifying."""
        self._listeners.clear()
        if key is not None:
            self._active = key
