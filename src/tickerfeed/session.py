"""Per-screen owner tying tab selection, gestures and feed state together."""

from typing import Any, Optional

import structlog

from tickerfeed.config import FeedConfig
from tickerfeed.feed.aggregator import FeedAggregator
from tickerfeed.feed.base import FetchPort
from tickerfeed.feed.keys import FeedKey
from tickerfeed.feed.notifications import ErrorChannel
from tickerfeed.feed.projection import FeedSection, filter_by_tab, project
from tickerfeed.feed.selector import NewsTab, TabSelector
from tickerfeed.feed.signals import SignalBridge

logger = structlog.get_logger(__name__)


class FeedSession:
    """One screen's worth of feed state.

    Switching tabs is cache-first: a key that already loaded is shown from
    memory, only an explicit refresh goes back to the network. Closing the
    session cancels outstanding fetches without committing their results.
    """

    def __init__(
        self,
        aggregator: FeedAggregator,
        initial_key: FeedKey,
        debounce_seconds: float = 0.0,
        name: str = "feed",
    ):
        self._aggregator = aggregator
        self._selector = TabSelector(initial_key)
        self._bridge = SignalBridge(
            aggregator,
            lambda: self._selector.active,
            debounce_seconds=debounce_seconds,
        )
        self._name = name
        self._tab: Optional[NewsTab] = None
        self._closed = False
        self._unsubscribe = self._selector.subscribe(self._on_selection)

    @classmethod
    def from_config(
        cls,
        port: FetchPort,
        config: FeedConfig,
        initial_key: FeedKey,
        errors: Optional[ErrorChannel] = None,
        name: str = "feed",
    ) -> "FeedSession":
        aggregator = FeedAggregator(port, config, errors=errors, name=name)
        return cls(aggregator, initial_key, debounce_seconds=config.refresh_debounce_seconds, name=name)

    @property
    def aggregator(self) -> FeedAggregator:
        return self._aggregator

    @property
    def selector(self) -> TabSelector:
        return self._selector

    @property
    def errors(self) -> ErrorChannel:
        return self._aggregator.errors

    @property
    def active_key(self) -> FeedKey:
        return self._selector.active

    @property
    def active_tab(self) -> Optional[NewsTab]:
        return self._tab

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> "FeedSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    async def start(self) -> list[Any]:
        """Load the initial key and return what should be displayed."""
        logger.info("session.starting", session=self._name, key=str(self.active_key))
        return await self.show()

    async def show(self) -> list[Any]:
        """Visible items for the active key, loading its first page if needed."""
        if self._closed:
            return self.visible_items()
        await self._aggregator.load_initial(self.active_key)
        return self.visible_items()

    async def select(self, key: FeedKey) -> list[Any]:
        self._tab = None
        self._selector.select(key)
        return await self.show()

    async def select_tab(self, tab: NewsTab) -> list[Any]:
        """Switch segment tab; its articles are also filtered client-side."""
        self._tab = tab
        self._selector.select_tab(tab)
        return await self.show()

    async def refresh(self) -> list[Any]:
        if not self._closed:
            await self._bridge.pull_to_refresh()
        return self.visible_items()

    async def scrolled(self, at_end: bool) -> list[Any]:
        if not self._closed:
            await self._bridge.scrolled(at_end)
        return self.visible_items()

    def visible_items(self) -> list[Any]:
        key = self.active_key
        items = project(self._aggregator.items(key), key)
        if self._tab is not None:
            return filter_by_tab(items, self._tab)
        return items

    def section(self, title: Optional[str] = None) -> FeedSection:
        key = self.active_key
        return FeedSection(
            id=str(key),
            title=title or (self._tab.label if self._tab else key.kind.value.capitalize()),
            items=self.visible_items(),
            has_more=not self._aggregator.is_exhausted(key),
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        cancelled = self._aggregator.cancel_all()
        self._unsubscribe()
        logger.info("session.closed", session=self._name, cancelled_fetches=cancelled)

    def _on_selection(self, previous: FeedKey, current: FeedKey) -> None:
        self._bridge.reset()
        logger.info(
            "session.tab_changed",
            session=self._name,
            previous=str(previous),
            current=str(current),
            cached=self._aggregator.has_loaded(current),
        )
