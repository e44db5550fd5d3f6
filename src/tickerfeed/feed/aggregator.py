"""Paginated, deduplicating feed state keyed by sub-feed."""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

import structlog

from tickerfeed.config import FeedConfig
from tickerfeed.feed.base import FeedFetchError, FetchPort
from tickerfeed.feed.keys import FeedKey
from tickerfeed.feed.notifications import ErrorChannel, FeedNotification
from tickerfeed.feed.state import END_OF_DATA, Cursor, FeedState, merge_unique
from tickerfeed.logging_config import get_fetch_logger

logger = structlog.get_logger(__name__)


class FetchKind(str, Enum):
    INITIAL = "initial"
    NEXT = "next"
    REFRESH = "refresh"


@dataclass
class _InFlight:
    kind: FetchKind
    page: int
    task: asyncio.Future


@dataclass
class _Outcome:
    items: list[Any] = field(default_factory=list)
    error: Optional[BaseException] = None
    cancelled: bool = False


def _stable_key(item: Any) -> str:
    return item.stable_key


class FeedAggregator:
    """Owns one FeedState per FeedKey and merges pages fetched through a port.

    Single writer: every mutation happens on the event loop that awaits these
    coroutines. At most one fetch per key is in flight; triggers that arrive
    meanwhile are ignored, except refresh, which supersedes an in-flight
    initial or next-page fetch. No method raises on fetch failure; errors are
    logged and emitted on the error channel.
    """

    def __init__(
        self,
        port: FetchPort,
        config: FeedConfig,
        errors: Optional[ErrorChannel] = None,
        key_fn: Optional[Callable[[Any], str]] = None,
        name: str = "feed",
    ):
        self._port = port
        self._page_size = config.page_size
        self._start_page = config.start_page
        self._errors = errors if errors is not None else ErrorChannel()
        self._key_fn = key_fn or _stable_key
        self._name = name
        self._states: dict[FeedKey, FeedState] = {}
        self._inflight: dict[FeedKey, _InFlight] = {}
        self._fetch_log = get_fetch_logger()

    @property
    def errors(self) -> ErrorChannel:
        return self._errors

    @property
    def initial_cursor(self) -> int:
        return self._start_page - 1

    def keys(self) -> list[FeedKey]:
        return list(self._states)

    def items(self, key: FeedKey) -> list[Any]:
        state = self._states.get(key)
        return list(state.items) if state else []

    def cursor(self, key: FeedKey) -> Optional[Cursor]:
        state = self._states.get(key)
        return state.cursor if state else None

    def has_loaded(self, key: FeedKey) -> bool:
        state = self._states.get(key)
        return bool(state and state.loaded)

    def is_refreshing(self, key: FeedKey) -> bool:
        state = self._states.get(key)
        return bool(state and state.refreshing)

    def is_exhausted(self, key: FeedKey) -> bool:
        state = self._states.get(key)
        return bool(state and state.exhausted)

    def is_fetching(self, key: FeedKey) -> bool:
        return key in self._inflight

    async def load_initial(self, key: FeedKey) -> list[Any]:
        """Return cached items for ``key``, fetching the first page if needed."""
        state = self._state(key)
        if state.loaded:
            logger.debug("feed.cache_hit", feed=self._name, key=str(key), count=len(state.items))
            return list(state.items)
        if key in self._inflight:
            self._ignored(key, FetchKind.INITIAL, "fetch_in_flight")
            return list(state.items)

        page = self._start_page
        outcome = await self._fetch(key, FetchKind.INITIAL, page, force_refresh=False)
        if outcome.cancelled:
            return list(state.items)
        if outcome.error is not None:
            # Cursor stays before the first page so the next trigger retries
            state.items = []
            state.cursor = self.initial_cursor
            return []

        state.items = merge_unique([], outcome.items, self._key_fn)
        state.cursor = page
        state.loaded = True
        return list(state.items)

    async def load_next(self, key: FeedKey) -> list[Any]:
        """Fetch the page after the cursor and append its unseen items."""
        state = self._state(key)
        if state.refreshing:
            self._ignored(key, FetchKind.NEXT, "refresh_in_flight")
            return list(state.items)
        if key in self._inflight:
            self._ignored(key, FetchKind.NEXT, "fetch_in_flight")
            return list(state.items)
        if state.exhausted:
            logger.debug("feed.end_of_data", feed=self._name, key=str(key))
            return list(state.items)

        page = state.cursor + 1
        outcome = await self._fetch(key, FetchKind.NEXT, page, force_refresh=False)
        if outcome.cancelled or outcome.error is not None:
            return list(state.items)

        if not outcome.items:
            state.cursor = END_OF_DATA
            state.loaded = True
            logger.info("feed.reached_end", feed=self._name, key=str(key), last_page=page - 1)
            return list(state.items)

        before = len(state.items)
        state.items = merge_unique(state.items, outcome.items, self._key_fn)
        state.cursor = page
        state.loaded = True
        logger.debug(
            "feed.page_merged",
            feed=self._name,
            key=str(key),
            page=page,
            received=len(outcome.items),
            added=len(state.items) - before,
            total=len(state.items),
        )
        return list(state.items)

    async def refresh(self, key: FeedKey) -> list[Any]:
        """Discard state for ``key`` and replace it with a fresh first page."""
        state = self._state(key)
        current = self._inflight.get(key)
        if state.refreshing or (current is not None and current.kind == FetchKind.REFRESH):
            self._ignored(key, FetchKind.REFRESH, "refresh_in_flight")
            return list(state.items)
        if current is not None:
            current.task.cancel()
            logger.info(
                "feed.fetch_superseded",
                feed=self._name,
                key=str(key),
                kind=current.kind.value,
                page=current.page,
            )

        state.refreshing = True
        state.items = []
        state.cursor = self.initial_cursor
        state.loaded = False
        page = self._start_page
        try:
            outcome = await self._fetch(key, FetchKind.REFRESH, page, force_refresh=True)
        finally:
            state.refreshing = False

        if outcome.cancelled or outcome.error is not None:
            return list(state.items)

        state.items = merge_unique([], outcome.items, self._key_fn)
        state.cursor = page
        state.loaded = True
        logger.info("feed.refreshed", feed=self._name, key=str(key), count=len(state.items))
        return list(state.items)

    def cancel_all(self) -> int:
        """Cancel every in-flight fetch. Cancelled fetches leave state untouched."""
        entries = list(self._inflight.values())
        for entry in entries:
            entry.task.cancel()
        if entries:
            logger.info("feed.fetches_cancelled", feed=self._name, count=len(entries))
        return len(entries)

    def _state(self, key: FeedKey) -> FeedState:
        state = self._states.get(key)
        if state is None:
            state = FeedState(cursor=self.initial_cursor)
            self._states[key] = state
        return state

    def _ignored(self, key: FeedKey, kind: FetchKind, reason: str) -> None:
        logger.debug("feed.trigger_ignored", feed=self._name, key=str(key), kind=kind.value, reason=reason)

    async def _fetch(self, key: FeedKey, kind: FetchKind, page: int, force_refresh: bool) -> _Outcome:
        task = asyncio.ensure_future(
            self._port.fetch_page(key, page, self._page_size, force_refresh)
        )
        entry = _InFlight(kind, page, task)
        self._inflight[key] = entry
        started = time.monotonic()
        try:
            await asyncio.wait({task})
        finally:
            if not task.done():
                task.cancel()
            if self._inflight.get(key) is entry:
                del self._inflight[key]

        duration_ms = round((time.monotonic() - started) * 1000, 1)
        record = dict(
            feed=self._name,
            key=str(key),
            kind=kind.value,
            page=page,
            limit=self._page_size,
            force_refresh=force_refresh,
            duration_ms=duration_ms,
        )

        if task.cancelled():
            self._fetch_log.info("feed.fetch", outcome="cancelled", **record)
            return _Outcome(cancelled=True)

        error = task.exception()
        if error is not None:
            self._fetch_log.info("feed.fetch", outcome="error", error=str(error), **record)
            self._report(key, kind, page, error)
            return _Outcome(error=error)

        items = list(task.result() or [])
        self._fetch_log.info("feed.fetch", outcome="ok", count=len(items), **record)
        return _Outcome(items=items)

    def _report(self, key: FeedKey, kind: FetchKind, page: int, error: BaseException) -> None:
        if isinstance(error, FeedFetchError):
            logger.warning(
                "feed.fetch_failed",
                feed=self._name,
                key=str(key),
                kind=kind.value,
                page=page,
                error=str(error),
            )
            code = "fetch_failed"
        else:
            logger.error(
                "feed.fetch_crashed",
                feed=self._name,
                key=str(key),
                kind=kind.value,
                page=page,
                error=str(error),
                exc_info=error,
            )
            code = "unexpected_error"

        self._errors.emit(
            FeedNotification(
                message=str(error) or error.__class__.__name__,
                code=code,
                key=key,
            )
        )
