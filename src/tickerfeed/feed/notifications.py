"""Side channel carrying non-fatal fetch errors to the UI layer."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from tickerfeed.feed.keys import FeedKey

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FeedNotification:
    """Advisory message for a toast or banner."""

    message: str
    code: str = "fetch_failed"
    key: Optional[FeedKey] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


Subscriber = Callable[[FeedNotification], None]


class ErrorChannel:
    """Fan-out of notifications to subscribers, with a bounded history."""

    def __init__(self, max_history: int = 50):
        self._subscribers: list[Subscriber] = []
        self._history: deque[FeedNotification] = deque(maxlen=max_history)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def emit(self, notification: FeedNotification) -> None:
        self._history.append(notification)
        for callback in list(self._subscribers):
            try:
                callback(notification)
            except Exception as e:
                logger.warning(
                    "notifications.subscriber_failed",
                    code=notification.code,
                    error=str(e),
                )

    @property
    def history(self) -> list[FeedNotification]:
        return list(self._history)

    def clear(self) -> None:
        self._history.clear()
