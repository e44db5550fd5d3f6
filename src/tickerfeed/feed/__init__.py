"""Paginated feed state: aggregator, tab selection, gesture bridge and projection."""

from tickerfeed.feed.aggregator import FeedAggregator, FetchKind
from tickerfeed.feed.base import FeedFetchError, FetchPort
from tickerfeed.feed.keys import FeedKey, FeedKind
from tickerfeed.feed.notifications import ErrorChannel, FeedNotification
from tickerfeed.feed.selector import NewsTab, TabSelector
from tickerfeed.feed.signals import SignalBridge
from tickerfeed.feed.state import END_OF_DATA, FeedState, merge_unique

__all__ = [
    "FeedAggregator",
    "FetchKind",
    "FeedFetchError",
    "FetchPort",
    "FeedKey",
    "FeedKind",
    "ErrorChannel",
    "FeedNotification",
    "NewsTab",
    "TabSelector",
    "SignalBridge",
    "END_OF_DATA",
    "FeedState",
    "merge_unique",
]
