"""Pure transforms from aggregated lists to what a screen displays.

Nothing here mutates its input. Every function returns a new list.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from tickerfeed.feed.keys import FeedKey, FeedKind
from tickerfeed.feed.selector import NewsTab
from tickerfeed.models import MentionTicker, NewsArticle, Sentiment, SentimentPoint


class MentionRanking(str, Enum):
    TOP = "top"
    POSITIVE = "positive"
    NEGATIVE = "negative"


@dataclass
class FeedSection:
    """Renderable section descriptor."""

    id: str
    title: str
    items: list[Any] = field(default_factory=list)
    has_more: bool = False


def _stable_key(item: Any) -> str:
    return item.stable_key


def first(items: Sequence[Any], n: int) -> list[Any]:
    return list(items[: max(n, 0)])


def unique_by_key(items: Iterable[Any], key_fn: Callable[[Any], str] = _stable_key) -> list[Any]:
    seen: set[str] = set()
    unique = []
    for item in items:
        item_key = key_fn(item)
        if item_key not in seen:
            seen.add(item_key)
            unique.append(item)
    return unique


def project(items: Sequence[Any], key: FeedKey) -> list[Any]:
    """Subset of ``items`` to show for ``key``."""
    if key.kind == FeedKind.SENTIMENT:
        wanted = Sentiment(key.value)
        return [item for item in items if getattr(item, "sentiment", None) == wanted]
    if key.kind == FeedKind.TOPIC:
        return [item for item in items if key.value in _topics(item)]
    if key.kind in (FeedKind.GENERAL, FeedKind.SEARCH, FeedKind.TICKER, FeedKind.WATCHLIST):
        return unique_by_key(items)
    raise ValueError(f"Unhandled feed kind: {key.kind!r}")


def filter_by_tab(articles: Sequence[NewsArticle], tab: NewsTab) -> list[NewsArticle]:
    """Segment-tab filter over a single mixed news list."""
    if tab == NewsTab.ALL:
        return list(articles)
    if tab in (NewsTab.POSITIVE, NewsTab.NEGATIVE, NewsTab.NEUTRAL):
        wanted = Sentiment(tab.value)
        return [a for a in articles if a.sentiment == wanted]
    return [a for a in articles if tab.value in _topics(a)]


def rank_mentions(
    mentions: Sequence[MentionTicker],
    ranking: MentionRanking,
    limit: Optional[int] = 5,
) -> list[MentionTicker]:
    """Order ticker mentions for the top / positive / negative carousels."""
    if ranking == MentionRanking.TOP:
        ordered = sorted(mentions, key=lambda m: m.total_mentions, reverse=True)
    elif ranking == MentionRanking.POSITIVE:
        ordered = sorted(mentions, key=lambda m: m.sentiment_score, reverse=True)
    else:
        ordered = sorted(mentions, key=lambda m: m.sentiment_score)
    return ordered if limit is None else first(ordered, limit)


def section(
    section_id: str,
    title: str,
    items: Sequence[Any],
    limit: Optional[int] = None,
) -> FeedSection:
    shown = list(items) if limit is None else first(items, limit)
    return FeedSection(id=section_id, title=title, items=shown, has_more=len(items) > len(shown))


def sentiment_calendar(
    timeline: Mapping[str, SentimentPoint],
    today: date,
    days: int = 30,
) -> list[tuple[date, SentimentPoint]]:
    """Chronological (day, reading) pairs for the last ``days`` days.

    ``timeline`` is keyed by ``YYYY-MM-DD``; days without a reading are skipped.
    """
    calendar = []
    for offset in reversed(range(days)):
        day = today - timedelta(days=offset)
        point = timeline.get(day.isoformat())
        if point is not None:
            calendar.append((day, point))
    return calendar


def leading_blanks(first_day: Optional[date]) -> int:
    """Empty cells before ``first_day`` in a Sunday-first week grid."""
    if first_day is None:
        return 0
    return (first_day.weekday() + 1) % 7


def news_date_range(day: date) -> str:
    """Single-day range in the ``MMDDYYYY-MMDDYYYY`` form the news API takes."""
    stamp = day.strftime("%m%d%Y")
    return f"{stamp}-{stamp}"


def _topics(item: Any) -> list[str]:
    return [t.lower() for t in (getattr(item, "topics", None) or [])]
