"""Per-key pagination state."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Union


class _Cursor(Enum):
    END_OF_DATA = "end_of_data"

    def __repr__(self) -> str:
        return self.name


# Never equal to a page number, including the pre-load cursor of 0-based feeds
END_OF_DATA = _Cursor.END_OF_DATA

Cursor = Union[int, _Cursor]


@dataclass
class FeedState:
    """Cursor and accumulated items for one feed key.

    ``cursor`` is the last page successfully merged, ``start_page - 1`` before
    anything was loaded, or END_OF_DATA once an empty page came back.
    """

    cursor: Cursor
    items: list[Any] = field(default_factory=list)
    loaded: bool = False
    refreshing: bool = False

    @property
    def exhausted(self) -> bool:
        return self.cursor is END_OF_DATA


def merge_unique(
    existing: Iterable[Any],
    incoming: Iterable[Any],
    key_fn: Callable[[Any], str],
) -> list[Any]:
    """Append incoming items whose stable key is not already present.

    Keeps the order of both lists. Duplicates inside ``incoming`` collapse to
    their first occurrence.
    """
    merged = list(existing)
    seen = {key_fn(item) for item in merged}
    for item in incoming:
        item_key = key_fn(item)
        if item_key in seen:
            continue
        seen.add(item_key)
        merged.append(item)
    return merged
