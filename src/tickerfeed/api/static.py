"""Offline fetch port serving items from a JSON fixture."""

import json
from pathlib import Path
from typing import Any, Optional

import structlog
from pydantic import ValidationError

from tickerfeed.feed.base import FeedFetchError, FetchPort
from tickerfeed.feed.keys import FeedKey

logger = structlog.get_logger(__name__)


class StaticFetchPort(FetchPort):
    """Pages through a fixed list loaded once from disk.

    The file holds either a plain list of items or a mapping from a feed key
    string (``"general"``, ``"ticker:BTC"``) to such a list.
    """

    provider = "stub"

    def __init__(self, path: Path, model: Any, start_page: int = 1):
        self._path = Path(path)
        self._model = model
        self._start_page = start_page
        self._data: Optional[Any] = None

    async def fetch_page(
        self,
        key: FeedKey,
        page: int,
        limit: int,
        force_refresh: bool = False,
    ) -> list[Any]:
        raw_items = self._items_for(key)
        offset = (page - self._start_page) * limit
        if offset < 0:
            return []
        try:
            return [self._model.model_validate(raw) for raw in raw_items[offset : offset + limit]]
        except ValidationError as e:
            raise FeedFetchError(f"Malformed {self._model.__name__} in {self._path}") from e

    def _items_for(self, key: FeedKey) -> list[Any]:
        data = self._load()
        if isinstance(data, list):
            return data
        return data.get(str(key), [])

    def _load(self) -> Any:
        if self._data is None:
            try:
                with open(self._path) as f:
                    self._data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error("stub.load_failed", path=str(self._path), error=str(e))
                raise FeedFetchError(f"Cannot read fixture {self._path}: {e}") from e
            logger.info("stub.loaded", path=str(self._path))
        return self._data
