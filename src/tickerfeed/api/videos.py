"""Video feed, optionally narrowed to one ticker."""

from typing import Any

from tickerfeed.api.base import RestFetchPort
from tickerfeed.feed.keys import FeedKey, FeedKind
from tickerfeed.models import Video

VIDEO_PATH = "video"


class VideoFeedPort(RestFetchPort):
    def _route(self, key: FeedKey, page: int, limit: int) -> tuple[str, dict, Any]:
        params: dict = {"page": page, "limit": limit}
        if key.kind == FeedKind.GENERAL:
            return VIDEO_PATH, params, Video
        if key.kind == FeedKind.TICKER:
            params["entity"] = key.value
            return VIDEO_PATH, params, Video

        raise self._unsupported(key)
