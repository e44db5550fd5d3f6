"""Social highlights backing the home screen."""

import asyncio

import structlog
from pydantic import ValidationError

from tickerfeed.api.client import DekryptApiClient
from tickerfeed.feed.base import FeedFetchError
from tickerfeed.models import SocialHighlight

logger = structlog.get_logger(__name__)

HIGHLIGHTS_PATH = "social/highlights"


class SocialHighlightService:
    """Fetches the aggregate headlines / news / events / mentions payload."""

    def __init__(self, client: DekryptApiClient):
        self._client = client

    async def fetch(self, refresh: bool = False) -> SocialHighlight:
        return await asyncio.to_thread(self.fetch_sync, refresh)

    def fetch_sync(self, refresh: bool = False) -> SocialHighlight:
        envelope = self._client.get(HIGHLIGHTS_PATH, force_refresh=refresh)
        if envelope.data is None:
            return SocialHighlight()
        try:
            return SocialHighlight.model_validate(envelope.data)
        except ValidationError as e:
            logger.error("api.parse_failed", path=HIGHLIGHTS_PATH, model="SocialHighlight", error=str(e))
            raise FeedFetchError(f"Malformed SocialHighlight payload from {HIGHLIGHTS_PATH}") from e
