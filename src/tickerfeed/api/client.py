"""HTTP client for the news backend with retry on transient failures."""

from typing import Any, Optional

import requests
import structlog
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from tickerfeed.config import ApiConfig, Secrets
from tickerfeed.feed.base import FeedFetchError
from tickerfeed.models import ApiEnvelope

logger = structlog.get_logger(__name__)

RETRYABLE_ERRORS = (requests.exceptions.Timeout, requests.exceptions.ConnectionError)


class DekryptApiClient:
    """Thin wrapper over a shared requests.Session.

    Every endpoint answers with a ``{data, success, err}`` envelope; anything
    else, and any unsuccessful envelope, becomes a FeedFetchError.
    """

    def __init__(self, config: ApiConfig, secrets: Secrets, session: Optional[requests.Session] = None):
        self._base_url = config.base_url
        self._timeout = config.timeout_seconds
        self._max_attempts = config.max_attempts
        self._session = session or requests.Session()
        self._session.headers.setdefault("Accept", "application/json")
        if secrets.feed_api_key:
            self._session.headers[config.api_key_header] = secrets.feed_api_key

    def get(self, path: str, params: Optional[dict] = None, force_refresh: bool = False) -> ApiEnvelope:
        """GET ``path`` and return the parsed envelope."""
        query = {k: v for k, v in (params or {}).items() if v is not None}
        if force_refresh:
            query["refresh"] = "true"
        headers = {"Cache-Control": "no-cache"} if force_refresh else None
        url = f"{self._base_url}/{path.lstrip('/')}"

        try:
            response = self._get_with_retry(url, query, headers)
            response.raise_for_status()
            envelope = ApiEnvelope.model_validate(response.json())
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error("api.request_failed", path=path, status=status, error=str(e))
            raise FeedFetchError(f"Request to {path} failed with status {status}") from e
        except (requests.exceptions.RequestException, ValueError, ValidationError) as e:
            logger.error("api.request_failed", path=path, error=str(e))
            raise FeedFetchError(f"Request to {path} failed: {e}") from e

        if not envelope.success:
            logger.warning("api.unsuccessful_response", path=path, err=envelope.err)
            raise FeedFetchError(envelope.err or f"Request to {path} was not successful")

        return envelope

    def _get_with_retry(self, url: str, params: dict, headers: Optional[dict]) -> requests.Response:
        """
        Fetch ``url``, retrying timeouts and dropped connections.

        Backs off exponentially (1s, 2s, 4s, capped at 10s) up to the configured
        number of attempts. HTTP error statuses are not retried.
        """

        @retry(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            reraise=True,
        )
        def attempt() -> requests.Response:
            logger.debug("api.call_attempt", url=url, timeout=self._timeout)
            return self._session.get(url, params=params, headers=headers, timeout=self._timeout)

        return attempt()

    def close(self) -> None:
        self._session.close()


def parse_items(envelope: ApiEnvelope, model: Any, path: str) -> list[Any]:
    """Validate ``envelope.data`` as a list of ``model``. Missing data is an empty page."""
    if envelope.data is None:
        return []
    if not isinstance(envelope.data, list):
        raise FeedFetchError(f"Expected a list from {path}, got {type(envelope.data).__name__}")
    try:
        return [model.model_validate(raw) for raw in envelope.data]
    except ValidationError as e:
        logger.error("api.parse_failed", path=path, model=model.__name__, error=str(e))
        raise FeedFetchError(f"Malformed {model.__name__} payload from {path}") from e
