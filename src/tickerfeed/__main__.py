"""Entry point: python -m tickerfeed [kind] [value]

``python -m tickerfeed detail BTC [YYYY-MM-DD]`` prints the ticker detail
sections, then that day's ticker news when a date is given.
"""

import asyncio
import sys
from datetime import date
from pathlib import Path

import structlog

from tickerfeed.api.detail import TickerDetailService
from tickerfeed.config import Secrets, load_config
from tickerfeed.digest import TickerDetailLoader
from tickerfeed.feed.keys import FeedKey, FeedKind
from tickerfeed.logging_config import configure_logging
from tickerfeed.providers import create_api_client, create_fetch_port
from tickerfeed.session import FeedSession

logger = structlog.get_logger(__name__)

FEED_FOR_KIND = {
    FeedKind.WATCHLIST: "tickers",
}


def _log_notification(n) -> None:
    logger.warning("tickerfeed.notification", code=n.code, message=n.message)


async def run(key: FeedKey, config, secrets) -> None:
    feed = FEED_FOR_KIND.get(key.kind, "news")
    port = create_fetch_port(feed, config, secrets)
    session = FeedSession.from_config(port, config.feed, key, name=feed)
    session.errors.subscribe(_log_notification)

    async with session:
        items = await session.start()
        logger.info("tickerfeed.loaded", key=str(key), count=len(items))
        for item in items:
            logger.info("tickerfeed.item", key=item.stable_key, title=getattr(item, "title", None))


async def run_detail(symbol: str, day, config, secrets) -> None:
    client = create_api_client(config, secrets)
    loader = TickerDetailLoader(
        TickerDetailService(client),
        *(create_fetch_port(feed, config, secrets, client) for feed in ("news", "videos", "insights", "tweets")),
        config.digest,
        config.feed,
    )
    loader.errors.subscribe(_log_notification)

    for s in await loader.load(symbol):
        logger.info("tickerfeed.section", section=s.id, count=len(s.items), has_more=s.has_more)

    if day is not None:
        await run(TickerDetailLoader.day_news_key(symbol, day), config, secrets)


def main():
    config = load_config(Path("config/settings.yaml"))
    try:
        secrets = Secrets()
    except Exception as e:
        print(f"Failed to load secrets from .env: {e}")
        sys.exit(1)

    configure_logging(config.logging)

    args = sys.argv[1:]
    if args and args[0] == "detail":
        if len(args) < 2:
            print("Usage: python -m tickerfeed detail SYMBOL [YYYY-MM-DD]")
            sys.exit(2)
        try:
            day = date.fromisoformat(args[2]) if len(args) > 2 else None
        except ValueError as e:
            print(f"Invalid date: {e}")
            sys.exit(2)
        asyncio.run(run_detail(args[1], day, config, secrets))
        return

    try:
        key = FeedKey.parse(args[0], args[1] if len(args) > 1 else None) if args else FeedKey.general()
    except ValueError as e:
        print(f"Invalid feed: {e}")
        sys.exit(2)

    asyncio.run(run(key, config, secrets))


if __name__ == "__main__":
    main()
