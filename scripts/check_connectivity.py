"""Verify connectivity to every backend endpoint the feeds read from."""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from tickerfeed.api.client import DekryptApiClient
from tickerfeed.api.highlights import SocialHighlightService
from tickerfeed.api.news import NewsFeedPort
from tickerfeed.api.tickers import TickerFeedPort
from tickerfeed.api.videos import VideoFeedPort
from tickerfeed.config import Secrets, load_config
from tickerfeed.feed.keys import FeedKey


def check_port(name: str, port, key: FeedKey, start_page: int) -> bool:
    """Fetch one small page of ``key`` and print the first item."""
    print(f"\nChecking {name}...")
    try:
        items = port.fetch_page_sync(key, start_page, 3, force_refresh=True)
        print(f"  Fetched {len(items)} items")
        if items:
            print(f"  First: {items[0].stable_key}")
        print(f"  {name}: OK")
        return True
    except Exception as e:
        print(f"  {name}: FAILED - {e}")
        return False


def check_highlights(client: DekryptApiClient) -> bool:
    print("\nChecking social highlights...")
    try:
        highlight = SocialHighlightService(client).fetch_sync(refresh=True)
        print(f"  Headlines: {len(highlight.headlines or [])}")
        print(f"  Mentions: {len(highlight.top_mention or [])}")
        print("  Social highlights: OK")
        return True
    except Exception as e:
        print(f"  Social highlights: FAILED - {e}")
        return False


def main():
    print("=" * 50)
    print("Tickerfeed - API Connectivity Check")
    print("=" * 50)

    config = load_config(Path("config/settings.yaml"))
    try:
        secrets = Secrets()
    except Exception as e:
        print(f"\nFailed to load .env file: {e}")
        sys.exit(1)

    print(f"Backend: {config.api.base_url}")
    client = DekryptApiClient(config.api, secrets)
    start_page = config.feed.start_page

    try:
        results = [
            check_port("General news", NewsFeedPort(client, start_page), FeedKey.general(), start_page),
            check_port("Ticker list", TickerFeedPort(client, start_page), FeedKey.watchlist(), start_page),
            check_port("Videos", VideoFeedPort(client, start_page), FeedKey.general(), start_page),
            check_highlights(client),
        ]
    finally:
        client.close()

    print("\n" + "=" * 50)
    if all(results):
        print("All checks passed.")
    else:
        print("Some checks failed. Fix the issues above.")
        sys.exit(1)


if __name__ == "__main__":
    main()
