"""Fetch ports backed by the news REST API, plus an offline JSON port."""

from tickerfeed.api.base import RestFetchPort
from tickerfeed.api.client import DekryptApiClient
from tickerfeed.api.detail import TickerDetailService
from tickerfeed.api.highlights import SocialHighlightService
from tickerfeed.api.news import NewsFeedPort
from tickerfeed.api.social import InsightFeedPort, TweetFeedPort
from tickerfeed.api.static import StaticFetchPort
from tickerfeed.api.tickers import TickerFeedPort
from tickerfeed.api.videos import VideoFeedPort

__all__ = [
    "RestFetchPort",
    "DekryptApiClient",
    "InsightFeedPort",
    "SocialHighlightService",
    "NewsFeedPort",
    "StaticFetchPort",
    "TickerDetailService",
    "TickerFeedPort",
    "TweetFeedPort",
    "VideoFeedPort",
]
