"""Acquisition adapters: feeds, pages and the strategy that picks between them."""

from .base import BaseExtractor, FetchSettings, fetch, infer_location
from .feeds import FeedItem, FeedMapping, discover_feed, keyword_filter, read_feed
from .pages import PageExtractor, PageRules
from .strategy import RSSFirstStrategy

__all__ = [
    "BaseExtractor",
    "FeedItem",
    "FeedMapping",
    "FetchSettings",
    "PageExtractor",
    "PageRules",
    "RSSFirstStrategy",
    "discover_feed",
    "fetch",
    "infer_location",
    "keyword_filter",
    "read_feed",
]
