"""RSS-first strategy: prefer a structured feed, fall back to page scraping."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional

from ..models import CandidateRecord
from .base import FetchSettings
from .feeds import FeedMapping, discover_feed, read_feed

if TYPE_CHECKING:
    from ..sources.registry import SourceConfig

logger = logging.getLogger(__name__)

Discover = Callable[[str, Optional[FetchSettings]], Awaitable[Optional[str]]]
ReadFeed = Callable[[str, FeedMapping, Optional[FetchSettings]], Awaitable[List[CandidateRecord]]]


class RSSFirstStrategy:
    """Feed wins whenever it yields data; the page extractor runs otherwise.

    Steps, per source:
      1. Use the source's known feed URL, or discover one on its base page.
      2. Read the feed; a non-empty result is returned as-is.
      3. On a missing feed, a failed read or an empty result, run the
         source's page extractor exactly once.
      4. A failing page extractor contributes nothing rather than raising.
    """

    def __init__(
        self,
        settings: Optional[FetchSettings] = None,
        discover: Discover = discover_feed,
        read: ReadFeed = read_feed,
    ):
        self.settings = settings or FetchSettings()
        self._discover = discover
        self._read = read

    async def run(self, source: "SourceConfig") -> List[CandidateRecord]:
        try:
            feed_url = source.feed_url or await self._discover(source.base_url, self.settings)
            if feed_url:
                logger.info(f"Found RSS feed for {source.id}: {feed_url}")
                grants = await self._read(feed_url, source.feed_mapping(), self.settings)
                if grants:
                    logger.info(f"Successfully parsed {len(grants)} grants from RSS feed for {source.id}")
                    return grants
        except Exception as e:
            logger.warning(f"RSS feed handling failed for {source.id}, falling back to HTML: {e}")

        logger.info(f"Using HTML scraping for {source.id}")
        extractor = source.build_extractor(self.settings)
        return await extractor.safe_extract()
