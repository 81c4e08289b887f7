"""Structured feed support: discovery on a base page and RSS/Atom reading."""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, Sequence
from urllib.parse import urljoin

import feedparser
from bs4 import BeautifulSoup

from ..models import FEED_TAG, CandidateRecord, build_candidate
from .base import FetchSettings, clean_text, fetch, infer_location

logger = logging.getLogger(__name__)

FEED_TYPES = ("application/rss+xml", "application/atom+xml")

MAX_DESCRIPTION_LENGTH = 1000


@dataclass(frozen=True)
class FeedItem:
    """The subset of a raw feed entry that filters get to see."""

    title: str
    link: str
    snippet: str
    published: Optional[datetime] = None

    @property
    def text(self) -> str:
        return f"{self.title} {self.snippet}"


FeedFilter = Callable[[FeedItem], bool]


@dataclass(frozen=True)
class FeedMapping:
    """How items of one source's feed become candidate records."""

    source: str
    organization: str
    categories: Sequence[str]
    location: Optional[str] = None
    default_location: Optional[str] = None
    filter_fn: Optional[FeedFilter] = None
    # Feeds carry publish stamps, not application deadlines.
    publish_date_as_deadline: bool = True
    tags: Sequence[str] = field(default_factory=tuple)


def keyword_filter(*keywords: str) -> FeedFilter:
    """Keep items whose lower-cased title + snippet contains any keyword."""
    words = tuple(k.lower() for k in keywords)

    def _matches(item: FeedItem) -> bool:
        text = item.text.lower()
        return any(word in text for word in words)

    return _matches


def _struct_time_to_datetime(value: Any) -> Optional[datetime]:
    """feedparser normalizes *_parsed stamps to UTC struct_time."""
    if not value:
        return None
    try:
        return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None


def _strip_markup(value: str) -> str:
    if "<" not in value:
        return clean_text(value)
    return clean_text(BeautifulSoup(value, "lxml").get_text(" "))


def _coerce_entry(entry: Mapping[str, Any]) -> FeedItem:
    title = clean_text(str(entry.get("title") or ""))
    link = str(entry.get("link") or entry.get("id") or "").strip()

    snippet = str(entry.get("summary") or entry.get("description") or "")
    if not snippet and entry.get("content"):
        snippet = str(entry["content"][0].get("value") or "")

    published = _struct_time_to_datetime(
        entry.get("published_parsed") or entry.get("updated_parsed")
    )
    return FeedItem(title=title, link=link, snippet=_strip_markup(snippet), published=published)


def find_feed_link(html: str, base_url: str) -> Optional[str]:
    """Return the first feed declared in the page's <link> tags, made absolute."""
    soup = BeautifulSoup(html, "lxml")
    for link in soup.find_all("link", href=True):
        link_type = (link.get("type") or "").strip().lower()
        if link_type in FEED_TYPES:
            return urljoin(base_url, link["href"].strip())
    return None


async def discover_feed(base_url: str, settings: Optional[FetchSettings] = None) -> Optional[str]:
    """Locate a structured feed for a source's base page.

    Never raises: fetch failures, timeouts and pages without a feed
    declaration all come back as None.
    """
    try:
        response = await fetch(base_url, settings, source="feed-discovery")
        feed_url = find_feed_link(response.text, str(response.url) or base_url)
    except Exception as e:
        logger.warning(f"Feed discovery failed for {base_url}: {e}")
        return None

    if feed_url:
        logger.info(f"Discovered feed for {base_url}: {feed_url}")
    else:
        logger.debug(f"No feed declared on {base_url}")
    return feed_url


def parse_feed_items(content: bytes, mapping: FeedMapping, feed_url: str) -> List[CandidateRecord]:
    """Turn raw feed bytes into candidate records for one source."""
    parsed = feedparser.parse(content)
    if parsed.bozo and not parsed.entries:
        raise ValueError(f"Malformed feed: {parsed.get('bozo_exception')}")

    default = mapping.location or mapping.default_location or "Global"
    records = []
    for entry in parsed.entries:
        item = _coerce_entry(entry)

        if mapping.filter_fn is not None and not mapping.filter_fn(item):
            continue
        if not item.title or not item.link:
            continue

        description = (item.snippet or item.title)[:MAX_DESCRIPTION_LENGTH]
        candidate = build_candidate(
            title=item.title,
            description=description,
            organization=mapping.organization,
            categories=list(mapping.categories),
            url=urljoin(feed_url, item.link),
            deadline=item.published if mapping.publish_date_as_deadline else None,
            source=mapping.source,
            location=infer_location(f"{item.title} {item.snippet}", default),
            tags=[FEED_TAG, *mapping.tags],
        )
        if candidate:
            records.append(candidate)
    return records


async def read_feed(
    feed_url: str,
    mapping: FeedMapping,
    settings: Optional[FetchSettings] = None,
) -> List[CandidateRecord]:
    """Fetch and parse a feed into candidate records.

    Returns an empty list when the feed cannot be fetched or parsed; feed
    unavailability is routine.
    """
    try:
        response = await fetch(feed_url, settings, source=mapping.source)
        records = parse_feed_items(response.content, mapping, feed_url)
    except Exception as e:
        logger.error(f"Error parsing RSS feed {feed_url}: {e}")
        return []

    logger.info(f"Parsed {len(records)} grants from RSS feed: {feed_url}")
    return records
