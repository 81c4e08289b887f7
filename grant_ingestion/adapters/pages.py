"""Page scraping driven by per-source selector rules.

Real-world markup is inconsistent, so every rule is an ordered list of
guesses: the first selector that matches anything wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ..models import CandidateRecord, build_candidate
from .base import BaseExtractor, FetchSettings, clean_text, fetch, infer_location

if TYPE_CHECKING:
    from ..sources.registry import SourceConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageRules:
    """Structural scraping rules for one source page."""

    page_url: str
    item_selectors: Sequence[str]
    title_selectors: Sequence[str] = ("h2", "h3", ".title")
    description_selectors: Sequence[str] = ("p", ".description")
    # Empty means every record points at page_url.
    link_selectors: Sequence[str] = ()
    amount_selectors: Sequence[str] = ()
    link_base: Optional[str] = None
    require_description: bool = False
    default_description: Optional[str] = None
    # Fields of a generic record emitted when no item node matches at all.
    fallback: Optional[Dict[str, str]] = None


def select_items(soup: BeautifulSoup, selectors: Sequence[str]) -> List[Tag]:
    for selector in selectors:
        nodes = soup.select(selector)
        if nodes:
            return nodes
    return []


def _select_one(node: Tag, selector: str) -> Optional[Tag]:
    # ":scope" names the item node itself.
    if selector == ":scope":
        return node
    return node.select_one(selector)


def first_text(node: Tag, selectors: Sequence[str]) -> str:
    for selector in selectors:
        found = _select_one(node, selector)
        if found is not None:
            text = clean_text(found.get_text(" "))
            if text:
                return text
    return ""


def first_href(node: Tag, selectors: Sequence[str]) -> Optional[str]:
    for selector in selectors:
        found = _select_one(node, selector)
        if found is not None and found.get("href"):
            return found["href"].strip()
    return None


class PageExtractor(BaseExtractor):
    """Scrapes one source's page using the source's PageRules."""

    def __init__(self, source: "SourceConfig", settings: Optional[FetchSettings] = None):
        self.source = source
        self.rules: PageRules = source.rules
        self.settings = settings or FetchSettings()

    @property
    def source_id(self) -> str:
        return self.source.id

    async def extract(self) -> List[CandidateRecord]:
        """Fetch the page and apply the rules. Returns [] on any failure."""
        url = self.rules.page_url
        try:
            response = await fetch(url, self.settings, source=self.source_id)
            records = self.parse(response.text)
        except Exception as e:
            logger.error(f"Error scraping {self.source.name} ({url}): {e}")
            return []

        logger.info(f"Found {len(records)} grants from {self.source_id}")
        return records

    def parse(self, html: str) -> List[CandidateRecord]:
        rules = self.rules
        soup = BeautifulSoup(html, "lxml")
        nodes = select_items(soup, rules.item_selectors)

        if not nodes:
            if rules.fallback:
                logger.info(f"No items matched on {rules.page_url}; emitting program fallback for {self.source_id}")
                record = self._build(**rules.fallback)
                return [record] if record else []
            logger.debug(f"No items matched on {rules.page_url}")
            return []

        records = []
        for node in nodes:
            title = first_text(node, rules.title_selectors)
            if not title:
                continue
            description = first_text(node, rules.description_selectors)
            if not description:
                if rules.require_description:
                    continue
                description = rules.default_description or f"{self.source.name} program"

            href = first_href(node, rules.link_selectors) if rules.link_selectors else None
            url = urljoin(rules.link_base or rules.page_url, href) if href else rules.page_url

            amount = first_text(node, rules.amount_selectors) if rules.amount_selectors else ""
            record = self._build(title=title, description=description, url=url, amount=amount or None)
            if record:
                records.append(record)
        return records

    def _build(self, **fields) -> Optional[CandidateRecord]:
        source = self.source
        fields.setdefault("url", self.rules.page_url)
        location = source.location or infer_location(
            f"{fields.get('title', '')} {fields.get('description', '')}",
            source.default_location,
        )
        return build_candidate(
            organization=source.organization,
            categories=list(source.categories),
            source=source.id,
            location=location,
            tags=list(source.tags),
            **fields,
        )
