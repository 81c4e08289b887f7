"""Pytest configuration and fixtures."""

from typing import Dict, List, Optional

import pytest

from grant_ingestion.adapters import BaseExtractor, FetchSettings, PageRules
from grant_ingestion.database import InMemoryStore
from grant_ingestion.models import CandidateRecord
from grant_ingestion.sources import SourceConfig, SourceRegistry


ALPHA_BASE_URL = "https://alpha.example.org/"
ALPHA_FEED_URL = "https://alpha.example.org/feed.xml"
ALPHA_PAGE_URL = "https://alpha.example.org/grants"

SAMPLE_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Alpha Funding</title>
    <link>https://alpha.example.org/</link>
    <description>Funding calls</description>
    <item>
      <title>Digital Health Grant for Kenya Startups</title>
      <link>https://alpha.example.org/calls/kenya-digital-health</link>
      <description>&lt;p&gt;Seed funding for &lt;b&gt;health&lt;/b&gt; technology teams.&lt;/p&gt;</description>
      <pubDate>Mon, 06 Jan 2025 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Annual Report Published</title>
      <link>https://alpha.example.org/news/annual-report</link>
      <description>Our yearly financial statements.</description>
      <pubDate>Tue, 07 Jan 2025 10:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""

BASE_PAGE_WITH_FEED = """<html><head>
<title>Alpha</title>
<link rel="stylesheet" href="/style.css">
<link rel="alternate" type="application/rss+xml" title="Funding" href="/feed.xml">
</head><body><h1>Alpha</h1></body></html>
"""

BASE_PAGE_WITHOUT_FEED = "<html><head><title>Alpha</title></head><body><h1>Alpha</h1></body></html>"

GRANTS_PAGE = """<html><body>
<div class="grants">
  <div class="grant">
    <h3>Cloud Credits for Researchers</h3>
    <p>Up to 10k in compute credits.</p>
    <a href="/grants/cloud-credits">Apply</a>
    <span class="amount">$10,000</span>
  </div>
  <div class="grant">
    <h3>Community Innovation Fund</h3>
    <a href="https://partner.example.com/innovation">Details</a>
  </div>
  <div class="grant">
    <p>A card without any heading</p>
  </div>
</div>
</body></html>
"""


@pytest.fixture
def settings() -> FetchSettings:
    return FetchSettings(timeout=5.0, attempts=1)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def make_candidate():
    """Factory for valid CandidateRecords with overridable fields."""

    def _make(url: str = "https://example.com/grant/1", **overrides) -> CandidateRecord:
        fields = dict(
            title="Test Grant",
            description="A grant used in tests",
            organization="Test Org",
            categories=["Technology"],
            url=url,
            source="alpha",
            location="Global",
        )
        fields.update(overrides)
        return CandidateRecord(**fields)

    return _make


@pytest.fixture
def make_source():
    """Factory for SourceConfig entries pointing at example.org hosts."""

    def _make(source_id: str = "alpha", **overrides) -> SourceConfig:
        fields = dict(
            id=source_id,
            name=source_id.title(),
            organization=f"{source_id.title()} Org",
            categories=("Technology",),
            base_url=ALPHA_BASE_URL,
            rules=PageRules(
                page_url=ALPHA_PAGE_URL,
                item_selectors=(".grant",),
                link_selectors=("a",),
                amount_selectors=(".amount",),
            ),
        )
        fields.update(overrides)
        return SourceConfig(**fields)

    return _make


@pytest.fixture
def stub_extractor():
    """Build an extractor factory returning fixed records and counting calls.

    Usage: factory, calls = stub_extractor(records) or stub_extractor(error=...)
    """

    def _build(records: Optional[List[CandidateRecord]] = None, error: Optional[Exception] = None):
        calls: List[str] = []

        class _StubExtractor(BaseExtractor):
            def __init__(self, source, settings=None):
                self.source = source

            @property
            def source_id(self) -> str:
                return self.source.id

            async def extract(self) -> List[CandidateRecord]:
                calls.append(self.source.id)
                if error is not None:
                    raise error
                return list(records or [])

        return _StubExtractor, calls

    return _build


class StaticStrategy:
    """Strategy double: returns canned candidates per source id, or raises."""

    def __init__(self, candidates: Dict[str, List[CandidateRecord]], failing: Optional[Dict[str, Exception]] = None):
        self.candidates = candidates
        self.failing = failing or {}
        self.calls: List[str] = []

    async def run(self, source) -> List[CandidateRecord]:
        self.calls.append(source.id)
        if source.id in self.failing:
            raise self.failing[source.id]
        return list(self.candidates.get(source.id, []))


@pytest.fixture
def static_strategy():
    return StaticStrategy


@pytest.fixture
def three_source_registry(make_source) -> SourceRegistry:
    return SourceRegistry([make_source("alpha"), make_source("beta"), make_source("gamma")])
