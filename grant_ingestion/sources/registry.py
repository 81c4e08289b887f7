"""Catalog of grant sources.

Each entry binds a source id to its metadata, its feed settings and the page
rules used when no feed yields data. Adding a source means adding an entry
here; nothing else branches on source identity.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from ..adapters.base import BaseExtractor, FetchSettings
from ..adapters.feeds import FeedFilter, FeedMapping, keyword_filter
from ..adapters.pages import PageExtractor, PageRules
from ..errors import SourceNotFound

ExtractorFactory = Callable[["SourceConfig", Optional[FetchSettings]], BaseExtractor]


@dataclass(frozen=True)
class SourceConfig:
    """One external origin of grant data."""

    id: str
    name: str
    organization: str
    categories: Sequence[str]
    base_url: str
    rules: PageRules
    location: Optional[str] = None
    default_location: str = "Global"
    feed_url: Optional[str] = None
    feed_filter: Optional[FeedFilter] = None
    publish_date_as_deadline: bool = True
    tags: Sequence[str] = field(default_factory=tuple)
    extractor_factory: ExtractorFactory = PageExtractor

    def feed_mapping(self) -> FeedMapping:
        return FeedMapping(
            source=self.id,
            organization=self.organization,
            categories=tuple(self.categories),
            location=self.location,
            default_location=self.default_location,
            filter_fn=self.feed_filter,
            publish_date_as_deadline=self.publish_date_as_deadline,
            tags=tuple(self.tags),
        )

    def build_extractor(self, settings: Optional[FetchSettings] = None) -> BaseExtractor:
        return self.extractor_factory(self, settings)


class SourceRegistry:
    """Ordered, id-keyed collection of SourceConfig entries."""

    def __init__(self, sources: Iterable[SourceConfig]):
        self._sources: Dict[str, SourceConfig] = {}
        for source in sources:
            if source.id in self._sources:
                raise ValueError(f"Duplicate source id: {source.id}")
            self._sources[source.id] = source

    def get(self, source_id: str) -> SourceConfig:
        try:
            return self._sources[source_id]
        except KeyError:
            raise SourceNotFound(source_id) from None

    def ids(self) -> List[str]:
        return list(self._sources)

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._sources

    def __iter__(self) -> Iterator[SourceConfig]:
        return iter(self._sources.values())

    def __len__(self) -> int:
        return len(self._sources)


TECH_KEYWORDS = ("technology", "tech", "ai", "computing", "innovation", "research")

DEFAULT_SOURCES = (
    SourceConfig(
        id="grants_gov",
        name="Grants.gov",
        organization="U.S. Government",
        categories=("Technology",),
        location="Global",
        base_url="https://www.grants.gov/connect/rss-feeds",
        feed_filter=keyword_filter(*TECH_KEYWORDS),
        rules=PageRules(
            page_url="https://www.grants.gov/search-grants",
            item_selectors=("table.usa-table tbody tr", "a[href*='search-results-detail']"),
            title_selectors=("a", "td:nth-of-type(2)", ":scope"),
            description_selectors=("td:nth-of-type(3)",),
            link_selectors=("a", ":scope"),
            link_base="https://www.grants.gov",
            default_description="U.S. federal funding opportunity listed on Grants.gov",
        ),
        tags=("Grants.gov", "Government"),
    ),
    SourceConfig(
        id="aws_credits",
        name="AWS Cloud Credits",
        organization="Amazon Web Services",
        categories=("Cloud Compute",),
        base_url="https://aws.amazon.com/grants/",
        rules=PageRules(
            page_url="https://aws.amazon.com/grants/",
            item_selectors=(".grant-item", ".program-card", ".lb-grid .lb-col"),
            title_selectors=("h2", "h3", ".title"),
            description_selectors=("p", ".description"),
            require_description=True,
        ),
        tags=("AWS", "Cloud Credits", "Research"),
    ),
    SourceConfig(
        id="google_cloud",
        name="Google Cloud Research Credits",
        organization="Google",
        categories=("Cloud Compute",),
        base_url="https://cloud.google.com/edu/researchers",
        rules=PageRules(
            page_url="https://cloud.google.com/edu/researchers",
            item_selectors=(".program-card", ".grant-card", ".cloud-card"),
            title_selectors=("h2", "h3"),
            description_selectors=("p",),
            default_description="Google Cloud research credits program",
        ),
        tags=("Google Cloud", "Research Credits"),
    ),
    SourceConfig(
        id="microsoft_ai",
        name="Microsoft AI for Good",
        organization="Microsoft",
        categories=("Health AI", "Finance AI"),
        base_url="https://www.microsoft.com/en-us/ai/ai-for-good",
        rules=PageRules(
            page_url="https://www.microsoft.com/en-us/ai/ai-for-good",
            item_selectors=(".program-item", ".grant-program", ".card"),
            title_selectors=("h2", "h3"),
            description_selectors=("p",),
            default_description="Microsoft AI for Good program",
        ),
        tags=("Microsoft", "AI for Good"),
    ),
    SourceConfig(
        id="openai",
        name="OpenAI",
        organization="OpenAI",
        categories=("LLM Tokens",),
        base_url="https://openai.com/research",
        rules=PageRules(
            page_url="https://openai.com/research",
            item_selectors=(".program-card", "article"),
            title_selectors=("h2", "h3"),
            description_selectors=(),
            link_selectors=("a",),
            link_base="https://openai.com",
            default_description="OpenAI researcher access and API token programs",
        ),
        tags=("OpenAI", "API Tokens", "LLM"),
    ),
    SourceConfig(
        id="anthropic",
        name="Anthropic",
        organization="Anthropic",
        categories=("LLM Tokens",),
        base_url="https://www.anthropic.com/research",
        rules=PageRules(
            page_url="https://www.anthropic.com/research",
            item_selectors=(".program-item", "article"),
            title_selectors=("h2", "h3"),
            description_selectors=(),
            link_selectors=("a",),
            link_base="https://www.anthropic.com",
            default_description="Anthropic research access and API programs",
        ),
        tags=("Anthropic", "Claude", "API Tokens", "LLM"),
    ),
    SourceConfig(
        id="afdb",
        name="African Development Bank",
        organization="African Development Bank",
        categories=("Technology",),
        location="Africa",
        base_url="https://www.afdb.org/en/rss-feeds",
        feed_filter=keyword_filter("technology", "tech", "ict", "innovation", "kenya"),
        rules=PageRules(
            page_url="https://www.afdb.org/en/news-and-events",
            item_selectors=(".views-row", "article"),
            title_selectors=("h3 a", "h2 a", "h3", "h2"),
            description_selectors=(".field-content p", "p"),
            link_selectors=("h3 a", "h2 a", "a"),
            require_description=True,
        ),
        tags=("AfDB", "Africa"),
    ),
    SourceConfig(
        id="all_africa",
        name="AllAfrica",
        organization="AllAfrica",
        categories=("Technology",),
        location="Africa",
        base_url="https://allafrica.com/business/",
        feed_url="https://allafrica.com/tools/rss/headlines/rdf/business/headlines.rss",
        feed_filter=keyword_filter("grant", "funding", "technology", "tech"),
        publish_date_as_deadline=False,
        rules=PageRules(
            page_url="https://allafrica.com/business/",
            item_selectors=("ul.stories li", ".story"),
            title_selectors=(".headline", "a"),
            description_selectors=(".teaser", "p"),
            link_selectors=("a",),
            require_description=True,
        ),
        tags=("AllAfrica", "News"),
    ),
    SourceConfig(
        id="nrf_kenya",
        name="NRF Kenya",
        organization="National Research Fund Kenya",
        categories=("Technology",),
        location="Kenya",
        base_url="https://www.nrf.go.ke/category/grants-and-calls/",
        rules=PageRules(
            page_url="https://www.nrf.go.ke/category/grants-and-calls/",
            item_selectors=("article", ".post", ".entry"),
            title_selectors=(".entry-title", "h2", "h3"),
            description_selectors=(".entry-summary", ".entry-content p", "p"),
            link_selectors=(".entry-title a", "h2 a", "a"),
            fallback={
                "title": "NRF Kenya Research Grants",
                "description": (
                    "National Research Fund Kenya offers grants for technology "
                    "and innovation research projects in Kenya."
                ),
            },
        ),
        tags=("Kenya", "Research", "NRF"),
    ),
    SourceConfig(
        id="ictworks",
        name="ICTWorks",
        organization="ICTWorks",
        categories=("Technology",),
        default_location="Africa",
        base_url="https://www.ictworks.org/category/funding/",
        rules=PageRules(
            page_url="https://www.ictworks.org/category/funding/",
            item_selectors=("article", ".post"),
            title_selectors=(".entry-title", "h2", "h3"),
            description_selectors=(".entry-summary", ".entry-content p", "p"),
            link_selectors=(".entry-title a", "h2 a", "a"),
            require_description=True,
        ),
        tags=("ICT", "Technology"),
    ),
    SourceConfig(
        id="i3_innovations",
        name="i3 Innovations Africa",
        organization="i3 Innovations Africa",
        categories=("Technology", "Health AI"),
        location="Africa",
        base_url="https://innovationsinafrica.com/application/",
        rules=PageRules(
            page_url="https://innovationsinafrica.com/application/",
            item_selectors=(".elementor-widget-text-editor", ".program", "section"),
            title_selectors=("h2", "h3", "h4"),
            description_selectors=("p",),
            require_description=True,
            fallback={
                "title": "i3 Innovations Africa - Health Tech Grants",
                "description": (
                    "Supporting African-led health tech companies building "
                    "data-driven access to healthcare."
                ),
                "eligibility": (
                    "African-led and African-owned businesses focused on serving "
                    "African markets."
                ),
            },
        ),
        tags=("Health Tech", "Africa", "Innovation"),
    ),
    SourceConfig(
        id="ieee_emerging_tech",
        name="IEEE Computer Society",
        organization="IEEE Computer Society",
        categories=("Technology",),
        location="Global",
        base_url="https://www.computer.org/communities/emerging-technology-fund",
        rules=PageRules(
            page_url="https://www.computer.org/communities/emerging-technology-fund",
            item_selectors=(".fund-program", ".card", "main section"),
            title_selectors=("h2", "h3"),
            description_selectors=("p",),
            amount_selectors=(".amount", "strong"),
            require_description=True,
            fallback={
                "title": "IEEE Computer Society Emerging Technology Fund",
                "description": (
                    "Grants for innovative projects focused on emerging technologies."
                ),
                "amount": "$5,000 - $50,000",
            },
        ),
        tags=("IEEE", "Emerging Technology"),
    ),
)


def default_registry() -> SourceRegistry:
    return SourceRegistry(DEFAULT_SOURCES)
