"""Tests for rule-driven page extraction."""

import httpx
import pytest
import respx

from grant_ingestion.adapters import FetchSettings, PageExtractor, PageRules

from .conftest import ALPHA_PAGE_URL, GRANTS_PAGE


def _extractor(make_source, settings=None, **rule_overrides) -> PageExtractor:
    rules = dict(
        page_url=ALPHA_PAGE_URL,
        item_selectors=(".grant",),
        link_selectors=("a",),
        amount_selectors=(".amount",),
    )
    rules.update(rule_overrides)
    return PageExtractor(make_source(rules=PageRules(**rules)), settings)


class TestParse:
    def test_extracts_items_with_titles(self, make_source):
        records = _extractor(make_source).parse(GRANTS_PAGE)

        assert [r.title for r in records] == ["Cloud Credits for Researchers", "Community Innovation Fund"]
        first, second = records
        assert first.description == "Up to 10k in compute credits."
        assert first.url == "https://alpha.example.org/grants/cloud-credits"
        assert first.amount == "$10,000"
        assert first.organization == "Alpha Org"
        assert first.source == "alpha"
        assert first.location == "Global"
        assert second.url == "https://partner.example.com/innovation"
        assert second.description == "Alpha program"
        assert second.amount is None

    def test_first_matching_item_selector_wins(self, make_source):
        records = _extractor(make_source, item_selectors=(".missing", ".grant", "div")).parse(GRANTS_PAGE)
        assert len(records) == 2

    def test_require_description_skips_bare_items(self, make_source):
        records = _extractor(make_source, require_description=True).parse(GRANTS_PAGE)
        assert [r.title for r in records] == ["Cloud Credits for Researchers"]

    def test_default_description_is_used(self, make_source):
        records = _extractor(make_source, default_description="Innovation support").parse(GRANTS_PAGE)
        assert records[1].description == "Innovation support"

    def test_without_link_selectors_records_point_at_page(self, make_source):
        records = _extractor(make_source, link_selectors=()).parse(GRANTS_PAGE)
        assert {r.url for r in records} == {ALPHA_PAGE_URL}

    def test_link_base_overrides_page_url(self, make_source):
        records = _extractor(make_source, link_base="https://www.alpha.example.org").parse(GRANTS_PAGE)
        assert records[0].url == "https://www.alpha.example.org/grants/cloud-credits"

    def test_scope_selector_uses_item_itself(self, make_source):
        html = '<ul><li><a class="opp" href="/detail/1">Opportunity One</a></li></ul>'
        records = _extractor(
            make_source,
            item_selectors=("a.opp",),
            title_selectors=(":scope",),
            link_selectors=(":scope",),
        ).parse(html)

        assert records[0].title == "Opportunity One"
        assert records[0].url == "https://alpha.example.org/detail/1"

    def test_fallback_record_when_nothing_matches(self, make_source):
        records = _extractor(
            make_source,
            fallback={"title": "Alpha Research Grants", "description": "Research funding in Kenya."},
        ).parse("<html><body><p>Redesigned page</p></body></html>")

        assert len(records) == 1
        assert records[0].url == ALPHA_PAGE_URL
        assert records[0].location == "Kenya"

    def test_no_match_without_fallback_is_empty(self, make_source):
        assert _extractor(make_source).parse("<html><body></body></html>") == []

    def test_source_location_overrides_inference(self, make_source):
        extractor = PageExtractor(
            make_source(
                location="Africa",
                rules=PageRules(page_url=ALPHA_PAGE_URL, item_selectors=(".grant",)),
            )
        )
        records = extractor.parse(GRANTS_PAGE)
        assert {r.location for r in records} == {"Africa"}

    def test_source_tags_are_attached(self, make_source):
        extractor = PageExtractor(
            make_source(tags=("Alpha", "Research"), rules=PageRules(page_url=ALPHA_PAGE_URL, item_selectors=(".grant",)))
        )
        assert extractor.parse(GRANTS_PAGE)[0].tags == ["Alpha", "Research"]


@pytest.mark.asyncio
@respx.mock
async def test_extract_sends_user_agent(make_source):
    route = respx.get(ALPHA_PAGE_URL).mock(return_value=httpx.Response(200, text=GRANTS_PAGE))
    settings = FetchSettings(timeout=5.0, user_agent="GrantBot/1.0")

    records = await _extractor(make_source, settings).extract()

    assert len(records) == 2
    assert route.calls.last.request.headers["User-Agent"] == "GrantBot/1.0"


@pytest.mark.asyncio
@respx.mock
async def test_extract_failure_returns_empty_list(make_source, settings):
    respx.get(ALPHA_PAGE_URL).mock(return_value=httpx.Response(404))

    assert await _extractor(make_source, settings).extract() == []


@pytest.mark.asyncio
@respx.mock
async def test_extract_connection_error_returns_empty_list(make_source, settings):
    respx.get(ALPHA_PAGE_URL).mock(side_effect=httpx.ConnectError("connection refused"))

    assert await _extractor(make_source, settings).extract() == []
