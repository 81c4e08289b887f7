"""Tests for the feed-first acquisition strategy."""

import httpx
import pytest
import respx

from grant_ingestion.adapters import RSSFirstStrategy
from grant_ingestion.models import FEED_TAG

from .conftest import (
    ALPHA_BASE_URL,
    ALPHA_FEED_URL,
    ALPHA_PAGE_URL,
    BASE_PAGE_WITH_FEED,
    BASE_PAGE_WITHOUT_FEED,
    GRANTS_PAGE,
    SAMPLE_FEED,
)


class FakeFeeds:
    """Records discovery and read calls; returns canned values."""

    def __init__(self, feed_url=None, records=None, read_error=None):
        self.feed_url = feed_url
        self.records = records or []
        self.read_error = read_error
        self.discovered = []
        self.read_urls = []

    async def discover(self, base_url, settings=None):
        self.discovered.append(base_url)
        return self.feed_url

    async def read(self, feed_url, mapping, settings=None):
        self.read_urls.append(feed_url)
        if self.read_error:
            raise self.read_error
        return list(self.records)


def _strategy(feeds: FakeFeeds, settings) -> RSSFirstStrategy:
    return RSSFirstStrategy(settings, discover=feeds.discover, read=feeds.read)


@pytest.mark.asyncio
async def test_feed_records_win_and_page_never_runs(make_source, make_candidate, stub_extractor, settings):
    factory, calls = stub_extractor([make_candidate("https://alpha.example.org/page")])
    feeds = FakeFeeds(feed_url=ALPHA_FEED_URL, records=[make_candidate("https://alpha.example.org/feed")])

    records = await _strategy(feeds, settings).run(make_source(extractor_factory=factory))

    assert [r.url for r in records] == ["https://alpha.example.org/feed"]
    assert feeds.read_urls == [ALPHA_FEED_URL]
    assert calls == []


@pytest.mark.asyncio
async def test_no_feed_falls_back_to_page_once(make_source, make_candidate, stub_extractor, settings):
    factory, calls = stub_extractor([make_candidate("https://alpha.example.org/page")])
    feeds = FakeFeeds(feed_url=None)

    records = await _strategy(feeds, settings).run(make_source(extractor_factory=factory))

    assert [r.url for r in records] == ["https://alpha.example.org/page"]
    assert feeds.discovered == [ALPHA_BASE_URL]
    assert feeds.read_urls == []
    assert calls == ["alpha"]


@pytest.mark.asyncio
async def test_empty_feed_falls_back_to_page(make_source, make_candidate, stub_extractor, settings):
    factory, calls = stub_extractor([make_candidate()])
    feeds = FakeFeeds(feed_url=ALPHA_FEED_URL, records=[])

    records = await _strategy(feeds, settings).run(make_source(extractor_factory=factory))

    assert len(records) == 1
    assert calls == ["alpha"]


@pytest.mark.asyncio
async def test_feed_error_falls_back_to_page(make_source, make_candidate, stub_extractor, settings):
    factory, calls = stub_extractor([make_candidate()])
    feeds = FakeFeeds(feed_url=ALPHA_FEED_URL, read_error=RuntimeError("feed exploded"))

    records = await _strategy(feeds, settings).run(make_source(extractor_factory=factory))

    assert len(records) == 1
    assert calls == ["alpha"]


@pytest.mark.asyncio
async def test_known_feed_url_skips_discovery(make_source, make_candidate, stub_extractor, settings):
    factory, calls = stub_extractor()
    feeds = FakeFeeds(records=[make_candidate()])
    source = make_source(feed_url="https://alpha.example.org/known.rss", extractor_factory=factory)

    await _strategy(feeds, settings).run(source)

    assert feeds.discovered == []
    assert feeds.read_urls == ["https://alpha.example.org/known.rss"]


@pytest.mark.asyncio
async def test_failing_page_extractor_contributes_nothing(make_source, stub_extractor, settings):
    factory, calls = stub_extractor(error=RuntimeError("selector crash"))

    records = await _strategy(FakeFeeds(), settings).run(make_source(extractor_factory=factory))

    assert records == []
    assert calls == ["alpha"]


@pytest.mark.asyncio
async def test_end_to_end_feed_path(make_source, settings):
    with respx.mock(assert_all_called=False) as respx_mock:
        respx_mock.get(ALPHA_BASE_URL).mock(return_value=httpx.Response(200, text=BASE_PAGE_WITH_FEED))
        respx_mock.get(ALPHA_FEED_URL).mock(return_value=httpx.Response(200, content=SAMPLE_FEED.encode()))
        page = respx_mock.get(ALPHA_PAGE_URL).mock(return_value=httpx.Response(200, text=GRANTS_PAGE))

        records = await RSSFirstStrategy(settings).run(make_source())

    assert len(records) == 2
    assert all(FEED_TAG in r.tags for r in records)
    assert not page.called


@pytest.mark.asyncio
@respx.mock
async def test_end_to_end_page_path(make_source, settings):
    respx.get(ALPHA_BASE_URL).mock(return_value=httpx.Response(200, text=BASE_PAGE_WITHOUT_FEED))
    page = respx.get(ALPHA_PAGE_URL).mock(return_value=httpx.Response(200, text=GRANTS_PAGE))

    records = await RSSFirstStrategy(settings).run(make_source())

    assert [r.title for r in records] == ["Cloud Credits for Researchers", "Community Innovation Fund"]
    assert page.call_count == 1
