import asyncio

import pytest

from app.services.kitsu.service import CatalogError
from app.services.recommendation.digger import CatalogDigger
from tests.fakes import FakeCatalog, kitsu_item


def _ids(items):
    return [item["id"] for item in items]


def test_stops_on_empty_page_and_returns_everything_available():
    catalog = FakeCatalog()
    catalog.pages["Action"] = [kitsu_item(i) for i in range(1, 26)]

    result = asyncio.run(CatalogDigger(catalog, quota=30, page_size=20, max_attempts=6).dig("Action", set()))

    assert _ids(result) == [str(i) for i in range(1, 26)]
    # two pages with data, then the empty page that ends the loop
    assert [offset for _, _, offset in catalog.page_calls] == [0, 20, 40]


def test_fewer_than_quota_upstream_is_not_an_error():
    catalog = FakeCatalog()
    catalog.pages["Romance"] = [kitsu_item(i) for i in range(1, 6)]

    result = asyncio.run(CatalogDigger(catalog).dig("Romance", set()))

    assert len(result) == 5


def test_stops_as_soon_as_quota_is_reached():
    catalog = FakeCatalog()
    catalog.pages["Action"] = [kitsu_item(i) for i in range(1, 100)]

    result = asyncio.run(CatalogDigger(catalog, quota=15, page_size=20).dig("Action", set()))

    # the whole first page is kept even though it overshoots the quota
    assert len(result) == 20
    assert len(catalog.page_calls) == 1


def test_owned_items_are_skipped():
    catalog = FakeCatalog()
    catalog.pages["Action"] = [kitsu_item("123"), kitsu_item("124"), kitsu_item(125)]

    result = asyncio.run(CatalogDigger(catalog).dig("Action", {"123", "125"}))

    assert _ids(result) == ["124"]


def test_keeps_paging_past_owned_items_until_quota():
    catalog = FakeCatalog()
    catalog.pages["Drama"] = [kitsu_item(i) for i in range(1, 61)]
    owned = {str(i) for i in range(1, 31)}

    result = asyncio.run(CatalogDigger(catalog, quota=15, page_size=20).dig("Drama", owned))

    assert _ids(result) == [str(i) for i in range(31, 61)]
    assert [offset for _, _, offset in catalog.page_calls] == [0, 20, 40]


def test_never_empty_upstream_is_bounded_by_attempts():
    catalog = FakeCatalog()
    catalog.endless = True
    # everything served is already owned, so the quota can never be met
    owned = {f"Action-{i}" for i in range(0, 1000)}

    result = asyncio.run(CatalogDigger(catalog, quota=15, page_size=20, max_attempts=6).dig("Action", owned))

    assert result == []
    assert len(catalog.page_calls) == 6
    assert [offset for _, _, offset in catalog.page_calls] == [0, 20, 40, 60, 80, 100]


def test_requests_use_configured_page_size_and_genre():
    catalog = FakeCatalog()
    asyncio.run(CatalogDigger(catalog, page_size=7).dig("Slice of life", set()))

    assert catalog.page_calls == [("Slice of life", 7, 0)]


def test_page_failure_propagates():
    catalog = FakeCatalog()
    catalog.endless = True
    catalog.fail_at_offset = 20
    owned = {f"Action-{i}" for i in range(0, 20)}

    with pytest.raises(CatalogError):
        asyncio.run(CatalogDigger(catalog, quota=15, page_size=20).dig("Action", owned))


def test_zero_quota_stops_after_first_page():
    catalog = FakeCatalog()
    catalog.pages["Action"] = [kitsu_item(i) for i in range(1, 61)]
    owned = {str(i) for i in range(1, 21)}

    result = asyncio.run(CatalogDigger(catalog, quota=0, page_size=20).dig("Action", owned))

    assert result == []
    assert len(catalog.page_calls) == 1
