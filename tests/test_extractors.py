# File: tests/test_extractors.py
from datetime import datetime, timezone

import pytest
from playwright.async_api import Error as PlaywrightError

from lesson_scout.config import SiteSelectors
from lesson_scout.crawler.item import extract_item, id_from_canonical, read_item, split_tags
from lesson_scout.crawler.listing import extract_item_urls
from lesson_scout.crawler.pagination import build_page_urls, discover_pages, parse_last_page
from lesson_scout.errors import PaginationError
from lesson_scout.models import fallback_record_id
from tests.fakes import ROOT_URL, item_html, listing_html, pagination_html

SELECTORS = SiteSelectors()
ITEM_URL = "https://lessons.example/shiur/101/"
LISTING_URL = f"{ROOT_URL}&_paged=1"


# --------------------------------------------------------------------------- #
#                                 Pagination                                  #
# --------------------------------------------------------------------------- #


def test_build_page_urls_in_order():
    assert build_page_urls("https://x.example/?a=1", 4) == [
        "https://x.example/?a=1&_paged=1",
        "https://x.example/?a=1&_paged=2",
        "https://x.example/?a=1&_paged=3",
        "https://x.example/?a=1&_paged=4",
    ]


@pytest.mark.parametrize("text", [None, "", "last", "4a", "0", "-2"])
def test_parse_last_page_rejects_bad_indicator(text):
    with pytest.raises(PaginationError):
        parse_last_page(text)


@pytest.mark.asyncio()
async def test_discover_pages_from_indicator(site, fetcher):
    site.add(ROOT_URL, pagination_html("4"))

    outcome = await discover_pages(fetcher, ROOT_URL, SELECTORS)

    assert outcome.ok
    assert outcome.value == [f"{ROOT_URL}&_paged={n}" for n in range(1, 5)]


@pytest.mark.asyncio()
async def test_discover_pages_non_numeric_is_failure(site, fetcher):
    site.add(ROOT_URL, pagination_html("…"))

    outcome = await discover_pages(fetcher, ROOT_URL, SELECTORS)

    assert not outcome.ok
    assert isinstance(outcome.error.last_error, PaginationError)
    assert site.visits[ROOT_URL] == 3


@pytest.mark.asyncio()
async def test_discover_pages_without_pager_is_failure(site, fetcher):
    site.add(ROOT_URL, pagination_html(None))

    outcome = await discover_pages(fetcher, ROOT_URL, SELECTORS)

    assert not outcome.ok


# --------------------------------------------------------------------------- #
#                                  Listing                                    #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_listing_urls_in_document_order(site, fetcher):
    urls = ["https://lessons.example/shiur/3/", "/shiur/1/", "https://lessons.example/shiur/3/"]
    site.add(LISTING_URL, listing_html(urls))

    outcome = await extract_item_urls(fetcher, LISTING_URL, SELECTORS)

    assert outcome.value == [
        "https://lessons.example/shiur/3/",
        "https://lessons.example/shiur/1/",
        "https://lessons.example/shiur/3/",
    ]


@pytest.mark.asyncio()
async def test_empty_listing_is_not_an_error(site, fetcher):
    site.add(LISTING_URL, listing_html([]))

    outcome = await extract_item_urls(fetcher, LISTING_URL, SELECTORS)

    assert outcome.ok
    assert outcome.value == []
    assert site.visits[LISTING_URL] == 1


@pytest.mark.asyncio()
async def test_listing_skips_container_without_anchor(site, fetcher):
    html = listing_html(["/shiur/7/"]).replace(
        "</div></body>", '<div data-post-id="x"><span>no link</span></div></div></body>'
    )
    site.add(LISTING_URL, html)

    outcome = await extract_item_urls(fetcher, LISTING_URL, SELECTORS)

    assert outcome.value == ["https://lessons.example/shiur/7/"]


# --------------------------------------------------------------------------- #
#                                    Item                                     #
# --------------------------------------------------------------------------- #


def test_split_tags():
    assert split_tags(" a, b ,,c ") == ["a", "b", "c"]
    assert split_tags(None) == []


def test_id_from_canonical():
    assert id_from_canonical("https://meirtv.example/shiurim/101/") == "101"
    assert id_from_canonical("https://meirtv.example/shiurim/101") == "shiurim"
    assert id_from_canonical(None) is None
    assert id_from_canonical("101") is None


@pytest.mark.asyncio()
async def test_item_all_fields(site, fetcher):
    site.add(ITEM_URL, item_html())

    outcome = await extract_item(fetcher, ITEM_URL, SELECTORS)
    record = outcome.unwrap()

    assert record.id == "101"
    assert record.url == ITEM_URL
    assert record.media_url == "https://lessons.example/files/101.mp3"
    assert record.title == "שיעור בפרשת השבוע"
    assert record.tags == ("אמונה", "תפילה", "פרשת שבוע")
    assert record.publish_date == datetime(2021, 3, 14, tzinfo=timezone.utc)
    assert record.last_updated is not None
    assert record.valid


@pytest.mark.asyncio()
async def test_item_without_media_is_invalid_but_returned(site, fetcher):
    site.add(ITEM_URL, item_html(media=None))

    outcome = await extract_item(fetcher, ITEM_URL, SELECTORS)

    assert outcome.ok
    record = outcome.value
    assert record.media_url is None
    assert record.title is not None
    assert record.valid is False
    assert site.visits[ITEM_URL] == 1


@pytest.mark.asyncio()
async def test_item_missing_optional_fields(site, fetcher):
    site.add(ITEM_URL, item_html(keywords=None, series=None, date_text=None, canonical=False))

    record = (await extract_item(fetcher, ITEM_URL, SELECTORS)).unwrap()

    assert record.tags == ()
    assert record.publish_date is None
    assert record.id == fallback_record_id(ITEM_URL)
    assert record.valid


@pytest.mark.asyncio()
async def test_item_unparseable_date_stays_absent(site, fetcher):
    site.add(ITEM_URL, item_html(date_text="(Smarch 14, 2021)"))

    record = (await extract_item(fetcher, ITEM_URL, SELECTORS)).unwrap()

    assert record.publish_date is None


@pytest.mark.asyncio()
async def test_item_with_overflowing_year_keeps_other_fields(site, fetcher):
    site.add(ITEM_URL, item_html(date_text="(מרץ 14, 99999999999999999999)"))

    outcome = await extract_item(fetcher, ITEM_URL, SELECTORS)

    assert outcome.ok
    assert outcome.attempts == 1
    record = outcome.value
    assert record.publish_date is None
    assert record.title == "שיעור בפרשת השבוע"
    assert record.valid
    assert site.visits[ITEM_URL] == 1


@pytest.mark.asyncio()
async def test_item_validity_ignores_tags_date_and_id(site, fetcher):
    site.add(ITEM_URL, item_html(title=None, keywords=None, series=None, date_text=None, canonical=False))

    record = (await extract_item(fetcher, ITEM_URL, SELECTORS)).unwrap()

    assert record.title is None
    assert record.valid is False


@pytest.mark.asyncio()
async def test_broken_field_does_not_hide_others(site, browser, fetcher):
    site.add(ITEM_URL, item_html())
    page = await browser.browser.new_page()
    await page.goto(ITEM_URL)
    original = page.query_selector

    async def flaky_query(selector):
        if selector == SELECTORS.title:
            raise PlaywrightError("Execution context was destroyed")
        return await original(selector)

    page.query_selector = flaky_query

    record = await read_item(page, ITEM_URL, SELECTORS)

    assert record.title is None
    assert record.media_url == "https://lessons.example/files/101.mp3"
    assert record.id == "101"
    assert not record.valid
