# lesson_scout/crawler/__init__.py
"""Crawl primitives: fetcher, resource policy, query layer and extractors."""
from lesson_scout.crawler.fetcher import PageFetcher
from lesson_scout.crawler.item import extract_item, read_item
from lesson_scout.crawler.listing import extract_item_urls
from lesson_scout.crawler.pagination import build_page_urls, discover_pages
from lesson_scout.crawler.resource_policy import BLOCKED_RESOURCE_TYPES, Decision, classify

__all__ = [
    "PageFetcher",
    "extract_item",
    "read_item",
    "extract_item_urls",
    "build_page_urls",
    "discover_pages",
    "BLOCKED_RESOURCE_TYPES",
    "Decision",
    "classify",
]
