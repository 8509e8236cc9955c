# lesson_scout/crawler/resource_policy.py
"""
Network request filtering applied to every page the fetcher opens.

Only the document and its scripts are needed to render the markup the
extractors read; everything else is aborted before it leaves the browser.
Content delivered through XHR is therefore unavailable to extractors.
"""
from __future__ import annotations

from enum import Enum
from typing import FrozenSet

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Route

from lesson_scout.logger import get_logger

__all__ = ["BLOCKED_RESOURCE_TYPES", "Decision", "classify", "route_handler"]

logger = get_logger(__name__)

BLOCKED_RESOURCE_TYPES: FrozenSet[str] = frozenset(
    {
        "image",
        "stylesheet",
        "media",
        "font",
        "texttrack",
        "object",
        "beacon",
        "csp_report",
        "imageset",
        "xhr",
        "other",
        "ping",
    }
)


class Decision(str, Enum):
    ABORT = "abort"
    CONTINUE = "continue"


def classify(resource_type: str) -> Decision:
    """Pure mapping resource type -> decision; logs one line per call."""
    resource = (resource_type or "").strip().lower()
    if resource in BLOCKED_RESOURCE_TYPES:
        logger.debug("skip %s", resource)
        return Decision.ABORT
    logger.debug("download resource %s", resource)
    return Decision.CONTINUE


async def route_handler(route: Route) -> None:
    """Playwright route callback applying :func:`classify`."""
    request = route.request
    decision = classify(request.resource_type)
    try:
        if decision is Decision.ABORT:
            await route.abort()
        else:
            await route.continue_()
    except PlaywrightError as exc:
        # the page may already be closing
        logger.error("error handling resource %s in url %s: %s", request.resource_type, request.url, exc)
