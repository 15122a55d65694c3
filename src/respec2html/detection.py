"""Heuristics confirming a loaded page is a ReSpec document."""

from __future__ import annotations

from bs4 import BeautifulSoup
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from respec2html.config import READY_STATE_TIMEOUT_MS, SETTLE_WINDOW_MS
from respec2html.errors import NotExpectedDocumentError
from respec2html.logging import get_logger
from respec2html.validation import redact_url

RESPEC_SCRIPT_SELECTOR = "script[data-main*='profile-'], script[src*='respec']"
RESPEC_UI_SELECTOR = "#respec-ui"


def has_respec_script(html: str) -> bool:
    """Check whether the document head references a ReSpec script."""
    soup = BeautifulSoup(html, "html.parser")
    head = soup.head
    if head is None:
        return False
    return head.select_one(RESPEC_SCRIPT_SELECTOR) is not None


async def is_respec_document(page: Page) -> bool:
    """Decide whether the page is a ReSpec document.

    Looks for a ReSpec script in the head first. Documents that load
    ReSpec some other way are given until the page has finished loading
    plus a short settle window for ReSpec's UI to appear.
    """
    log = get_logger()
    if has_respec_script(await page.content()):
        return True

    log.debug("No ReSpec script in head, waiting for ReSpec UI", url=redact_url(page.url))
    try:
        await page.wait_for_function(
            "() => document.readyState === 'complete'",
            timeout=READY_STATE_TIMEOUT_MS,
        )
    except PlaywrightError as e:
        log.debug("Document never finished loading", error=str(e))
        return False

    try:
        await page.wait_for_selector(
            RESPEC_UI_SELECTOR, state="attached", timeout=SETTLE_WINDOW_MS
        )
    except PlaywrightError:
        return False
    return True


async def ensure_respec_document(page: Page) -> None:
    """Raise NotExpectedDocumentError unless the page is a ReSpec document."""
    if not await is_respec_document(page):
        public_url = redact_url(page.url)
        get_logger().error("Not a ReSpec document", url=public_url)
        raise NotExpectedDocumentError(public_url)
