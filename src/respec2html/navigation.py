"""Page navigation with transport-level validation."""

from __future__ import annotations

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Response

from respec2html.browser import Session
from respec2html.deadline import Deadline, race
from respec2html.errors import NavigationError, TransportError
from respec2html.logging import get_logger
from respec2html.validation import redact_url, scrub_url


def is_successful(response: Response | None) -> bool:
    """Check whether a navigation response counts as success.

    A missing response (same-document navigation) and status 0 (local
    files resolved without a real HTTP exchange) are both treated as ok.
    """
    if response is None:
        return True
    return response.ok or response.status == 0


async def navigate(session: Session, url: str, deadline: Deadline) -> None:
    """Load a URL in the session's page within the remaining budget.

    Args:
        session: The browser session to navigate.
        url: Absolute URL of the document.
        deadline: Budget shared by the whole render.

    Raises:
        NavigationError: If the page cannot be loaded at all.
        TransportError: If the server answers with a failing status.
        DeadlineExceededError: If the page does not load in time.
    """
    log = get_logger()
    public_url = redact_url(url)
    log.info("Loading document", url=public_url)

    # timeout=0 disables Playwright's own timer; the race bounds the wait
    try:
        response = await race(
            session.page.goto(url, timeout=0), deadline, "navigation", public_url
        )
    except PlaywrightError as e:
        reason = scrub_url(e.message, url)
        log.error("Failed to load document", url=public_url, error=reason)
        raise NavigationError(f"Failed to load document: {reason}", public_url) from e

    if response is not None and not is_successful(response):
        log.error("HTTP error loading document", url=public_url, status=response.status)
        raise TransportError(response.status, public_url)

    log.debug(
        "Document loaded",
        url=public_url,
        status=response.status if response is not None else None,
    )
