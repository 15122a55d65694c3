"""Waiting for the document to finish its own processing."""

from __future__ import annotations

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from respec2html.deadline import Deadline, race
from respec2html.errors import DocumentNotReadyError
from respec2html.logging import get_logger
from respec2html.validation import redact_url, scrub_url

ENGINE_LOADED_SCRIPT = "() => Object.prototype.hasOwnProperty.call(window, 'respecVersion')"

READY_SCRIPT = """
async () => {
  if (!document.respecIsReady) {
    throw new Error("document.respecIsReady is not available");
  }
  await document.respecIsReady;
  return true;
}
"""


async def wait_for_engine(page: Page, deadline: Deadline) -> None:
    """Wait until ReSpec has published its version on the window."""
    public_url = redact_url(page.url)
    await race(
        page.wait_for_function(ENGINE_LOADED_SCRIPT, timeout=0),
        deadline,
        "waiting for window.respecVersion",
        public_url,
    )


async def wait_until_ready(page: Page, deadline: Deadline) -> None:
    """Race document.respecIsReady against the remaining budget.

    Raises:
        DeadlineExceededError: If the budget runs out first.
        DocumentNotReadyError: If the readiness promise rejects.
    """
    log = get_logger()
    public_url = redact_url(page.url)
    log.debug("Waiting for document to be ready", remaining_ms=round(deadline.remaining()))
    try:
        await race(
            page.evaluate(READY_SCRIPT),
            deadline,
            "document.respecIsReady",
            public_url,
        )
    except PlaywrightError as e:
        raise DocumentNotReadyError(
            f"Document failed to become ready: {scrub_url(e.message, page.url)}",
            public_url,
        ) from e
    log.info("Document ready", elapsed_ms=round(deadline.elapsed()))
