"""Render pipeline: URL in, processed HTML out, under one deadline."""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field

from playwright.async_api import Error as PlaywrightError

from respec2html.bridge import open_bridge
from respec2html.browser import open_session
from respec2html.config import RenderOptions
from respec2html.deadline import Deadline, race
from respec2html.detection import ensure_respec_document
from respec2html.errors import RenderError
from respec2html.extractor import detect_version, extract
from respec2html.logging import get_logger
from respec2html.navigation import navigate
from respec2html.readiness import wait_for_engine, wait_until_ready
from respec2html.sink import deliver
from respec2html.validation import redact_url, scrub_url


@dataclass(frozen=True)
class RenderRequest:
    """What to render and where the result goes.

    Attributes:
        source: Absolute URL of the ReSpec document.
        destination: None for stdout, "" to only return the markup, or a
            file path.
        options: Render options.
    """

    source: str
    destination: str | None = None
    options: RenderOptions = field(default_factory=RenderOptions)


async def render(request: RenderRequest) -> str:
    """Run the full pipeline for a request.

    The browser session is released on every exit path, after all
    diagnostics raised by the document have been dispatched.

    Returns:
        The processed HTML.

    Raises:
        RenderError: Any subclass, for the stage that failed.
    """
    options = request.options
    public_url = redact_url(request.source)
    log = get_logger().bind(url=public_url)
    deadline = Deadline(options.timeout)
    log.info("Rendering document", timeout_ms=options.timeout)

    try:
        async with open_session(options) as session:
            page = session.page
            async with open_bridge(
                page,
                on_error=options.on_error,
                on_warning=options.on_warning,
                deadline=deadline,
            ) as bridge:
                await navigate(session, request.source, deadline)
                await ensure_respec_document(page)
                await wait_for_engine(page, deadline)
                await wait_until_ready(page, deadline)
                version = await detect_version(page)
                html = await extract(page, version, request.source, deadline)

                await race(bridge.flush(), deadline, "diagnostics", public_url)
                result = options.before_write()
                if inspect.isawaitable(result):
                    await result
                deliver(html, request.destination)
    except PlaywrightError as e:
        reason = scrub_url(e.message, request.source)
        log.error("Browser error", error=reason)
        raise RenderError(reason, public_url) from e

    log.info("Render complete", elapsed_ms=round(deadline.elapsed()), length=len(html))
    return html


async def fetch_and_write(
    source: str,
    destination: str | None = None,
    options: RenderOptions | None = None,
) -> str:
    """Fetch a ReSpec document, process it and write the resulting HTML.

    Args:
        source: Absolute URL of the ReSpec source.
        destination: A path to write to. If None, goes to stdout. If "",
            nothing is written and the HTML is only returned.
        options: Render options. Defaults apply when omitted.

    Returns:
        The processed HTML.
    """
    request = RenderRequest(
        source=source,
        destination=destination,
        options=options if options is not None else RenderOptions(),
    )
    return await render(request)
