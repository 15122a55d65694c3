"""Browser session lifecycle for headless rendering."""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from playwright.async_api import BrowserContext, Page, Playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from respec2html.config import PROFILE_DIR_PREFIX, RenderOptions
from respec2html.errors import SessionAcquisitionError
from respec2html.logging import get_logger

DEVTOOLS_ARG = "--auto-open-devtools-for-tabs"


@dataclass(frozen=True)
class Session:
    """A browser process and the profile directory it exclusively owns."""

    context: BrowserContext
    page: Page
    profile_dir: Path


def launch_options(options: RenderOptions) -> dict[str, Any]:
    """Build Playwright launch keyword arguments from render options."""
    kwargs: dict[str, Any] = {
        "headless": not options.debug,
        "chromium_sandbox": not options.disable_sandbox,
        "args": [DEVTOOLS_ARG] if options.debug else [],
    }
    if options.channel:
        kwargs["channel"] = options.channel
    return kwargs


@asynccontextmanager
async def open_session(options: RenderOptions) -> AsyncIterator[Session]:
    """Acquire an isolated browser session and release it on exit.

    A fresh profile directory is created for every session. On exit,
    whatever the outcome, the browser is closed first, then the driver
    is stopped and the profile directory removed. Release failures are
    logged and never replace the outcome of the caller's block.

    Usage:
        async with open_session(options) as session:
            await session.page.goto(url)

    Raises:
        SessionAcquisitionError: If the profile directory cannot be created
            or the browser cannot be launched.
    """
    log = get_logger()
    try:
        profile_dir = Path(tempfile.mkdtemp(prefix=PROFILE_DIR_PREFIX))
    except OSError as e:
        log.error("Failed to create profile directory", error=str(e))
        raise SessionAcquisitionError(f"Could not create profile directory: {e}") from e

    async with AsyncExitStack() as stack:
        stack.callback(_remove_profile_dir, profile_dir)
        try:
            playwright = await async_playwright().start()
            stack.push_async_callback(_stop_driver, playwright)
            context = await playwright.chromium.launch_persistent_context(
                str(profile_dir), **launch_options(options)
            )
            stack.push_async_callback(_close_context, context)
            page = context.pages[0] if context.pages else await context.new_page()
        except PlaywrightError as e:
            log.error("Failed to launch browser", error=str(e))
            raise SessionAcquisitionError(f"Could not launch browser: {e}") from e

        log.debug(
            "Browser session acquired",
            profile_dir=str(profile_dir),
            headless=not options.debug,
        )
        yield Session(context=context, page=page, profile_dir=profile_dir)


async def _close_context(context: BrowserContext) -> None:
    log = get_logger()
    try:
        await context.close()
    except Exception as e:
        log.warning("Failed to close browser", error=str(e))
    else:
        log.debug("Browser session released")


async def _stop_driver(playwright: Playwright) -> None:
    try:
        await playwright.stop()
    except Exception as e:
        get_logger().warning("Failed to stop browser driver", error=str(e))


def _remove_profile_dir(profile_dir: Path) -> None:
    log = get_logger()
    try:
        shutil.rmtree(profile_dir)
    except FileNotFoundError:
        pass
    except OSError as e:
        log.warning(
            "Failed to remove profile directory", profile_dir=str(profile_dir), error=str(e)
        )
