"""Relay of warnings and errors raised inside the document.

ReSpec reports problems by dispatching ``respecwarn`` and ``respecerror``
custom events on the document. The bridge forwards each event to the
controller through an exposed function, queues it, and hands it to the
matching callback in the order the document raised them.
"""

from __future__ import annotations

import asyncio
import inspect
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress
from dataclasses import dataclass
from typing import Any, Literal

from playwright.async_api import Page

from respec2html.config import DiagnosticCallback
from respec2html.deadline import Deadline, race
from respec2html.errors import DeadlineExceededError
from respec2html.logging import get_logger

BINDING_NAME = "__respec2htmlDiagnostic"

# Document event name -> diagnostic kind
EVENT_KINDS = {
    "respecwarn": "warning",
    "respecerror": "error",
}

LISTENER_SCRIPT = """
(() => {
  const kinds = %s;
  for (const [eventName, kind] of Object.entries(kinds)) {
    document.addEventListener(eventName, (event) => {
      window.%s({ type: kind, detail: event.detail });
    });
  }
})();
"""

DiagnosticKind = Literal["error", "warning"]


@dataclass(frozen=True)
class DiagnosticEvent:
    """A warning or error raised by the document."""

    kind: DiagnosticKind
    detail: Any


class DiagnosticBridge:
    """Forward document diagnostics to controller-side callbacks.

    Must be installed before navigation so that listeners exist before
    any document script runs.
    """

    def __init__(
        self,
        page: Page,
        on_error: DiagnosticCallback,
        on_warning: DiagnosticCallback,
    ) -> None:
        self._page = page
        self._callbacks: dict[str, DiagnosticCallback] = {
            "error": on_error,
            "warning": on_warning,
        }
        self._queue: asyncio.Queue[DiagnosticEvent] = asyncio.Queue()
        self._drainer: asyncio.Task[None] | None = None
        self._closed = False

    async def install(self) -> None:
        """Expose the forwarding function and register document listeners."""
        await self._page.expose_function(BINDING_NAME, self.forward)
        script = LISTENER_SCRIPT % (json.dumps(EVENT_KINDS), BINDING_NAME)
        await self._page.add_init_script(script)
        self._drainer = asyncio.create_task(self._drain())

    def forward(self, payload: dict[str, Any]) -> None:
        """Entry point called from the page. Never blocks the page."""
        log = get_logger()
        if self._closed:
            log.debug("Dropping diagnostic after bridge closed", payload=payload)
            return
        kind = payload.get("type")
        if kind not in self._callbacks:
            log.debug("Ignoring unknown diagnostic type", type=kind)
            return
        self._queue.put_nowait(DiagnosticEvent(kind=kind, detail=payload.get("detail")))

    async def flush(self) -> None:
        """Wait until every queued event has been dispatched."""
        if self._drainer is not None:
            await self._queue.join()

    async def close(self, deadline: Deadline | None = None) -> None:
        """Dispatch what is queued, then stop accepting events.

        With a deadline, dispatch only waits for the remaining budget.
        Events still queued after that are dropped.
        """
        try:
            if deadline is None:
                await self.flush()
            else:
                await race(self.flush(), deadline, "diagnostics")
        except DeadlineExceededError:
            get_logger().warning(
                "Dropping undelivered diagnostics", pending=self._queue.qsize()
            )
        self._closed = True
        if self._drainer is not None:
            self._drainer.cancel()
            with suppress(asyncio.CancelledError):
                await self._drainer
            self._drainer = None

    async def _drain(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self._dispatch(event)
            finally:
                self._queue.task_done()

    async def _dispatch(self, event: DiagnosticEvent) -> None:
        log = get_logger()
        log.debug("Document diagnostic", kind=event.kind)
        try:
            result = self._callbacks[event.kind](event.detail)
            if inspect.isawaitable(result):
                await result
        except Exception:
            log.exception("Diagnostic callback failed", kind=event.kind)


@asynccontextmanager
async def open_bridge(
    page: Page,
    on_error: DiagnosticCallback,
    on_warning: DiagnosticCallback,
    deadline: Deadline | None = None,
) -> AsyncIterator[DiagnosticBridge]:
    """Install a bridge on the page and close it on exit.

    Closing waits for queued events at most until the deadline.
    """
    bridge = DiagnosticBridge(page, on_error=on_error, on_warning=on_warning)
    await bridge.install()
    try:
        yield bridge
    finally:
        await bridge.close(deadline)

