"""Central configuration for respec2html."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# Budgets (milliseconds)
DEFAULT_TIMEOUT_MS = 300_000
SETTLE_WINDOW_MS = 2000
READY_STATE_TIMEOUT_MS = 30_000

# Session
PROFILE_DIR_PREFIX = "respec2html-"

DiagnosticCallback = Callable[[Any], Any]
BeforeWriteHook = Callable[[], Any]


def _ignore_detail(_detail: Any) -> None:
    return None


def _noop() -> None:
    return None


@dataclass(frozen=True)
class RenderOptions:
    """Options controlling a single render.

    Attributes:
        timeout: Overall budget in milliseconds for the whole render.
        disable_sandbox: Launch Chromium without its process sandbox.
        debug: Launch a headed browser with developer tools open.
        on_error: Called with the detail of each error the document raises.
        on_warning: Called with the detail of each warning the document raises.
        before_write: Called (and awaited if it returns an awaitable) right
            before the markup is delivered.
        channel: Browser distribution channel, e.g. "chrome". None uses the
            bundled Chromium.
    """

    timeout: int = DEFAULT_TIMEOUT_MS
    disable_sandbox: bool = False
    debug: bool = False
    on_error: DiagnosticCallback = _ignore_detail
    on_warning: DiagnosticCallback = _ignore_detail
    before_write: BeforeWriteHook = _noop
    channel: str | None = None

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
