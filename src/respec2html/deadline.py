"""Render budget tracking and deadline-bounded waits."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from respec2html.errors import DeadlineExceededError

T = TypeVar("T")


class Deadline:
    """A fixed budget that starts counting down on construction.

    Args:
        duration_ms: Total budget in milliseconds. Must be positive.
        clock: Monotonic clock returning seconds.
    """

    def __init__(
        self, duration_ms: float, clock: Callable[[], float] = time.monotonic
    ) -> None:
        if duration_ms <= 0:
            raise ValueError(f"duration must be positive, got {duration_ms}")
        self._duration_ms = duration_ms
        self._clock = clock
        self._start = clock()

    @property
    def duration_ms(self) -> float:
        return self._duration_ms

    def elapsed(self) -> float:
        """Milliseconds spent since the deadline started."""
        return (self._clock() - self._start) * 1000

    def remaining(self) -> float:
        """Milliseconds left, never negative."""
        return max(0.0, self._duration_ms - self.elapsed())

    @property
    def expired(self) -> bool:
        return self.remaining() == 0


async def race(
    awaitable: Awaitable[T], deadline: Deadline, phase: str, url: str = ""
) -> T:
    """Await an operation against the remaining budget.

    Whichever finishes first wins: the operation's outcome (result or
    exception) propagates, or the operation is cancelled and
    DeadlineExceededError is raised.

    Args:
        awaitable: The operation to bound.
        deadline: Budget shared by the whole render.
        phase: Human-readable name of the wait, used in the error message.
        url: Redacted URL for error context.

    Raises:
        DeadlineExceededError: If the budget runs out first.
    """
    future = asyncio.ensure_future(awaitable)
    remaining = deadline.remaining()
    if remaining <= 0:
        future.cancel()
        raise DeadlineExceededError(phase, deadline.duration_ms, url)
    try:
        return await asyncio.wait_for(future, timeout=remaining / 1000)
    except asyncio.TimeoutError:
        raise DeadlineExceededError(phase, deadline.duration_ms, url) from None
