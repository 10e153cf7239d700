"""Condition-based waiting for asyncio code.

Instead of sleeping for a guessed amount of time and hoping some background
work has finished, poll a cheap predicate until it holds::

    await wait_for(lambda: len(log) >= 2, "two log entries")

    event = await wait_for_value(
        lambda: Present(log[-1]) if log else None,
        "latest log entry",
    )

The predicate runs on the awaiting task and is re-evaluated on every poll.
``wait_for_value`` expects a ``Present`` wrapper for ready values so that
falsy payloads such as ``0`` or ``""`` still count as found.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import math
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Tuple, TypeVar

from .config import load_wait_defaults
from .registry import validate_required

T = TypeVar("T")

LOG = logging.getLogger("zenpowers.waiting")


class ConditionTimeoutError(TimeoutError):
    """Raised when a waited-for condition does not hold before the timeout."""

    def __init__(self, description: str, timeout: float, elapsed: float) -> None:
        self.description = description
        self.timeout = timeout
        self.elapsed = elapsed
        super().__init__(
            f"Timeout waiting for {description} after {self.timeout_ms:g}ms"
        )

    @property
    def timeout_ms(self) -> float:
        return self.timeout * 1000


class WaitCancelledError(Exception):
    """Raised when a wait is abandoned through its cancellation token."""

    def __init__(self, description: str, elapsed: float) -> None:
        self.description = description
        self.elapsed = elapsed
        super().__init__(f"Cancelled while waiting for {description}")


@dataclass(frozen=True)
class Present(Generic[T]):
    value: T


class CancellationToken:
    """Cooperative cancellation signal shared between a waiter and its owner.

    The cancelled state is a plain flag, so one token can be reused across
    event loops. Each ``wait()`` call parks on an event owned by its own loop.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._waiters: List[Tuple[asyncio.AbstractEventLoop, asyncio.Event]] = []

    def cancel(self) -> None:
        self._cancelled = True
        for loop, event in list(self._waiters):
            if not loop.is_closed():
                loop.call_soon_threadsafe(event.set)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    async def wait(self) -> None:
        if self._cancelled:
            return
        waiter = (asyncio.get_running_loop(), asyncio.Event())
        self._waiters.append(waiter)
        try:
            await waiter[1].wait()
        finally:
            self._waiters.remove(waiter)


async def _pause(interval: float, cancel: Optional[CancellationToken]) -> None:
    if cancel is None:
        await asyncio.sleep(interval)
        return
    # Wake early when the token fires mid-sleep.
    with contextlib.suppress(asyncio.TimeoutError):
        await asyncio.wait_for(cancel.wait(), timeout=interval)


async def _poll(
    check: Callable[[], Optional[Present[T]]],
    description: str,
    timeout: Optional[float],
    poll_interval: Optional[float],
    cancel: Optional[CancellationToken],
) -> T:
    validate_required(description, "description")
    defaults = load_wait_defaults()
    timeout = defaults.resolve_timeout(timeout)
    poll_interval = defaults.resolve_poll_interval(poll_interval)
    if not math.isfinite(timeout) or timeout < 0:
        raise ValueError(f"timeout must be finite and non-negative, got {timeout}")
    if not math.isfinite(poll_interval) or poll_interval <= 0:
        raise ValueError(
            f"poll_interval must be finite and positive, got {poll_interval}"
        )

    loop = asyncio.get_running_loop()
    started = loop.time()
    polls = 0
    while True:
        result = check()
        polls += 1
        elapsed = loop.time() - started
        if result is not None and not isinstance(result, Present):
            raise TypeError(
                f"predicate must return Present(...) or None, got {type(result).__name__}"
            )
        if result is not None:
            LOG.debug(
                "Condition '%s' satisfied after %d poll(s) in %.3fs",
                description,
                polls,
                elapsed,
            )
            return result.value
        if cancel is not None and cancel.cancelled:
            LOG.warning("Wait for '%s' cancelled after %.3fs", description, elapsed)
            raise WaitCancelledError(description, elapsed)
        if elapsed >= timeout:
            LOG.warning(
                "Wait for '%s' timed out after %.3fs (%d poll(s))",
                description,
                elapsed,
                polls,
            )
            raise ConditionTimeoutError(description, timeout, elapsed)
        await _pause(poll_interval, cancel)


async def wait_for(
    predicate: Callable[[], bool],
    description: str,
    *,
    timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
    cancel: Optional[CancellationToken] = None,
) -> None:
    """Poll ``predicate`` until it returns a truthy value.

    ``timeout`` and ``poll_interval`` are in seconds and default to the values
    from :func:`zenpowers.config.load_wait_defaults`. Raises
    :class:`ConditionTimeoutError` or :class:`WaitCancelledError`; anything the
    predicate raises propagates unchanged.
    """

    def check() -> Optional[Present[bool]]:
        return Present(True) if predicate() else None

    await _poll(check, description, timeout, poll_interval, cancel)


async def wait_for_value(
    predicate: Callable[[], Optional[Present[T]]],
    description: str,
    *,
    timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
    cancel: Optional[CancellationToken] = None,
) -> T:
    """Poll ``predicate`` until it returns a :class:`Present` and unwrap it.

    The returned value is the one produced by the satisfying poll; it is not
    fetched again afterwards.
    """
    return await _poll(predicate, description, timeout, poll_interval, cancel)
