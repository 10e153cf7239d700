from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol

from .waiting import CancellationToken, Present, wait_for_value

LOG = logging.getLogger("zenpowers.events")


class EventType(str, Enum):
    TOOL_RESULT = "TOOL_RESULT"
    AGENT_MESSAGE = "AGENT_MESSAGE"
    TOOL_CALL = "TOOL_CALL"


@dataclass(frozen=True)
class Event:
    type: EventType
    data: Any = None
    id: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {"type": self.type.value, "data": self.data, "id": self.id}


class ThreadManager(Protocol):
    def get_events(self, thread_id: str) -> List[Event]:
        ...


class InMemoryThreadManager:
    """Append-only event log per agent thread, safe to read while appending."""

    def __init__(self) -> None:
        self._threads: Dict[str, List[Event]] = {}
        self._lock = threading.Lock()

    def append_event(self, thread_id: str, event: Event) -> Event:
        with self._lock:
            self._threads.setdefault(thread_id, []).append(event)
        LOG.debug("Thread %s recorded %s event id=%s", thread_id, event.type.value, event.id)
        return event

    def get_events(self, thread_id: str) -> List[Event]:
        with self._lock:
            return list(self._threads.get(thread_id, []))


async def wait_for_event(
    manager: ThreadManager,
    thread_id: str,
    event_type: EventType,
    *,
    timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
    cancel: Optional[CancellationToken] = None,
) -> Event:
    """Wait for the first event of ``event_type`` to appear in a thread."""
    return await wait_for_event_match(
        manager,
        thread_id,
        lambda event: event.type == event_type,
        f"{event_type.value} event",
        timeout=timeout,
        poll_interval=poll_interval,
        cancel=cancel,
    )


async def wait_for_event_count(
    manager: ThreadManager,
    thread_id: str,
    event_type: EventType,
    count: int,
    *,
    timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
    cancel: Optional[CancellationToken] = None,
) -> List[Event]:
    """Wait until ``count`` events of ``event_type`` exist and return all of them.

    Useful when a single request fans out into several events, e.g. waiting for
    both the initial agent message and its continuation.
    """
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}")

    def matching() -> Optional[Present[List[Event]]]:
        events = [
            event for event in manager.get_events(thread_id) if event.type == event_type
        ]
        return Present(events) if len(events) >= count else None

    return await wait_for_value(
        matching,
        f"{count} {event_type.value} events",
        timeout=timeout,
        poll_interval=poll_interval,
        cancel=cancel,
    )


async def wait_for_event_match(
    manager: ThreadManager,
    thread_id: str,
    matcher: Callable[[Event], bool],
    description: str,
    *,
    timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
    cancel: Optional[CancellationToken] = None,
) -> Event:
    """Wait for an event satisfying ``matcher``, e.g. a tool result with a given id."""

    def first_match() -> Optional[Present[Event]]:
        for event in manager.get_events(thread_id):
            if matcher(event):
                return Present(event)
        return None

    return await wait_for_value(
        first_match,
        description,
        timeout=timeout,
        poll_interval=poll_interval,
        cancel=cancel,
    )
