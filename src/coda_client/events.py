"""Subscription events and the registry that owns them.

An Event holds the mutable state of one subscription type: its query
document, the queue payloads are delivered to when no hub is configured,
the unsubscribe rendezvous, and delivery bookkeeping.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from .queries import SUBSCRIPTION_QUERIES
from .types import ResponseData

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Event:
    """Per-type subscription state.

    ``subscribed`` records that an engine has ever run for this event; it is
    never reset. ``running`` is true only while an engine owns the event.

    Unsubscribing is a two-way handshake: the caller posts a request and
    waits, the owning engine answers with an acknowledgment and stops.
    """

    type: str
    query: str
    delivery: asyncio.Queue[ResponseData] = field(default_factory=asyncio.Queue, repr=False)
    subscribed: bool = False
    count: int = 0
    running: bool = False
    _unsubscribe_requested: asyncio.Event = field(default_factory=asyncio.Event, repr=False)
    _unsubscribe_acked: asyncio.Event = field(default_factory=asyncio.Event, repr=False)

    @property
    def unsubscribe_requested(self) -> bool:
        return self._unsubscribe_requested.is_set()

    async def wait_unsubscribe_requested(self) -> None:
        await self._unsubscribe_requested.wait()

    def acknowledge_unsubscribe(self) -> None:
        """Answer a pending unsubscribe request. Called by the owning engine."""
        self._unsubscribe_requested.clear()
        self._unsubscribe_acked.set()

    async def unsubscribe(self, timeout: float | None = None) -> None:
        """Ask the running engine to stop and wait for its acknowledgment.

        Without a timeout this blocks until an engine answers, so only call
        it while an engine owns the event (or is about to).

        If the wait ends without an acknowledgment, by timeout or by the
        caller being cancelled, the request is withdrawn.

        Raises:
            TimeoutError: If no acknowledgment arrived within ``timeout``.
        """
        self._unsubscribe_acked.clear()
        self._unsubscribe_requested.set()
        try:
            await asyncio.wait_for(self._unsubscribe_acked.wait(), timeout=timeout)
        finally:
            if not self._unsubscribe_acked.is_set():
                self._unsubscribe_requested.clear()
            self._unsubscribe_acked.clear()


class EventRegistry:
    """Client-owned mapping of event type name to Event.

    ``get`` is an atomic get-or-create: concurrent callers, from any thread,
    always observe the same instance for a given type. Entries are never
    removed.
    """

    def __init__(
        self,
        event_types: Iterable[str] = (),
        queries: Mapping[str, str] | None = None,
    ):
        self._queries = SUBSCRIPTION_QUERIES if queries is None else queries
        self._events: dict[str, Event] = {}
        self._lock = threading.Lock()
        for event_type in event_types:
            self.get(event_type)

    def _create(self, event_type: str) -> Event:
        query = self._queries.get(event_type)
        if query is None:
            logger.warning(f"No subscription query known for event type {event_type!r}")
            query = ""
        return Event(type=event_type, query=query)

    def get(self, event_type: str) -> Event:
        """Return the Event for ``event_type``, creating it on first use."""
        with self._lock:
            event = self._events.get(event_type)
            if event is None:
                event = self._create(event_type)
                self._events[event_type] = event
                logger.debug(f"Registered event {event_type}")
            return event

    def __contains__(self, event_type: object) -> bool:
        with self._lock:
            return event_type in self._events

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._events))

    def events(self) -> list[Event]:
        """Snapshot of all registered events."""
        with self._lock:
            return list(self._events.values())
