"""Subscription engine.

One engine drives one Event: it repeatedly runs a transport session for the
event's query, delivers each decoded frame, and pauses before the next
session. It stops on exactly two signals:

- external cancellation (an ``asyncio.Event`` set by the caller, or the task
  being cancelled): immediate exit, no handshake
- an unsubscribe request on the Event: the engine acknowledges, then exits

When both are pending, external cancellation wins.

State machine:
    IDLE -> CYCLE -> DELIVERED -> IDLE -> ...
    any  -> UNSUBSCRIBING -> TERMINATED
    any  -> CANCELLED -> TERMINATED
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from .events import Event
from .hub import Hub
from .transport import SubscriptionTransport
from .types import ResponseData

logger = logging.getLogger(__name__)


class SubscriptionState(str, Enum):
    """Engine lifecycle states."""

    IDLE = "idle"
    CYCLE = "cycle"
    DELIVERED = "delivered"
    UNSUBSCRIBING = "unsubscribing"
    CANCELLED = "cancelled"
    TERMINATED = "terminated"


class SubscriptionEngine:
    """Drives transport sessions for a single Event.

    Only one engine may own an Event at a time; a second engine started for
    an event that is already running logs a warning and returns.

    Deliveries go to ``hub`` when one is given, otherwise to the event's own
    ``delivery`` queue.
    """

    def __init__(
        self,
        event: Event | None,
        transport: SubscriptionTransport,
        host: str,
        hub: Hub | None = None,
        poll_interval: float = 1.0,
    ):
        self.event = event
        self.transport = transport
        self.host = host
        self.hub = hub
        self.poll_interval = poll_interval
        self.state = SubscriptionState.IDLE

    async def run(self, cancel: asyncio.Event | None = None) -> None:
        """Run until unsubscribed or cancelled."""
        event = self.event
        if event is None:
            logger.error("Event is None, nothing to subscribe to")
            self.state = SubscriptionState.TERMINATED
            return

        if event.running:
            logger.warning(f"Subscription for {event.type} is already running")
            self.state = SubscriptionState.TERMINATED
            return

        event.running = True
        event.subscribed = True
        try:
            await self._loop(event, cancel)
        except asyncio.CancelledError:
            self.state = SubscriptionState.CANCELLED
            raise
        finally:
            event.running = False
            self.state = SubscriptionState.TERMINATED
            logger.info(f"Exit subscription: {event.type}")

    async def _loop(self, event: Event, cancel: asyncio.Event | None) -> None:
        while True:
            signal = self._pending_signal(event, cancel)
            if signal is SubscriptionState.CANCELLED:
                self.state = signal
                return
            if signal is SubscriptionState.UNSUBSCRIBING:
                self.state = signal
                event.acknowledge_unsubscribe()
                logger.info(f"{self.host} unsubscribed from {event.type}")
                return

            self.state = SubscriptionState.CYCLE
            logger.debug(f"Subscription type: {event.type}")
            response = await self.transport.round_trip(event.query)
            if response is not None:
                event.count += 1
                await self._deliver(
                    event,
                    ResponseData(host=self.host, type=event.type, data=response),
                )
                self.state = SubscriptionState.DELIVERED

            await self._wait_for_signal(event, cancel, self.poll_interval)
            self.state = SubscriptionState.IDLE

    async def _deliver(self, event: Event, item: ResponseData) -> None:
        if self.hub is None:
            await event.delivery.put(item)
        else:
            await self.hub.publish(item)

    @staticmethod
    def _pending_signal(event: Event, cancel: asyncio.Event | None) -> SubscriptionState | None:
        if cancel is not None and cancel.is_set():
            return SubscriptionState.CANCELLED
        if event.unsubscribe_requested:
            return SubscriptionState.UNSUBSCRIBING
        return None

    @staticmethod
    async def _wait_for_signal(
        event: Event, cancel: asyncio.Event | None, timeout: float
    ) -> None:
        """Sleep for ``timeout``, waking early if either stop signal fires."""
        waiters = [asyncio.ensure_future(event.wait_unsubscribe_requested())]
        if cancel is not None:
            waiters.append(asyncio.ensure_future(cancel.wait()))
        try:
            await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                waiter.cancel()
            await asyncio.gather(*waiters, return_exceptions=True)
