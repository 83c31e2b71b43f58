"""Fan-in sink for subscription deliveries.

Any number of running subscriptions push into one Hub; consumers read from
it without knowing which engine produced an item. Ordering is only
guaranteed within a single event type.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from .types import ResponseData

logger = logging.getLogger(__name__)


class Hub:
    """Shared, unbounded queue of ResponseData.

    Usage:
        hub = Hub()
        client = CodaClient(endpoint, hub=hub)
        asyncio.create_task(client.subscribe_for_new_blocks())
        async for item in hub.stream():
            print(item.type, item.data.payload)
    """

    def __init__(self) -> None:
        self.subscription_data: asyncio.Queue[ResponseData] = asyncio.Queue()

    async def publish(self, item: ResponseData) -> None:
        """Hand a delivered payload to the hub."""
        await self.subscription_data.put(item)
        logger.debug(f"Hub received {item.type} from {item.host}")

    async def get(self) -> ResponseData:
        """Wait for the next delivered payload."""
        return await self.subscription_data.get()

    def get_nowait(self) -> ResponseData:
        """Return the next payload or raise asyncio.QueueEmpty."""
        return self.subscription_data.get_nowait()

    def empty(self) -> bool:
        return self.subscription_data.empty()

    def qsize(self) -> int:
        return self.subscription_data.qsize()

    async def stream(self) -> AsyncIterator[ResponseData]:
        """Yield payloads as they arrive, forever."""
        while True:
            yield await self.subscription_data.get()
