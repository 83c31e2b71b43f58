"""Unit tests for the fan-in Hub."""

from __future__ import annotations

import asyncio

import pytest

from coda_client.hub import Hub
from coda_client.types import ResponseData, SubscriptionResponse


def item(event_type: str, n: int) -> ResponseData:
    return ResponseData(
        host="http://daemon.test/graphql",
        type=event_type,
        data=SubscriptionResponse(type="data", payload={"data": {"n": n}}),
    )


class TestHub:
    """Tests for Hub queue semantics."""

    @pytest.mark.asyncio
    async def test_publish_then_get(self) -> None:
        hub = Hub()

        await hub.publish(item("NewBlock", 1))

        assert hub.qsize() == 1
        received = await hub.get()
        assert received.type == "NewBlock"
        assert hub.empty()

    def test_get_nowait_empty(self) -> None:
        with pytest.raises(asyncio.QueueEmpty):
            Hub().get_nowait()

    @pytest.mark.asyncio
    async def test_concurrent_writers_keep_per_type_order(self) -> None:
        """Items from one writer keep their order among other writers' items."""
        hub = Hub()

        async def writer(event_type: str) -> None:
            for n in range(20):
                await hub.publish(item(event_type, n))
                await asyncio.sleep(0)

        await asyncio.gather(writer("NewBlock"), writer("SyncUpdate"))

        received = [hub.get_nowait() for _ in range(hub.qsize())]
        for event_type in ("NewBlock", "SyncUpdate"):
            ns = [r.data.payload["data"]["n"] for r in received if r.type == event_type]
            assert ns == list(range(20))

    @pytest.mark.asyncio
    async def test_stream(self) -> None:
        hub = Hub()
        for n in range(3):
            await hub.publish(item("NewBlock", n))

        seen = []
        async for received in hub.stream():
            seen.append(received.data.payload["data"]["n"])
            if len(seen) == 3:
                break

        assert seen == [0, 1, 2]


class TestResponseData:
    """ResponseData is immutable once built."""

    def test_frozen(self) -> None:
        data = item("NewBlock", 1)

        with pytest.raises(ValueError):
            data.type = "SyncUpdate"  # type: ignore[misc]
