"""Subscription transport sessions.

Each delivery cycle is one full websocket session: connect, send a single
``start`` frame, read exactly one frame back, close. There is no persistent
socket and therefore no reconnect logic; the subscription engine simply runs
another session.

Failures at any step are logged and end the current session with nothing to
deliver. Retrying is the caller's decision.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

import websockets
from pydantic import ValidationError
from websockets.exceptions import WebSocketException

from .config import DEFAULT_ORIGIN
from .errors import TransportError
from .types import SubscriptionResponse, SubscriptionStartMessage

logger = logging.getLogger(__name__)


def to_websocket_url(endpoint: str) -> str:
    """Swap an http(s) scheme for the matching ws(s) scheme."""
    if endpoint.startswith("https://"):
        return "wss://" + endpoint[len("https://") :]
    if endpoint.startswith("http://"):
        return "ws://" + endpoint[len("http://") :]
    return endpoint


@runtime_checkable
class SubscriptionTransport(Protocol):
    """Protocol for one-shot subscription round trips."""

    async def round_trip(self, query: str) -> SubscriptionResponse | None:
        """Run one session for ``query``.

        Returns:
            The decoded frame, or None if any step failed.
        """
        ...


class WebSocketSubscriptionTransport:
    """Connect-per-message websocket transport.

    Wire format:
    - Outbound: ``{"type": "start", "id": "1", "payload": {"query": ...}}``
    - Inbound: exactly one JSON frame, decoded as SubscriptionResponse
    """

    def __init__(
        self,
        endpoint: str,
        origin: str = DEFAULT_ORIGIN,
        receive_timeout: float | None = None,
    ):
        self.url = to_websocket_url(endpoint)
        self.origin = origin
        self.receive_timeout = receive_timeout

    async def round_trip(self, query: str) -> SubscriptionResponse | None:
        try:
            raw = await self._exchange(query)
        except TransportError as e:
            logger.error(str(e))
            return None

        try:
            response = SubscriptionResponse.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Invalid subscription frame from {self.url}: {e}")
            return None

        logger.debug(f"Receive type: {response.type}")
        return response

    async def _exchange(self, query: str) -> str | bytes:
        """Open, send the start frame, read one frame, close.

        Raises:
            TransportError: If the connect, send or receive step fails
        """
        logger.info(f"connecting to {self.url}")
        try:
            ws = await websockets.connect(self.url, origin=self.origin)
        except (OSError, TimeoutError, WebSocketException) as e:
            raise TransportError(f"dial {self.url}: {e}") from e

        try:
            message = SubscriptionStartMessage.for_query(query)
            try:
                await ws.send(message.model_dump_json())
            except WebSocketException as e:
                raise TransportError(f"Error sending start frame to {self.url}: {e}") from e

            try:
                return await asyncio.wait_for(ws.recv(), timeout=self.receive_timeout)
            except TimeoutError as e:
                raise TransportError(
                    f"No frame from {self.url} within {self.receive_timeout}s"
                ) from e
            except WebSocketException as e:
                raise TransportError(f"Error receiving from {self.url}: {e}") from e
        finally:
            await ws.close()


class MockSubscriptionTransport:
    """Mock transport for testing.

    Returns scripted frames in order, then ``default`` forever. A scripted
    ``None`` stands for a failed session. Every query sent is recorded.

    Usage:
        transport = MockSubscriptionTransport([SubscriptionResponse(type="data")])
        client = CodaClient("http://daemon/graphql", subscription_transport=transport)
    """

    def __init__(
        self,
        responses: Iterable[SubscriptionResponse | None] = (),
        default: SubscriptionResponse | None = None,
    ):
        self._responses: list[SubscriptionResponse | None] = list(responses)
        self.default = default
        self.queries: list[str] = []

    async def round_trip(self, query: str) -> SubscriptionResponse | None:
        self.queries.append(query)
        # Yield to the loop like a real session would
        await asyncio.sleep(0)
        if self._responses:
            return self._responses.pop(0)
        return self.default


def create_websocket_transport(
    endpoint: str,
    origin: str = DEFAULT_ORIGIN,
    receive_timeout: float | None = None,
) -> WebSocketSubscriptionTransport:
    """Create the websocket transport for a daemon GraphQL endpoint."""
    return WebSocketSubscriptionTransport(
        endpoint, origin=origin, receive_timeout=receive_timeout
    )
