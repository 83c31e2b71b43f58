"""Coda daemon client.

Two independent channels to one daemon endpoint:

- GraphQL queries over HTTP (``query`` / ``query_async``)
- event subscriptions over websocket, one SubscriptionEngine per event type

Usage:
    hub = Hub()
    async with CodaClient("http://localhost:3085/graphql", hub=hub) as client:
        status = await client.get_daemon_status()
        print(status["daemonStatus"]["numAccounts"])

        task = asyncio.create_task(client.subscribe_for_new_blocks())
        block = await hub.get()
        await client.unsubscribe("NewBlock")
        await task
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable
from dataclasses import replace
from typing import Any

import httpx
from pydantic import BaseModel

from . import queries
from .config import ClientConfig
from .errors import DecodeError, GraphQLError, QueryError
from .events import Event, EventRegistry
from .hub import Hub
from .subscription import SubscriptionEngine
from .transport import SubscriptionTransport, create_websocket_transport
from .types import (
    CreateWalletVariables,
    PaymentIdVariables,
    PublicKeyVariables,
    QueryResult,
    SendPaymentVariables,
    SnarkWorkerVariables,
    UnlockWalletVariables,
)

logger = logging.getLogger(__name__)

Variables = dict[str, Any] | BaseModel | None


def build_payload(document: str, variables: Variables = None) -> dict[str, Any]:
    """Build the JSON body for a GraphQL POST.

    Empty variables are left out entirely.
    """
    if isinstance(variables, BaseModel):
        variables = variables.model_dump(by_alias=True)
    if not variables:
        return {"query": document}
    return {"query": document, "variables": variables}


def unwrap_envelope(body: Any) -> dict[str, Any]:
    """Strip the ``{"data": ...}`` wrapper the daemon puts around results.

    Raises:
        GraphQLError: If the wrapper carries a non-empty ``errors`` list.
        DecodeError: If there is no object left to decode.
    """
    if not isinstance(body, dict):
        raise DecodeError(f"Expected a JSON object, got {type(body).__name__}")

    if errors := body.get("errors"):
        raise GraphQLError(errors)

    data = body.get("data", body)
    if not isinstance(data, dict):
        raise DecodeError("Response has no result object")
    return data


def decode_result(text: str) -> QueryResult:
    """Decode a raw HTTP response body into a QueryResult."""
    try:
        body = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON in response: {e}") from e
    return QueryResult(unwrap_envelope(body))


class CodaClient:
    """Client for one Coda daemon endpoint.

    Owns the event registry. When a hub is given, every running
    subscription delivers into it; otherwise each event delivers into its
    own ``delivery`` queue.

    Args:
        endpoint: GraphQL HTTP endpoint (overrides ``config.endpoint``)
        hub: Optional fan-in sink shared by all subscriptions
        event_types: Event types to register up front
        http_client: Caller-owned httpx client; its timeout is kept as is
        config: Client configuration (default: ClientConfig())
        subscription_transport: Transport used by subscriptions
            (default: websocket transport derived from the endpoint)
    """

    def __init__(
        self,
        endpoint: str | None = None,
        hub: Hub | None = None,
        event_types: Iterable[str] = (),
        *,
        http_client: httpx.AsyncClient | None = None,
        config: ClientConfig | None = None,
        subscription_transport: SubscriptionTransport | None = None,
    ):
        config = config or ClientConfig()
        if endpoint:
            config = replace(config, endpoint=endpoint)
        self.config = config
        self.hub = hub
        self.events = EventRegistry(event_types)
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self.subscription_transport = subscription_transport or create_websocket_transport(
            config.endpoint,
            origin=config.origin,
            receive_timeout=config.receive_timeout,
        )

    @property
    def endpoint(self) -> str:
        return self.config.endpoint

    # -------------------------------------------------------------------------
    # HTTP queries
    # -------------------------------------------------------------------------

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.config.timeout)
        return self._http_client

    async def _post(self, payload: dict[str, Any]) -> str:
        client = self._get_http_client()
        try:
            request = client.build_request(
                "POST",
                self.endpoint,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise QueryError(f"Could not build request for {self.endpoint}: {e}") from e

        try:
            response = await client.send(request)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise QueryError(
                f"{self.endpoint} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise QueryError(f"Request to {self.endpoint} failed: {e}") from e
        return response.text

    async def query(self, document: str, variables: Variables = None) -> QueryResult:
        """Run one GraphQL query and return the decoded result.

        Raises:
            QueryError: On request, transport or HTTP failure
            DecodeError: If the body is not a valid result envelope
            GraphQLError: If the daemon reports GraphQL errors
        """
        payload = build_payload(document, variables)
        logger.debug(f"POST {self.endpoint}: {payload}")
        text = await self._post(payload)
        return decode_result(text)

    def query_async(
        self, document: str, variables: Variables = None
    ) -> asyncio.Task[QueryResult | None]:
        """Start a query in its own task.

        The task resolves exactly once, to the result or to None on failure.
        Must be called from a running event loop.
        """
        return asyncio.create_task(self._query_or_none(document, variables))

    async def _query_or_none(
        self, document: str, variables: Variables
    ) -> QueryResult | None:
        try:
            return await self.query(document, variables)
        except QueryError as e:
            logger.error(f"Query failed: {e}")
            return None

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def get_event(self, event_type: str) -> Event:
        """Return the registry entry for ``event_type``."""
        return self.events.get(event_type)

    def engine_for(self, event: Event | None) -> SubscriptionEngine:
        """Build a SubscriptionEngine wired to this client."""
        return SubscriptionEngine(
            event,
            self.subscription_transport,
            host=self.endpoint,
            hub=self.hub,
            poll_interval=self.config.poll_interval,
        )

    async def subscribe_for_event(
        self, event: Event | None, cancel: asyncio.Event | None = None
    ) -> None:
        """Run a subscription for ``event`` until unsubscribed or cancelled.

        Run it in its own task; one engine per event at a time.
        """
        await self.engine_for(event).run(cancel)

    async def subscribe_for_new_blocks(self, cancel: asyncio.Event | None = None) -> None:
        await self.subscribe_for_event(self.get_event(queries.NEW_BLOCK), cancel)

    async def subscribe_for_sync_updates(self, cancel: asyncio.Event | None = None) -> None:
        await self.subscribe_for_event(self.get_event(queries.SYNC_UPDATE), cancel)

    async def subscribe_for_block_confirmations(
        self, cancel: asyncio.Event | None = None
    ) -> None:
        await self.subscribe_for_event(self.get_event(queries.BLOCK_CONFIRMATION), cancel)

    async def unsubscribe(self, event_type: str, timeout: float | None = None) -> None:
        """Stop the subscription for ``event_type`` and wait for it to confirm.

        Raises:
            TimeoutError: If the engine did not acknowledge within ``timeout``
        """
        await self.get_event(event_type).unsubscribe(timeout=timeout)

    # -------------------------------------------------------------------------
    # Daemon API
    # -------------------------------------------------------------------------

    async def get_daemon_status(self) -> QueryResult:
        return await self.query(queries.DAEMON_STATUS_QUERY)

    def get_daemon_status_async(self) -> asyncio.Task[QueryResult | None]:
        """Fetch the daemon status concurrently."""
        return self.query_async(queries.DAEMON_STATUS_QUERY)

    async def get_daemon_version(self) -> QueryResult:
        return await self.query(queries.DAEMON_VERSION_QUERY)

    async def get_sync_status(self) -> QueryResult:
        return await self.query(queries.SYNC_STATUS_QUERY)

    async def get_wallets(self) -> QueryResult:
        """List wallets owned by the daemon."""
        return await self.query(queries.GET_WALLETS_QUERY)

    async def get_wallet(self, public_key: str) -> QueryResult:
        return await self.query(
            queries.GET_WALLET_QUERY, PublicKeyVariables(public_key=public_key)
        )

    async def unlock_wallet(self, public_key: str, password: str) -> QueryResult:
        return await self.query(
            queries.UNLOCK_WALLET_QUERY,
            UnlockWalletVariables(public_key=public_key, password=password),
        )

    async def create_wallet(self, password: str) -> QueryResult:
        return await self.query(
            queries.CREATE_WALLET_QUERY, CreateWalletVariables(password=password)
        )

    async def send_payment(
        self, from_: str, to: str, amount: int, fee: int, memo: str = ""
    ) -> QueryResult:
        return await self.query(
            queries.SEND_PAYMENT_QUERY,
            SendPaymentVariables(from_=from_, to=to, amount=amount, fee=fee, memo=memo),
        )

    async def get_pooled_payments(self, public_key: str) -> QueryResult:
        return await self.query(
            queries.GET_POOLED_PAYMENTS_QUERY, PublicKeyVariables(public_key=public_key)
        )

    async def get_transaction_status(self, payment_id: str) -> QueryResult:
        return await self.query(
            queries.GET_TRANSACTION_STATUS_QUERY, PaymentIdVariables(payment_id=payment_id)
        )

    async def set_snark_worker(self, worker_pk: str | None, fee: str) -> QueryResult:
        """Set the snark worker key and fee. A None key disables the worker."""
        return await self.query(
            queries.SET_SNARK_WORKER_QUERY,
            SnarkWorkerVariables(worker_pk=worker_pk, fee=fee),
        )

    async def get_current_snark_worker(self) -> QueryResult:
        return await self.query(queries.GET_CURRENT_SNARK_WORKER_QUERY)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP client if this client created it."""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> CodaClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


def create_client(
    endpoint: str | None = None,
    hub: Hub | None = None,
    event_types: Iterable[str] = (),
) -> CodaClient:
    """Create a client configured from CODA_* environment variables.

    Args:
        endpoint: Overrides CODA_ENDPOINT when given
        hub: Optional fan-in sink
        event_types: Event types to register up front
    """
    return CodaClient(
        hub=hub, event_types=event_types, config=ClientConfig.from_env(endpoint=endpoint)
    )
