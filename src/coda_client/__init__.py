"""Coda client - GraphQL queries and event subscriptions for a Coda daemon.

Two channels:
- HTTP: one-off GraphQL queries (CodaClient.query, query_async)
- websocket: per-event subscriptions driven by SubscriptionEngine, delivering
  into each Event's queue or into a shared Hub
"""

from .client import CodaClient, build_payload, create_client, decode_result, unwrap_envelope
from .config import ClientConfig
from .errors import CodaClientError, DecodeError, GraphQLError, QueryError, TransportError
from .events import Event, EventRegistry
from .hub import Hub
from .queries import BLOCK_CONFIRMATION, NEW_BLOCK, SUBSCRIPTION_QUERIES, SYNC_UPDATE
from .subscription import SubscriptionEngine, SubscriptionState
from .transport import (
    MockSubscriptionTransport,
    SubscriptionTransport,
    WebSocketSubscriptionTransport,
    create_websocket_transport,
    to_websocket_url,
)
from .types import QueryResult, ResponseData, SubscriptionResponse, SubscriptionStartMessage

__all__ = [
    # Client
    "CodaClient",
    "ClientConfig",
    "create_client",
    "build_payload",
    "decode_result",
    "unwrap_envelope",
    # Subscriptions
    "Event",
    "EventRegistry",
    "Hub",
    "SubscriptionEngine",
    "SubscriptionState",
    "NEW_BLOCK",
    "SYNC_UPDATE",
    "BLOCK_CONFIRMATION",
    "SUBSCRIPTION_QUERIES",
    # Transports
    "SubscriptionTransport",
    "WebSocketSubscriptionTransport",
    "MockSubscriptionTransport",
    "create_websocket_transport",
    "to_websocket_url",
    # Types
    "QueryResult",
    "ResponseData",
    "SubscriptionResponse",
    "SubscriptionStartMessage",
    # Errors
    "CodaClientError",
    "TransportError",
    "QueryError",
    "DecodeError",
    "GraphQLError",
]
