"""Wire and payload types.

Subscription frames and query results are opaque to the client beyond the
small envelope described here; consumers dig into ``payload`` / the result
mapping themselves.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, RootModel

# =============================================================================
# Websocket frames
# =============================================================================


class SubscribeQuery(BaseModel):
    """Payload of a start frame."""

    query: str


class SubscriptionStartMessage(BaseModel):
    """First outbound frame of every transport session.

    Example:
        {"type": "start", "id": "1", "payload": {"query": "subscription { ... }"}}
    """

    type: str = "start"
    id: str = "1"
    payload: SubscribeQuery

    @classmethod
    def for_query(cls, query: str) -> SubscriptionStartMessage:
        return cls(payload=SubscribeQuery(query=query))


class SubscriptionResponse(BaseModel):
    """One inbound frame from the daemon.

    Typically ``{"type": "data", "id": "1", "payload": {"data": {...}}}``.
    Unknown keys are kept.
    """

    model_config = ConfigDict(extra="allow")

    type: str = ""
    id: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def data(self) -> dict[str, Any]:
        """The ``payload.data`` mapping, or an empty dict."""
        return self.payload.get("data") or {}


class ResponseData(BaseModel):
    """A delivered subscription payload.

    Built once per successful transport session and never mutated.
    """

    model_config = ConfigDict(frozen=True)

    host: str
    type: str
    data: SubscriptionResponse


# =============================================================================
# HTTP results
# =============================================================================


class QueryResult(RootModel[dict[str, Any]]):
    """Generic result envelope of a GraphQL query.

    Keys are the top-level fields of the query, e.g.
    ``result["daemonStatus"]["numAccounts"]``.
    """

    def __getitem__(self, key: str) -> Any:
        return self.root[key]

    def __contains__(self, key: object) -> bool:
        return key in self.root

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def get(self, key: str, default: Any = None) -> Any:
        return self.root.get(key, default)


# =============================================================================
# Query variables
# =============================================================================


class _Variables(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PublicKeyVariables(_Variables):
    public_key: str = Field(alias="publicKey")


class UnlockWalletVariables(_Variables):
    public_key: str = Field(alias="publicKey")
    password: str


class CreateWalletVariables(_Variables):
    password: str


class SendPaymentVariables(_Variables):
    from_: str = Field(alias="from")
    to: str
    amount: int
    fee: int
    memo: str = ""


class PaymentIdVariables(_Variables):
    payment_id: str = Field(alias="paymentId")


class SnarkWorkerVariables(_Variables):
    # None disables the snark worker
    worker_pk: str | None = None
    fee: str
