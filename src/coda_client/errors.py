"""Exception types raised by the Coda client.

Transport failures inside a running subscription are logged and retried,
never raised. Everything here surfaces from the query facade or from
explicit caller-facing operations.
"""

from __future__ import annotations

from typing import Any


class CodaClientError(Exception):
    """Base class for all client errors."""


class TransportError(CodaClientError):
    """A connection could not be opened, written to, or read from."""


class QueryError(CodaClientError):
    """A GraphQL query over HTTP failed."""


class DecodeError(QueryError):
    """The daemon returned a body that is not a valid result envelope."""


class GraphQLError(QueryError):
    """The daemon answered with a GraphQL ``errors`` array."""

    def __init__(self, errors: list[dict[str, Any]]):
        self.errors = errors
        messages = "; ".join(str(e.get("message", e)) for e in errors) or "unknown error"
        super().__init__(f"GraphQL error: {messages}")
