"""Client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_ENDPOINT = "http://localhost:3085/graphql"
DEFAULT_ORIGIN = "http://localhost/"


@dataclass
class ClientConfig:
    """Configuration for a CodaClient.

    One config per logical connection to a daemon endpoint.
    """

    # GraphQL endpoint; the websocket URL is derived from it
    endpoint: str = DEFAULT_ENDPOINT

    # HTTP timeout used when the client builds its own httpx.AsyncClient
    timeout: float = 5.0

    # Origin header sent on every websocket handshake
    origin: str = DEFAULT_ORIGIN

    # Pause between subscription cycles
    poll_interval: float = 1.0

    # Bound on the single websocket receive; None waits forever
    receive_timeout: float | None = None

    @classmethod
    def from_env(cls, **overrides: object) -> ClientConfig:
        """Build a config from CODA_* environment variables.

        Explicit keyword overrides win over the environment.
        """
        values: dict[str, object] = {}
        if endpoint := os.getenv("CODA_ENDPOINT"):
            values["endpoint"] = endpoint
        if timeout := os.getenv("CODA_TIMEOUT"):
            values["timeout"] = float(timeout)
        if poll_interval := os.getenv("CODA_POLL_INTERVAL"):
            values["poll_interval"] = float(poll_interval)
        if receive_timeout := os.getenv("CODA_RECEIVE_TIMEOUT"):
            values["receive_timeout"] = float(receive_timeout)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]
