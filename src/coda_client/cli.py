"""Coda client CLI.

Usage:
    coda-client status                          # Show daemon status
    coda-client status --json                   # Raw JSON
    coda-client subscribe NewBlock              # Print new blocks until Ctrl-C
    coda-client subscribe NewBlock SyncUpdate --count 5

    coda-client --endpoint http://node:3085/graphql status
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import sys

import click

from .client import CodaClient
from .config import ClientConfig
from .errors import QueryError
from .hub import Hub
from .queries import SUBSCRIPTION_QUERIES


@click.group()
@click.option(
    "--endpoint",
    envvar="CODA_ENDPOINT",
    default=None,
    help="Daemon GraphQL endpoint (default: http://localhost:3085/graphql)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, endpoint: str | None, verbose: bool) -> None:
    """Coda client - query a Coda daemon and follow its events."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = ClientConfig.from_env(endpoint=endpoint)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output raw JSON")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show the daemon status."""
    config: ClientConfig = ctx.obj["config"]

    async def fetch() -> dict:
        async with CodaClient(config=config) as client:
            result = await client.get_daemon_status()
            return result.get("daemonStatus") or {}

    try:
        daemon_status = asyncio.run(fetch())
    except QueryError as e:
        click.echo(f"Cannot query daemon at {config.endpoint}: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(daemon_status, indent=2))
        return

    click.echo(f"Daemon status ({config.endpoint}):")
    for key, value in daemon_status.items():
        if isinstance(value, dict | list):
            value = json.dumps(value)
        click.echo(f"  {key}: {value}")


@main.command()
@click.argument("event_types", nargs=-1, required=True)
@click.option("--count", "-n", type=int, default=None, help="Stop after N deliveries")
@click.pass_context
def subscribe(ctx: click.Context, event_types: tuple[str, ...], count: int | None) -> None:
    """Follow one or more event types and print each delivery as JSON.

    Known types: NewBlock, SyncUpdate, BlockConfirmation.
    """
    unknown = [t for t in event_types if t not in SUBSCRIPTION_QUERIES]
    if unknown:
        raise click.BadParameter(
            f"Unknown event type(s): {', '.join(unknown)}. "
            f"Choose from: {', '.join(SUBSCRIPTION_QUERIES)}",
            param_hint="EVENT_TYPES",
        )

    config: ClientConfig = ctx.obj["config"]
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_follow(config, event_types, count))


async def _follow(config: ClientConfig, event_types: tuple[str, ...], count: int | None) -> None:
    hub = Hub()
    cancel = asyncio.Event()
    async with CodaClient(config=config, hub=hub, event_types=event_types) as client:
        tasks = [
            asyncio.create_task(client.subscribe_for_event(client.get_event(t), cancel))
            for t in event_types
        ]
        try:
            received = 0
            async for item in hub.stream():
                click.echo(item.model_dump_json())
                received += 1
                if count is not None and received >= count:
                    break
        finally:
            cancel.set()
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)


if __name__ == "__main__":
    main()
