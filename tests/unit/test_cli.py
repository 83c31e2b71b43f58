"""Tests for the coda-client CLI."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from coda_client.cli import main
from coda_client.errors import QueryError
from coda_client.transport import MockSubscriptionTransport
from coda_client.types import QueryResult, SubscriptionResponse

STATUS = QueryResult({"daemonStatus": {"numAccounts": 12, "syncStatus": "SYNCED"}})


class TestStatusCommand:
    """Tests for `coda-client status`."""

    def test_status_table(self):
        runner = CliRunner()
        with patch(
            "coda_client.cli.CodaClient.get_daemon_status", AsyncMock(return_value=STATUS)
        ):
            result = runner.invoke(main, ["--endpoint", "http://node:3085/graphql", "status"])

        assert result.exit_code == 0
        assert "http://node:3085/graphql" in result.output
        assert "numAccounts: 12" in result.output
        assert "syncStatus: SYNCED" in result.output

    def test_status_json(self):
        runner = CliRunner()
        with patch(
            "coda_client.cli.CodaClient.get_daemon_status", AsyncMock(return_value=STATUS)
        ):
            result = runner.invoke(main, ["status", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"numAccounts": 12, "syncStatus": "SYNCED"}

    def test_status_unreachable(self):
        runner = CliRunner()
        with patch(
            "coda_client.cli.CodaClient.get_daemon_status",
            AsyncMock(side_effect=QueryError("connection refused")),
        ):
            result = runner.invoke(main, ["status"])

        assert result.exit_code == 1


class TestSubscribeCommand:
    """Tests for `coda-client subscribe`."""

    def test_unknown_event_type(self):
        runner = CliRunner()

        result = runner.invoke(main, ["subscribe", "NewBlock", "Bogus"])

        assert result.exit_code == 2
        assert "Bogus" in result.output

    def test_prints_deliveries_until_count(self):
        frame = SubscriptionResponse(type="data", id="1", payload={"data": {"newSyncUpdate": "SYNCED"}})
        runner = CliRunner()
        with patch(
            "coda_client.client.create_websocket_transport",
            return_value=MockSubscriptionTransport(default=frame),
        ):
            result = runner.invoke(
                main,
                ["subscribe", "SyncUpdate", "--count", "2"],
                env={"CODA_POLL_INTERVAL": "0"},
            )

        assert result.exit_code == 0, result.output
        lines = [json.loads(line) for line in result.output.splitlines()]
        assert len(lines) == 2
        assert all(line["type"] == "SyncUpdate" for line in lines)
        assert lines[0]["data"]["payload"] == {"data": {"newSyncUpdate": "SYNCED"}}
