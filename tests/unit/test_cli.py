"""
Tests for the pagebolt-mcp command line.

Commands run through Typer's CliRunner; the API client is pointed at the
fake API and the MCP server loop is replaced so nothing blocks.
"""

import json

import httpx
import pytest
from typer.testing import CliRunner

from pagebolt_mcp import __version__, cli, server
from pagebolt_mcp.http import ENDPOINTS, PageBoltClient


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_api(monkeypatch, fake_api):
    """Route CLI requests to the fake API."""

    def make_client(config):
        return PageBoltClient(config, transport=httpx.MockTransport(fake_api.handler))

    monkeypatch.setattr(cli, "PageBoltClient", make_client)
    return fake_api


@pytest.fixture
def server_runs(monkeypatch):
    """Record transports the MCP server would have been started with."""
    runs = []
    monkeypatch.setattr(server.mcp, "run", lambda transport="stdio": runs.append(transport))
    monkeypatch.setattr(server, "_config", None)
    monkeypatch.setattr(server, "_client", None)
    return runs


class TestCLI:
    """Test CLI commands."""

    def test_version(self, runner):
        result = runner.invoke(cli.app, ["version"])

        assert result.exit_code == 0
        assert result.stdout.strip() == __version__

    def test_no_command_runs_stdio_server(self, runner, server_runs):
        result = runner.invoke(cli.app, ["--api-key", "cli-key"])

        assert result.exit_code == 0
        assert server_runs == ["stdio"]
        assert server._config.api_key == "cli-key"

    def test_serve_with_transport(self, runner, server_runs):
        result = runner.invoke(
            cli.app, ["--base-url", "http://localhost:3000/", "serve", "--transport", "sse"]
        )

        assert result.exit_code == 0
        assert server_runs == ["sse"]
        assert server._config.base_url == "http://localhost:3000"

    def test_serve_rejects_unknown_transport(self, runner, server_runs):
        result = runner.invoke(cli.app, ["serve", "--transport", "carrier-pigeon"])

        assert result.exit_code != 0
        assert server_runs == []


class TestUsageCommand:
    def test_json_output(self, runner, cli_api):
        cli_api.add(
            "GET",
            ENDPOINTS["usage"],
            json={"plan": "starter", "usage": {"current": 300, "limit": 5000, "remaining": 4700}},
        )

        result = runner.invoke(cli.app, ["--api-key", "k", "--json", "usage"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["plan"] == "starter"
        assert data["usage"]["remaining"] == 4700
        assert cli_api.requests[0].headers["x-api-key"] == "k"

    def test_text_output(self, runner, cli_api):
        cli_api.add(
            "GET",
            ENDPOINTS["usage"],
            json={"plan": "starter", "usage": {"current": 2500, "limit": 5000, "remaining": 2500}},
        )

        result = runner.invoke(cli.app, ["--api-key", "k", "usage"])

        assert result.exit_code == 0
        assert "Plan: starter" in result.stdout
        assert "(50%)" in result.stdout

    def test_api_error_exit_code(self, runner, cli_api):
        cli_api.add("GET", ENDPOINTS["usage"], status_code=401, json={"error": "Invalid API key"})

        result = runner.invoke(cli.app, ["--api-key", "bad", "usage"])

        assert result.exit_code == 2
        assert "Invalid API key" in result.output

    def test_missing_key_exit_code(self, runner, cli_api):
        result = runner.invoke(cli.app, ["usage"])

        assert result.exit_code == 1
        assert cli_api.requests == []


class TestDevicesCommand:
    DEVICES = {
        "devices": [
            {"name": "iphone_14_pro",
             "viewport": {"width": 393, "height": 852, "deviceScaleFactor": 3},
             "isMobile": True, "hasTouch": True},
        ]
    }

    def test_json_output(self, runner, cli_api):
        cli_api.add("GET", ENDPOINTS["devices"], json=self.DEVICES)

        result = runner.invoke(cli.app, ["--api-key", "k", "--json", "devices"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == [
            {"name": "iphone_14_pro", "viewport": "393x852", "scale": 3, "mobile": True, "touch": True}
        ]

    def test_table_output(self, runner, cli_api):
        cli_api.add("GET", ENDPOINTS["devices"], json=self.DEVICES)

        result = runner.invoke(cli.app, ["--api-key", "k", "devices"])

        assert result.exit_code == 0
        assert "iphone_14_pro" in result.stdout
