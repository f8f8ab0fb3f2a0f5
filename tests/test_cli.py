"""
Tests for the command-line interface.
"""

from __future__ import annotations

import json
from unittest.mock import patch

import httpx
import pytest
from typer.testing import CliRunner

from fauna import __version__, client
from fauna.cli import main as cli_main
from fauna.config import Settings
from fauna.connection import Connection
from fauna.exceptions import NoContextError

runner = CliRunner()


def patched_connection(handler):
    """Patch the CLI's Connection to answer requests with `handler`."""

    def factory() -> Connection:
        return Connection(transport=httpx.MockTransport(handler))

    return patch.object(cli_main, "Connection", factory)


class TestCLI:
    def test_version(self) -> None:
        result = runner.invoke(cli_main.app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_config_shows_base_url(self, mock_settings: Settings) -> None:
        result = runner.invoke(cli_main.app, ["config"])

        assert result.exit_code == 0
        assert "https://db.example.test/v1/" in result.output
        assert "test-secret-0123456789" not in result.output

    def test_get_prints_resource(self, mock_settings: Settings) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            body = {"resource": {"class": "users", "ref": "users/123", "data": {"name": "Ada"}}}
            return httpx.Response(200, content=json.dumps(body).encode())

        with patched_connection(handler):
            result = runner.invoke(cli_main.app, ["get", "users/123", "-p", "expand=data"])

        assert result.exit_code == 0, result.output
        assert '"name": "Ada"' in result.output
        assert seen[0].url.params["expand"] == "data"
        with pytest.raises(NoContextError):
            client.current()

    def test_get_reports_transport_errors(self, mock_settings: Settings) -> None:
        with patched_connection(lambda request: httpx.Response(404)):
            result = runner.invoke(cli_main.app, ["get", "users/missing"])

        assert result.exit_code == 1
        assert "404" in result.output

    def test_get_rejects_malformed_params(self, mock_settings: Settings) -> None:
        with patched_connection(lambda request: httpx.Response(204)):
            result = runner.invoke(cli_main.app, ["get", "users/1", "--param", "novalue"])

        assert result.exit_code != 0
