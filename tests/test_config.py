"""Tests for environment configuration and client loading."""
import json
import os
from collections import OrderedDict

import pytest

from sb_mcp.config import (
    configure_client,
    env_prefix,
    get_client_config,
    get_telemetry_sink,
    load_client,
    load_clients,
    load_environment,
)
from sb_mcp.telemetry import BugsnagSink, LoggingSink


class TestClientConfig:
    def test_env_prefix(self):
        assert env_prefix("test-product") == "TEST_PRODUCT_"

    def test_get_client_config(self):
        environ = {
            "TEST_PRODUCT_API_TOKEN": "secret",
            "TEST_PRODUCT_BASE_URL": "https://example.com",
            "TEST_PRODUCT_": "ignored",
            "OTHER_API_TOKEN": "other",
        }
        assert get_client_config("test-product", environ) == {
            "api_token": "secret",
            "base_url": "https://example.com",
        }

    def test_configure_client(self, client):
        client.configured = False
        assert configure_client(client, {"TEST_PRODUCT_API_TOKEN": "secret"}) is True
        assert client.config == {"api_token": "secret"}

    def test_configure_client_missing_config(self, client):
        assert configure_client(client, {}) is False
        assert client.config == {}

    def test_client_without_config_prefix(self, tools_only_client):
        assert configure_client(tools_only_client, {}) is True

    def test_load_environment(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("SB_MCP_TEST_VALUE=from-dotenv\n")
        monkeypatch.delenv("SB_MCP_TEST_VALUE", raising=False)

        load_environment(str(env_file))

        assert os.environ["SB_MCP_TEST_VALUE"] == "from-dotenv"
        monkeypatch.delenv("SB_MCP_TEST_VALUE")


class TestLoadClient:
    def test_class_is_instantiated(self):
        assert isinstance(load_client("collections:OrderedDict"), OrderedDict)

    def test_load_clients(self):
        clients = load_clients(["json:JSONDecoder", "collections:OrderedDict"])
        assert isinstance(clients[0], json.JSONDecoder)
        assert isinstance(clients[1], OrderedDict)

    @pytest.mark.parametrize("path", ["json", "json:", "json:missing_attribute"])
    def test_invalid_path(self, path):
        with pytest.raises(ValueError):
            load_client(path)

    def test_missing_module(self):
        with pytest.raises(ImportError):
            load_client("sb_mcp_missing_module:Client")


class TestTelemetrySink:
    def test_bugsnag_when_key_set(self):
        sink = get_telemetry_sink({"BUGSNAG_API_KEY": "abc", "BUGSNAG_RELEASE_STAGE": "staging"})
        assert isinstance(sink, BugsnagSink)
        assert sink.api_key == "abc"
        assert sink.release_stage == "staging"
        assert sink.endpoint is None
        sink.close()

    def test_logging_by_default(self):
        assert isinstance(get_telemetry_sink({}), LoggingSink)
