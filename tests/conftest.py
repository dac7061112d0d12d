"""Shared fixtures for starknet_gateway tests."""

from __future__ import annotations

import pytest
from pytest_metadata.plugin import metadata_key

from starknet_gateway.gateway.client import GatewayClient
from starknet_gateway.models.config import GatewayConfig
from starknet_gateway.rpc.client import JsonRpcClient

from tests.mocks import RecordingTransport

BASE_URL = "https://alpha.example.test"
RPC_URL = "https://rpc.example.test/rpc/v0_5"


def pytest_configure(config):
    """Add the fake endpoints to the report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Gateway"] = f"{BASE_URL}/gateway"
    meta["Feeder Gateway"] = f"{BASE_URL}/feeder_gateway"
    meta["JSON-RPC"] = RPC_URL


def make_test_config(**overrides) -> GatewayConfig:
    """Build a GatewayConfig suitable for testing."""
    defaults = dict(
        network="test",
        rpc_url=RPC_URL,
        poll_interval=0.01,
        request_timeout=5.0,
    )
    defaults.update(overrides)
    return GatewayConfig.from_base_url(BASE_URL, **defaults)


@pytest.fixture
def test_config():
    """Default GatewayConfig for tests."""
    return make_test_config()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def gateway(test_config, transport):
    """GatewayClient wired to the recording transport."""
    return GatewayClient(test_config, transport=transport)


@pytest.fixture
def rpc(test_config, transport):
    """JsonRpcClient wired to the recording transport."""
    return JsonRpcClient.from_config(test_config, transport=transport)
