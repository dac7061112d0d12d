"""Tier 2 fixtures: a fake StarkNet node served by aiohttp on localhost.

The node answers the feeder gateway, gateway and JSON-RPC endpoints with
scripted transaction statuses, so the clients run through the real
HttpxTransport and a real socket.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

import pytest
from aiohttp import web

from starknet_gateway.gateway.client import GatewayClient
from starknet_gateway.models.config import GatewayConfig
from starknet_gateway.rpc.client import JsonRpcClient
from starknet_gateway.transport import HttpxTransport

from tests.factories import TX_HASH


@dataclass
class FakeNode:
    """Scripted node state shared by the request handlers."""

    statuses: list[str] = field(default_factory=list)  # tx_status per poll
    submitted: list[dict] = field(default_factory=list)  # add_transaction bodies
    raw_bodies: list[str] = field(default_factory=list)
    status_queries: int = 0
    fail_next: tuple[int, dict] | None = None  # (HTTP status, error body)
    rpc_errors: dict[str, dict] = field(default_factory=dict)  # method -> error

    def next_status(self) -> str:
        self.status_queries += 1
        if len(self.statuses) > 1:
            return self.statuses.pop(0)
        return self.statuses[0] if self.statuses else "NOT_RECEIVED"


def _rpc_status(tx_status: str) -> dict:
    if tx_status == "PENDING":
        return {"finality_status": "ACCEPTED_ON_L2", "execution_status": "SUCCEEDED"}
    if tx_status == "ACCEPTED_ONCHAIN":
        return {"finality_status": "ACCEPTED_ON_L1", "execution_status": "SUCCEEDED"}
    return {"finality_status": tx_status}


def build_app(node: FakeNode) -> web.Application:
    async def add_transaction(request: web.Request) -> web.Response:
        if node.fail_next is not None:
            status, body = node.fail_next
            node.fail_next = None
            return web.json_response(body, status=status)
        raw = await request.text()
        node.raw_bodies.append(raw)
        node.submitted.append(json.loads(raw))
        return web.json_response({"code": "TRANSACTION_RECEIVED", "transaction_hash": TX_HASH})

    async def get_transaction_status(request: web.Request) -> web.Response:
        return web.json_response({"tx_status": node.next_status()})

    async def get_block(request: web.Request) -> web.Response:
        return web.json_response({"block_id": request.query.get("blockId"), "transactions": []})

    async def rpc(request: web.Request) -> web.Response:
        body = await request.json()
        method = body["method"]
        reply = {"jsonrpc": "2.0", "id": body["id"]}
        if method in node.rpc_errors:
            reply["error"] = node.rpc_errors[method]
        elif method == "starknet_getTransactionStatus":
            reply["result"] = _rpc_status(node.next_status())
        elif method == "starknet_chainId":
            reply["result"] = "0x534e5f474f45524c49"
        elif method == "starknet_addInvokeTransaction":
            node.submitted.append(body["params"]["invoke_transaction"])
            reply["result"] = {"transaction_hash": TX_HASH}
        else:
            reply["error"] = {"code": -32601, "message": "Method not found"}
        return web.json_response(reply)

    app = web.Application()
    app.router.add_post("/gateway/add_transaction", add_transaction)
    app.router.add_get("/feeder_gateway/get_transaction_status", get_transaction_status)
    app.router.add_get("/feeder_gateway/get_block", get_block)
    app.router.add_post("/rpc", rpc)
    return app


@pytest.fixture
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture
async def node_url(node):
    """Start the fake node on an ephemeral port; yields its base URL."""
    runner = web.AppRunner(build_app(node))
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    host, port = runner.addresses[0][:2]
    yield f"http://{host}:{port}"
    await runner.cleanup()


@pytest.fixture
def node_config(node_url) -> GatewayConfig:
    return GatewayConfig.from_base_url(
        node_url,
        network="fake",
        rpc_url=f"{node_url}/rpc",
        poll_interval=0.01,
        request_timeout=5.0,
    )


@pytest.fixture
async def live_gateway(node_config):
    async with GatewayClient(node_config, transport=HttpxTransport(timeout=5.0)) as client:
        yield client


@pytest.fixture
async def live_rpc(node_config):
    async with JsonRpcClient.from_config(node_config, transport=HttpxTransport(timeout=5.0)) as client:
        yield client
