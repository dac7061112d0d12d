"""Submit-and-confirm flows against the local fake node."""

from __future__ import annotations

import pytest

from starknet_gateway.encoding.program import compress_program, decompress_program
from starknet_gateway.errors import (
    GatewayResponseError,
    ProtocolError,
    TransactionNotReceivedError,
    TransactionRejectedError,
    UnexpectedProtocolError,
)
from starknet_gateway.models.status import PollState, TransactionStatus
from starknet_gateway.rpc.catalog import RpcErrorKind

from tests.factories import BIG_FELT, TX_HASH, make_contract, make_invoke

pytestmark = pytest.mark.node


async def test_invoke_then_confirm(node, live_gateway):
    node.statuses = ["RECEIVED", "RECEIVED", "PENDING"]

    resp = await live_gateway.add_transaction(make_invoke())
    result = await live_gateway.wait_for_tx(resp["transaction_hash"])

    assert result.state is PollState.CONFIRMED
    assert result.status is TransactionStatus.PENDING
    assert node.status_queries == 3


async def test_big_felts_survive_the_wire(node, live_gateway):
    await live_gateway.add_transaction(make_invoke(calldata=(BIG_FELT,)))
    raw = node.raw_bodies[-1]
    assert str(BIG_FELT) in raw
    assert node.submitted[-1]["calldata"] == [str(BIG_FELT)]


async def test_deploy_program_round_trips(node, live_gateway):
    contract = make_contract(500)
    await live_gateway.deploy_contract(contract, address_salt=1)
    sent = node.submitted[-1]["contract_definition"]["program"]
    assert sent == compress_program(contract.program)
    assert decompress_program(sent) == contract.program


async def test_rejected_transaction(node, live_gateway):
    node.statuses = ["RECEIVED", "REJECTED"]
    with pytest.raises(TransactionRejectedError):
        await live_gateway.wait_for_tx(TX_HASH)
    assert node.status_queries == 2


async def test_never_received(node, live_gateway):
    node.statuses = ["NOT_RECEIVED"]
    with pytest.raises(TransactionNotReceivedError):
        await live_gateway.wait_for_tx(TX_HASH)


async def test_gateway_error_code(node, live_gateway):
    node.fail_next = (500, {"code": "StarknetErrorCode.ENTRY_POINT_NOT_FOUND_IN_CONTRACT", "message": "no"})
    with pytest.raises(GatewayResponseError) as exc_info:
        await live_gateway.add_transaction(make_invoke())
    assert exc_info.value.status_code == 500
    assert exc_info.value.code.endswith("ENTRY_POINT_NOT_FOUND_IN_CONTRACT")


async def test_get_block_sends_null_block_id(live_gateway):
    block = await live_gateway.get_block()
    assert block["block_id"] == "null"


# ── JSON-RPC ──────────────────────────────────────────


async def test_rpc_chain_id(live_rpc):
    assert await live_rpc.chain_id() == "0x534e5f474f45524c49"


async def test_rpc_submit_and_confirm(node, live_rpc):
    node.statuses = ["RECEIVED", "PENDING"]
    resp = await live_rpc.add_invoke_transaction({"type": "INVOKE", "calldata": ["0x1"]})
    result = await live_rpc.wait_for_tx(resp["transaction_hash"])
    assert result.status is TransactionStatus.ACCEPTED_ON_L2
    assert node.status_queries == 2


async def test_rpc_duplicate_is_declared(node, live_rpc):
    node.rpc_errors["starknet_addInvokeTransaction"] = {"code": 59, "message": "duplicate"}
    with pytest.raises(ProtocolError) as exc_info:
        await live_rpc.add_invoke_transaction({"type": "INVOKE"})
    assert exc_info.value.kind is RpcErrorKind.DUPLICATE_TX


async def test_rpc_method_not_found_is_unexpected(live_rpc):
    with pytest.raises(UnexpectedProtocolError):
        await live_rpc.syncing()
