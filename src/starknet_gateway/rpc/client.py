"""Async JSON-RPC client for StarkNet nodes.

Every request is checked against the catalog before it is sent; error
responses are classified into the method's declared error kinds.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any, Mapping, Sequence, Union

from starknet_gateway.encoding.numbers import Numeric, to_hex, to_hex_list
from starknet_gateway.encoding.transactions import serialize_payload
from starknet_gateway.errors import ProtocolError, TransportError, UnexpectedProtocolError
from starknet_gateway.interfaces.transport import Transport
from starknet_gateway.models.config import GatewayConfig
from starknet_gateway.models.status import (
    ConfirmationResult,
    ExecutionStatus,
    FinalityStatus,
    StatusReport,
    TransactionStatus,
)
from starknet_gateway.poller import ConfirmationPoller
from starknet_gateway.rpc.catalog import (
    MethodSpec,
    RpcErrorKind,
    build_params,
    classify_error,
    get_method,
)
from starknet_gateway.transport import HttpxTransport

log = logging.getLogger(__name__)

BlockId = Union[str, int, Mapping[str, Any]]

_BLOCK_TAGS = ("latest", "pending")


def block_id(value: BlockId = "latest") -> str | dict[str, Any]:
    """Normalize a block reference: a tag, a block number or a block hash."""
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, str) and value in _BLOCK_TAGS:
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return {"block_number": value}
    return {"block_hash": to_hex(value)}


def _error_from(spec: MethodSpec, err: Any) -> ProtocolError | UnexpectedProtocolError:
    """Typed error for a JSON-RPC ``error`` member."""
    if not isinstance(err, Mapping):
        return UnexpectedProtocolError(spec.name, None, f"malformed error: {err!r}")
    return classify_error(spec, err.get("code"), err.get("message", ""), err.get("data"))


def status_from_rpc(result: Mapping[str, Any]) -> StatusReport:
    """Fold a (finality_status, execution_status) pair into a TransactionStatus.

    A transaction accepted on L2 or L1 whose execution reverted is reported as
    REJECTED with reason ``REVERTED``.
    """
    try:
        finality = FinalityStatus(result["finality_status"])
        execution = (
            ExecutionStatus(result["execution_status"])
            if result.get("execution_status") is not None
            else None
        )
    except (KeyError, ValueError) as exc:
        raise UnexpectedProtocolError(
            "starknet_getTransactionStatus", None, f"unrecognized status {dict(result)!r}",
        ) from exc

    if finality is FinalityStatus.RECEIVED:
        return StatusReport(TransactionStatus.RECEIVED)
    if finality is FinalityStatus.REJECTED:
        return StatusReport(TransactionStatus.REJECTED)
    if execution is ExecutionStatus.REVERTED:
        return StatusReport(TransactionStatus.REJECTED, reason=ExecutionStatus.REVERTED.value)
    return StatusReport(TransactionStatus(finality.value))


class JsonRpcClient:
    """Talks JSON-RPC 2.0 to a StarkNet node.

    The client keeps no state between calls other than its endpoint, the
    transport and a request id counter.
    """

    def __init__(
        self,
        rpc_url: str,
        transport: Transport | None = None,
        config: GatewayConfig | None = None,
    ) -> None:
        self._rpc_url = rpc_url
        self._config = config or GatewayConfig(rpc_url=rpc_url)
        self._transport = transport or HttpxTransport(timeout=self._config.request_timeout)
        self._ids = itertools.count(1)

    @classmethod
    def from_config(cls, config: GatewayConfig, transport: Transport | None = None) -> JsonRpcClient:
        if not config.rpc_url:
            raise ValueError("config.rpc_url is not set")
        return cls(config.rpc_url, transport=transport, config=config)

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> JsonRpcClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        params: Mapping[str, Any] | Sequence[Any] | None = None,
    ) -> Any:
        """Send one request and return its ``result``.

        Raises UnknownMethodError / InvalidParamsError before anything is
        sent, ProtocolError for declared node errors and
        UnexpectedProtocolError for anything else.
        """
        spec = get_method(method)
        named = build_params(spec, params)
        request_id = next(self._ids)
        envelope = {"jsonrpc": "2.0", "id": request_id, "method": method, "params": named}

        log.debug("RPC %s (id=%d)", method, request_id)
        try:
            body = await self._transport.post(self._rpc_url, serialize_payload(envelope))
        except TransportError as exc:
            # Some nodes answer error envelopes with a non-2xx status
            if isinstance(exc.body, Mapping) and "error" in exc.body:
                raise _error_from(spec, exc.body["error"]) from exc
            raise

        if not isinstance(body, Mapping):
            raise UnexpectedProtocolError(method, None, f"malformed response: {body!r}")
        if "error" in body:
            raise _error_from(spec, body["error"])
        if "result" not in body:
            raise UnexpectedProtocolError(method, None, "response has neither result nor error")
        return body["result"]

    # ── Read ───────────────────────────────────────────────

    async def spec_version(self) -> str:
        return await self.request("starknet_specVersion")

    async def get_block_with_tx_hashes(self, block: BlockId = "latest") -> dict:
        return await self.request("starknet_getBlockWithTxHashes", {"block_id": block_id(block)})

    async def get_block_with_txs(self, block: BlockId = "latest") -> dict:
        return await self.request("starknet_getBlockWithTxs", {"block_id": block_id(block)})

    async def get_state_update(self, block: BlockId = "latest") -> dict:
        return await self.request("starknet_getStateUpdate", {"block_id": block_id(block)})

    async def get_storage_at(
        self, contract_address: Numeric, key: Numeric, block: BlockId = "latest",
    ) -> str:
        return await self.request(
            "starknet_getStorageAt",
            {
                "contract_address": to_hex(contract_address),
                "key": to_hex(key),
                "block_id": block_id(block),
            },
        )

    async def get_transaction_status(self, tx_hash: Numeric) -> dict:
        return await self.request(
            "starknet_getTransactionStatus", {"transaction_hash": to_hex(tx_hash)},
        )

    async def get_transaction_by_hash(self, tx_hash: Numeric) -> dict:
        return await self.request(
            "starknet_getTransactionByHash", {"transaction_hash": to_hex(tx_hash)},
        )

    async def get_transaction_by_block_id_and_index(self, block: BlockId, index: int) -> dict:
        return await self.request(
            "starknet_getTransactionByBlockIdAndIndex",
            {"block_id": block_id(block), "index": index},
        )

    async def get_transaction_receipt(self, tx_hash: Numeric) -> dict:
        return await self.request(
            "starknet_getTransactionReceipt", {"transaction_hash": to_hex(tx_hash)},
        )

    async def get_class(self, class_hash: Numeric, block: BlockId = "latest") -> dict:
        return await self.request(
            "starknet_getClass", {"block_id": block_id(block), "class_hash": to_hex(class_hash)},
        )

    async def get_class_hash_at(self, contract_address: Numeric, block: BlockId = "latest") -> str:
        return await self.request(
            "starknet_getClassHashAt",
            {"block_id": block_id(block), "contract_address": to_hex(contract_address)},
        )

    async def get_class_at(self, contract_address: Numeric, block: BlockId = "latest") -> dict:
        return await self.request(
            "starknet_getClassAt",
            {"block_id": block_id(block), "contract_address": to_hex(contract_address)},
        )

    async def get_block_transaction_count(self, block: BlockId = "latest") -> int:
        return await self.request(
            "starknet_getBlockTransactionCount", {"block_id": block_id(block)},
        )

    async def call(
        self,
        contract_address: Numeric,
        entry_point_selector: Numeric,
        calldata: Sequence[Numeric] = (),
        block: BlockId = "latest",
    ) -> list[str]:
        request = {
            "contract_address": to_hex(contract_address),
            "entry_point_selector": to_hex(entry_point_selector),
            "calldata": to_hex_list(calldata),
        }
        return await self.request("starknet_call", {"request": request, "block_id": block_id(block)})

    async def estimate_fee(self, transactions: Sequence[dict], block: BlockId = "latest") -> list[dict]:
        return await self.request(
            "starknet_estimateFee", {"request": list(transactions), "block_id": block_id(block)},
        )

    async def estimate_message_fee(self, message: dict, block: BlockId = "latest") -> dict:
        return await self.request(
            "starknet_estimateMessageFee", {"message": message, "block_id": block_id(block)},
        )

    async def block_number(self) -> int:
        return await self.request("starknet_blockNumber")

    async def block_hash_and_number(self) -> dict:
        return await self.request("starknet_blockHashAndNumber")

    async def chain_id(self) -> str:
        return await self.request("starknet_chainId")

    async def syncing(self) -> bool | dict:
        return await self.request("starknet_syncing")

    async def get_events(self, event_filter: dict) -> dict:
        return await self.request("starknet_getEvents", {"filter": event_filter})

    async def get_nonce(self, contract_address: Numeric, block: BlockId = "latest") -> str:
        return await self.request(
            "starknet_getNonce",
            {"block_id": block_id(block), "contract_address": to_hex(contract_address)},
        )

    # ── Write (not safe to retry blindly) ──────────────────

    async def add_invoke_transaction(self, invoke_transaction: dict) -> dict:
        result = await self.request(
            "starknet_addInvokeTransaction", {"invoke_transaction": invoke_transaction},
        )
        log.info("Submitted invoke transaction %s", result.get("transaction_hash"))
        return result

    async def add_declare_transaction(self, declare_transaction: dict) -> dict:
        result = await self.request(
            "starknet_addDeclareTransaction", {"declare_transaction": declare_transaction},
        )
        log.info(
            "Submitted declare transaction %s (class %s)",
            result.get("transaction_hash"), result.get("class_hash"),
        )
        return result

    async def add_deploy_account_transaction(self, deploy_account_transaction: dict) -> dict:
        result = await self.request(
            "starknet_addDeployAccountTransaction",
            {"deploy_account_transaction": deploy_account_transaction},
        )
        log.info(
            "Submitted deploy_account transaction %s (address %s)",
            result.get("transaction_hash"), result.get("contract_address"),
        )
        return result

    # ── Trace ──────────────────────────────────────────────

    async def trace_transaction(self, tx_hash: Numeric) -> dict:
        return await self.request("starknet_traceTransaction", {"transaction_hash": to_hex(tx_hash)})

    async def trace_block_transactions(self, block: BlockId = "latest") -> Any:
        return await self.request("starknet_traceBlockTransactions", {"block_id": block_id(block)})

    async def simulate_transactions(
        self,
        transactions: Sequence[dict],
        simulation_flags: Sequence[str] = (),
        block: BlockId = "latest",
    ) -> list[dict]:
        return await self.request(
            "starknet_simulateTransactions",
            {
                "block_id": block_id(block),
                "transactions": list(transactions),
                "simulation_flags": list(simulation_flags),
            },
        )

    # ── Confirmation ───────────────────────────────────────

    async def transaction_status(self, tx_hash: str) -> StatusReport:
        """StatusSource for the poller; an unknown hash reads as NOT_RECEIVED."""
        try:
            result = await self.get_transaction_status(tx_hash)
        except ProtocolError as exc:
            if exc.kind is RpcErrorKind.TXN_HASH_NOT_FOUND:
                return StatusReport(TransactionStatus.NOT_RECEIVED)
            raise
        return status_from_rpc(result)

    async def wait_for_tx(
        self,
        tx_hash: Numeric,
        interval: float | None = None,
        stop: asyncio.Event | None = None,
    ) -> ConfirmationResult:
        cfg = self._config
        poller = ConfirmationPoller(
            self.transaction_status,
            interval=cfg.poll_interval if interval is None else interval,
            accept_pending=cfg.accept_pending,
            backoff_factor=cfg.backoff_factor,
            max_interval=cfg.max_interval,
        )
        return await poller.run(to_hex(tx_hash), stop=stop)
