"""Client for the legacy feeder gateway (reads) and gateway (writes)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Sequence

from starknet_gateway.encoding.numbers import Numeric, to_decimal_list, to_felt, to_hex
from starknet_gateway.encoding.transactions import (
    encode_transaction,
    format_signature,
    serialize_payload,
)
from starknet_gateway.errors import GatewayResponseError, TransportError, UnexpectedProtocolError
from starknet_gateway.interfaces.transport import Transport
from starknet_gateway.models.config import GatewayConfig
from starknet_gateway.models.status import ConfirmationResult, StatusReport, TransactionStatus
from starknet_gateway.models.transactions import (
    CompiledContract,
    Declare,
    Deploy,
    InvokeFunction,
    Transaction,
)
from starknet_gateway.poller import ConfirmationPoller
from starknet_gateway.transport import HttpxTransport

log = logging.getLogger(__name__)


def _block(block_id: int | str | None) -> str:
    return "null" if block_id is None else str(block_id)


def _gateway_error(exc: TransportError) -> GatewayResponseError | None:
    """A StarknetErrorCode body carried by an HTTP error, if there is one."""
    body = exc.body
    if isinstance(body, Mapping) and "code" in body:
        return GatewayResponseError(
            exc.status_code, str(body["code"]), str(body.get("message", "")),
        )
    return None


class GatewayClient:
    """Reads from the feeder gateway, writes to the gateway.

    The only state kept between calls is the endpoint configuration and the
    transport; every operation is a single request/response mapping.
    """

    def __init__(
        self,
        config: GatewayConfig | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or GatewayConfig()
        self._transport = transport or HttpxTransport(timeout=self._config.request_timeout)
        self.feeder_gateway_url = self._config.feeder_gateway_url.rstrip("/")
        self.gateway_url = self._config.gateway_url.rstrip("/")

    @property
    def config(self) -> GatewayConfig:
        return self._config

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> GatewayClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get(self, endpoint: str, **params: str) -> Any:
        try:
            return await self._transport.get(f"{self.feeder_gateway_url}/{endpoint}", params=params)
        except TransportError as exc:
            err = _gateway_error(exc)
            if err is None:
                raise
            log.warning("Gateway error %s: %s", err.code, err.message)
            raise err from exc

    async def _post(self, base_url: str, endpoint: str, body: Any, **params: str) -> Any:
        try:
            return await self._transport.post(
                f"{base_url}/{endpoint}",
                serialize_payload(body),
                params=params or None,
                headers={"Content-Type": "application/json"},
            )
        except TransportError as exc:
            err = _gateway_error(exc)
            if err is None:
                raise
            log.warning("Gateway error %s: %s", err.code, err.message)
            raise err from exc

    # ── Feeder gateway (reads) ─────────────────────────────

    async def get_contract_addresses(self) -> dict:
        """Addresses of the core StarkNet contracts on L1."""
        return await self._get("get_contract_addresses")

    async def call_contract(self, tx: InvokeFunction, block_id: int | str | None = None) -> dict:
        """Run a view call without creating a transaction.

        Returns ``{"result": [...felts]}``.
        """
        body = {
            "contract_address": to_hex(to_felt(tx.contract_address)),
            "entry_point_selector": to_hex(to_felt(tx.entry_point_selector)),
            "calldata": to_decimal_list(tx.calldata),
            "signature": format_signature(tx.signature),
        }
        return await self._post(
            self.feeder_gateway_url, "call_contract", body, blockId=_block(block_id),
        )

    async def get_block(self, block_id: int | str | None = None) -> dict:
        """Block by id; the latest block when ``block_id`` is None."""
        return await self._get("get_block", blockId=_block(block_id))

    async def get_code(self, contract_address: Numeric, block_id: int | str | None = None) -> dict:
        """Bytecode and ABI of a deployed contract."""
        return await self._get(
            "get_code",
            contractAddress=to_hex(contract_address),
            blockId=_block(block_id),
        )

    async def get_storage_at(
        self,
        contract_address: Numeric,
        key: Numeric,
        block_id: int | str | None = None,
    ) -> Any:
        return await self._get(
            "get_storage_at",
            contractAddress=to_hex(contract_address),
            key=str(to_felt(key)),
            blockId=_block(block_id),
        )

    async def get_transaction_status(self, tx_hash: Numeric) -> dict:
        """``{"tx_status": ..., "block_hash": ...}``"""
        return await self._get("get_transaction_status", transactionHash=to_hex(tx_hash))

    async def get_transaction(self, tx_hash: Numeric) -> dict:
        return await self._get("get_transaction", transactionHash=to_hex(tx_hash))

    async def get_transaction_receipt(self, tx_hash: Numeric) -> dict:
        return await self._get("get_transaction_receipt", transactionHash=to_hex(tx_hash))

    # ── Gateway (writes) ───────────────────────────────────

    async def add_transaction(self, tx: Transaction) -> dict:
        """Encode and submit a transaction.

        Not retried: a resubmitted transaction is a duplicate, not a no-op.
        """
        payload = encode_transaction(tx)
        result = await self._post(self.gateway_url, "add_transaction", payload)
        if not isinstance(result, Mapping):
            raise UnexpectedProtocolError(
                "add_transaction", None, f"malformed response: {result!r}",
            )
        log.info(
            "Submitted %s transaction: %s (%s)",
            tx.type,
            result.get("transaction_hash"),
            result.get("code"),
        )
        return result

    async def deploy_contract(
        self,
        contract: CompiledContract | dict | str,
        constructor_calldata: Sequence[Numeric] = (),
        address_salt: Numeric | None = None,
    ) -> dict:
        """Deploy a compiled contract; a random salt is drawn when none is given."""
        tx = Deploy(
            contract_definition=CompiledContract.from_json(contract),
            constructor_calldata=tuple(constructor_calldata),
            contract_address_salt=address_salt,
        )
        return await self.add_transaction(tx)

    async def declare_contract(
        self,
        contract: CompiledContract | dict | str,
        sender_address: Numeric = 1,
        signature: Sequence[Numeric] | None = None,
        max_fee: Numeric = 0,
        nonce: Numeric = 0,
    ) -> dict:
        tx = Declare(
            contract_class=CompiledContract.from_json(contract),
            sender_address=sender_address,
            signature=signature,
            max_fee=max_fee,
            nonce=nonce,
        )
        return await self.add_transaction(tx)

    # ── Confirmation ───────────────────────────────────────

    async def transaction_status(self, tx_hash: str) -> StatusReport:
        """StatusSource for the poller."""
        resp = await self.get_transaction_status(tx_hash)
        raw = resp.get("tx_status") if isinstance(resp, Mapping) else None
        try:
            status = TransactionStatus(raw)
        except ValueError:
            raise UnexpectedProtocolError(
                "get_transaction_status", raw, f"unknown tx_status in {resp!r}",
            ) from None
        return StatusReport(status, block_hash=resp.get("block_hash"))

    async def wait_for_tx(
        self,
        tx_hash: Numeric,
        interval: float | None = None,
        stop: asyncio.Event | None = None,
    ) -> ConfirmationResult:
        """Poll until the transaction is confirmed, rejected or not received.

        ``interval`` overrides the configured poll interval for this call.
        """
        cfg = self._config
        poller = ConfirmationPoller(
            self.transaction_status,
            interval=cfg.poll_interval if interval is None else interval,
            accept_pending=cfg.accept_pending,
            backoff_factor=cfg.backoff_factor,
            max_interval=cfg.max_interval,
        )
        return await poller.run(to_hex(tx_hash), stop=stop)
