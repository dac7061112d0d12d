"""Transaction encoder - turns a Transaction variant into its wire payload.

Conventions on the wire:
    addresses, selectors, hashes, salts, fees, nonces, versions, signatures -> hex
    calldata and constructor calldata                                      -> decimal strings
    contract program                                                       -> compress_program()

Nothing in an encoded payload is a Python int, so a payload survives any JSON
round trip without losing precision.
"""

from __future__ import annotations

import json
import logging
import secrets
from typing import Any, Iterable

from starknet_gateway.encoding.numbers import (
    FIELD_PRIME,
    Numeric,
    to_decimal_list,
    to_felt,
    to_hex,
)
from starknet_gateway.encoding.program import compress_program, decompress_program
from starknet_gateway.errors import SerializationError, UnsupportedTransactionKind
from starknet_gateway.models.transactions import (
    CompiledContract,
    Declare,
    Deploy,
    DeployAccount,
    InvokeFunction,
    Transaction,
)

log = logging.getLogger(__name__)


def random_address() -> str:
    """A uniformly random felt, used as a default deploy salt."""
    return to_hex(secrets.randbelow(FIELD_PRIME))


def format_signature(signature: Iterable[Numeric] | None) -> list[str]:
    """Signature as an ordered list of hex felts; ``None`` becomes ``[]``."""
    return [to_hex(to_felt(s)) for s in (signature or ())]


def _salt(value: Numeric | None) -> str:
    if value is None:
        return random_address()
    return to_hex(to_felt(value))


def _compressed(program: dict | str) -> str:
    """Compressed form of a program; text that already decodes is kept as is."""
    if isinstance(program, str):
        try:
            decompress_program(program)
        except SerializationError:
            return compress_program(program)
        return program
    return compress_program(program)


def encode_contract(contract: CompiledContract | dict | str) -> dict[str, Any]:
    """Contract definition with its program replaced by the compressed form.

    A program given as JSON text is compressed like a structured one; only
    text that is already gzip+base64 is passed through unchanged.
    """
    parsed = CompiledContract.from_json(contract)
    definition = parsed.as_dict()
    definition["program"] = _compressed(parsed.program)
    return definition


def _encode_invoke(tx: InvokeFunction) -> dict[str, Any]:
    payload = {
        "contract_address": to_hex(to_felt(tx.contract_address)),
        "entry_point_selector": to_hex(to_felt(tx.entry_point_selector)),
        "calldata": to_decimal_list(tx.calldata),
        "signature": format_signature(tx.signature),
        "max_fee": to_hex(tx.max_fee),
    }
    if tx.nonce is not None:
        payload["nonce"] = to_hex(tx.nonce)
    return payload


def _encode_declare(tx: Declare) -> dict[str, Any]:
    return {
        "contract_class": encode_contract(tx.contract_class),
        "sender_address": to_hex(to_felt(tx.sender_address)),
        "signature": format_signature(tx.signature),
        "max_fee": to_hex(tx.max_fee),
        "nonce": to_hex(tx.nonce),
    }


def _encode_deploy(tx: Deploy) -> dict[str, Any]:
    return {
        "contract_address_salt": _salt(tx.contract_address_salt),
        "constructor_calldata": to_decimal_list(tx.constructor_calldata),
        "contract_definition": encode_contract(tx.contract_definition),
    }


def _encode_deploy_account(tx: DeployAccount) -> dict[str, Any]:
    return {
        "class_hash": to_hex(to_felt(tx.class_hash)),
        "contract_address_salt": _salt(tx.contract_address_salt),
        "constructor_calldata": to_decimal_list(tx.constructor_calldata),
        "signature": format_signature(tx.signature),
        "max_fee": to_hex(tx.max_fee),
        "nonce": to_hex(tx.nonce),
    }


_ENCODERS = {
    InvokeFunction: _encode_invoke,
    Declare: _encode_declare,
    Deploy: _encode_deploy,
    DeployAccount: _encode_deploy_account,
}


def encode_transaction(tx: Transaction) -> dict[str, Any]:
    """Build the gateway payload for a transaction.

    Only the fields of the transaction's own kind are emitted.
    """
    encoder = _ENCODERS.get(type(tx))
    if encoder is None:
        raise UnsupportedTransactionKind(getattr(tx, "type", type(tx).__name__))

    payload: dict[str, Any] = {"type": tx.type, "version": to_hex(tx.version)}
    payload.update(encoder(tx))
    log.debug("Encoded %s transaction (%d fields)", tx.type, len(payload))
    return payload


# Largest integer a JSON consumer can hold in an IEEE-754 double without loss
MAX_SAFE_INTEGER = 2**53 - 1


def _stringify_ints(node: Any) -> Any:
    if isinstance(node, bool) or node is None:
        return node
    if isinstance(node, int):
        return node if abs(node) <= MAX_SAFE_INTEGER else str(node)
    if isinstance(node, dict):
        return {k: _stringify_ints(v) for k, v in node.items()}
    if isinstance(node, (list, tuple)):
        return [_stringify_ints(v) for v in node]
    return node


def serialize_payload(payload: Any) -> str:
    """Serialize a request body without ever emitting an unsafe JSON number.

    Integers above MAX_SAFE_INTEGER become decimal strings; smaller ones
    (block numbers, indices, request ids) stay numbers. All request bodies go
    through here.
    """
    try:
        return json.dumps(_stringify_ints(payload), allow_nan=False)
    except RecursionError as exc:
        raise SerializationError("payload contains a circular reference") from exc
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"payload is not JSON-serializable: {exc}") from exc
