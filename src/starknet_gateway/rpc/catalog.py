"""Node contract catalog - every JSON-RPC method the client may call.

Each entry records the method's parameter names (in positional order), its
result shape and the closed set of error kinds the node may answer with.
Methods fall into three groups with different retry semantics:

    READ   queries, safe to retry
    WRITE  submissions; a resubmitted transaction fails with DUPLICATE_TX,
           so callers must deduplicate before retrying
    TRACE  execution traces and simulation, safe to retry

The catalog is built once at import time and exposed read-only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from starknet_gateway.errors import (
    InvalidParamsError,
    ProtocolError,
    UnexpectedProtocolError,
    UnknownMethodError,
)

log = logging.getLogger(__name__)


class RpcErrorKind(IntEnum):
    """Error codes published by the StarkNet JSON-RPC specification."""

    FAILED_TO_RECEIVE_TXN = 1
    NO_TRACE_AVAILABLE = 10
    CONTRACT_NOT_FOUND = 20
    BLOCK_NOT_FOUND = 24
    INVALID_TXN_HASH = 25
    INVALID_TXN_INDEX = 27
    CLASS_HASH_NOT_FOUND = 28
    TXN_HASH_NOT_FOUND = 29
    PAGE_SIZE_TOO_BIG = 31
    NO_BLOCKS = 32
    INVALID_CONTINUATION_TOKEN = 33
    TOO_MANY_KEYS_IN_FILTER = 34
    CONTRACT_ERROR = 40
    CLASS_ALREADY_DECLARED = 51
    INVALID_TRANSACTION_NONCE = 52
    INSUFFICIENT_MAX_FEE = 53
    INSUFFICIENT_ACCOUNT_BALANCE = 54
    VALIDATION_FAILURE = 55
    COMPILATION_FAILED = 56
    CONTRACT_CLASS_SIZE_IS_TOO_LARGE = 57
    NON_ACCOUNT = 58
    DUPLICATE_TX = 59
    COMPILED_CLASS_HASH_MISMATCH = 60
    UNSUPPORTED_TX_VERSION = 61
    UNSUPPORTED_CONTRACT_CLASS_VERSION = 62
    UNEXPECTED_ERROR = 63


class MethodGroup(str, Enum):
    READ = "read"
    WRITE = "write"
    TRACE = "trace"


@dataclass(frozen=True)
class MethodSpec:
    """One remote method: name, parameter names, result shape, error kinds."""

    name: str
    group: MethodGroup
    params: tuple[str, ...]
    result: str
    errors: frozenset[RpcErrorKind] = frozenset()

    @property
    def retryable(self) -> bool:
        return self.group is not MethodGroup.WRITE

    def declares(self, code: int) -> bool:
        return any(kind.value == code for kind in self.errors)


E = RpcErrorKind

# Shared error sets
_SUBMIT_ERRORS = frozenset({
    E.INSUFFICIENT_ACCOUNT_BALANCE,
    E.INSUFFICIENT_MAX_FEE,
    E.INVALID_TRANSACTION_NONCE,
    E.VALIDATION_FAILURE,
    E.NON_ACCOUNT,
    E.DUPLICATE_TX,
    E.UNSUPPORTED_TX_VERSION,
    E.UNEXPECTED_ERROR,
})
_CALL_ERRORS = frozenset({E.CONTRACT_NOT_FOUND, E.CONTRACT_ERROR, E.BLOCK_NOT_FOUND})


def _read(name: str, params: Sequence[str], result: str, *errors: RpcErrorKind) -> MethodSpec:
    return MethodSpec(name, MethodGroup.READ, tuple(params), result, frozenset(errors))


def _write(name: str, params: Sequence[str], result: str, errors: frozenset[RpcErrorKind]) -> MethodSpec:
    return MethodSpec(name, MethodGroup.WRITE, tuple(params), result, errors)


def _trace(name: str, params: Sequence[str], result: str, *errors: RpcErrorKind) -> MethodSpec:
    return MethodSpec(name, MethodGroup.TRACE, tuple(params), result, frozenset(errors))


_METHODS: tuple[MethodSpec, ...] = (
    # ── Read ───────────────────────────────────────────────
    _read("starknet_specVersion", (), "string"),
    _read(
        "starknet_getBlockWithTxHashes", ("block_id",),
        "BLOCK_WITH_TX_HASHES | PENDING_BLOCK_WITH_TX_HASHES",
        E.BLOCK_NOT_FOUND,
    ),
    _read(
        "starknet_getBlockWithTxs", ("block_id",),
        "BLOCK_WITH_TXS | PENDING_BLOCK_WITH_TXS",
        E.BLOCK_NOT_FOUND,
    ),
    _read(
        "starknet_getStateUpdate", ("block_id",),
        "STATE_UPDATE | PENDING_STATE_UPDATE",
        E.BLOCK_NOT_FOUND,
    ),
    _read(
        "starknet_getStorageAt", ("contract_address", "key", "block_id"),
        "FELT",
        E.CONTRACT_NOT_FOUND, E.BLOCK_NOT_FOUND,
    ),
    _read(
        "starknet_getTransactionStatus", ("transaction_hash",),
        "{finality_status: TXN_STATUS, execution_status: TXN_EXECUTION_STATUS}",
        E.TXN_HASH_NOT_FOUND,
    ),
    _read(
        "starknet_getTransactionByHash", ("transaction_hash",),
        "TXN_WITH_HASH",
        E.TXN_HASH_NOT_FOUND,
    ),
    _read(
        "starknet_getTransactionByBlockIdAndIndex", ("block_id", "index"),
        "TXN_WITH_HASH",
        E.BLOCK_NOT_FOUND, E.INVALID_TXN_INDEX,
    ),
    _read(
        "starknet_getTransactionReceipt", ("transaction_hash",),
        "TXN_RECEIPT | PENDING_TXN_RECEIPT",
        E.TXN_HASH_NOT_FOUND,
    ),
    _read(
        "starknet_getClass", ("block_id", "class_hash"),
        "DEPRECATED_CONTRACT_CLASS | CONTRACT_CLASS",
        E.BLOCK_NOT_FOUND, E.CLASS_HASH_NOT_FOUND,
    ),
    _read(
        "starknet_getClassHashAt", ("block_id", "contract_address"),
        "FELT",
        E.BLOCK_NOT_FOUND, E.CONTRACT_NOT_FOUND,
    ),
    _read(
        "starknet_getClassAt", ("block_id", "contract_address"),
        "DEPRECATED_CONTRACT_CLASS | CONTRACT_CLASS",
        E.BLOCK_NOT_FOUND, E.CONTRACT_NOT_FOUND,
    ),
    _read(
        "starknet_getBlockTransactionCount", ("block_id",),
        "integer",
        E.BLOCK_NOT_FOUND,
    ),
    _read("starknet_call", ("request", "block_id"), "FELT[]", *_CALL_ERRORS),
    _read("starknet_estimateFee", ("request", "block_id"), "FEE_ESTIMATE[]", *_CALL_ERRORS),
    _read("starknet_estimateMessageFee", ("message", "block_id"), "FEE_ESTIMATE", *_CALL_ERRORS),
    _read("starknet_blockNumber", (), "BLOCK_NUMBER", E.NO_BLOCKS),
    _read(
        "starknet_blockHashAndNumber", (),
        "{block_hash: BLOCK_HASH, block_number: BLOCK_NUMBER}",
        E.NO_BLOCKS,
    ),
    _read("starknet_chainId", (), "CHAIN_ID"),
    _read("starknet_syncing", (), "false | SYNC_STATUS"),
    _read(
        "starknet_getEvents", ("filter",),
        "EVENTS_CHUNK",
        E.PAGE_SIZE_TOO_BIG, E.INVALID_CONTINUATION_TOKEN,
        E.BLOCK_NOT_FOUND, E.TOO_MANY_KEYS_IN_FILTER,
    ),
    _read(
        "starknet_getNonce", ("block_id", "contract_address"),
        "FELT",
        E.BLOCK_NOT_FOUND, E.CONTRACT_NOT_FOUND,
    ),
    # ── Write ──────────────────────────────────────────────
    _write(
        "starknet_addInvokeTransaction", ("invoke_transaction",),
        "{transaction_hash: TXN_HASH}",
        _SUBMIT_ERRORS,
    ),
    _write(
        "starknet_addDeclareTransaction", ("declare_transaction",),
        "{transaction_hash: TXN_HASH, class_hash: FELT}",
        _SUBMIT_ERRORS | {
            E.CLASS_ALREADY_DECLARED,
            E.COMPILATION_FAILED,
            E.COMPILED_CLASS_HASH_MISMATCH,
            E.CONTRACT_CLASS_SIZE_IS_TOO_LARGE,
            E.UNSUPPORTED_CONTRACT_CLASS_VERSION,
        },
    ),
    _write(
        "starknet_addDeployAccountTransaction", ("deploy_account_transaction",),
        "{transaction_hash: TXN_HASH, contract_address: FELT}",
        _SUBMIT_ERRORS | {E.CLASS_HASH_NOT_FOUND},
    ),
    # ── Trace ──────────────────────────────────────────────
    _trace(
        "starknet_traceTransaction", ("transaction_hash",),
        "TRANSACTION_TRACE",
        E.INVALID_TXN_HASH, E.NO_TRACE_AVAILABLE,
    ),
    _trace(
        "starknet_traceBlockTransactions", ("block_id",),
        "{transaction_hash: FELT, trace_root: TRANSACTION_TRACE}",
        E.BLOCK_NOT_FOUND,
    ),
    _trace(
        "starknet_simulateTransactions", ("block_id", "transactions", "simulation_flags"),
        "{transaction_trace: TRANSACTION_TRACE, fee_estimation: FEE_ESTIMATE}[]",
        *_CALL_ERRORS,
    ),
)

CATALOG: Mapping[str, MethodSpec] = MappingProxyType({m.name: m for m in _METHODS})


def get_method(name: str) -> MethodSpec:
    try:
        return CATALOG[name]
    except KeyError:
        raise UnknownMethodError(name) from None


def methods_in(group: MethodGroup) -> list[MethodSpec]:
    return [m for m in _METHODS if m.group is group]


def build_params(spec: MethodSpec, params: Mapping[str, Any] | Sequence[Any] | None) -> dict[str, Any]:
    """Validate params against the method's shape and return them by name.

    Accepts named params (a mapping) or positional params (a sequence in
    catalog order). Missing, unknown or surplus params are rejected.
    """
    if params is None:
        params = {}

    if isinstance(params, Mapping):
        given = set(params)
        missing = [p for p in spec.params if p not in given]
        unknown = sorted(given - set(spec.params))
        if missing or unknown:
            raise InvalidParamsError(
                f"{spec.name}: missing {missing or '[]'}, unexpected {unknown or '[]'}"
            )
        return {p: params[p] for p in spec.params}

    if isinstance(params, (str, bytes)):
        raise InvalidParamsError(f"{spec.name}: params must be a mapping or a sequence")

    values = list(params)
    if len(values) != len(spec.params):
        raise InvalidParamsError(
            f"{spec.name}: expected {len(spec.params)} params, got {len(values)}"
        )
    return dict(zip(spec.params, values))


def classify_error(
    spec: MethodSpec,
    code: Any,
    message: str = "",
    data: Any = None,
) -> ProtocolError | UnexpectedProtocolError:
    """Map a node error onto the method's declared error set.

    Codes the method does not declare are never coerced into a known kind.
    """
    if isinstance(code, int) and not isinstance(code, bool) and spec.declares(code):
        return ProtocolError(spec.name, RpcErrorKind(code), message, data)
    log.warning("%s answered with undeclared error code %r: %s", spec.name, code, message)
    return UnexpectedProtocolError(spec.name, code, message, data)
