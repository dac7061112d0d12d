"""starknet_gateway - async client for StarkNet gateway and JSON-RPC nodes."""

from starknet_gateway.config import configure_logging, load_config
from starknet_gateway.encoding.numbers import FIELD_PRIME, to_felt, to_hex, to_int
from starknet_gateway.encoding.program import compress_program, decompress_program
from starknet_gateway.encoding.transactions import (
    encode_transaction,
    format_signature,
    random_address,
    serialize_payload,
)
from starknet_gateway.errors import (
    GatewayError,
    GatewayResponseError,
    InvalidNumericLiteral,
    PollingCancelledError,
    ProtocolError,
    SerializationError,
    TransactionFailedError,
    TransactionNotReceivedError,
    TransactionRejectedError,
    TransportError,
    UnexpectedProtocolError,
    UnknownMethodError,
    UnsupportedTransactionKind,
)
from starknet_gateway.gateway.client import GatewayClient
from starknet_gateway.models import (
    CompiledContract,
    ConfirmationResult,
    Declare,
    Deploy,
    DeployAccount,
    GatewayConfig,
    InvokeFunction,
    PollState,
    Transaction,
    TransactionStatus,
)
from starknet_gateway.poller import ConfirmationPoller
from starknet_gateway.rpc.catalog import CATALOG, MethodGroup, RpcErrorKind
from starknet_gateway.rpc.client import JsonRpcClient
from starknet_gateway.transport import HttpxTransport

__version__ = "0.1.0"

__all__ = [
    "configure_logging", "load_config",
    "FIELD_PRIME", "to_felt", "to_hex", "to_int",
    "compress_program", "decompress_program",
    "encode_transaction", "format_signature", "random_address", "serialize_payload",
    "GatewayError", "GatewayResponseError", "InvalidNumericLiteral",
    "PollingCancelledError", "ProtocolError", "SerializationError",
    "TransactionFailedError", "TransactionNotReceivedError",
    "TransactionRejectedError", "TransportError", "UnexpectedProtocolError",
    "UnknownMethodError", "UnsupportedTransactionKind",
    "GatewayClient", "JsonRpcClient", "HttpxTransport", "ConfirmationPoller",
    "CompiledContract", "ConfirmationResult", "Declare", "Deploy", "DeployAccount",
    "GatewayConfig", "InvokeFunction", "PollState", "Transaction", "TransactionStatus",
    "CATALOG", "MethodGroup", "RpcErrorKind",
]
