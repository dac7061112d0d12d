"""JSON-RPC surface: the node method catalog and the client built on it."""

from starknet_gateway.rpc.catalog import (
    CATALOG,
    MethodGroup,
    MethodSpec,
    RpcErrorKind,
    build_params,
    classify_error,
    get_method,
    methods_in,
)
from starknet_gateway.rpc.client import JsonRpcClient, block_id, status_from_rpc

__all__ = [
    "CATALOG", "MethodGroup", "MethodSpec", "RpcErrorKind",
    "build_params", "classify_error", "get_method", "methods_in",
    "JsonRpcClient", "block_id", "status_from_rpc",
]
