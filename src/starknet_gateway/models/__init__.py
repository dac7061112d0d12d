"""Data models for starknet_gateway."""

from starknet_gateway.models.config import DEFAULT_NETWORK, NETWORK_BASE_URLS, GatewayConfig
from starknet_gateway.models.status import (
    ConfirmationResult,
    ExecutionStatus,
    FinalityStatus,
    PollState,
    StatusReport,
    TransactionStatus,
)
from starknet_gateway.models.transactions import (
    TRANSACTION_KINDS,
    CompiledContract,
    Declare,
    Deploy,
    DeployAccount,
    InvokeFunction,
    Transaction,
)

__all__ = [
    "DEFAULT_NETWORK", "NETWORK_BASE_URLS", "GatewayConfig",
    "ConfirmationResult", "ExecutionStatus", "FinalityStatus", "PollState",
    "StatusReport", "TransactionStatus",
    "TRANSACTION_KINDS", "CompiledContract", "Declare", "Deploy",
    "DeployAccount", "InvokeFunction", "Transaction",
]
