"""Transaction status values and confirmation outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TransactionStatus(str, Enum):
    """``tx_status`` as reported by the feeder gateway."""

    NOT_RECEIVED = "NOT_RECEIVED"
    RECEIVED = "RECEIVED"
    PENDING = "PENDING"
    ACCEPTED_ONCHAIN = "ACCEPTED_ONCHAIN"
    REJECTED = "REJECTED"
    # Reported by later gateway releases
    ACCEPTED_ON_L2 = "ACCEPTED_ON_L2"
    ACCEPTED_ON_L1 = "ACCEPTED_ON_L1"


class FinalityStatus(str, Enum):
    """JSON-RPC ``finality_status``."""

    RECEIVED = "RECEIVED"
    REJECTED = "REJECTED"
    ACCEPTED_ON_L2 = "ACCEPTED_ON_L2"
    ACCEPTED_ON_L1 = "ACCEPTED_ON_L1"


class ExecutionStatus(str, Enum):
    """JSON-RPC ``execution_status``."""

    SUCCEEDED = "SUCCEEDED"
    REVERTED = "REVERTED"


class PollState(str, Enum):
    """States of the confirmation poller."""

    POLLING = "polling"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self is not PollState.POLLING


@dataclass(frozen=True)
class StatusReport:
    """One observation of a transaction's status."""

    status: TransactionStatus
    reason: str | None = None  # set when the node explains a rejection
    block_hash: str | None = None


@dataclass(frozen=True)
class ConfirmationResult:
    """Outcome of a successful wait_for_tx."""

    tx_hash: str
    state: PollState
    status: TransactionStatus
    attempts: int
    reason: str | None = None  # node-supplied note on the final status, if any
