"""Exception hierarchy for starknet_gateway.

Every error raised by the package derives from GatewayError so callers can
catch the whole family at once, or single out one failure mode.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from starknet_gateway.rpc.catalog import RpcErrorKind


class GatewayError(Exception):
    """Base class for all starknet_gateway errors."""


# ── Transport ──────────────────────────────────────────


class TransportError(GatewayError):
    """The HTTP layer failed: connection error, timeout or non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


# ── Client-side encoding faults (never retried) ────────


class EncodingError(GatewayError):
    """A value could not be turned into its wire representation."""


class InvalidNumericLiteral(EncodingError, ValueError):
    """Input cannot be read unambiguously as an unsigned integer."""

    def __init__(self, value: object, detail: str = "") -> None:
        msg = f"invalid numeric literal: {value!r}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
        self.value = value


class SerializationError(EncodingError):
    """A payload or program could not be serialized."""


class UnsupportedTransactionKind(EncodingError):
    """The transaction is not one of the four recognized kinds."""

    def __init__(self, kind: object) -> None:
        super().__init__(f"unsupported transaction kind: {kind!r}")
        self.kind = kind


# ── Node contract catalog ──────────────────────────────


class CatalogError(GatewayError):
    """A request does not match the node method catalog."""


class UnknownMethodError(CatalogError):
    """The method name is not registered in the catalog."""

    def __init__(self, method: str) -> None:
        super().__init__(f"unknown node method: {method}")
        self.method = method


class InvalidParamsError(CatalogError):
    """Parameters do not match the method's declared shape."""


# ── Node responses ─────────────────────────────────────


class ProtocolError(GatewayError):
    """The node returned an error declared for the method."""

    def __init__(
        self,
        method: str,
        kind: RpcErrorKind,
        message: str = "",
        data: Any = None,
    ) -> None:
        super().__init__(f"{method} failed with {kind.name} ({kind.value}): {message}")
        self.method = method
        self.kind = kind
        self.code = kind.value
        self.message = message
        self.data = data


class UnexpectedProtocolError(GatewayError):
    """The node answered with something outside the declared contract.

    Raised for error codes a method does not declare and for status values
    the client does not know about, so protocol drift is visible to callers.
    """

    def __init__(
        self,
        method: str,
        code: int | str | None,
        message: str = "",
        data: Any = None,
    ) -> None:
        super().__init__(f"{method} returned undeclared error {code}: {message}")
        self.method = method
        self.code = code
        self.message = message
        self.data = data


class GatewayResponseError(GatewayError):
    """The legacy gateway answered with a StarknetErrorCode body."""

    def __init__(self, status_code: int | None, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.status_code = status_code
        self.code = code
        self.message = message


# ── Confirmation ───────────────────────────────────────


class TransactionFailedError(GatewayError):
    """Polling reached a terminal failure for a transaction."""

    def __init__(self, tx_hash: str, reason: str) -> None:
        super().__init__(f"transaction {tx_hash} failed: {reason}")
        self.tx_hash = tx_hash
        self.reason = reason


class TransactionRejectedError(TransactionFailedError):
    """The node rejected (or reverted) the transaction."""


class TransactionNotReceivedError(TransactionFailedError):
    """The node never received the transaction."""


class PollingCancelledError(GatewayError):
    """The stop token was set before a terminal status was observed."""

    def __init__(self, tx_hash: str, attempts: int) -> None:
        super().__init__(f"polling for {tx_hash} cancelled after {attempts} queries")
        self.tx_hash = tx_hash
        self.attempts = attempts
