"""Confirmation poller - waits for a submitted transaction to settle.

The poller is an explicit state machine::

    POLLING --ACCEPTED_ONCHAIN / PENDING / ACCEPTED_ON_L2 / ACCEPTED_ON_L1--> CONFIRMED
    POLLING --REJECTED-----------------------------------------------------> REJECTED
    POLLING --NOT_RECEIVED-------------------------------------------------> FAILED
    POLLING --RECEIVED-----------------------------------------------------> POLLING

Every tick waits first and queries second. There is no internal deadline:
wrap the call in ``asyncio.wait_for`` or cancel the task to bound it, or pass
a stop event to end the loop between ticks.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from starknet_gateway.errors import (
    PollingCancelledError,
    TransactionNotReceivedError,
    TransactionRejectedError,
    UnexpectedProtocolError,
)
from starknet_gateway.interfaces.status import StatusSource
from starknet_gateway.models.status import (
    ConfirmationResult,
    PollState,
    StatusReport,
    TransactionStatus,
)

log = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 2.0  # seconds

_CONFIRMED = {
    TransactionStatus.ACCEPTED_ONCHAIN,
    TransactionStatus.ACCEPTED_ON_L2,
    TransactionStatus.ACCEPTED_ON_L1,
}


def next_state(status: TransactionStatus, accept_pending: bool = True) -> PollState:
    """Transition function of the poller."""
    if status in _CONFIRMED:
        return PollState.CONFIRMED
    if status is TransactionStatus.PENDING:
        return PollState.CONFIRMED if accept_pending else PollState.POLLING
    if status is TransactionStatus.REJECTED:
        return PollState.REJECTED
    if status is TransactionStatus.NOT_RECEIVED:
        return PollState.FAILED
    if status is TransactionStatus.RECEIVED:
        return PollState.POLLING
    raise UnexpectedProtocolError("get_transaction_status", str(status), "unknown status")


class ConfirmationPoller:
    """Polls a StatusSource at a fixed (or capped-backoff) interval.

    ``accept_pending=False`` keeps polling through PENDING until the
    transaction is accepted on chain. ``backoff_factor`` > 1 grows the
    interval after each non-terminal tick, up to ``max_interval``.
    """

    def __init__(
        self,
        status_source: StatusSource,
        interval: float = DEFAULT_POLL_INTERVAL,
        accept_pending: bool = True,
        backoff_factor: float = 1.0,
        max_interval: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if interval < 0:
            raise ValueError("interval must be >= 0")
        if backoff_factor < 1.0:
            raise ValueError("backoff_factor must be >= 1.0")
        self._status_source = status_source
        self._interval = interval
        self._accept_pending = accept_pending
        self._backoff_factor = backoff_factor
        self._max_interval = max_interval
        self._sleep = sleep

    def _grow(self, delay: float) -> float:
        delay *= self._backoff_factor
        if self._max_interval is not None:
            delay = min(delay, self._max_interval)
        return delay

    async def _wait(self, delay: float, stop: asyncio.Event | None) -> bool:
        """Wait ``delay`` seconds. Returns True if the stop event fired."""
        if stop is None:
            await self._sleep(delay)
            return False
        if stop.is_set():
            return True
        try:
            await asyncio.wait_for(stop.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    async def run(self, tx_hash: str, stop: asyncio.Event | None = None) -> ConfirmationResult:
        """Poll until a terminal state.

        Returns a ConfirmationResult on CONFIRMED. Raises
        TransactionRejectedError on REJECTED, TransactionNotReceivedError on
        FAILED and PollingCancelledError if ``stop`` is set first.
        """
        state = PollState.POLLING
        attempts = 0
        delay = self._interval
        report: StatusReport | None = None

        log.info("Waiting for tx %s (interval %.2fs)", tx_hash, self._interval)

        while state is PollState.POLLING:
            if await self._wait(delay, stop):
                log.info("Polling for tx %s stopped after %d queries", tx_hash, attempts)
                raise PollingCancelledError(tx_hash, attempts)

            report = await self._status_source(tx_hash)
            attempts += 1
            state = next_state(report.status, self._accept_pending)
            log.debug("tx %s: %s -> %s (query %d)", tx_hash, report.status.value, state.value, attempts)

            if state is PollState.POLLING:
                delay = self._grow(delay)

        assert report is not None

        if state is PollState.REJECTED:
            reason = report.reason or TransactionStatus.REJECTED.value
            log.warning("tx %s rejected: %s", tx_hash, reason)
            raise TransactionRejectedError(tx_hash, reason)

        if state is PollState.FAILED:
            log.warning("tx %s was never received by the node", tx_hash)
            raise TransactionNotReceivedError(tx_hash, TransactionStatus.NOT_RECEIVED.value)

        log.info("tx %s confirmed (%s) after %d queries", tx_hash, report.status.value, attempts)
        return ConfirmationResult(
            tx_hash=tx_hash,
            state=state,
            status=report.status,
            attempts=attempts,
            reason=report.reason,
        )
