"""StatusSource protocol - what the confirmation poller queries each tick."""

from __future__ import annotations

from typing import Protocol

from starknet_gateway.models.status import StatusReport


class StatusSource(Protocol):
    """Anything that can report the current status of a transaction."""

    async def __call__(self, tx_hash: str) -> StatusReport:
        """Query the node once and return what it reports."""
        ...
