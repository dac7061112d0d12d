"""Transport protocol - the raw HTTP collaborator behind both clients."""

from __future__ import annotations

from typing import Any, Mapping, Protocol


class Transport(Protocol):
    """Sends one HTTP request and returns the decoded JSON body.

    Implementations raise TransportError for connection failures, timeouts
    and non-2xx responses. Retries, if any, live here and not in the clients.
    """

    async def get(self, url: str, params: Mapping[str, str] | None = None) -> Any:
        """GET ``url`` with a query string."""
        ...

    async def post(
        self,
        url: str,
        content: str,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """POST an already serialized JSON body."""
        ...

    async def close(self) -> None:
        """Release pooled connections."""
        ...
