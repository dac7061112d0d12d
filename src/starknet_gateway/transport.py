"""httpx-backed Transport used by default by both clients."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from starknet_gateway.errors import TransportError

log = logging.getLogger(__name__)


def _decode_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


class HttpxTransport:
    """Sends requests through one shared httpx.AsyncClient.

    The client is created on first use and released by close() (or by
    leaving ``async with``). An existing AsyncClient can be injected, for
    instance one built on httpx.MockTransport in tests; it is then owned by
    the caller and left open.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout, connect=10),
                follow_redirects=True,
            )
        return self._client

    async def get(self, url: str, params: Mapping[str, str] | None = None) -> Any:
        return await self._send("GET", url, params=params)

    async def post(
        self,
        url: str,
        content: str,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        return await self._send(
            "POST",
            url,
            params=params,
            content=content,
            headers={"Content-Type": "application/json", **(headers or {})},
        )

    async def _send(self, method: str, url: str, **kwargs: Any) -> Any:
        client = self._get_client()
        log.debug("%s %s", method, url)
        try:
            resp = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            log.error("%s %s timed out: %s", method, url, exc)
            raise TransportError(f"{method} {url} timed out") from exc
        except httpx.HTTPError as exc:
            log.error("%s %s failed: %s", method, url, exc)
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        if resp.is_error:
            body = _decode_body(resp)
            log.warning("%s %s returned HTTP %d", method, url, resp.status_code)
            raise TransportError(
                f"{method} {url} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                body=body,
            )
        return _decode_body(resp)

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
