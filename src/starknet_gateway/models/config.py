"""Configuration models for the gateway client."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_NETWORK = "alpha"

# The one documented default. Any other network must be configured explicitly.
NETWORK_BASE_URLS = {
    "alpha": "https://alpha3.starknet.io",
}


@dataclass(frozen=True)
class GatewayConfig:
    """Endpoints and polling policy, fixed for the lifetime of a client."""

    # Network
    network: str = DEFAULT_NETWORK
    base_url: str = NETWORK_BASE_URLS[DEFAULT_NETWORK]
    feeder_gateway_url: str = f"{NETWORK_BASE_URLS[DEFAULT_NETWORK]}/feeder_gateway"  # reads
    gateway_url: str = f"{NETWORK_BASE_URLS[DEFAULT_NETWORK]}/gateway"  # writes
    rpc_url: str = ""  # JSON-RPC node, optional

    # Polling
    poll_interval: float = 2.0  # seconds
    accept_pending: bool = True  # PENDING counts as confirmed
    backoff_factor: float = 1.0  # 1.0 keeps the interval fixed
    max_interval: float | None = None  # cap when backoff_factor > 1

    # Transport
    request_timeout: float = 30.0  # seconds

    log_level: str = "info"

    @classmethod
    def for_network(cls, network: str = DEFAULT_NETWORK, **overrides) -> GatewayConfig:
        """Derive feeder/gateway URLs from a network's base URL."""
        try:
            base_url = NETWORK_BASE_URLS[network]
        except KeyError:
            raise ValueError(f"unknown network {network!r}") from None
        return cls.from_base_url(base_url, network=network, **overrides)

    @classmethod
    def from_base_url(cls, base_url: str, **overrides) -> GatewayConfig:
        base_url = base_url.rstrip("/")
        values = dict(
            base_url=base_url,
            feeder_gateway_url=f"{base_url}/feeder_gateway",
            gateway_url=f"{base_url}/gateway",
        )
        values.update(overrides)
        return cls(**values)
