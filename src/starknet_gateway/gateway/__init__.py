"""Legacy feeder gateway / gateway HTTP surface."""

from starknet_gateway.gateway.client import GatewayClient

__all__ = ["GatewayClient"]
