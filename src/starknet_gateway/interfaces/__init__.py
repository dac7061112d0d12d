"""Protocol interfaces for starknet_gateway components."""

from starknet_gateway.interfaces.status import StatusSource
from starknet_gateway.interfaces.transport import Transport

__all__ = ["StatusSource", "Transport"]
