"""Transaction kinds as a tagged union of frozen dataclasses.

Each variant carries only its own fields, so a deploy salt can never ride
along on an invoke and vice versa. ``type`` is the wire tag.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Sequence, Union

from starknet_gateway.encoding.numbers import Numeric


@dataclass(frozen=True)
class CompiledContract:
    """A compiled contract as produced by the Cairo compiler.

    ``program`` is either the structured program or its compressed text.
    """

    program: dict | str
    abi: list = field(default_factory=list)
    entry_points_by_type: dict = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: str | dict | CompiledContract) -> CompiledContract:
        """Accept a JSON document, a parsed dict or an instance."""
        if isinstance(data, CompiledContract):
            return data
        raw = json.loads(data) if isinstance(data, str) else data
        return cls(
            program=raw["program"],
            abi=list(raw.get("abi", [])),
            entry_points_by_type=dict(raw.get("entry_points_by_type", {})),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "program": self.program,
            "abi": self.abi,
            "entry_points_by_type": self.entry_points_by_type,
        }


@dataclass(frozen=True)
class InvokeFunction:
    """Call an entry point on a deployed contract."""

    type: ClassVar[str] = "INVOKE_FUNCTION"

    contract_address: Numeric
    entry_point_selector: Numeric
    calldata: Sequence[Numeric] = ()
    signature: Sequence[Numeric] | None = None
    max_fee: Numeric = 0
    version: Numeric = 0
    nonce: Numeric | None = None


@dataclass(frozen=True)
class Declare:
    """Register a contract class without deploying an instance."""

    type: ClassVar[str] = "DECLARE"

    contract_class: CompiledContract
    sender_address: Numeric = 1
    signature: Sequence[Numeric] | None = None
    max_fee: Numeric = 0
    version: Numeric = 0
    nonce: Numeric = 0


@dataclass(frozen=True)
class Deploy:
    """Deploy a contract from its full definition."""

    type: ClassVar[str] = "DEPLOY"

    contract_definition: CompiledContract
    constructor_calldata: Sequence[Numeric] = ()
    contract_address_salt: Numeric | None = None
    version: Numeric = 0


@dataclass(frozen=True)
class DeployAccount:
    """Deploy an account contract from an already declared class."""

    type: ClassVar[str] = "DEPLOY_ACCOUNT"

    class_hash: Numeric
    constructor_calldata: Sequence[Numeric] = ()
    contract_address_salt: Numeric | None = None
    signature: Sequence[Numeric] | None = None
    max_fee: Numeric = 0
    version: Numeric = 1
    nonce: Numeric = 0


Transaction = Union[InvokeFunction, Declare, Deploy, DeployAccount]

TRANSACTION_KINDS: dict[str, type] = {
    InvokeFunction.type: InvokeFunction,
    Declare.type: Declare,
    Deploy.type: Deploy,
    DeployAccount.type: DeployAccount,
}
