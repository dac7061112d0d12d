"""Synthetic transactions and contracts for testing."""

from __future__ import annotations

from starknet_gateway.models.transactions import (
    CompiledContract,
    Declare,
    Deploy,
    DeployAccount,
    InvokeFunction,
)

# Felts larger than 2**53 to catch any float round trip
BIG_FELT = 2**250 + 12345
TX_HASH = "0x5d6c1ae6e7e7b9f8de7f9fa67a2bd60a6f1d5fd0a7f4b6e1ba0e0c6cf3f0c9f"


def make_program(n_instructions: int = 4) -> dict:
    return {
        "prime": "0x800000000000011000000000000000000000000000000000000000000000001",
        "builtins": ["pedersen", "range_check"],
        "data": [hex(0x40780017FFF7FFF + i) for i in range(n_instructions)],
        "identifiers": {
            "__main__.main": {"type": "function", "pc": 0, "decorators": []},
        },
        "hints": {},
        "main_scope": "__main__",
        "reference_manager": {"references": []},
        "attributes": [],
        "debug_info": None,
    }


def make_contract(n_instructions: int = 4) -> CompiledContract:
    return CompiledContract(
        program=make_program(n_instructions),
        abi=[{"type": "function", "name": "increase_balance", "inputs": [], "outputs": []}],
        entry_points_by_type={
            "EXTERNAL": [{"offset": "0x0", "selector": "0x362398bec32bc0ebb411203221a35a0301193a96f317ebe5e40be9f60d15320"}],
            "L1_HANDLER": [],
            "CONSTRUCTOR": [],
        },
    )


def make_invoke(
    contract_address: int | str = 0x1234,
    entry_point_selector: int | str = "0x362398bec32bc0ebb411203221a35a0301193a96f317ebe5e40be9f60d15320",
    calldata=(1, BIG_FELT),
    signature=(BIG_FELT, 7),
    max_fee: int = 10**15,
    nonce: int | None = None,
) -> InvokeFunction:
    return InvokeFunction(
        contract_address=contract_address,
        entry_point_selector=entry_point_selector,
        calldata=calldata,
        signature=signature,
        max_fee=max_fee,
        nonce=nonce,
    )


def make_deploy(salt: int | str | None = 42, constructor_calldata=()) -> Deploy:
    return Deploy(
        contract_definition=make_contract(),
        constructor_calldata=constructor_calldata,
        contract_address_salt=salt,
    )


def make_declare() -> Declare:
    return Declare(contract_class=make_contract(), sender_address=1, signature=None)


def make_deploy_account(salt: int | str | None = 7) -> DeployAccount:
    return DeployAccount(
        class_hash=0xABC,
        constructor_calldata=(BIG_FELT,),
        contract_address_salt=salt,
        signature=(1, 2),
        max_fee=1000,
        nonce=0,
    )
