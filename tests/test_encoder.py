"""Transaction encoder: per-kind field rules and numeric safety."""

from __future__ import annotations

import json
from dataclasses import dataclass

import pytest

from starknet_gateway.encoding.numbers import FIELD_PRIME, to_hex, to_int
from starknet_gateway.encoding.program import compress_program
from starknet_gateway.encoding.transactions import (
    MAX_SAFE_INTEGER,
    encode_contract,
    encode_transaction,
    format_signature,
    random_address,
    serialize_payload,
)
from starknet_gateway.errors import SerializationError, UnsupportedTransactionKind
from starknet_gateway.models.transactions import TRANSACTION_KINDS, CompiledContract, InvokeFunction

from tests.factories import (
    BIG_FELT,
    make_contract,
    make_declare,
    make_deploy,
    make_deploy_account,
    make_invoke,
)


def _walk(node):
    yield node
    if isinstance(node, dict):
        for v in node.values():
            yield from _walk(v)
    elif isinstance(node, list):
        for v in node:
            yield from _walk(v)


# ── Invoke ────────────────────────────────────────────


def test_invoke_payload_fields():
    payload = encode_transaction(make_invoke(nonce=3))
    assert payload == {
        "type": "INVOKE_FUNCTION",
        "version": "0x0",
        "contract_address": "0x1234",
        "entry_point_selector": "0x362398bec32bc0ebb411203221a35a0301193a96f317ebe5e40be9f60d15320",
        "calldata": ["1", str(BIG_FELT)],
        "signature": [to_hex(BIG_FELT), "0x7"],
        "max_fee": to_hex(10**15),
        "nonce": "0x3",
    }


def test_invoke_never_carries_deploy_fields():
    payload = encode_transaction(make_invoke())
    assert "contract_address_salt" not in payload
    assert "constructor_calldata" not in payload
    assert "contract_definition" not in payload


def test_invoke_empty_signature_is_empty_list():
    payload = encode_transaction(make_invoke(signature=None))
    assert payload["signature"] == []


def test_invoke_without_nonce_omits_field():
    assert "nonce" not in encode_transaction(make_invoke(nonce=None))


def test_invoke_cannot_be_built_with_deploy_fields():
    with pytest.raises(TypeError):
        InvokeFunction(contract_address=1, entry_point_selector=2, contract_address_salt=3)


# ── Deploy ────────────────────────────────────────────


def test_deploy_payload_fields():
    payload = encode_transaction(make_deploy(salt=42, constructor_calldata=(5, BIG_FELT)))
    assert payload["type"] == "DEPLOY"
    assert payload["contract_address_salt"] == "0x2a"
    assert payload["constructor_calldata"] == ["5", str(BIG_FELT)]
    assert payload["contract_definition"]["program"] == compress_program(make_contract().program)
    assert payload["contract_definition"]["abi"] == make_contract().abi


def test_deploy_never_carries_invoke_fields():
    payload = encode_transaction(make_deploy())
    assert "signature" not in payload
    assert "entry_point_selector" not in payload
    assert "calldata" not in payload


def test_deploy_without_salt_gets_random_felt():
    first = encode_transaction(make_deploy(salt=None))["contract_address_salt"]
    second = encode_transaction(make_deploy(salt=None))["contract_address_salt"]
    assert 0 <= to_int(first) < FIELD_PRIME
    assert first != second


def test_deploy_salt_accepts_hex_and_decimal():
    assert encode_transaction(make_deploy(salt="0x00FF"))["contract_address_salt"] == "0xff"
    assert encode_transaction(make_deploy(salt="255"))["contract_address_salt"] == "0xff"


def test_deploy_with_precompressed_program_passes_through():
    compressed = compress_program(make_contract().program)
    contract = CompiledContract(program=compressed, abi=[])
    assert encode_contract(contract)["program"] == compressed


# ── Declare / DeployAccount ───────────────────────────


def test_declare_payload_fields():
    payload = encode_transaction(make_declare())
    assert payload["type"] == "DECLARE"
    assert payload["sender_address"] == "0x1"
    assert payload["signature"] == []
    assert payload["contract_class"]["program"] == compress_program(make_contract().program)
    assert "contract_address_salt" not in payload


def test_deploy_account_payload_fields():
    payload = encode_transaction(make_deploy_account())
    assert payload["type"] == "DEPLOY_ACCOUNT"
    assert payload["version"] == "0x1"
    assert payload["class_hash"] == "0xabc"
    assert payload["contract_address_salt"] == "0x7"
    assert payload["constructor_calldata"] == [str(BIG_FELT)]
    assert payload["signature"] == ["0x1", "0x2"]
    assert "contract_definition" not in payload


# ── Numeric safety ────────────────────────────────────


@pytest.mark.parametrize(
    "tx", [make_invoke(), make_deploy(), make_declare(), make_deploy_account()],
    ids=["invoke", "deploy", "declare", "deploy_account"],
)
def test_payload_has_no_native_ints(tx):
    payload = encode_transaction(tx)
    assert not any(isinstance(v, int) and not isinstance(v, bool) for v in _walk(payload))
    assert json.loads(json.dumps(payload)) == payload


def test_unsupported_kind():
    @dataclass(frozen=True)
    class Mint:
        type = "MINT"

    with pytest.raises(UnsupportedTransactionKind, match="MINT"):
        encode_transaction(Mint())


def test_format_signature():
    assert format_signature(None) == []
    assert format_signature(["10", 0x20]) == ["0xa", "0x20"]


def test_random_address_in_field():
    for _ in range(20):
        assert to_int(random_address()) < FIELD_PRIME


# ── serialize_payload ────────────────────────────────


def test_serialize_payload_stringifies_big_ints():
    body = json.loads(serialize_payload({"a": BIG_FELT, "b": [MAX_SAFE_INTEGER + 1], "c": 7}))
    assert body == {"a": str(BIG_FELT), "b": [str(MAX_SAFE_INTEGER + 1)], "c": 7}


def test_serialize_payload_keeps_bools_and_small_ints():
    body = json.loads(serialize_payload({"flag": True, "block_number": 5, "id": MAX_SAFE_INTEGER}))
    assert body == {"flag": True, "block_number": 5, "id": MAX_SAFE_INTEGER}


def test_serialize_payload_rejects_unserializable():
    with pytest.raises(SerializationError):
        serialize_payload({"x": object()})
    loop: list = []
    loop.append(loop)
    with pytest.raises(SerializationError, match="circular"):
        serialize_payload(loop)


def test_transaction_kinds_by_wire_tag():
    assert set(TRANSACTION_KINDS) == {"INVOKE_FUNCTION", "DECLARE", "DEPLOY", "DEPLOY_ACCOUNT"}
    for tag, cls in TRANSACTION_KINDS.items():
        assert cls.type == tag


def test_json_text_program_is_compressed():
    text = json.dumps(make_contract().program)
    definition = encode_contract(CompiledContract(program=text, abi=[]))
    assert definition["program"] == compress_program(text)
    assert definition["program"] != text
