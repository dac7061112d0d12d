"""Exact-precision conversions between int, decimal text and hex text."""

from __future__ import annotations

import re
from typing import Iterable, Union

from starknet_gateway.errors import InvalidNumericLiteral

# StarkNet prime: 2**251 + 17 * 2**192 + 1
FIELD_PRIME = 2**251 + 17 * 2**192 + 1

Numeric = Union[int, str]

_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")
_DEC_RE = re.compile(r"^[0-9]+$")


def is_hex(value: object) -> bool:
    return isinstance(value, str) and bool(_HEX_RE.match(value.strip()))


def to_int(value: Numeric) -> int:
    """Parse an unsigned integer from an int, decimal string or 0x-hex string.

    Floats and bools are refused outright; nothing passes through a float.
    """
    if isinstance(value, bool):
        raise InvalidNumericLiteral(value, "bool is not a number")
    if isinstance(value, int):
        if value < 0:
            raise InvalidNumericLiteral(value, "negative")
        return value
    if isinstance(value, str):
        text = value.strip()
        if _HEX_RE.match(text):
            return int(text[2:], 16)
        if _DEC_RE.match(text):
            return int(text, 10)
        raise InvalidNumericLiteral(value)
    raise InvalidNumericLiteral(value, f"unsupported type {type(value).__name__}")


def to_felt(value: Numeric) -> int:
    """Like to_int, but also require the value to lie in the field."""
    n = to_int(value)
    if n >= FIELD_PRIME:
        raise InvalidNumericLiteral(value, "outside the felt range")
    return n


def to_hex(value: Numeric) -> str:
    """Canonical external form: lower-case, 0x-prefixed, no zero padding."""
    return hex(to_int(value))


def to_decimal_string(value: Numeric) -> str:
    return str(to_int(value))


def to_hex_list(values: Iterable[Numeric] | None) -> list[str]:
    if values is None:
        return []
    return [to_hex(v) for v in values]


def to_decimal_list(values: Iterable[Numeric] | None) -> list[str]:
    if values is None:
        return []
    return [to_decimal_string(v) for v in values]
