"""Program compression: canonical JSON -> gzip -> base64.

The gateway expects ``contract_definition.program`` in this form. Output is
deterministic: keys are sorted and the gzip header carries no timestamp, so
the same program always yields the same string.
"""

from __future__ import annotations

import base64
import binascii
import gzip
import json
import math
import zlib
from typing import Any

from starknet_gateway.encoding.numbers import FIELD_PRIME
from starknet_gateway.errors import SerializationError


def _check_node(node: Any, path: str, ancestors: set[int]) -> None:
    """Walk the program tree rejecting cycles and out-of-range numbers."""
    if isinstance(node, bool) or node is None or isinstance(node, str):
        return
    if isinstance(node, int):
        if abs(node) >= FIELD_PRIME:
            raise SerializationError(f"integer at {path} is outside the representable range")
        return
    if isinstance(node, float):
        if not math.isfinite(node):
            raise SerializationError(f"non-finite number at {path}")
        return
    if isinstance(node, (dict, list, tuple)):
        marker = id(node)
        if marker in ancestors:
            raise SerializationError(f"circular reference at {path}")
        ancestors.add(marker)
        try:
            if isinstance(node, dict):
                for key, child in node.items():
                    if not isinstance(key, str):
                        raise SerializationError(f"non-string key {key!r} at {path}")
                    _check_node(child, f"{path}.{key}", ancestors)
            else:
                for i, child in enumerate(node):
                    _check_node(child, f"{path}[{i}]", ancestors)
        finally:
            ancestors.discard(marker)
        return
    raise SerializationError(f"unsupported value of type {type(node).__name__} at {path}")


def canonical_json(program: Any) -> str:
    _check_node(program, "$", set())
    return json.dumps(program, sort_keys=True, separators=(",", ":"), allow_nan=False)


def compress_program(program: dict | str) -> str:
    """Compress a program AST (or its JSON text) to gzip+base64 text."""
    text = program if isinstance(program, str) else canonical_json(program)
    compressed = gzip.compress(text.encode("utf-8"), mtime=0)
    return base64.b64encode(compressed).decode("ascii")


def decompress_program(data: str) -> dict:
    """Inverse of compress_program."""
    try:
        raw = gzip.decompress(base64.b64decode(data, validate=True))
        return json.loads(raw.decode("utf-8"))
    except (binascii.Error, OSError, EOFError, zlib.error, UnicodeDecodeError, ValueError) as exc:
        raise SerializationError(f"not a compressed program: {exc}") from exc
