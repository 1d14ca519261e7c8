"""
Identifier handling for the membership tree.

Identifiers are fixed-length byte strings (32-byte public keys in practice).
They are ordered as unsigned big-endian integers, which for equal-length
byte strings is the same as plain ``bytes`` comparison.

Callers may pass identifiers as raw bytes, as ``0x``-prefixed hex strings, or
as base58 strings (the usual text form of a public key).
"""

from typing import Union

import base58
from eth_utils import decode_hex, encode_hex, is_0x_prefixed

from memberroot.exceptions import InvalidIdentifierError

IDENTIFIER_LENGTH = 32

IdentifierLike = Union[bytes, bytearray, memoryview, str]


def placeholder(length: int = IDENTIFIER_LENGTH) -> bytes:
    """The all-zero identifier that stands in for an empty set."""
    return bytes(length)


ZERO_IDENTIFIER = placeholder()


def is_placeholder(identifier: bytes) -> bool:
    return not any(identifier)


def to_identifier(value: IdentifierLike, length: int = IDENTIFIER_LENGTH) -> bytes:
    """
    Coerce a caller-supplied value into raw identifier bytes.

    Args:
        value: Raw bytes, ``0x`` hex string, or base58 string
        length: Required identifier length in bytes

    Returns:
        Identifier as immutable ``bytes``

    Raises:
        InvalidIdentifierError: If the value cannot be decoded or has the
            wrong length
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    elif isinstance(value, str):
        raw = _decode_text(value)
    else:
        raise InvalidIdentifierError(
            f"Unsupported identifier type {type(value).__name__}"
        )

    if len(raw) != length:
        raise InvalidIdentifierError(
            f"Identifier must be {length} bytes, got {len(raw)}"
        )

    return raw


def _decode_text(value: str) -> bytes:
    text = value.strip()
    if is_0x_prefixed(text):
        try:
            return decode_hex(text)
        except (ValueError, TypeError) as e:
            raise InvalidIdentifierError(f"Invalid hex identifier {value!r}: {e}") from e
    try:
        return base58.b58decode(text)
    except ValueError as e:
        raise InvalidIdentifierError(f"Invalid base58 identifier {value!r}: {e}") from e


def to_hex(identifier: bytes) -> str:
    """Hex form with ``0x`` prefix, used in logs and JSON proofs."""
    return encode_hex(identifier)


def to_base58(identifier: bytes) -> str:
    """Base58 form, the usual text representation of a public key."""
    return base58.b58encode(identifier).decode("ascii")
