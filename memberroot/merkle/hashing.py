"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
MemberRoot, a product of Garudex Labs

Domain-separated Keccak-256 hashing for the membership tree.

Leaves and internal nodes are hashed with distinct one-byte prefixes so that
a hashed leaf can never be mistaken for an internal node:

- leaf: keccak256(0x00 || identifier)
- node: keccak256(0x01 || left || right)

The external verifier recomputes roots with exactly these rules.
"""

from eth_utils import keccak

LEAF_PREFIX = b"\x00"
NODE_PREFIX = b"\x01"

HASH_LENGTH = 32


def hash_leaf(identifier: bytes) -> bytes:
    """
    Hash a raw identifier into a leaf.

    Args:
        identifier: Raw identifier bytes

    Returns:
        32-byte leaf hash
    """
    return keccak(LEAF_PREFIX + identifier)


def hash_node(left: bytes, right: bytes) -> bytes:
    """
    Hash a pair of child nodes into their parent.

    Args:
        left: Left child hash
        right: Right child hash

    Returns:
        32-byte parent hash
    """
    return keccak(NODE_PREFIX + left + right)
