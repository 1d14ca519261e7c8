"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
MemberRoot, a product of Garudex Labs

Exclusion proof generation.

A non-member is proven absent by the members that surround its sorted
insertion point:

- empty set: the placeholder identifier with an empty proof
- before the first member: the first member
- after the last member: the last member, proven through the duplicated leaf
  slot when the member count is odd
- otherwise: the two adjacent members on either side
"""

from enum import Enum
from typing import List, Tuple

from memberroot.exceptions import LeafAlreadyPresentError
from memberroot.logging_config import get_logger
from memberroot.merkle.identifiers import placeholder, to_hex
from memberroot.merkle.leaves import LeafSet
from memberroot.merkle.proof import ExclusionProof, InclusionProof

logger = get_logger(__name__)


class NeighborRole(Enum):
    """Position of a neighbor relative to the identifier being excluded."""

    EMPTY = "empty"
    FIRST = "first"
    LAST = "last"
    INTERIOR = "interior"


def locate_neighbors(leaf_set: LeafSet, identifier: bytes) -> List[Tuple[bytes, NeighborRole]]:
    """
    Find the members surrounding a non-member.

    Args:
        leaf_set: Current leaf set
        identifier: Raw identifier that is not a member

    Returns:
        One or two (neighbor, role) pairs in ascending order

    Raises:
        LeafAlreadyPresentError: If the identifier is a member
    """
    if identifier in leaf_set:
        raise LeafAlreadyPresentError(
            f"Identifier {to_hex(identifier)} is a member; no exclusion proof exists"
        )

    if leaf_set.is_empty():
        return [(placeholder(leaf_set.identifier_length), NeighborRole.EMPTY)]

    index = leaf_set.insertion_index(identifier)
    if index == 0:
        return [(leaf_set[0], NeighborRole.FIRST)]
    if index >= len(leaf_set):
        return [(leaf_set[len(leaf_set) - 1], NeighborRole.LAST)]
    return [
        (leaf_set[index - 1], NeighborRole.INTERIOR),
        (leaf_set[index], NeighborRole.INTERIOR),
    ]


def neighbor_proof(tree, neighbor: bytes, role: NeighborRole) -> InclusionProof:
    """
    Inclusion proof for a neighbor, in the variant its role requires.

    Only the last member of an odd-sized set is proven through the duplicated
    leaf slot, which keeps every step of its path on the rightmost edge.
    """
    if role is NeighborRole.EMPTY:
        return []
    use_duplicate = role is NeighborRole.LAST and len(tree.leaf_set) % 2 == 1
    return tree.get_inclusion_proof(neighbor, use_duplicate=use_duplicate)


def generate_exclusion_proof(tree, identifier: bytes) -> ExclusionProof:
    """
    Build an exclusion proof for a non-member of the tree.

    Args:
        tree: MerkleTree to prove against
        identifier: Raw identifier that is not a member

    Returns:
        ExclusionProof with one or two neighbor proofs

    Raises:
        LeafAlreadyPresentError: If the identifier is a member
    """
    located = locate_neighbors(tree.leaf_set, identifier)

    proof = ExclusionProof()
    for neighbor, role in located:
        proof.neighbors.append(neighbor)
        proof.proofs.append(neighbor_proof(tree, neighbor, role))

    logger.debug(
        "exclusion_proof_generated",
        identifier=to_hex(identifier),
        roles=[role.value for _, role in located],
        depth=tree.get_depth(),
    )

    return proof
