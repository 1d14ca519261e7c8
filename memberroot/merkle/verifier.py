"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
MemberRoot, a product of Garudex Labs

Standalone proof verification.

Nothing here touches a MerkleTree: given an identifier, a proof and a claimed
root, the functions recompute the root with the same domain-separated hashing
the tree uses. This is the algorithm an external verifier replicates.

A proof that does not match yields False. Structurally invalid exclusion
input (mismatched lengths, wrong proof count) raises a ProofError.
"""

from typing import Sequence, Tuple

from memberroot.exceptions import InvalidProofCountError, ProofNeighborMismatchError
from memberroot.merkle.hashing import hash_leaf, hash_node
from memberroot.merkle.identifiers import is_placeholder
from memberroot.merkle.proof import ProofElement


def _walk(identifier: bytes, proof: Sequence[ProofElement]) -> Tuple[bytes, int, bool]:
    """
    Fold a proof from the leaf up.

    Returns:
        Tuple of (computed root, leaf position, rightmost flag). A step whose
        sibling equals the current node is a self-pairing and counts as a
        left child, so the position is the raw leaf index even for proofs
        that follow the duplicated leaf slot.
    """
    current = hash_leaf(identifier)
    position = 0
    rightmost = True

    for level, element in enumerate(proof):
        self_paired = element.node == current
        if element.on_right:
            if not self_paired:
                rightmost = False
            current = hash_node(current, element.node)
        else:
            if not self_paired:
                position |= 1 << level
            current = hash_node(element.node, current)

    return current, position, rightmost


def compute_root(identifier: bytes, proof: Sequence[ProofElement]) -> bytes:
    """
    Recompute the root implied by an identifier and its inclusion proof.

    Args:
        identifier: Raw identifier bytes
        proof: Bottom-up inclusion proof

    Returns:
        32-byte root
    """
    return _walk(bytes(identifier), proof)[0]


def leaf_position(identifier: bytes, proof: Sequence[ProofElement]) -> int:
    """Raw-leaf index implied by an inclusion proof."""
    return _walk(bytes(identifier), proof)[1]


def verify_inclusion_proof(
    identifier: bytes,
    proof: Sequence[ProofElement],
    root: bytes,
) -> bool:
    """
    Verify that an identifier is a member of the tree with the given root.

    Args:
        identifier: Raw identifier bytes
        proof: Bottom-up inclusion proof
        root: Claimed root

    Returns:
        True if the proof folds to the claimed root
    """
    return compute_root(identifier, proof) == bytes(root)


def verify_exclusion_proof(
    identifier: bytes,
    proofs: Sequence[Sequence[ProofElement]],
    neighbors: Sequence[bytes],
    root: bytes,
) -> bool:
    """
    Verify that an identifier is not a member of the tree with the given root.

    One proof covers an empty tree (placeholder neighbor, empty proof) or an
    identifier outside the member range: the neighbor must be the first
    member with the identifier below it, or the last member with the
    identifier above it. Two proofs cover the interior case: both neighbors
    must be members at adjacent positions with the identifier strictly
    between them.

    Args:
        identifier: Raw identifier bytes
        proofs: One inclusion proof per neighbor
        neighbors: Neighbor identifiers, ascending
        root: Claimed root

    Returns:
        True if the exclusion claim holds

    Raises:
        ProofNeighborMismatchError: If len(proofs) != len(neighbors)
        InvalidProofCountError: If there are not one or two proofs
    """
    if len(proofs) != len(neighbors):
        raise ProofNeighborMismatchError(
            f"Got {len(proofs)} proofs for {len(neighbors)} neighbors"
        )
    if len(proofs) not in (1, 2):
        raise InvalidProofCountError(
            f"Exclusion proof must contain one or two proofs, got {len(proofs)}"
        )

    identifier = bytes(identifier)
    root = bytes(root)
    neighbors = [bytes(neighbor) for neighbor in neighbors]

    if any(len(neighbor) != len(identifier) for neighbor in neighbors):
        return False

    if len(proofs) == 1:
        neighbor, proof = neighbors[0], proofs[0]

        # Empty tree: the root is the placeholder's leaf hash
        if is_placeholder(neighbor) and len(proof) == 0:
            return hash_leaf(neighbor) == root

        computed, position, rightmost = _walk(neighbor, proof)
        if computed != root:
            return False

        # An empty proof means a single-leaf tree, which is both first and last
        if identifier < neighbor:
            return position == 0
        if identifier > neighbor:
            return rightmost
        return False

    lower, upper = neighbors
    if len(proofs[0]) != len(proofs[1]):
        return False
    if not lower < identifier < upper:
        return False

    lower_root, lower_position, _ = _walk(lower, proofs[0])
    upper_root, upper_position, _ = _walk(upper, proofs[1])
    if lower_root != root or upper_root != root:
        return False

    return upper_position == lower_position + 1
