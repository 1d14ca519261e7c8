"""
Membership tree implementation.

This package provides tree construction over a sorted identifier set,
inclusion and exclusion proof generation, and standalone verification that
mirrors the external verifier.
"""

from memberroot.merkle.exclusion import NeighborRole
from memberroot.merkle.hashing import hash_leaf, hash_node
from memberroot.merkle.identifiers import ZERO_IDENTIFIER, to_identifier
from memberroot.merkle.leaves import LeafSet
from memberroot.merkle.proof import (
    ExclusionProof,
    InclusionProof,
    ProofElement,
    decode_proof,
    encode_proof,
)
from memberroot.merkle.tree import MerkleTree, build_levels
from memberroot.merkle.verifier import (
    compute_root,
    verify_exclusion_proof,
    verify_inclusion_proof,
)

__all__ = [
    "ExclusionProof",
    "InclusionProof",
    "LeafSet",
    "MerkleTree",
    "NeighborRole",
    "ProofElement",
    "ZERO_IDENTIFIER",
    "build_levels",
    "compute_root",
    "decode_proof",
    "encode_proof",
    "hash_leaf",
    "hash_node",
    "to_identifier",
    "verify_exclusion_proof",
    "verify_inclusion_proof",
]
