"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
MemberRoot, a product of Garudex Labs

MemberRoot - Content-Addressed Set Membership Proofs

MemberRoot builds a Keccak-256 hash tree over a sorted set of fixed-length
identifiers and produces inclusion and exclusion proofs that an external
verifier can check against the anchored root.
"""

from memberroot._version import __version__
from memberroot.merkle import (
    ExclusionProof,
    LeafSet,
    MerkleTree,
    NeighborRole,
    ProofElement,
    verify_exclusion_proof,
    verify_inclusion_proof,
)

__all__ = [
    "__version__",
    "ExclusionProof",
    "LeafSet",
    "MerkleTree",
    "NeighborRole",
    "ProofElement",
    "verify_exclusion_proof",
    "verify_inclusion_proof",
]
