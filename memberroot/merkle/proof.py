"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
MemberRoot, a product of Garudex Labs

Proof types and their wire representation.

An inclusion proof is a bottom-up list of ProofElement. Its binary form is
the concatenation of 33-byte records, a 32-byte sibling digest followed by a
one-byte flag (0x01 when the sibling is the right operand). The number of
records is the tree depth.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from eth_utils import decode_hex, encode_hex

from memberroot.exceptions import MalformedProofError
from memberroot.merkle.hashing import HASH_LENGTH

ELEMENT_LENGTH = HASH_LENGTH + 1


@dataclass(frozen=True)
class ProofElement:
    """
    One step of an inclusion proof.

    Attributes:
        node: Sibling hash at this level
        on_right: True if the sibling is combined as the right operand
    """
    node: bytes
    on_right: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"node": encode_hex(self.node), "onRight": self.on_right}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProofElement":
        try:
            node = decode_hex(data["node"])
            on_right = data["onRight"]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedProofError(f"Invalid proof element {data!r}: {e}") from e
        if len(node) != HASH_LENGTH or not isinstance(on_right, bool):
            raise MalformedProofError(f"Invalid proof element {data!r}")
        return cls(node=node, on_right=on_right)


InclusionProof = List[ProofElement]


@dataclass
class ExclusionProof:
    """
    Proof that an identifier is not a member.

    Holds one inclusion proof when the identifier sorts before the first or
    after the last member (or the tree is empty), and two when it falls
    between two adjacent members.

    Attributes:
        proofs: Inclusion proofs, one per neighbor
        neighbors: Neighbor identifiers, in ascending order
    """
    proofs: List[InclusionProof] = field(default_factory=list)
    neighbors: List[bytes] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proofs": [[element.to_dict() for element in proof] for proof in self.proofs],
            "neighbors": [encode_hex(neighbor) for neighbor in self.neighbors],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExclusionProof":
        try:
            proofs = [
                [ProofElement.from_dict(element) for element in proof]
                for proof in data["proofs"]
            ]
            neighbors = [decode_hex(neighbor) for neighbor in data["neighbors"]]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedProofError(f"Invalid exclusion proof: {e}") from e
        return cls(proofs=proofs, neighbors=neighbors)


def encode_proof(proof: InclusionProof) -> bytes:
    """
    Serialize an inclusion proof to its binary form.

    Args:
        proof: Inclusion proof

    Returns:
        Concatenated 33-byte records
    """
    return b"".join(
        element.node + (b"\x01" if element.on_right else b"\x00")
        for element in proof
    )


def decode_proof(data: bytes) -> InclusionProof:
    """
    Parse the binary form of an inclusion proof.

    Args:
        data: Concatenated 33-byte records

    Returns:
        Inclusion proof

    Raises:
        MalformedProofError: If the length is not a multiple of 33 bytes or a
            flag byte is neither 0 nor 1
    """
    if len(data) % ELEMENT_LENGTH != 0:
        raise MalformedProofError(
            f"Proof length {len(data)} is not a multiple of {ELEMENT_LENGTH}"
        )

    proof: InclusionProof = []
    for offset in range(0, len(data), ELEMENT_LENGTH):
        node = bytes(data[offset:offset + HASH_LENGTH])
        flag = data[offset + HASH_LENGTH]
        if flag not in (0, 1):
            raise MalformedProofError(f"Invalid on_right flag {flag} at offset {offset}")
        proof.append(ProofElement(node=node, on_right=flag == 1))

    return proof
