"""
Unit tests for standalone proof verification and proof encoding.
"""

import json

import pytest
from eth_utils import keccak

from memberroot.exceptions import MalformedProofError
from memberroot.merkle.identifiers import to_hex
from memberroot.merkle.proof import (
    ExclusionProof,
    ProofElement,
    decode_proof,
    encode_proof,
)
from memberroot.merkle.tree import MerkleTree
from memberroot.merkle.verifier import compute_root, leaf_position, verify_inclusion_proof


def _id(value: int) -> bytes:
    return value.to_bytes(32, "big")


A, B, C, D, E = (_id(v) for v in (10, 20, 30, 40, 50))


class TestInclusionVerification:
    """Test the fold-and-compare verifier."""

    def test_hand_built_proof(self):
        """Test a proof assembled by hand against a hand-computed root."""
        leaf_a = keccak(b"\x00" + A)
        leaf_b = keccak(b"\x00" + B)
        root = keccak(b"\x01" + leaf_a + leaf_b)

        assert verify_inclusion_proof(A, [ProofElement(node=leaf_b, on_right=True)], root)
        assert verify_inclusion_proof(B, [ProofElement(node=leaf_a, on_right=False)], root)

    def test_flipped_direction_fails(self):
        """Test that the on_right flag is part of what is proven."""
        tree = MerkleTree([A, B])
        proof = [ProofElement(node=e.node, on_right=not e.on_right) for e in tree.get_inclusion_proof(A)]

        assert not verify_inclusion_proof(A, proof, tree.get_root())

    def test_wrong_identifier_fails(self):
        """Test that a proof for one member does not prove another."""
        tree = MerkleTree([A, B, C, D])

        assert not verify_inclusion_proof(B, tree.get_inclusion_proof(A), tree.get_root())
        assert not verify_inclusion_proof(E, tree.get_inclusion_proof(D), tree.get_root())

    def test_forged_proof_fails(self):
        """Test that arbitrary sibling hashes do not verify."""
        tree = MerkleTree([A, B, C, D])
        forged = [
            ProofElement(node=keccak(b"forged-0"), on_right=True),
            ProofElement(node=keccak(b"forged-1"), on_right=False),
        ]

        assert not verify_inclusion_proof(E, forged, tree.get_root())

    def test_truncated_proof_fails(self):
        """Test that dropping a level breaks verification."""
        tree = MerkleTree([A, B, C, D])
        proof = tree.get_inclusion_proof(C)

        assert not verify_inclusion_proof(C, proof[:-1], tree.get_root())

    def test_leaf_hash_is_not_a_node(self):
        """Test that an internal node cannot be passed off as a leaf."""
        tree = MerkleTree([A, B, C, D])
        levels = tree.get_levels()
        inner = levels[0][0] + levels[0][1]

        # The preimage of the left internal node, used as a 64-byte identifier
        assert not verify_inclusion_proof(
            inner, [ProofElement(node=levels[1][1], on_right=True)], tree.get_root()
        )

    def test_empty_proof_against_empty_root(self):
        """Test that the placeholder verifies against the empty root."""
        tree = MerkleTree([])

        assert verify_inclusion_proof(bytes(32), [], tree.get_root())

    def test_compute_root_matches_tree(self):
        """Test that compute_root reproduces the tree root."""
        tree = MerkleTree([A, B, C, D, E])

        for member in tree.get_raw_leaves():
            assert compute_root(member, tree.get_inclusion_proof(member)) == tree.get_root()

    def test_leaf_position(self):
        """Test that positions are recovered from proof paths."""
        members = [_id(v) for v in range(1, 8)]
        tree = MerkleTree(members)

        for index, member in enumerate(members):
            assert leaf_position(member, tree.get_inclusion_proof(member)) == index

    def test_leaf_position_through_duplicate_slot(self):
        """Test that the duplicated slot maps back to the last raw index."""
        tree = MerkleTree([A, B, C])

        assert leaf_position(C, tree.get_inclusion_proof(C, use_duplicate=True)) == 2

    def test_tree_wrapper_accepts_hex_root(self):
        """Test that a root in the form get_root_hex() returns verifies."""
        tree = MerkleTree([A, B, C])
        proof = tree.get_inclusion_proof(B)

        assert MerkleTree.verify_inclusion_proof(to_hex(B), proof, tree.get_root_hex())
        assert not MerkleTree.verify_inclusion_proof(B, proof, MerkleTree([A, C]).get_root_hex())

    def test_tree_wrapper_rejects_undecodable_root(self):
        """Test that a root string that is not hex is a malformed proof."""
        tree = MerkleTree([A, B])

        with pytest.raises(MalformedProofError):
            MerkleTree.verify_inclusion_proof(A, tree.get_inclusion_proof(A), "0xnothex")


class TestProofEncoding:
    """Test the binary proof encoding."""

    def test_encode_layout(self):
        """Test that each element is 32 bytes of node plus a flag byte."""
        proof = [
            ProofElement(node=b"\xaa" * 32, on_right=True),
            ProofElement(node=b"\xbb" * 32, on_right=False),
        ]

        encoded = encode_proof(proof)

        assert encoded == b"\xaa" * 32 + b"\x01" + b"\xbb" * 32 + b"\x00"

    def test_decode_real_proof(self):
        """Test that a decoded proof still verifies."""
        tree = MerkleTree([A, B, C, D, E])
        proof = tree.get_inclusion_proof(C)

        decoded = decode_proof(encode_proof(proof))

        assert decoded == proof
        assert MerkleTree.verify_inclusion_proof(C, decoded, tree.get_root())

    def test_empty_proof_encodes_to_nothing(self):
        """Test that a depth-0 proof is empty on the wire."""
        assert encode_proof([]) == b""
        assert decode_proof(b"") == []

    def test_bad_length_raises(self):
        """Test that a partial record is rejected."""
        with pytest.raises(MalformedProofError):
            decode_proof(b"\x00" * 40)

    def test_bad_flag_raises(self):
        """Test that flag bytes other than 0 and 1 are rejected."""
        with pytest.raises(MalformedProofError):
            decode_proof(b"\x00" * 32 + b"\x02")


class TestProofSerialization:
    """Test the JSON form of proofs."""

    def test_element_to_dict(self):
        """Test field names and hex encoding."""
        element = ProofElement(node=b"\x01" * 32, on_right=True)

        assert element.to_dict() == {"node": "0x" + "01" * 32, "onRight": True}
        assert ProofElement.from_dict(element.to_dict()) == element

    def test_element_from_dict_rejects_bad_node(self):
        """Test that a short node is rejected."""
        with pytest.raises(MalformedProofError):
            ProofElement.from_dict({"node": "0x0102", "onRight": True})

    def test_element_from_dict_rejects_missing_field(self):
        """Test that a missing flag is rejected."""
        with pytest.raises(MalformedProofError):
            ProofElement.from_dict({"node": "0x" + "01" * 32})

    def test_exclusion_proof_survives_json(self):
        """Test that an exclusion proof still verifies after a JSON trip."""
        tree = MerkleTree([A, B, C, D])
        target = _id(25)
        proof = tree.get_exclusion_proof(target)

        restored = ExclusionProof.from_dict(json.loads(json.dumps(proof.to_dict())))

        assert restored == proof
        assert tree.verify_exclusion(target, restored)

    def test_exclusion_proof_from_dict_rejects_garbage(self):
        """Test that malformed neighbors are rejected."""
        with pytest.raises(MalformedProofError):
            ExclusionProof.from_dict({"proofs": [[]], "neighbors": ["0xzz"]})
