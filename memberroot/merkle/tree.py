"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
MemberRoot, a product of Garudex Labs

Membership tree over a sorted set of identifiers.

This module implements a binary Keccak-256 tree with domain-separated leaf
and node hashing. It supports:
- Tree construction from a canonical LeafSet
- Add/remove of members with a full rebuild after every mutation
- Inclusion proof generation for any member
- Exclusion proof generation for any non-member
- Proof verification against a claimed root
"""

import time
from typing import Iterable, List, Optional, Sequence, Union

from eth_utils import decode_hex

from memberroot.exceptions import CorruptTreeError, InvalidIdentifierError, LeafError, MalformedProofError
from memberroot.logging_config import get_logger, log_leaf_mutation, log_proof_verification, log_tree_rebuild
from memberroot.merkle import verifier
from memberroot.merkle.exclusion import generate_exclusion_proof
from memberroot.merkle.hashing import hash_leaf, hash_node
from memberroot.merkle.identifiers import (
    IDENTIFIER_LENGTH,
    IdentifierLike,
    placeholder,
    to_hex,
    to_identifier,
)
from memberroot.merkle.leaves import LeafSet
from memberroot.merkle.proof import ExclusionProof, InclusionProof, ProofElement

logger = get_logger(__name__)


def build_levels(leaf_set: LeafSet) -> List[List[bytes]]:
    """
    Build every level of the tree bottom-up.

    The tree is stored as a list of levels, where:
    - levels[0] is the leaf level
    - levels[-1] is the root level (single hash)

    An empty set is represented by the placeholder's leaf hash and a single
    member by its own leaf hash; both have depth 0. Otherwise an odd leaf
    level gets a real duplicate of its last hash appended, and on higher
    levels the last node of an odd level is paired with itself.

    Args:
        leaf_set: Canonical leaf set

    Returns:
        List of levels, each level is a list of hashes
    """
    if leaf_set.is_empty():
        return [[hash_leaf(placeholder(leaf_set.identifier_length))]]

    current_level = [hash_leaf(leaf) for leaf in leaf_set]
    if len(current_level) == 1:
        return [current_level]

    if len(current_level) % 2 == 1:
        current_level.append(current_level[-1])

    levels = [current_level]

    while len(current_level) > 1:
        next_level = []

        for i in range(0, len(current_level), 2):
            left = current_level[i]

            # Odd level: the last node pairs with itself
            if i + 1 < len(current_level):
                right = current_level[i + 1]
            else:
                right = current_level[i]

            next_level.append(hash_node(left, right))

        levels.append(next_level)
        current_level = next_level

    return levels


def _to_root(value) -> bytes:
    """Raw root bytes from bytes or a ``0x`` hex string such as get_root_hex()."""
    if isinstance(value, str):
        try:
            return decode_hex(value.strip())
        except (ValueError, TypeError) as e:
            raise MalformedProofError(f"Invalid root {value!r}: {e}") from e
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise MalformedProofError(f"Unsupported root type {type(value).__name__}")


def _to_neighbors(neighbors: Sequence[IdentifierLike], identifier_length: int) -> List[bytes]:
    try:
        return [to_identifier(neighbor, identifier_length) for neighbor in neighbors]
    except InvalidIdentifierError as e:
        raise MalformedProofError(f"Invalid exclusion neighbor: {e}") from e


class MerkleTree:
    """
    Membership tree with inclusion and exclusion proofs.

    The tree is a pure function of its leaf set: identifiers are deduplicated
    and sorted on the way in, so any insertion order produces the same root.
    Every add or remove replaces the leaf set and rebuilds all levels.

    The tree holds no locks. Callers that share an instance across threads
    must serialize access themselves.

    Example:
        >>> tree = MerkleTree([b"\\x02" * 32, b"\\x01" * 32])
        >>> root = tree.get_root()
        >>> proof = tree.get_inclusion_proof(b"\\x01" * 32)
        >>> assert MerkleTree.verify_inclusion_proof(b"\\x01" * 32, proof, root)
    """

    def __init__(
        self,
        identifiers: Iterable[IdentifierLike] = (),
        identifier_length: int = IDENTIFIER_LENGTH,
    ):
        """
        Build a tree from identifiers.

        Args:
            identifiers: Members in any order; duplicates collapse
            identifier_length: Required identifier length in bytes

        Raises:
            InvalidIdentifierError: If an identifier is malformed
            ZeroLeafError: If the all-zero placeholder is among the identifiers
        """
        self._leaf_set = LeafSet.from_identifiers(identifiers, identifier_length)
        self._levels = self._build(self._leaf_set)

    @classmethod
    def from_config(cls, identifiers: Iterable[IdentifierLike], config) -> "MerkleTree":
        """
        Build a tree using the identifier length from configuration.

        Args:
            identifiers: Members in any order
            config: MemberRootConfig instance
        """
        return cls(identifiers, identifier_length=config.tree.identifier_length)

    @property
    def leaf_set(self) -> LeafSet:
        return self._leaf_set

    @property
    def identifier_length(self) -> int:
        return self._leaf_set.identifier_length

    def __len__(self) -> int:
        return len(self._leaf_set)

    def _build(self, leaf_set: LeafSet) -> List[List[bytes]]:
        start = time.perf_counter()
        levels = build_levels(leaf_set)
        duration_ms = (time.perf_counter() - start) * 1000

        log_tree_rebuild(
            logger,
            leaf_count=len(leaf_set),
            depth=len(levels) - 1,
            merkle_root=to_hex(levels[-1][0]),
            duration_ms=duration_ms,
        )

        return levels

    def _replace(self, leaf_set: LeafSet) -> None:
        # Build before assigning so a failure leaves the old state intact
        levels = self._build(leaf_set)
        self._leaf_set = leaf_set
        self._levels = levels

    def add(self, identifier: IdentifierLike) -> bytes:
        """
        Add a member and rebuild the tree.

        Args:
            identifier: Identifier to add

        Returns:
            New root, which the registrar must publish

        Raises:
            DuplicateLeafError: If the identifier is already a member
            ZeroLeafError: If the identifier is the all-zero placeholder
        """
        identifier = to_identifier(identifier, self.identifier_length)
        try:
            leaf_set = self._leaf_set.with_leaf(identifier)
        except LeafError as e:
            logger.warning("leaf_add_rejected", identifier=to_hex(identifier), reason=str(e))
            raise

        self._replace(leaf_set)
        log_leaf_mutation(
            logger,
            operation="add",
            identifier=to_hex(identifier),
            leaf_count=len(self._leaf_set),
            merkle_root=self.get_root_hex(),
        )
        return self.get_root()

    def remove(self, identifier: IdentifierLike) -> bytes:
        """
        Remove a member and rebuild the tree.

        Args:
            identifier: Identifier to remove

        Returns:
            New root, which the registrar must publish

        Raises:
            LeafNotFoundError: If the identifier is not a member
        """
        identifier = to_identifier(identifier, self.identifier_length)
        try:
            leaf_set = self._leaf_set.without_leaf(identifier)
        except LeafError as e:
            logger.warning("leaf_remove_rejected", identifier=to_hex(identifier), reason=str(e))
            raise

        self._replace(leaf_set)
        log_leaf_mutation(
            logger,
            operation="remove",
            identifier=to_hex(identifier),
            leaf_count=len(self._leaf_set),
            merkle_root=self.get_root_hex(),
        )
        return self.get_root()

    def contains(self, identifier: IdentifierLike) -> bool:
        return to_identifier(identifier, self.identifier_length) in self._leaf_set

    def get_raw_leaves(self) -> List[bytes]:
        """
        Get the members in sorted order.

        Returns:
            Raw identifiers; empty for an empty tree even though the root is
            computed from the placeholder
        """
        return self._leaf_set.to_list()

    def get_root(self) -> bytes:
        """
        Get the root hash.

        Returns:
            Root hash of the tree
        """
        return self._levels[-1][0]

    def get_root_hex(self) -> str:
        return to_hex(self.get_root())

    def get_depth(self) -> int:
        """Number of levels above the leaves, equal to every proof's length."""
        return len(self._levels) - 1

    def get_levels(self) -> List[List[bytes]]:
        return [list(level) for level in self._levels]

    def get_inclusion_proof(
        self,
        identifier: IdentifierLike,
        use_duplicate: bool = False,
    ) -> InclusionProof:
        """
        Generate an inclusion proof for a member.

        The proof lists sibling hashes from the leaf up to the root, each with
        a flag telling whether the sibling is the right operand.

        Args:
            identifier: Member to prove
            use_duplicate: When the member count is odd and the identifier is
                the last member, follow the duplicated leaf slot instead

        Returns:
            Inclusion proof; empty for a tree of depth 0

        Raises:
            LeafNotFoundError: If the identifier is not a member
            CorruptTreeError: If a computed parent does not match the stored
                level above
        """
        identifier = to_identifier(identifier, self.identifier_length)
        leaf_index = self._leaf_set.index_of(identifier)

        if self.get_depth() == 0:
            return []

        current_index = leaf_index
        leaf_count = len(self._leaf_set)
        if use_duplicate and leaf_count % 2 == 1 and leaf_index == leaf_count - 1:
            current_index += 1

        current_hash = hash_leaf(identifier)
        self._check_node(0, current_index, current_hash)

        proof: InclusionProof = []

        # Traverse from leaf to root, collecting sibling hashes
        for depth in range(len(self._levels) - 1):
            current_level = self._levels[depth]

            if current_index % 2 == 0:
                # Current node is left child, sibling is right (or itself at
                # the end of an odd level)
                sibling_index = current_index + 1
                if sibling_index >= len(current_level):
                    sibling_index = current_index
                sibling_hash = current_level[sibling_index]
                proof.append(ProofElement(node=sibling_hash, on_right=True))
                parent_hash = hash_node(current_hash, sibling_hash)
            else:
                sibling_hash = current_level[current_index - 1]
                proof.append(ProofElement(node=sibling_hash, on_right=False))
                parent_hash = hash_node(sibling_hash, current_hash)

            current_index //= 2
            self._check_node(depth + 1, current_index, parent_hash)
            current_hash = parent_hash

        return proof

    def _check_node(self, depth: int, index: int, expected: bytes) -> None:
        level = self._levels[depth]
        if index >= len(level) or level[index] != expected:
            logger.error(
                "corrupt_tree",
                depth=depth,
                index=index,
                level_size=len(level),
                expected=to_hex(expected),
            )
            raise CorruptTreeError(
                f"Node {to_hex(expected)} not found at level {depth} index {index}"
            )

    def get_exclusion_proof(self, identifier: IdentifierLike) -> ExclusionProof:
        """
        Generate an exclusion proof for a non-member.

        Args:
            identifier: Identifier to prove absent

        Returns:
            ExclusionProof with one or two neighbor inclusion proofs

        Raises:
            LeafAlreadyPresentError: If the identifier is a member
        """
        identifier = to_identifier(identifier, self.identifier_length)
        return generate_exclusion_proof(self, identifier)

    @staticmethod
    def verify_inclusion_proof(
        identifier: IdentifierLike,
        proof: Sequence[ProofElement],
        expected_root: Union[bytes, str],
        identifier_length: int = IDENTIFIER_LENGTH,
    ) -> bool:
        """
        Verify an inclusion proof.

        Args:
            identifier: Identifier claimed to be a member
            proof: Inclusion proof
            expected_root: Anchored root, raw or ``0x`` hex

        Returns:
            True if the proof is valid, False otherwise

        Raises:
            MalformedProofError: If the root cannot be decoded
        """
        identifier = to_identifier(identifier, identifier_length)
        result = verifier.verify_inclusion_proof(identifier, proof, _to_root(expected_root))
        log_proof_verification(
            logger,
            proof_type="inclusion",
            identifier=to_hex(identifier),
            success=result,
            failure_reason=None if result else "root_mismatch",
        )
        return result

    @staticmethod
    def verify_exclusion_proof(
        identifier: IdentifierLike,
        proofs: Sequence[Sequence[ProofElement]],
        neighbors: Sequence[IdentifierLike],
        expected_root: Union[bytes, str],
        identifier_length: int = IDENTIFIER_LENGTH,
    ) -> bool:
        """
        Verify an exclusion proof.

        Args:
            identifier: Identifier claimed to be absent
            proofs: One inclusion proof per neighbor
            neighbors: Neighbor identifiers, ascending; raw, hex or base58
            expected_root: Anchored root, raw or ``0x`` hex

        Returns:
            True if the proof is valid, False otherwise

        Raises:
            ProofNeighborMismatchError: If len(proofs) != len(neighbors)
            InvalidProofCountError: If there are not one or two proofs
            MalformedProofError: If a neighbor or the root cannot be decoded
        """
        identifier = to_identifier(identifier, identifier_length)
        result = verifier.verify_exclusion_proof(
            identifier,
            proofs,
            _to_neighbors(neighbors, identifier_length),
            _to_root(expected_root),
        )
        log_proof_verification(
            logger,
            proof_type="exclusion",
            identifier=to_hex(identifier),
            success=result,
            neighbor_count=len(neighbors),
        )
        return result

    def verify_exclusion(self, identifier: IdentifierLike, proof: ExclusionProof,
                         expected_root: Optional[Union[bytes, str]] = None) -> bool:
        """Verify an ExclusionProof against this tree's root (or a given root)."""
        root = self.get_root() if expected_root is None else expected_root
        return self.verify_exclusion_proof(
            identifier, proof.proofs, proof.neighbors, root, self.identifier_length
        )
