"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
MemberRoot, a product of Garudex Labs

Canonical leaf set for the membership tree.

A LeafSet is an immutable, strictly ascending, duplicate-free sequence of
identifiers. Mutations return a new LeafSet so that the tree derived from it
can be rebuilt wholesale and stays a pure function of the set.
"""

from bisect import bisect_left
from typing import Iterable, Iterator, List, Tuple

from memberroot.exceptions import (
    DuplicateLeafError,
    LeafNotFoundError,
    ZeroLeafError,
)
from memberroot.merkle.identifiers import (
    IDENTIFIER_LENGTH,
    IdentifierLike,
    is_placeholder,
    to_hex,
    to_identifier,
)


class LeafSet:
    """
    Sorted, deduplicated set of raw identifiers.

    Example:
        >>> leaves = LeafSet.from_identifiers([b"\\x02" * 32, b"\\x01" * 32])
        >>> [leaf[0] for leaf in leaves]
        [1, 2]
        >>> leaves = leaves.with_leaf(b"\\x03" * 32)
        >>> len(leaves)
        3
    """

    __slots__ = ("_leaves", "identifier_length")

    def __init__(self, leaves: Tuple[bytes, ...] = (), identifier_length: int = IDENTIFIER_LENGTH):
        """
        Wrap an already canonical tuple of identifiers.

        Use from_identifiers() for untrusted input.
        """
        self._leaves = leaves
        self.identifier_length = identifier_length

    @classmethod
    def from_identifiers(
        cls,
        identifiers: Iterable[IdentifierLike],
        identifier_length: int = IDENTIFIER_LENGTH,
    ) -> "LeafSet":
        """
        Build a leaf set from arbitrary identifiers.

        Duplicates collapse to one member and the result is sorted ascending.

        Args:
            identifiers: Identifiers in any order, possibly repeated
            identifier_length: Required identifier length in bytes

        Returns:
            Canonical LeafSet

        Raises:
            InvalidIdentifierError: If an identifier is malformed
            ZeroLeafError: If the all-zero placeholder is among the identifiers
        """
        unique = set()
        for value in identifiers:
            identifier = to_identifier(value, identifier_length)
            if is_placeholder(identifier):
                raise ZeroLeafError("The all-zero identifier cannot be a member")
            unique.add(identifier)

        return cls(tuple(sorted(unique)), identifier_length)

    def __len__(self) -> int:
        return len(self._leaves)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._leaves)

    def __getitem__(self, index: int) -> bytes:
        return self._leaves[index]

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, bytes):
            return False
        return self._position(identifier) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LeafSet):
            return NotImplemented
        return self._leaves == other._leaves

    def __hash__(self) -> int:
        return hash(self._leaves)

    def __repr__(self) -> str:
        return f"LeafSet(size={len(self._leaves)})"

    def is_empty(self) -> bool:
        return not self._leaves

    def to_list(self) -> List[bytes]:
        return list(self._leaves)

    def _position(self, identifier: bytes):
        index = bisect_left(self._leaves, identifier)
        if index < len(self._leaves) and self._leaves[index] == identifier:
            return index
        return None

    def index_of(self, identifier: IdentifierLike) -> int:
        """
        Position of a member among the raw leaves.

        Raises:
            LeafNotFoundError: If the identifier is not a member
        """
        identifier = to_identifier(identifier, self.identifier_length)
        index = self._position(identifier)
        if index is None:
            raise LeafNotFoundError(f"Identifier {to_hex(identifier)} is not in the leaf set")
        return index

    def insertion_index(self, identifier: bytes) -> int:
        """
        Index at which a non-member would be inserted.

        Every leaf before the index sorts below the identifier and every leaf
        from the index onward sorts above it. A linear scan keeps the
        neighbor search trivially auditable.
        """
        for index, leaf in enumerate(self._leaves):
            if leaf > identifier:
                return index
        return len(self._leaves)

    def with_leaf(self, identifier: IdentifierLike) -> "LeafSet":
        """
        Return a new set with the identifier inserted in sorted position.

        Raises:
            ZeroLeafError: If the identifier is the all-zero placeholder
            DuplicateLeafError: If the identifier is already a member
        """
        identifier = to_identifier(identifier, self.identifier_length)
        if is_placeholder(identifier):
            raise ZeroLeafError("The all-zero identifier cannot be a member")

        index = bisect_left(self._leaves, identifier)
        if index < len(self._leaves) and self._leaves[index] == identifier:
            raise DuplicateLeafError(f"Identifier {to_hex(identifier)} is already a member")

        leaves = self._leaves[:index] + (identifier,) + self._leaves[index:]
        return LeafSet(leaves, self.identifier_length)

    def without_leaf(self, identifier: IdentifierLike) -> "LeafSet":
        """
        Return a new set with the identifier removed.

        Raises:
            LeafNotFoundError: If the identifier is not a member
        """
        index = self.index_of(identifier)
        leaves = self._leaves[:index] + self._leaves[index + 1:]
        return LeafSet(leaves, self.identifier_length)
