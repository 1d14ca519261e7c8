"""
Exception hierarchy for MemberRoot.

All custom exceptions inherit from MemberRootError base class.
"""


class MemberRootError(Exception):
    """Base exception for all MemberRoot errors."""
    pass


# Leaf Set Errors
class LeafError(MemberRootError):
    """Base exception for leaf set errors."""
    pass


class DuplicateLeafError(LeafError):
    """Raised when adding an identifier that is already a member."""
    pass


class ZeroLeafError(LeafError):
    """Raised when the all-zero placeholder identifier is used as a member."""
    pass


class LeafNotFoundError(LeafError):
    """Raised when an identifier is not a member of the leaf set."""
    pass


class LeafAlreadyPresentError(LeafError):
    """Raised when an exclusion proof is requested for a member."""
    pass


class InvalidIdentifierError(LeafError):
    """Raised when an identifier is malformed or has the wrong length."""
    pass


# Proof Errors
class ProofError(MemberRootError):
    """Base exception for malformed proof input."""
    pass


class ProofNeighborMismatchError(ProofError):
    """Raised when the number of proofs differs from the number of neighbors."""
    pass


class InvalidProofCountError(ProofError):
    """Raised when an exclusion proof carries an unsupported number of proofs."""
    pass


class MalformedProofError(ProofError):
    """Raised when an encoded proof cannot be decoded."""
    pass


# Internal Errors
class CorruptTreeError(MemberRootError):
    """
    Raised when the tree violates its own structural invariants.

    This signals a bug in tree construction or proof generation, not bad
    caller input.
    """
    pass


# Configuration Errors
class ConfigurationError(MemberRootError):
    """Base exception for configuration errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass
