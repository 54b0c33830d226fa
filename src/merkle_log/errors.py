"""
Merkle Tree Errors

All failures raised by this package derive from MerkleTreeError so callers
can branch on the specific condition or catch the whole family.
"""


class MerkleTreeError(Exception):
    """Base exception for Merkle tree operations."""
    pass


class IndexOutOfRange(MerkleTreeError):
    """Proof requested for an index or size outside the leaf-count bound."""
    pass


class InvalidRange(MerkleTreeError):
    """Range with m > n, beyond the tree, or not aligned to a subtree."""
    pass


class EmptyTree(MerkleTreeError):
    """Root or proof requested before any leaf exists."""
    pass


class EntryNotFound(MerkleTreeError):
    """Inclusion proof requested for an entry that was never appended."""
    pass


class InvalidProof(MerkleTreeError):
    """Proof whose shape does not match the tree it claims to describe."""
    pass
