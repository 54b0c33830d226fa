"""
Merkle Log - append-only commitments over ordered entries

Computes and verifies Certificate Transparency style Merkle tree commitments:
root hashes, inclusion (audit) proofs and consistency proofs, either
statelessly from a full entry list or from an incremental tree that stores
its per-level digests.

Usage:
    from merkle_log import MerkleTree, verify_inclusion

    tree = MerkleTree([b"d0", b"d1", b"d2"])
    path = tree.inclusion_proof(b"d1")
    assert verify_inclusion(b"d1", 1, len(tree), path, tree.root())
"""

from .config import MerkleSettings, load_settings
from .errors import (
    MerkleTreeError,
    IndexOutOfRange,
    InvalidRange,
    EmptyTree,
    EntryNotFound,
    InvalidProof,
)
from .hashing import (
    Hasher,
    get_default_hasher,
    leaf_hash,
    node_hash,
    empty_hash,
)
from .merkle import (
    MerkleTree,
    largest_power_of_two_less_than,
    levels,
    root_hash,
    audit_path,
    consistency_proof,
    compute_root_from_audit_path,
    verify_inclusion,
    verify_inclusion_hash,
    verify_consistency,
)

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "MerkleSettings",
    "load_settings",
    # Errors
    "MerkleTreeError",
    "IndexOutOfRange",
    "InvalidRange",
    "EmptyTree",
    "EntryNotFound",
    "InvalidProof",
    # Hash primitives
    "Hasher",
    "get_default_hasher",
    "leaf_hash",
    "node_hash",
    "empty_hash",
    # Merkle functions
    "MerkleTree",
    "largest_power_of_two_less_than",
    "levels",
    "root_hash",
    "audit_path",
    "consistency_proof",
    "compute_root_from_audit_path",
    "verify_inclusion",
    "verify_inclusion_hash",
    "verify_consistency",
]
