"""
Merkle Tree Operations

This package provides Certificate Transparency style Merkle hash tree
functionality, organized into three components:
- core: Stateless root, audit path and consistency proof functions over entry lists
- tree: Incremental tree with stored per-level digests and append support
- proof: Audit path and consistency proof verification
"""

# Stateless functions
from .core import (
    ProofState,
    largest_power_of_two_less_than,
    is_power_of_two,
    levels,
    root_hash,
    audit_path,
    consistency_proof,
)

# Incremental tree
from .tree import MerkleTree

# Proof verification
from .proof import (
    sibling_sides,
    compute_root_from_audit_path,
    verify_inclusion,
    verify_inclusion_hash,
    verify_consistency,
)

__all__ = [
    # Core functions
    "ProofState",
    "largest_power_of_two_less_than",
    "is_power_of_two",
    "levels",
    "root_hash",
    "audit_path",
    "consistency_proof",
    # Tree
    "MerkleTree",
    # Proof functions
    "sibling_sides",
    "compute_root_from_audit_path",
    "verify_inclusion",
    "verify_inclusion_hash",
    "verify_consistency",
]
