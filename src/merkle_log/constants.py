"""
Merkle Log Constants

Domain-separation prefixes and defaults for Certificate Transparency style
Merkle hash trees.

References:
- RFC 6962, Section 2.1: https://datatracker.ietf.org/doc/html/rfc6962#section-2.1
"""

# ====================
# Domain Separation
# ====================

# Prepended to an entry before hashing it into a leaf digest
LEAF_PREFIX = b"\x00"

# Prepended to two child digests before hashing them into a node digest
NODE_PREFIX = b"\x01"

# ====================
# Configuration Defaults
# ====================

# Environment variable holding the hashlib algorithm name
HASH_ALGORITHM_ENV = "MERKLE_HASH_ALGORITHM"

DEFAULT_HASH_ALGORITHM = "sha256"
