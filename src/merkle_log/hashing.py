"""
Hash Primitives

Domain-separated hashing for Merkle hash trees:
- LeafHash(d) = H(0x00 || d)
- NodeHash(left, right) = H(0x01 || left || right)
- EmptyHash = H() (root of a tree with no entries)

H is any fixed-size hashlib algorithm; the default comes from configuration.
"""

import hashlib
from functools import lru_cache
from typing import Optional

from .config import load_settings, validate_algorithm
from .constants import DEFAULT_HASH_ALGORITHM, LEAF_PREFIX, NODE_PREFIX


def _require_bytes(value, what: str) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"{what} must be bytes, got {type(value).__name__}")
    return bytes(value)


class Hasher:
    """
    Leaf/node hasher bound to a single hash algorithm.

    Instances are immutable and can be shared between trees.
    """

    def __init__(self, algorithm: str = DEFAULT_HASH_ALGORITHM):
        self.algorithm = validate_algorithm(algorithm)
        self.digest_size = hashlib.new(self.algorithm).digest_size

    def hash(self, data: bytes) -> bytes:
        return hashlib.new(self.algorithm, data).digest()

    def empty_hash(self) -> bytes:
        """Digest of the zero-length string, the root of an empty list."""
        return self.hash(b"")

    def leaf_hash(self, data: bytes) -> bytes:
        """
        Hash an entry into a leaf digest: H(0x00 || data).

        Args:
            data: Raw entry bytes

        Returns:
            Leaf digest of digest_size bytes
        """
        return self.hash(LEAF_PREFIX + _require_bytes(data, "entry"))

    def node_hash(self, left: bytes, right: bytes) -> bytes:
        """
        Hash two child digests into a node digest: H(0x01 || left || right).

        Args:
            left: Digest of the left subtree
            right: Digest of the right subtree

        Returns:
            Node digest of digest_size bytes
        """
        return self.hash(
            NODE_PREFIX
            + _require_bytes(left, "left digest")
            + _require_bytes(right, "right digest")
        )

    def __eq__(self, other):
        return isinstance(other, Hasher) and other.algorithm == self.algorithm

    def __hash__(self):
        return hash(self.algorithm)

    def __repr__(self):
        return f"Hasher({self.algorithm!r})"


@lru_cache(maxsize=None)
def get_default_hasher() -> Hasher:
    """Hasher for the configured algorithm, built once per process."""
    return Hasher(load_settings().hash_algorithm)


def resolve_hasher(hasher: Optional[Hasher] = None) -> Hasher:
    return hasher if hasher is not None else get_default_hasher()


def leaf_hash(data: bytes, hasher: Optional[Hasher] = None) -> bytes:
    return resolve_hasher(hasher).leaf_hash(data)


def node_hash(left: bytes, right: bytes, hasher: Optional[Hasher] = None) -> bytes:
    return resolve_hasher(hasher).node_hash(left, right)


def empty_hash(hasher: Optional[Hasher] = None) -> bytes:
    return resolve_hasher(hasher).empty_hash()
