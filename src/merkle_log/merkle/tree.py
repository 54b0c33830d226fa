"""
Incremental Merkle Hash Tree

This module provides an append-only Merkle hash tree that keeps every leaf
and internal node digest in per-level arrays, so roots and proofs are served
from stored digests instead of rehashing the raw entries.

Storage layout:
- Level 0 holds the leaf digests in entry order.
- A node covering leaves [start, end] lives at level levels(end - start + 1) - 1,
  index start >> level. Perfect blocks of 2^i leaves sit at level i; the
  right-edge partial subtree sits in the level its size rounds up to.
- The top level always holds exactly one digest: the root.

Appending a leaf only touches the nodes on the right edge of the tree,
one per level.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ..errors import EmptyTree, EntryNotFound, IndexOutOfRange, InvalidRange
from ..hashing import Hasher, resolve_hasher
from ..utils import format_path, short_hex
from .core import ProofState, largest_power_of_two_less_than, levels

logger = logging.getLogger(__name__)


class MerkleTree:
    """
    Append-only Merkle hash tree with stored per-level digests.

    The tree is not thread-safe; callers must serialize append against
    other calls.

    Attributes:
        hasher: Hasher used for leaf and node digests
    """

    def __init__(self, entries: Iterable[bytes] = (), hasher: Optional[Hasher] = None):
        """
        Build a tree from an initial list of entries.

        Args:
            entries: Initial ordered entries (may be empty)
            hasher: Optional hasher overriding the configured default
        """
        self.hasher = resolve_hasher(hasher)
        self._levels: List[List[bytes]] = [[]]
        self._leaf_index: Dict[bytes, int] = {}

        entries = list(entries)
        if entries:
            self.append(*entries)
        logger.debug("Built tree with %d leaves using %s", self.size, self.hasher.algorithm)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        return len(self._levels[0])

    def __len__(self):
        return self.size

    @property
    def level_count(self) -> int:
        """Number of per-level digest arrays, levels(size)."""
        return len(self._levels)

    def level(self, i: int) -> List[bytes]:
        """Copy of the digests stored at level i."""
        if not 0 <= i < len(self._levels):
            raise IndexOutOfRange(f"Level {i} out of range for {len(self._levels)} levels")
        return list(self._levels[i])

    def leaf_hash_at(self, index: int) -> bytes:
        if not 0 <= index < self.size:
            raise IndexOutOfRange(f"Leaf index {index} out of range for {self.size} leaves")
        return self._levels[0][index]

    def __repr__(self):
        if not self.size:
            return f"MerkleTree(size=0, algorithm={self.hasher.algorithm!r})"
        return (f"MerkleTree(size={self.size}, root={short_hex(self.root())}, "
                f"algorithm={self.hasher.algorithm!r})")

    # ------------------------------------------------------------------
    # Append
    # ------------------------------------------------------------------

    def append(self, *entries: bytes) -> bytes:
        """
        Append entries and return the new root.

        Appending nothing leaves the tree untouched and returns the current
        root, or the empty hash for a tree that has no leaves.

        Args:
            *entries: Entries to append, in order

        Returns:
            Root digest after the append

        Raises:
            TypeError: If any entry is not bytes (nothing is appended)
        """
        # Hash everything first so a bad entry leaves the tree unchanged
        leaves = [self.hasher.leaf_hash(e) for e in entries]

        for leaf in leaves:
            position = len(self._levels[0])
            self._levels[0].append(leaf)
            self._leaf_index.setdefault(leaf, position)

            needed = levels(position + 1)
            while len(self._levels) < needed:
                self._levels.append([])
            self._update_right_edge(position + 1)

        if not self.size:
            return self.hasher.empty_hash()

        root = self.root()
        if leaves:
            logger.debug("Appended %d entries, size=%d root=%s",
                         len(leaves), self.size, short_hex(root))
        return root

    def _update_right_edge(self, size: int):
        # Recompute, bottom-up, every node whose range holds leaf size - 1
        last = size - 1
        for i in range(1, len(self._levels)):
            block = last >> i
            start = block << i
            width = min(start + (1 << i), size) - start
            half = 1 << (i - 1)
            if width <= half:
                # The right edge at this height is a subtree on a lower level
                continue

            left = self._levels[i - 1][start >> (i - 1)]
            right = self._stored(start + half, start + width - 1)
            digest = self.hasher.node_hash(left, right)

            row = self._levels[i]
            if block == len(row):
                row.append(digest)
            else:
                row[block] = digest

    def _stored(self, start: int, end: int) -> bytes:
        level = levels(end - start + 1) - 1
        return self._levels[level][start >> level]

    # ------------------------------------------------------------------
    # Roots
    # ------------------------------------------------------------------

    def root(self) -> bytes:
        """
        Return the Merkle root.

        Raises:
            EmptyTree: If no leaf has been appended yet
        """
        if not self.size:
            raise EmptyTree("Merkle root requested for an empty tree")
        return self._levels[-1][0]

    def root_at(self, size: int) -> bytes:
        """
        Root the tree had when it held its first `size` leaves.

        Raises:
            EmptyTree: If the tree has no leaves
            InvalidRange: If size is not in [1, current size]
        """
        if not self.size:
            raise EmptyTree("Historical root requested for an empty tree")
        if not 1 <= size <= self.size:
            raise InvalidRange(f"Tree size {size} not in [1, {self.size}]")
        return self.mth_of_range(0, size - 1)

    def mth_of_range(self, start: int, end: int) -> bytes:
        """
        Digest of the subtree covering leaves [start, end] (inclusive).

        The range must be a subtree produced by the decomposition rule for
        some tree size: its start must be aligned to the power of two its
        width rounds up to. Subtrees of the current tree are returned from
        storage; subtrees that only exist in a smaller tree are combined
        from stored perfect blocks.

        Args:
            start: First leaf index
            end: Last leaf index

        Returns:
            Subtree digest

        Raises:
            InvalidRange: If the range is outside the tree or not a subtree
        """
        if not 0 <= start <= end < self.size:
            raise InvalidRange(f"Range [{start}, {end}] outside tree of size {self.size}")

        width = end - start + 1
        level = levels(width) - 1
        if start % (1 << level):
            raise InvalidRange(f"Range [{start}, {end}] is not a subtree")

        if width == 1 << level or end == self.size - 1:
            return self._levels[level][start >> level]

        half = 1 << (level - 1)
        left = self._levels[level - 1][start >> (level - 1)]
        return self.hasher.node_hash(left, self.mth_of_range(start + half, end))

    # ------------------------------------------------------------------
    # Proofs
    # ------------------------------------------------------------------

    def inclusion_proof(self, entry: bytes) -> List[bytes]:
        """
        Audit path for an entry, located by its leaf digest.

        Duplicate entries resolve to their first occurrence.

        Args:
            entry: Entry bytes previously appended

        Returns:
            List of sibling digests, leaf-to-root order

        Raises:
            EmptyTree: If the tree has no leaves
            EntryNotFound: If the entry was never appended
        """
        if not self.size:
            raise EmptyTree("Inclusion proof requested for an empty tree")

        index = self._leaf_index.get(self.hasher.leaf_hash(entry))
        if index is None:
            raise EntryNotFound("Entry not present in tree")
        return self.audit_path(index)

    def index_of(self, entry: bytes) -> int:
        index = self._leaf_index.get(self.hasher.leaf_hash(entry))
        if index is None:
            raise EntryNotFound("Entry not present in tree")
        return index

    def audit_path(self, index: int, size: Optional[int] = None) -> List[bytes]:
        """
        Audit path for the leaf at `index` in the tree of `size` leaves.

        Args:
            index: 0-based leaf index
            size: Tree size the path proves against (default: current size)

        Returns:
            List of sibling digests, leaf-to-root order

        Raises:
            EmptyTree: If the tree has no leaves
            InvalidRange: If size is not in [1, current size]
            IndexOutOfRange: If index is not in [0, size)
        """
        if not self.size:
            raise EmptyTree("Audit path requested for an empty tree")
        if size is None:
            size = self.size
        if not 1 <= size <= self.size:
            raise InvalidRange(f"Tree size {size} not in [1, {self.size}]")
        if not 0 <= index < size:
            raise IndexOutOfRange(f"Leaf index {index} out of range for {size} leaves")

        path = self._audit_path(index, 0, size - 1)
        logger.debug("Audit path for index %d of %d: %s", index, size, format_path(path))
        return path

    def _audit_path(self, m: int, start: int, end: int) -> List[bytes]:
        if start >= end or not start <= m <= end:
            return []

        k = start + largest_power_of_two_less_than(end - start + 1)
        if m < k:
            path = self._audit_path(m, start, k - 1)
            path.append(self.mth_of_range(k, end))
        else:
            path = self._audit_path(m, k, end)
            path.append(self.mth_of_range(start, k - 1))
        return path

    def consistency_proof(self, m: int, n: Optional[int] = None) -> List[bytes]:
        """
        Consistency proof between the roots at sizes m and n.

        Args:
            m: Size of the older tree
            n: Size of the newer tree (default: current size)

        Returns:
            List of digests; empty when m == n or m == 0

        Raises:
            EmptyTree: If the tree has no leaves
            InvalidRange: Unless 0 <= m <= n <= current size
        """
        if not self.size:
            raise EmptyTree("Consistency proof requested for an empty tree")
        if n is None:
            n = self.size
        if not 0 <= m <= n <= self.size:
            raise InvalidRange(f"Consistency proof needs 0 <= {m} <= {n} <= {self.size}")
        if m == 0:
            return []

        proof = self._sub_proof(m, 0, n - 1, ProofState.KNOWN)
        logger.debug("Consistency proof %d -> %d: %s", m, n, format_path(proof))
        return proof

    def _sub_proof(self, m: int, start: int, end: int, state: ProofState) -> List[bytes]:
        n = end - start + 1
        if m == n:
            if state is ProofState.KNOWN:
                return []
            return [self.mth_of_range(start, end)]

        k = largest_power_of_two_less_than(n)
        if m <= k:
            proof = self._sub_proof(m, start, start + k - 1, state)
            proof.append(self.mth_of_range(start + k, end))
        else:
            proof = self._sub_proof(m - k, start + k, end, ProofState.UNKNOWN)
            proof.append(self.mth_of_range(start, start + k - 1))
        return proof
