"""
Core Merkle Tree Hash Functions

This module implements the stateless Merkle Tree Hash (MTH), audit path and
consistency proof recursions over a full list of entries, following the
Certificate Transparency scheme.

Tree shape rules:
- A list of n > 1 entries splits into a left subtree of k entries, where k is
  the largest power of two strictly less than n, and a right subtree of n - k
  entries. This is not a balanced halving.
- Every proof recursion decomposes ranges with the same rule, otherwise the
  produced proofs would not verify against the same root.

References:
- RFC 6962, Section 2.1: https://datatracker.ietf.org/doc/html/rfc6962#section-2.1
"""

import enum
import logging
from typing import List, Optional, Sequence

from ..errors import IndexOutOfRange, InvalidRange
from ..hashing import Hasher, resolve_hasher
from ..utils import format_path

logger = logging.getLogger(__name__)


class ProofState(enum.Enum):
    """Whether the verifier already holds the subtree hash MTH(D[0:m])."""
    KNOWN = "known"
    UNKNOWN = "unknown"


def largest_power_of_two_less_than(n: int) -> int:
    """
    Largest power of two strictly less than n, so that k < n <= 2k.

    Args:
        n: Number of entries

    Returns:
        k, or 0 when n < 2

    Examples:
        >>> largest_power_of_two_less_than(7)  # Returns 4
        >>> largest_power_of_two_less_than(8)  # Returns 4
    """
    if n < 2:
        return 0
    return 1 << ((n - 1).bit_length() - 1)


def is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def levels(n: int) -> int:
    """
    Number of per-level digest arrays needed for a tree of n leaves.

    floor(log2(n)) + 1 for an exact power of two, floor(log2(n)) + 2
    otherwise. A tree with zero or one leaf has a single level.

    Examples:
        >>> levels(4)  # Returns 3
        >>> levels(7)  # Returns 4
    """
    if n <= 1:
        return 1
    if is_power_of_two(n):
        return n.bit_length()
    return n.bit_length() + 1


def _mth(entries: Sequence[bytes], start: int, end: int, hasher: Hasher) -> bytes:
    # MTH of entries[start:end]
    n = end - start
    if n == 0:
        return hasher.empty_hash()
    if n == 1:
        return hasher.leaf_hash(entries[start])

    k = largest_power_of_two_less_than(n)
    left = _mth(entries, start, start + k, hasher)
    right = _mth(entries, start + k, end, hasher)
    return hasher.node_hash(left, right)


def root_hash(entries: Sequence[bytes], hasher: Optional[Hasher] = None) -> bytes:
    """
    Compute the Merkle Tree Hash of an ordered list of entries.

    MTH({}) is the hash of the empty string, MTH({d0}) is the leaf hash
    of d0, and for n > 1 MTH(D) = NodeHash(MTH(D[0:k]), MTH(D[k:n])).

    Args:
        entries: Ordered entries (bytes)
        hasher: Optional hasher overriding the configured default

    Returns:
        Root digest
    """
    return _mth(entries, 0, len(entries), resolve_hasher(hasher))


def _path(m: int, entries: Sequence[bytes], start: int, end: int, hasher: Hasher) -> List[bytes]:
    n = end - start
    if n == 1:
        return []

    k = largest_power_of_two_less_than(n)
    if m < k:
        # PATH(m, D[n]) = PATH(m, D[0:k]) : MTH(D[k:n])
        path = _path(m, entries, start, start + k, hasher)
        path.append(_mth(entries, start + k, end, hasher))
    else:
        # PATH(m, D[n]) = PATH(m - k, D[k:n]) : MTH(D[0:k])
        path = _path(m - k, entries, start + k, end, hasher)
        path.append(_mth(entries, start, start + k, hasher))
    return path


def audit_path(index: int, entries: Sequence[bytes], hasher: Optional[Hasher] = None) -> List[bytes]:
    """
    Build the audit (inclusion) path for the entry at `index`.

    The path lists sibling subtree hashes from the leaf up to the root.
    The left/right position of each sibling is not stored; a verifier
    derives it from `index` and the tree size alone.

    Args:
        index: 0-based position of the entry
        entries: Full ordered entry list
        hasher: Optional hasher overriding the configured default

    Returns:
        List of sibling digests, leaf-to-root order

    Raises:
        IndexOutOfRange: If index is not in [0, len(entries))

    Examples:
        >>> audit_path(6, [b"d%d" % i for i in range(7)])  # [MTH(d4,d5), MTH(d0..d3)]
    """
    n = len(entries)
    if not 0 <= index < n:
        raise IndexOutOfRange(f"Leaf index {index} out of range for {n} entries")

    path = _path(index, entries, 0, n, resolve_hasher(hasher))
    logger.debug("Audit path for index %d of %d: %s", index, n, format_path(path))
    return path


def _sub_proof(m: int, entries: Sequence[bytes], start: int, end: int,
               state: ProofState, hasher: Hasher) -> List[bytes]:
    n = end - start
    if m == n:
        if state is ProofState.KNOWN:
            return []
        return [_mth(entries, start, end, hasher)]

    k = largest_power_of_two_less_than(n)
    if m <= k:
        # Right subtree only exists in the new tree; prove the left side
        proof = _sub_proof(m, entries, start, start + k, state, hasher)
        proof.append(_mth(entries, start + k, end, hasher))
    else:
        # Left subtree is identical in both trees; prove the right side
        proof = _sub_proof(m - k, entries, start + k, end, ProofState.UNKNOWN, hasher)
        proof.append(_mth(entries, start, start + k, hasher))
    return proof


def consistency_proof(m: int, entries: Sequence[bytes], hasher: Optional[Hasher] = None) -> List[bytes]:
    """
    Build the consistency proof between MTH(D[0:m]) and MTH(D).

    PROOF(m, D[n]) = SUBPROOF(m, D[n], true). The proof is empty when
    m == n (the roots must simply be equal) and when m == 0 (an empty
    tree is a prefix of every tree).

    Args:
        m: Size of the previously committed prefix
        entries: Full ordered entry list of the newer tree
        hasher: Optional hasher overriding the configured default

    Returns:
        List of digests proving the append-only relation

    Raises:
        IndexOutOfRange: If m is negative
        InvalidRange: If m exceeds the number of entries
    """
    n = len(entries)
    if m < 0:
        raise IndexOutOfRange(f"Prefix size {m} must not be negative")
    if m > n:
        raise InvalidRange(f"Prefix size {m} exceeds tree size {n}")
    if m == 0:
        return []

    proof = _sub_proof(m, entries, 0, n, ProofState.KNOWN, resolve_hasher(hasher))
    logger.debug("Consistency proof %d -> %d: %s", m, n, format_path(proof))
    return proof
