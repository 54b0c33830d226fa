"""
Merkle Proof Verification

This module checks audit paths and consistency proofs produced by the static
functions in core or by MerkleTree. Proofs carry only digests; the left/right
position of every element is re-derived from the leaf index and tree sizes.

References:
- RFC 9162, Section 2.1.3.2 (inclusion) and 2.1.4.2 (consistency)
"""

import logging
from typing import List, Optional, Sequence

from ..errors import IndexOutOfRange, InvalidProof
from ..hashing import Hasher, resolve_hasher
from .core import is_power_of_two, largest_power_of_two_less_than

logger = logging.getLogger(__name__)


def sibling_sides(index: int, tree_size: int) -> List[bool]:
    """
    Position of each audit path element relative to the running hash.

    Walks the decomposition from the root down to the leaf, then reverses
    the result to match the leaf-to-root order of an audit path.

    Args:
        index: 0-based leaf index
        tree_size: Number of leaves in the tree

    Returns:
        One flag per path element, True when the sibling is on the left

    Raises:
        IndexOutOfRange: If index is not in [0, tree_size)
    """
    if not 0 <= index < tree_size:
        raise IndexOutOfRange(f"Leaf index {index} out of range for {tree_size} leaves")

    sides = []
    while tree_size > 1:
        k = largest_power_of_two_less_than(tree_size)
        if index < k:
            sides.append(False)
            tree_size = k
        else:
            sides.append(True)
            index -= k
            tree_size -= k
    sides.reverse()
    return sides


def compute_root_from_audit_path(
    leaf_hash: bytes,
    index: int,
    tree_size: int,
    path: Sequence[bytes],
    hasher: Optional[Hasher] = None,
) -> bytes:
    """
    Rebuild the root from a leaf digest and its audit path.

    Args:
        leaf_hash: Leaf digest of the proven entry
        index: 0-based position of the entry
        tree_size: Number of leaves in the tree the path belongs to
        path: Sibling digests, leaf-to-root order
        hasher: Optional hasher overriding the configured default

    Returns:
        The reconstructed root digest

    Raises:
        IndexOutOfRange: If index is not in [0, tree_size)
        InvalidProof: If the path length does not match the tree shape

    Examples:
        >>> root = compute_root_from_audit_path(leaf, 3, 7, path)
    """
    hasher = resolve_hasher(hasher)
    sides = sibling_sides(index, tree_size)
    if len(path) != len(sides):
        raise InvalidProof(
            f"Audit path for index {index} of {tree_size} needs {len(sides)} "
            f"elements, got {len(path)}"
        )

    current = leaf_hash
    for sibling, on_left in zip(path, sides):
        if on_left:
            current = hasher.node_hash(sibling, current)
        else:
            current = hasher.node_hash(current, sibling)
    return current


def verify_inclusion_hash(
    leaf_hash: bytes,
    index: int,
    tree_size: int,
    path: Sequence[bytes],
    root: bytes,
    hasher: Optional[Hasher] = None,
) -> bool:
    """Check an audit path for an already hashed leaf against a root."""
    try:
        computed = compute_root_from_audit_path(leaf_hash, index, tree_size, path, hasher)
    except (IndexOutOfRange, InvalidProof) as e:
        logger.debug("Rejected audit path: %s", e)
        return False
    return computed == root


def verify_inclusion(
    entry: bytes,
    index: int,
    tree_size: int,
    path: Sequence[bytes],
    root: bytes,
    hasher: Optional[Hasher] = None,
) -> bool:
    """
    Verify that `entry` sits at `index` in the tree committed to by `root`.

    Args:
        entry: Raw entry bytes
        index: Claimed 0-based position
        tree_size: Number of leaves the root commits to
        path: Audit path, leaf-to-root order
        root: Expected root digest
        hasher: Optional hasher overriding the configured default

    Returns:
        True if the path reproduces the root
    """
    hasher = resolve_hasher(hasher)
    return verify_inclusion_hash(hasher.leaf_hash(entry), index, tree_size, path, root, hasher)


def verify_consistency(
    first: int,
    second: int,
    first_root: bytes,
    second_root: bytes,
    proof: Sequence[bytes],
    hasher: Optional[Hasher] = None,
) -> bool:
    """
    Verify that the tree of `first` leaves is a prefix of the tree of `second`.

    Folds the proof into both roots at once, using the bits of first - 1 and
    second - 1 to decide whether each element is a left or right sibling.

    Args:
        first: Size of the older tree
        second: Size of the newer tree
        first_root: Root of the older tree
        second_root: Root of the newer tree
        proof: Consistency proof, as built by consistency_proof
        hasher: Optional hasher overriding the configured default

    Returns:
        True if the proof shows second_root extends first_root
    """
    hasher = resolve_hasher(hasher)

    if not 0 <= first <= second:
        logger.debug("Rejected consistency proof: sizes %d -> %d", first, second)
        return False
    if first == second:
        return not proof and first_root == second_root
    if first == 0:
        return not proof
    if not proof:
        return False

    nodes = list(proof)
    if is_power_of_two(first):
        # The old root is itself a node of the new tree
        nodes.insert(0, first_root)

    fn, sn = first - 1, second - 1
    while fn & 1:
        fn >>= 1
        sn >>= 1

    fr = sr = nodes[0]
    for c in nodes[1:]:
        if sn == 0:
            return False
        if fn & 1 or fn == sn:
            fr = hasher.node_hash(c, fr)
            sr = hasher.node_hash(c, sr)
            while not fn & 1 and fn != 0:
                fn >>= 1
                sn >>= 1
        else:
            sr = hasher.node_hash(sr, c)
        fn >>= 1
        sn >>= 1

    return sn == 0 and fr == first_root and sr == second_root
