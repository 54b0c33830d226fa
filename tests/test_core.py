"""
Tests for the stateless Merkle Tree Hash, audit path and consistency proof

The 7-leaf tree used throughout:

               hash
              /    \
             k      l
            / \    / \
           g   h  i   j
          / \ / \ / \  |
          a b c d e f  d6
"""

import unittest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from merkle_log import (
    Hasher,
    IndexOutOfRange,
    InvalidRange,
    audit_path,
    consistency_proof,
    largest_power_of_two_less_than,
    levels,
    root_hash,
    verify_consistency,
    verify_inclusion,
)
from merkle_log.utils import hex_to_bytes

SHA256 = Hasher("sha256")

# RFC 6962 reference leaves and the roots of their first 1..8 entries
REFERENCE_LEAVES = [
    "", "00", "10", "2021", "3031", "40414243",
    "5051525354555657", "606162636465666768696a6b6c6d6e6f",
]
REFERENCE_ROOTS = [
    "6e340b9cffb37a989ca544e6bb780a2c78901d3fb33738768511a30617afa01d",
    "fac54203e7cc696cf0dfcb42c92a1d9dbaf70ad9e621f4bd8d98662f00e3c125",
    "aeb6bcfe274b70a14fb067a5e5578264db0fa9b51af5e0ba159158f329e06e77",
    "d37ee418976dd95753c1c73862b9398fa2a2cf9b4ff0fdfe8b30cd95209614b7",
    "4e3bbb1f7b478dcfe71fb631631519a3bca12c9aefca1612bfce4c13a86264d4",
    "76e67dadbcdf1e10e1b74ddc608abd2f98dfb16fbce75277b5232a127f2087ef",
    "ddb89be403809e325750d3d263cd78929c2942b7942a34b77e122c9594a74c8c",
    "5dc9da79a70659a9ad559cb701ded9a2ab9d823aad2f4960cfe370eff4604328",
]


def make_entries(limit, start=0):
    return [b"d%d" % i for i in range(start, limit)]


class TestDecomposition(unittest.TestCase):

    def test_largest_power_of_two_less_than(self):
        cases = {0: 0, 1: 0, 2: 1, 3: 2, 4: 2, 5: 4, 7: 4, 8: 4, 9: 8, 16: 8, 17: 16}
        for n, expected in cases.items():
            self.assertEqual(largest_power_of_two_less_than(n), expected, f"n={n}")

    def test_split_bounds(self):
        for n in range(2, 200):
            k = largest_power_of_two_less_than(n)
            self.assertTrue(k < n <= 2 * k, f"n={n} k={k}")
            self.assertEqual(k & (k - 1), 0)

    def test_levels(self):
        cases = {1: 1, 2: 2, 3: 3, 4: 3, 5: 4, 7: 4, 8: 4, 9: 5, 16: 5, 17: 6}
        for n, expected in cases.items():
            self.assertEqual(levels(n), expected, f"n={n}")
        self.assertEqual(levels(0), 1)


class TestRootHash(unittest.TestCase):

    def test_empty_list(self):
        self.assertEqual(root_hash([], SHA256), SHA256.empty_hash())

    def test_single_entry_is_leaf_hash(self):
        self.assertEqual(root_hash([b"d0"], SHA256), SHA256.leaf_hash(b"d0"))

    def test_reference_roots(self):
        leaves = [bytes.fromhex(h) for h in REFERENCE_LEAVES]
        for n, expected in enumerate(REFERENCE_ROOTS, start=1):
            self.assertEqual(root_hash(leaves[:n], SHA256), hex_to_bytes(expected), f"n={n}")

    def test_seven_leaf_shape(self):
        D = make_entries(7)
        a, b, c, d, e, f, d6 = [SHA256.leaf_hash(x) for x in D]
        g, h, i = SHA256.node_hash(a, b), SHA256.node_hash(c, d), SHA256.node_hash(e, f)
        k, l = SHA256.node_hash(g, h), SHA256.node_hash(i, d6)
        self.assertEqual(root_hash(D, SHA256), SHA256.node_hash(k, l))


class TestAuditPath(unittest.TestCase):

    def setUp(self):
        self.D = make_entries(7)
        a, b, c, d, e, f, d6 = [SHA256.leaf_hash(x) for x in self.D]
        self.g, self.h = SHA256.node_hash(a, b), SHA256.node_hash(c, d)
        self.i = SHA256.node_hash(e, f)
        self.k = SHA256.node_hash(self.g, self.h)
        self.l = SHA256.node_hash(self.i, d6)
        self.leaves = [a, b, c, d, e, f, d6]

    def test_path_lengths(self):
        self.assertEqual(len(audit_path(0, self.D, SHA256)), 3)
        self.assertEqual(len(audit_path(3, self.D, SHA256)), 3)
        self.assertEqual(len(audit_path(4, self.D, SHA256)), 3)
        self.assertEqual(len(audit_path(6, self.D, SHA256)), 2)

    def test_path_contents(self):
        a, b, c, d, e, f, d6 = self.leaves
        # [b, h, l] for d0, [c, g, l] for d3, [f, j, k] for d4, [i, k] for d6
        self.assertEqual(audit_path(0, self.D, SHA256), [b, self.h, self.l])
        self.assertEqual(audit_path(3, self.D, SHA256), [c, self.g, self.l])
        self.assertEqual(audit_path(4, self.D, SHA256), [f, d6, self.k])
        self.assertEqual(audit_path(6, self.D, SHA256), [self.i, self.k])

    def test_single_entry_has_empty_path(self):
        self.assertEqual(audit_path(0, [b"only"], SHA256), [])

    def test_out_of_range(self):
        for index in (-1, 7, 100):
            with self.assertRaises(IndexOutOfRange):
                audit_path(index, self.D, SHA256)
        with self.assertRaises(IndexOutOfRange):
            audit_path(0, [], SHA256)

    def test_every_path_verifies(self):
        for n in range(1, 34):
            D = make_entries(n)
            root = root_hash(D, SHA256)
            for m in range(n):
                path = audit_path(m, D, SHA256)
                self.assertTrue(verify_inclusion(D[m], m, n, path, root, SHA256), f"m={m} n={n}")


class TestConsistencyProof(unittest.TestCase):

    def setUp(self):
        self.D = make_entries(7)

    def test_proof_lengths(self):
        self.assertEqual(len(consistency_proof(3, self.D, SHA256)), 4)
        self.assertEqual(len(consistency_proof(4, self.D, SHA256)), 1)
        self.assertEqual(len(consistency_proof(6, self.D, SHA256)), 3)

    def test_proof_contents(self):
        a, b, c, d, e, f, d6 = [SHA256.leaf_hash(x) for x in self.D]
        g, h, i = SHA256.node_hash(a, b), SHA256.node_hash(c, d), SHA256.node_hash(e, f)
        j = d6
        k, l = SHA256.node_hash(g, h), SHA256.node_hash(i, j)
        self.assertEqual(consistency_proof(3, self.D, SHA256), [c, d, g, l])
        self.assertEqual(consistency_proof(4, self.D, SHA256), [l])
        self.assertEqual(consistency_proof(6, self.D, SHA256), [i, j, k])

    def test_degenerate_sizes(self):
        self.assertEqual(consistency_proof(7, self.D, SHA256), [])
        self.assertEqual(consistency_proof(0, self.D, SHA256), [])
        self.assertEqual(consistency_proof(0, [], SHA256), [])

    def test_invalid_sizes(self):
        with self.assertRaises(InvalidRange):
            consistency_proof(8, self.D, SHA256)
        with self.assertRaises(IndexOutOfRange):
            consistency_proof(-1, self.D, SHA256)

    def test_every_proof_verifies(self):
        for n in range(1, 25):
            D = make_entries(n)
            new_root = root_hash(D, SHA256)
            for m in range(n + 1):
                proof = consistency_proof(m, D, SHA256)
                old_root = root_hash(D[:m], SHA256)
                self.assertTrue(
                    verify_consistency(m, n, old_root, new_root, proof, SHA256),
                    f"m={m} n={n}",
                )

    def test_deterministic(self):
        self.assertEqual(consistency_proof(5, self.D, SHA256), consistency_proof(5, self.D, SHA256))


if __name__ == '__main__':
    unittest.main()
