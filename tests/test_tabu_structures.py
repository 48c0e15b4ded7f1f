"""
Unit tests for tabu search memory structures and hashing.
"""

import unittest

import numpy as np

from metaopt.algorithms.tabu_search import (
    FNV_OFFSET_BASIS, FNV_PRIME, FrequencyMemory, TabuList,
    default_hash, hash_float_array, hash_int_array
)


class TestTabuList(unittest.TestCase):
    """Test the bounded FIFO tabu list."""

    def test_fifo_eviction(self):
        """Test that the oldest entry is evicted first."""
        tabu = TabuList(3)
        for h in (1, 2, 3, 4):
            tabu.add(h)
        self.assertEqual(tabu.to_list(), [2, 3, 4])
        self.assertNotIn(1, tabu)
        self.assertIn(4, tabu)
        self.assertEqual(len(tabu), 3)

    def test_resize_keeps_recent(self):
        """Test shrinking keeps the newest entries."""
        tabu = TabuList(5)
        for h in range(5):
            tabu.add(h)
        tabu.resize(2)
        self.assertEqual(tabu.to_list(), [3, 4])
        self.assertEqual(tabu.capacity, 2)

        tabu.resize(4)
        tabu.add(9)
        self.assertEqual(tabu.to_list(), [3, 4, 9])

    def test_capacity_floor(self):
        """Test capacity never drops below one."""
        tabu = TabuList(0)
        self.assertEqual(tabu.capacity, 1)
        tabu.resize(-3)
        self.assertEqual(tabu.capacity, 1)


class TestFrequencyMemory(unittest.TestCase):
    """Test the bounded frequency memory."""

    def test_counts(self):
        """Test visit counting."""
        memory = FrequencyMemory(4)
        memory.increment(10)
        memory.increment(10)
        memory.increment(11)
        self.assertEqual(memory.get(10), 2)
        self.assertEqual(memory.get(11), 1)
        self.assertEqual(memory.get(12), 0)

    def test_evicts_least_frequent(self):
        """Test the least frequent entry is evicted when full."""
        memory = FrequencyMemory(2)
        memory.increment(1)
        memory.increment(1)
        memory.increment(2)
        memory.increment(3)
        self.assertEqual(memory.get(2), 0)
        self.assertEqual(memory.get(1), 2)
        self.assertEqual(memory.get(3), 1)
        self.assertEqual(len(memory), 2)

    def test_tie_evicts_first_inserted(self):
        """Test ties evict the earliest entry."""
        memory = FrequencyMemory(2)
        memory.increment(5)
        memory.increment(6)
        memory.increment(7)
        self.assertEqual(memory.get(5), 0)
        self.assertEqual(memory.get(6), 1)
        self.assertEqual(memory.get(7), 1)


class TestHashing(unittest.TestCase):
    """Test FNV-1a hashing of solutions."""

    def test_empty_is_offset_basis(self):
        """Test the hash of an empty array."""
        self.assertEqual(hash_int_array(np.array([], dtype=np.int64)), FNV_OFFSET_BASIS)

    def test_single_value(self):
        """Test one FNV-1a round."""
        expected = ((FNV_OFFSET_BASIS ^ 7) * FNV_PRIME) & 0xFFFFFFFFFFFFFFFF
        self.assertEqual(hash_int_array(np.array([7])), expected)

    def test_order_sensitive(self):
        """Test that permutations of the same values hash differently."""
        a = hash_int_array(np.array([0, 1, 2, 3]))
        b = hash_int_array(np.array([0, 1, 3, 2]))
        self.assertNotEqual(a, b)
        self.assertEqual(a, hash_int_array(np.array([0, 1, 2, 3])))

    def test_float_discretization(self):
        """Test floats closer than the 1e-4 grid share a hash."""
        a = hash_float_array(np.array([0.12341, 1.5]))
        b = hash_float_array(np.array([0.12349, 1.5]))
        c = hash_float_array(np.array([0.1236, 1.5]))
        self.assertEqual(a, b)
        self.assertNotEqual(a, c)

    def test_float_hash_keeps_high_bits(self):
        """Test discretized floats are mixed in at full 64-bit width."""
        far = 268435456.0  # 2**28, discretizes to 625 * 2**32
        self.assertNotEqual(hash_float_array(np.array([0.0])), hash_float_array(np.array([far])))
        expected = ((FNV_OFFSET_BASIS ^ 2684354560000) * FNV_PRIME) & 0xFFFFFFFFFFFFFFFF
        self.assertEqual(hash_float_array(np.array([far])), expected)

    def test_default_hash_by_dtype(self):
        """Test the default hash follows the dtype."""
        self.assertIs(default_hash(np.array([1, 2])), hash_int_array)
        self.assertIs(default_hash(np.array([1.0, 2.0])), hash_float_array)


if __name__ == '__main__':
    unittest.main()
