"""
tests/rtqueue/memory/test_allocator.py
Tests de la Arena física (MemoryPool).
"""
import logging
import unittest
import pytest

from rtqueue.errors import DeadHandleError
from rtqueue.memory.allocator import MemoryPool


class TestMemoryPool(unittest.TestCase):

    def test_alloc_and_get(self):
        pool = MemoryPool("t", page_size=4)
        idx = pool.alloc(["record"])
        self.assertEqual(pool.get(idx), ["record"])
        self.assertEqual(pool.ref_count(idx), 1)

    def test_lifo_reuse(self):
        """Un slot liberado es el primero en reutilizarse (caché caliente)."""
        pool = MemoryPool("t", page_size=4)
        a = pool.alloc("a")
        pool.alloc("b")
        self.assertTrue(pool.release(a))
        self.assertEqual(pool.alloc("c"), a)

    def test_retain_release(self):
        pool = MemoryPool("t", page_size=4)
        idx = pool.alloc("x")
        pool.retain(idx)
        self.assertFalse(pool.release(idx))
        self.assertTrue(pool.release(idx))
        with self.assertRaises(DeadHandleError):
            pool.get(idx)
        with self.assertRaises(DeadHandleError):
            pool.release(idx)

    def test_out_of_range(self):
        pool = MemoryPool("t", page_size=4)
        with self.assertRaises(DeadHandleError):
            pool.get(1000)
        with self.assertRaises(DeadHandleError):
            pool.retain(-1)
        self.assertEqual(pool.ref_count(1000), 0)

    def test_expansion(self):
        pool = MemoryPool("grow", page_size=4)
        with self.assertLogs("rtqueue.memory.allocator", level=logging.DEBUG) as logs:
            handles = [pool.alloc(i) for i in range(10)]

        self.assertEqual(len(set(handles)), 10)
        self.assertEqual([pool.get(h) for h in handles], list(range(10)))
        self.assertTrue(any("expanding" in line for line in logs.output))

        stats = pool.stats()
        self.assertGreaterEqual(stats["capacity"], 10)
        self.assertEqual(stats["active"], 10)
        self.assertEqual(stats["allocations"], 10)
        self.assertEqual(stats["free"], stats["capacity"] - 10)

    def test_stats_after_release(self):
        pool = MemoryPool("t", page_size=4)
        handles = [pool.alloc(i) for i in range(3)]
        for h in handles:
            pool.release(h)
        stats = pool.stats()
        self.assertEqual(stats["active"], 0)
        self.assertEqual(stats["allocations"], 3)
        self.assertEqual(stats["fragmentation"], 1.0)


if __name__ == '__main__':
    unittest.main()
