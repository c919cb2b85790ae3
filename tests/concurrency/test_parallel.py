import unittest

import numpy as np

from tally import Counter, KeyFunctionStrategy, Parallel


class TestParallelCount(unittest.TestCase):

    def setUp(self):
        rng = np.random.default_rng(7)
        self.data = rng.integers(0, 100, size=10_000).tolist()

    def test_count_matches_serial(self):
        result = Parallel.count(self.data, max_workers=4)
        self.assertEqual(result, Counter(self.data))
        self.assertEqual(result.total(), len(self.data))

    def test_count_with_chunk_size(self):
        result = Parallel.count(self.data, max_workers=3, chunk_size=17)
        self.assertEqual(result, Counter(self.data))

    def test_count_streaming(self):
        result = Parallel.count(iter(self.data), max_workers=4, streaming=True)
        self.assertEqual(result, Counter(self.data))

    def test_count_streaming_generator(self):
        result = Parallel.count((x % 7 for x in range(1000)), streaming=True, chunk_size=33)
        self.assertEqual(result, Counter(x % 7 for x in range(1000)))

    def test_count_empty(self):
        self.assertEqual(len(Parallel.count([])), 0)
        self.assertEqual(len(Parallel.count([], streaming=True)), 0)

    def test_count_passes_config(self):
        strategy = KeyFunctionStrategy(str.casefold)
        words = ["Alpha", "ALPHA", "beta", "alpha", "Beta"] * 50
        result = Parallel.count(words, max_workers=2, chunk_size=7, hash_strategy=strategy, count_type=float)
        self.assertIs(result.hash_strategy, strategy)
        self.assertIs(result.count_type, float)
        self.assertEqual(result["alpha"], 150.0)
        self.assertEqual(result["BETA"], 100.0)

    def test_count_mapping_reads_counts(self):
        mapping = {"a": 3, "b": 5}
        self.assertEqual(Parallel.count(mapping, max_workers=2), Counter(mapping))
        self.assertEqual(Parallel.count(mapping).total(), 8)

        counter = Counter("abbccc")
        result = Parallel.count(counter, streaming=True)
        self.assertEqual(result, counter)
        self.assertIsNot(result, counter)

    def test_invalid_chunk_size(self):
        with self.assertRaises(ValueError):
            Parallel.count(self.data, chunk_size=0)

    def test_worker_exception_propagates(self):
        data = [1, 2, [3], 4] * 10
        with self.assertRaises(TypeError):
            Parallel.count(data, max_workers=2, chunk_size=2)


class TestParallelMerge(unittest.TestCase):

    def test_merge(self):
        parts = [Counter("abc"), Counter("bcd"), Counter("cde")]
        merged = Parallel.merge(parts)
        self.assertEqual(merged, Counter("abcbcdcde"))
        self.assertEqual(parts[0], Counter("abc"))

    def test_merge_order_does_not_matter(self):
        parts = [Counter("xxy"), Counter("yz"), Counter("zzz")]
        self.assertEqual(Parallel.merge(parts), Parallel.merge(reversed(parts)))

    def test_merge_empty(self):
        merged = Parallel.merge([], count_type=float)
        self.assertEqual(len(merged), 0)
        self.assertIs(merged.count_type, float)


if __name__ == "__main__":
    unittest.main()
