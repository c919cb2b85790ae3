import random
import string
import unittest

import numpy as np

from tally import Counter, natural_order, reverse_order
from tally.core.ranking import select_top_k, sort_entries


class TestMostCommon(unittest.TestCase):

    def test_most_common_counts_descending(self):
        counter = Counter("eaddbbccc")
        by_frequency = counter.most_common()
        self.assertEqual(by_frequency[0], ("c", 3))
        self.assertCountEqual(by_frequency[1:3], [("d", 2), ("b", 2)])
        self.assertEqual(by_frequency[3:], [("e", 1), ("a", 1)])

    def test_most_common_is_stable(self):
        counter = Counter("eaddbbccc")
        self.assertEqual(
            counter.most_common(),
            [("c", 3), ("d", 2), ("b", 2), ("e", 1), ("a", 1)],
        )

    def test_most_common_ordered(self):
        counter = Counter("eaddbbccc")
        self.assertEqual(
            counter.most_common_ordered(),
            [("c", 3), ("b", 2), ("d", 2), ("a", 1), ("e", 1)],
        )

    def test_most_common_tiebreaker(self):
        counter = Counter("eaddbbccc")
        self.assertEqual(
            counter.most_common_tiebreaker(reverse_order),
            [("c", 3), ("d", 2), ("b", 2), ("e", 1), ("a", 1)],
        )

    def test_most_common_ordered_ignores_insertion_order(self):
        forward = Counter("eaddbbccc")
        backward = Counter("cccbbddae")
        self.assertEqual(forward.most_common_ordered(), backward.most_common_ordered())

    def test_most_common_empty(self):
        self.assertEqual(Counter().most_common(), [])
        self.assertEqual(Counter().most_common_ordered(), [])

    def test_most_common_copies(self):
        counter = Counter("aab")
        ranked = counter.most_common()
        counter["b"] += 10
        self.assertEqual(ranked, [("a", 2), ("b", 1)])

    def test_tiebreaker_only_sees_equal_counts(self):
        counter = Counter("abracadabra")
        seen = []

        def tiebreaker(a, b):
            seen.append((a, b))
            return natural_order(a, b)

        ranked = counter.most_common_tiebreaker(tiebreaker)
        self.assertEqual(ranked, [("a", 5), ("b", 2), ("r", 2), ("c", 1), ("d", 1)])
        self.assertTrue(seen)
        for a, b in seen:
            self.assertEqual(counter[a], counter[b])

    def test_tiebreaker_must_be_callable(self):
        with self.assertRaises(TypeError):
            Counter("ab").most_common_tiebreaker("not a function")


class TestKMostCommon(unittest.TestCase):

    def test_k_most_common_ordered(self):
        counter = Counter("abracadabra")
        all_ordered = counter.most_common_ordered()
        for k in range(len(counter) + 3):
            self.assertEqual(counter.k_most_common_ordered(k), all_ordered[:k])

    def test_k_most_common_with_tiebreaker(self):
        counter = Counter("abracadabra")
        ordered = counter.most_common_tiebreaker(reverse_order)
        for k in range(len(counter) + 1):
            self.assertEqual(counter.k_most_common_ordered(k, reverse_order), ordered[:k])

    def test_k_most_common_random_data(self):
        rng = np.random.default_rng(1234)
        data = rng.integers(0, 500, size=20_000).tolist()
        counter = Counter(data)
        all_ordered = counter.most_common_ordered()
        for k in (1, 2, 5, 10, 50, 100, len(counter) - 1, len(counter), len(counter) + 1):
            self.assertEqual(counter.k_most_common_ordered(k), all_ordered[:k])

    def test_k_most_common_random_words(self):
        random.seed(42)
        words = ["".join(random.choices(string.ascii_lowercase[:4], k=3)) for _ in range(2000)]
        counter = Counter(words)
        all_ordered = counter.most_common_ordered()
        for k in range(0, len(counter) + 2, 7):
            self.assertEqual(counter.k_most_common_ordered(k), all_ordered[:k])

    def test_k_zero(self):
        self.assertEqual(Counter("abc").k_most_common_ordered(0), [])
        self.assertEqual(Counter().k_most_common_ordered(3), [])

    def test_k_negative(self):
        with self.assertRaises(ValueError):
            Counter("abc").k_most_common_ordered(-1)


class TestRankingHelpers(unittest.TestCase):

    def test_sort_entries_partial_order_counts(self):
        entries = [("x", 1.5), ("y", 2.5), ("z", 1.5)]
        self.assertEqual(sort_entries(entries), [("y", 2.5), ("x", 1.5), ("z", 1.5)])

    def test_select_top_k_without_size(self):
        entries = [(chr(ord("a") + i), i % 4) for i in range(20)]
        expected = sort_entries(entries)
        for k in range(len(entries) + 2):
            self.assertEqual(select_top_k(iter(entries), k), expected[:k])

    def test_select_top_k_negative(self):
        with self.assertRaises(ValueError):
            select_top_k([], -3)

    def test_natural_and_reverse_order(self):
        self.assertEqual(natural_order(1, 2), -1)
        self.assertEqual(natural_order(2, 1), 1)
        self.assertEqual(natural_order(2, 2), 0)
        self.assertEqual(reverse_order(1, 2), 1)


if __name__ == "__main__":
    unittest.main()
