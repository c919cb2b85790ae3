import unittest

from tally import Counter, DefaultHashStrategy, KeyedDict, KeyFunctionStrategy


class TestKeyedDict(unittest.TestCase):

    def test_first_key_is_representative(self):
        d = KeyedDict(str.casefold)
        d["Apple"] = 1
        d["APPLE"] = 2
        self.assertEqual(len(d), 1)
        self.assertEqual(list(d), ["Apple"])
        self.assertEqual(d["apple"], 2)

    def test_delete_and_contains(self):
        d = KeyedDict(str.casefold)
        d["Pear"] = 3
        self.assertIn("PEAR", d)
        del d["pear"]
        self.assertNotIn("Pear", d)
        with self.assertRaises(KeyError):
            del d["pear"]

    def test_contains_rejects_unsupported_keys(self):
        d = KeyedDict(str.casefold)
        d["a"] = 1
        self.assertNotIn(42, d)

    def test_clear(self):
        d = KeyedDict(abs)
        d[-1] = "x"
        d[2] = "y"
        d.clear()
        self.assertEqual(len(d), 0)


class TestStrategies(unittest.TestCase):

    def test_default_strategy(self):
        strategy = DefaultHashStrategy()
        self.assertEqual(strategy.new_map(10), {})
        self.assertEqual(strategy, DefaultHashStrategy())
        self.assertEqual(Counter().hash_strategy, strategy)

    def test_key_function_requires_callable(self):
        with self.assertRaises(TypeError):
            KeyFunctionStrategy("casefold")

    def test_case_insensitive_counter(self):
        strategy = KeyFunctionStrategy(str.casefold)
        counter = Counter("The cat saw THE dog and the bird".split(), hash_strategy=strategy)
        self.assertEqual(counter["the"], 3)
        self.assertEqual(counter["THE"], 3)
        self.assertEqual(len(counter), 6)
        self.assertEqual(counter.most_common()[0], ("The", 3))

    def test_strategy_flows_through_arithmetic(self):
        strategy = KeyFunctionStrategy(str.casefold)
        left = Counter(["A", "b"], hash_strategy=strategy)
        right = Counter(["a", "B", "B"], hash_strategy=strategy)

        total = left + right
        self.assertIs(total.hash_strategy, strategy)
        self.assertEqual(total["a"], 2)
        self.assertEqual(total["b"], 3)

        self.assertEqual(dict((right - left).items()), {"B": 1})
        self.assertEqual(len(left & right), 2)

    def test_strategy_survives_copy(self):
        strategy = KeyFunctionStrategy(abs)
        counter = Counter([1, -1, 2], hash_strategy=strategy)
        clone = counter.copy()
        self.assertIs(clone.hash_strategy, strategy)
        self.assertEqual(clone[-2], 1)
        self.assertEqual(clone[1], 2)


if __name__ == "__main__":
    unittest.main()
