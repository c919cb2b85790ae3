import json
import unittest

from tally import (
    Counter,
    CounterDecodeError,
    TallyError,
    from_json,
    from_mapping,
    from_yaml,
    to_json,
    to_mapping,
    to_yaml,
)


class TestJson(unittest.TestCase):

    def test_round_trip(self):
        a = Counter("abbccc")
        b = from_json(to_json(a))
        self.assertEqual(a, b)

    def test_encoded_form_is_plain_object(self):
        encoded = to_json(Counter("abb"), sort_keys=True)
        self.assertEqual(json.loads(encoded), {"a": 1, "b": 2})

    def test_zero_and_negative_entries_survive(self):
        a = Counter.from_mapping({"a": 0, "b": -4})
        b = from_json(to_json(a))
        self.assertIn("a", b)
        self.assertEqual(b["b"], -4)

    def test_count_type_conversion(self):
        b = from_json('{"a": 2, "b": 3}', count_type=float)
        self.assertIsInstance(b["a"], float)
        self.assertIs(b.count_type, float)

    def test_invalid_json(self):
        with self.assertRaises(CounterDecodeError) as ctx:
            from_json("{not json")
        self.assertIsInstance(ctx.exception.__cause__, json.JSONDecodeError)

    def test_not_a_mapping(self):
        with self.assertRaises(CounterDecodeError):
            from_json("[1, 2, 3]")

    def test_non_numeric_count(self):
        with self.assertRaises(CounterDecodeError):
            from_json('{"a": "three"}')
        with self.assertRaises(CounterDecodeError):
            from_json('{"a": true}')

    def test_count_does_not_fit_type(self):
        with self.assertRaises(CounterDecodeError):
            from_json('{"a": Infinity}', count_type=int)


class TestYaml(unittest.TestCase):

    def test_round_trip(self):
        a = Counter([1, 2, 2, "x"])
        b = from_yaml(to_yaml(a))
        self.assertEqual(a, b)
        self.assertEqual(b[2], 2)

    def test_invalid_yaml(self):
        with self.assertRaises(CounterDecodeError):
            from_yaml("a: [1, 2")

    def test_not_a_mapping(self):
        with self.assertRaises(CounterDecodeError):
            from_yaml("- a\n- b\n")

    def test_non_numeric_count(self):
        with self.assertRaises(CounterDecodeError):
            from_yaml("a: lots\n")


class TestMapping(unittest.TestCase):

    def test_to_mapping_is_a_copy(self):
        counter = Counter("aab")
        mapping = to_mapping(counter)
        mapping["a"] = 100
        self.assertEqual(counter["a"], 2)

    def test_from_mapping_with_capacity(self):
        counter = from_mapping({"a": 1}, capacity=4)
        self.assertEqual(counter["a"], 1)

        counter = from_json('{"x": 3}', capacity=8, count_type=float)
        self.assertEqual(counter["x"], 3.0)

    def test_from_mapping_rejects_non_mapping(self):
        with self.assertRaises(CounterDecodeError):
            from_mapping(["a", "b"])

    def test_decode_error_hierarchy(self):
        self.assertTrue(issubclass(CounterDecodeError, TallyError))
        self.assertTrue(issubclass(CounterDecodeError, ValueError))


if __name__ == "__main__":
    unittest.main()
