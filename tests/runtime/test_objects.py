import unittest

from gokid.runtime.objects import (
    Array, BREAK, Boolean, Builtin, CONTINUE, Error, ErrorKind, FALSE, Float, Function, Hash, Hashable, HashKey, Integer,
    NULL, ReturnValue, String, TRUE, fnv1a, is_error, native_bool, wrap_int64)


class IntegerTestCase(unittest.TestCase):

    def test_wrap_int64(self):
        cases = {
            0: 0,
            -1: -1,
            2 ** 63 - 1: 2 ** 63 - 1,
            2 ** 63: -2 ** 63,
            -2 ** 63 - 1: 2 ** 63 - 1,
            2 ** 64 + 5: 5,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, wrap_int64(case), case)
            self.assertEqual(expected, Integer(case).value, case)


class HashKeyTestCase(unittest.TestCase):

    def test_fnv1a(self):
        self.assertEqual(0xcbf29ce484222325, fnv1a(""))
        self.assertEqual(0xaf63dc4c8601ec8c, fnv1a("a"))

    def test_equal_values(self):
        should_pass = [
            (String("Hello World"), String("Hello World")),
            (Integer(1), Integer(1)),
            (Integer(-1), Integer(-1)),
            (Boolean(True), TRUE),
        ]
        for first, second in should_pass:
            self.assertEqual(first.hash_key(), second.hash_key(), first)

        should_fail = [
            (String("Hello"), String("World")),
            (Integer(1), TRUE),
            (Integer(0), FALSE),
            (Integer(1), Integer(2)),
        ]
        for first, second in should_fail:
            self.assertNotEqual(first.hash_key(), second.hash_key(), (first, second))

        self.assertEqual(HashKey("BOOLEAN", 1), TRUE.hash_key())

    def test_hashable(self):
        for obj in [Integer(1), String("s"), TRUE]:
            self.assertIsInstance(obj, Hashable, obj)
        for obj in [Float(1.0), NULL, Array([]), Hash()]:
            self.assertNotIsInstance(obj, Hashable, obj)


class InspectTestCase(unittest.TestCase):

    def test_inspect(self):
        cases = [
            (Integer(-3), "-3"),
            (Float(2.0), "2.0"),
            (Float(0.5), "0.5"),
            (String("raw text"), "raw text"),
            (TRUE, "true"),
            (FALSE, "false"),
            (NULL, "null"),
            (Array([Integer(1), String("a"), NULL]), "[1, a, null]"),
            (Builtin("len", None), "<builtin len>"),
            (ReturnValue(Integer(4)), "4"),
            (Error.new(ErrorKind.DIVISION_BY_ZERO), "division by zero"),
            (Error.new(ErrorKind.IDENTIFIER_NOT_FOUND, "x"), "identifier not found: x"),
        ]
        for obj, expected in cases:
            self.assertEqual(expected, obj.inspect(), repr(obj))
            self.assertEqual(expected, str(obj), repr(obj))

    def test_hash(self):
        table = Hash()
        table.set(String("a"), Integer(1))
        table.set(Integer(2), TRUE)
        table.set(String("a"), Integer(3))

        self.assertEqual("{a: 3, 2: true}", table.inspect())
        self.assertEqual(3, table.get(String("a")).value)
        self.assertIsNone(table.get(String("b")))

    def test_function(self):
        self.assertEqual("<function()>", Function([], None, None).inspect())


class SingletonTestCase(unittest.TestCase):

    def test_native_bool(self):
        self.assertIs(TRUE, native_bool(1 < 2))
        self.assertIs(FALSE, native_bool([]))

    def test_signals(self):
        self.assertEqual("BREAK", BREAK.KIND)
        self.assertEqual("CONTINUE", CONTINUE.KIND)
        self.assertTrue(is_error(Error("m", ErrorKind.THROWN, Integer(1))))
        self.assertFalse(is_error(NULL))


if __name__ == "__main__":
    unittest.main()
