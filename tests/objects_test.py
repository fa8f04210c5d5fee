import unittest

from lox.grammar import ast
from lox.grammar.tokens import Token, TokenType
from lox.lang.error import UndefinedPropertyError
from lox.runtime.environment import Environment
from lox.runtime.natives import NATIVES, clock, define_natives
from lox.runtime.objects import (LoxClass, LoxFunction, LoxInstance, NativeFunction, is_equal, is_truthy,
                                 stringify)


def name(lexeme):
    return Token(TokenType.IDENTIFIER, lexeme, None, 1)


def method(lexeme, *params):
    return ast.Function(name(lexeme), [name(param) for param in params], [])


class ValueTestCase(unittest.TestCase):

    def test_stringify(self):
        cases = {
            "nil": None,
            "true": True,
            "false": False,
            "3": 3.0,
            "3.5": 3.5,
            "-2": -2.0,
            "0.1": 0.1,
            "\"hi\"": "hi",
            "\"\"": "",
        }
        for expected, value in cases.items():
            self.assertEqual(expected, stringify(value), expected)

    def test_is_truthy(self):
        should_fail = [None, False]
        for case in should_fail:
            self.assertFalse(is_truthy(case), case)

        should_pass = [True, 0.0, 1.0, "", "a", NativeFunction("f", 0, lambda: None)]
        for case in should_pass:
            self.assertTrue(is_truthy(case), case)

    def test_is_equal(self):
        native = NativeFunction("f", 0, lambda: None)

        should_fail = [(None, False), (True, 1.0), (False, 0.0), ("1", 1.0), (1.0, 2.0),
                       (native, NativeFunction("f", 0, lambda: None))]
        for a, b in should_fail:
            self.assertFalse(is_equal(a, b), (a, b))

        should_pass = [(None, None), (1.0, 1.0), ("a", "a"), (True, True), (native, native)]
        for a, b in should_pass:
            self.assertTrue(is_equal(a, b), (a, b))


class CallableTestCase(unittest.TestCase):

    def test_native(self):
        native = NativeFunction("add", 2, lambda a, b: a + b)
        self.assertEqual(2, native.arity())
        self.assertEqual(3.0, native.call(None, [1.0, 2.0]))
        self.assertEqual("<native fn add>", str(native))

    def test_clock(self):
        self.assertIsInstance(clock(), float)

        env = Environment()
        define_natives(env)
        self.assertIs(NATIVES[0], env.get(name("clock")))
        self.assertEqual(0, env.get(name("clock")).arity())

    def test_function(self):
        function = LoxFunction(method("f", "a", "b"), Environment())
        self.assertEqual(2, function.arity())
        self.assertEqual("<fn f>", str(function))

    def test_class_arity(self):
        plain = LoxClass("Plain", None, {})
        self.assertEqual(0, plain.arity())

        base = LoxClass("Base", None, {"init": LoxFunction(method("init", "x"), Environment(), True)})
        self.assertEqual(1, base.arity())

        derived = LoxClass("Derived", base, {})
        self.assertEqual(1, derived.arity())
        self.assertEqual("Derived", str(derived))

    def test_find_method(self):
        greet = LoxFunction(method("greet"), Environment())
        base = LoxClass("Base", None, {"greet": greet})
        derived = LoxClass("Derived", base, {})

        self.assertIs(greet, derived.find_method("greet"))
        self.assertIsNone(derived.find_method("missing"))


class InstanceTestCase(unittest.TestCase):

    def setUp(self):
        self.klass = LoxClass("Thing", None, {"m": LoxFunction(method("m"), Environment())})
        self.instance = LoxInstance(self.klass)

    def test_fields(self):
        self.instance.set(name("x"), 1.0)
        self.assertEqual(1.0, self.instance.get(name("x")))
        self.assertEqual("Thing instance", str(self.instance))

    def test_bound_methods(self):
        first = self.instance.get(name("m"))
        second = self.instance.get(name("m"))

        self.assertIsNot(first, second)
        self.assertIs(self.instance, first.closure.get_at(0, "this"))

    def test_fields_shadow_methods(self):
        self.instance.set(name("m"), "field")
        self.assertEqual("field", self.instance.get(name("m")))

    def test_undefined_property(self):
        with self.assertRaises(UndefinedPropertyError) as context:
            self.instance.get(name("nope"))
        self.assertEqual("Undefined property 'nope'.", context.exception.msg)


if __name__ == '__main__':
    unittest.main()
