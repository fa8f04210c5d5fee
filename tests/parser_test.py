import unittest

from lox.grammar import ast
from lox.grammar.printer import to_lisp, to_rpn
from lox_test_utils import parse, parse_expression


def lisp(source):
    statements, handler = parse(source)
    return [to_lisp(statement) for statement in statements], handler


class ExpressionTestCase(unittest.TestCase):

    def test_precedence(self):
        cases = {
            "1 + 2 * 3 - 4": "(- (+ 1 (* 2 3)) 4)",
            "-123 * (45.67)": "(* (- 123) (group 45.67))",
            "1 < 2 == 3 >= 4": "(== (< 1 2) (>= 3 4))",
            "!!true != false": "(!= (! (! true)) false)",
            "a or b and c": "(or a (and b c))",
            "a = b = c": "(= a (= b c))",
            "a.b = 1": "(= (. a b) 1)",
            "f(1)(2).x": "(. (call (call f 1) 2) x)",
            "8 / 4 / 2": "(/ (/ 8 4) 2)",
            "super.m(this, nil)": "(call (super m) this nil)",
            "\"s\" + 3.5": "(+ \"s\" 3.5)",
        }
        for case, expected in cases.items():
            expr, handler = parse_expression(case)
            self.assertFalse(handler.had_error, case)
            self.assertEqual(expected, to_lisp(expr), case)

    def test_rpn(self):
        cases = {
            "(1 + 2) * (4 - 3)": "1 2 + 4 3 - *",
            "-a + b": "a neg b +",
            "f(1, 2)": "1 2 f call/2",
            "x = y or z": "y z or x =",
        }
        for case, expected in cases.items():
            expr, __ = parse_expression(case)
            self.assertEqual(expected, to_rpn(expr), case)

    def test_expect_expression(self):
        expr, handler = parse_expression("1 +")
        self.assertIsNone(expr)
        self.assertEqual(["[line 1] Error at end: Expect expression."], handler.reports)

    def test_unique_ids(self):
        expr, __ = parse_expression("a + a")
        self.assertIsInstance(expr, ast.Binary)
        self.assertNotEqual(expr.left.uid, expr.right.uid)


class StatementTestCase(unittest.TestCase):

    def test_statements(self):
        cases = {
            "print 1;": "(print 1)",
            "var a;": "(var a)",
            "var a = 1;": "(var a = 1)",
            "{ a; }": "(block (; a))",
            "if (a) print 1; else print 2;": "(if-else a (print 1) (print 2))",
            "if (a) print 1;": "(if a (print 1))",
            "while (a) a = a - 1;": "(while a (; (= a (- a 1))))",
            "fun f(a, b) { return a; }": "(fun f (a b) (return a))",
            "fun g() { return; }": "(fun g () (return))",
            "class B < A { init(x) { this.x = x; } }": "(class B < A (fun init (x) (; (= (. this x) x))))",
        }
        for case, expected in cases.items():
            statements, handler = lisp(case)
            self.assertFalse(handler.had_error, case)
            self.assertEqual([expected], statements, case)

    def test_for_desugaring(self):
        cases = {
            "for (var i = 0; i < 3; i = i + 1) print i;":
                "(block (var i = 0) (while (< i 3) (block (print i) (; (= i (+ i 1))))))",
            "for (;;) print 1;": "(while true (print 1))",
            "for (i = 0; i < 3;) print i;": "(block (; (= i 0)) (while (< i 3) (print i)))",
        }
        for case, expected in cases.items():
            statements, handler = lisp(case)
            self.assertFalse(handler.had_error, case)
            self.assertEqual([expected], statements, case)

    def test_invalid_assignment_target(self):
        statements, handler = lisp("1 = 2; print 3;")
        self.assertEqual(["[line 1] Error at '=': Invalid assignment target."], handler.reports)
        self.assertEqual(["(; 1)", "(print 3)"], statements)

    def test_synchronize(self):
        statements, handler = lisp("var = 1; print 2;\nfun (x) {} print 3;")
        self.assertEqual(["[line 1] Error at '=': Expect variable name.",
                          "[line 2] Error at '(': Expect function name."], handler.reports)
        self.assertEqual(["(print 2)", "(print 3)"], statements)

    def test_missing_semicolon(self):
        statements, handler = lisp("print 1")
        self.assertEqual([], statements)
        self.assertEqual(["[line 1] Error at end: Expect ';' after value."], handler.reports)

    def test_unclosed_block(self):
        statements, handler = lisp("{ print 1;")
        self.assertEqual(["[line 1] Error at end: Expect '}' after block."], handler.reports)

    def test_argument_cap(self):
        args = ", ".join(str(i) for i in range(33))
        statements, handler = parse(f"f({args});")
        self.assertEqual(["[line 1] Error at '32': Can't have more than 32 arguments."], handler.reports)
        self.assertEqual(1, len(statements))
        self.assertEqual(33, len(statements[0].expression.arguments))

        statements, handler = parse(f"f({', '.join(str(i) for i in range(32))});")
        self.assertFalse(handler.had_error)

    def test_parameter_cap(self):
        params = ", ".join(f"p{i}" for i in range(33))
        statements, handler = parse(f"fun f({params}) {{}}")
        self.assertEqual(["[line 1] Error at 'p32': Can't have more than 32 parameters."], handler.reports)
        self.assertEqual(33, len(statements[0].params))


if __name__ == '__main__':
    unittest.main()
