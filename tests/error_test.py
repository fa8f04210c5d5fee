import io
import unittest

from lox.grammar.tokens import Token, TokenType
from lox.lang.error import ErrorHandler, GenericException, LoxRuntimeError, OperandError, format_report


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.handler = ErrorHandler(color=False, out=self.out)

    def test_format_report(self):
        self.assertEqual("[line 3] Error: oops", format_report(3, "", "oops"))
        self.assertEqual("[line 1] Error at 'x': oops", format_report(1, " at 'x'", "oops"))

    def test_error_locations(self):
        self.handler.error(2, "line only")
        self.handler.error(Token(TokenType.IDENTIFIER, "foo", None, 4), "at token")
        self.handler.error(Token(TokenType.EOF, "", None, 5), "at eof")

        expected = ["[line 2] Error: line only", "[line 4] Error at 'foo': at token", "[line 5] Error at end: at eof"]
        self.assertEqual(expected, self.handler.reports)
        self.assertEqual("\n".join(expected) + "\n", self.out.getvalue())
        self.assertTrue(self.handler.had_error)
        self.assertFalse(self.handler.had_runtime_error)

    def test_runtime_error(self):
        error = OperandError(Token(TokenType.MINUS, "-", None, 7), "Operand must be a number.")
        self.handler.runtime_error(error)

        self.assertEqual("Operand must be a number.\n[line 7]\n", self.out.getvalue())
        self.assertEqual([error], self.handler.runtime_errors)
        self.assertTrue(self.handler.had_runtime_error)
        self.assertFalse(self.handler.had_error)

    def test_reset(self):
        self.handler.error(1, "static")
        self.handler.runtime_error(LoxRuntimeError(Token(TokenType.NIL, "nil", None, 1), "runtime"))
        self.handler.reset()

        self.assertFalse(self.handler.had_error)
        self.assertTrue(self.handler.had_runtime_error)

    def test_context_manager(self):
        with self.handler:
            raise GenericException("boom")
        self.assertEqual(["error: boom"], self.handler.reports)

        with self.handler:
            raise LoxRuntimeError(Token(TokenType.NIL, "nil", None, 9), "bad")
        self.assertEqual("bad\n[line 9]", self.handler.reports[-1])

        with self.handler:
            raise RecursionError()
        self.assertEqual("error: Stack overflow.", self.handler.reports[-1])

    def test_unknown_errors_propagate(self):
        with self.assertRaises(ValueError):
            with self.handler:
                raise ValueError("internal")
        self.assertTrue(self.handler.reports[-1].startswith("[internal] error: unknown error"))

    def test_colored_output_keeps_text(self):
        handler = ErrorHandler(color=True, out=self.out)
        handler.error(1, "colored")
        self.assertIn("colored", self.out.getvalue())
        self.assertEqual(["[line 1] Error: colored"], handler.reports)


if __name__ == '__main__':
    unittest.main()
