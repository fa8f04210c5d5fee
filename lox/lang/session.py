"""Session control for lox. Runs source text through the whole pipeline, either a file at a time or a line at a time
from the interactive shell. One Interpreter lives as long as the session, so globals persist between runs.

Pipeline: scan -> parse -> resolve -> interpret. Static errors stop the pipeline before the next phase: scan/parse
errors before resolution, resolution errors before interpretation.
"""

import io
import sys

from lox.grammar.parser import Parser
from lox.grammar.printer import to_lisp
from lox.grammar.resolver import Resolver
from lox.grammar.scanner import Scanner
from lox.grammar.tokens import TokenType
from lox.lang.error import ErrorHandler, GenericException
from lox.runtime.interpreter import Interpreter
from lox.runtime.objects import stringify


EX_OK = 0
EX_DATAERR = 65   # static error
EX_NOINPUT = 66   # script could not be read
EX_SOFTWARE = 70  # runtime error

OPENERS = {TokenType.LEFT_PAREN, TokenType.LEFT_BRACE}
CLOSERS = {TokenType.RIGHT_PAREN, TokenType.RIGHT_BRACE}
UNFINISHED = ("Unterminated string.", "Unterminated block comment.")


class Session:
    """Governs a lox session: one error handler, one interpreter."""

    def __init__(self, error_handler, out=None, show_ast=False):
        self.error_handler = error_handler
        self.out = out if out is not None else sys.stdout
        self.show_ast = show_ast  # print each parsed statement instead of running it

        self.interpreter = Interpreter(error_handler, self.out)

    @staticmethod
    def preprocess_line(line, prev=""):
        """Joins line onto prev (the unfinished lines so far) and returns the joined text along with whether more input
        is needed: braces or parentheses are still open, or a string or block comment is unterminated. Only real
        tokens count, so brackets inside strings and comments are ignored.
        """
        if prev:
            line = prev + "\n" + line

        handler = ErrorHandler(color=False, out=io.StringIO())  # unfinished input is expected here, keep it quiet
        tokens = Scanner(line, handler).scan_tokens()

        # strings may span lines, and so may block comments
        if any(report.endswith(UNFINISHED) for report in handler.reports):
            return line, True

        open_count = sum(token.type in OPENERS for token in tokens)
        close_count = sum(token.type in CLOSERS for token in tokens)
        return line, open_count > close_count

    def parse(self, source):
        """Scans and parses source. Returns the statements, or None if a static error was reported."""
        tokens = Scanner(source, self.error_handler).scan_tokens()
        statements = Parser(tokens, self.error_handler).parse()

        if self.error_handler.had_error:
            return None
        return statements

    def run(self, source):
        """Runs source and returns the value of its last statement (None if it wasn't an expression statement or if
        any error was reported).
        """
        statements = self.parse(source)
        if statements is None:
            return None

        if self.show_ast:
            for statement in statements:
                print(to_lisp(statement), file=self.out)
            return None

        Resolver(self.interpreter, self.error_handler).resolve(statements)
        if self.error_handler.had_error:
            return None

        return self.interpreter.interpret(statements)

    def run_line(self, line):
        """Runs one unit of interactive input and echoes the value of a trailing expression statement."""
        result = self.run(line)
        if result is not None:
            print(stringify(result), file=self.out)
        self.error_handler.reset()  # a mistake on one line doesn't end the session
        return result

    def run_file(self, path):
        """Runs the script at path and returns the process exit code."""
        try:
            with open(path, "r") as file:
                source = file.read()
        except OSError:
            self.error_handler.throw(GenericException(f"'{path}' could not be opened"))
            return EX_NOINPUT

        self.run(source)

        if self.error_handler.had_error:
            return EX_DATAERR
        if self.error_handler.had_runtime_error:
            return EX_SOFTWARE
        return EX_OK
