"""Error handling for the lox language. Static errors (scanning, parsing, resolution) are reported through an
ErrorHandler and never raised past the phase that found them. Runtime errors are LoxRuntimeErrors: they abort the
current `interpret` call and are reported at the top level. If any other type of error makes it all the way to
ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Root of every user-facing lox error."""

    def __init__(self, msg, internal=False):
        super().__init__(msg)
        self.msg = msg
        self.internal = internal


class ParseError(GenericException):
    """Unwinds the parser to the nearest declaration so it can synchronize. Already reported when raised."""

    def __init__(self):
        super().__init__("parse error")


class LoxRuntimeError(GenericException):
    """Error raised while evaluating. token is the offending token, used for the line number."""

    def __init__(self, token, msg):
        super().__init__(msg)
        self.token = token


class OperandError(LoxRuntimeError):
    """Operator applied to values of the wrong type."""


class ArityError(LoxRuntimeError):
    """Callable invoked with the wrong number of arguments."""


class NotCallableError(LoxRuntimeError):
    """Call expression whose callee is neither a function nor a class."""


class UndefinedVariableError(LoxRuntimeError):
    """Name not bound anywhere in the environment chain."""


class UninitializedVariableError(LoxRuntimeError):
    """Name declared with `var` but never assigned."""


class UndefinedPropertyError(LoxRuntimeError):
    """Property access on an instance that has no such field or method, or a non-instance."""


class DivisionByZeroError(LoxRuntimeError):
    """Right operand of `/` is exactly zero."""


def format_report(line, where, msg):
    """Returns the canonical static error line: [line N] Error<where>: msg"""
    return f"[line {line}] Error{where}: {msg}"


class ErrorHandler:
    """Error reporter shared by every phase. Also a context manager that reports lox errors instead of letting them
    escape as Python tracebacks.

    Two independent flags are kept: had_error for static (scan/parse/resolve) errors and had_runtime_error for errors
    raised during evaluation.
    """
    ERROR = "red"

    def __init__(self, fatal=False, color=True, out=None):
        self.fatal = fatal
        self.color = color
        self.out = out if out is not None else sys.stdout

        self.had_error = False
        self.had_runtime_error = False
        self.reports = []         # plain-text messages, in order of reporting
        self.runtime_errors = []  # LoxRuntimeErrors reported so far

    def _colored(self, text, *args, **kwargs):
        return colored(text, *args, **kwargs) if self.color else text

    def _emit(self, text):
        print(text, file=self.out)

    def error(self, location, msg):
        """Reports a static error. location is either a line number or the Token the error is tied to."""
        if isinstance(location, int):
            line, where = location, ""
        else:
            line = location.line
            where = " at end" if location.is_eof() else f" at '{location.lexeme}'"

        report = format_report(line, where, msg)
        self.reports.append(report)
        self.had_error = True

        self._emit(self._colored(f"[line {line}] ", attrs=["bold"])
                   + self._colored(f"Error{where}:", ErrorHandler.ERROR, attrs=["bold"]) + f" {msg}")

    def runtime_error(self, error):
        """Reports a LoxRuntimeError raised out of the interpreter."""
        report = f"{error.msg}\n[line {error.token.line}]"
        self.reports.append(report)
        self.runtime_errors.append(error)
        self.had_runtime_error = True

        self._emit(self._colored(error.msg, ErrorHandler.ERROR, attrs=["bold"]) + f"\n[line {error.token.line}]")

    def throw(self, error):
        """Reports a GenericException that carries no source location."""
        prefix = "[internal] " if error.internal else ""
        self.reports.append(prefix + "error: " + error.msg)
        self.had_runtime_error = True

        msg = ""
        if error.internal:
            msg += self._colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        msg += self._colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        self._emit(msg)

        if self.fatal:
            sys.exit(70)

    def reset(self):
        """Clears the static error flag. Used between lines of an interactive session."""
        self.had_error = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or exc_type is SystemExit:
            return False
        elif exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is RecursionError:
            self.throw(GenericException("Stack overflow."))
        elif issubclass(exc_type, LoxRuntimeError):
            self.runtime_error(exc_val)
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        else:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            return False

        return True
