"""Helpers shared by the lox test cases."""

import io

from lox.grammar.parser import Parser
from lox.grammar.scanner import Scanner
from lox.lang.error import ErrorHandler
from lox.lang.session import Session


def new_handler():
    """Uncolored ErrorHandler writing to its own buffer."""
    return ErrorHandler(color=False, out=io.StringIO())


def run_source(source):
    """Runs source through a fresh Session. Returns (program output, error handler, result)."""
    out = io.StringIO()
    handler = new_handler()
    result = Session(handler, out=out).run(source)
    return out.getvalue(), handler, result


def scan(source):
    handler = new_handler()
    return Scanner(source, handler).scan_tokens(), handler


def parse(source):
    tokens, handler = scan(source)
    return Parser(tokens, handler).parse(), handler


def parse_expression(source):
    tokens, handler = scan(source)
    return Parser(tokens, handler).parse_expression(), handler
