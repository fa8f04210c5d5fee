"""Lexical scanning for lox: turns source text into a list of Tokens, terminated by an EOF token.

Errors (unterminated strings/block comments, unexpected characters) are reported through the ErrorHandler and scanning
carries on, so a single pass reports every lexical error in the source.
"""

from lox.grammar.tokens import KEYWORDS, Token, TokenType


SINGLE = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
}

# char: (type if followed by "=", type otherwise)
DOUBLE = {
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}


def is_digit(char):
    return "0" <= char <= "9"


def is_alpha(char):
    return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"


def is_alphanumeric(char):
    return is_alpha(char) or is_digit(char)


class Scanner:
    """Single left-to-right pass over source with one character of lookahead (two for numbers and comments)."""

    def __init__(self, source, error_handler):
        self.source = source
        self.error_handler = error_handler

        self.tokens = []
        self.start = 0    # first char of the lexeme being scanned
        self.current = 0  # char about to be consumed
        self.line = 1

    def scan_tokens(self):
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in SINGLE:
            self.add_token(SINGLE[char])
        elif char in DOUBLE:
            with_equal, alone = DOUBLE[char]
            self.add_token(with_equal if self.match("=") else alone)
        elif char == "/":
            if self.match("/"):
                self.skip_line_comment()
            elif self.match("*"):
                self.skip_block_comment()
            else:
                self.add_token(TokenType.SLASH)
        elif char in " \r\t":
            pass
        elif char == "\n":
            self.line += 1
        elif char == "\"":
            self.string()
        elif is_digit(char):
            self.number()
        elif is_alpha(char):
            self.identifier()
        else:
            self.error_handler.error(self.line, f"Unexpected character: {char}")

    def skip_line_comment(self):
        while self.peek() != "\n" and not self.is_at_end():
            self.advance()

    def skip_block_comment(self):
        """Block comments nest: every "/*" needs its own "*/"."""
        level = 1
        while level > 0:
            if self.is_at_end():
                self.error_handler.error(self.line, "Unterminated block comment.")
                return

            if self.peek() == "/" and self.peek_next() == "*":
                level += 1
                self.current += 2
            elif self.peek() == "*" and self.peek_next() == "/":
                level -= 1
                self.current += 2
            else:
                if self.peek() == "\n":
                    self.line += 1
                self.advance()

    def string(self):
        while self.peek() != "\"" and not self.is_at_end():
            if self.peek() == "\n":
                self.line += 1
            self.advance()

        if self.is_at_end():
            self.error_handler.error(self.line, "Unterminated string.")
            return

        self.advance()  # closing "
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while is_digit(self.peek()):
            self.advance()

        # a trailing "." is left for the DOT token
        if self.peek() == "." and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while is_alphanumeric(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def is_at_end(self):
        return self.current >= len(self.source)

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        return "\0" if self.is_at_end() else self.source[self.current]

    def peek_next(self):
        return "\0" if self.current + 1 >= len(self.source) else self.source[self.current + 1]

    def add_token(self, token_type, literal=None):
        self.tokens.append(Token(token_type, self.source[self.start:self.current], literal, self.line))
