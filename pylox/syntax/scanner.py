"""Lexical scanning for Lox: converts raw source text into a list of Tokens.

The scanner is a single left-to-right pass with one character of lookahead (two for the fractional part of a number).
It never aborts: unrecognized characters and unterminated strings are reported to the session's ErrorHandler and
scanning carries on, so that as many errors as possible are reported in one run.
"""

from pylox.syntax.tokens import KEYWORDS, Token, TokenType


SINGLE_CHARS = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
}

# char: (type if followed by "=", type otherwise)
DOUBLE_CHARS = {
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}

WHITESPACE = " \r\t"


def is_digit(char):
    """ASCII digits only: str.isdigit also accepts characters float() can't parse."""
    return "0" <= char <= "9"


def is_alpha(char):
    return char.isalpha() or char == "_"


class Scanner:
    """Scans one unit of source text. Scanner objects are single-use."""

    def __init__(self, source, error_handler):
        self.source = source
        self.error_handler = error_handler

        self.tokens = []
        self.start = 0    # first char of the lexeme being scanned
        self.current = 0  # char about to be consumed
        self.line = 1

    def scan_tokens(self):
        """Returns all tokens in self.source, always terminated by an EOF token."""
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in SINGLE_CHARS:
            self.add_token(SINGLE_CHARS[char])

        elif char in DOUBLE_CHARS:
            with_equal, without_equal = DOUBLE_CHARS[char]
            self.add_token(with_equal if self.match("=") else without_equal)

        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.is_at_end():
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)

        elif char in WHITESPACE:
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
            self.error_handler.error(self.line, "Unexpected character.")

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
        """All numbers are floats. A '.' is only part of the number if a digit follows it."""
        while is_digit(self.peek()):
            self.advance()

        if self.peek() == "." and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while is_alpha(self.peek()) or is_digit(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def add_token(self, token_type, literal=None):
        lexeme = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, lexeme, literal, self.line))

    def match(self, expected):
        """Consumes the current char only if it is expected."""
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def peek(self):
        if self.is_at_end():
            return "\0"
        return self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def is_at_end(self):
        return self.current >= len(self.source)
