import io
import unittest

from pylox.lang.error import ErrorHandler
from pylox.syntax.scanner import Scanner
from pylox.syntax.tokens import Token, TokenType


def scan(source):
    err = io.StringIO()
    tokens = Scanner(source, ErrorHandler(err)).scan_tokens()
    return tokens, err.getvalue()


def types(source):
    return [token.type for token in scan(source)[0]]


class ScannerTestCase(unittest.TestCase):

    def test_scan_tokens(self):
        tokens, err = scan("var aNum = 2;")
        expected = [
            Token(TokenType.VAR, "var", None, 1),
            Token(TokenType.IDENTIFIER, "aNum", None, 1),
            Token(TokenType.EQUAL, "=", None, 1),
            Token(TokenType.NUMBER, "2", 2.0, 1),
            Token(TokenType.SEMICOLON, ";", None, 1),
            Token(TokenType.EOF, "", None, 1),
        ]
        self.assertEqual(expected, tokens)
        self.assertEqual("", err)

    def test_operators(self):
        cases = {
            "(){}[],.-+;/*": [
                TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
                TokenType.LEFT_BRACKET, TokenType.RIGHT_BRACKET, TokenType.COMMA, TokenType.DOT, TokenType.MINUS,
                TokenType.PLUS, TokenType.SEMICOLON, TokenType.SLASH, TokenType.STAR,
            ],
            "! != = == < <= > >=": [
                TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EQUAL_EQUAL,
                TokenType.LESS, TokenType.LESS_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL,
            ],
            "!==": [TokenType.BANG_EQUAL, TokenType.EQUAL],
        }
        for case, expected in cases.items():
            self.assertEqual(expected + [TokenType.EOF], types(case), case)

    def test_keywords_and_identifiers(self):
        cases = {
            "and break class else false for fun if nil or print return this true var while": [
                TokenType.AND, TokenType.BREAK, TokenType.CLASS, TokenType.ELSE, TokenType.FALSE, TokenType.FOR,
                TokenType.FUN, TokenType.IF, TokenType.NIL, TokenType.OR, TokenType.PRINT, TokenType.RETURN,
                TokenType.THIS, TokenType.TRUE, TokenType.VAR, TokenType.WHILE,
            ],
            "orchid _private var2 super": [TokenType.IDENTIFIER] * 4,
        }
        for case, expected in cases.items():
            self.assertEqual(expected + [TokenType.EOF], types(case), case)

    def test_numbers(self):
        cases = {"123": 123.0, "1.5": 1.5, "0.25": 0.25}
        for case, expected in cases.items():
            token = scan(case)[0][0]
            self.assertIs(TokenType.NUMBER, token.type, case)
            self.assertEqual(expected, token.literal, case)
            self.assertIsInstance(token.literal, float, case)

        # a trailing dot isn't part of the number
        self.assertEqual([TokenType.NUMBER, TokenType.DOT, TokenType.EOF], types("1."))
        self.assertEqual([TokenType.DOT, TokenType.NUMBER, TokenType.EOF], types(".5"))

    def test_strings(self):
        tokens, err = scan("\"hello world\"")
        self.assertEqual(Token(TokenType.STRING, "\"hello world\"", "hello world", 1), tokens[0])

        # no escape processing
        tokens, err = scan("\"a\\nb\"")
        self.assertEqual("a\\nb", tokens[0].literal)

        # strings may span lines
        tokens, err = scan("\"one\ntwo\" x")
        self.assertEqual("one\ntwo", tokens[0].literal)
        self.assertEqual(2, tokens[1].line)

    def test_comments_and_whitespace(self):
        tokens, err = scan("// nothing to see\n\t a // still nothing\r\n b")
        self.assertEqual(["a", "b", ""], [token.lexeme for token in tokens])
        self.assertEqual([2, 3, 3], [token.line for token in tokens])

    def test_errors(self):
        tokens, err = scan("a @ b")
        self.assertEqual("[line 1] Error: Unexpected character.\n", err)
        self.assertEqual(["a", "b", ""], [token.lexeme for token in tokens], "scanning continues past errors")

        tokens, err = scan("a\n\"unterminated")
        self.assertEqual("[line 2] Error: Unterminated string.\n", err)
        self.assertEqual([TokenType.IDENTIFIER, TokenType.EOF], [token.type for token in tokens])

        tokens, err = scan("# $")
        self.assertEqual(2, err.count("Unexpected character."))

    def test_always_ends_with_eof(self):
        should_pass = ["", "   ", "// only a comment", "\n\n"]
        for case in should_pass:
            tokens, err = scan(case)
            self.assertEqual([TokenType.EOF], [token.type for token in tokens], repr(case))


if __name__ == '__main__':
    unittest.main()
