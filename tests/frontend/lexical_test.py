import unittest
from io import StringIO

from noxlang.frontend.lexical import Lexer
from noxlang.lang.error import ErrorHandler
from noxlang.tokens import TokenType as T


def scan(source):
    error_handler = ErrorHandler(stream=StringIO(), colors=False)
    return Lexer(source, error_handler).scan_tokens(), error_handler


def kinds(source):
    tokens, __ = scan(source)
    return [token.kind for token in tokens]


class LexerTestCase(unittest.TestCase):

    def test_operators(self):
        cases = {
            "(){},.-+;*/": [T.LEFT_PAREN, T.RIGHT_PAREN, T.LEFT_BRACE, T.RIGHT_BRACE, T.COMMA, T.DOT, T.MINUS, T.PLUS,
                            T.SEMICOLON, T.STAR, T.SLASH, T.EOF],
            "! != = == < <= > >=": [T.BANG, T.BANG_EQUAL, T.EQUAL, T.EQUAL_EQUAL, T.LESS, T.LESS_EQUAL, T.GREATER,
                                    T.GREATER_EQUAL, T.EOF],
            "!==": [T.BANG_EQUAL, T.EQUAL, T.EOF],
            "<==>": [T.LESS_EQUAL, T.EQUAL, T.GREATER, T.EOF],
            "": [T.EOF],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, kinds(case), case)

    def test_keywords_and_identifiers(self):
        cases = {
            "var x_1 = nil;": [T.VAR, T.IDENTIFIER, T.EQUAL, T.NIL, T.SEMICOLON, T.EOF],
            "and class else false for fun if nil or print return super this true var while": [
                T.AND, T.CLASS, T.ELSE, T.FALSE, T.FOR, T.FUN, T.IF, T.NIL, T.OR, T.PRINT, T.RETURN, T.SUPER, T.THIS,
                T.TRUE, T.VAR, T.WHILE, T.EOF],
            "classy _var Print": [T.IDENTIFIER, T.IDENTIFIER, T.IDENTIFIER, T.EOF],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, kinds(case), case)

    def test_numbers(self):
        cases = {
            "123": [(T.NUMBER, 123.0)],
            "1.5": [(T.NUMBER, 1.5)],
            "1.": [(T.NUMBER, 1.0), (T.DOT, None)],
            ".5": [(T.DOT, None), (T.NUMBER, 5.0)],
            "1.2.3": [(T.NUMBER, 1.2), (T.DOT, None), (T.NUMBER, 3.0)],
            "007": [(T.NUMBER, 7.0)],
        }
        for case, expected in cases.items():
            tokens, __ = scan(case)
            self.assertEqual(expected, [(token.kind, token.literal) for token in tokens[:-1]], case)

    def test_strings(self):
        tokens, error_handler = scan("\"hello\" \"\"")
        self.assertEqual(["hello", ""], [token.literal for token in tokens[:-1]])
        self.assertEqual("\"hello\"", tokens[0].lexeme)
        self.assertFalse(error_handler.had_error)

        tokens, __ = scan("\"a\nb\" x")
        self.assertEqual("a\nb", tokens[0].literal)
        self.assertEqual((1, 1), (tokens[0].line, tokens[0].column))
        self.assertEqual((2, 4), (tokens[1].line, tokens[1].column))

    def test_comments(self):
        self.assertEqual([T.PRINT, T.NUMBER, T.SEMICOLON, T.EOF], kinds("// comment\nprint 1; // trailing"))
        self.assertEqual([T.SLASH, T.NUMBER, T.EOF], kinds("/ 2 //"))

    def test_positions(self):
        tokens, __ = scan("var x\n  = 1;")
        positions = [(token.lexeme, token.line, token.column) for token in tokens]
        self.assertEqual([("var", 1, 1), ("x", 1, 5), ("=", 2, 3), ("1", 2, 5), (";", 2, 6), ("", 2, 7)], positions)

    def test_errors(self):
        should_fail = {
            "\"abc": ["Unterminated string."],
            "@": ["Unexpected character '@'."],
            "1 @ # 2": ["Unexpected character '@'.", "Unexpected character '#'."],
        }
        for case, expected in should_fail.items():
            __, error_handler = scan(case)
            self.assertTrue(error_handler.had_error, case)
            self.assertEqual(expected, error_handler.errors, case)

        # scanning goes on after an unexpected character
        tokens, error_handler = scan("1 @ # 2")
        self.assertEqual([T.NUMBER, T.NUMBER, T.EOF], [token.kind for token in tokens])
        self.assertEqual([(1, 3), (1, 5)], [(d.line, d.column) for d in error_handler.diagnostics])

        # remaining input after an unterminated string is treated as exhausted
        tokens, error_handler = scan("print \"abc;\nprint 2;")
        self.assertEqual([T.PRINT, T.EOF], [token.kind for token in tokens])
        self.assertEqual((1, 7), (error_handler.diagnostics[0].line, error_handler.diagnostics[0].column))


if __name__ == '__main__':
    unittest.main()
