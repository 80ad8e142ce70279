"""Lexical analysis for the Nox language: turns source text into an ordered list of Tokens in a single left-to-right
pass.

The lexical grammar can be loosely defined as follows:

```
<token>      ::= "(" | ")" | "{" | "}" | "," | "." | "-" | "+" | ";" | "*" | "/"
               | "!" | "!=" | "=" | "==" | ">" | ">=" | "<" | "<="
               | <number> | <string> | <identifier>   ; identifiers matching a keyword become keyword tokens
<number>     ::= <digit>+ ( "." <digit>+ )?           ; a trailing "." is not part of the number
<string>     ::= '"' <char>* '"'                      ; may span multiple lines, no escapes
<identifier> ::= <alpha> ( <alpha> | <digit> )*       ; <alpha> is [A-Za-z_]
<comment>    ::= "//" <char>*                         ; up to end of line
```

Errors (unexpected characters, unterminated strings) are reported to the ErrorHandler and never stop the scan, so
one pass can surface several of them.
"""

from noxlang.tokens import KEYWORDS, Token, TokenType


SINGLE_CHAR = {
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
ONE_OR_TWO_CHAR = {
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}

WHITESPACE = " \r\t\n"


def is_digit(char):
    return "0" <= char <= "9"


def is_alpha(char):
    return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"


def is_alphanumeric(char):
    return is_alpha(char) or is_digit(char)


class Lexer:
    """Scans one source string. Reports errors to error_handler; see module docstring for the lexical grammar."""

    def __init__(self, source, error_handler):
        self.source = source
        self.error_handler = error_handler
        self.tokens = []

        self.start = 0     # index of first char of current lexeme
        self.current = 0   # index of char about to be consumed
        self.line = 1
        self.column = 0    # number of chars consumed on the current line

        self.start_line = 1
        self.start_column = 1

    def scan_tokens(self):
        """Returns list of Tokens scanned from self.source, always terminated by an EOF token."""
        while not self.at_end():
            self.start = self.current
            self.start_line, self.start_column = self.line, self.column + 1
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line, self.column + 1))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in SINGLE_CHAR:
            self.add_token(SINGLE_CHAR[char])
        elif char in ONE_OR_TWO_CHAR:
            two_char, one_char = ONE_OR_TWO_CHAR[char]
            self.add_token(two_char if self.match("=") else one_char)
        elif char == "/":
            if self.match("/"):
                self.comment()
            else:
                self.add_token(TokenType.SLASH)
        elif char in WHITESPACE:
            pass
        elif char == "\"":
            self.string()
        elif is_digit(char):
            self.number()
        elif is_alpha(char):
            self.identifier()
        else:
            self.error_handler.error(self.start_line, self.start_column, f"Unexpected character '{char}'.")

    def comment(self):
        while not self.at_end() and self.peek() != "\n":
            self.advance()

    def string(self):
        while not self.at_end() and self.peek() != "\"":
            self.advance()

        if self.at_end():
            # nothing left to resynchronize on
            self.error_handler.error(self.start_line, self.start_column, "Unterminated string.")
            return

        self.advance()  # closing "
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while is_digit(self.peek()):
            self.advance()

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

    def add_token(self, kind, literal=None):
        lexeme = self.source[self.start:self.current]
        self.tokens.append(Token(kind, lexeme, literal, self.start_line, self.start_column))

    def match(self, expected):
        """Consumes the next char only if it is expected."""
        if self.at_end() or self.source[self.current] != expected:
            return False
        self.advance()
        return True

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        if char == "\n":
            self.line += 1
            self.column = 0
        else:
            self.column += 1
        return char

    def peek(self):
        if self.at_end():
            return "\0"
        return self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def at_end(self):
        return self.current >= len(self.source)
