"""Error handling for the Nox language. Lexical and syntax errors are reported to an ErrorHandler while scanning and
parsing continue; runtime errors are raised as NoxRuntimeError and reported once they abort a top-level statement.
Anything else that reaches ErrorHandler is assumed to be an internal issue.
"""

import sys
from dataclasses import dataclass

from termcolor import colored

from noxlang.tokens import TokenType


class NoxException(Exception):
    """Base class for errors raised by the Nox pipeline."""

    def __init__(self, message, token=None):
        super().__init__(message)
        self.message = message
        self.token = token  # offending token, used for position reporting


class ParseError(NoxException):
    """Panic signal raised by the parser. Caught at declaration level, never reported twice."""


class NoxRuntimeError(NoxException):
    """Error raised while evaluating a statement. Aborts the current top-level statement only."""

    def __init__(self, token, message):
        super().__init__(message, token)


@dataclass(frozen=True)
class Diagnostic:
    """A single reported error, kept by ErrorHandler so that drivers (and tests) can inspect it after a pass."""
    kind: str
    line: int
    column: int
    message: str
    where: str = ""
    length: int = 1


class ErrorHandler:
    """Diagnostics sink shared by the lexer, parser and interpreter of one session. Reporting never raises and never
    halts the current pass: it records a Diagnostic, prints it and flips had_error/had_runtime_error.
    """
    ERROR = "red"

    LEXICAL = "lexical"
    SYNTAX = "syntax"
    RUNTIME = "runtime"
    INTERNAL = "internal"
    FATAL = "fatal"

    def __init__(self, path="<in>", stream=None, colors=True):
        self.path = path
        self.stream = stream  # defaults to sys.stderr at report time
        self.colors = colors

        self.source_lines = []
        self.diagnostics = []
        self.had_error = False
        self.had_runtime_error = False

    def register_source(self, source, path=None):
        """Registers source text so that diagnostics can show the offending line. Should be called before lexing."""
        if path is not None:
            self.path = path
        self.source_lines = source.split("\n")

    def reset(self):
        """Clears error flags and collected diagnostics. Called between inputs in command-line mode."""
        self.diagnostics = []
        self.had_error = False
        self.had_runtime_error = False

    def error(self, line, column, message, where="", length=1):
        """Reports a lexical error at line/column."""
        self._report(Diagnostic(ErrorHandler.LEXICAL, line, column, message, where, length))
        self.had_error = True

    def token_error(self, token, message):
        """Reports a syntax error at token."""
        if token.kind is TokenType.EOF:
            where = "at end"
        else:
            where = f"at '{token.lexeme}'"
        self._report(Diagnostic(ErrorHandler.SYNTAX, token.line, token.column, message, where, len(token.lexeme)))
        self.had_error = True

    def runtime_error(self, error):
        """Reports a NoxRuntimeError that aborted a statement."""
        token = error.token
        if token is None:
            diagnostic = Diagnostic(ErrorHandler.RUNTIME, 0, 0, error.message, length=0)
        else:
            diagnostic = Diagnostic(ErrorHandler.RUNTIME, token.line, token.column, error.message,
                                    length=len(token.lexeme))
        self._report(diagnostic)
        self.had_runtime_error = True

    def internal(self, message):
        """Reports an error that is not the program's fault. Treated as a runtime failure."""
        self._report(Diagnostic(ErrorHandler.INTERNAL, 0, 0, message, length=0))
        self.had_runtime_error = True

    def fatal(self, message):
        """Reports an error that prevents the session from starting, e.g. an unreadable script. Sets no flags: the
        caller picks the exit status.
        """
        self._report(Diagnostic(ErrorHandler.FATAL, 0, 0, message, length=0))

    @property
    def errors(self):
        """Messages of all collected diagnostics, in report order."""
        return [diagnostic.message for diagnostic in self.diagnostics]

    def _color(self, text, color=None, bold=False):
        if not self.colors:
            return text
        return colored(text, color, attrs=["bold"] if bold else None)

    def diagnose(self, diagnostic):
        """Returns the offending source line with the offending part highlighted and underlined, or None if the line
        is unknown.
        """
        if not 0 < diagnostic.line <= len(self.source_lines):
            return None
        line = self.source_lines[diagnostic.line - 1]
        if not line.strip():
            return None

        start = min(max(diagnostic.column - 1, 0), len(line))
        end = min(start + max(diagnostic.length, 1), max(len(line), start + 1))

        result = "  " + line[:start] + self._color(line[start:end], ErrorHandler.ERROR, bold=True) + line[end:] + "\n"
        result += "  " + " " * start + self._color("^" + "~" * (end - start - 1), ErrorHandler.ERROR, bold=True)
        return result

    def format(self, diagnostic):
        """Formats diagnostic as '<path>:<line>:<column>: <kind> error <where>: <message>'."""
        if diagnostic.line:
            position = self._color(f"{self.path}:{diagnostic.line}:{diagnostic.column}: ", bold=True)
        else:
            position = self._color(f"{self.path}: ", bold=True)

        if diagnostic.kind == ErrorHandler.INTERNAL:
            label = self._color("[internal] error", ErrorHandler.ERROR, bold=True)
        elif diagnostic.kind == ErrorHandler.RUNTIME:
            label = self._color("runtime error", ErrorHandler.ERROR, bold=True)
        else:
            label = self._color("error", ErrorHandler.ERROR, bold=True)

        if diagnostic.where:
            label += " " + diagnostic.where
        return f"{position}{label}: {diagnostic.message}"

    def _report(self, diagnostic):
        self.diagnostics.append(diagnostic)

        stream = self.stream if self.stream is not None else sys.stderr
        print(self.format(diagnostic), file=stream)

        diagnosis = self.diagnose(diagnostic)
        if diagnosis:
            print(diagnosis, file=stream)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or issubclass(exc_type, SystemExit):
            return False

        if issubclass(exc_type, KeyboardInterrupt):
            self.internal("keyboard interrupt")
        elif issubclass(exc_type, NoxRuntimeError):
            self.runtime_error(exc_val)
        else:
            self.internal(f"unknown error: '{exc_type.__name__}: {exc_val}'")
        return True
