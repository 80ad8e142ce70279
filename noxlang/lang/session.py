"""Session control for the Nox language: runs source text through the lexer, parser and interpreter, either for a
whole file or line by line in command-line mode.
"""

from noxlang.frontend.lexical import Lexer
from noxlang.grammar.parser import Parser
from noxlang.lang.error import NoxException
from noxlang.lang.interpreter import Interpreter


class Session:
    """Governs a Nox session. A single Interpreter is kept for the whole session, so globals declared by one run are
    visible to the next.
    """
    SH_FILE = "<in>"  # command-line interpreter filename

    # process exit statuses (sysexits.h)
    EX_OK = 0
    EX_DATAERR = 65    # lexical or syntax error
    EX_NOINPUT = 66    # script could not be read
    EX_SOFTWARE = 70   # runtime error

    def __init__(self, error_handler, path=SH_FILE, cmd_line=False, out=None):
        self.error_handler = error_handler
        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.interpreter = Interpreter(error_handler, out)
        self.statements = []  # parsed statements waiting for run

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise NoxException(f"'{path}' could not be opened")
            self.add(source)

        elif not cmd_line:
            raise NoxException(f"'{Session.SH_FILE}' is a reserved filename")

    def add(self, source):
        """Scans and parses source, queueing its statements for run. Returns the parsed statements. Nothing is queued
        if a lexical or syntax error was reported.
        """
        if self.cmd_line:
            self.error_handler.reset()  # every command-line input starts with a clean slate
        self.error_handler.register_source(source, self.path)

        tokens = Lexer(source, self.error_handler).scan_tokens()
        statements = Parser(tokens, self.error_handler).parse()

        if not self.error_handler.had_error:
            self.statements.extend(statements)
        return statements

    def run(self):
        """Executes queued statements, unless a lexical or syntax error has been reported."""
        statements, self.statements = self.statements, []
        if self.error_handler.had_error:
            return
        self.interpreter.interpret(statements)

    def execute(self, source):
        """Shortcut for add followed by run."""
        self.add(source)
        self.run()

    @property
    def status(self):
        """Process exit status matching the errors reported so far."""
        return Session.exit_status(self.error_handler)

    @staticmethod
    def exit_status(error_handler):
        if error_handler.had_error:
            return Session.EX_DATAERR
        if error_handler.had_runtime_error:
            return Session.EX_SOFTWARE
        return Session.EX_OK

    @staticmethod
    def is_incomplete(source):
        """Whether source has unclosed braces/parentheses or an unterminated string, i.e. whether the shell should ask
        for a continuation line. Comments are ignored.
        """
        depth = 0
        in_string = False
        idx = 0
        while idx < len(source):
            char = source[idx]
            if in_string:
                in_string = char != "\""
            elif char == "\"":
                in_string = True
            elif source.startswith("//", idx):
                newline = source.find("\n", idx)
                idx = len(source) if newline == -1 else newline
                continue
            elif char in "({":
                depth += 1
            elif char in ")}":
                depth -= 1
            idx += 1

        return in_string or depth > 0
