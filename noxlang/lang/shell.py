"""Handles interactive/command-line mode for the Nox interpreter. Uses cmd as backend."""

import cmd

from noxlang.lang.session import Session


class Shell(cmd.Cmd):
    """Nox interpreter shell."""
    intro = "Nox interpreter :: Python backend\nType 'help' for more information, 'exit' or Ctrl-D to quit."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations
    COMMANDS = {"help", "?", "exit"}

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    def default(self, line):
        """Executes arbitrary Nox source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            source = self._tmp_line + line

            if Session.is_incomplete(source):
                self._tmp_line = source + "\n"
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt
            self.sess.execute(source)

    def cmdloop(self, intro=None):
        """Reads and runs lines until end of input. Unlike cmd.Cmd.cmdloop, end of input is not passed on as the line
        'EOF', so a source line reading EOF is never taken for it.
        """
        self.preloop()
        if intro is None:
            intro = self.intro
        if intro:
            self.stdout.write(str(intro) + "\n")

        stop = None
        while not stop:
            line = self.read_line()
            if line is None:
                stop = self.do_EOF("")
            else:
                stop = self.onecmd(line)
        self.postloop()

    def read_line(self):
        """Returns the next input line without its line ending, or None at end of input."""
        if self.use_rawinput:
            try:
                return input(self.prompt)
            except EOFError:
                return None

        self.stdout.write(self.prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def onecmd(self, line):
        """Shell commands are only recognized when typed on a line of their own, so that Nox source such as
        `exit = 1;` is never mistaken for one. Continuation lines are always source.
        """
        if not self._tmp_line and line.strip() in Shell.COMMANDS:
            return super().onecmd(line.strip())
        if not self._tmp_line and not line.strip():
            return self.emptyline()
        return self.default(line)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the Nox interpreter!\n\n"
              "Nox is a small dynamically-typed scripting language with functions, closures \n"
              "and classes. Statements end with ';' and blocks are wrapped in braces.\n\n"
              "Try it out by typing 'var greeting = \"hello\";'. Next, try typing \n"
              "'print greeting + \" world\";'. Unfinished blocks continue on the next line.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True

