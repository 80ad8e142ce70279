import unittest
from contextlib import redirect_stdout
from io import StringIO

from noxlang.lang.error import ErrorHandler
from noxlang.lang.session import Session
from noxlang.lang.shell import Shell


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.out = StringIO()
        self.error_handler = ErrorHandler(stream=StringIO(), colors=False)
        self.shell = Shell(Session(self.error_handler, cmd_line=True, out=self.out), stdout=StringIO())

    def lines(self):
        return self.out.getvalue().splitlines()

    def test_source(self):
        self.shell.onecmd("var exit = 1;")
        self.shell.onecmd("print exit + 1;")
        self.assertEqual(["2"], self.lines())

    def test_continuation(self):
        self.shell.onecmd("fun f() {")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)
        self.shell.onecmd("")
        self.shell.onecmd("  return 2;")
        self.shell.onecmd("}")
        self.assertEqual("> ", self.shell.prompt)

        self.shell.onecmd("print f();")
        self.assertEqual(["2"], self.lines())
        self.assertEqual([], self.error_handler.errors)

    def test_errors_do_not_end_session(self):
        self.assertFalse(self.shell.onecmd("print nope;"))
        self.assertFalse(self.shell.onecmd("print 1 +;"))
        self.assertFalse(self.shell.onecmd("print 3;"))
        self.assertEqual(["3"], self.lines())

    def test_commands(self):
        self.assertFalse(self.shell.onecmd(""))
        with redirect_stdout(StringIO()) as stdout:
            self.assertFalse(self.shell.onecmd("help"))
        self.assertIn("Welcome to the Nox interpreter!", stdout.getvalue())

        self.assertTrue(self.shell.onecmd("exit"))

    def test_end_of_input(self):
        stdin = StringIO("print 1;\nEOF\nfun f() {\nEOF\n}\nprint 2;\n")
        shell = Shell(Session(self.error_handler, cmd_line=True, out=self.out), stdin=stdin, stdout=StringIO())
        shell.use_rawinput = False

        with redirect_stdout(StringIO()):
            shell.cmdloop()

        # a line reading EOF is source, only the end of stdin ends the loop
        self.assertEqual(["1", "2"], self.lines())
        self.assertTrue(shell.stdout.getvalue().startswith(Shell.intro))


if __name__ == '__main__':
    unittest.main()
