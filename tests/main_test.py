import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from io import StringIO

from noxlang.main import main


class MainTestCase(unittest.TestCase):

    def script(self, source):
        with tempfile.NamedTemporaryFile("w", suffix=".nox", delete=False) as file:
            file.write(source)
        self.addCleanup(os.remove, file.name)
        return file.name

    def run_main(self, *argv):
        stdout, stderr = StringIO(), StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            status = main(["--no-color", *argv])
        return status, stdout.getvalue(), stderr.getvalue()

    def test_exit_statuses(self):
        cases = {
            "print \"hello\";": (0, "hello\n"),
            "print 1 +;": (65, ""),
            "print 1; print nil + 1; print 2;": (70, "1\n2\n"),
            "print " + "(" * 5000 + "1" + ")" * 5000 + ";": (65, ""),
        }
        for case, (expected_status, expected_out) in cases.items():
            status, out, __ = self.run_main(self.script(case))
            self.assertEqual(expected_status, status, case)
            self.assertEqual(expected_out, out, case)

    def test_deep_recursion(self):
        source = "fun count(n) { if (n == 0) return 0; return 1 + count(n - 1); }\nprint count(1000);"
        status, out, __ = self.run_main(self.script(source))
        self.assertEqual(0, status)
        self.assertEqual("1000\n", out)

        status, __, err = self.run_main(self.script("fun f() { f(); }\nf();"))
        self.assertEqual(70, status)
        self.assertIn("Stack overflow.", err)

    def test_error_output(self):
        path = self.script("var a = 1;\nprint a +;")
        __, __, err = self.run_main(path)
        self.assertEqual(f"{path}:2:10: error at ';': Expected expression.\n  print a +;\n           ^\n", err)

    def test_missing_file(self):
        path = os.path.join(tempfile.gettempdir(), "no", "such", "script.nox")
        status, out, err = self.run_main(path)
        self.assertEqual(66, status)
        self.assertIn("could not be opened", err)
        self.assertEqual("", out)

    def test_ast(self):
        status, out, __ = self.run_main("--ast", self.script("var a = 1;\nprint a * (2 + 3);"))
        self.assertEqual(0, status)
        self.assertEqual("(var a 1)\n(print (* a (group (+ 2 3))))\n", out)


if __name__ == '__main__':
    unittest.main()
