"""Runs Nox scripts, or the interactive shell when no script is given. Called from the nox console script.

Exit statuses: 0 on success, 65 after a lexical or syntax error, 66 if the script cannot be read, 70 after a runtime
error.
"""

import argparse
import sys

from noxlang.grammar.printer import AstPrinter
from noxlang.lang.error import ErrorHandler, NoxException
from noxlang.lang.session import Session
from noxlang.lang.shell import Shell


RECURSION_LIMIT = 10000  # Python frames; one Nox call takes about six


def main(argv=None):
    """Runs nox interpreter and returns the process exit status."""
    parser = argparse.ArgumentParser(prog="nox", description="Run Nox scripts")
    parser.add_argument("file", help="script to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--ast", action="store_true", help="print the syntax tree of file instead of running it")
    parser.add_argument("--no-color", action="store_true", help="do not color error messages")
    args = parser.parse_args(argv)

    sys.setrecursionlimit(RECURSION_LIMIT)

    with ErrorHandler(colors=not args.no_color) as error_handler:
        if args.file is None:
            Shell(Session(error_handler, cmd_line=True)).cmdloop()
            return Session.EX_OK

        try:
            sess = Session(error_handler, args.file)
        except NoxException as error:
            error_handler.fatal(error.message)
            return Session.EX_NOINPUT

        if args.ast:
            print(AstPrinter().display(sess.statements))
        else:
            sess.run()

    return Session.exit_status(error_handler)


if __name__ == "__main__":
    sys.exit(main())
