"""Command-line entry point for lox: runs a script file, or starts the interactive shell when no file is given.

Python version must be >=3.8 (functools.singledispatchmethod).
"""

import argparse
import sys

from lox.lang.error import ErrorHandler
from lox.lang.session import EX_OK, EX_SOFTWARE, Session
from lox.lang.shell import Shell


def main(argv=None):
    """Runs lox interpreter. Called from the lox executable script."""
    assert sys.version_info >= (3, 8), "lox cannot be run with python < 3.8"

    parser = argparse.ArgumentParser(prog="lox", description="Tree-walking interpreter for the Lox language.")
    parser.add_argument("file", help="script to interpret and run (if empty, goes to interactive mode)", nargs="?")
    parser.add_argument("--ast", action="store_true", help="print the parsed syntax tree instead of running it")
    parser.add_argument("--no-color", action="store_true", help="disable colored error output")
    args = parser.parse_args(argv)  # exits with status 2 on bad usage

    # every lox call costs a dozen or so python frames
    sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))

    with ErrorHandler(color=not args.no_color) as error_handler:
        sess = Session(error_handler, show_ast=args.ast)

        if args.file is not None:
            return sess.run_file(args.file)

        Shell(sess).cmdloop()
        return EX_OK

    return EX_SOFTWARE  # an error escaped the session and was reported by error_handler


if __name__ == "__main__":
    sys.exit(main())
