"""Runs Lox scripts, or the Lox shell when no script is given. Called from the pylox executable script.

Exit statuses follow sysexits.h: 64 for bad usage, 65 if the script had a syntax or static error, 66 if it couldn't be
read, 70 if it stopped on a runtime error.
"""

import argparse
import logging
import sys

from pylox.lang.error import ErrorHandler
from pylox.lang.session import EX_SOFTWARE, EX_USAGE, Session
from pylox.lang.shell import make_shell


USAGE = "Usage: pylox [script]"


def build_parser():
    parser = argparse.ArgumentParser(prog="pylox", description="Lox interpreter")
    parser.add_argument("script", help="file to interpret and run (if empty, goes to command-line mode)", nargs="*")
    parser.add_argument("-v", "--verbose", help="log pipeline stages to stderr", action="store_true")
    parser.add_argument("--no-color", help="never color error messages", action="store_true")
    return parser


def main(argv=None, stdin=None, stdout=None, stderr=None):
    """Runs the Lox interpreter and returns the exit status. The streams can be injected for testing."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(name)s: %(levelname)s: %(message)s")

    if len(args.script) > 1:
        print(USAGE, file=stdout if stdout is not None else sys.stdout)
        return EX_USAGE

    cmd_line = not args.script
    error_handler = ErrorHandler(stderr, colors=cmd_line and not args.no_color)

    with error_handler:
        sess = Session(error_handler, stdout, cmd_line=cmd_line)

        if cmd_line:
            make_shell(sess, stdin, stdout).cmdloop()
            return 0

        return sess.run_file(args.script[0])

    # only reached if the ErrorHandler swallowed an error
    return EX_SOFTWARE


if __name__ == "__main__":
    sys.exit(main())
