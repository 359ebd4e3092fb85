"""Session control for Lox. Runs source text through the whole pipeline, either one file at a time (file mode) or one
line at a time (command-line mode), and translates the outcome into an exit status.
"""

import logging

from pylox.lang.interpreter import Interpreter
from pylox.lang.resolver import Resolver
from pylox.syntax.parser import Parser
from pylox.syntax.scanner import Scanner
from pylox.syntax.tokens import TokenType


logger = logging.getLogger(__name__)

# exit statuses, from sysexits.h
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70

OPENERS = {TokenType.LEFT_PAREN, TokenType.LEFT_BRACE, TokenType.LEFT_BRACKET}
CLOSERS = {TokenType.RIGHT_PAREN, TokenType.RIGHT_BRACE, TokenType.RIGHT_BRACKET}


class _SilentHandler:
    """Collects scan errors instead of reporting them. Only used to look ahead at unfinished lines."""

    def __init__(self):
        self.messages = []

    def error(self, line, message):
        self.messages.append(message)


class Session:
    """Governs a Lox session. Globals (and everything else the Interpreter knows) persist across calls to run, which is
    what lets command-line mode build a program up line by line.
    """

    def __init__(self, error_handler, out=None, cmd_line=False):
        self.error_handler = error_handler
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.interpreter = Interpreter(error_handler, out)

    def run(self, source):
        """Scans, parses, resolves and interprets source. Nothing is interpreted if any static error was reported.
        In command-line mode, previous errors are forgotten first and top-level expression values are printed.
        """
        if self.cmd_line:
            self.error_handler.reset()

        tokens = Scanner(source, self.error_handler).scan_tokens()
        logger.debug("scanned %d tokens", len(tokens))

        statements = Parser(tokens, self.error_handler).parse()
        logger.debug("parsed %d statements", len(statements))

        if self.error_handler.had_error:
            logger.debug("syntax errors, skipping resolution")
            return

        Resolver(self.interpreter, self.error_handler).resolve_all(statements)
        if self.error_handler.had_error:
            logger.debug("static errors, skipping evaluation")
            return

        self.interpreter.interpret(statements, echo=self.cmd_line)

    def run_file(self, path):
        """Runs the file at path once and returns the exit status for the process."""
        try:
            with open(path, "r") as file:
                source = file.read()
        except OSError as error:
            logger.debug("could not read '%s': %s", path, error)
            self.error_handler.fail(f"'{path}' could not be opened")
            return EX_NOINPUT

        self.run(source)
        return self.status()

    def status(self):
        if self.error_handler.had_error:
            return EX_DATAERR
        if self.error_handler.had_runtime_error:
            return EX_SOFTWARE
        return EX_OK

    @staticmethod
    def needs_continuation(source):
        """Whether source is unfinished: more brackets opened than closed, or an unterminated string. Used in
        command-line mode to keep reading lines before running them.
        """
        handler = _SilentHandler()
        tokens = Scanner(source, handler).scan_tokens()
        if "Unterminated string." in handler.messages:
            return True

        balance = 0
        for token in tokens:
            if token.type in OPENERS:
                balance += 1
            elif token.type in CLOSERS:
                balance -= 1
        return balance > 0
