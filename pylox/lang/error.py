"""Error handling for the Lox language. Three kinds of error are kept strictly apart:

- scan errors and parse/static errors are reported (`[line N] Error<where>: <message>`) and the pipeline keeps going
  so that every error in a unit of source is reported, but nothing is evaluated;
- runtime errors are LoxRuntimeErrors, raised during evaluation and caught at the top of Interpreter.interpret,
  which reports them (`<message>\\n[line N]`) and stops the run.

Only LoxErrors should be encountered while running: if another type of error makes it all the way to the
ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored

from pylox.syntax.tokens import TokenType


class LoxError(Exception):
    """Superclass of every error the Lox pipeline raises on purpose."""

    def __init__(self, msg, internal=False):
        super().__init__(msg)
        self.msg = msg
        self.internal = internal


class ParseError(LoxError):
    """Signal used by the Parser to unwind to its recovery point. Always reported before being raised and never
    propagated out of Parser.parse.
    """


class LoxRuntimeError(LoxError):
    """Error raised while evaluating. token locates the error in the source."""

    def __init__(self, token, msg, internal=False):
        super().__init__(msg, internal)
        self.token = token


class NativeError(LoxError):
    """Raised by native callables, which don't know where they were called from. The Interpreter rethrows it as a
    LoxRuntimeError located at the call.
    """


class ErrorHandler:
    """Reports errors in the format tooling expects and remembers whether any occurred. Also a context manager that
    turns stray exceptions into reports, so that one bad line can't take down the interactive shell.
    """
    ERROR = "red"

    def __init__(self, err=None, colors=False):
        self.err = err if err is not None else sys.stderr
        self.colors = colors

        self.had_error = False          # scan, parse or static error
        self.had_runtime_error = False

    def reset(self):
        """Forgets previous errors. Called before every line in command-line mode."""
        self.had_error = False
        self.had_runtime_error = False

    def _colored(self, text):
        if not self.colors:
            return text
        return colored(text, ErrorHandler.ERROR, attrs=["bold"])

    def report(self, line, where, message):
        label = self._colored("Error")
        print(f"[line {line}] {label}{where}: {message}", file=self.err)
        self.had_error = True

    def error(self, line, message):
        """Error without a token, used by the Scanner."""
        self.report(line, "", message)

    def token_error(self, token, message):
        if token.type is TokenType.EOF:
            self.report(token.line, " at end", message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def runtime_error(self, error):
        msg = error.msg
        if error.internal:
            msg = "[internal] " + msg

        print(f"{self._colored(msg)}\n[line {error.token.line}]", file=self.err)
        self.had_runtime_error = True

    def fail(self, msg):
        """Reports an error that isn't tied to a line of source, e.g. an unreadable file."""
        print(f"{self._colored('error')}: {msg}", file=self.err)
        self.had_error = True

    def internal_error(self, msg):
        print(self._colored(f"[internal] {msg}"), file=self.err)
        self.had_runtime_error = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            return True

        do_exit = False
        if exc_type is KeyboardInterrupt:
            print(self._colored("keyboard interrupt"), file=self.err)
        elif exc_type is SystemExit:
            do_exit = True
        elif issubclass(exc_type, RecursionError):
            self.internal_error("maximum recursion depth exceeded")
        elif issubclass(exc_type, LoxRuntimeError):
            self.runtime_error(exc_val)
        elif issubclass(exc_type, LoxError):
            if exc_val.internal:
                self.internal_error(exc_val.msg)
            else:
                self.fail(exc_val.msg)
        else:
            self.internal_error(f"unknown error: '{exc_type.__name__}: {exc_val}'")
            do_exit = True

        return not do_exit
