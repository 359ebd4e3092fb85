"""Handles interactive/command-line mode for the Lox interpreter. Uses cmd as backend: lines are read from the Cmd's
stdin (sys.stdin unless another stream is injected), and end of input exits.
"""

import cmd

from pylox.syntax.parser import Parser
from pylox.syntax.printer import AstPrinter
from pylox.syntax.scanner import Scanner


COMMANDS = {"ast", "help", "exit"}
NOT_A_COMMAND = ("=", "(", ".", ";")  # a command name followed by one of these is Lox source


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: Python backend\nType 'help' for more information, 'exit' or EOF to quit."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    def onecmd(self, line):
        """Unfinished input goes straight to default, so that a continued line is never mistaken for a command. So
        do lines that only look like commands, e.g. `help = 1;`.
        """
        if line == "EOF":
            return self.do_EOF("")
        if self._tmp_line:
            return self.default(line)

        command, arg, __ = self.parseline(line)
        if command in COMMANDS and not arg.startswith(NOT_A_COMMAND):
            return super().onecmd(line)
        return self.default(line)

    def default(self, line):
        """Executes arbitrary Lox source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            source = self._tmp_line + line + "\n"

            if self.sess.needs_continuation(source):
                self._tmp_line = source
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt
            self.sess.run(source)

    def do_ast(self, arg):
        """ast EXPRESSION: prints the syntax tree of EXPRESSION without evaluating it."""
        handler = self.sess.error_handler
        with handler:
            handler.reset()
            expr = Parser(Scanner(arg, handler).scan_tokens(), handler).parse_expression()
            if expr is not None:
                print(AstPrinter().print(expr), file=self.stdout)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the Lox interpreter!\n\n"
              "Lox is a small dynamically-typed scripting language with C-like syntax, closures \n"
              "and classes. Every line is run as soon as it is complete; lines with unclosed \n"
              "brackets are continued on the next line.\n\n"
              "Try it out by typing 'var greeting = \"hello\";'. Next, try typing 'greeting + \n"
              "\" world\";'. Expressions typed on their own are printed.\n\n"
              "Commands: 'ast EXPRESSION' shows how EXPRESSION parses, 'exit' quits.", file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True


def make_shell(sess, stdin=None, stdout=None):
    """Builds a Shell around sess. With an injected stdin, lines are read from it instead of the terminal."""
    if stdin is None:
        return Shell(sess, stdout=stdout)

    shell = Shell(sess, stdin=stdin, stdout=stdout)
    shell.use_rawinput = False
    return shell

