import io
import unittest

from pylox.lang.error import ErrorHandler
from pylox.lang.interpreter import Interpreter
from pylox.lang.resolver import Resolver
from pylox.syntax import nodes
from pylox.syntax.parser import Parser
from pylox.syntax.scanner import Scanner


def resolve(source):
    """Returns (interpreter, statements, reported errors) after resolving source."""
    err = io.StringIO()
    handler = ErrorHandler(err)
    interpreter = Interpreter(handler, io.StringIO())

    statements = Parser(Scanner(source, handler).scan_tokens(), handler).parse()
    assert not handler.had_error, err.getvalue()

    Resolver(interpreter, handler).resolve_all(statements)
    return interpreter, statements, err.getvalue()


class ResolverTestCase(unittest.TestCase):

    def test_static_errors(self):
        cases = {
            "{ var a = a; }": "[line 1] Error at 'a': Can't read local variable in its own initializer.\n",
            "fun f() { var a = 1; var a = 2; }": "[line 1] Error at 'a': Already a variable with this name in this scope.\n",
            "fun f(a, a) {}": "[line 1] Error at 'a': Already a variable with this name in this scope.\n",
            "return 1;": "[line 1] Error at 'return': Can't return from top-level code.\n",
            "class C { init() { return 1; } }": "[line 1] Error at 'return': Can't return a value from an initializer.\n",
            "break;": "[line 1] Error at 'break': Can only break out of loops.\n",
            "if (true) { break; }": "[line 1] Error at 'break': Can only break out of loops.\n",
            "while (true) { fun f() { break; } }": "[line 1] Error at 'break': Can only break out of loops.\n",
            "print this;": "[line 1] Error at 'this': Can't use 'this' outside of a class.\n",
            "fun f() { return this; }": "[line 1] Error at 'this': Can't use 'this' outside of a class.\n",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, resolve(case)[2], case)

    def test_legal(self):
        should_pass = [
            "var a = a;",                       # global scope: no enclosing scope to conflict with
            "var a = 1; var a = 2;",            # globals may be redeclared
            "{ var a = 1; { var b = a; } }",
            "{ var a = 1; { var a = 2; } }",    # shadowing is fine
            "class C { init() { return; } }",   # early return without a value
            "while (true) { if (true) break; }",
            "for (;;) { { break; } }",
            "class C { m() { fun f() { return this; } } }",
            "fun f() { return; }",
        ]
        for case in should_pass:
            self.assertEqual("", resolve(case)[2], case)

    def test_all_errors_reported(self):
        __, __, err = resolve("break;\nreturn;\nprint this;")
        self.assertEqual(3, err.count("Error"))
        self.assertIn("[line 3]", err)

    def test_distances(self):
        interpreter, statements, err = resolve("""
        var g = 0;
        {
            var a = 1;
            {
                var b = a;
                b = g;
            }
        }
        """)
        __, block = statements
        inner = block.statements[1]
        read_a = inner.statements[0].initializer
        assign_b = inner.statements[1].expression
        read_g = assign_b.value

        self.assertEqual(1, interpreter.locals[read_a])
        self.assertEqual(0, interpreter.locals[assign_b])
        self.assertNotIn(read_g, interpreter.locals, "globals are not resolved")

    def test_distances_in_methods(self):
        interpreter, statements, err = resolve("""
        class C {
            m(x) {
                fun f() { return this; }
                return x;
            }
        }
        """)
        klass, = statements
        method = klass.methods[0]
        fun, ret = method.body
        this = fun.body[0].value

        self.assertIsInstance(this, nodes.This)
        self.assertEqual(2, interpreter.locals[this])  # f's scope, m's scope, then the 'this' scope
        self.assertEqual(0, interpreter.locals[ret.value])

    def test_keyed_by_identity(self):
        interpreter, statements, err = resolve("{ var a; a; { a; } }")
        block, = statements
        first = block.statements[1].expression
        second = block.statements[2].statements[0].expression

        self.assertEqual(0, interpreter.locals[first])
        self.assertEqual(1, interpreter.locals[second])

    def test_shadowing_program_does_not_run(self):
        out, err = io.StringIO(), io.StringIO()
        from pylox.lang.session import Session

        Session(ErrorHandler(err), out).run("var a = 1; { var a = a + 1; print a; } print a;")
        self.assertEqual("", out.getvalue())
        self.assertEqual("[line 1] Error at 'a': Can't read local variable in its own initializer.\n", err.getvalue())


if __name__ == '__main__':
    unittest.main()
