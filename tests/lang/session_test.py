import io
import os
import tempfile
import unittest

from pylox.lang.error import ErrorHandler
from pylox.lang.session import EX_DATAERR, EX_NOINPUT, EX_OK, EX_SOFTWARE, Session


class RunFileTestCase(unittest.TestCase):

    def setUp(self):
        self.dir = tempfile.TemporaryDirectory()
        self.out, self.err = io.StringIO(), io.StringIO()
        self.sess = Session(ErrorHandler(self.err), self.out)

    def tearDown(self):
        self.dir.cleanup()

    def write(self, source):
        path = os.path.join(self.dir.name, "script.lox")
        with open(path, "w") as file:
            file.write(source)
        return path

    def test_ok(self):
        status = self.sess.run_file(self.write("var a = \"hello\";\nprint a;\n"))
        self.assertEqual(EX_OK, status)
        self.assertEqual("hello\n", self.out.getvalue())
        self.assertEqual("", self.err.getvalue())

    def test_static_error(self):
        status = self.sess.run_file(self.write("print \"never\";\nprint 1 +;\nreturn;\n"))
        self.assertEqual(EX_DATAERR, status)
        self.assertEqual("", self.out.getvalue(), "nothing runs after a syntax error")
        self.assertEqual("[line 2] Error at ';': Expect expression.\n", self.err.getvalue())

    def test_resolution_error(self):
        status = self.sess.run_file(self.write("print \"never\";\nreturn;\n"))
        self.assertEqual(EX_DATAERR, status)
        self.assertEqual("", self.out.getvalue())

    def test_runtime_error(self):
        status = self.sess.run_file(self.write("print 1;\nprint -\"x\";\nprint 2;\n"))
        self.assertEqual(EX_SOFTWARE, status)
        self.assertEqual("1\n", self.out.getvalue())
        self.assertEqual("Operand must be a number.\n[line 2]\n", self.err.getvalue())

    def test_missing_file(self):
        path = os.path.join(self.dir.name, "missing.lox")
        status = self.sess.run_file(path)
        self.assertEqual(EX_NOINPUT, status)
        self.assertIn("could not be opened", self.err.getvalue())


class CommandLineTestCase(unittest.TestCase):

    def setUp(self):
        self.out, self.err = io.StringIO(), io.StringIO()
        self.sess = Session(ErrorHandler(self.err), self.out, cmd_line=True)

    def test_echo(self):
        self.sess.run("1 + 2;")
        self.sess.run("var a = 4;")
        self.sess.run("a;")
        self.sess.run("print a;")
        self.sess.run("\"text\";")
        self.assertEqual("3\n4\n4\ntext\n", self.out.getvalue())

    def test_state_persists(self):
        self.sess.run("fun twice(x) { return x * 2; }")
        self.sess.run("var b = twice(3);")
        self.sess.run("print twice(b);")
        self.assertEqual("12\n", self.out.getvalue())

    def test_errors_are_forgotten(self):
        self.sess.run("print ;")
        self.assertTrue(self.sess.error_handler.had_error)

        self.sess.run("print 1;")
        self.assertFalse(self.sess.error_handler.had_error)
        self.assertEqual("1\n", self.out.getvalue())

        self.sess.run("nil();")
        self.assertEqual(EX_SOFTWARE, self.sess.status())
        self.sess.run("print 2;")
        self.assertEqual(EX_OK, self.sess.status())

    def test_no_echo_in_file_mode(self):
        out = io.StringIO()
        Session(ErrorHandler(io.StringIO()), out).run("1 + 2;")
        self.assertEqual("", out.getvalue())


class ContinuationTestCase(unittest.TestCase):

    def test_needs_continuation(self):
        should_pass = [
            "fun f() {\n",
            "print (1 +\n",
            "var l = [1,\n",
            "print \"multi\n",
            "if (a) { while (b) {\n}\n",
        ]
        for case in should_pass:
            self.assertTrue(Session.needs_continuation(case), repr(case))

        should_fail = [
            "print 1;\n",
            "fun f() {}\n",
            "print \"done\";\n",
            "print 1 +\n",      # incomplete, but parse errors are reported rather than continued
            "}\n",
            "print \"(\";\n",
            "// {\n",
            "\n",
        ]
        for case in should_fail:
            self.assertFalse(Session.needs_continuation(case), repr(case))


if __name__ == '__main__':
    unittest.main()
