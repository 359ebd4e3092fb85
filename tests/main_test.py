import io
import os
import tempfile
import unittest

from pylox.main import USAGE, main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.dir = tempfile.TemporaryDirectory()
        self.out, self.err = io.StringIO(), io.StringIO()

    def tearDown(self):
        self.dir.cleanup()

    def script(self, source):
        path = os.path.join(self.dir.name, "main.lox")
        with open(path, "w") as file:
            file.write(source)
        return path

    def run_main(self, argv, stdin=None):
        return main(argv, stdin=stdin, stdout=self.out, stderr=self.err)

    def test_usage(self):
        self.assertEqual(64, self.run_main(["one.lox", "two.lox"]))
        self.assertEqual(USAGE + "\n", self.out.getvalue())

    def test_exit_statuses(self):
        cases = {
            "print \"ok\";": 0,
            "print;": 65,
            "{ var a = a; }": 65,
            "print 1 / nil;": 70,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.run_main([self.script(case)]), case)

    def test_missing_script(self):
        self.assertEqual(66, self.run_main([os.path.join(self.dir.name, "nope.lox")]))

    def test_script_output(self):
        self.run_main([self.script("for (var i = 0; i < 3; i = i + 1) print i * i;")])
        self.assertEqual("0\n1\n4\n", self.out.getvalue())

    def test_shell(self):
        stdin = io.StringIO("var x = 6;\nx * 7;\n")
        self.assertEqual(0, self.run_main([], stdin=stdin))
        self.assertIn("42\n", self.out.getvalue())

    def test_shell_no_color(self):
        stdin = io.StringIO("print nil + 1;\n")
        self.assertEqual(0, self.run_main(["--no-color"], stdin=stdin))
        self.assertEqual("Operands must be two numbers or two strings.\n[line 1]\n", self.err.getvalue())


if __name__ == '__main__':
    unittest.main()
