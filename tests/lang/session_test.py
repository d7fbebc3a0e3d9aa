import io
import os
import tempfile
import unittest

from ocrint.lang.error import ErrorHandler, InvalidTokenInBlock, OcrError, UnrecognisedCharacter
from ocrint.lang.session import Session


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, source, name="program.txt"):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w") as file:
            file.write(source)
        return path

    def session(self, path, stdin="", **kwargs):
        stdout = io.StringIO()
        sess = Session(ErrorHandler(), path, stdin=io.StringIO(stdin), stdout=stdout, **kwargs)
        return sess, stdout

    def test_run_file(self):
        path = self.write("name = input(\"Name: \")\nprint(\"Hello, \" + name)\n")
        sess, stdout = self.session(path, stdin="Grace\n")
        self.assertEqual("", stdout.getvalue())  # nothing runs before run

        sess.run()
        self.assertEqual("Name: Hello, Grace\n", stdout.getvalue())
        self.assertEqual([], sess.to_exec)

    def test_missing_file(self):
        with self.assertRaises(OcrError) as raised:
            self.session(os.path.join(self.tmp.name, "nope.txt"))
        self.assertFalse(raised.exception.diagnosis)

    def test_reserved_filename(self):
        self.assertRaises(OcrError, self.session, Session.SH_FILE)

    def test_errors_halt_before_running(self):
        cases = {
            "print(\"never\")\nx = 5 ; 3": UnrecognisedCharacter,
            "print(\"never\")\n5 = x": InvalidTokenInBlock,
        }
        for case, error in cases.items():
            path = self.write(case)
            stdout = io.StringIO()
            with self.assertRaises(error):
                Session(ErrorHandler(), path, stdout=stdout)
            self.assertEqual("", stdout.getvalue(), case)

    def test_debug(self):
        path = self.write("x = 1 + 2\nprint(x)")
        sess, stdout = self.session(path, debug=True)
        sess.run()

        text = stdout.getvalue()
        for header in ("Input program:", "Tokens:", "AST:", "Running program:"):
            self.assertIn(header, text)
        self.assertIn("Ident('x')", text)
        self.assertIn("Assign(", text)
        self.assertIn("operator=PLUS", text)
        self.assertTrue(text.endswith("Running program:\n3\n"))

    def test_command_line_state_persists(self):
        stdout = io.StringIO()
        handler = ErrorHandler()
        sess = Session(handler, Session.SH_FILE, cmd_line=True, stdout=stdout)
        self.assertFalse(handler.fatal)

        for entry in ["count = 3", "count += 4", "print(count)"]:
            sess.add(entry)
            sess.run()
        self.assertEqual("7\n", stdout.getvalue())

    def test_preprocess_line(self):
        cases = {
            ("x = 1", ""): ("x = 1", False),
            ("if x > 1 then", ""): ("if x > 1 then", True),
            ("print(x)", "if x > 1 then"): ("if x > 1 then\nprint(x)", True),
            ("endif", "if x > 1 then\nprint(x)"): ("if x > 1 then\nprint(x)\nendif", False),
            ("while a < 3 if a == 1 then", ""): ("while a < 3 if a == 1 then", True),
            ("x = $", "while a < 3"): ("while a < 3\nx = $", False),
        }
        for (line, prev), expected in cases.items():
            self.assertEqual(expected, Session.preprocess_line(line, prev), line)


if __name__ == '__main__':
    unittest.main()
