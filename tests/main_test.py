import contextlib
import io
import logging
import os
import tempfile
import unittest

from ocrint.main import build_parser, main, setup_logging


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, source, name="program.txt"):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w") as file:
            file.write(source)
        return path

    def run_main(self, *argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            main(list(argv))
        return out.getvalue()

    def test_runs_program(self):
        path = self.write("if 10 + 5 > 5 then print(\"hello world\") endif")
        self.assertEqual("hello world\n", self.run_main(path))

    def test_debug(self):
        out = self.run_main("--debug", self.write("print(1)"))
        self.assertIn("Tokens:", out)
        self.assertTrue(out.endswith("Running program:\n1\n"))

    def test_errors_exit(self):
        cases = {
            "print(\"first\")\nx = 5 + (1 < 2)\nprint(\"second\")": "first\n",
            "print(\"first\")\nprint(undefined)\nprint(\"second\")": "first\n",
            "print(\"first\")\nb = a ? 2\nprint(\"second\")": "",
        }
        for case, before in cases.items():
            out = io.StringIO()
            with contextlib.redirect_stdout(out), self.assertRaises(SystemExit) as raised:
                main([self.write(case)])

            self.assertEqual(1, raised.exception.code, case)
            self.assertEqual(before, out.getvalue()[:len(before)], case)
            self.assertIn("error: ", out.getvalue(), case)
            self.assertNotIn("second", out.getvalue(), case)

    def test_error_output(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out), self.assertRaises(SystemExit):
            main([self.write("a = 1\nb = a ? 2", "bad.txt")])

        self.assertIn("bad.txt:2:7: ", out.getvalue())
        self.assertIn("2 | b = a ? 2", out.getvalue())

    def test_missing_file(self):
        with self.assertRaises(SystemExit):
            self.run_main(os.path.join(self.tmp.name, "missing.txt"))

    def test_parser(self):
        args = build_parser().parse_args(["-d", "--log-level", "debug", "prog.txt"])
        self.assertTrue(args.debug)
        self.assertEqual("DEBUG", args.log_level)
        self.assertEqual("prog.txt", args.program)
        self.assertIsNone(build_parser().parse_args([]).program)

    def test_setup_logging(self):
        logger = setup_logging("INFO")
        self.assertEqual(logging.INFO, logger.level)
        self.assertEqual(1, len(logger.handlers))

        setup_logging()
        self.assertEqual(1, len(logger.handlers))
        self.assertEqual(logging.WARNING, logger.level)


if __name__ == '__main__':
    unittest.main()
