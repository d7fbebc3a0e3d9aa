import io
import unittest

from ocrint.lang.error import ErrorHandler
from ocrint.lang.session import Session
from ocrint.lang.shell import Shell


def run_shell(entries):
    out = io.StringIO()
    sess = Session(ErrorHandler(file=out), Session.SH_FILE, cmd_line=True, stdin=io.StringIO(), stdout=out)

    shell = Shell(sess, stdin=io.StringIO(entries), stdout=out)
    shell.use_rawinput = False
    shell.cmdloop()
    return out.getvalue()


class ShellTestCase(unittest.TestCase):

    def test_statements(self):
        self.assertIn("6\n", run_shell("x = 2\nprint(x * 3)\n"))

    def test_block_continues(self):
        out = run_shell("i = 0\nwhile i < 2\nprint(i)\ni += 1\nendwhile\nprint(\"done\")\n")
        self.assertIn(Shell.secondary_prompt, out)
        self.assertIn("0\n", out)
        self.assertIn("1\n", out)
        self.assertIn("done\n", out)

    def test_errors_are_not_fatal(self):
        out = run_shell("print(nope)\nx = 1 @ 2\nprint(\"still here\")\n")
        self.assertEqual(2, out.count("error: "))
        self.assertIn("still here\n", out)

    def test_exit(self):
        self.assertNotIn("after", run_shell("exit\nprint(\"after\")\n"))

    def test_exit_as_variable(self):
        self.assertIn("4\n", run_shell("exit = 4\nprint(exit)\n"))

    def test_help(self):
        self.assertIn("Welcome", run_shell("help\n"))


if __name__ == '__main__':
    unittest.main()
