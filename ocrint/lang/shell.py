"""Handles interactive/command-line mode for the OCR interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """OCR reference language interpreter shell."""
    intro = "OCR reference language interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used while an if/while is still open
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    def default(self, line):
        """Executes arbitrary OCR statements."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            source, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = source
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                self.sess.add(source)
                self.sess.run()

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if arg:
            return self.default(f"help {arg}")

        print("Welcome to the OCR reference language interpreter!\n\n"
              "Statements run as soon as they are complete; an 'if' or 'while' waits for its \n"
              "'endif' or 'endwhile'. Variables persist between entries.\n\n"
              "Try it out by typing 'name = input(\"name: \")', then 'print(\"hello \" + name)'. \n"
              "Arrays are declared with 'array scores[3]' and their size read with 'scores.length'.",
              file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit("")

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            return self.default(f"exit {arg}")  # statement about a variable named 'exit'
        return True
