"""Session control for the OCR language. Runs the lex -> parse -> evaluate pipeline, either on a whole file or on
entries typed in command-line mode.
"""

from ocrint.lang.error import OcrError
from ocrint.lang.evaluator import Interpreter
from ocrint.lang.lexer import Keyword, Lexer
from ocrint.lang.parser import Parser
from ocrint.lang.symbols import SymbolTable


class Session:
    """Governs an OCR session: one Interpreter, and so one symbol table, for its whole lifetime."""
    SH_FILE = "<in>"  # command-line interpreter filename

    OPENERS = (Keyword.IF, Keyword.WHILE)
    CLOSERS = (Keyword.ENDIF, Keyword.ENDWHILE)

    def __init__(self, error_handler, path, cmd_line=False, debug=False, stdin=None, stdout=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.debug = debug        # whether or not to dump tokens and AST before running

        self.interpreter = Interpreter(SymbolTable(), stdin, stdout)
        self.to_exec = []  # parsed root Blocks waiting to run

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise OcrError("'{}' could not be opened", path, diagnosis=False)

            self.add(source)

        elif not cmd_line:
            raise OcrError("'<in>' is a reserved filename")

    @property
    def stdout(self):
        return self.interpreter.stdout

    @staticmethod
    def preprocess_line(line, prev=""):
        """Joins line onto prev, the unfinished entry so far. Returns the joined source and whether or not an 'if' or
        'while' is still open, in which case more lines are needed before the entry can run.
        """
        source = f"{prev}\n{line}" if prev else line
        try:
            tokens = Lexer(source).lex()
        except OcrError:
            return source, False  # let add report it

        depth = 0
        for token in tokens:
            if token.is_keyword(*Session.OPENERS):
                depth += 1
            elif token.is_keyword(*Session.CLOSERS):
                depth -= 1
        return source, depth > 0

    def add(self, source):
        """Lexes and parses source, queueing it to run. Nothing is run until run is called."""
        if self.debug:
            self._show("Input program:", source)

        tokens = Lexer(source).lex()
        if self.debug:
            self._show("Tokens:", *tokens)

        ast = Parser(tokens, source).parse()
        if self.debug:
            self._show("AST:", ast.display())

        self.to_exec.append(ast)

    def run(self):
        """Runs every queued program in order. Any error raised aborts the run."""
        if self.debug and self.to_exec:
            print("Running program:", file=self.stdout)

        while self.to_exec:
            self.interpreter.run(self.to_exec.pop(0))

    def _show(self, header, *lines):
        print(header, file=self.stdout)
        for line in lines:
            print(line, file=self.stdout)
        print(file=self.stdout)
