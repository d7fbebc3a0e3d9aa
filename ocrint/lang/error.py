"""Error handling for the OCR language. Only OcrErrors should be encountered while running a program: if another type
of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Errors come in two tiers. Lexer and parser errors carry a position and are shown with a snippet of the offending
source; everything else (malformed grammar deeper inside a statement, runtime errors) is reported as a bare message.
None of them are recoverable: the running program is aborted.
"""

import sys

from termcolor import colored

from ocrint.lang.position import snippet


class OcrError(Exception):
    """Templates an error message so that it can be used to throw an OCR language error. exprs are substituted into
    msg with str.format and highlighted when the error is displayed.
    """

    def __init__(self, msg, exprs=None, diagnosis=True, internal=False):
        if exprs is None:
            exprs = []
        if not isinstance(exprs, (list, tuple)):
            exprs = [exprs]

        self.template = msg
        self.exprs = [str(expr) for expr in exprs]
        self.msg = msg.format(*self.exprs)

        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)

    @property
    def position(self):
        """Position of the offending span, if the error has one."""
        return None

    def highlighted(self):
        """Returns self.msg with the substituted exprs in bold."""
        return self.template.format(*(colored(expr, attrs=["bold"]) for expr in self.exprs))


class PositionedError(OcrError):
    """An error that points at a span of the source text."""

    def __init__(self, msg, exprs, start, length, source):
        super().__init__(msg, exprs)
        self.start = start
        self.length = length
        self.source = source

    @property
    def position(self):
        return self.start

    def snippet(self):
        return snippet(self.start, self.length, self.source)

    def __str__(self):
        return "\n".join([self.msg] + self.snippet())


class LexerError(PositionedError):
    """Raised while converting source text to tokens."""


class UnrecognisedCharacter(LexerError):

    def __init__(self, char, position, source):
        super().__init__("unrecognised character '{}'", char, position, 1, source)
        self.char = char


class ParserError(OcrError):
    """Raised while converting tokens to an AST."""


class InvalidTokenInBlock(ParserError, PositionedError):

    def __init__(self, token, source):
        msg = "invalid statement at the root of block: {}"
        PositionedError.__init__(self, msg, [token], token.start, token.len, source)
        self.token = token


class UnexpectedToken(ParserError):
    """A token (or the end of input) that no grammar rule expects at this point."""

    def __init__(self, expected, token=None):
        if token is None:
            super().__init__("expected {}, reached end of input", expected, diagnosis=False, internal=True)
        else:
            super().__init__("expected {}, got {} at {}", (expected, token, token.start), diagnosis=False,
                             internal=True)
        self.token = token


class InterpreterError(OcrError):
    """Raised while evaluating an AST. Runtime errors are never recovered from."""

    def __init__(self, msg, exprs=None):
        super().__init__(msg, exprs, diagnosis=False)


class TypeMismatch(InterpreterError):
    pass


class UndefinedVariable(InterpreterError):

    def __init__(self, ident, msg="'{}' is not defined"):
        super().__init__(msg, ident)
        self.ident = ident


class IndexOutOfRange(InterpreterError):

    def __init__(self, ident, index, length):
        super().__init__("index {} is out of range for '{}' (length {})", (index, ident, length))
        self.index = index


class ArityMismatch(InterpreterError):

    def __init__(self, func, expected, got):
        super().__init__("'{}' takes {} argument(s), got {}", (func, expected, got))


class UnsupportedOperator(InterpreterError):
    pass


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report OCR language errors instead."""
    ERROR = "red"

    def __init__(self, fatal=True, file=None):
        self.fatal = fatal
        self.file = file  # defaults to sys.stdout at report time
        self.path = None

    def register_file(self, path):
        """Registers path as the origin of any positioned error."""
        self.path = path

    @staticmethod
    def diagnose(error):
        """Returns error's source snippet with the pointer coloured."""
        padding, line, pointer = error.snippet()
        return "\n".join([padding, line, colored(pointer, ErrorHandler.ERROR, attrs=["bold"])])

    def throw(self, error):
        """Reports error, then exits if this handler is fatal. error must be an OcrError."""
        error_msg = ""
        if self.path is not None and error.position is not None:
            error_msg += colored(f"{self.path}:{error.position}: ", attrs=["bold"])

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.highlighted()
        print(error_msg, file=self.file or sys.stdout)

        if not error.internal and error.diagnosis and error.position is not None:
            print(ErrorHandler.diagnose(error), file=self.file or sys.stdout)

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(OcrError("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(OcrError("maximum recursion depth exceeded (program is nested too deeply)"))
        elif exc_type is not None and issubclass(exc_type, OcrError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(OcrError("unknown error: '{}: {}'", (exc_type.__name__, exc_val), internal=True))
            do_exit = True

        return not do_exit
