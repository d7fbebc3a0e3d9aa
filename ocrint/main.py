"""Runs OCR reference language programs, or starts command-line mode when no program is given. Also uses the error
handling context manager. Called from the ocrint console script.

Program flow:
    1. Lexer: converts the source text to a list of tokens, each tagged with its position
    2. Parser: recursive descent over the tokens, producing a single root Block
    3. Interpreter: walks the tree, reading and writing variables in one symbol table
Lexer and parser errors point at the offending source; anything that goes wrong later aborts the program with a
message.
"""

import argparse
import logging
import sys

from ocrint.lang.error import ErrorHandler
from ocrint.lang.session import Session
from ocrint.lang.shell import Shell

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def setup_logging(level=logging.WARNING):
    """Sets up the ocrint logger hierarchy to write to stderr."""
    logger = logging.getLogger("ocrint")
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)
    logger.addHandler(handler)

    return logger


def build_parser():
    parser = argparse.ArgumentParser(prog="ocrint", description="An interpreter for the OCR reference language")
    parser.add_argument("program", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-d", "--debug", action="store_true", help="display debug info such as the tokens and AST")
    parser.add_argument("--log-level", default="WARNING", choices=LOG_LEVELS, type=str.upper,
                        help="logging level (default: WARNING)")
    return parser


def main(argv=None):
    """Runs ocrint. Called from the ocrint console script."""
    assert sys.version_info >= (3, 7), "ocrint cannot be run with python < 3.7"

    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)
        setup_logging(args.log_level)

        if args.program is not None:
            sess = Session(error_handler, args.program, debug=args.debug)
            sess.run()

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, debug=args.debug)).cmdloop()


if __name__ == "__main__":
    main()
