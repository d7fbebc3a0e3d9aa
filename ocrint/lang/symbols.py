"""Flat identifier-to-value store for a single program run: no declarations, no scopes, no shadowing."""

import logging

from ocrint.lang.error import UndefinedVariable

logger = logging.getLogger(__name__)


class SymbolTable:
    """Owned by exactly one Interpreter. The first assignment to an identifier creates its binding."""

    def __init__(self):
        self._symbols = {}

    def assign(self, ident, value):
        logger.debug("%s = %s", ident, value)
        self._symbols[ident] = value

    def get(self, ident):
        try:
            return self._symbols[ident]
        except KeyError:
            raise UndefinedVariable(ident) from None

    def __contains__(self, ident):
        return ident in self._symbols

    def __repr__(self):
        return f"SymbolTable({self._symbols!r})"
