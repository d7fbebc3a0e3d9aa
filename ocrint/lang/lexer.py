"""Lexical analysis for the OCR language: converts source text into a list of position-tagged tokens.

Tokens can be loosely defined as follows:

```
<ident>   ::= (<letter> | "_") (<letter> | <digit> | "_")*   ; keyword if in Lexer.KEYWORDS
<number>  ::= <digit>+                                       ; unsigned 64-bit
<string>  ::= '"' <char>* '"'                                ; an unterminated string runs to the end of input
<symbol>  ::= "=" | "==" | "+" | "+=" | "-" | "-=" | "*" | "/" | "%"
            | ">" | ">=" | "<" | "<=" | "(" | ")" | "[" | "]" | "."
```
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ocrint.lang.error import OcrError, UnrecognisedCharacter
from ocrint.lang.position import Position
from ocrint.lang.values import parse_digits

logger = logging.getLogger(__name__)


class TokenKind(Enum):
    IDENT = "Ident"
    STRING = "String"
    NUMBER = "Number"
    KEYWORD = "Keyword"
    SYMBOL = "Symbol"


class Keyword(Enum):
    DO = "do"
    WHILE = "while"
    ENDWHILE = "endwhile"
    IF = "if"
    THEN = "then"  # never produced by the lexer: 'then' lexes as an identifier
    ELSE = "else"
    ENDIF = "endif"
    BREAK = "break"
    ARRAY = "array"


class Symbol(Enum):
    EQUALS = "="
    DOUBLE_EQUALS = "=="
    PLUS = "+"
    PLUS_EQUALS = "+="
    MINUS = "-"
    MINUS_EQUALS = "-="
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"
    GREATER = ">"
    GREATER_EQUALS = ">="
    LESS = "<"
    LESS_EQUALS = "<="
    LEFT_BRACKET = "("
    RIGHT_BRACKET = ")"
    LEFT_SQUARE = "["
    RIGHT_SQUARE = "]"
    DOT = "."


@dataclass(frozen=True)
class Token:
    """A classified lexical unit. value is the identifier name, string content, number, Keyword or Symbol."""
    kind: TokenKind
    value: Any
    start: Position = Position()
    len: int = 1

    def is_keyword(self, *keywords):
        return self.kind is TokenKind.KEYWORD and self.value in keywords

    def is_symbol(self, *symbols):
        return self.kind is TokenKind.SYMBOL and self.value in symbols

    def __str__(self):
        if self.kind in (TokenKind.KEYWORD, TokenKind.SYMBOL):
            return f"{self.kind.value}('{self.value.value}')"
        return f"{self.kind.value}({self.value!r})"


class Lexer:
    """Single left-to-right scan over source with one character of lookahead."""
    KEYWORDS = {keyword.value: keyword for keyword in Keyword if keyword is not Keyword.THEN}
    SINGLE = {symbol.value: symbol for symbol in Symbol if len(symbol.value) == 1}
    DOUBLE = {symbol.value: symbol for symbol in Symbol if len(symbol.value) == 2}

    DIGITS = "0123456789"
    WHITESPACE = " \t"
    NEWLINES = "\n\r"

    def __init__(self, source):
        self.source = source
        self.pos = 0
        self.line = 1
        self.col = 1
        self.tokens = []

    @property
    def current(self):
        return self.source[self.pos] if self.pos < len(self.source) else None

    def peek(self):
        """Returns the character after the current one, or None at the end of input."""
        nxt = self.pos + 1
        return self.source[nxt] if nxt < len(self.source) else None

    def advance(self):
        """Consumes the current character, tracking line and column."""
        char = self.current
        self.pos += 1
        if char in Lexer.NEWLINES:
            if not (char == "\r" and self.current == "\n"):  # \r\n ends a single line
                self.line += 1
                self.col = 1
        else:
            self.col += 1
        return char

    def lex(self):
        """Converts self.source to self.tokens, which is also returned. Raises UnrecognisedCharacter on the first
        character that cannot start a token.
        """
        while self.current is not None:
            char = self.current
            start = Position(self.line, self.col)
            begin = self.pos

            if char in Lexer.WHITESPACE or char in Lexer.NEWLINES:
                self.advance()
                continue
            elif char == '"':
                kind, value = TokenKind.STRING, self.read_string()
            elif char in Lexer.DIGITS:
                kind, value = TokenKind.NUMBER, self.read_number(start)
            elif char.isalpha() or char == "_":
                kind, value = self.read_word()
            elif char in Lexer.SINGLE:
                kind, value = TokenKind.SYMBOL, self.read_symbol()
            else:
                raise UnrecognisedCharacter(char, start, self.source)

            self.tokens.append(Token(kind, value, start, self.pos - begin))

        logger.debug("lexed %d tokens", len(self.tokens))
        return self.tokens

    def read_string(self):
        self.advance()  # opening quote
        content = ""
        while self.current is not None and self.current != '"':
            content += self.advance()
        if self.current is not None:
            self.advance()  # closing quote
        return content

    def read_number(self, start):
        digits = ""
        while self.current is not None and self.current in Lexer.DIGITS:
            digits += self.advance()

        number = parse_digits(digits)
        if number is None:
            raise OcrError("number literal {} at {} does not fit in 64 bits", (digits, start), internal=True)
        return number

    def read_word(self):
        word = ""
        while self.current is not None and (self.current.isalnum() or self.current == "_"):
            word += self.advance()

        if word in Lexer.KEYWORDS:
            return TokenKind.KEYWORD, Lexer.KEYWORDS[word]
        return TokenKind.IDENT, word

    def read_symbol(self):
        """Reads a one or two character symbol: '=', '<', '>', '+' and '-' combine with a following '='."""
        pair = self.current + (self.peek() or "")
        if pair in Lexer.DOUBLE:
            self.advance()
            self.advance()
            return Lexer.DOUBLE[pair]
        return Lexer.SINGLE[self.advance()]


def lex(source):
    """Returns the list of tokens in source."""
    return Lexer(source).lex()
