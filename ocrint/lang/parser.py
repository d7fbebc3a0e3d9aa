"""Recursive-descent parser for the OCR language. Converts the lexer's token list into a single root Block.

Grammar, as parsed:

```
<block>      ::= <statement>*                          ; ends before "endif", "endwhile" or "else"
<statement>  ::= IDENT "=" <expr>
               | IDENT ("+=" | "-=") <expr>            ; shorthand for IDENT "=" IDENT ("+" | "-") <expr>
               | IDENT "[" <expr> "]" "=" <expr>
               | IDENT "(" <expr>? ")"
               | IDENT "." IDENT
               | "array" IDENT "[" <expr> "]"
               | "if" <expr> "then" <block> ("else" <block>)? "endif"
               | "while" <expr> <block> "endwhile"

<expr>       ::= <arith> ((">" | ">=" | "<" | "<=" | "==") <expr>)?
<arith>      ::= <term> (("+" | "-") <arith>)?
<term>       ::= <factor> (("*" | "/" | "%") <arith>)?
<factor>     ::= NUMBER | STRING | "(" <expr> ")"
               | IDENT | IDENT "(" <expr>? ")" | IDENT "[" <expr> "]" | IDENT "." IDENT
```

Right operands recurse into a whole level instead of looping, so chains lean right: 8 - 2 - 1 = 8 - (2 - 1), and
2 * 3 + 4 = 2 * (3 + 4). Programs rely on this grouping, so it is kept as is.

"then", the closing brackets and the "=" of an array element assignment, and the final "endif" are consumed without
checking what they are. Only "endwhile" is checked.
"""

import logging

from ocrint.lang.ast import (
    ADDITIVE_SYMBOLS, COMPARISON_SYMBOLS, MULTIPLICATIVE_SYMBOLS, ArrayDeclare, ArrayIndexAssign, ArrayRef, Assign,
    BinaryExpr, Block, DotExpr, FuncCall, If, Operator, Primary, VariableRef, While
)
from ocrint.lang.error import InvalidTokenInBlock, UnexpectedToken
from ocrint.lang.lexer import Keyword, Symbol, TokenKind
from ocrint.lang.values import Number, String

logger = logging.getLogger(__name__)


class Parser:
    """Consumes tokens left to right. source is only used for diagnostics."""
    TERMINATORS = (Keyword.ENDIF, Keyword.ENDWHILE, Keyword.ELSE)
    COMPOUND = {Symbol.PLUS_EQUALS: Operator.PLUS, Symbol.MINUS_EQUALS: Operator.MINUS}

    def __init__(self, tokens, source):
        self.tokens = list(tokens)
        self.source = source
        self.pos = 0

    def parse(self):
        """Parses every token into the root Block."""
        root = self.parse_block()
        if self.peek() is not None:
            raise InvalidTokenInBlock(self.peek(), self.source)  # stray terminator at the root

        logger.debug("parsed %d top-level statements", len(root.nodes))
        return root

    # token stream

    def peek(self, offset=0):
        """Returns the token offset places ahead without consuming anything, or None past the end of input."""
        idx = self.pos + offset
        return self.tokens[idx] if idx < len(self.tokens) else None

    def advance(self, expected="a token"):
        """Consumes and returns the current token, whatever it is."""
        token = self.peek()
        if token is None:
            raise UnexpectedToken(expected)
        self.pos += 1
        return token

    def skip(self, expected):
        """Consumes the current token without checking its kind."""
        self.advance(expected)

    def expect_ident(self):
        token = self.advance("an identifier")
        if token.kind is not TokenKind.IDENT:
            raise UnexpectedToken("an identifier", token)
        return token.value

    # statements

    def parse_block(self):
        nodes = []
        while self.peek() is not None:
            token = self.peek()

            if token.is_keyword(*Parser.TERMINATORS):
                break
            elif token.is_keyword(Keyword.IF):
                nodes.append(self.parse_if())
            elif token.is_keyword(Keyword.WHILE):
                nodes.append(self.parse_while())
            elif token.is_keyword(Keyword.ARRAY):
                nodes.append(self.parse_array_declare())
            elif token.kind is TokenKind.IDENT:
                nodes.append(self.parse_ident_statement())
            else:
                raise InvalidTokenInBlock(token, self.source)

        return Block(nodes)

    def parse_ident_statement(self):
        """Dispatches on the token after the identifier."""
        token, following = self.peek(), self.peek(1)

        if following is None:
            raise InvalidTokenInBlock(token, self.source)
        elif following.is_symbol(Symbol.EQUALS):
            return self.parse_assign()
        elif following.is_symbol(*Parser.COMPOUND):
            return self.parse_compound_assign()
        elif following.is_symbol(Symbol.LEFT_BRACKET):
            return self.parse_func_call()
        elif following.is_symbol(Symbol.LEFT_SQUARE):
            return self.parse_array_index_assign()
        elif following.is_symbol(Symbol.DOT):
            return self.parse_dot_expr()
        raise InvalidTokenInBlock(token, self.source)

    def parse_assign(self):
        ident = self.expect_ident()
        self.skip("'='")
        return Assign(ident, self.parse_expr())

    def parse_compound_assign(self):
        ident = self.expect_ident()
        operator = Parser.COMPOUND[self.advance().value]
        return Assign(ident, BinaryExpr(VariableRef(ident), operator, self.parse_expr()))

    def parse_array_declare(self):
        self.skip("'array'")
        ident = self.expect_ident()
        self.skip("'['")
        size = self.parse_expr()
        self.skip("']'")
        return ArrayDeclare(ident, size)

    def parse_array_index_assign(self):
        ident = self.expect_ident()
        self.skip("'['")
        index = self.parse_expr()
        self.skip("']'")
        self.skip("'='")
        return ArrayIndexAssign(ident, index, self.parse_expr())

    def parse_if(self):
        self.skip("'if'")
        cond = self.parse_expr()
        self.skip("'then'")
        then = self.parse_block()

        els = Block()
        if self.peek() is not None and self.peek().is_keyword(Keyword.ELSE):
            self.skip("'else'")
            els = self.parse_block()

        self.skip("'endif'")
        return If(cond, then, els)

    def parse_while(self):
        self.skip("'while'")
        cond = self.parse_expr()
        body = self.parse_block()

        token = self.advance("'endwhile'")
        if not token.is_keyword(Keyword.ENDWHILE):
            raise UnexpectedToken("'endwhile'", token)
        return While(cond, body)

    def parse_func_call(self):
        ident = self.expect_ident()
        self.skip("'('")

        args = []
        following = self.peek()
        if following is None:
            raise UnexpectedToken("')'")
        elif not following.is_symbol(Symbol.RIGHT_BRACKET):
            args.append(self.parse_expr())

        self.skip("')'")
        return FuncCall(ident, args)

    def parse_dot_expr(self):
        obj = self.expect_ident()
        self.skip("'.'")
        return DotExpr(obj, self.expect_ident())

    # expressions

    def parse_expr(self):
        left = self.parse_arith()
        if self._at_symbol(COMPARISON_SYMBOLS):
            operator = Operator.from_symbol(self.advance().value)
            return BinaryExpr(left, operator, self.parse_expr())
        return left

    def parse_arith(self):
        left = self.parse_term()
        if self._at_symbol(ADDITIVE_SYMBOLS):
            operator = Operator.from_symbol(self.advance().value)
            return BinaryExpr(left, operator, self.parse_arith())
        return left

    def parse_term(self):
        left = self.parse_factor()
        if self._at_symbol(MULTIPLICATIVE_SYMBOLS):
            operator = Operator.from_symbol(self.advance().value)
            return BinaryExpr(left, operator, self.parse_arith())
        return left

    def parse_factor(self):
        token = self.peek()
        if token is None:
            raise UnexpectedToken("an expression")

        if token.kind is TokenKind.NUMBER:
            self.advance()
            return Primary(Number(token.value))
        elif token.kind is TokenKind.STRING:
            self.advance()
            return Primary(String(token.value))
        elif token.is_symbol(Symbol.LEFT_BRACKET):
            self.advance()
            expr = self.parse_expr()
            self.skip("')'")
            return expr
        elif token.kind is TokenKind.IDENT:
            return self.parse_ident_factor()
        raise UnexpectedToken("an expression", token)

    def parse_ident_factor(self):
        following = self.peek(1)
        if following is not None and following.is_symbol(Symbol.LEFT_BRACKET):
            return self.parse_func_call()
        elif following is not None and following.is_symbol(Symbol.LEFT_SQUARE):
            ident = self.expect_ident()
            self.skip("'['")
            index = self.parse_expr()
            self.skip("']'")
            return ArrayRef(ident, index)
        elif following is not None and following.is_symbol(Symbol.DOT):
            return self.parse_dot_expr()
        return VariableRef(self.expect_ident())

    def _at_symbol(self, symbols):
        token = self.peek()
        return token is not None and token.is_symbol(*symbols)


def parse(tokens, source):
    """Returns the root Block of tokens. source is the text tokens were lexed from."""
    return Parser(tokens, source).parse()
