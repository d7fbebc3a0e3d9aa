"""Abstract syntax tree of the OCR language, produced by the parser and walked by the interpreter.

The node set is closed:

```
<statement> ::= Block | Assign | ArrayDeclare | ArrayIndexAssign | If | While | FuncCall | DotExpr
<expr>      ::= BinaryExpr | VariableRef | ArrayRef | FuncCall | DotExpr | Primary
```

Each node exclusively owns its children: trees are never shared.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import List

from ocrint.lang.lexer import Symbol
from ocrint.lang.values import Value


class Operator(Enum):
    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"
    GREATER = ">"
    GREATER_EQUALS = ">="
    LESS = "<"
    LESS_EQUALS = "<="
    DOUBLE_EQUALS = "=="

    @classmethod
    def from_symbol(cls, symbol):
        return cls(symbol.value)

    @property
    def is_comparison(self):
        return self in COMPARISONS


COMPARISONS = frozenset([
    Operator.GREATER, Operator.GREATER_EQUALS, Operator.LESS, Operator.LESS_EQUALS, Operator.DOUBLE_EQUALS
])

ADDITIVE_SYMBOLS = (Symbol.PLUS, Symbol.MINUS)
MULTIPLICATIVE_SYMBOLS = (Symbol.MULTIPLY, Symbol.DIVIDE, Symbol.MODULO)
COMPARISON_SYMBOLS = (Symbol.GREATER, Symbol.GREATER_EQUALS, Symbol.LESS, Symbol.LESS_EQUALS, Symbol.DOUBLE_EQUALS)


class Node:
    """Superclass of every AST node."""

    def display(self, indents=0):
        """Recursively displays this node with readable format.

        Format:
        <Node>(
            <field>=<Node>(
                ...
            ),
            <field>=<value>,
        )
        """
        pad = "    " * indents
        result = f"{type(self).__name__}("
        for node_field in fields(self):
            result += f"\n{pad}    {node_field.name}=" + _display(getattr(self, node_field.name), indents + 1) + ","
        return result + f"\n{pad})"


def _display(item, indents):
    pad = "    " * indents
    if isinstance(item, Node):
        return item.display(indents)
    elif isinstance(item, list):
        if not item:
            return "[]"
        return "[" + "".join(f"\n{pad}    {_display(sub, indents + 1)}," for sub in item) + f"\n{pad}]"
    elif isinstance(item, Value):
        return f"{type(item).__name__}({str(item)!r})"
    elif isinstance(item, Operator):
        return item.name
    return repr(item)


@dataclass
class Block(Node):
    nodes: List[Node] = field(default_factory=list)


@dataclass
class Assign(Node):
    ident: str
    value: Node


@dataclass
class ArrayDeclare(Node):
    ident: str
    size: Node


@dataclass
class ArrayIndexAssign(Node):
    ident: str
    index: Node
    value: Node


@dataclass
class If(Node):
    cond: Node
    then: Block
    els: Block = field(default_factory=Block)


@dataclass
class While(Node):
    cond: Node
    body: Block


@dataclass
class FuncCall(Node):
    ident: str
    args: List[Node] = field(default_factory=list)


@dataclass
class VariableRef(Node):
    ident: str


@dataclass
class ArrayRef(Node):
    ident: str
    index: Node


@dataclass
class BinaryExpr(Node):
    left: Node
    operator: Operator
    right: Node


@dataclass
class DotExpr(Node):
    object_ident: str
    property_ident: str


@dataclass
class Primary(Node):
    value: Value
