"""Tree-walking interpreter for the OCR language.

Statements run in order and expressions evaluate depth first, left operand before right. The order matters because
built-ins have side effects: in a = input("x") + input("y"), the line for "x" is read before "y" is prompted for.
Any runtime error aborts the program; output already written stays written.
"""

import logging
import operator
import re
import sys

from ocrint.lang.ast import (
    ArrayDeclare, ArrayIndexAssign, ArrayRef, Assign, BinaryExpr, Block, DotExpr, FuncCall, If, Operator, Primary,
    VariableRef, While
)
from ocrint.lang.error import (
    ArityMismatch, IndexOutOfRange, TypeMismatch, UndefinedVariable, UnsupportedOperator
)
from ocrint.lang.symbols import SymbolTable
from ocrint.lang.values import Array, Boolean, Number, String, parse_digits

logger = logging.getLogger(__name__)

UNSIGNED = re.compile(r"\+?([0-9]+)")

ARITHMETIC = {
    Operator.PLUS: operator.add,
    Operator.MINUS: operator.sub,
    Operator.MULTIPLY: operator.mul,
    Operator.DIVIDE: operator.floordiv,
    Operator.MODULO: operator.mod,
}

COMPARISON = {
    Operator.GREATER: operator.gt,
    Operator.GREATER_EQUALS: operator.ge,
    Operator.LESS: operator.lt,
    Operator.LESS_EQUALS: operator.le,
    Operator.DOUBLE_EQUALS: operator.eq,
}


class Interpreter:
    """Executes a root Block against symbols, the single mutable state of a program run. stdin and stdout default
    to the process's standard streams.
    """
    BUILTINS = {
        "print": "builtin_print",
        "input": "builtin_input",
        "int": "builtin_int",
    }
    PROPERTIES = ("length",)

    def __init__(self, symbols=None, stdin=None, stdout=None):
        self.symbols = symbols if symbols is not None else SymbolTable()
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def run(self, ast):
        """Runs the root Block ast."""
        if not isinstance(ast, Block):
            raise TypeError(f"expected a root Block, got {type(ast).__name__}")
        self.execute(ast)

    # statements

    def execute(self, node):
        if isinstance(node, Block):
            for child in node.nodes:
                self.execute(child)

        elif isinstance(node, Assign):
            self.symbols.assign(node.ident, self.evaluate(node.value))

        elif isinstance(node, ArrayDeclare):
            size = self.evaluate_number(node.size, f"size of array '{node.ident}'")
            self.symbols.assign(node.ident, Array.zeroed(size))

        elif isinstance(node, ArrayIndexAssign):
            self.assign_element(node)

        elif isinstance(node, If):
            if self.evaluate_condition(node.cond, "if"):
                self.execute(node.then)
            else:
                self.execute(node.els)

        elif isinstance(node, While):
            while self.evaluate_condition(node.cond, "while"):
                self.execute(node.body)

        elif isinstance(node, FuncCall):
            self.call(node)

        elif isinstance(node, DotExpr):
            self.evaluate(node)

        else:
            raise TypeError(f"{type(node).__name__} is not a statement")

    def assign_element(self, node):
        """Copies the array, replaces one element and rebinds the copy."""
        index = self.evaluate_number(node.index, f"index of '{node.ident}'")
        value = self.evaluate(node.value)
        if isinstance(value, Array):
            raise TypeMismatch("arrays cannot be stored inside array '{}'", node.ident)

        array = self.fetch_array(node.ident)
        if index >= len(array):
            raise IndexOutOfRange(node.ident, index, len(array))
        self.symbols.assign(node.ident, array.replace(index, value))

    # expressions

    def evaluate(self, node):
        """Evaluates expression node to a Value."""
        if isinstance(node, Primary):
            return node.value

        elif isinstance(node, VariableRef):
            return self.symbols.get(node.ident)

        elif isinstance(node, BinaryExpr):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.binary(left, node.operator, right)

        elif isinstance(node, ArrayRef):
            index = self.evaluate_number(node.index, f"index of '{node.ident}'")
            array = self.fetch_array(node.ident)
            if index >= len(array):
                raise IndexOutOfRange(node.ident, index, len(array))
            return array[index]

        elif isinstance(node, DotExpr):
            return self.dot(node)

        elif isinstance(node, FuncCall):
            value = self.call(node)
            if value is None:
                raise TypeMismatch("'{}' does not return a value", node.ident)
            return value

        raise TypeError(f"{type(node).__name__} is not an expression")

    @staticmethod
    def binary(left, op, right):
        """Applies op to two evaluated operands. A string on either side turns any operator into concatenation."""
        if isinstance(left, Number) and isinstance(right, Number):
            if op.is_comparison:
                return Boolean(COMPARISON[op](left.value, right.value))
            if op in (Operator.DIVIDE, Operator.MODULO) and right.value == 0:
                raise UnsupportedOperator("'{}' by zero", op.value)
            return Number.checked(ARITHMETIC[op](left.value, right.value))

        if isinstance(left, String) or isinstance(right, String):
            return String(str(left) + str(right))

        msg = "unsupported operand types for '{}': {} and {}"
        raise TypeMismatch(msg, (op.value, left.type_name, right.type_name))

    def dot(self, node):
        if node.property_ident not in Interpreter.PROPERTIES:
            raise UnsupportedOperator("'{}' has no property '{}'", (node.object_ident, node.property_ident))
        return Number(len(self.fetch_array(node.object_ident)))

    def fetch_array(self, ident):
        value = self.symbols.get(ident)
        if not isinstance(value, Array):
            raise TypeMismatch("'{}' is a {}, not an array", (ident, value.type_name))
        return value

    def evaluate_number(self, node, what):
        value = self.evaluate(node)
        if not isinstance(value, Number):
            raise TypeMismatch("{} must be a number, got {}", (what, value.type_name))
        return value.value

    def evaluate_condition(self, node, statement):
        value = self.evaluate(node)
        if not isinstance(value, Boolean):
            raise TypeMismatch("'{}' condition must be a boolean, got {}", (statement, value.type_name))
        return value.value

    # built-ins

    def call(self, node):
        """Calls a built-in. Returns its Value, or None for built-ins that return nothing."""
        if node.ident not in Interpreter.BUILTINS:
            raise UndefinedVariable(node.ident, "'{}' is not a built-in function")

        logger.debug("calling %s with %d argument(s)", node.ident, len(node.args))
        return getattr(self, Interpreter.BUILTINS[node.ident])(node.args)

    def builtin_print(self, args):
        if len(args) > 1:
            raise ArityMismatch("print", "at most 1", len(args))
        if not args:
            print(file=self.stdout)
        else:
            print(self.evaluate(args[0]), file=self.stdout)

    def builtin_input(self, args):
        if len(args) > 1:
            raise ArityMismatch("input", "at most 1", len(args))
        if args:
            print(self.evaluate(args[0]), end="", file=self.stdout)
        self.stdout.flush()

        line = self.stdin.readline()
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        return String(line)

    def builtin_int(self, args):
        if len(args) != 1:
            raise ArityMismatch("int", "exactly 1", len(args))

        arg = args[0]
        if not isinstance(arg, (Primary, VariableRef, FuncCall)):
            raise TypeMismatch("'int' expects a string literal, variable or function call, got {}",
                               type(arg).__name__)

        value = self.evaluate(arg)
        if not isinstance(value, String):
            raise TypeMismatch("'int' expects a string, got {}", value.type_name)
        match = UNSIGNED.fullmatch(value.value)
        number = parse_digits(match.group(1)) if match else None
        if number is None:
            raise TypeMismatch("'{}' is not an unsigned integer", value.value)
        return Number(number)
