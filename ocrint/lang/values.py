"""Runtime values of the OCR language. Values are immutable: an array assignment rebinds a new Array."""

from dataclasses import dataclass
from typing import Tuple

from ocrint.lang.error import UnsupportedOperator

MAX_NUMBER = 2 ** 64 - 1
MAX_DIGITS = len(str(MAX_NUMBER))
MAX_ARRAY_SIZE = 2 ** 24


def parse_digits(digits):
    """Returns the value of a string of decimal digits, or None if it does not fit in 64 bits."""
    significant = digits.lstrip("0")
    if len(significant) > MAX_DIGITS:
        return None
    number = int(significant or "0")
    return number if number <= MAX_NUMBER else None


class Value:
    """Superclass of every runtime value. str(value) is the form print displays."""

    @property
    def type_name(self):
        return type(self).__name__.lower()


@dataclass(frozen=True)
class Number(Value):
    """Unsigned 64-bit integer."""
    value: int

    @classmethod
    def checked(cls, value):
        """Returns Number(value), raising UnsupportedOperator if value leaves the unsigned 64-bit range."""
        if not 0 <= value <= MAX_NUMBER:
            raise UnsupportedOperator("arithmetic result {} is outside the unsigned 64-bit range", value)
        return cls(value)

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class String(Value):
    value: str

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Boolean(Value):
    value: bool

    def __str__(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Array(Value):
    """Fixed-length sequence of scalar values."""
    elements: Tuple[Value, ...]

    @classmethod
    def zeroed(cls, size):
        if size > MAX_ARRAY_SIZE:
            raise UnsupportedOperator("array size {} exceeds the limit of {}", (size, MAX_ARRAY_SIZE))
        return cls((Number(0),) * size)

    def replace(self, index, value):
        """Returns a copy of this array with the element at index replaced by value."""
        elements = list(self.elements)
        elements[index] = value
        return Array(tuple(elements))

    def __len__(self):
        return len(self.elements)

    def __getitem__(self, index):
        return self.elements[index]

    def __str__(self):
        return "[" + ", ".join(str(element) for element in self.elements) + "]"
