"""Source positions and caret-style snippets used by lexer and parser diagnostics.

A snippet points at the offending span of a single source line:

```
  |
3 | count = count $ 1
  |               ^
```
"""

import re
from dataclasses import dataclass

LINE_BREAK = re.compile(r"\r\n|\r|\n")  # the line breaks the lexer counts


@dataclass(frozen=True)
class Position:
    """1-based line and column of a character in the source text."""
    line: int = 1
    col: int = 1

    def __str__(self):
        return f"{self.line}:{self.col}"


def offending_line(line, source):
    """Returns line number line of source, or an empty string if source has no such line."""
    lines = LINE_BREAK.split(source)
    if 0 < line <= len(lines):
        return lines[line - 1]
    return ""


def gutters(line):
    """Returns (numbered gutter, blank gutter) for line, both as wide as the line number."""
    return f"{line} | ", " " * len(str(line)) + " | "


def pointer(col, length):
    """Returns the caret underline for a span of length characters starting at col."""
    return " " * (col - 1) + "^" * max(length, 1)


def snippet(position, length, source):
    """Returns the three snippet lines (padding, source line, pointer) for a span of source."""
    numbered, blank = gutters(position.line)
    return [
        blank.rstrip(),
        numbered + offending_line(position.line, source),
        blank + pointer(position.col, length),
    ]
