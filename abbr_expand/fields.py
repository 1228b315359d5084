"""
Fields (tab stops) and variables embedded in abbreviations.

Both readers accept the same notation:

    ${1}            tab stop 1
    ${1:default}    tab stop 1 with a placeholder, braces may nest
    ${name}         variable reference, no index
"""

from dataclasses import dataclass
from typing import Optional

from .scanner import Scanner, is_number, is_alpha


@dataclass
class Field:
    """A tab stop (``index`` set) or a variable reference (``index`` None)."""
    index: Optional[int] = None
    name: str = ""
    start: Optional[int] = None
    end: Optional[int] = None


def read_field(scanner: Scanner) -> Optional[Field]:
    """Consume a ``${...}`` field at the current position.

    Returns:
        The Field, or None (with the position untouched) if there's no field.

    Raises:
        ScanError: "Expecting }" when the field is opened but never closed.
    """
    start = scanner.pos
    if scanner.eat("$") and scanner.eat("{"):
        scanner.start = scanner.pos
        index = None
        name = ""
        if scanner.eat_while(is_number):
            index = int(scanner.current())
            name = read_placeholder(scanner) if scanner.eat(":") else ""
        elif is_alpha(scanner.peek()):
            name = read_placeholder(scanner)

        if scanner.eat("}"):
            return Field(index, name, start, scanner.pos)
        raise scanner.error("Expecting }")

    scanner.pos = start
    return None


def read_placeholder(scanner: Scanner) -> str:
    """Consume a placeholder up to its unmatched closing brace (not included)."""
    stack = []
    scanner.start = scanner.pos
    while not scanner.eof():
        if scanner.eat("{"):
            stack.append(scanner.pos)
        elif scanner.eat("}"):
            if not stack:
                scanner.pos -= 1
                break
            stack.pop()
        else:
            scanner.pos += 1

    if stack:
        scanner.pos = stack.pop()
        raise scanner.error("Expecting }")

    return scanner.current()


def format_field(index: int, placeholder: str, offset: int = 0,
                 line: int = 0, column: int = 0) -> str:
    """Default ``output.field``: TextMate-style tab stop."""
    if placeholder:
        return f"${{{index}:{placeholder}}}"
    return f"${{{index}}}"


def plain_text(text: str, offset: int = 0, line: int = 0, column: int = 0) -> str:
    """Default ``output.text``: pass text through untouched."""
    return text
