"""
Markup abbreviation tokenizer.

Splits an abbreviation like ``ul>li.item$*3`` into a flat token list. The
tokenizer tracks how many group ``()``, attribute ``[]`` and expression
``{}`` brackets are open, plus the open quote character, because the same
character means different things in different places: ``.`` is a class
operator in ``div.a`` but plain text in ``{a.b}``.
"""

from dataclasses import dataclass
from typing import Optional

from .fields import Field, read_field
from .scanner import (
    Scanner,
    is_alpha_numeric_word,
    is_number,
    is_quote,
    is_space,
)


# ── Tokens ──────────────────────────────────────────────────────────────────

@dataclass
class Literal:
    value: str
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class WhiteSpace:
    value: str
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class Quote:
    single: bool
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class Bracket:
    open: bool
    context: str                    # group | attribute | expression
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class Operator:
    operator: str                   # child | sibling | climb | class | id | close | equal
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class Repeater:
    count: int = 1
    value: int = 0
    implicit: bool = False
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class RepeaterNumber:
    size: int = 1
    reverse: bool = False
    base: int = 1
    parent: int = 0
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class RepeaterPlaceholder:
    start: Optional[int] = None
    end: Optional[int] = None


OPERATORS = {
    ">": "child",
    "+": "sibling",
    "^": "climb",
    ".": "class",
    "#": "id",
    "/": "close",
    "=": "equal",
}

BRACKETS = {
    "(": "group",
    ")": "group",
    "[": "attribute",
    "]": "attribute",
    "{": "expression",
    "}": "expression",
}


class _Context:
    """Open-bracket counters and the currently open quote."""

    def __init__(self):
        self.group = 0
        self.attribute = 0
        self.expression = 0
        self.quote = ""


def tokenize(source: str) -> list:
    """Tokenize a markup abbreviation.

    Raises:
        ScanError: on a character no token can start with, or an
        unterminated ``${`` field.
    """
    scanner = Scanner(source)
    ctx = _Context()
    result = []

    while not scanner.eof():
        ch = scanner.peek()
        token = _get_token(scanner, ctx)
        if token is None:
            raise scanner.error("Unexpected character")

        result.append(token)
        if isinstance(token, Quote):
            ctx.quote = "" if ch == ctx.quote else ch
        elif isinstance(token, Bracket):
            delta = 1 if token.open else -1
            setattr(ctx, token.context, getattr(ctx, token.context) + delta)

    return result


def _get_token(scanner: Scanner, ctx: _Context):
    return (_field(scanner, ctx)
            or _repeater_placeholder(scanner)
            or _repeater_number(scanner)
            or _repeater(scanner, ctx)
            or _white_space(scanner)
            or _literal(scanner, ctx)
            or _operator(scanner)
            or _quote(scanner)
            or _bracket(scanner))


def _field(scanner: Scanner, ctx: _Context) -> Optional[Field]:
    # Fields only make sense inside attributes and text
    if ctx.expression or ctx.attribute:
        return read_field(scanner)
    return None


def _escaped(scanner: Scanner) -> bool:
    """Consume a backslash escape, leaving ``current()`` as the escaped char."""
    if scanner.eat("\\"):
        scanner.start = scanner.pos
        if not scanner.eof():
            scanner.pos += 1
        return True
    return False


def _literal(scanner: Scanner, ctx: _Context) -> Optional[Literal]:
    start = scanner.pos
    value = ""

    while not scanner.eof():
        if _escaped(scanner):
            value += scanner.current()
            continue

        ch = scanner.peek()
        if ch == ctx.quote or ch == "$" or _is_allowed_operator(ch, ctx):
            break
        if ctx.expression and ch == "}":
            break
        if not ctx.quote and not ctx.expression:
            if not ctx.attribute and not _is_element_name(ch):
                break
            if (_is_allowed_space(ch, ctx) or _is_allowed_repeater(ch, ctx)
                    or is_quote(ch) or ch in BRACKETS):
                break

        value += ch
        scanner.pos += 1

    if start != scanner.pos:
        scanner.start = start
        return Literal(value, start, scanner.pos)
    return None


def _white_space(scanner: Scanner) -> Optional[WhiteSpace]:
    start = scanner.pos
    if scanner.eat_while(is_space):
        return WhiteSpace(scanner.substring(start, scanner.pos), start, scanner.pos)
    return None


def _quote(scanner: Scanner) -> Optional[Quote]:
    ch = scanner.peek()
    if is_quote(ch):
        start = scanner.pos
        scanner.pos += 1
        return Quote(ch == "'", start, scanner.pos)
    return None


def _bracket(scanner: Scanner) -> Optional[Bracket]:
    ch = scanner.peek()
    context = BRACKETS.get(ch)
    if context:
        start = scanner.pos
        scanner.pos += 1
        return Bracket(ch in "([{", context, start, scanner.pos)
    return None


def _operator(scanner: Scanner) -> Optional[Operator]:
    op = OPERATORS.get(scanner.peek())
    if op:
        start = scanner.pos
        scanner.pos += 1
        return Operator(op, start, scanner.pos)
    return None


def _repeater(scanner: Scanner, ctx: _Context) -> Optional[Repeater]:
    # Inside quotes, attributes and text `*` is just a character
    if ctx.quote or ctx.attribute or ctx.expression:
        return None

    start = scanner.pos
    if scanner.eat("*"):
        scanner.start = scanner.pos
        count = 1
        implicit = False
        if scanner.eat_while(is_number):
            count = int(scanner.current())
        else:
            implicit = True
        return Repeater(count, 0, implicit, start, scanner.pos)
    return None


def _repeater_placeholder(scanner: Scanner) -> Optional[RepeaterPlaceholder]:
    start = scanner.pos
    if scanner.eat("$") and scanner.eat("#"):
        return RepeaterPlaceholder(start, scanner.pos)
    scanner.pos = start
    return None


def _repeater_number(scanner: Scanner) -> Optional[RepeaterNumber]:
    start = scanner.pos
    if scanner.eat_while("$"):
        size = scanner.pos - start
        reverse = False
        base = 1
        parent = 0

        if scanner.eat("@"):
            while scanner.eat("^"):
                parent += 1
            reverse = scanner.eat("-")
            scanner.start = scanner.pos
            if scanner.eat_while(is_number):
                base = int(scanner.current())

        scanner.start = start
        return RepeaterNumber(size, reverse, base, parent, start, scanner.pos)
    return None


def _is_allowed_operator(ch: str, ctx: _Context) -> bool:
    op = OPERATORS.get(ch)
    if not op or ctx.quote or ctx.expression:
        return False
    # Inside attribute sets only `=` is an operator
    return not ctx.attribute or op == "equal"


def _is_allowed_space(ch: str, ctx: _Context) -> bool:
    return is_space(ch) and not ctx.expression


def _is_allowed_repeater(ch: str, ctx: _Context) -> bool:
    return ch == "*" and not ctx.attribute and not ctx.expression


def _is_element_name(ch: str) -> bool:
    return is_alpha_numeric_word(ch) or ch in ("-", ":", "!")
