"""
Stylesheet abbreviation tokenizer.

``p10-20`` is read as Literal(p), NumberValue(10), Operator(-), NumberValue(20).
A dash is ambiguous here: right after a unit-less number or a colour it
always separates values, elsewhere it may start a negative number.
"""

from dataclasses import dataclass
from typing import Optional

from .fields import read_field
from .scanner import (
    Scanner,
    is_alpha,
    is_alpha_numeric_word,
    is_alpha_word,
    is_number,
    is_quote,
    is_space,
)

OPERATORS = {
    "+": "+",       # sibling
    "!": "!",       # important
    ",": ",",       # argument delimiter
    ":": ":",       # property delimiter
    "-": "-",       # value delimiter
}


# ── Tokens ──────────────────────────────────────────────────────────────────

@dataclass
class CSSLiteral:
    value: str
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class NumberValue:
    value: float
    raw_value: str
    unit: str = ""
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class ColorValue:
    r: int
    g: int
    b: int
    a: float
    raw: str = ""
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class StringValue:
    value: str
    quote: str                      # single | double
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class CSSBracket:
    open: bool
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class CSSOperator:
    operator: str
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class CSSWhiteSpace:
    start: Optional[int] = None
    end: Optional[int] = None


# ── Tokenizer ───────────────────────────────────────────────────────────────

def tokenize(abbr: str, is_value: bool = False) -> list:
    """Split a stylesheet abbreviation into tokens.

    Args:
        abbr: Abbreviation text.
        is_value: Read the whole string as a property value, so keywords may
            contain digits and dashes (``translate3d``).

    Raises:
        ScanError: On a character that starts no token or an unbalanced ``)``.
    """
    brackets = 0
    scanner = Scanner(abbr)
    tokens = []

    while not scanner.eof():
        token = _get_token(scanner, brackets == 0 and not is_value)
        if token is None:
            raise scanner.error("Unexpected character")

        if isinstance(token, CSSBracket):
            if not brackets and token.open:
                merge_tokens(scanner, tokens)
            brackets += 1 if token.open else -1
            if brackets < 0:
                raise scanner.error("Unexpected bracket", token.start)

        tokens.append(token)

        # After a colour or unit-less number, `-` can only be a delimiter
        if _should_consume_dash_after(token):
            op = _operator(scanner)
            if op is not None:
                tokens.append(op)

    return tokens


def _get_token(scanner: Scanner, short: bool):
    return (read_field(scanner)
            or _number_value(scanner)
            or _color_value(scanner)
            or _string_value(scanner)
            or _bracket(scanner)
            or _operator(scanner)
            or _white_space(scanner)
            or _literal(scanner, short))


def _literal(scanner: Scanner, short: bool) -> Optional[CSSLiteral]:
    """Consume a keyword.

    Short notation takes letters only so ``bd1`` splits into ``bd`` and
    ``1``; full notation also takes digits and dashes.
    """
    start = scanner.pos
    if scanner.eat(_is_ident_prefix):
        # SCSS/LESS variable. At the very start, letters only so `$foo10` still works
        scanner.eat_while(_is_keyword if start else _is_literal)
    elif scanner.eat(is_alpha_word):
        scanner.eat_while(_is_literal if short else _is_keyword)
    else:
        # A dot is allowed only at the start
        scanner.eat(".")
        scanner.eat_while(_is_literal)

    if start != scanner.pos:
        scanner.start = start
        return _create_literal(scanner, start)
    return None


def _create_literal(scanner: Scanner, start: int, end: Optional[int] = None) -> CSSLiteral:
    if end is None:
        end = scanner.pos
    return CSSLiteral(scanner.substring(start, end), start, end)


def _number_value(scanner: Scanner) -> Optional[NumberValue]:
    start = scanner.pos
    if not _consume_number(scanner):
        return None

    raw_value = scanner.substring(start, scanner.pos)
    scanner.start = scanner.pos
    scanner.eat("%") or scanner.eat_while(is_alpha_word)
    return NumberValue(float(raw_value), raw_value, scanner.current(), start, scanner.pos)


def _string_value(scanner: Scanner) -> Optional[StringValue]:
    ch = scanner.peek()
    if not is_quote(ch):
        return None

    start = scanner.pos
    finished = False
    scanner.pos += 1
    while not scanner.eof():
        # An unterminated string is not an error
        if scanner.eat(ch):
            finished = True
            break
        scanner.pos += 1

    scanner.start = start
    value = scanner.substring(start + 1, scanner.pos - (1 if finished else 0))
    return StringValue(value, "single" if ch == "'" else "double", start, scanner.pos)


def _color_value(scanner: Scanner):
    """Consume ``#abc``, ``#0``, ``#fff.5`` or ``#t`` (transparent)."""
    start = scanner.pos
    if not scanner.eat("#"):
        return None

    value_start = scanner.pos
    color = ""
    alpha = ""
    if scanner.eat_while(_is_hex):
        color = scanner.substring(value_start, scanner.pos)
        alpha = _color_alpha(scanner)
    elif scanner.eat("t"):
        color = "0"
        alpha = _color_alpha(scanner) or "0"
    else:
        alpha = _color_alpha(scanner)

    if color or alpha or scanner.eof():
        r, g, b, a = parse_color(color, alpha)
        return ColorValue(r, g, b, a, scanner.substring(start + 1, scanner.pos), start, scanner.pos)

    # A lone `#` is a literal
    return _create_literal(scanner, start)


def _color_alpha(scanner: Scanner) -> str:
    start = scanner.pos
    if scanner.eat("."):
        scanner.start = start
        if scanner.eat_while(is_number):
            return scanner.current()
        return "1"
    return ""


def _white_space(scanner: Scanner) -> Optional[CSSWhiteSpace]:
    start = scanner.pos
    if scanner.eat_while(is_space):
        return CSSWhiteSpace(start, scanner.pos)
    return None


def _bracket(scanner: Scanner) -> Optional[CSSBracket]:
    ch = scanner.peek()
    if ch in ("(", ")"):
        start = scanner.pos
        scanner.pos += 1
        return CSSBracket(ch == "(", start, scanner.pos)
    return None


def _operator(scanner: Scanner) -> Optional[CSSOperator]:
    op = OPERATORS.get(scanner.peek())
    if op is not None:
        start = scanner.pos
        scanner.pos += 1
        return CSSOperator(op, start, scanner.pos)
    return None


def _consume_number(scanner: Scanner) -> bool:
    start = scanner.pos
    scanner.eat("-")
    after_negative = scanner.pos
    has_decimal = scanner.eat_while(is_number)
    prev_pos = scanner.pos
    if scanner.eat("."):
        # `1.` is a valid number
        has_float = scanner.eat_while(is_number)
        if not has_decimal and not has_float:
            scanner.pos = prev_pos

    # Just a dash
    if scanner.pos == after_negative:
        scanner.pos = start
    return scanner.pos != start


def parse_color(value: str, alpha: str):
    """Expand short hex notation into ``(r, g, b, a)``."""
    r = g = b = "0"
    a = float(alpha) if alpha else 1.0

    if value == "t":
        a = 0.0
    elif len(value) == 1:
        r = g = b = value + value
    elif len(value) == 2:
        r = g = b = value
    elif len(value) == 3:
        r, g, b = value[0] * 2, value[1] * 2, value[2] * 2
    elif value:
        value += value
        r, g, b = value[0:2], value[2:4], value[4:6]

    return int(r, 16), int(g, 16), int(b, 16), a


def merge_tokens(scanner: Scanner, tokens: list):
    """Join trailing literal and number tokens into one literal.

    Called before an opening bracket, so ``scale3d(`` yields the function
    name ``scale3d`` rather than ``scale`` plus the number ``3d``.
    """
    start = 0
    end = 0
    while tokens and isinstance(tokens[-1], (CSSLiteral, NumberValue)):
        token = tokens.pop()
        start = token.start
        if not end:
            end = token.end

    if start != end:
        tokens.append(_create_literal(scanner, start, end))


def _should_consume_dash_after(token) -> bool:
    return isinstance(token, ColorValue) or (isinstance(token, NumberValue) and not token.unit)


def _is_ident_prefix(ch: str) -> bool:
    return ch in ("@", "$")


def _is_hex(ch: str) -> bool:
    return is_number(ch) or is_alpha(ch, "A", "F")


def _is_keyword(ch: str) -> bool:
    return is_alpha_numeric_word(ch) or ch == "-"


def _is_literal(ch: str) -> bool:
    return is_alpha_word(ch) or ch in ("%", "/")
