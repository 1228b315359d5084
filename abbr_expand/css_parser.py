"""
Stylesheet abbreviation parser: tokens to a list of CSSProperty.

``p10+m5`` gives two properties; each property value is a list of
CSSValue fragments (comma-separated parts), each holding value tokens
and FunctionCall nodes.
"""

from dataclasses import dataclass, field
from typing import Optional

from .css_tokenizer import (
    ColorValue,
    CSSBracket,
    CSSLiteral,
    CSSOperator,
    CSSWhiteSpace,
    NumberValue,
    StringValue,
    tokenize,
)
from .fields import Field
from .scanner import TokenScanner


@dataclass
class CSSValue:
    value: list = field(default_factory=list)


@dataclass
class FunctionCall:
    name: str
    arguments: list = field(default_factory=list)


@dataclass
class CSSProperty:
    name: Optional[str] = None
    value: list = field(default_factory=list)
    important: bool = False
    snippet: object = None          # set by the resolver


def parse_css(abbr, value: bool = False) -> list:
    """Parse a stylesheet abbreviation (string or token list).

    Args:
        abbr: Abbreviation text, or tokens from ``tokenize()``.
        value: Parse as a bare property value, with no property name.

    Raises:
        ScanError: From the tokenizer.
        ParseError: "Unexpected token" on a misplaced token.
    """
    tokens = tokenize(abbr, value) if isinstance(abbr, str) else abbr
    scanner = TokenScanner(tokens)
    result = []

    while scanner.readable():
        prop = _consume_property(scanner, value)
        if prop is not None:
            result.append(prop)
        elif not scanner.consume(_is_sibling_operator):
            raise scanner.error("Unexpected token")

    return result


def _consume_property(scanner: TokenScanner, value_mode: bool) -> Optional[CSSProperty]:
    name = None
    important = False
    value = []
    token = scanner.peek()

    if not value_mode and isinstance(token, CSSLiteral) and not _is_function_start(scanner):
        scanner.pos += 1
        name = token.value
        scanner.consume(_is_value_delimiter)

    if value_mode:
        scanner.consume(_is_white_space)

    while scanner.readable():
        if scanner.consume(_is_important):
            important = True
            continue
        fragment = _consume_value(scanner, value_mode)
        if fragment is not None:
            value.append(fragment)
        elif not scanner.consume(_is_argument_delimiter):
            break

    if name or value or important:
        return CSSProperty(name, value, important)
    return None


def _consume_value(scanner: TokenScanner, in_argument: bool) -> Optional[CSSValue]:
    """Consume value tokens up to the next comma or unrelated token."""
    result = []
    while scanner.readable():
        token = scanner.peek()
        if _is_value(token):
            scanner.pos += 1
            args = _consume_arguments(scanner) if isinstance(token, CSSLiteral) else None
            if args is not None:
                result.append(FunctionCall(token.value, args))
            else:
                result.append(token)
        elif _is_value_delimiter(token) or (in_argument and _is_white_space(token)):
            scanner.pos += 1
        else:
            break

    return CSSValue(result) if result else None


def _consume_arguments(scanner: TokenScanner) -> Optional[list]:
    start = scanner.pos
    if not scanner.consume(_is_open_bracket):
        return None

    args = []
    while scanner.readable() and not scanner.consume(_is_close_bracket):
        value = _consume_value(scanner, True)
        if value is not None:
            args.append(value)
        elif not scanner.consume(_is_white_space) and not scanner.consume(_is_argument_delimiter):
            raise scanner.error("Unexpected token")

    scanner.start = start
    return args


# ── Token predicates ────────────────────────────────────────────────────────

def _is_value(token) -> bool:
    return isinstance(token, (StringValue, ColorValue, NumberValue, CSSLiteral, Field))


def _is_operator(token, operator: str) -> bool:
    return isinstance(token, CSSOperator) and token.operator == operator


def _is_sibling_operator(token) -> bool:
    return _is_operator(token, "+")


def _is_argument_delimiter(token) -> bool:
    return _is_operator(token, ",")


def _is_important(token) -> bool:
    return _is_operator(token, "!")


def _is_value_delimiter(token) -> bool:
    return _is_operator(token, ":") or _is_operator(token, "-")


def _is_white_space(token) -> bool:
    return isinstance(token, CSSWhiteSpace)


def _is_open_bracket(token) -> bool:
    return isinstance(token, CSSBracket) and token.open


def _is_close_bracket(token) -> bool:
    return isinstance(token, CSSBracket) and not token.open


def _is_function_start(scanner: TokenScanner) -> bool:
    tokens = scanner.tokens
    pos = scanner.pos
    return (pos + 1 < len(tokens) and isinstance(tokens[pos], CSSLiteral)
            and isinstance(tokens[pos + 1], CSSBracket))
