"""
Recursive-descent parser for markup abbreviation tokens.

Grammar:

    statements := (element | group) (">" statements | "+" statements | "^"+)*
    group      := "(" statements ")" repeat?
    element    := name? (repeat | text | "#"id | "."class | attr_set | "/" repeat?)*
    attr_set   := "[" (attribute | whitespace)* "]"

Produces a tree of TokenGroup / TokenElement nodes whose names and values
are still token lists; the unroller in ``abbreviation.py`` turns them into
strings and expands repeats.
"""

from dataclasses import dataclass, field
from typing import Optional

from .scanner import TokenScanner
from .tokenizer import (
    Bracket,
    Literal,
    Operator,
    Quote,
    Repeater,
    RepeaterNumber,
    RepeaterPlaceholder,
    WhiteSpace,
)


# ── Parse tree ──────────────────────────────────────────────────────────────

@dataclass
class TokenAttribute:
    name: Optional[list] = None
    value: Optional[list] = None
    expression: bool = False


@dataclass
class TokenElement:
    name: Optional[list] = None
    attributes: Optional[list] = None
    value: Optional[list] = None
    repeat: Optional[Repeater] = None
    self_close: bool = False
    elements: list = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.name is None and self.value is None and self.attributes is None


@dataclass
class TokenGroup:
    elements: list = field(default_factory=list)
    repeat: Optional[Repeater] = None


def parse(tokens: list, jsx: bool = False) -> TokenGroup:
    """Parse a token list into a TokenGroup root.

    Raises:
        ParseError: on unexpected tokens or an unclosed quote.
    """
    scanner = TokenScanner(tokens)
    result = _statements(scanner, jsx)
    if scanner.readable():
        raise scanner.error("Unexpected character")
    return result


def _statements(scanner: TokenScanner, jsx: bool) -> TokenGroup:
    result = TokenGroup()
    ctx = result
    stack = []

    while scanner.readable():
        node = _element(scanner, jsx) or _group(scanner, jsx)
        if node is None:
            break

        ctx.elements.append(node)
        if scanner.consume(_is_child_operator):
            stack.append(ctx)
            ctx = node
        elif scanner.consume(_is_sibling_operator):
            continue
        elif scanner.consume(_is_climb_operator):
            while True:
                if stack:
                    ctx = stack.pop()
                if not scanner.consume(_is_climb_operator):
                    break

    return result


def _group(scanner: TokenScanner, jsx: bool) -> Optional[TokenGroup]:
    if scanner.consume(_is_group_start):
        result = _statements(scanner, jsx)
        token = scanner.next()
        if _is_bracket(token, "group", False):
            result.repeat = _repeater(scanner)
        return result
    return None


def _element(scanner: TokenScanner, jsx: bool) -> Optional[TokenElement]:
    elem = TokenElement()

    if _element_name(scanner, jsx):
        elem.name = scanner.slice()

    while scanner.readable():
        scanner.start = scanner.pos
        if elem.repeat is None and not elem.is_empty and scanner.consume(_is_repeater):
            elem.repeat = scanner.tokens[scanner.pos - 1]
        elif elem.value is None and _text(scanner):
            elem.value = _get_text(scanner)
        else:
            attr = (_short_attribute(scanner, "id", jsx)
                    or _short_attribute(scanner, "class", jsx)
                    or _attribute_set(scanner))
            if attr is not None:
                if isinstance(attr, TokenAttribute):
                    attr = [attr]
                if elem.attributes is None:
                    elem.attributes = list(attr)
                else:
                    elem.attributes = elem.attributes + attr
                continue

            if not elem.is_empty and scanner.consume(_is_close_operator):
                elem.self_close = True
                if elem.repeat is None and scanner.consume(_is_repeater):
                    elem.repeat = scanner.tokens[scanner.pos - 1]
            break

    return None if elem.is_empty else elem


def _attribute_set(scanner: TokenScanner) -> Optional[list]:
    if scanner.consume(_is_attribute_set_start):
        attributes = []
        while scanner.readable():
            attr = _attribute(scanner)
            if attr is not None:
                attributes.append(attr)
            elif scanner.consume(_is_attribute_set_end):
                break
            elif not scanner.consume(_is_white_space):
                raise scanner.error(f'Unexpected "{type(scanner.peek()).__name__}" token')
        return attributes
    return None


def _short_attribute(scanner: TokenScanner, kind: str, jsx: bool) -> Optional[TokenAttribute]:
    """Consume ``#id`` or ``.class`` shorthand."""
    if _is_operator(scanner.peek(), kind):
        scanner.pos += 1
        attr = TokenAttribute(name=[Literal(kind)])

        # React-style `.{expression}` class name
        if jsx and _text(scanner):
            attr.value = _get_text(scanner)
            attr.expression = True
        else:
            attr.value = scanner.slice() if _literal(scanner) else None
        return attr
    return None


def _attribute(scanner: TokenScanner) -> Optional[TokenAttribute]:
    if _quoted(scanner):
        # A bare quoted value belongs to the default attribute
        return TokenAttribute(value=scanner.slice())

    if _literal(scanner, True):
        name = scanner.slice()
        value = None
        if scanner.consume(_is_equals) and (_quoted(scanner) or _literal(scanner, True)):
            value = scanner.slice()
        return TokenAttribute(name=name, value=value)
    return None


def _repeater(scanner: TokenScanner) -> Optional[Repeater]:
    if _is_repeater(scanner.peek()):
        return scanner.next()
    return None


def _quoted(scanner: TokenScanner) -> bool:
    start = scanner.pos
    quote = scanner.peek()
    if isinstance(quote, Quote):
        scanner.pos += 1
        while scanner.readable():
            token = scanner.next()
            if isinstance(token, Quote) and token.single == quote.single:
                scanner.start = start
                return True
        raise scanner.error("Unclosed quote", quote)
    return False


def _literal(scanner: TokenScanner, allow_brackets: bool = False) -> bool:
    """Consume an unquoted value; balanced brackets allowed on request."""
    start = scanner.pos
    brackets = {"attribute": 0, "expression": 0, "group": 0}

    while scanner.readable():
        token = scanner.peek()
        if brackets["expression"]:
            # Everything up to the matching `}` belongs to the expression
            if _is_bracket(token, "expression"):
                brackets[token.context] += 1 if token.open else -1
        elif isinstance(token, (Quote, Operator, WhiteSpace, Repeater)):
            break
        elif isinstance(token, Bracket):
            if not allow_brackets:
                break
            if token.open:
                brackets[token.context] += 1
            elif not brackets[token.context]:
                # Unmatched closing bracket belongs to the caller
                break
            else:
                brackets[token.context] -= 1
        scanner.pos += 1

    if start != scanner.pos:
        scanner.start = start
        return True
    return False


def _element_name(scanner: TokenScanner, jsx: bool) -> bool:
    start = scanner.pos

    if jsx and scanner.consume(_is_capitalized_literal):
        # Component names like `Foo.Bar.Baz`
        while scanner.readable():
            pos = scanner.pos
            if not scanner.consume(_is_class_operator) or not scanner.consume(_is_capitalized_literal):
                scanner.pos = pos
                break

    while scanner.readable() and scanner.consume(_is_element_name):
        pass

    if scanner.pos != start:
        scanner.start = start
        return True
    return False


def _text(scanner: TokenScanner) -> bool:
    """Consume ``{...}`` text, including nested expression brackets."""
    start = scanner.pos
    if scanner.consume(_is_text_start):
        brackets = 0
        while scanner.readable():
            token = scanner.next()
            if _is_bracket(token, "expression"):
                if token.open:
                    brackets += 1
                elif not brackets:
                    break
                else:
                    brackets -= 1
        scanner.start = start
        return True
    return False


def _get_text(scanner: TokenScanner) -> list:
    start = scanner.start
    end = scanner.pos
    if _is_bracket(scanner.tokens[start], "expression", True):
        start += 1
    if end > start and _is_bracket(scanner.tokens[end - 1], "expression", False):
        end -= 1
    return scanner.slice(start, end)


# ── Token tests ─────────────────────────────────────────────────────────────

def _is_bracket(token, context=None, is_open=None) -> bool:
    return (isinstance(token, Bracket)
            and (context is None or token.context == context)
            and (is_open is None or token.open == is_open))


def _is_operator(token, kind=None) -> bool:
    return isinstance(token, Operator) and (kind is None or token.operator == kind)


def _is_white_space(token) -> bool:
    return isinstance(token, WhiteSpace)


def _is_equals(token) -> bool:
    return _is_operator(token, "equal")


def _is_repeater(token) -> bool:
    return isinstance(token, Repeater)


def _is_capitalized_literal(token) -> bool:
    return isinstance(token, Literal) and token.value != "" and "A" <= token.value[0] <= "Z"


def _is_element_name(token) -> bool:
    return isinstance(token, (Literal, RepeaterNumber, RepeaterPlaceholder))


def _is_class_operator(token) -> bool:
    return _is_operator(token, "class")


def _is_attribute_set_start(token) -> bool:
    return _is_bracket(token, "attribute", True)


def _is_attribute_set_end(token) -> bool:
    return _is_bracket(token, "attribute", False)


def _is_text_start(token) -> bool:
    return _is_bracket(token, "expression", True)


def _is_group_start(token) -> bool:
    return _is_bracket(token, "group", True)


def _is_child_operator(token) -> bool:
    return _is_operator(token, "child")


def _is_sibling_operator(token) -> bool:
    return _is_operator(token, "sibling")


def _is_climb_operator(token) -> bool:
    return _is_operator(token, "climb")


def _is_close_operator(token) -> bool:
    return _is_operator(token, "close")
