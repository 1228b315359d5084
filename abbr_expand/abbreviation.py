"""
Unroll a parsed markup abbreviation into a plain node tree.

The parser keeps names and values as token lists and repeats as markers.
This module expands every repeat into copies, renders ``$`` numbering and
``$#`` text placeholders, resolves ``${variable}`` references and inserts
caller-supplied text (the "wrap with abbreviation" use case).
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from .fields import Field
from .parser import TokenGroup, parse
from .tokenizer import (
    Bracket,
    Literal,
    Operator,
    OPERATORS,
    Quote,
    RepeaterNumber,
    RepeaterPlaceholder,
    WhiteSpace,
    tokenize,
)

logger = logging.getLogger(__name__)


# ── Abbreviation tree ───────────────────────────────────────────────────────

@dataclass
class Attribute:
    name: Optional[str] = None
    value: Optional[list] = None
    boolean: bool = False
    implied: bool = False
    value_type: str = "raw"          # raw | single_quote | double_quote | expression


@dataclass
class RepeatState:
    count: int = 1
    value: int = 0
    implicit: bool = False


@dataclass(eq=False)
class AbbreviationNode:
    """A single element or text node. Compared by identity."""
    name: Optional[str] = None
    value: Optional[list] = None
    attributes: Optional[list] = None
    children: list = field(default_factory=list)
    repeat: Optional[RepeatState] = None
    self_closing: bool = False


@dataclass(eq=False)
class Abbreviation:
    children: list = field(default_factory=list)


URL_RE = re.compile(r"^((https?:|ftp:|file:)?//|(www|ftp)\.)[^ ]*$")
EMAIL_RE = re.compile(r"^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,5}$")

_OPERATOR_CHARS = {name: ch for ch, name in OPERATORS.items()}


class _ConvertState:
    """Mutable state of a single unroll pass."""

    def __init__(self, text=None, variables=None, max_repeat=None):
        self.inserted = False
        self.text_inserted = False
        self.repeaters = []
        self.text = text
        self.variables = variables or {}
        self.repeat_guard = max_repeat if max_repeat else float("inf")

        if isinstance(text, list):
            self.clean_text = [line for line in text if line.strip()]
        else:
            self.clean_text = text

    def get_text(self, pos=None) -> str:
        self.text_inserted = True
        if isinstance(self.text, list):
            if pos is not None and 0 <= pos < len(self.clean_text):
                return self.clean_text[pos]
            if pos is None:
                return "\n".join(self.text)
            return self.text[pos] if 0 <= pos < len(self.text) else ""
        return self.text if self.text is not None else ""

    def get_variable(self, name: str) -> str:
        value = self.variables.get(name)
        return value if value is not None else name


def parse_abbreviation(abbr, jsx: bool = False, text=None, variables=None,
                       max_repeat=None, href: bool = False) -> Abbreviation:
    """Tokenize, parse and unroll a markup abbreviation.

    Args:
        abbr: Abbreviation string, or an already tokenized list.
        jsx: Accept JSX component names and ``.{expr}`` class names.
        text: Text to wrap: a string, or a list of lines for implicit repeats.
        variables: Values for ``${name}`` references.
        max_repeat: Upper bound on the number of repeated copies in total.
        href: Turn wrapped URLs and e-mails into ``href`` of an ``<a>``.

    Returns:
        Abbreviation tree.

    Raises:
        ScanError, ParseError: on malformed abbreviation.
    """
    tokens = tokenize(abbr) if isinstance(abbr, str) else abbr
    root = parse(tokens, jsx=jsx)
    state = _ConvertState(text, variables, max_repeat)
    result = Abbreviation(_convert_group(root, state, root.repeat))

    if text is not None and not state.text_inserted and result.children:
        # Text wasn't consumed by repeats: put it into the deepest node
        deepest = deepest_node(result.children[-1])
        value = "\n".join(text) if isinstance(text, list) else text
        insert_text(deepest, value)
        if deepest.name == "a" and href:
            insert_href(deepest, value)

    return result


def _convert_statement(node, state: _ConvertState) -> list:
    if node.repeat is None:
        return _convert(node, state, None)

    repeat = RepeatState(
        count=(len(state.clean_text) if node.repeat.implicit and isinstance(state.text, list)
               else node.repeat.count or 1),
        implicit=node.repeat.implicit,
    )
    result = []
    state.repeaters.append(repeat)

    for i in range(repeat.count):
        repeat.value = i
        items = _convert(node, state, repeat)
        if repeat.implicit and not state.inserted:
            # No `$#` inside: each copy receives its own line of text
            target = items[-1] if items else None
            if target is not None:
                insert_text(deepest_node(target), state.get_text(repeat.value))
        result.extend(items)

        # At least one copy is always produced
        state.repeat_guard -= 1
        if state.repeat_guard <= 0:
            logger.debug("Repeat limit reached after %d of %d copies", i + 1, repeat.count)
            break

    state.repeaters.pop()
    if repeat.implicit:
        state.inserted = True
    return result


def _convert(node, state: _ConvertState, repeat) -> list:
    if isinstance(node, TokenGroup):
        return _convert_group(node, state, repeat)
    return _convert_element(node, state, repeat)


def _convert_element(node, state: _ConvertState, repeat) -> list:
    elem = AbbreviationNode(
        name=_stringify_name(node.name, state) if node.name is not None else None,
        value=_stringify_value(node.value, state) if node.value is not None else None,
        repeat=_copy_repeat(repeat),
        self_closing=node.self_close,
    )
    children = []
    for child in node.elements:
        children.extend(_convert_statement(child, state))

    # Attributes go last: `$#` in children decides what the attributes see
    if node.attributes is not None:
        elem.attributes = [_convert_attribute(attr, state) for attr in node.attributes]

    if (not elem.name and elem.attributes is None and elem.value is not None
            and not any(_is_field(t) for t in elem.value)):
        # Plain text wrapper: its children become siblings
        return [elem] + children

    elem.children = children
    return [elem]


def _convert_group(node: TokenGroup, state: _ConvertState, repeat) -> list:
    result = []
    for child in node.elements:
        result.extend(_convert_statement(child, state))

    if repeat is not None:
        for item in result:
            if item.repeat is None:
                item.repeat = _copy_repeat(repeat)
    return result


def _convert_attribute(node, state: _ConvertState) -> Attribute:
    implied = False
    boolean = False
    value_type = "expression" if node.expression else "raw"
    value = None
    name = _stringify_name(node.name, state) if node.name is not None else None

    if name and name[0] == "!":
        implied = True
    if name and name[-1] == ".":
        boolean = True

    if node.value is not None:
        tokens = list(node.value)
        if tokens and isinstance(tokens[0], Quote):
            quote = tokens.pop(0)
            if tokens and isinstance(tokens[-1], Quote):
                tokens.pop()
            value_type = "single_quote" if quote.single else "double_quote"
        elif tokens and _is_expression_bracket(tokens[0], True):
            value_type = "expression"
            tokens.pop(0)
            if tokens and _is_expression_bracket(tokens[-1], False):
                tokens.pop()
        value = _stringify_value(tokens, state)

    if implied or boolean:
        name = name[1 if implied else 0:-1 if boolean else None]

    return Attribute(name, value, boolean, implied, value_type)


# ── Token rendering ─────────────────────────────────────────────────────────

def _stringify(token, state: _ConvertState) -> str:
    if isinstance(token, (Literal, WhiteSpace)):
        return token.value
    if isinstance(token, Quote):
        return "'" if token.single else '"'
    if isinstance(token, Bracket):
        if token.context == "attribute":
            return "[" if token.open else "]"
        if token.context == "expression":
            return "{" if token.open else "}"
        return "(" if token.open else ")"
    if isinstance(token, Operator):
        return _OPERATOR_CHARS[token.operator]
    if isinstance(token, Field):
        if token.index is not None:
            return f"${{{token.index}:{token.name}}}" if token.name else f"${{{token.index}}}"
        if token.name:
            return state.get_variable(token.name)
        return ""
    if isinstance(token, RepeaterPlaceholder):
        repeater = None
        for candidate in reversed(state.repeaters):
            if candidate.implicit:
                repeater = candidate
                break
        state.inserted = True
        return state.get_text(repeater.value if repeater else None)
    if isinstance(token, RepeaterNumber):
        return _repeater_number(token, state)
    raise TypeError(f"Unknown token {type(token).__name__}")


def _repeater_number(token: RepeaterNumber, state: _ConvertState) -> str:
    value = 1
    if state.repeaters:
        last_ix = len(state.repeaters) - 1
        repeater = state.repeaters[last_ix]
        if token.reverse:
            value = token.base + repeater.count - repeater.value - 1
        else:
            value = token.base + repeater.value

        if token.parent:
            parent_ix = max(0, last_ix - token.parent)
            if parent_ix != last_ix:
                value += repeater.count * state.repeaters[parent_ix].value

    return str(value).rjust(token.size, "0")


def _stringify_name(tokens: list, state: _ConvertState) -> str:
    return "".join(_stringify(t, state) for t in tokens)


def _stringify_value(tokens: list, state: _ConvertState) -> list:
    """Render tokens to a value list; tab stops stay as Field objects."""
    result = []
    text = ""
    for token in tokens:
        if _is_field(token):
            if text:
                result.append(text)
                text = ""
            result.append(token)
        else:
            text += _stringify(token, state)
    if text:
        result.append(text)
    return result


# ── Tree helpers ────────────────────────────────────────────────────────────

def deepest_node(node: AbbreviationNode) -> AbbreviationNode:
    while node.children:
        node = node.children[-1]
    return node


def insert_text(node: AbbreviationNode, text: str):
    if node.value:
        if isinstance(node.value[-1], str):
            node.value[-1] += text
        else:
            node.value.append(text)
    else:
        node.value = [text]


def insert_href(node: AbbreviationNode, text: str):
    """Use a wrapped URL or e-mail address as the ``href`` of ``node``."""
    if URL_RE.match(text):
        href = text
        if not re.search(r"\w+:", href) and not href.startswith("//"):
            href = f"http://{href}"
    elif EMAIL_RE.match(text):
        href = f"mailto:{text}"
    else:
        return

    for attr in node.attributes or []:
        if attr.name == "href":
            if attr.value is None:
                attr.value = [href]
            return

    if node.attributes is None:
        node.attributes = []
    node.attributes.append(Attribute("href", [href], value_type="double_quote"))


def _copy_repeat(repeat) -> Optional[RepeatState]:
    if repeat is None:
        return None
    return RepeatState(repeat.count, repeat.value, repeat.implicit)


def _is_field(token) -> bool:
    return isinstance(token, Field) and token.index is not None


def _is_expression_bracket(token, is_open: bool) -> bool:
    return isinstance(token, Bracket) and token.context == "expression" and token.open == is_open
