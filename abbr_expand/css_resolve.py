"""
Stylesheet resolver: matches parsed properties against the snippet database.

For ``bd1-s#f00`` the parser gives a property named ``bd`` with the values
``1``, ``s`` and ``#f00``. The resolver fuzzy-matches ``bd`` to the
``border`` snippet, expands ``s`` to the ``solid`` keyword and gives the
unit-less ``1`` its default unit.
"""

import copy
import logging
import re
from typing import Optional

from .color import color, js_number
from .config import CONTEXT_PROPERTY, CONTEXT_SECTION, CONTEXT_VALUE, SYNTAX_CONFIG
from .css_parser import CSSProperty, CSSValue, FunctionCall, parse_css
from .css_snippets import (
    PropertySnippet,
    RawSnippet,
    SnippetDatabase,
    build_snippet_database,
    default_database,
)
from .css_tokenizer import ColorValue, CSSLiteral, NumberValue, StringValue
from .fields import Field
from .scoring import find_best_match, get_unmatched_part

logger = logging.getLogger(__name__)

GRADIENT_NAME = "lg"
_SNIPPET_FIELD_RE = re.compile(r"\$\{(\d+)(:[^}]+)?\}")


def parse_stylesheet(abbr, config, database: Optional[SnippetDatabase] = None) -> list:
    """Parse and resolve a stylesheet abbreviation.

    Args:
        abbr: Abbreviation text, or properties from ``parse_css()``.
        config: Resolved Config.
        database: Snippet database. Defaults to the built-in one when the
            config carries the built-in stylesheet snippets.

    Returns:
        The resolved CSSProperty list.
    """
    if database is None:
        database = get_database(config)

    if isinstance(abbr, str):
        abbr = parse_css(abbr, value=is_value_scope(config))

    snippets = get_snippets_for_scope(database, config)
    for node in abbr:
        resolve_node(node, snippets, config)
    return abbr


def get_database(config) -> SnippetDatabase:
    """Built-in database for the built-in table, a fresh one for anything else."""
    if config.snippets == SYNTAX_CONFIG["stylesheet"]["snippets"]:
        return default_database()
    return build_snippet_database(config.snippets)


def resolve_node(node: CSSProperty, snippets: list, config) -> CSSProperty:
    if not resolve_gradient(node, config):
        min_score = config.options["stylesheet.fuzzySearchMinScore"]
        if is_value_scope(config):
            # Value of the context property
            prop_name = config.context.name
            snippet = next((s for s in snippets
                            if isinstance(s, PropertySnippet) and s.property == prop_name), None)
            resolve_value_keywords(node, config, snippet, min_score)
            node.snippet = snippet
        elif node.name:
            snippet = find_best_match(node.name, snippets, min_score, True)
            node.snippet = snippet
            if snippet is None:
                logger.debug("No snippet matches %r", node.name)
            elif isinstance(snippet, PropertySnippet):
                resolve_as_property(node, snippet, config)
            else:
                resolve_as_snippet(node, snippet)

    if node.name or config.context is not None:
        # Units apply to CSS properties only
        resolve_numeric_value(node, config)
    return node


def resolve_gradient(node: CSSProperty, config) -> bool:
    """Turn ``lg(...)`` or a bare ``lg`` into a linear-gradient background."""
    gradient = None
    if len(node.value) == 1 and len(node.value[0].value) == 1:
        token = node.value[0].value[0]
        if isinstance(token, FunctionCall) and token.name == GRADIENT_NAME:
            gradient = token

    if gradient is None and node.name != GRADIENT_NAME:
        return False

    if gradient is None:
        gradient = FunctionCall("linear-gradient", [CSSValue([Field(0, "")])])
    else:
        gradient = FunctionCall("linear-gradient", gradient.arguments)

    if config.context is None:
        node.name = "background-image"
    node.value = [CSSValue([gradient])]
    return True


def resolve_as_property(node: CSSProperty, snippet: PropertySnippet, config) -> CSSProperty:
    abbr = node.name

    # In `dib`, `d` matches `display` and `ib` must be a keyword of it.
    # An unmatched tail next to an explicit value, or one that isn't a
    # keyword, means the match was wrong
    inline_value = get_unmatched_part(abbr, snippet.key)
    if inline_value:
        if node.value:
            return node
        keyword = resolve_keyword(inline_value, config, snippet)
        if keyword is None:
            return node
        node.value.append(CSSValue([keyword]))

    node.name = snippet.property

    if node.value:
        resolve_value_keywords(node, config, snippet)
    elif snippet.value:
        default = copy.deepcopy(snippet.value[0])
        # Only offer the default for selection when there's a choice
        if len(snippet.value) == 1 or any(has_field(v) for v in default):
            node.value = default
        else:
            node.value = [wrap_with_field(v, config) for v in default]

    return node


def resolve_value_keywords(node: CSSProperty, config, snippet=None, min_score: float = 0):
    for css_value in node.value:
        value = []
        for token in css_value.value:
            if isinstance(token, CSSLiteral):
                value.append(resolve_keyword(token.value, config, snippet, min_score) or token)
            elif isinstance(token, FunctionCall):
                # Missing arguments come from the matching keyword function
                match = resolve_keyword(token.name, config, snippet, min_score)
                if isinstance(match, FunctionCall):
                    value.append(FunctionCall(match.name,
                                              token.arguments + match.arguments[len(token.arguments):]))
                else:
                    value.append(token)
            else:
                value.append(token)
        css_value.value = value


def resolve_as_snippet(node: CSSProperty, snippet: RawSnippet) -> CSSProperty:
    """Use a raw snippet as is, with the node's values filling its fields."""
    offset = 0
    input_value = node.value[0] if node.value else None
    output = []

    for m in _SNIPPET_FIELD_RE.finditer(snippet.value):
        if offset != m.start():
            output.append(CSSLiteral(snippet.value[offset:m.start()]))
        offset = m.end()
        if input_value is not None and input_value.value:
            output.append(input_value.value.pop(0))
        else:
            output.append(Field(int(m.group(1)), m.group(2)[1:] if m.group(2) else ""))

    tail = snippet.value[offset:]
    if tail:
        output.append(CSSLiteral(tail))

    node.name = None
    node.value = [CSSValue(output)]
    return node


def resolve_keyword(keyword: str, config, snippet=None, min_score: float = 0):
    """Expand a keyword shorthand using the snippet, its longhands, then globals."""
    if snippet is not None:
        ref = find_best_match(keyword, list(snippet.keywords), min_score)
        if ref is not None:
            return copy.deepcopy(snippet.keywords[ref])
        for dep in snippet.dependencies:
            ref = find_best_match(keyword, list(dep.keywords), min_score)
            if ref is not None:
                return copy.deepcopy(dep.keywords[ref])

    ref = find_best_match(keyword, config.options["stylesheet.keywords"], min_score)
    if ref is not None:
        return CSSLiteral(ref)
    return None


def resolve_numeric_value(node: CSSProperty, config):
    aliases = config.options["stylesheet.unitAliases"]
    unitless = config.options["stylesheet.unitless"]
    for css_value in node.value:
        for token in css_value.value:
            if not isinstance(token, NumberValue):
                continue
            if token.unit:
                token.unit = aliases.get(token.unit, token.unit)
            elif token.value != 0 and node.name not in unitless:
                token.unit = (config.options["stylesheet.floatUnit"] if "." in token.raw_value
                              else config.options["stylesheet.intUnit"])


def has_field(css_value: CSSValue) -> bool:
    for token in css_value.value:
        if isinstance(token, Field):
            return True
        if isinstance(token, FunctionCall) and any(has_field(a) for a in token.arguments):
            return True
    return False


def wrap_with_field(css_value: CSSValue, config, state: Optional[dict] = None) -> CSSValue:
    """Turn every token of a value into a numbered field holding its text."""
    if state is None:
        state = {"index": 1}

    def next_field(name: str) -> Field:
        index = state["index"]
        state["index"] += 1
        return Field(index, name)

    value = []
    for token in css_value.value:
        if isinstance(token, ColorValue):
            value.append(next_field(color(token, config.options["stylesheet.shortHex"])))
        elif isinstance(token, CSSLiteral):
            value.append(next_field(token.value))
        elif isinstance(token, NumberValue):
            value.append(next_field(f"{js_number(token.value)}{token.unit}"))
        elif isinstance(token, StringValue):
            q = "'" if token.quote == "single" else '"'
            value.append(next_field(q + token.value + q))
        elif isinstance(token, FunctionCall):
            value.append(next_field(token.name))
            value.append(CSSLiteral("("))
            for i, arg in enumerate(token.arguments):
                value.extend(wrap_with_field(arg, config, state).value)
                if i != len(token.arguments) - 1:
                    value.append(CSSLiteral(", "))
            value.append(CSSLiteral(")"))
        else:
            value.append(token)

    return CSSValue(value)


def is_value_scope(config) -> bool:
    """Check if the abbreviation is expanded inside a property value."""
    if config.context is None:
        return False
    name = config.context.name
    return name == CONTEXT_VALUE or not name.startswith("@@")


def get_snippets_for_scope(database, config) -> list:
    if config.context is not None:
        if config.context.name == CONTEXT_SECTION:
            return database.raw()
        if config.context.name == CONTEXT_PROPERTY:
            return database.properties()
    return list(database)
