"""CSS stringifier: writes resolved stylesheet properties."""

import re

from .color import color, frac, js_number
from .config import CONTEXT_SECTION
from .css_parser import CSSProperty, FunctionCall
from .css_tokenizer import ColorValue, CSSLiteral, NumberValue, StringValue
from .fields import Field
from .output import OutputStream

_KEBAB_RE = re.compile(r"-(\w)")


def css(nodes: list, config) -> str:
    out = OutputStream(config.options)
    format_ = config.options["output.format"]

    if config.context is not None and config.context.name == CONTEXT_SECTION:
        # Only matched snippets make sense at section level
        nodes = [node for node in nodes if node.snippet is not None]

    for i, node in enumerate(nodes):
        if format_ and i != 0:
            out.push_newline(True)
        output_property(node, out, config)

    return out.value


def output_property(node: CSSProperty, out: OutputStream, config):
    is_json = config.options["stylesheet.json"]

    if not node.name:
        # Raw snippet: plain tokens, no punctuation
        for css_value in node.value:
            for token in css_value.value:
                output_token(token, out, config)
        output_important(node, out, bool(node.value))
        return

    name = to_camel_case(node.name) if is_json else node.name
    out.push_string(name + config.options["stylesheet.between"])
    if node.value:
        output_property_value(node, out, config)
    else:
        out.push_field(0, "")

    if is_json:
        # `!important` has no CSS-in-JS equivalent
        out.push(",")
    else:
        output_important(node, out, True)
        out.push(config.options["stylesheet.after"])


def output_property_value(node: CSSProperty, out: OutputStream, config):
    is_json = config.options["stylesheet.json"]
    num = get_single_numeric(node) if is_json else None

    if num is not None and (not num.unit or num.unit == "px"):
        # A plain number in CSS-in-JS
        out.push(js_number(num.value))
        return

    quote = '"' if config.options["stylesheet.jsonDoubleQuotes"] else "'"
    if is_json:
        out.push(quote)
    for i, css_value in enumerate(node.value):
        if i != 0:
            out.push(", ")
        output_value(css_value, out, config)
    if is_json:
        out.push(quote)


def output_important(node: CSSProperty, out: OutputStream, separator: bool):
    if node.important:
        if separator:
            out.push(" ")
        out.push("!important")


def output_value(css_value, out: OutputStream, config):
    prev_end = -1
    for i, token in enumerate(css_value.value):
        # No space before a field glued to the previous token: `foo${1}`
        if i != 0 and (not isinstance(token, Field) or token.start != prev_end):
            out.push(" ")
        output_token(token, out, config)
        prev_end = getattr(token, "end", None)


def output_token(token, out: OutputStream, config):
    if isinstance(token, ColorValue):
        out.push(color(token, config.options["stylesheet.shortHex"]))
    elif isinstance(token, CSSLiteral):
        out.push_string(token.value)
    elif isinstance(token, NumberValue):
        out.push_string(frac(token.value, 4) + token.unit)
    elif isinstance(token, StringValue):
        quote = '"' if token.quote == "double" else "'"
        out.push_string(quote + token.value + quote)
    elif isinstance(token, Field):
        out.push_field(token.index, token.name)
    elif isinstance(token, FunctionCall):
        out.push(token.name + "(")
        for i, arg in enumerate(token.arguments):
            if i:
                out.push(", ")
            output_value(arg, out, config)
        out.push(")")


def get_single_numeric(node: CSSProperty):
    if len(node.value) == 1:
        tokens = node.value[0].value
        if len(tokens) == 1 and isinstance(tokens[0], NumberValue):
            return tokens[0]
    return None


def to_camel_case(name: str) -> str:
    return _KEBAB_RE.sub(lambda m: m.group(1).upper(), name)
