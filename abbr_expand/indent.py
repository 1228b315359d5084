"""
Stringifiers for indentation-based markup syntaxes: HAML, SLIM and PUG.

All three share one walk; they differ only in the punctuation around
names, attribute lists and multi-line text, which lives in IndentOptions.
"""

import re
from dataclasses import dataclass

from .abbreviation import Abbreviation
from .html import WalkState, caret, is_snippet, should_output_attribute, split_value_lines
from .output import attr_name, attr_quote, is_boolean_attribute

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class IndentOptions:
    before_name: str = ""
    after_name: str = ""
    before_attribute: str = ""
    after_attribute: str = ""
    glue_attribute: str = ""
    before_text_line: str = ""
    after_text_line: str = ""
    boolean_value: str = ""
    self_close: str = ""


class IndentWalkState(WalkState):

    def __init__(self, config, options: IndentOptions):
        super().__init__(config)
        self.options = options


def indent_format(abbr: Abbreviation, config, options: IndentOptions) -> str:
    state = IndentWalkState(config, options)
    state.walk(abbr, element)
    return state.out.value


def haml(abbr: Abbreviation, config) -> str:
    return indent_format(abbr, config, IndentOptions(
        before_name="%",
        before_attribute="(",
        after_attribute=")",
        glue_attribute=" ",
        after_text_line=" |",
        boolean_value="true",
        self_close="/",
    ))


def slim(abbr: Abbreviation, config) -> str:
    return indent_format(abbr, config, IndentOptions(
        before_attribute=" ",
        glue_attribute=" ",
        before_text_line="| ",
        self_close="/",
    ))


def pug(abbr: Abbreviation, config) -> str:
    xml_style = config.options["output.selfClosingStyle"] == "xml"
    return indent_format(abbr, config, IndentOptions(
        before_attribute="(",
        after_attribute=")",
        glue_attribute=", ",
        before_text_line="| ",
        self_close="/" if xml_style else "",
    ))


def element(node, index: int, items: list, state: IndentWalkState):
    out = state.out
    options = state.options
    primary, secondary = collect_attributes(node)

    # Top-level elements aren't indented
    level = 1 if state.parent is not None else 0
    out.level += level

    if should_format(node, index, state):
        out.push_newline(True)

    if node.name and (node.name != "div" or not primary):
        out.push_string(options.before_name + node.name + options.after_name)

    push_primary_attributes(primary, state)
    push_secondary_attributes([a for a in secondary if should_output_attribute(a)], state)

    if node.self_closing and node.value is None and not node.children:
        if options.self_close:
            out.push_string(options.self_close)
    else:
        push_value(node, state)
        state.visit_children(node)

    out.level -= level


def collect_attributes(node):
    """Split attributes into primary (id and class) and secondary lists."""
    primary = []
    secondary = []
    for attr in node.attributes or []:
        if attr.name in ("class", "id"):
            primary.append(attr)
        else:
            secondary.append(attr)
    return primary, secondary


def push_primary_attributes(attrs: list, state: IndentWalkState):
    for attr in attrs:
        if attr.value is None:
            continue
        if attr.name == "class":
            state.out.push_string(".")
            # Class names are dot-separated in these syntaxes
            state.push_tokens([_WHITESPACE_RE.sub(".", t) if isinstance(t, str) else t
                               for t in attr.value])
        else:
            state.out.push_string("#")
            state.push_tokens(attr.value)


def push_secondary_attributes(attrs: list, state: IndentWalkState):
    if not attrs:
        return

    out = state.out
    config = state.config
    options = state.options

    if options.before_attribute:
        out.push_string(options.before_attribute)

    for i, attr in enumerate(attrs):
        out.push_string(attr_name(attr.name or "", config))
        if is_boolean_attribute(attr, config) and attr.value is None:
            if not config.options["output.compactBoolean"] and options.boolean_value:
                out.push_string("=" + options.boolean_value)
        else:
            out.push_string("=" + attr_quote(attr, config, True))
            state.push_tokens(attr.value if attr.value is not None else caret())
            out.push_string(attr_quote(attr, config))

        if i != len(attrs) - 1 and options.glue_attribute:
            out.push_string(options.glue_attribute)

    if options.after_attribute:
        out.push_string(options.after_attribute)


def push_value(node, state: IndentWalkState):
    """Write the node value, or a caret for leaf nodes.

    Multi-line values go on their own lines, each padded to the same
    length when the syntax terminates text lines (HAML's `` |``).
    """
    if node.value is None and node.children:
        return

    value = node.value if node.value is not None else caret()
    lines = split_value_lines(value)
    out = state.out
    options = state.options

    if len(lines) == 1:
        if node.name or node.attributes is not None:
            out.push(" ")
        state.push_tokens(value)
        return

    lengths = [value_length(line) for line in lines]
    max_length = max(lengths)

    out.level += 1
    for line, length in zip(lines, lengths):
        out.push_newline(True)
        if options.before_text_line:
            out.push(options.before_text_line)
        state.push_tokens(line)
        if options.after_text_line:
            out.push(" " * (max_length - length))
            out.push(options.after_text_line)
    out.level -= 1


def value_length(tokens: list) -> int:
    return sum(len(t) if isinstance(t, str) else len(t.name) for t in tokens)


def should_format(node, index: int, state: IndentWalkState) -> bool:
    if state.parent is None and index == 0:
        return False
    return not is_snippet(node)
