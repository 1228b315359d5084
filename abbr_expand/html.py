"""
HTML stringifier.

Walks the abbreviation tree and writes tags, attributes and text into an
OutputStream. Most of the work is deciding where line breaks go: block
elements get their own lines, runs of inline elements stay together until
``output.inlineBreak`` of them sit side by side.
"""

import re

from .abbreviation import Abbreviation
from .comment import comment_node_after, comment_node_before, create_comment_state
from .fields import Field
from .output import (
    OutputStream,
    attr_name,
    attr_quote,
    is_boolean_attribute,
    is_inline,
    self_close,
    tag_name,
)

HTML_TAG_RE = re.compile(r"^<([\w\-:]+)[\s>]")
_NEWLINE_RE = re.compile(r"\r|\n")
_VALUE_LINE_RE = re.compile(r"\r\n?|\n")


def caret() -> list:
    """Value for an empty element: a single final tab stop."""
    return [Field(0, "")]


class WalkState:
    """Traversal state shared by the HTML and indent-based stringifiers.

    ``ancestors`` is an explicit stack of the nodes above ``parent``;
    ``field`` is the next free tab stop index in the output.
    """

    def __init__(self, config):
        self.current = None
        self.parent = None
        self.ancestors = []
        self.config = config
        self.field = 1
        self.out = OutputStream(config.options)
        self.comment = None
        self._visitor = None

    def walk(self, abbr: Abbreviation, visitor):
        self._visitor = visitor
        for index, node in enumerate(abbr.children):
            self._visit(node, index, abbr.children)

    def next(self, node, index: int, items: list):
        """Visit a child of the current node."""
        self.ancestors.append(self.current)
        self._visit(node, index, items)
        self.ancestors.pop()

    def visit_children(self, node):
        for index, child in enumerate(node.children):
            self.next(child, index, node.children)

    def _visit(self, node, index: int, items: list):
        parent, current = self.parent, self.current
        self.parent = current
        self.current = node
        self._visitor(node, index, items, self)
        self.current = current
        self.parent = parent

    def push_tokens(self, tokens: list):
        """Write a value list, renumbering its tab stops after those already used."""
        largest = -1
        for token in tokens:
            if isinstance(token, str):
                self.out.push_string(token)
            else:
                self.out.push_field(self.field + token.index, token.name)
                if token.index > largest:
                    largest = token.index
        if largest != -1:
            self.field += largest + 1


def is_snippet(node) -> bool:
    """A node without name and attributes: plain text or a code fragment."""
    return node is not None and not node.name and node.attributes is None


def should_output_attribute(attr) -> bool:
    # An implied attribute is written only when it got a real value
    return not attr.implied or attr.value_type != "raw" or bool(attr.value)


def split_value_lines(tokens: list) -> list:
    """Split a value list into one value list per line."""
    result = []
    line = []
    for token in tokens:
        if isinstance(token, str):
            lines = _VALUE_LINE_RE.split(token)
            line.append(lines.pop(0))
            while lines:
                result.append(line)
                line = [lines.pop(0)]
        else:
            line.append(token)
    if line:
        result.append(line)
    return result


def html(abbr: Abbreviation, config) -> str:
    state = WalkState(config)
    state.comment = create_comment_state(config)
    state.walk(abbr, element)
    return state.out.value


def element(node, index: int, items: list, state: WalkState):
    out = state.out
    config = state.config
    format_ = should_format(node, index, items, state)

    level = get_indent(state)
    out.level += level
    if format_:
        out.push_newline(True)

    if node.name:
        name = tag_name(node.name, config)
        comment_node_before(node, state)
        out.push_string(f"<{name}")

        for attr in node.attributes or []:
            if should_output_attribute(attr):
                push_attribute(attr, state)

        if node.self_closing and not node.children and node.value is None:
            out.push_string(f"{self_close(config)}>")
        else:
            out.push_string(">")
            if not push_snippet(node, state):
                if node.value is not None:
                    inner_format = (any(_has_newline(t) for t in node.value)
                                    or starts_with_block_tag(node.value, config))
                    if inner_format:
                        out.level += 1
                        out.push_newline(out.level)
                    state.push_tokens(node.value)
                    if inner_format:
                        out.level -= 1
                        out.push_newline(out.level)

                state.visit_children(node)

                if node.value is None and not node.children:
                    inner_format = (config.options["output.formatLeafNode"]
                                    or node.name in config.options["output.formatForce"])
                    if inner_format:
                        out.level += 1
                        out.push_newline(out.level)
                    state.push_tokens(caret())
                    if inner_format:
                        out.level -= 1
                        out.push_newline(out.level)

            out.push_string(f"</{name}>")
            comment_node_after(node, state)

    elif not push_snippet(node, state) and node.value is not None:
        # Text-only node
        state.push_tokens(node.value)
        state.visit_children(node)

    if format_ and index == len(items) - 1 and state.parent is not None:
        offset = 0 if is_snippet(state.parent) else 1
        out.push_newline(out.level - offset)

    out.level -= level


def push_attribute(attr, state: WalkState):
    out = state.out
    config = state.config
    if not attr.name:
        return

    name = attr_name(attr.name, config)
    l_quote = attr_quote(attr, config, True)
    r_quote = attr_quote(attr, config)
    value = attr.value

    if is_boolean_attribute(attr, config) and value is None:
        # Without compactBoolean, `disabled` is written XML-style as disabled="disabled"
        if not config.options["output.compactBoolean"]:
            value = [name]
    elif value is None:
        value = caret()

    out.push_string(" " + name)
    if value is not None:
        out.push_string("=" + l_quote)
        state.push_tokens(value)
        out.push_string(r_quote)
    elif config.options["output.selfClosingStyle"] != "html":
        out.push_string("=" + l_quote + r_quote)


def push_snippet(node, state: WalkState) -> bool:
    """Write a value whose first field receives the node's children."""
    if node.value is None or not node.children:
        return False

    field_ix = next((i for i, t in enumerate(node.value) if isinstance(t, Field)), -1)
    if field_ix == -1:
        return False

    state.push_tokens(node.value[:field_ix])
    line = state.out.line
    pos = field_ix + 1
    state.visit_children(node)

    # After a line break, leading whitespace of the rest looks wrong
    if state.out.line != line and pos < len(node.value) and isinstance(node.value[pos], str):
        state.out.push_string(node.value[pos].lstrip())
        pos += 1

    state.push_tokens(node.value[pos:])
    return True


def should_format(node, index: int, items: list, state: WalkState) -> bool:
    """Check if ``node`` goes on its own line."""
    config = state.config
    parent = state.parent
    if not config.options["output.format"]:
        return False
    if index == 0 and parent is None:
        return False
    if parent is not None and is_snippet(parent) and len(items) == 1:
        return False

    if is_snippet(node):
        value = node.value or []
        if (is_snippet(_item(items, index - 1)) or is_snippet(_item(items, index + 1))
                or any(_has_newline(t) for t in value)
                or (any(isinstance(t, Field) for t in value) and node.children)):
            return True

    if not is_inline(node, config):
        return True

    # Inline node right after a block one, or first before one
    if index == 0:
        if any(not is_inline(item, config) for item in items):
            return True
    elif not is_inline(items[index - 1], config):
        return True

    inline_break = config.options["output.inlineBreak"]
    if inline_break:
        adjacent = 1
        before = index - 1
        after = index + 1
        while _is_inline_element(_item(items, before), config):
            adjacent += 1
            before -= 1
        while _is_inline_element(_item(items, after), config):
            adjacent += 1
            after += 1
        if adjacent >= inline_break:
            return True

    for i, child in enumerate(node.children):
        if should_format(child, i, node.children, state):
            return True
    return False


def get_indent(state: WalkState) -> int:
    parent = state.parent
    if parent is None or is_snippet(parent):
        return 0
    if parent.name and parent.name in state.config.options["output.formatSkip"]:
        return 0
    return 1


def starts_with_block_tag(value: list, config) -> bool:
    if value and isinstance(value[0], str):
        m = HTML_TAG_RE.match(value[0])
        if m and m.group(1).lower() not in config.options["inlineElements"]:
            return True
    return False


def _item(items: list, index: int):
    return items[index] if 0 <= index < len(items) else None


def _is_inline_element(node, config) -> bool:
    return node is not None and is_inline(node, config)


def _has_newline(token) -> bool:
    return isinstance(token, str) and bool(_NEWLINE_RE.search(token))
