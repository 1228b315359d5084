"""
Output stream shared by all stringifiers, plus small formatting helpers.

The stream keeps track of offset, line and column so that ``output.field``
and ``output.text`` callbacks know exactly where in the result they are
writing; editors use this to place tab stops.
"""

import re

_LINE_SPLIT_RE = re.compile(r"\r\n|\r|\n")


class OutputStream:

    def __init__(self, options: dict, level: int = 0):
        self.options = options
        self.value = ""
        self.level = level
        self.offset = 0
        self.line = 0
        self.column = 0

    def push(self, text: str):
        """Push text through ``output.text`` without newline handling."""
        process = self.options["output.text"]
        self._push(process(text, self.offset, self.line, self.column))

    def push_string(self, value: str):
        """Push text that may contain newlines, re-indenting every line."""
        lines = split_by_lines(value)
        last = len(lines) - 1
        for i, line in enumerate(lines):
            self.push(line)
            if i != last:
                self.push_newline(True)

    def push_newline(self, indent=False):
        """Start a new line.

        Args:
            indent: True to indent by the current level, or an explicit level.
        """
        base_indent = self.options["output.baseIndent"]
        self.push(self.options["output.newline"] + base_indent)
        self.line += 1
        self.column = len(base_indent)
        if indent is True:
            self.push_indent(self.level)
        elif indent:
            self.push_indent(indent)

    def push_indent(self, size=None):
        if size is None:
            size = self.level
        self.push(self.options["output.indent"] * max(size, 0))

    def push_field(self, index: int, placeholder: str):
        # Fields skip `output.text`: they're editor markup, not content
        field = self.options["output.field"]
        self._push(field(index, placeholder, self.offset, self.line, self.column))

    def _push(self, text: str):
        self.value += text
        self.offset += len(text)
        self.column += len(text)


def split_by_lines(text: str) -> list:
    return _LINE_SPLIT_RE.split(text)


# ── Formatting helpers ──────────────────────────────────────────────────────

def tag_name(name: str, config) -> str:
    return _str_case(name, config.options["output.tagCase"])


def attr_name(name: str, config) -> str:
    return _str_case(name, config.options["output.attributeCase"])


def attr_quote(attr, config, is_open: bool = False) -> str:
    """Opening or closing quote for an attribute value."""
    if attr.value_type == "expression":
        return "{" if is_open else "}"
    return "'" if config.options["output.attributeQuotes"] == "single" else '"'


def is_boolean_attribute(attr, config) -> bool:
    return attr.boolean or (attr.name or "").lower() in config.options["output.booleanAttributes"]


def self_close(config) -> str:
    style = config.options["output.selfClosingStyle"]
    if style == "xhtml":
        return " /"
    if style == "xml":
        return "/"
    return ""


def is_inline(node, config) -> bool:
    """Check if a node (or a tag name) is inline-level.

    A nameless node counts as inline when it's plain text: it has a value
    but no attributes.
    """
    if isinstance(node, str):
        return node.lower() in config.options["inlineElements"]
    if node.name:
        return is_inline(node.name, config)
    return node.value is not None and node.attributes is None


def _str_case(value: str, kind: str) -> str:
    if kind:
        return value.upper() if kind == "upper" else value.lower()
    return value
