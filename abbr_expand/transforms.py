"""
Tree transforms applied after snippet resolution.

Each transform is a plain function ``fn(node, ancestors, config)`` that
rewrites a node in place. ``walk()`` visits the tree depth-first in
pre-order with an explicit stack, so deeply nested abbreviations don't
depend on the interpreter's recursion limit.
"""

import copy

from .abbreviation import AbbreviationNode
from .output import is_inline


# ── Implicit tag names ──────────────────────────────────────────────────────
# Child element used when a node has attributes but no name, e.g. `ul>.item`

ELEMENT_MAP = {
    "p": "span",
    "ul": "li",
    "ol": "li",
    "table": "tr",
    "tr": "td",
    "tbody": "tr",
    "thead": "tr",
    "tfoot": "tr",
    "colgroup": "col",
    "select": "option",
    "optgroup": "option",
    "audio": "source",
    "video": "source",
    "object": "param",
    "map": "area",
}


def walk(root, fn, *args):
    """Call ``fn(node, ancestors, *args)`` for every node below ``root``.

    ``ancestors`` starts with ``root`` itself and ends with the node's parent.
    """
    ancestors = [root]
    stack = [(child, 1) for child in reversed(root.children)]

    while stack:
        node, depth = stack.pop()
        del ancestors[depth:]
        fn(node, ancestors, *args)
        ancestors.append(node)
        stack.extend((child, depth + 1) for child in reversed(node.children))


def implicit_tag(node: AbbreviationNode, ancestors: list, config):
    if not node.name and node.attributes is not None:
        resolve_implicit_tag(node, ancestors, config)


def resolve_implicit_tag(node: AbbreviationNode, ancestors: list, config):
    parent = get_parent_element(ancestors)
    context_name = config.context.name if config.context else ""
    parent_name = ((parent.name if parent is not None else context_name) or "").lower()
    node.name = ELEMENT_MAP.get(parent_name) or ("span" if is_inline(parent_name, config) else "div")


def get_parent_element(ancestors: list):
    for elem in reversed(ancestors):
        if isinstance(elem, AbbreviationNode):
            return elem
    return None


# ── Attribute merge ─────────────────────────────────────────────────────────

def merge_attributes(node: AbbreviationNode, config):
    """De-duplicate attributes by name and join ``class`` values.

    Every named attribute is copied first, so attributes shared between
    snippet copies are never modified.
    """
    if node.attributes is None:
        return

    attributes = []
    lookup = {}
    for attr in node.attributes:
        if not attr.name:
            attributes.append(attr)
            continue

        key = attr.name.lower()
        if key in lookup:
            prev = lookup[key]
            if key == "class":
                prev.value = _merge_value(prev.value, attr.value, " ")
            else:
                _merge_declarations(prev, attr, config)
        else:
            clone = copy.copy(attr)
            if clone.value is not None:
                clone.value = list(clone.value)
            lookup[key] = clone
            attributes.append(clone)

    node.attributes = attributes


def _merge_value(prev, nxt, glue: str = ""):
    if prev is not None and nxt is not None:
        if prev and glue:
            _append(prev, glue)
        for token in nxt:
            _append(prev, token)
        return prev

    result = prev if prev is not None else nxt
    return list(result) if result is not None else None


def _merge_declarations(dest, src, config):
    dest.name = src.name
    if not config.options["output.reverseAttributes"]:
        dest.value = list(src.value) if src.value is not None else None
    if not dest.implied:
        dest.implied = src.implied
    if not dest.boolean:
        dest.boolean = src.boolean
    if dest.value_type != "expression":
        dest.value_type = src.value_type
    return dest


def _append(tokens: list, value):
    if tokens and isinstance(tokens[-1], str) and isinstance(value, str):
        tokens[-1] += value
    else:
        tokens.append(value)


# ── Syntax-specific rewrites ────────────────────────────────────────────────

def xsl(node: AbbreviationNode):
    """Drop ``select`` from variables and params that have a body."""
    if (node.name in ("xsl:variable", "xsl:with-param") and node.attributes is not None
            and (node.children or node.value is not None)):
        node.attributes = [attr for attr in node.attributes if attr.name != "select"]


def jsx(node: AbbreviationNode):
    """Rename ``class`` and ``for`` to their React property names."""
    for attr in node.attributes or []:
        if attr.name == "class":
            attr.name = "className"
        elif attr.name == "for":
            attr.name = "htmlFor"
