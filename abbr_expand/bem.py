"""
BEM (Block, Element, Modifier) class name expansion.

With ``bem.enabled``, short class notation is expanded against the
nearest block name:

    .b>.-e          ->  class="b" / class="b__e"
    .b>.-e_m        ->  class="b__e b__e_m"
    .b_m            ->  class="b b_m"

The number of dashes (or underscores) in front of a short name says how
many levels up to look for the block.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from .abbreviation import AbbreviationNode

ELEMENT_RE = re.compile(r"^(-+)([a-z0-9]+[a-z0-9-]*)", re.IGNORECASE)
MODIFIER_RE = re.compile(r"^(_+)([a-z0-9]+[a-z0-9-_]*)", re.IGNORECASE)
_BLOCK_CANDIDATE_1 = re.compile(r"^[a-z]-", re.IGNORECASE)
_BLOCK_CANDIDATE_2 = re.compile(r"^[a-z]", re.IGNORECASE)


@dataclass
class BemData:
    class_names: list = field(default_factory=list)
    block: Optional[str] = None


class BemState:
    """Parsed class data for one expansion, keyed by node identity.

    The first parse of a node is remembered, so running the transform twice
    over the same tree with the same state gives the same classes.
    """

    def __init__(self):
        self._nodes = {}
        self._context = None

    def data(self, node: AbbreviationNode) -> BemData:
        if node not in self._nodes:
            class_value = ""
            for attr in node.attributes or []:
                if attr.name == "class" and attr.value:
                    class_value = _stringify_value(attr.value)
                    break
            self._nodes[node] = parse_bem(class_value)
        return self._nodes[node]

    def context_data(self, context) -> BemData:
        if self._context is None:
            self._context = parse_bem((context.attributes or {}).get("class", ""))
        return self._context


def bem(node: AbbreviationNode, ancestors: list, config, state: BemState):
    expand_class_names(node, config, state)
    expand_short_notation(node, ancestors, config, state)


def expand_class_names(node: AbbreviationNode, config, state: BemState):
    """Split existing ``block__el_mod`` classes into base and modifier.

    A ``block__element`` base stays whole, so an already expanded tree
    expands to the same classes again.
    """
    data = state.data(node)
    element_sep = config.options["bem.element"]
    modifier_sep = config.options["bem.modifier"]
    class_names = []
    for cl in data.class_names:
        if cl.startswith("-"):
            class_names.append(cl)
            continue

        ix = cl.find(element_sep)
        if ix > 0:
            ix = cl.find(modifier_sep, ix + len(element_sep))
        else:
            ix = cl.find(modifier_sep)

        if ix > 0:
            class_names.append(cl[:ix])
            class_names.append(cl[ix:])
        else:
            class_names.append(cl)

    if class_names:
        data.class_names = _unique(class_names)
        data.block = find_block_name(data.class_names)
        _update_class(node, " ".join(data.class_names))


def expand_short_notation(node: AbbreviationNode, ancestors: list, config, state: BemState):
    """Expand ``-element`` and ``_modifier`` classes."""
    data = state.data(node)
    options = config.options
    path = ancestors[1:] + [node]
    class_names = []

    for cl in data.class_names:
        prefix = ""
        original = cl

        m = ELEMENT_RE.match(cl)
        if m:
            prefix = (get_block_name(path, len(m.group(1)), state, config.context)
                      + options["bem.element"] + m.group(2))
            class_names.append(prefix)
            cl = cl[len(m.group(0)):]

        m = MODIFIER_RE.match(cl)
        if m:
            if not prefix:
                prefix = get_block_name(path, len(m.group(1)), state)
                class_names.append(prefix)
            class_names.append(f"{prefix}{options['bem.modifier']}{m.group(2)}")
            cl = cl[len(m.group(0)):]

        if cl == original:
            # Not a BEM short name
            class_names.append(original)

    class_names = _unique(class_names)
    if class_names:
        _update_class(node, " ".join(class_names))


def parse_bem(class_value: str) -> BemData:
    class_names = class_value.split() if class_value else []
    return BemData(class_names, find_block_name(class_names))


def get_block_name(path: list, depth: int, state: BemState, context=None) -> str:
    """Block name found ``depth`` levels up ``path``, falling back to the context."""
    parent_ix = max(len(path) - depth, 0)
    while True:
        if parent_ix < len(path):
            data = state.data(path[parent_ix])
            if data.block:
                return data.block
        if parent_ix <= 0:
            break
        parent_ix -= 1

    if context is not None:
        data = state.context_data(context)
        if data.block:
            return data.block
    return ""


def find_block_name(class_names: list) -> Optional[str]:
    return (_find(class_names, _BLOCK_CANDIDATE_1)
            or _find(class_names, _BLOCK_CANDIDATE_2)
            or None)


def _find(class_names: list, pattern) -> Optional[str]:
    for cl in class_names:
        if ELEMENT_RE.match(cl) or MODIFIER_RE.match(cl):
            break
        if pattern.match(cl):
            return cl
    return None


def _update_class(node: AbbreviationNode, value: str):
    for attr in node.attributes or []:
        if attr.name == "class":
            attr.value = [value]
            break


def _stringify_value(value: list) -> str:
    return "".join(t if isinstance(t, str) else t.name for t in value)


def _unique(items: list) -> list:
    result = []
    for item in items:
        if item and item not in result:
            result.append(item)
    return result
