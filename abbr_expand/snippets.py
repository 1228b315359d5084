"""
Markup snippet resolution.

A markup snippet is just another abbreviation: ``"a": "a[href]"``,
``"!": "!!!+doc"``. Every node whose name is a snippet key is replaced by
the parsed snippet, which is itself resolved recursively. The node that
referenced the snippet still contributes its attributes, value,
self-closing flag, repeat and children.
"""

import logging
from typing import Optional

from .abbreviation import Abbreviation, AbbreviationNode, parse_abbreviation

logger = logging.getLogger(__name__)


class _SnippetResolver:

    def __init__(self, config):
        self.config = config
        self.reversed = config.options["output.reverseAttributes"]
        # Snippet texts currently being expanded, to stop circular references
        self.stack = []

    def resolve(self, child: AbbreviationNode) -> Optional[Abbreviation]:
        snippet = self.config.snippets.get(child.name) if child.name else None
        if not snippet:
            return None
        if snippet in self.stack:
            # Either a cycle or a self-shaping snippet like "img": "img[src alt]/"
            logger.debug("Snippet %r is already being resolved, keeping node as is", child.name)
            return None

        snippet_abbr = parse_abbreviation(
            snippet,
            variables=self.config.variables,
            max_repeat=self.config.max_repeat,
        )
        self.stack.append(snippet)
        try:
            self.walk(snippet_abbr)
        finally:
            self.stack.pop()

        for top_node in snippet_abbr.children:
            if child.attributes is not None:
                own = top_node.attributes or []
                if self.reversed:
                    top_node.attributes = child.attributes + own
                else:
                    top_node.attributes = own + child.attributes
            merge_nodes(child, top_node)

        return snippet_abbr

    def walk(self, node) -> list:
        children = []
        for child in node.children:
            resolved = self.resolve(child)
            if resolved is not None:
                children.extend(resolved.children)
                deepest = find_deepest(resolved)
                if isinstance(deepest, AbbreviationNode):
                    deepest.children = deepest.children + self.walk(child)
            else:
                children.append(child)
                self.walk(child)

        node.children = children
        return children


def resolve_snippets(abbr: Abbreviation, config) -> Abbreviation:
    """Replace snippet references in ``abbr`` in place and return it."""
    _SnippetResolver(config).walk(abbr)
    return abbr


def merge_nodes(source: AbbreviationNode, target: AbbreviationNode):
    """Carry the referencing node's own data over to a snippet node."""
    if source.self_closing:
        target.self_closing = True
    if source.value is not None:
        target.value = source.value
    if source.repeat is not None:
        target.repeat = source.repeat


def find_deepest(node):
    """Last descendant along the chain of last children (or ``node`` itself)."""
    while node.children:
        node = node.children[-1]
    return node
