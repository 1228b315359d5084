"""
Stylesheet snippet database.

A snippet table maps abbreviation keys to either a property definition,
``"d": "display:block|none|flex"``, or raw text such as an ``@media``
block. Property definitions are parsed once into value alternatives and a
keyword index, then nested so that a shorthand property (``border``)
can see the keywords of its longhands (``border-style``).
"""

import functools
import re
from dataclasses import dataclass, field
from typing import Optional

from .config import SYNTAX_CONFIG
from .css_parser import FunctionCall, parse_css
from .css_tokenizer import CSSLiteral
from .fields import Field

PROPERTY_RE = re.compile(r"^([a-z-]+)(?:\s*:\s*([^\n\r;]+?);*)?$")


@dataclass
class PropertySnippet:
    key: str
    property: str
    value: list = field(default_factory=list)         # alternatives, each a list of CSSValue
    keywords: dict = field(default_factory=dict)
    dependencies: list = field(default_factory=list)


@dataclass
class RawSnippet:
    key: str
    value: str


@dataclass(frozen=True)
class SnippetDatabase:
    """Parsed snippets sorted by key. Treat the values as read-only."""
    snippets: tuple = ()

    def __iter__(self):
        return iter(self.snippets)

    def __len__(self):
        return len(self.snippets)

    def properties(self) -> list:
        return [s for s in self.snippets if isinstance(s, PropertySnippet)]

    def raw(self) -> list:
        return [s for s in self.snippets if isinstance(s, RawSnippet)]

    def find_property(self, name: str) -> Optional[PropertySnippet]:
        for snippet in self.snippets:
            if isinstance(snippet, PropertySnippet) and snippet.property == name:
                return snippet
        return None


def create_snippet(key: str, value: str):
    m = PROPERTY_RE.match(value)
    if not m:
        return RawSnippet(key, value)

    alternatives = []
    if m.group(2):
        for item in m.group(2).split("|"):
            parsed = parse_css(item.strip(), value=True)
            if parsed:
                alternatives.append(parsed[0].value)

    keywords = {}
    for alternative in alternatives:
        for css_value in alternative:
            _collect_keywords(css_value, keywords)

    return PropertySnippet(key, m.group(1), alternatives, keywords)


def _collect_keywords(css_value, dest: dict):
    for token in css_value.value:
        if isinstance(token, CSSLiteral):
            dest[token.value] = token
        elif isinstance(token, FunctionCall):
            dest[token.name] = token
        elif isinstance(token, Field):
            # A named placeholder doubles as a keyword
            name = token.name.strip()
            if name:
                dest[name] = CSSLiteral(name)


def nest(snippets: list) -> list:
    """Sort snippets by key and link each property to its longhands.

    After sorting, ``background`` precedes ``background-position``, which
    precedes ``background-position-x``, so a stack of open shorthands is
    enough to build the chain.
    """
    snippets = sorted(snippets, key=lambda s: s.key)
    stack = []
    for cur in snippets:
        if not isinstance(cur, PropertySnippet):
            continue
        while stack:
            prev = stack[-1]
            if (cur.property.startswith(prev.property)
                    and cur.property[len(prev.property):len(prev.property) + 1] == "-"):
                prev.dependencies.append(cur)
                stack.append(cur)
                break
            stack.pop()
        if not stack:
            stack.append(cur)
    return snippets


def build_snippet_database(table: dict) -> SnippetDatabase:
    """Parse a flat ``{key: value}`` snippet table into a database handle."""
    return SnippetDatabase(tuple(nest([create_snippet(k, v) for k, v in table.items()])))


@functools.lru_cache(maxsize=None)
def default_database() -> SnippetDatabase:
    return build_snippet_database(SYNTAX_CONFIG["stylesheet"]["snippets"])
