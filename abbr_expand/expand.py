"""
Top-level entry points.

Markup expansion runs in two passes over the unrolled tree: first every
node that names a snippet is replaced by the parsed snippet, then every
node goes through the transform chain. The result is handed to the
stringifier of the configured syntax.

Usage:
    from abbr_expand import expand

    expand("ul>li.item$*3")
    expand("bd1-s#f00", {"type": "stylesheet"})
    expand("ul>li*", {"text": ["one", "two"]})
"""

from typing import Optional

from .abbreviation import Abbreviation, AbbreviationNode, parse_abbreviation
from .bem import BemState, bem
from .config import Config, resolve_config
from .css_output import css
from .css_resolve import parse_stylesheet
from .css_snippets import SnippetDatabase
from .html import html
from .indent import haml, pug, slim
from .lorem import lorem
from .snippets import resolve_snippets
from .transforms import implicit_tag, jsx, merge_attributes, walk, xsl

FORMATTERS = {
    "html": html,
    "haml": haml,
    "slim": slim,
    "pug": pug,
}


def expand(abbr: str, config=None, *, database: Optional[SnippetDatabase] = None) -> str:
    """Expand an abbreviation into markup or stylesheet code.

    Args:
        abbr: The abbreviation, e.g. ``"ul>li*3"`` or ``"p10+m5"``.
        config: User config dict (see ``resolve_config``) or a resolved Config.
        database: Stylesheet snippet database to use instead of building one.

    Returns:
        The expanded code, with tab stops written by ``output.field``.

    Raises:
        ScanError, ParseError: On a malformed abbreviation.
        ValueError: On an unknown ``type`` in ``config``.
    """
    resolved = resolve_config(config)
    if resolved.type == "stylesheet":
        return expand_stylesheet(abbr, resolved, database)
    return expand_markup(abbr, resolved)


def expand_markup(abbr, config: Config) -> str:
    return stringify_markup(parse_markup(abbr, config), config)


def expand_stylesheet(abbr, config: Config, database: Optional[SnippetDatabase] = None) -> str:
    return css(parse_stylesheet(abbr, config, database), config)


def parse_markup(abbr, config: Config) -> Abbreviation:
    """Parse a markup abbreviation and apply snippets and transforms.

    ``abbr`` may also be an already parsed Abbreviation, in which case the
    wrapped text from ``config`` is not inserted again.
    """
    if not isinstance(abbr, Abbreviation):
        abbr = parse_abbreviation(
            abbr,
            jsx=config.options["jsx.enabled"],
            href=config.options["markup.href"],
            text=config.text,
            variables=config.variables,
            max_repeat=config.max_repeat,
        )

    abbr = resolve_snippets(abbr, config)
    walk(abbr, transform, config, BemState())
    return abbr


def stringify_markup(abbr: Abbreviation, config: Config) -> str:
    formatter = FORMATTERS.get(config.syntax, html)
    return formatter(abbr, config)


def transform(node: AbbreviationNode, ancestors: list, config: Config, bem_state: BemState):
    """Prepare a single node for output."""
    implicit_tag(node, ancestors, config)
    merge_attributes(node, config)
    lorem(node, ancestors, config)

    if config.syntax == "xsl":
        xsl(node)
    if config.options["jsx.enabled"]:
        jsx(node)
    if config.options["bem.enabled"]:
        bem(node, ancestors, config, bem_state)
