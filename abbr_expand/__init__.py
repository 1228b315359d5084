"""
abbr-expand: abbreviation expansion for markup and stylesheets.

Turns shorthand like ``ul>li.item$*3`` into HTML (or HAML, SLIM, PUG) and
``bd1-s#f00`` into ``border: 1px solid #f00;``, with numbered tab stops
for an editor to jump through.
"""

__version__ = "0.1.0"

from .errors import ExpandError, ScanError, ParseError
from .config import Config, Context, resolve_config, DEFAULT_OPTIONS
from .abbreviation import Abbreviation, AbbreviationNode, Attribute, parse_abbreviation
from .css_parser import parse_css
from .css_snippets import SnippetDatabase, build_snippet_database
from .css_resolve import parse_stylesheet
from .css_output import css
from .scoring import score_match
from .snippet_pack import load_snippet_pack
from .expand import (
    expand,
    expand_markup,
    expand_stylesheet,
    parse_markup,
    stringify_markup,
)
