"""
Configuration resolution.

A user configuration is a plain dict (the shape JSON snippet packs and
editor settings naturally have). ``resolve_config()`` layers it over the
built-in defaults, in this order, later entries winning:

    defaults → type defaults → syntax defaults
             → global type overrides → global syntax overrides → user values

``variables``, ``snippets`` and ``options`` merge key by key; every other
key is taken from the user as is.
"""

from dataclasses import dataclass, field
from typing import Optional

from .fields import format_field, plain_text
from .snippet_data import (
    MARKUP_SNIPPETS,
    PUG_SNIPPETS,
    STYLESHEET_SNIPPETS,
    VARIABLES,
    XSL_SNIPPETS,
)

TYPES = ("markup", "stylesheet")

DEFAULT_SYNTAXES = {
    "markup": "html",
    "stylesheet": "css",
}

# Context names understood by the stylesheet resolver
CONTEXT_SECTION = "@@section"
CONTEXT_PROPERTY = "@@property"
CONTEXT_VALUE = "@@value"


@dataclass
class Context:
    """Where the abbreviation is expanded: a parent tag, or a CSS scope."""
    name: str
    attributes: dict = field(default_factory=dict)


@dataclass
class Config:
    type: str = "markup"
    syntax: str = "html"
    variables: dict = field(default_factory=dict)
    snippets: dict = field(default_factory=dict)
    options: dict = field(default_factory=dict)
    context: Optional[Context] = None
    text: object = None             # str or list of str, for wrapping
    max_repeat: Optional[int] = None


# ── Default options ─────────────────────────────────────────────────────────

DEFAULT_OPTIONS = {
    "inlineElements": [
        "a", "abbr", "acronym", "applet", "b", "basefont", "bdo",
        "big", "br", "button", "cite", "code", "del", "dfn", "em", "font", "i",
        "iframe", "img", "input", "ins", "kbd", "label", "map", "object", "q",
        "s", "samp", "select", "small", "span", "strike", "strong", "sub", "sup",
        "textarea", "tt", "u", "var",
    ],
    "output.indent": "\t",
    "output.baseIndent": "",
    "output.newline": "\n",
    "output.tagCase": "",
    "output.attributeCase": "",
    "output.attributeQuotes": "double",
    "output.format": True,
    "output.formatLeafNode": False,
    "output.formatSkip": ["html"],
    "output.formatForce": ["body"],
    "output.inlineBreak": 3,
    "output.compactBoolean": False,
    "output.booleanAttributes": [
        "contenteditable", "seamless", "async", "autofocus",
        "autoplay", "checked", "controls", "defer", "disabled", "formnovalidate",
        "hidden", "ismap", "loop", "multiple", "muted", "novalidate", "readonly",
        "required", "reversed", "selected", "typemustmatch",
    ],
    "output.reverseAttributes": False,
    "output.selfClosingStyle": "html",
    "output.field": format_field,
    "output.text": plain_text,
    "markup.href": True,
    "comment.enabled": False,
    "comment.trigger": ["id", "class"],
    "comment.before": "",
    "comment.after": "\n<!-- /[#ID][.CLASS] -->",
    "bem.enabled": False,
    "bem.element": "__",
    "bem.modifier": "_",
    "jsx.enabled": False,
    "stylesheet.keywords": ["auto", "inherit", "unset", "none"],
    "stylesheet.unitless": ["z-index", "line-height", "opacity", "font-weight",
                            "zoom", "flex", "flex-grow", "flex-shrink"],
    "stylesheet.shortHex": True,
    "stylesheet.between": ": ",
    "stylesheet.after": ";",
    "stylesheet.intUnit": "px",
    "stylesheet.floatUnit": "em",
    "stylesheet.unitAliases": {"e": "em", "p": "%", "x": "ex", "r": "rem"},
    "stylesheet.json": False,
    "stylesheet.jsonDoubleQuotes": False,
    "stylesheet.fuzzySearchMinScore": 0,
}


def parse_snippets(table: dict) -> dict:
    """Flatten ``"a|b": value`` alias keys into one entry per name."""
    result = {}
    for key, value in table.items():
        for name in key.split("|"):
            result[name] = value
    return result


# ── Per-type and per-syntax defaults ────────────────────────────────────────

SYNTAX_CONFIG = {
    "markup": {
        "snippets": parse_snippets(MARKUP_SNIPPETS),
    },
    "xhtml": {
        "options": {"output.selfClosingStyle": "xhtml"},
    },
    "xml": {
        "options": {"output.selfClosingStyle": "xml"},
    },
    "xsl": {
        "snippets": parse_snippets(XSL_SNIPPETS),
        "options": {"output.selfClosingStyle": "xml"},
    },
    "jsx": {
        "options": {"jsx.enabled": True},
    },
    "pug": {
        "snippets": parse_snippets(PUG_SNIPPETS),
    },
    "stylesheet": {
        "snippets": parse_snippets(STYLESHEET_SNIPPETS),
    },
    "sass": {
        "options": {"stylesheet.after": ""},
    },
    "stylus": {
        "options": {
            "stylesheet.between": " ",
            "stylesheet.after": "",
        },
    },
}

_DEFAULTS = {
    "variables": VARIABLES,
    "snippets": {},
    "options": DEFAULT_OPTIONS,
}


def resolve_config(user=None, globals_: Optional[dict] = None) -> Config:
    """Build a Config from a user dict, layered over the defaults.

    Args:
        user: Dict with any of ``type``, ``syntax``, ``variables``,
            ``snippets``, ``options``, ``context``, ``text`` and
            ``max_repeat``. A Config is returned unchanged.
        globals_: Per-type and per-syntax overrides, e.g.
            ``{"markup": {"snippets": {...}}, "jsx": {"options": {...}}}``.

    Raises:
        ValueError: If ``type`` is neither ``markup`` nor ``stylesheet``.
    """
    if isinstance(user, Config):
        return user

    user = user or {}
    globals_ = globals_ or {}

    type_ = user.get("type") or "markup"
    if type_ not in TYPES:
        raise ValueError(f"Unknown abbreviation type: {type_!r}")
    syntax = user.get("syntax") or DEFAULT_SYNTAXES[type_]

    return Config(
        type=type_,
        syntax=syntax,
        variables=_merged(type_, syntax, "variables", user, globals_),
        snippets=_merged(type_, syntax, "snippets", user, globals_),
        options=_merged(type_, syntax, "options", user, globals_),
        context=_context(user.get("context")),
        text=user.get("text"),
        max_repeat=user.get("max_repeat"),
    )


def _merged(type_: str, syntax: str, key: str, user: dict, globals_: dict) -> dict:
    result = dict(_DEFAULTS[key])
    layers = (
        SYNTAX_CONFIG.get(type_),
        SYNTAX_CONFIG.get(syntax),
        globals_.get(type_),
        globals_.get(syntax),
        user,
    )
    for layer in layers:
        if layer and layer.get(key):
            result.update(layer[key])
    return result


def _context(value) -> Optional[Context]:
    if value is None or isinstance(value, Context):
        return value
    return Context(value["name"], dict(value.get("attributes") or {}))
