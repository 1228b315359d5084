"""
Expansion examples.

Runs a handful of markup and stylesheet abbreviations through every
output syntax, plus a wrap-with-abbreviation and a snippet pack example.
"""

from abbr_expand import expand, load_snippet_pack

# ── Markup ──────────────────────────────────────────────────────────────────
MARKUP = [
    "ul>li.item$*3",
    "div#page>header.top+main>p{Hello}",
    "table>.row*2>.cell*2",
    "a",
    "p>lorem8",
]

# ── Stylesheet ──────────────────────────────────────────────────────────────
STYLESHEET = [
    "bd1-s#f00",
    "p10-20+m0-a",
    "dib",
    "c#abc.5",
    "lg(to right, red, blue)",
]


def plain(index, placeholder, *rest):
    return placeholder


if __name__ == "__main__":
    print("=" * 60)
    print("MARKUP")
    print("=" * 60)
    for abbr in MARKUP:
        print(f"\n▶ {abbr}")
        print(expand(abbr))

    print("\n" + "-" * 60)
    print("Same abbreviation, every markup syntax:")
    for syntax in ("html", "xhtml", "jsx", "haml", "slim", "pug"):
        print(f"\n[{syntax}]")
        print(expand("div#app.box>p.intro{Hi}+img", {"syntax": syntax}))

    print("\n" + "=" * 60)
    print("STYLESHEET")
    print("=" * 60)
    for abbr in STYLESHEET:
        print(f"\n▶ {abbr}")
        for syntax in ("css", "stylus"):
            print(f"  {syntax:7} {expand(abbr, {'type': 'stylesheet', 'syntax': syntax})}")
        print(f"  json    {expand(abbr, {'type': 'stylesheet', 'options': {'stylesheet.json': True}})}")

    print("\n" + "-" * 60)
    print("Wrapping lines of text:")
    print(expand("nav>ul>li*>a", {
        "text": ["Home", "About", "https://example.com"],
        "options": {"output.field": plain},
    }))

    print("\n" + "-" * 60)
    print("Bootstrap snippet pack:")
    print(expand("container>row>col*3>card", {
        "snippets": load_snippet_pack("bootstrap"),
        "options": {"output.field": plain},
    }))
