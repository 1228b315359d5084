"""Tests for markup expansion: HTML output, transforms and indent syntaxes."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from abbr_expand import ParseError, expand, parse_abbreviation, resolve_config
from abbr_expand.bem import BemState, bem
from abbr_expand.snippets import _SnippetResolver
from abbr_expand.transforms import walk


def plain_field(index, placeholder, *rest):
    return placeholder


def expand_plain(abbr, config=None):
    """Expand with tab stops reduced to their placeholder text."""
    config = dict(config or {})
    options = dict(config.get("options") or {})
    options["output.field"] = plain_field
    config["options"] = options
    return expand(abbr, config)


def test_repeat_with_numbering():
    """Repeated elements get numbered classes and their own tab stops."""
    result = expand("ul>li.item$*3")
    assert result == (
        '<ul>\n'
        '\t<li class="item1">${1}</li>\n'
        '\t<li class="item2">${2}</li>\n'
        '\t<li class="item3">${3}</li>\n'
        '</ul>'
    ), result
    print("✓ test_repeat_with_numbering")


def test_snippet_fields():
    """Built-in snippets add empty attributes as tab stops."""
    assert expand("a") == '<a href="${1}">${2}</a>'
    assert expand("img") == '<img src="${1}" alt="${2}">'
    print("✓ test_snippet_fields")


def test_inline_siblings():
    """Inline children stay on the parent's line."""
    assert expand("p>a+span") == '<p><a href="${1}">${2}</a><span>${3}</span></p>'
    print("✓ test_inline_siblings")


def test_block_children_are_indented():
    """Block children go on their own indented lines."""
    result = expand_plain("div>p+p")
    assert result == "<div>\n\t<p></p>\n\t<p></p>\n</div>", result
    print("✓ test_block_children_are_indented")


def test_climb_and_group():
    """`^` climbs one level up, groups repeat as a whole."""
    assert expand_plain("div>p^span") == "<div>\n\t<p></p>\n</div>\n<span></span>"
    result = expand_plain("(dt+dd)*2")
    assert result == "<dt></dt>\n<dd></dd>\n<dt></dt>\n<dd></dd>", result
    print("✓ test_climb_and_group")


def test_numbering_modifiers():
    """`$` padding, `@-` reverse, `@N` base and `@^` parent counters."""
    assert expand_plain("li.i$$@3*2") == '<li class="i03"></li>\n<li class="i04"></li>'
    assert expand_plain("li.i$@-*3") == (
        '<li class="i3"></li>\n<li class="i2"></li>\n<li class="i1"></li>'
    )
    result = expand_plain("div*2>p.c$@^*3")
    for n in range(1, 7):
        assert f'class="c{n}"' in result, result
    print("✓ test_numbering_modifiers")


def test_implicit_tags():
    """Unnamed elements take their name from the parent."""
    assert expand_plain("ul>.item") == '<ul>\n\t<li class="item"></li>\n</ul>'
    assert expand_plain("p>.x") == '<p><span class="x"></span></p>'
    result = expand_plain("table>.row>.cell")
    assert '<tr class="row">' in result and '<td class="cell">' in result, result
    print("✓ test_implicit_tags")


def test_text_and_attributes():
    """Quoted, unquoted and boolean attributes plus text content."""
    assert expand_plain('p[title="Hello world"]{Hi}') == '<p title="Hello world">Hi</p>'
    assert expand_plain("div#main.a.b") == '<div id="main" class="a b"></div>'
    assert expand_plain("input[disabled]") == '<input type="text" disabled="disabled">'
    compact = expand_plain("input[disabled]", {"options": {"output.compactBoolean": True}})
    assert compact == '<input type="text" disabled>', compact
    print("✓ test_text_and_attributes")


def test_variables():
    """`${name}` references resolve from config variables."""
    assert expand_plain("html[lang=${lang}]") == '<html lang="en"></html>'
    result = expand_plain("p{${charset}}", {"variables": {"charset": "utf-8"}})
    assert result == "<p>utf-8</p>", result
    print("✓ test_variables")


def test_wrap_with_text():
    """Wrapped text goes into the deepest node, or feeds implicit repeats."""
    assert expand("ul>li*", {"text": ["one", "two"]}) == (
        "<ul>\n\t<li>one</li>\n\t<li>two</li>\n</ul>"
    )
    result = expand_plain("div>p", {"text": "Hello"})
    assert result == "<div>\n\t<p>Hello</p>\n</div>", result
    result = expand_plain("ul>li[title=$#]*", {"text": ["a", "b"]})
    assert result == '<ul>\n\t<li title="a"></li>\n\t<li title="b"></li>\n</ul>', result
    print("✓ test_wrap_with_text")


def test_wrap_url_in_link():
    """A wrapped URL also becomes the link target."""
    result = expand("a", {"text": "https://example.com"})
    assert result == '<a href="https://example.com">https://example.com</a>', result
    result = expand("a", {"text": "hello@example.com"})
    assert 'href="mailto:hello@example.com"' in result, result
    print("✓ test_wrap_url_in_link")


def test_max_repeat():
    """`max_repeat` caps the number of repeated copies."""
    result = expand("li*10", {"max_repeat": 3})
    assert result == "<li>${1}</li>\n<li>${2}</li>\n<li>${3}</li>", result
    print("✓ test_max_repeat")


def test_lorem():
    """Lorem nodes produce an exact number of dummy words."""
    assert expand("p>lorem5") == "<p>Lorem ipsum dolor sit amet.</p>"
    result = expand_plain("ul>lorem4*3")
    lines = result.split("\n")
    assert lines[0] == "<ul>" and lines[-1] == "</ul>"
    items = lines[1:-1]
    assert len(items) == 3
    for line in items:
        text = line.strip()[len("<li>"):-len("</li>")]
        assert len(text.split(" ")) == 4, line
    print("✓ test_lorem")


def test_comment_node():
    """The `c` snippet wraps its children in a comment."""
    assert expand("c>p") == "<!-- <p>${1}</p> -->"
    print("✓ test_comment_node")


def test_comment_after_element():
    """comment.enabled adds a closing comment after elements with id/class."""
    result = expand("div#a.b", {"options": {"comment.enabled": True}})
    assert result == '<div id="a" class="b">${1}</div>\n<!-- /#a.b -->', result
    print("✓ test_comment_after_element")


def test_bem():
    """BEM element classes pick up the block name from the parent."""
    result = expand(".b>.-e", {"options": {"bem.enabled": True}})
    assert result == '<div class="b">\n\t<div class="b__e">${1}</div>\n</div>', result
    result = expand_plain(".b._m", {"options": {"bem.enabled": True}})
    assert result == '<div class="b b_m"></div>', result
    print("✓ test_bem")


def test_jsx():
    """JSX renames class/for and keeps expression values unquoted."""
    assert expand("div.{cls}", {"syntax": "jsx"}) == "<div className={cls}>${1}</div>"
    result = expand("label.a[for=b]", {"syntax": "jsx"})
    assert result == '<label htmlFor="b" className="a">${1}</label>', result
    print("✓ test_jsx")


def test_self_closing_styles():
    """Self-closing tags follow output.selfClosingStyle."""
    assert expand("br") == "<br>"
    assert expand("br", {"syntax": "xhtml"}) == "<br />"
    assert expand("br", {"syntax": "xml"}) == "<br/>"
    print("✓ test_self_closing_styles")


def test_xsl():
    """XSL drops `select` from variables that have children."""
    result = expand("vare>p", {"syntax": "xsl"})
    assert result == '<xsl:variable name="${1}">\n\t<p>${2}</p>\n</xsl:variable>', result
    print("✓ test_xsl")


def test_indent_syntaxes():
    """HAML, Pug and Slim stringifiers."""
    assert expand("div#main.box>p{Hi}", {"syntax": "haml"}) == "#main.box\n\t%p Hi"
    assert expand("input[type=text]", {"syntax": "pug"}) == 'input(type="text")'
    assert expand("a[href=x]{t}", {"syntax": "slim"}) == 'a href="x" t'
    print("✓ test_indent_syntaxes")


def test_nested_lists():
    """Nested block elements indent one level per depth."""
    result = expand("div>ul>li*2")
    assert result == (
        "<div>\n"
        "\t<ul>\n"
        "\t\t<li>${1}</li>\n"
        "\t\t<li>${2}</li>\n"
        "\t</ul>\n"
        "</div>"
    ), result
    print("✓ test_nested_lists")


def test_bem_is_idempotent():
    """Running the BEM transform again on its own output gives the same classes."""
    config = resolve_config({"options": {"bem.enabled": True}})
    abbr = parse_abbreviation(".b>.-e_m")
    walk(abbr, bem, config, BemState())
    first = [abbr.children[0].attributes[0].value, abbr.children[0].children[0].attributes[0].value]
    walk(abbr, bem, config, BemState())
    second = [abbr.children[0].attributes[0].value, abbr.children[0].children[0].attributes[0].value]
    assert first == second == [["b"], ["b__e b__e_m"]]

    result = expand_plain(".b__e_m", {"options": {"bem.enabled": True}})
    assert result == '<div class="b__e b__e_m"></div>', result
    print("✓ test_bem_is_idempotent")


def test_circular_snippets():
    """Snippets that refer to each other stop at the repeated snippet."""
    result = expand_plain("x", {"snippets": {"x": "y>z", "y": "x[a]"}})
    assert result == '<x a="">\n\t<z></z>\n</x>', result
    print("✓ test_circular_snippets")


def test_snippet_stack_unwinds_on_error():
    """A broken nested snippet leaves the resolver ready for the next abbreviation."""
    config = resolve_config({"snippets": {"outer": "section>bad", "bad": "x)"}})
    resolver = _SnippetResolver(config)
    with pytest.raises(ParseError):
        resolver.walk(parse_abbreviation("outer"))
    assert resolver.stack == []
    print("✓ test_snippet_stack_unwinds_on_error")


def test_reverse_attributes():
    """output.reverseAttributes puts the caller's attributes first."""
    snippets = {"btn": "button[type=button]"}
    result = expand_plain("btn[title=t]", {"snippets": snippets})
    assert result == '<button type="button" title="t"></button>', result
    result = expand_plain("btn[title=t]", {
        "snippets": snippets,
        "options": {"output.reverseAttributes": True},
    })
    assert result == '<button title="t" type="button"></button>', result
    print("✓ test_reverse_attributes")


def test_user_snippets():
    """User snippets are merged over the built-in ones."""
    result = expand_plain("hdr", {"snippets": {"hdr": "header.site>h1"}})
    assert result == '<header class="site">\n\t<h1></h1>\n</header>', result
    print("✓ test_user_snippets")


if __name__ == "__main__":
    test_repeat_with_numbering()
    test_snippet_fields()
    test_inline_siblings()
    test_block_children_are_indented()
    test_climb_and_group()
    test_numbering_modifiers()
    test_implicit_tags()
    test_text_and_attributes()
    test_variables()
    test_wrap_with_text()
    test_wrap_url_in_link()
    test_max_repeat()
    test_lorem()
    test_comment_node()
    test_comment_after_element()
    test_bem()
    test_jsx()
    test_self_closing_styles()
    test_xsl()
    test_indent_syntaxes()
    test_nested_lists()
    test_bem_is_idempotent()
    test_circular_snippets()
    test_snippet_stack_unwinds_on_error()
    test_reverse_attributes()
    test_user_snippets()
    print("\n🎉 All tests passed!")
