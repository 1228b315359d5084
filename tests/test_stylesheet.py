"""Tests for stylesheet abbreviations: parsing, matching and CSS output."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from abbr_expand import (
    ScanError,
    build_snippet_database,
    expand,
    parse_css,
    parse_stylesheet,
    resolve_config,
    score_match,
)
from abbr_expand.color import color, frac
from abbr_expand.css_parser import FunctionCall
from abbr_expand.css_snippets import default_database
from abbr_expand.css_tokenizer import ColorValue, NumberValue, parse_color
from abbr_expand.scoring import find_best_match, get_unmatched_part


def css(abbr, **config):
    config["type"] = "stylesheet"
    return expand(abbr, config)


def test_parse_properties():
    """`+` separates properties, numbers keep their raw text."""
    props = parse_css("p10+m5")
    assert [p.name for p in props] == ["p", "m"]
    number = props[0].value[0].value[0]
    assert isinstance(number, NumberValue)
    assert number.value == 10 and number.raw_value == "10" and number.unit == ""
    print("✓ test_parse_properties")


def test_parse_function_and_important():
    """Function arguments and a trailing `!` are recognised."""
    prop = parse_css("lg(red, blue)")[0]
    call = prop.value[0].value[0]
    assert isinstance(call, FunctionCall) and call.name == "lg"
    assert len(call.arguments) == 2
    assert parse_css("p10!")[0].important
    print("✓ test_parse_function_and_important")


def test_parse_errors():
    """An unbalanced bracket is a scan error."""
    with pytest.raises(ScanError):
        parse_css("p)")
    print("✓ test_parse_errors")


def test_parse_color():
    """Short hex notation expands to full channels."""
    assert parse_color("abc", "") == (170, 187, 204, 1.0)
    assert parse_color("0", "") == (0, 0, 0, 1.0)
    assert parse_color("t", "") == (0, 0, 0, 0.0)
    assert parse_color("f", ".5")[3] == 0.5
    print("✓ test_parse_color")


def test_color_output():
    """Colours print as short hex, full hex, rgba or transparent."""
    assert color(ColorValue(255, 0, 0, 1.0), True) == "#f00"
    assert color(ColorValue(255, 0, 0, 1.0), False) == "#ff0000"
    assert color(ColorValue(18, 52, 86, 1.0), True) == "#123456"
    assert color(ColorValue(170, 187, 204, 0.5)) == "rgba(170, 187, 204, 0.5)"
    assert color(ColorValue(0, 0, 0, 0.0)) == "transparent"
    assert frac(0.5) == "0.5" and frac(10.0) == "10"
    print("✓ test_color_output")


def test_score_match():
    """Fuzzy scores: exact, partial, acronym and no match."""
    assert score_match("p", "p") == 1
    assert score_match("ab", "abcd") == 0.5
    assert score_match("xa", "abcd") == 0
    assert score_match("", "abcd") == 0
    assert 0 < score_match("bgc", "background-color") < 1
    assert score_match("bdt", "border-top", partial=True) > 0
    assert get_unmatched_part("poas", "position") == "as"
    assert get_unmatched_part("pos", "position") == ""
    print("✓ test_score_match")


def test_score_grows_with_prefix():
    """Longer prefixes of a key never score lower."""
    scores = [score_match("position"[:n], "position") for n in range(1, 9)]
    assert scores == sorted(scores)
    assert scores[-1] == 1
    print("✓ test_score_grows_with_prefix")


def test_find_best_match():
    """The best scoring item wins, min_score filters weak matches."""
    assert find_best_match("bd", ["border", "bd"]) == "bd"
    assert find_best_match("bd", ["background", "border"]) == "border"
    assert find_best_match("zz", ["border"]) is None
    assert find_best_match("b", ["border"], min_score=0.9) is None
    print("✓ test_find_best_match")


def test_property_values():
    """Numbers get default units, keywords and colours are expanded."""
    assert css("bd1-s#f00") == "border: 1px solid #f00;"
    assert css("p10") == "padding: 10px;"
    assert css("m10-20") == "margin: 10px 20px;"
    assert css("m-10") == "margin: -10px;"
    assert css("lh1.5") == "line-height: 1.5;"
    assert css("z10") == "z-index: 10;"
    assert css("w100p") == "width: 100%;"
    print("✓ test_property_values")


def test_inline_keyword():
    """`dib` matches `display` with the `inline-block` keyword."""
    assert css("dib") == "display: inline-block;"
    print("✓ test_inline_keyword")


def test_colors_in_values():
    """Colour shorthand in property values."""
    assert css("c#0") == "color: #000;"
    assert css("c#t") == "color: transparent;"
    assert css("c#abc.5") == "color: rgba(170, 187, 204, 0.5);"
    print("✓ test_colors_in_values")


def test_default_values():
    """Without a value, the snippet default is offered as tab stops."""
    assert css("bgc") == "background-color: #${1:fff};"
    assert css("p") == "padding: ${0};"
    assert css("d") == "display: ${1:block};"
    print("✓ test_default_values")


def test_important_and_siblings():
    """`!` adds !important, `+` puts properties on separate lines."""
    assert css("p10!") == "padding: 10px !important;"
    assert css("p10+m5") == "padding: 10px;\nmargin: 5px;"
    print("✓ test_important_and_siblings")


def test_gradient_and_raw_snippets():
    """`lg` becomes a linear gradient, `@i` is a raw snippet."""
    assert css("lg(red, blue)") == "background-image: linear-gradient(red, blue);"
    assert css("lg") == "background-image: linear-gradient(${0});"
    assert css("@i") == "@import url(${0});"
    print("✓ test_gradient_and_raw_snippets")


def test_syntaxes():
    """Stylus, Sass and CSS-in-JS output."""
    assert css("p10", syntax="stylus") == "padding 10px"
    assert css("p10", syntax="sass") == "padding: 10px"
    json_options = {"stylesheet.json": True}
    assert css("p10", options=json_options) == "padding: 10,"
    assert css("bgc#fff", options=json_options) == "backgroundColor: '#fff',"
    print("✓ test_syntaxes")


def test_contexts():
    """Value scope resolves keywords only, section scope keeps raw snippets."""
    assert css("ib", context={"name": "display"}) == "inline-block"
    assert css("@i+p10", context={"name": "@@section"}) == "@import url(${0});"
    print("✓ test_contexts")


def test_default_database():
    """The built-in database is built once and links shorthands to longhands."""
    db = default_database()
    assert db is default_database()
    border = db.find_property("border")
    assert border is not None
    assert any(dep.property == "border-style" for dep in border.dependencies)
    assert any(s.key == "@i" for s in db.raw())
    print("✓ test_default_database")


def test_custom_database():
    """A prebuilt database is reused without being modified."""
    db = build_snippet_database({"foo": "font-size:12px|14px"})
    assert len(db) == 1
    first = expand("foo", {"type": "stylesheet"}, database=db)
    second = expand("foo", {"type": "stylesheet"}, database=db)
    assert first == second == "font-size: ${1:12px};"
    print("✓ test_custom_database")


def test_min_score_leaves_node_unresolved():
    """A match below stylesheet.fuzzySearchMinScore is rejected quietly."""
    db = build_snippet_database({"padding": "padding"})
    strict = resolve_config({"type": "stylesheet",
                             "options": {"stylesheet.fuzzySearchMinScore": 0.5}})
    node = parse_stylesheet("pdg", strict, db)[0]
    assert node.name == "pdg" and node.snippet is None

    loose = resolve_config({"type": "stylesheet"})
    node = parse_stylesheet("pdg", loose, db)[0]
    assert node.name == "padding" and node.snippet is not None
    print("✓ test_min_score_leaves_node_unresolved")


if __name__ == "__main__":
    test_parse_properties()
    test_parse_function_and_important()
    test_parse_errors()
    test_parse_color()
    test_color_output()
    test_score_match()
    test_score_grows_with_prefix()
    test_find_best_match()
    test_property_values()
    test_inline_keyword()
    test_colors_in_values()
    test_default_values()
    test_important_and_siblings()
    test_gradient_and_raw_snippets()
    test_syntaxes()
    test_contexts()
    test_default_database()
    test_custom_database()
    test_min_score_leaves_node_unresolved()
    print("\n🎉 All tests passed!")
