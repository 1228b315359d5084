"""Tests for the markup tokenizer, parser and tree unroller."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from abbr_expand import ParseError, ScanError, parse_abbreviation
from abbr_expand.fields import Field
from abbr_expand.parser import parse
from abbr_expand.tokenizer import (
    Bracket,
    Literal,
    Operator,
    Repeater,
    RepeaterNumber,
    tokenize,
)


def names(nodes):
    return [node.name for node in nodes]


def test_tokenize_basic():
    """Operators, numbering and repeaters come out as separate tokens."""
    tokens = tokenize("ul>li.item$*3")
    kinds = [type(t) for t in tokens]
    assert kinds == [Literal, Operator, Literal, Operator, Literal, RepeaterNumber, Repeater]
    assert tokens[1].operator == "child"
    assert tokens[3].operator == "class"
    assert tokens[6].count == 3 and not tokens[6].implicit
    assert tokens[0].start == 0 and tokens[0].end == 2
    print("✓ test_tokenize_basic")


def test_tokenize_context():
    """Inside text, operators and `*` are plain characters."""
    tokens = tokenize("a{b.c*2}")
    assert isinstance(tokens[1], Bracket) and tokens[1].context == "expression"
    assert tokens[2] == Literal("b.c*2", 2, 7)
    implicit = tokenize("p*")[-1]
    assert isinstance(implicit, Repeater) and implicit.implicit
    print("✓ test_tokenize_context")


def test_tokenize_fields():
    """Fields are read inside attributes and text only."""
    tokens = tokenize("a[href=${1:url}]")
    fields = [t for t in tokens if isinstance(t, Field)]
    assert len(fields) == 1
    assert fields[0].index == 1 and fields[0].name == "url"
    print("✓ test_tokenize_fields")


def test_tokenize_repeater_number():
    """`$` runs carry padding, direction, base and parent offset."""
    number = tokenize("li$$@^-5")[1]
    assert isinstance(number, RepeaterNumber)
    assert (number.size, number.parent, number.reverse, number.base) == (2, 1, True, 5)
    print("✓ test_tokenize_repeater_number")


def test_scan_errors():
    """Bad characters and unclosed fields raise ScanError with a position."""
    with pytest.raises(ScanError) as exc:
        tokenize("a&b")
    assert "Unexpected character at 2" in str(exc.value)
    assert exc.value.pos == 1

    with pytest.raises(ScanError) as exc:
        tokenize("a[title=${1:abc]")
    assert "Expecting }" in str(exc.value)
    print("✓ test_scan_errors")


def test_parse_operators():
    """`>` nests, `+` adds siblings, `^` climbs back up."""
    root = parse(tokenize("a>b+c^d"))
    assert len(root.elements) == 2
    first = root.elements[0]
    assert [e.name[0].value for e in first.elements] == ["b", "c"]
    assert root.elements[1].name[0].value == "d"
    print("✓ test_parse_operators")


def test_climb_past_root():
    """Climbing above the root is a no-op."""
    root = parse(tokenize("p^^^div"))
    assert [e.name[0].value for e in root.elements] == ["p", "div"]
    assert names(parse_abbreviation("p^^^div").children) == ["p", "div"]
    print("✓ test_climb_past_root")


def test_parse_errors():
    """Stray closing brackets and unclosed quotes raise ParseError."""
    with pytest.raises(ParseError):
        parse(tokenize("a)"))
    with pytest.raises(ParseError):
        parse(tokenize('a[title="x]'))
    print("✓ test_parse_errors")


def test_unroll_repeats():
    """Repeats become copies that know their position."""
    abbr = parse_abbreviation("ul>li*3")
    items = abbr.children[0].children
    assert names(items) == ["li", "li", "li"]
    assert [item.repeat.value for item in items] == [0, 1, 2]
    assert all(item.repeat.count == 3 for item in items)
    print("✓ test_unroll_repeats")


def test_unroll_group():
    """Group repeats copy every member of the group."""
    abbr = parse_abbreviation("(a+b>c)*2")
    assert names(abbr.children) == ["a", "b", "a", "b"]
    assert names(abbr.children[1].children) == ["c"]
    print("✓ test_unroll_group")


def test_attributes():
    """Attribute flags, quoting and the default attribute."""
    node = parse_abbreviation('a[!href disabled. title="Hi there" "val"]').children[0]
    href, disabled, title, default = node.attributes
    assert href.name == "href" and href.implied and href.value is None
    assert disabled.name == "disabled" and disabled.boolean
    assert title.value == ["Hi there"] and title.value_type == "double_quote"
    assert default.name is None and default.value == ["val"]
    print("✓ test_attributes")


def test_short_attributes():
    """`#id` and `.class` shorthand become id and class attributes."""
    node = parse_abbreviation("div#main.a.b").children[0]
    assert [(a.name, a.value) for a in node.attributes] == [
        ("id", ["main"]), ("class", ["a"]), ("class", ["b"]),
    ]
    print("✓ test_short_attributes")


def test_self_closing_and_text():
    """`/` marks a self-closing element, `{}` sets its text."""
    abbr = parse_abbreviation("br/+p{Hello}")
    assert abbr.children[0].self_closing
    assert abbr.children[1].value == ["Hello"]
    print("✓ test_self_closing_and_text")


def test_text_fields_kept():
    """Tab stops in text stay Field objects, variables are resolved."""
    node = parse_abbreviation("p{${1:hi} ${name}}", variables={"name": "Bob"}).children[0]
    assert node.value == [Field(1, "hi", 2, 9), " Bob"]
    print("✓ test_text_fields_kept")


def test_jsx_component_names():
    """With JSX, dotted capitalized names are component names."""
    assert parse_abbreviation("Foo.Bar", jsx=True).children[0].name == "Foo.Bar"
    node = parse_abbreviation("Foo.Bar").children[0]
    assert node.name == "Foo" and node.attributes[0].value == ["Bar"]
    print("✓ test_jsx_component_names")


def test_text_wrapping_placeholder():
    """`$#` takes one line of the wrapped text per implicit repeat."""
    abbr = parse_abbreviation("li{$#}*", text=["x", "", "y"])
    assert [node.value for node in abbr.children] == [["x"], ["y"]]
    print("✓ test_text_wrapping_placeholder")


def test_max_repeat():
    """The repeat guard stops unrolling once the limit is reached."""
    abbr = parse_abbreviation("ul>li*5", max_repeat=2)
    assert len(abbr.children[0].children) == 2
    print("✓ test_max_repeat")


if __name__ == "__main__":
    test_tokenize_basic()
    test_tokenize_context()
    test_tokenize_fields()
    test_tokenize_repeater_number()
    test_scan_errors()
    test_parse_operators()
    test_climb_past_root()
    test_parse_errors()
    test_unroll_repeats()
    test_unroll_group()
    test_attributes()
    test_short_attributes()
    test_self_closing_and_text()
    test_text_fields_kept()
    test_jsx_component_names()
    test_text_wrapping_placeholder()
    test_max_repeat()
    print("\n🎉 All tests passed!")
