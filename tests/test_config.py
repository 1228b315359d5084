"""Tests for config resolution, snippet packs and the command line."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import io
import json
import tempfile
from contextlib import redirect_stderr, redirect_stdout

import pytest

from abbr_expand import Config, Context, expand, load_snippet_pack, resolve_config
from abbr_expand.__main__ import main


def plain_field(index, placeholder, *rest):
    return placeholder


def run_cli(argv):
    out = io.StringIO()
    err = io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = main(argv)
    return code, out.getvalue(), err.getvalue()


def test_defaults_per_type():
    """Each type gets its default syntax and built-in snippets."""
    markup = resolve_config()
    assert markup.type == "markup" and markup.syntax == "html"
    assert markup.snippets["a"] == "a[href]"
    assert markup.options["output.indent"] == "\t"

    stylesheet = resolve_config({"type": "stylesheet"})
    assert stylesheet.syntax == "css"
    assert "bgc" in stylesheet.snippets and "a" not in stylesheet.snippets
    print("✓ test_defaults_per_type")


def test_syntax_options():
    """Syntax defaults override type defaults."""
    assert resolve_config({"syntax": "jsx"}).options["jsx.enabled"]
    assert resolve_config({"syntax": "xhtml"}).options["output.selfClosingStyle"] == "xhtml"
    stylus = resolve_config({"type": "stylesheet", "syntax": "stylus"})
    assert stylus.options["stylesheet.between"] == " "
    print("✓ test_syntax_options")


def test_merge_order():
    """User values beat global syntax overrides, which beat global type overrides."""
    globals_ = {
        "markup": {"options": {"output.indent": "  ", "output.newline": "\r\n"}},
        "html": {"options": {"output.indent": "    "}},
    }
    config = resolve_config({"options": {"output.newline": "\n"}}, globals_)
    assert config.options["output.indent"] == "    "
    assert config.options["output.newline"] == "\n"
    # Untouched keys keep their defaults
    assert config.options["output.inlineBreak"] == 3
    print("✓ test_merge_order")


def test_snippets_merge():
    """User snippets add to the built-in table without replacing it."""
    config = resolve_config({"snippets": {"hdr": "header"}})
    assert config.snippets["hdr"] == "header"
    assert config.snippets["a"] == "a[href]"
    print("✓ test_snippets_merge")


def test_unknown_type():
    """An unknown type is rejected."""
    with pytest.raises(ValueError):
        resolve_config({"type": "sql"})
    print("✓ test_unknown_type")


def test_context_and_passthrough():
    """Context dicts become Context objects; a Config passes through."""
    config = resolve_config({"context": {"name": "ul", "attributes": {"class": "nav"}}})
    assert config.context == Context("ul", {"class": "nav"})
    assert resolve_config(config) is config
    assert isinstance(config, Config)
    print("✓ test_context_and_passthrough")


def test_context_implicit_tag():
    """The context element names the top-level implicit tag."""
    result = expand(".item", {
        "context": {"name": "ul"},
        "options": {"output.field": plain_field},
    })
    assert result == '<li class="item"></li>', result
    print("✓ test_context_implicit_tag")


def test_output_options():
    """Indent, attribute quotes and tag case are configurable."""
    result = expand("div>p", {"options": {
        "output.indent": "  ",
        "output.attributeQuotes": "single",
        "output.tagCase": "upper",
        "output.field": plain_field,
    }})
    assert result == "<DIV>\n  <P></P>\n</DIV>", result
    result = expand("p.a", {"options": {"output.attributeQuotes": "single",
                                        "output.field": plain_field}})
    assert result == "<p class='a'></p>", result
    print("✓ test_output_options")


def test_load_bundled_pack():
    """Bundled packs load by name, with aliases split out."""
    pack = load_snippet_pack("bootstrap")
    assert pack["btn"] == pack["button"]
    assert pack["container"] == "div.container"

    utilities = load_snippet_pack("utilities")
    assert "fxc" in utilities
    assert "_comment" not in utilities
    print("✓ test_load_bundled_pack")


def test_bundled_packs_ship_with_package():
    """Bundled packs sit inside the installed package directory."""
    import abbr_expand
    pack_dir = os.path.join(os.path.dirname(abbr_expand.__file__), "snippet_packs")
    assert os.path.isfile(os.path.join(pack_dir, "bootstrap.json"))
    assert load_snippet_pack("bootstrap") == load_snippet_pack("bootstrap", search_dirs=[pack_dir])
    print("✓ test_bundled_packs_ship_with_package")


def test_load_pack_from_path():
    """A pack can be loaded from a file path or a custom search dir."""
    with tempfile.TemporaryDirectory() as d:
        path = os.path.join(d, "mine.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"hx|hdr": "header.x"}, f)
        assert load_snippet_pack(path) == {"hx": "header.x", "hdr": "header.x"}
        assert load_snippet_pack("mine", search_dirs=[d])["hx"] == "header.x"
    print("✓ test_load_pack_from_path")


def test_missing_pack():
    """A pack name that can't be found raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_snippet_pack("no-such-pack")
    print("✓ test_missing_pack")


def test_pack_expansion():
    """Pack snippets expand like built-in ones."""
    markup = expand("card", {
        "snippets": load_snippet_pack("bootstrap"),
        "options": {"output.field": plain_field},
    })
    assert markup == (
        '<div class="card">\n'
        '\t<div class="card-body">\n'
        '\t\t<h5 class="card-title"></h5>\n'
        '\t\t<p class="card-text"></p>\n'
        '\t</div>\n'
        '</div>'
    ), markup

    button = expand("btn", {
        "snippets": load_snippet_pack("bootstrap"),
        "options": {"output.field": plain_field},
    })
    assert button == '<button class="btn btn-primary" type="button"></button>', button

    stylesheet = expand("fxc", {"type": "stylesheet", "snippets": load_snippet_pack("utilities")})
    assert stylesheet == "flex-direction: column;", stylesheet
    print("✓ test_pack_expansion")


def test_cli_markup():
    """The command line prints the expansion."""
    code, out, _ = run_cli(["ul>li*2", "--plain"])
    assert code == 0
    assert out == "<ul>\n\t<li></li>\n\t<li></li>\n</ul>\n"
    print("✓ test_cli_markup")


def test_cli_stylesheet_and_packs():
    """Stylesheet type and snippet packs from the command line."""
    code, out, _ = run_cli(["p10", "-t", "stylesheet", "-s", "stylus"])
    assert code == 0 and out == "padding 10px\n"
    code, out, _ = run_cli(["container", "--snippets", "bootstrap", "--plain"])
    assert code == 0 and out == '<div class="container"></div>\n'
    print("✓ test_cli_stylesheet_and_packs")


def test_cli_wrap_text():
    """--text lines feed implicit repeats."""
    code, out, _ = run_cli(["li*", "--text", "one\ntwo"])
    assert code == 0 and out == "<li>one</li>\n<li>two</li>\n"
    print("✓ test_cli_wrap_text")


def test_cli_errors():
    """Malformed abbreviations and missing packs exit with status 1."""
    code, out, err = run_cli(["a&b"])
    assert code == 1 and out == ""
    assert "Unexpected character" in err
    code, _, err = run_cli(["a", "--snippets", "no-such-pack"])
    assert code == 1 and "no-such-pack" in err
    print("✓ test_cli_errors")


if __name__ == "__main__":
    test_defaults_per_type()
    test_syntax_options()
    test_merge_order()
    test_snippets_merge()
    test_unknown_type()
    test_context_and_passthrough()
    test_context_implicit_tag()
    test_output_options()
    test_load_bundled_pack()
    test_bundled_packs_ship_with_package()
    test_load_pack_from_path()
    test_missing_pack()
    test_pack_expansion()
    test_cli_markup()
    test_cli_stylesheet_and_packs()
    test_cli_wrap_text()
    test_cli_errors()
    print("\n🎉 All tests passed!")
