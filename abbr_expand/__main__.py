"""Command line: ``python -m abbr_expand "ul>li*3"``."""

import argparse
import logging
import sys

from . import expand, load_snippet_pack
from .errors import ExpandError


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="abbr_expand", description="Expand an abbreviation")
    parser.add_argument("abbreviation", help="Abbreviation to expand, e.g. 'ul>li*3'")
    parser.add_argument("--type", "-t", choices=["markup", "stylesheet"], default="markup",
                        help="Abbreviation type")
    parser.add_argument("--syntax", "-s", help="Output syntax (html, pug, css, sass...)")
    parser.add_argument("--text", help="Text to wrap; each line feeds one implicit repeat")
    parser.add_argument("--snippets", action="append", default=[],
                        help="Snippet pack name or JSON path (repeatable)")
    parser.add_argument("--plain", action="store_true", help="Drop tab stops from the output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    config = {"type": args.type}
    if args.syntax:
        config["syntax"] = args.syntax
    if args.text is not None:
        lines = args.text.splitlines()
        config["text"] = lines if len(lines) > 1 else args.text

    if args.plain:
        config["options"] = {"output.field": lambda index, placeholder, *rest: placeholder}

    try:
        snippets = {}
        for pack in args.snippets:
            snippets.update(load_snippet_pack(pack))
        if snippets:
            config["snippets"] = snippets
        print(expand(args.abbreviation, config))
    except (ExpandError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
