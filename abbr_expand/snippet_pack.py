"""
Snippet packs.

Snippet packs are JSON files that add or override abbreviations, for a
CSS framework or a project's own components. They load into a plain dict
that goes straight into ``config["snippets"]``.

Format:
    {"btn|button": "button.btn.btn-primary", "card": "div.card>div.card-body"}

Keys may list ``|``-separated aliases, like the built-in tables. Markup
values are abbreviations themselves; stylesheet values are either
``property:value|value`` definitions or raw text.
"""

import json
import logging
import os

from .config import parse_snippets

logger = logging.getLogger(__name__)


def load_snippet_pack(pack_path_or_name: str, search_dirs=None) -> dict:
    """Load a snippet pack from a JSON file.

    Args:
        pack_path_or_name: Either a full file path, or a pack name to search for.
        search_dirs: Optional list of directories to search (when using a name).
                     Defaults to the snippet_packs/ directory inside the package.

    Returns:
        dict of snippet name to expansion, aliases split out.

    Raises:
        FileNotFoundError: If no pack of that name exists.
    """
    if os.path.isfile(pack_path_or_name):
        pack_file = pack_path_or_name
    else:
        if search_dirs is None:
            search_dirs = [
                os.path.join(os.path.dirname(os.path.abspath(__file__)), "snippet_packs"),
            ]
        pack_file = None
        for d in search_dirs:
            candidate = os.path.join(d, f"{pack_path_or_name}.json")
            if os.path.isfile(candidate):
                pack_file = candidate
                break
        if not pack_file:
            raise FileNotFoundError(
                f"Snippet pack '{pack_path_or_name}' not found in {search_dirs}"
            )

    with open(pack_file, "r", encoding="utf-8") as f:
        entries = json.load(f)

    table = {}
    for key, value in entries.items():
        if key and isinstance(value, str):
            table[key] = value

    snippets = parse_snippets(table)
    logger.debug("Loaded %d snippets from %s", len(snippets), pack_file)
    return snippets
