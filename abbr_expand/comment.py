"""
Comments around elements with an id or class (``comment.enabled``).

Templates use uppercase placeholders in square brackets. A placeholder
may carry extra text around the name, ``[#ID]`` or ``[ class=CLASS]``;
that text is only written when the attribute exists:

    \\n<!-- /[#ID][.CLASS] -->    ->    <!-- /#main.box -->
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class TemplatePlaceholder:
    before: str
    after: str
    name: str


@dataclass
class CommentState:
    enabled: bool
    trigger: list
    before: Optional[list] = None
    after: Optional[list] = None


def template(text: str) -> list:
    """Split a comment template into strings and placeholders."""
    tokens = []
    pos = 0
    offset = 0

    while pos < len(text):
        placeholder, end = _consume_placeholder(text, pos)
        if placeholder is not None:
            if offset != pos:
                tokens.append(text[offset:pos])
            tokens.append(placeholder)
            pos = offset = end
        else:
            pos += 1

    if offset != pos:
        tokens.append(text[offset:])
    return tokens


def _consume_placeholder(text: str, pos: int):
    if text[pos] != "[":
        return None, pos

    start = pos = pos + 1
    name_pos = after_pos = start
    stack = 1
    while pos < len(text):
        ch = text[pos]
        if _is_token_start(ch):
            name_pos = pos
            while pos < len(text) and _is_token(text[pos]):
                pos += 1
            after_pos = pos
        else:
            if ch == "[":
                stack += 1
            elif ch == "]":
                stack -= 1
                if stack == 0:
                    placeholder = TemplatePlaceholder(
                        before=text[start:name_pos],
                        after=text[after_pos:pos],
                        name=text[name_pos:after_pos],
                    )
                    return placeholder, pos + 1
            pos += 1

    return None, start - 1


def _is_token_start(ch: str) -> bool:
    return "A" <= ch <= "Z"


def _is_token(ch: str) -> bool:
    return _is_token_start(ch) or "0" <= ch <= "9" or ch in ("_", "-")


def create_comment_state(config) -> CommentState:
    options = config.options
    return CommentState(
        enabled=options["comment.enabled"],
        trigger=options["comment.trigger"],
        before=template(options["comment.before"]) if options["comment.before"] else None,
        after=template(options["comment.after"]) if options["comment.after"] else None,
    )


def comment_node_before(node, state):
    if should_comment(node, state.comment) and state.comment.before:
        _output(node, state.comment.before, state)


def comment_node_after(node, state):
    if should_comment(node, state.comment) and state.comment.after:
        _output(node, state.comment.after, state)


def should_comment(node, comment: CommentState) -> bool:
    if not comment.enabled or not comment.trigger or not node.name or not node.attributes:
        return False
    return any(attr.name and attr.name in comment.trigger for attr in node.attributes)


def _output(node, tokens: list, state):
    attrs = {}
    for attr in node.attributes:
        if attr.name and attr.value:
            attrs[attr.name.upper()] = attr.value

    for token in tokens:
        if isinstance(token, str):
            state.out.push_string(token)
        elif token.name in attrs:
            state.out.push_string(token.before)
            state.push_tokens(attrs[token.name])
            state.out.push_string(token.after)
