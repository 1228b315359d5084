"""
Exception types raised while reading abbreviations.

Scanner errors carry the offending character offset and render a small
ruler under the source string, so a caller can show exactly where the
abbreviation went wrong:

    Unexpected character at 2
    a&b
    -^
"""


class ExpandError(Exception):
    """Base class for every error raised by abbr_expand."""


class ScanError(ExpandError):
    """Raised by the character scanner on malformed input."""

    def __init__(self, message: str, pos: int, string: str):
        self.pos = pos
        self.string = string
        self.raw_message = message
        super().__init__(f"{message}\n{string}\n{'-' * pos}^")


class ParseError(ExpandError):
    """Raised by a token-level parser on an unexpected token."""

    def __init__(self, message: str, pos=None):
        self.pos = pos
        super().__init__(message)
