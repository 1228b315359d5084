"""
Character and token scanners shared by the markup and stylesheet readers.

The character scanner works on one-character strings; the empty string
stands for "end of input", so predicates never need a special EOF check.
"""

from .errors import ScanError, ParseError


# ── Character predicates ────────────────────────────────────────────────────

def is_number(ch: str) -> bool:
    return ch != "" and "0" <= ch <= "9"


def is_alpha(ch: str, start: str = "A", end: str = "Z") -> bool:
    """Check if ``ch`` is an ASCII letter within ``start..end``, any case."""
    return ch != "" and ch.isascii() and start <= ch.upper() <= end


def is_alpha_word(ch: str) -> bool:
    return ch == "_" or is_alpha(ch)


def is_alpha_numeric_word(ch: str) -> bool:
    return is_number(ch) or is_alpha_word(ch)


def is_white_space(ch: str) -> bool:
    return ch in (" ", "\t", "\xa0")


def is_space(ch: str) -> bool:
    return is_white_space(ch) or ch in ("\n", "\r")


def is_quote(ch: str) -> bool:
    return ch in ("'", '"')


# ── Character scanner ───────────────────────────────────────────────────────

class Scanner:
    """A streaming reader over ``string[start:end]``."""

    def __init__(self, string: str, start: int = 0, end=None):
        self.string = string
        self.pos = self.start = start
        self.end = len(string) if end is None else end

    def eof(self) -> bool:
        return self.pos >= self.end

    def limit(self, start: int, end: int) -> "Scanner":
        """Create a scanner over the same string, bounded to ``[start, end)``."""
        return Scanner(self.string, start, end)

    def peek(self) -> str:
        """Next character without consuming it, or '' at the end."""
        if self.pos < self.end:
            return self.string[self.pos]
        return ""

    def next(self) -> str:
        if self.pos < self.end:
            ch = self.string[self.pos]
            self.pos += 1
            return ch
        return ""

    def eat(self, match) -> bool:
        """Consume the next character if it equals ``match`` or passes it.

        Args:
            match: A single character, or a predicate taking one.

        Returns:
            True if a character was consumed.
        """
        ch = self.peek()
        ok = match(ch) if callable(match) else (ch != "" and ch == match)
        if ok:
            self.pos += 1
        return ok

    def eat_while(self, match) -> bool:
        """Repeatedly ``eat()``; True if anything was consumed."""
        start = self.pos
        while not self.eof() and self.eat(match):
            pass
        return self.pos != start

    def back_up(self, n: int = 1):
        self.pos -= n

    def current(self) -> str:
        """Text between the start of the current token and the position."""
        return self.substring(self.start, self.pos)

    def substring(self, start: int, end=None) -> str:
        return self.string[start:end]

    def error(self, message: str, pos=None) -> ScanError:
        if pos is None:
            pos = self.pos
        return ScanError(f"{message} at {pos + 1}", pos, self.string)


# ── Token scanner ───────────────────────────────────────────────────────────

class TokenScanner:
    """Cursor over a token list, used by both recursive-descent parsers."""

    def __init__(self, tokens: list):
        self.tokens = tokens
        self.start = 0
        self.pos = 0
        self.size = len(tokens)

    def peek(self):
        if self.pos < self.size:
            return self.tokens[self.pos]
        return None

    def next(self):
        token = self.peek()
        if token is not None:
            self.pos += 1
        return token

    def slice(self, start=None, end=None) -> list:
        start = self.start if start is None else start
        end = self.pos if end is None else end
        return self.tokens[start:end]

    def readable(self) -> bool:
        return self.pos < self.size

    def consume(self, test) -> bool:
        token = self.peek()
        if token is not None and test(token):
            self.pos += 1
            return True
        return False

    def error(self, message: str, token=None) -> ParseError:
        if token is None:
            token = self.peek()
        pos = getattr(token, "start", None)
        if pos is not None:
            message += f" at {pos}"
        return ParseError(message, pos)
