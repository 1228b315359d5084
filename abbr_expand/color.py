"""Colour and number rendering for stylesheet output."""

import re

_TRAILING_ZEROS_RE = re.compile(r"\.?0+$")


def color(token, short_hex: bool = False) -> str:
    if not token.r and not token.g and not token.b and not token.a:
        return "transparent"
    if token.a == 1:
        return as_hex(token, short_hex)
    return as_rgb(token)


def as_hex(token, short: bool = False) -> str:
    """``#rrggbb``, or ``#rgb`` when ``short`` and every channel allows it."""
    channels = (token.r, token.g, token.b)
    if short and all(c % 17 == 0 for c in channels):
        return "#" + "".join(format(c >> 4, "x") for c in channels)
    return "#" + "".join(format(c, "02x") for c in channels)


def as_rgb(token) -> str:
    values = [str(token.r), str(token.g), str(token.b)]
    if token.a != 1:
        values.append(frac(token.a, 8))
    name = "rgb" if len(values) == 3 else "rgba"
    return f"{name}({', '.join(values)})"


def frac(num: float, digits: int = 4) -> str:
    """Fixed-point ``num`` with trailing zeros stripped: 0.5000 -> 0.5, 10.0 -> 10."""
    return _TRAILING_ZEROS_RE.sub("", f"{num:.{digits}f}")


def js_number(num: float) -> str:
    """Shortest plain rendering of a number: 10.0 -> 10, 1.5 -> 1.5."""
    if float(num).is_integer():
        return str(int(num))
    return repr(float(num))
