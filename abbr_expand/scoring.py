"""
Fuzzy matching of stylesheet abbreviations against snippet keys.

``score_match("bd", "border")`` is non-zero because both strings start with
``b`` and ``d`` occurs later in ``border``. Characters matched near the
start of the key score higher, and a character matched right after a ``-``
scores as if it were at its own position in the abbreviation, which favours
acronyms: ``bgc`` matches ``background-color`` well.
"""

from typing import Optional


def score_match(str1: str, str2: str, partial: bool = False) -> float:
    """Score how well ``str1`` fuzzy-matches ``str2``.

    Args:
        str1: Abbreviation.
        str2: Candidate key.
        partial: Allow ``str1`` to be longer than ``str2`` and stop at the
            first character that can't be matched instead of failing.

    Returns:
        1 for an exact match, 0 for no match, something in between otherwise.
    """
    str1 = str1.lower()
    str2 = str2.lower()
    if not str1 or not str2:
        return 0
    if str1 == str2:
        return 1
    if str1[0] != str2[0]:
        return 0

    len1 = len(str1)
    len2 = len(str2)
    if not partial and len1 > len2:
        return 0

    min_length = min(len1, len2)
    max_length = max(len1, len2)
    i = 1
    j = 1
    score = max_length

    while i < len1:
        ch1 = str1[i]
        found = False
        acronym = False
        while j < len2:
            ch2 = str2[j]
            if ch1 == ch2:
                found = True
                score += max_length - (i if acronym else j)
                break
            # Bonus for the match right after an unmatched `-`
            acronym = ch2 == "-"
            j += 1

        if not found:
            if not partial:
                return 0
            break
        i += 1

    match_ratio = i / max_length
    delta = max_length - min_length
    max_score = _sum(max_length) - _sum(delta)
    return (score * match_ratio) / max_score


def _sum(n: int) -> float:
    return n * (n + 1) / 2


def find_best_match(abbr: str, items, min_score: float = 0, partial: bool = False):
    """Best-scoring item for ``abbr``; later items win ties.

    ``items`` holds strings or objects with a ``key`` attribute.
    """
    matched = None
    max_score = 0
    for item in items:
        score = score_match(abbr, item if isinstance(item, str) else item.key, partial)
        if score == 1:
            return item
        if score and score >= max_score:
            max_score = score
            matched = item
    return matched if max_score >= min_score else None


def get_unmatched_part(abbr: str, key: str) -> str:
    """Tail of ``abbr`` whose characters can't be found in order in ``key``.

    Matching ``poas`` against ``position`` leaves ``as``.
    """
    last_pos = 0
    for i, ch in enumerate(abbr):
        last_pos = key.find(ch, last_pos)
        if last_pos == -1:
            return abbr[i:]
        last_pos += 1
    return ""
