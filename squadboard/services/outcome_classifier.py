"""
Outcome classification for free-text match results.

Staff type results by hand ("Victoire 13-7", "défaite", "v", "match nul", ...).
Classification is total: text that matches no vocabulary, including ``None``
and the empty string, is counted as a loss. Dashboards rely on that
pessimistic default for their win rates, so it is not reported as "unknown".
"""

from __future__ import annotations

import re
from typing import Optional, Pattern, Tuple

from ..models import Outcome

# (outcome, substrings, word prefixes, exact code), checked in this order.
# "nul" must start a word ("nul", "nulle", "nuls"); it also occurs inside
# "annulé" / "annulation".
OUTCOME_VOCABULARIES: Tuple[Tuple[Outcome, Tuple[str, ...], Tuple[str, ...], str], ...] = (
    (Outcome.WIN, ("victoire", "win"), (), "v"),
    (Outcome.LOSS, ("défaite", "defaite", "lose", "loss"), (), "d"),
    (Outcome.DRAW, ("égalité", "egalite", "draw"), ("nul",), "n"),
)
DEFAULT_OUTCOME = Outcome.LOSS

_PREFIX_PATTERNS = {
    word: re.compile(rf"\b{re.escape(word)}")
    for _, _, prefixes, _ in OUTCOME_VOCABULARIES
    for word in prefixes
}


def _matches(text: str, substrings: Tuple[str, ...], prefixes: Tuple[str, ...], code: str) -> bool:
    if text == code:
        return True
    if any(keyword in text for keyword in substrings):
        return True
    patterns: Tuple[Pattern[str], ...] = tuple(_PREFIX_PATTERNS[word] for word in prefixes)
    return any(pattern.search(text) for pattern in patterns)


def classify(free_text: Optional[str]) -> Outcome:
    """
    Map a free-text result onto :class:`Outcome`.

    Matching is case-insensitive. Win is tried first, then Loss, then Draw;
    the first vocabulary that matches decides.

    Example:
        >>> classify("Victoire 13-7")
        <Outcome.WIN: 'win'>
        >>> classify("partie annulée")
        <Outcome.LOSS: 'loss'>
    """
    text = (free_text or "").lower()
    for outcome, substrings, prefixes, code in OUTCOME_VOCABULARIES:
        if _matches(text, substrings, prefixes, code):
            return outcome
    return DEFAULT_OUTCOME
