"""
Similarity scorers - lexical string similarity in [0, 1]

Every scorer satisfies the same contract:
- similarity(x, x) == 1 for any non-empty x
- similarity(a, b) == similarity(b, a)
- lower character-sequence overlap gives a lower score
- pure, no side effects

Available scorers:
- dice:  Sørensen-Dice coefficient over character bigrams (case-insensitive)
- ratio: rapidfuzz normalized Indel similarity

Usage:
    scorer = get_scorer("dice")
    scorer("apple", "apples")   # 0.888...
"""
from collections import Counter
from typing import Callable, Dict

from rapidfuzz import fuzz

Scorer = Callable[[str, str], float]

BIGRAM = 2


def _bigrams(text: str) -> Counter:
    return Counter(text[i:i + BIGRAM] for i in range(len(text) - BIGRAM + 1))


def dice_coefficient(a: str, b: str) -> float:
    """
    Sørensen-Dice coefficient over overlapping character bigrams.

    Comparison is case-insensitive and bigrams are counted as a multiset, so
    "aaaa" vs "aa" shares one "aa" pair per occurrence, not unlimited ones.
    Strings shorter than a bigram score 0 against anything but themselves.
    """
    a = a.lower()
    b = b.lower()
    if a == b:
        return 1.0
    if len(a) < BIGRAM or len(b) < BIGRAM:
        return 0.0

    shared = sum((_bigrams(a) & _bigrams(b)).values())
    return (2.0 * shared) / (len(a) + len(b) - 2 * (BIGRAM - 1))


def indel_ratio(a: str, b: str) -> float:
    """Normalized Indel similarity (rapidfuzz ratio scaled to [0, 1])"""
    return fuzz.ratio(a, b) / 100.0


SCORERS: Dict[str, Scorer] = {
    'dice': dice_coefficient,
    'ratio': indel_ratio,
}


def get_scorer(name: str) -> Scorer:
    """
    Look up a scorer by name.

    Raises:
        ValueError: If the name is not registered
    """
    try:
        return SCORERS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown similarity scorer: {name}. "
                         f"Must be one of: {sorted(SCORERS)}") from None
