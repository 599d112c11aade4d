"""
Fragmentation engine - how far apart is a group's view of reality?

Turns a list of free-text entries into a FragmentationResult:

    fragmentation = 1 - mean(similarity(e_i, e_j) for all i < j)

plus the consensus text (most frequent exact entry, first-seen wins ties)
and the first three entries as representative samples.

Everything here is pure: no I/O, no logging, no state between calls.
Callers decide what to log and how to present the score.

Valid entries:
- must be str
- must be non-empty after strip()
- the stripped text is what gets compared, counted and sampled
"""
import math
from typing import Any, Iterable, List, Sequence

from models.domain.fragmentation import AggregationMode, FragmentationResult
from services.similarity import Scorer, dice_coefficient

MAX_SAMPLES = 3


class ComputationError(Exception):
    """
    The scorer could not evaluate a pair, so no score can be produced.

    first_index and second_index are positions in the filtered list of valid
    (stripped, non-blank) entries, not in the caller's raw input.
    """

    def __init__(self, first_index: int, second_index: int, reason: str):
        self.first_index = first_index
        self.second_index = second_index
        self.reason = reason
        super().__init__(
            f"Similarity failed for entries {first_index} and {second_index}: {reason}"
        )


def valid_entries(entries: Iterable[Any]) -> List[str]:
    """Keep non-blank strings (stripped), in input order."""
    return [e.strip() for e in entries if isinstance(e, str) and e.strip()]


def extract_consensus(entries: Sequence[str]) -> str:
    """
    Most frequent exact string; ties go to the one seen first.

    Case-sensitive, no normalization beyond what the caller already did.
    """
    counts = {}
    for entry in entries:
        counts[entry] = counts.get(entry, 0) + 1

    consensus = ''
    best = 0
    # dicts keep insertion order, so strict > keeps the first-seen winner
    for entry, count in counts.items():
        if count > best:
            best = count
            consensus = entry
    return consensus


def _score_pair(scorer: Scorer, entries: Sequence[str], i: int, j: int) -> float:
    try:
        score = scorer(entries[i], entries[j])
    except Exception as e:
        raise ComputationError(i, j, f"{type(e).__name__}: {e}") from e

    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise ComputationError(i, j, f"scorer returned {type(score).__name__}")
    if math.isnan(score) or score < 0.0 or score > 1.0:
        raise ComputationError(i, j, f"scorer returned {score} outside [0, 1]")
    return float(score)


def _degenerate(entries: Sequence[str], mode: AggregationMode) -> FragmentationResult:
    # A lone opinion cannot be fragmented
    return FragmentationResult(
        fragmentation=0.0,
        consensus_text=entries[0] if entries else '',
        fragmented_samples=tuple(entries[:1]),
        sample_count=len(entries),
        pair_count=0,
        aggregation=mode,
    )


def _finish(entries: Sequence[str], scores: List[float],
            mode: AggregationMode) -> FragmentationResult:
    # fsum is correctly rounded, so the mean does not depend on pair order
    pairs = len(scores)
    average = math.fsum(scores) / pairs
    fragmentation = min(1.0, max(0.0, 1.0 - average))
    return FragmentationResult(
        fragmentation=fragmentation,
        consensus_text=extract_consensus(entries),
        fragmented_samples=tuple(entries[:MAX_SAMPLES]),
        sample_count=len(entries),
        pair_count=pairs,
        aggregation=mode,
    )


def compute_fragmentation(entries: Iterable[Any],
                          scorer: Scorer = dice_coefficient) -> FragmentationResult:
    """
    Full pairwise fragmentation of a group's entries.

    Every unordered pair of valid entries is scored, so the result's
    fragmentation and consensus_text do not depend on input order.
    O(n^2) in the number of valid entries.

    Args:
        entries: Raw entries; anything that is not a non-blank str is ignored
        scorer: Similarity function honoring the scorer contract

    Returns:
        FragmentationResult (fragmentation 0.0 when fewer than 2 valid entries)

    Raises:
        ComputationError: If the scorer fails or misbehaves for any pair
    """
    texts = valid_entries(entries)
    if len(texts) < 2:
        return _degenerate(texts, AggregationMode.FULL)

    scores = [
        _score_pair(scorer, texts, i, j)
        for i in range(len(texts))
        for j in range(i + 1, len(texts))
    ]
    return _finish(texts, scores, AggregationMode.FULL)


def compute_bounded_fragmentation(entries: Iterable[Any], window: int,
                                  scorer: Scorer = dice_coefficient) -> FragmentationResult:
    """
    Windowed fragmentation: each valid entry is compared only with the
    next `window` valid entries. O(n * window).

    Unlike compute_fragmentation this depends on input order, so reordering
    the entries can change the score. consensus_text is still order
    independent.

    Raises:
        ValueError: If window < 1
        ComputationError: If the scorer fails or misbehaves for any pair
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")

    texts = valid_entries(entries)
    if len(texts) < 2:
        return _degenerate(texts, AggregationMode.BOUNDED)

    scores = [
        _score_pair(scorer, texts, i, j)
        for i in range(len(texts))
        for j in range(i + 1, min(i + 1 + window, len(texts)))
    ]
    return _finish(texts, scores, AggregationMode.BOUNDED)
