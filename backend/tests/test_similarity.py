"""
Tests for the similarity scorers.

These tests verify the scorer contract for every registered scorer:
- identical strings score 1
- symmetry
- lower overlap gives a lower score
"""

import pytest

from services.similarity import SCORERS, dice_coefficient, get_scorer, indel_ratio


PAIRS = [
    ("apple", "apples"),
    ("apple", "banana"),
    ("the sky is green", "the sky is blue"),
    ("a", "ab"),
    ("Reality", "reality check"),
]


@pytest.mark.parametrize("name", sorted(SCORERS))
class TestScorerContract:
    """Contract every scorer must honor."""

    @pytest.mark.parametrize("text", ["x", "apple", "the sky is green", "  spaced  "])
    def test_identity(self, name, text):
        assert get_scorer(name)(text, text) == 1.0

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_symmetric(self, name, a, b):
        scorer = get_scorer(name)
        assert scorer(a, b) == pytest.approx(scorer(b, a))

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_in_unit_interval(self, name, a, b):
        assert 0.0 <= get_scorer(name)(a, b) <= 1.0

    def test_less_overlap_scores_lower(self, name):
        scorer = get_scorer(name)
        assert scorer("apple", "apples") > scorer("apple", "apple pie") > scorer("apple", "carrot")


class TestDiceCoefficient:
    """Bigram Dice specifics."""

    def test_shared_bigrams(self):
        # ap pp pl le vs ap pp pl le es: 2*4 / (4+5)
        assert dice_coefficient("apple", "apples") == pytest.approx(8 / 9)

    def test_disjoint_bigrams(self):
        assert dice_coefficient("apple", "banana") == 0.0

    def test_case_insensitive(self):
        assert dice_coefficient("NIGHT", "night") == 1.0
        assert dice_coefficient("Night Sky", "night sky") == 1.0

    def test_short_strings(self):
        """Single characters have no bigrams; only identity scores."""
        assert dice_coefficient("a", "a") == 1.0
        assert dice_coefficient("a", "b") == 0.0
        assert dice_coefficient("a", "ab") == 0.0

    def test_bigrams_counted_as_multiset(self):
        # aa aa aa vs aa: only one shared occurrence
        assert dice_coefficient("aaaa", "aa") == pytest.approx(0.5)


class TestIndelRatio:
    """rapidfuzz ratio scaled to [0, 1]."""

    def test_scaled(self):
        assert indel_ratio("apple", "apples") == pytest.approx(10 / 11)

    def test_nothing_shared(self):
        assert indel_ratio("abc", "xyz") == 0.0


class TestRegistry:

    def test_lookup_is_case_insensitive(self):
        assert get_scorer(" Dice ") is dice_coefficient
        assert get_scorer("RATIO") is indel_ratio

    def test_unknown_scorer(self):
        with pytest.raises(ValueError, match="Unknown similarity scorer"):
            get_scorer("cosine")
