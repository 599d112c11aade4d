"""
Tests for the fragmentation engine.

These tests verify:
- Degenerate inputs (empty, single, all invalid)
- Score bounds and the identical / dissimilar / similar scenarios
- Permutation invariance of the full aggregation
- Consensus extraction and sample selection
- ComputationError propagation
- The bounded (windowed) variant
"""

import itertools
import math

import pytest

from models.domain.fragmentation import AggregationMode
from services.fragmentation import (
    ComputationError,
    compute_bounded_fragmentation,
    compute_fragmentation,
    extract_consensus,
    valid_entries,
)
from services.similarity import indel_ratio


def exact_match(a: str, b: str) -> float:
    return 1.0 if a == b else 0.0


# =============================================================================
# Degenerate inputs
# =============================================================================

class TestDegenerateInputs:

    def test_empty(self):
        result = compute_fragmentation([])

        assert result.fragmentation == 0
        assert result.consensus_text == ''
        assert result.fragmented_samples == ()
        assert result.sample_count == 0
        assert result.is_degenerate

    def test_single_entry(self):
        result = compute_fragmentation(['apple'])

        assert result.fragmentation == 0
        assert result.consensus_text == 'apple'
        assert result.fragmented_samples == ('apple',)
        assert result.sample_count == 1

    def test_invalid_entries_are_ignored(self):
        result = compute_fragmentation([None, '', '   ', 42, {'text': 'x'}, 'apple'])

        assert result.fragmentation == 0
        assert result.sample_count == 1
        assert result.consensus_text == 'apple'

    def test_all_invalid(self):
        result = compute_fragmentation(['', ' \t\n', None])

        assert result.fragmentation == 0
        assert result.consensus_text == ''
        assert result.sample_count == 0

    def test_does_not_call_scorer(self):
        def exploding(a, b):
            raise AssertionError("scorer should not be called")

        assert compute_fragmentation(['only one'], exploding).fragmentation == 0


# =============================================================================
# Scores
# =============================================================================

class TestScores:

    @pytest.mark.parametrize("text", ['a', 'apple', 'The sky was green today.'])
    def test_identical_entries_have_zero_fragmentation(self, text):
        assert compute_fragmentation([text, text]).fragmentation == 0

    def test_dissimilar_set(self):
        result = compute_fragmentation(['apple', 'banana', 'carrot'])

        assert result.fragmentation > 0.5
        assert result.pair_count == 3

    def test_similar_set(self):
        result = compute_fragmentation(['apple', 'apples', 'apple pie'])

        assert result.fragmentation < 0.5

    def test_similar_set_with_ratio_scorer(self):
        assert compute_fragmentation(['apple', 'apples', 'apple pie'], indel_ratio).fragmentation < 0.5
        assert compute_fragmentation(['apple', 'banana', 'carrot'], indel_ratio).fragmentation > 0.5

    def test_average_of_pairs(self):
        # pairs: (x,y)=0, (x,x)=1, (y,x)=0 -> mean 1/3
        result = compute_fragmentation(['x', 'y', 'x'], exact_match)

        assert result.fragmentation == pytest.approx(2 / 3)
        assert result.average_similarity == pytest.approx(1 / 3)

    @pytest.mark.parametrize("entries", [
        ['apple', 'banana'],
        ['same', 'same', 'same'],
        ['short', 'a much longer sentence about reality', 'x', 'zz top'],
        ['é', 'ü', '中文', '中文字'],
        ['a' * 5000, 'b' * 5000, 'ab' * 2500],
    ])
    def test_bounds(self, entries):
        result = compute_fragmentation(entries)

        assert 0.0 <= result.fragmentation <= 1.0

    def test_whitespace_is_stripped_for_comparison(self):
        result = compute_fragmentation(['  apple', 'apple  ', '\tapple\n'])

        assert result.fragmentation == 0
        assert result.consensus_text == 'apple'
        assert result.fragmented_samples == ('apple', 'apple', 'apple')


# =============================================================================
# Permutation invariance
# =============================================================================

class TestPermutationInvariance:

    ENTRIES = ['the sky is green', 'the sky is blue', 'sky', 'the sky is green', 'nothing']

    def test_fragmentation_and_consensus(self):
        baseline = compute_fragmentation(self.ENTRIES)

        for permutation in itertools.permutations(self.ENTRIES):
            result = compute_fragmentation(list(permutation))
            assert result.fragmentation == baseline.fragmentation
            assert result.consensus_text == baseline.consensus_text

    def test_fragmentation_is_exact_across_orderings(self):
        entries = ['sky', 'grass is red', 'the sky is green',
                   'reality holds', 'apple pie', 'the sky is blue']

        scores = {compute_fragmentation(list(p)).fragmentation for p in itertools.permutations(entries)}

        assert len(scores) == 1

    def test_samples_follow_input_order(self):
        reordered = list(reversed(self.ENTRIES))

        assert compute_fragmentation(reordered).fragmented_samples == tuple(reordered[:3])


# =============================================================================
# Consensus & samples
# =============================================================================

class TestConsensus:

    def test_most_frequent_wins(self):
        assert compute_fragmentation(['x', 'y', 'x']).consensus_text == 'x'

    def test_tie_goes_to_first_seen(self):
        assert extract_consensus(['b', 'a', 'a', 'b']) == 'b'
        assert extract_consensus(['a', 'b', 'c']) == 'a'

    def test_case_sensitive(self):
        assert compute_fragmentation(['Apple', 'apple', 'apple']).consensus_text == 'apple'
        assert extract_consensus(['Apple', 'apple']) == 'Apple'

    def test_empty(self):
        assert extract_consensus([]) == ''


class TestSamples:

    def test_first_three_in_order(self):
        result = compute_fragmentation(['a', 'b', 'c', 'd'])

        assert list(result.fragmented_samples) == ['a', 'b', 'c']
        assert result.sample_count == 4

    def test_fewer_than_three(self):
        assert compute_fragmentation(['a', 'b']).fragmented_samples == ('a', 'b')

    def test_invalid_entries_do_not_take_sample_slots(self):
        result = compute_fragmentation(['', 'a', None, 'b', ' ', 'c', 'd'])

        assert result.fragmented_samples == ('a', 'b', 'c')

    def test_valid_entries(self):
        assert valid_entries([' a ', '', None, 'b']) == ['a', 'b']


# =============================================================================
# Failures
# =============================================================================

class TestComputationError:

    def test_scorer_exception_propagates(self):
        def failing(a, b):
            if 'bad' in (a, b):
                raise RuntimeError("cannot compare")
            return 1.0

        with pytest.raises(ComputationError) as exc_info:
            compute_fragmentation(['ok', 'fine', 'bad'], failing)

        assert exc_info.value.first_index == 0
        assert exc_info.value.second_index == 2
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_indices_refer_to_valid_entries(self):
        def failing(a, b):
            if 'bad' in (a, b):
                raise RuntimeError("cannot compare")
            return 1.0

        with pytest.raises(ComputationError) as exc_info:
            compute_fragmentation(['ok', '   ', None, 'bad'], failing)

        assert (exc_info.value.first_index, exc_info.value.second_index) == (0, 1)

    @pytest.mark.parametrize("bad_score", [1.5, -0.1, math.nan, None, "0.5", True])
    def test_out_of_contract_scores(self, bad_score):
        with pytest.raises(ComputationError):
            compute_fragmentation(['a', 'b'], lambda a, b: bad_score)


# =============================================================================
# Bounded aggregation
# =============================================================================

class TestBoundedAggregation:

    def test_window_limits_pairs(self):
        result = compute_bounded_fragmentation(['a', 'b', 'c', 'd'], window=1, scorer=exact_match)

        assert result.pair_count == 3
        assert result.aggregation == AggregationMode.BOUNDED

    def test_order_dependent(self):
        grouped = compute_bounded_fragmentation(['x', 'x', 'y', 'y'], window=1, scorer=exact_match)
        interleaved = compute_bounded_fragmentation(['x', 'y', 'x', 'y'], window=1, scorer=exact_match)

        assert grouped.fragmentation == pytest.approx(1 / 3)
        assert interleaved.fragmentation == pytest.approx(1.0)

    def test_wide_window_matches_full(self):
        entries = ['apple', 'apples', 'apple pie', 'carrot']
        full = compute_fragmentation(entries)
        bounded = compute_bounded_fragmentation(entries, window=len(entries))

        assert bounded.fragmentation == full.fragmentation
        assert bounded.pair_count == full.pair_count
        assert full.aggregation == AggregationMode.FULL

    def test_degenerate(self):
        result = compute_bounded_fragmentation(['solo'], window=2)

        assert result.fragmentation == 0
        assert result.consensus_text == 'solo'

    @pytest.mark.parametrize("window", [0, -1])
    def test_invalid_window(self, window):
        with pytest.raises(ValueError):
            compute_bounded_fragmentation(['a', 'b'], window=window)
