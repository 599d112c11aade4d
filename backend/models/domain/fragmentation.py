"""
Fragmentation - Value objects produced by the fragmentation engine

Key concepts:
- FragmentationResult: Output of one aggregation over a group's entries
- AggregationMode: Whether every pair was compared or only a window

A result is transient: it is computed fresh on every request and never
persisted by the engine itself.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class AggregationMode(str, Enum):
    """How pairs were selected for comparison"""
    FULL = "full"          # Every unordered pair (permutation invariant)
    BOUNDED = "bounded"    # Each entry vs. the next N entries only


@dataclass(frozen=True)
class FragmentationResult:
    """
    Divergence summary of a group's reality logs.

    fragmentation is in [0, 1]: 0 means every entry is lexically identical
    to every other, values near 1 mean the entries share almost nothing.
    """
    fragmentation: float
    consensus_text: str
    fragmented_samples: Tuple[str, ...] = field(default_factory=tuple)
    sample_count: int = 0

    # Diagnostics
    pair_count: int = 0
    aggregation: AggregationMode = AggregationMode.FULL

    @property
    def average_similarity(self) -> float:
        """Mean pairwise similarity (1 - fragmentation)"""
        return 1.0 - self.fragmentation

    @property
    def is_degenerate(self) -> bool:
        """True when fewer than two valid entries were available"""
        return self.sample_count < 2
