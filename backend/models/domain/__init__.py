"""
Domain Models - Storage-agnostic data structures

These models represent the core domain entities independent of storage layer.
Services operate on these models, not raw Redis values.

Architecture:
- Domain models are pure Python objects (dataclasses)
- Storage details (Redis keys, JSON encoding) are abstracted via repositories
- Business logic operates on these models, not raw strings from the store

Models:
- RealityLog: One free-text submission
- FragmentationResult: Output of the fragmentation engine (transient)
- GroupTimeline: Per-date consensus points and fragment branches
"""

from .reality_log import RealityLog
from .fragmentation import FragmentationResult, AggregationMode
from .timeline import ConsensusPoint, FragmentBranch, GroupTimeline

__all__ = [
    'RealityLog',
    'FragmentationResult',
    'AggregationMode',
    'ConsensusPoint',
    'FragmentBranch',
    'GroupTimeline',
]
