"""
Timeline - Per-date chart data for a group

The client draws one consensus line (one point per date) and up to three
fragment branches around it.
"""
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class ConsensusPoint:
    """Consensus strength on one date (1 - fragmentation)"""
    time: str  # ISO date
    value: float


@dataclass(frozen=True)
class FragmentBranch:
    """A representative entry on one date and how many users wrote it"""
    id: str
    time: str  # ISO date
    user_count: int
    branch: int  # 0, 1, or 2


@dataclass
class GroupTimeline:
    consensus: List[ConsensusPoint] = field(default_factory=list)
    fragments: List[FragmentBranch] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Serialize in the shape the timeline chart consumes"""
        return {
            'consensus': [{'time': p.time, 'value': p.value} for p in self.consensus],
            'fragments': [
                {
                    'id': f.id,
                    'time': f.time,
                    'userCount': f.user_count,
                    'branch': f.branch,
                }
                for f in self.fragments
            ],
        }
