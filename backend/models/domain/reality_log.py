"""
RealityLog domain model
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RealityLog:
    """
    A single free-text submission - storage-agnostic representation

    Storage: Redis
    - Group logs live in the JSON list at logs:{group_id}:{date}
    - Standalone logs (no group) live at log:{log_id}

    Immutable once stored. Author and timestamp metadata belong to the
    platform, not to this model.
    """
    text: str
    log_id: Optional[str] = None
    group_id: Optional[str] = None
    date: Optional[str] = None  # YYYY-MM-DD (UTC)

    @property
    def is_grouped(self) -> bool:
        return self.group_id is not None
