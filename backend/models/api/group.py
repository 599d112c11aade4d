"""
Pydantic models for group and log endpoints
"""

from pydantic import BaseModel, Field
from typing import Any, List, Optional


class GroupCreate(BaseModel):
    """Request model for creating a group"""
    strings: Any = None  # validated in the router so a non-list gets a 400


class GroupCreateResponse(BaseModel):
    status: str = "success"
    uuid: str
    alert: str


class LogCreate(BaseModel):
    """Request model for storing a log"""
    data: Any = None
    logId: Optional[str] = None
    groupId: Optional[str] = None


class LogCreateResponse(BaseModel):
    status: str = "success"
    message: str
    logId: str


class GroupDataResponse(BaseModel):
    """Fragmentation summary of a group"""
    status: str = "success"
    groupId: str
    fragmentation: float
    consensusRealityText: str
    fragmentedRealities: List[str] = Field(default_factory=list)
    stringCount: int
    aggregation: str = "full"


class ConsensusPointResponse(BaseModel):
    time: str
    value: float


class FragmentBranchResponse(BaseModel):
    id: str
    time: str
    userCount: int
    branch: int


class GroupTimelineResponse(BaseModel):
    consensus: List[ConsensusPointResponse] = Field(default_factory=list)
    fragments: List[FragmentBranchResponse] = Field(default_factory=list)
