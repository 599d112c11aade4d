"""
Pydantic models for the post counter endpoints
"""

from pydantic import BaseModel


class InitResponse(BaseModel):
    type: str = "init"
    postId: str
    count: int
    username: str


class CounterResponse(BaseModel):
    """Response for increment/decrement"""
    type: str
    postId: str
    count: int
