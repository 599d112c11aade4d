"""
Post counter API router
"""

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from typing import Optional
import uuid
import logging

from middleware.auth import DevvitUser, get_current_user_optional
from models.api.counter import CounterResponse, InitResponse
from repositories import LogRepository, get_log_repository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["counter"])


def resolve_post_id(
    x_devvit_post_id: Optional[str] = Header(None),
    post_id: Optional[str] = Query(None, alias="postId"),
    user: Optional[DevvitUser] = Depends(get_current_user_optional),
) -> Optional[str]:
    """Post id from header, query string or the Devvit token, in that order"""
    return x_devvit_post_id or post_id or (user.post_id if user else None)


@router.get("/init", response_model=InitResponse)
async def init(
    post_id: Optional[str] = Depends(resolve_post_id),
    user: Optional[DevvitUser] = Depends(get_current_user_optional),
    repository: LogRepository = Depends(get_log_repository),
):
    """
    Initial state for the app post

    A missing post id is replaced with a fresh one so the client can start.
    """
    post_id = post_id or str(uuid.uuid4())
    try:
        count = await repository.get_count()
    except Exception as e:
        logger.error(f"❌ Initialization failed for post {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Initialization failed")

    return InitResponse(
        postId=post_id,
        count=count,
        username=user.username if user else "anonymous",
    )


async def _change_count(kind: str, amount: int, post_id: Optional[str],
                        repository: LogRepository) -> CounterResponse:
    if not post_id:
        raise HTTPException(status_code=400, detail="postId is required")

    try:
        count = await repository.incr_count(amount)
    except Exception as e:
        logger.error(f"❌ Failed to {kind} count for post {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update count")

    return CounterResponse(type=kind, postId=post_id, count=count)


@router.post("/increment", response_model=CounterResponse)
async def increment(
    post_id: Optional[str] = Depends(resolve_post_id),
    repository: LogRepository = Depends(get_log_repository),
):
    return await _change_count("increment", 1, post_id, repository)


@router.post("/decrement", response_model=CounterResponse)
async def decrement(
    post_id: Optional[str] = Depends(resolve_post_id),
    repository: LogRepository = Depends(get_log_repository),
):
    return await _change_count("decrement", -1, post_id, repository)
