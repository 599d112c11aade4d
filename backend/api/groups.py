"""
Groups API router - reality logs, fragmentation and flair

All routes are moderator-only (see main.py for the router dependencies).
"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
import logging

from api.dependencies import get_group_service
from middleware.auth import DevvitUser, require_moderator
from models.api.group import (
    GroupCreate,
    GroupCreateResponse,
    GroupDataResponse,
    GroupTimelineResponse,
    LogCreate,
    LogCreateResponse,
)
from services.fragmentation import ComputationError
from services.group_service import GroupNotFoundError, GroupService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/internal", tags=["groups"])


@router.post("/groups", response_model=GroupCreateResponse)
async def create_group(
    body: GroupCreate,
    service: GroupService = Depends(get_group_service),
):
    """
    Create a new group seeded with a list of strings
    """
    if not isinstance(body.strings, list):
        logger.error("🚫 Invalid request: strings array required")
        raise HTTPException(status_code=400, detail="strings array is required")

    try:
        group_id, _ = await service.create_group(body.strings)
    except Exception as e:
        logger.error(f"💥 Error storing group: {e}")
        raise HTTPException(status_code=500, detail="Failed to store group")

    return GroupCreateResponse(
        uuid=group_id,
        alert=f"New group created with UUID: {group_id}",
    )


async def refresh_flair_after_log(service: GroupService, group_id: str, user: DevvitUser):
    """
    Background flair sync after a log submission

    A flair failure must not fail the submission, so errors are only logged.
    """
    try:
        logger.info(f"🔄 Auto-triggering flair update for group {group_id} post-log")
        await service.set_flair_for_group(group_id, user.username, user.subreddit_name)
        logger.info("✅ Flair auto-updated after log submission")
    except Exception as e:
        logger.error(f"💥 Failed to auto-update flair: {e}")


@router.post("/logs", response_model=LogCreateResponse)
async def create_log(
    body: LogCreate,
    background_tasks: BackgroundTasks,
    user: DevvitUser = Depends(require_moderator),
    service: GroupService = Depends(get_group_service),
):
    """
    Store a log entry

    With groupId the entry joins the group's list for today and the
    caller's flair is refreshed in the background.
    """
    if body.data is None or body.data == "":
        logger.error("🚫 Invalid request: data required")
        raise HTTPException(status_code=400, detail="data is required")

    try:
        log = await service.submit_log(body.data, log_id=body.logId, group_id=body.groupId)
    except Exception as e:
        logger.error(f"💥 Error storing log: {e}")
        raise HTTPException(status_code=500, detail="Failed to store log")

    if log.is_grouped:
        background_tasks.add_task(refresh_flair_after_log, service, log.group_id, user)

    return LogCreateResponse(message=f"Log {log.log_id} stored", logId=log.log_id)


@router.get("/group-data/{group_id}", response_model=GroupDataResponse)
async def get_group_data(
    group_id: str,
    service: GroupService = Depends(get_group_service),
):
    """
    Fragmentation index, consensus reality and sample realities of a group
    """
    try:
        return await service.get_group_data(group_id)
    except GroupNotFoundError:
        logger.error(f"🚫 No logs found for group {group_id}")
        raise HTTPException(status_code=404, detail="Group not found")
    except ComputationError as e:
        logger.error(f"💥 Fragmentation failed for group {group_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch group data")
    except Exception as e:
        logger.error(f"💥 Error fetching group data: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch group data")


@router.get("/group-timeline/{group_id}", response_model=GroupTimelineResponse)
async def get_group_timeline(
    group_id: str,
    service: GroupService = Depends(get_group_service),
):
    """
    Consensus line and fragment branches per date, for the timeline chart
    """
    try:
        timeline = await service.get_group_timeline(group_id)
    except GroupNotFoundError:
        raise HTTPException(status_code=404, detail="Group not found")
    except Exception as e:
        logger.error(f"💥 Error building timeline for group {group_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch group timeline")

    return timeline.to_dict()


@router.post("/set-flair/{group_id}")
async def set_flair(
    group_id: str,
    user: DevvitUser = Depends(require_moderator),
    service: GroupService = Depends(get_group_service),
):
    """
    Set the caller's Reality Index flair from the group's fragmentation
    """
    try:
        badge = await service.set_flair_for_group(group_id, user.username, user.subreddit_name)
    except GroupNotFoundError:
        raise HTTPException(status_code=404, detail="Group not found")
    except Exception as e:
        logger.error(f"💥 Error in flair endpoint: {e}")
        raise HTTPException(status_code=500, detail="Flair update failed - check mod permissions")

    return {
        "status": "success",
        "message": "Flair updated successfully",
        "flair": {
            "text": badge.text,
            "backgroundColor": badge.background_color,
            "band": badge.band.value,
        },
    }


@router.post("/share-group/{group_id}")
async def share_group(
    group_id: str,
    user: DevvitUser = Depends(require_moderator),
    service: GroupService = Depends(get_group_service),
):
    """
    Post an invite to the group in the caller's subreddit
    """
    try:
        post = await service.share_group(group_id, user.subreddit_name)
    except Exception as e:
        logger.error(f"💥 Error creating share post: {e}")
        raise HTTPException(status_code=500, detail="Failed to create share post")

    return {"status": "success", "postId": post.get("id")}
