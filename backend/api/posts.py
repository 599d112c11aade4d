"""
App post API router - install trigger and mod menu action
"""

from fastapi import APIRouter, Depends, HTTPException
import logging

from api.dependencies import get_group_service
from middleware.auth import DevvitUser, require_moderator
from services.group_service import GroupService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/internal", tags=["posts"])


@router.post("/on-app-install")
async def on_app_install(
    user: DevvitUser = Depends(require_moderator),
    service: GroupService = Depends(get_group_service),
):
    try:
        post = await service.create_app_post(user.subreddit_name)
    except Exception as e:
        logger.error(f"Error creating post: {e}")
        raise HTTPException(status_code=400, detail="Failed to create post")

    return {
        "status": "success",
        "message": f"Post created in subreddit {user.subreddit_name} with id {post.get('id')}",
    }


@router.post("/menu/post-create")
async def menu_post_create(
    user: DevvitUser = Depends(require_moderator),
    service: GroupService = Depends(get_group_service),
):
    try:
        post = await service.create_app_post(user.subreddit_name)
    except Exception as e:
        logger.error(f"Error creating post: {e}")
        raise HTTPException(status_code=400, detail="Failed to create post")

    return {
        "navigateTo": f"https://reddit.com/r/{user.subreddit_name}/comments/{post.get('id')}",
    }
