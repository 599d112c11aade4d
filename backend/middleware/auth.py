"""
Authentication middleware and dependencies

/internal routes are reserved for subreddit moderators. The caller is
identified by the signed x-devvit-token header and checked against the
subreddit's moderator list.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException
from jose import JWTError

from config import get_settings
from services.reddit_service import RedditService, get_reddit_service
from .jwt_session import decode_devvit_token

logger = logging.getLogger(__name__)


@dataclass
class DevvitUser:
    """Minimal caller info from the Devvit token"""
    username: str
    subreddit_name: str
    post_id: Optional[str] = None


def user_from_token(token: Optional[str]) -> Optional[DevvitUser]:
    """
    Verify a Devvit token and build the caller (None if absent/invalid)
    """
    if not token:
        return None

    try:
        payload = decode_devvit_token(token)
    except JWTError as e:
        logger.debug(f"Rejected Devvit token: {e}")
        return None

    username = payload.get("username") or payload.get("sub")
    if not username:
        return None

    return DevvitUser(
        username=username,
        subreddit_name=payload.get("subreddit") or get_settings().default_subreddit,
        post_id=payload.get("post_id"),
    )


async def get_current_user_optional(
    x_devvit_token: Optional[str] = Header(None)
) -> Optional[DevvitUser]:
    """
    Get current user from the Devvit token (optional - doesn't raise)

    Returns:
        DevvitUser if the token verifies, None otherwise
    """
    return user_from_token(x_devvit_token)


async def get_current_user(
    x_devvit_token: Optional[str] = Header(None)
) -> DevvitUser:
    """
    Get current user (required)

    Raises:
        HTTPException 401 if the token is missing, invalid or has no user
    """
    if not x_devvit_token:
        raise HTTPException(status_code=401, detail="Unauthorized: Missing Devvit token")

    user = user_from_token(x_devvit_token)
    if not user:
        raise HTTPException(status_code=401, detail="Unauthorized: No user")

    return user


async def require_moderator(
    user: DevvitUser = Depends(get_current_user),
    reddit: RedditService = Depends(get_reddit_service),
) -> DevvitUser:
    """
    Get current user and require moderator rights in their subreddit

    Raises:
        HTTPException 403 if not a moderator, 500 if the check itself fails
    """
    try:
        is_mod = await reddit.is_moderator(user.subreddit_name, user.username)
    except Exception as e:
        logger.error(f"❌ Moderator check failed for {user.username}: {e}")
        raise HTTPException(status_code=500, detail="Authentication failed") from e

    if not is_mod:
        raise HTTPException(status_code=403, detail="Forbidden: Moderator access required")

    return user
