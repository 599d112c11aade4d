"""
Devvit request token handling

The Devvit host signs every request to /internal routes with a short-lived
JWT in the x-devvit-token header. Claims used:
- username (or sub): the acting Reddit user
- subreddit: the subreddit the app runs in (optional)
- post_id: the post the request came from (optional)
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt

from config import get_settings


def create_devvit_token(username: str, subreddit: Optional[str] = None,
                        post_id: Optional[str] = None, expire_minutes: int = 15) -> str:
    """
    Create a signed Devvit request token

    Used by local tooling and tests to call /internal routes.

    Returns:
        JWT token string
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)

    payload = {
        "sub": username,
        "username": username,
        "exp": now + timedelta(minutes=expire_minutes),
        "iat": now,
    }
    if subreddit:
        payload["subreddit"] = subreddit
    if post_id:
        payload["post_id"] = post_id

    return jwt.encode(
        payload,
        settings.devvit_token_secret,
        algorithm=settings.devvit_token_algorithm
    )


def decode_devvit_token(token: str) -> dict:
    """
    Decode and validate a Devvit request token

    Returns:
        Decoded payload dict

    Raises:
        jose.JWTError if token invalid/expired
    """
    settings = get_settings()
    return jwt.decode(
        token,
        settings.devvit_token_secret,
        algorithms=[settings.devvit_token_algorithm]
    )
