"""
RedditService - platform operations over the Reddit HTTP API

Covers what the app needs from the platform:
1. Moderator lookup (for /internal route authorization)
2. User flair (the "Reality Index" badge)
3. Self posts (app post, group invites, daily reports)
4. Hot listing (report history)

Auth: OAuth2 password grant for a script app. The bearer token is cached
until shortly before it expires.

Usage:
    service = RedditService(settings)
    await service.set_user_flair("conrealmonitor_dev", "alice",
                                 "Reality Index: 0.42", "#FBBF24")
    await service.close()
"""
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from config import Settings, get_settings

logger = logging.getLogger(__name__)

TOKEN_URL = "https://www.reddit.com/api/v1/access_token"
API_BASE = "https://oauth.reddit.com"

# Refresh this many seconds before the token actually expires
TOKEN_EXPIRY_MARGIN = 60


class RedditServiceError(Exception):
    """A Reddit API call failed (transport error or non-2xx response)."""


class RedditService:
    """
    Thin async client for the Reddit endpoints the app uses.

    An httpx.AsyncClient can be injected (tests pass one backed by
    httpx.MockTransport).
    """

    def __init__(self, settings: Optional[Settings] = None,
                 client: Optional[httpx.AsyncClient] = None):
        self.settings = settings or get_settings()
        self.client = client or httpx.AsyncClient(
            timeout=10.0,
            headers={'User-Agent': self.settings.reddit_user_agent},
        )
        self._token: Optional[str] = None
        self._token_expires_at = 0.0

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    # =========================================================================
    # AUTH
    # =========================================================================

    async def _get_token(self) -> str:
        if self._token and time.monotonic() < self._token_expires_at:
            return self._token

        try:
            response = await self.client.post(
                TOKEN_URL,
                auth=(self.settings.reddit_client_id, self.settings.reddit_client_secret),
                data={
                    'grant_type': 'password',
                    'username': self.settings.reddit_username,
                    'password': self.settings.reddit_password,
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RedditServiceError(f"Token request failed: {e}") from e

        payload = response.json()
        if 'access_token' not in payload:
            raise RedditServiceError(f"Token request rejected: {payload.get('error', 'unknown error')}")

        self._token = payload['access_token']
        expires_in = float(payload.get('expires_in', 3600))
        self._token_expires_at = time.monotonic() + max(0.0, expires_in - TOKEN_EXPIRY_MARGIN)
        logger.debug("🔑 Reddit access token refreshed")
        return self._token

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        token = await self._get_token()
        try:
            response = await self.client.request(
                method,
                f"{API_BASE}{path}",
                headers={'Authorization': f"bearer {token}"},
                **kwargs,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RedditServiceError(f"{method} {path} failed: {e}") from e

        payload = response.json() if response.content else {}

        # api_type=json endpoints report failures inside a 200 body
        errors = payload.get('json', {}).get('errors') if isinstance(payload, dict) else None
        if errors:
            raise RedditServiceError(f"{method} {path} returned errors: {errors}")
        return payload

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    async def get_moderators(self, subreddit_name: str) -> List[str]:
        """Usernames of the subreddit's moderators"""
        payload = await self._request('GET', f"/r/{subreddit_name}/about/moderators")
        children = payload.get('data', {}).get('children', [])
        return [child['name'] for child in children if child.get('name')]

    async def is_moderator(self, subreddit_name: str, username: str) -> bool:
        moderators = await self.get_moderators(subreddit_name)
        return any(mod.lower() == username.lower() for mod in moderators)

    async def set_user_flair(self, subreddit_name: str, username: str,
                             text: str, background_color: str) -> None:
        await self._request(
            'POST',
            f"/r/{subreddit_name}/api/selectflair",
            data={
                'api_type': 'json',
                'name': username,
                'text': text,
                'background_color': background_color,
                'text_color': 'dark',
            },
        )

    async def submit_post(self, subreddit_name: str, title: str, text: str) -> Dict[str, Any]:
        """
        Submit a self post.

        Returns:
            Dict with {id, name, url}
        """
        payload = await self._request(
            'POST',
            '/api/submit',
            data={
                'api_type': 'json',
                'kind': 'self',
                'sr': subreddit_name,
                'title': title,
                'text': text,
            },
        )
        data = payload.get('json', {}).get('data', {})
        return {
            'id': data.get('id'),
            'name': data.get('name'),
            'url': data.get('url'),
        }

    async def get_hot_posts(self, subreddit_name: str, limit: int = 50) -> List[Dict[str, Any]]:
        payload = await self._request('GET', f"/r/{subreddit_name}/hot", params={'limit': limit})
        return [
            {
                'id': child['data'].get('id'),
                'title': child['data'].get('title'),
                'text': child['data'].get('selftext', ''),
                'url': child['data'].get('url'),
                'score': child['data'].get('score', 0),
                'created_utc': child['data'].get('created_utc'),
            }
            for child in payload.get('data', {}).get('children', [])
            if 'data' in child
        ]


# Shared service instance (created on first use)
_reddit_service: Optional[RedditService] = None


def get_reddit_service() -> RedditService:
    global _reddit_service
    if _reddit_service is None:
        _reddit_service = RedditService()
    return _reddit_service


async def close_reddit_service():
    global _reddit_service
    if _reddit_service is not None:
        await _reddit_service.close()
        _reddit_service = None
