"""
Log Store Configuration
=======================

Centralized Redis connection configuration for the API server and scripts.
"""
import os
from dataclasses import dataclass

import redis.asyncio as redis


@dataclass
class RedisConfig:
    """Redis connection configuration."""
    url: str

    @classmethod
    def from_env(cls) -> 'RedisConfig':
        """Create config from environment variables."""
        url = os.getenv('REDIS_URL')
        if not url:
            # Fall back to settings (.env file or default)
            from .settings import get_settings
            url = get_settings().redis_url

        return cls(url=url)


def get_redis_config() -> RedisConfig:
    """Get Redis configuration from environment."""
    return RedisConfig.from_env()


def create_redis_client(config: RedisConfig = None) -> redis.Redis:
    """
    Create an asyncio Redis client.

    Responses are decoded to str so repositories work with text, not bytes.
    The connection is opened lazily on first command.
    """
    config = config or get_redis_config()
    return redis.from_url(config.url, decode_responses=True)
