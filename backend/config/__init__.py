"""
Configuration module for settings and log store connections.
"""
from .settings import Settings, get_settings
from .database import (
    RedisConfig,
    get_redis_config,
    create_redis_client,
)

__all__ = [
    'Settings',
    'get_settings',
    'RedisConfig',
    'get_redis_config',
    'create_redis_client',
]
