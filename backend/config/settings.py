from pydantic_settings import BaseSettings
from pydantic import field_validator
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can come from:
    - docker-compose.yml environment section
    - .env file (for secrets like Reddit credentials)
    - System environment

    Variable names are the upper-cased field names:
    - REDIS_URL (for the log store)
    - REDDIT_CLIENT_ID, REDDIT_CLIENT_SECRET, REDDIT_USERNAME, REDDIT_PASSWORD
    - DEVVIT_TOKEN_SECRET (shared secret used to sign x-devvit-token)
    """

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    # Redis (log store)
    redis_url: str = "redis://localhost:6379"

    # Reddit (platform)
    reddit_client_id: str = ""
    reddit_client_secret: str = ""
    reddit_username: str = ""
    reddit_password: str = ""
    reddit_user_agent: str = "conrealmonitor/0.1 (Consensus Reality Monitor)"
    default_subreddit: str = "conrealmonitor_dev"
    report_subreddit: str = "conrealmonitor_dev"

    # Devvit request token
    devvit_token_secret: str = "dev-secret-key-change-in-production"
    devvit_token_algorithm: str = "HS256"

    # Rate limiting for /internal routes
    rate_limit_window_seconds: int = 900
    rate_limit_max_requests: int = 100

    # Fragmentation engine
    similarity_scorer: str = "dice"
    fragmentation_window: Optional[int] = None

    # Flair colors
    flair_color_stable: str = "#22C55E"
    flair_color_fluctuating: str = "#FBBF24"
    flair_color_chaotic: str = "#EF4444"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra env vars

    @field_validator('similarity_scorer', mode='before')
    @classmethod
    def normalize_scorer_name(cls, v):
        """Scorer names are matched case-insensitively"""
        return (v or "dice").strip().lower()

    @field_validator('fragmentation_window', mode='before')
    @classmethod
    def empty_window_means_full(cls, v):
        """An empty FRAGMENTATION_WINDOW disables bounded aggregation"""
        if v in ("", None, 0, "0"):
            return None
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
