"""
Shared FastAPI dependencies for routers
"""
from fastapi import Depends

from repositories import LogRepository, get_log_repository
from services.group_service import GroupService
from services.reddit_service import RedditService, get_reddit_service


def get_group_service(
    repository: LogRepository = Depends(get_log_repository),
    reddit: RedditService = Depends(get_reddit_service),
) -> GroupService:
    return GroupService(repository, reddit)
