"""
Log Repository - Redis storage for reality logs

Storage: Redis

Keys:
- logs:{group_id}:{date}  → JSON list of entries written that day
- dates:{group_id}        → SET of dates (YYYY-MM-DD) that have logs
- groups                  → SET of all group ids
- log:{log_id}            → JSON-encoded standalone entry
- count                   → post counter (INCRBY)

Writes are last-write-wins: appending to a group reads the day's list,
appends and writes it back.
"""
import json
import logging
from typing import Any, AsyncIterator, List, Optional, Tuple

import redis.asyncio as redis

from models.domain.reality_log import RealityLog

logger = logging.getLogger(__name__)

GROUPS_KEY = 'groups'
COUNT_KEY = 'count'


def logs_key(group_id: str, date: str) -> str:
    return f"logs:{group_id}:{date}"


def dates_key(group_id: str) -> str:
    return f"dates:{group_id}"


def log_key(log_id: str) -> str:
    return f"log:{log_id}"


class LogRepository:
    """
    Repository for reality logs and groups

    Wraps a redis.asyncio client created with decode_responses=True.
    """

    def __init__(self, client: redis.Redis):
        self.redis = client

    # =========================================================================
    # GROUP LOGS
    # =========================================================================

    async def get_logs(self, group_id: str, date: str) -> Optional[List[Any]]:
        """
        Retrieve the entries stored for a group on one date.

        Returns:
            Decoded JSON list, or None if nothing stored
        """
        data = await self.redis.get(logs_key(group_id, date))
        if not data:
            return None
        logs = json.loads(data)
        if not isinstance(logs, list):
            logger.warning(f"⚠️  {logs_key(group_id, date)} does not hold a list, ignoring")
            return None
        return logs

    async def set_logs(self, group_id: str, date: str, logs: List[Any]) -> None:
        await self.redis.set(logs_key(group_id, date), json.dumps(logs))

    async def append_log(self, log: RealityLog) -> List[Any]:
        """
        Append one entry to its group's list for its date.

        Registers the date with the group when it is new.

        Returns:
            The day's list after the append
        """
        existing = await self.get_logs(log.group_id, log.date) or []
        existing.append(log.text)
        await self.set_logs(log.group_id, log.date, existing)

        if not await self.is_date_in_group(log.group_id, log.date):
            await self.add_date_to_group(log.group_id, log.date)
        return existing

    async def get_group_entries(self, group_id: str) -> List[Any]:
        """
        All entries of a group across dates.

        Dates are visited in ascending order so the result is stable between
        calls (set members come back unordered from Redis).
        """
        entries: List[Any] = []
        for date in await self.get_dates_for_group(group_id):
            logs = await self.get_logs(group_id, date)
            if logs:
                entries.extend(logs)
        return entries

    # =========================================================================
    # DATES
    # =========================================================================

    async def add_date_to_group(self, group_id: str, date: str) -> None:
        await self.redis.sadd(dates_key(group_id), date)

    async def get_dates_for_group(self, group_id: str) -> List[str]:
        """Dates with logs for a group, sorted ascending"""
        dates = await self.redis.smembers(dates_key(group_id))
        return sorted(dates)

    async def is_date_in_group(self, group_id: str, date: str) -> bool:
        result = await self.redis.sismember(dates_key(group_id), date)
        return bool(result)

    # =========================================================================
    # GROUPS
    # =========================================================================

    async def add_group(self, group_id: str) -> None:
        await self.redis.sadd(GROUPS_KEY, group_id)

    async def scan_groups(self, cursor: int = 0, count: int = 100) -> Tuple[int, List[str]]:
        """
        One SSCAN step over the group set.

        Returns:
            (next_cursor, group_ids); next_cursor == 0 means the scan is done
        """
        next_cursor, groups = await self.redis.sscan(GROUPS_KEY, cursor=cursor, count=count)
        return int(next_cursor), list(groups)

    async def iter_groups(self, batch_size: int = 100) -> AsyncIterator[str]:
        """Iterate every group id with cursor-based scanning"""
        cursor = 0
        while True:
            cursor, groups = await self.scan_groups(cursor, batch_size)
            for group_id in groups:
                yield group_id
            if cursor == 0:
                break

    # =========================================================================
    # STANDALONE LOGS
    # =========================================================================

    async def set_log(self, log_id: str, data: Any) -> None:
        await self.redis.set(log_key(log_id), json.dumps(data))

    # =========================================================================
    # POST COUNTER
    # =========================================================================

    async def get_count(self) -> int:
        value = await self.redis.get(COUNT_KEY)
        return int(value) if value else 0

    async def incr_count(self, amount: int) -> int:
        return await self.redis.incrby(COUNT_KEY, amount)
