"""
GroupService - everything between the routers and the fragmentation engine

Responsibilities:
1. Collect a group's entries from the log store
2. Run the fragmentation engine (full, or bounded when configured)
3. Shape results for the group-data endpoint and the timeline chart
4. Push the Reality Index badge to the platform
5. Posts: app post, group invites, daily report

The engine itself stays pure; all logging of scores happens here.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from config import Settings, get_settings
from models.domain.fragmentation import FragmentationResult
from models.domain.reality_log import RealityLog
from models.domain.timeline import ConsensusPoint, FragmentBranch, GroupTimeline
from repositories.log_repository import LogRepository
from services.flair import FlairBadge, build_flair, format_index
from services.fragmentation import (
    compute_bounded_fragmentation,
    compute_fragmentation,
    valid_entries,
)
from services.reddit_service import RedditService
from services.similarity import Scorer, get_scorer
from utils.datetime_utils import to_iso_date, utc_today

logger = logging.getLogger(__name__)

# Above this, the group's realities are considered fractured
FRACTURE_THRESHOLD = 0.5

APP_POST_TITLE = "conrealmonitor"
SHARE_POST_TITLE = "Join our Reality Monitoring Group!"


class GroupNotFoundError(Exception):
    """The group has no stored logs."""

    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__(f"No logs found for group {group_id}")


class InvalidReportDateError(ValueError):
    """A report date was given but is not a recognizable date."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid report date: {value!r}")


class GroupService:
    """
    Orchestrates log store, fragmentation engine and platform calls.

    One instance per request is fine; it holds no state of its own.
    """

    def __init__(self, repository: LogRepository, reddit: RedditService,
                 settings: Optional[Settings] = None, scorer: Optional[Scorer] = None):
        self.repository = repository
        self.reddit = reddit
        self.settings = settings or get_settings()
        self.scorer = scorer or get_scorer(self.settings.similarity_scorer)

    # =========================================================================
    # FRAGMENTATION
    # =========================================================================

    def analyze(self, entries: List[Any]) -> FragmentationResult:
        """
        Run the engine over raw entries.

        Uses the bounded variant only when FRAGMENTATION_WINDOW is set.
        ComputationError propagates to the caller.
        """
        window = self.settings.fragmentation_window
        if window:
            result = compute_bounded_fragmentation(entries, window, self.scorer)
        else:
            result = compute_fragmentation(entries, self.scorer)

        logger.info(
            f"📊 Fragmentation {result.fragmentation:.4f} over {result.sample_count} entries "
            f"({result.pair_count} pairs, {result.aggregation.value})"
        )
        if result.fragmentation > FRACTURE_THRESHOLD:
            logger.warning(f"⚠️  Reality fracture detected at index {format_index(result.fragmentation)}")
        return result

    async def _load_entries(self, group_id: str) -> List[Any]:
        entries = await self.repository.get_group_entries(group_id)
        if not entries:
            raise GroupNotFoundError(group_id)
        return entries

    async def get_group_data(self, group_id: str) -> Dict[str, Any]:
        """
        Fragmentation summary for a group, shaped for the client.

        Raises:
            GroupNotFoundError: If the group has no logs
            ComputationError: If the scorer fails
        """
        logger.info(f"🔍 Fetching group data for {group_id}")
        entries = await self._load_entries(group_id)
        result = self.analyze(entries)
        return {
            'status': 'success',
            'groupId': group_id,
            'fragmentation': result.fragmentation,
            'consensusRealityText': result.consensus_text,
            'fragmentedRealities': list(result.fragmented_samples),
            'stringCount': result.sample_count,
            'aggregation': result.aggregation.value,
        }

    async def get_group_timeline(self, group_id: str) -> GroupTimeline:
        """
        Per-date consensus line and fragment branches.

        Each date is analyzed on its own; dates without valid entries are
        skipped.

        Raises:
            GroupNotFoundError: If no date of the group has logs
        """
        timeline = GroupTimeline()
        found = False

        for date in await self.repository.get_dates_for_group(group_id):
            logs = await self.repository.get_logs(group_id, date)
            if not logs:
                continue
            found = True

            texts = valid_entries(logs)
            if not texts:
                continue

            result = self.analyze(texts)
            timeline.consensus.append(ConsensusPoint(time=date, value=result.average_similarity))
            for branch, sample in enumerate(result.fragmented_samples):
                timeline.fragments.append(FragmentBranch(
                    id=f"{group_id}:{date}:{branch}",
                    time=date,
                    user_count=texts.count(sample),
                    branch=branch,
                ))

        if not found:
            raise GroupNotFoundError(group_id)
        return timeline

    # =========================================================================
    # LOGS & GROUPS
    # =========================================================================

    async def create_group(self, strings: List[Any]) -> Tuple[str, str]:
        """
        Create a group seeded with today's entries.

        Returns:
            (group_id, date)
        """
        group_id = str(uuid.uuid4())
        date = utc_today()
        logger.info(f"📝 Creating new group {group_id} with {len(strings)} strings")

        await self.repository.set_logs(group_id, date, list(strings))
        await self.repository.add_date_to_group(group_id, date)
        await self.repository.add_group(group_id)

        logger.info(f"✅ Group {group_id} stored")
        return group_id, date

    async def submit_log(self, data: Any, log_id: Optional[str] = None,
                         group_id: Optional[str] = None) -> RealityLog:
        """
        Store a log entry, in its group's list for today or standalone.
        """
        log = RealityLog(
            text=data,
            log_id=log_id or str(uuid.uuid4()),
            group_id=group_id,
            date=utc_today() if group_id else None,
        )
        logger.info(f"📝 Storing log {log.log_id}")

        if log.is_grouped:
            await self.repository.append_log(log)
        else:
            await self.repository.set_log(log.log_id, data)

        logger.info(f"✅ Log {log.log_id} stored")
        return log

    # =========================================================================
    # PLATFORM
    # =========================================================================

    def _subreddit(self, subreddit_name: Optional[str]) -> str:
        return subreddit_name or self.settings.default_subreddit

    async def set_flair_for_group(self, group_id: str, username: str,
                                  subreddit_name: Optional[str] = None) -> FlairBadge:
        """
        Set the user's Reality Index badge from the group's fragmentation.

        Raises:
            GroupNotFoundError: If the group has no logs
            ComputationError: If the scorer fails
            RedditServiceError: If the platform rejects the flair
        """
        logger.info(f"🔮 Initiating flair sync for group {group_id}")
        entries = await self._load_entries(group_id)
        result = self.analyze(entries)
        badge = build_flair(result.fragmentation, self.settings)

        subreddit = self._subreddit(subreddit_name)
        await self.reddit.set_user_flair(subreddit, username, badge.text, badge.background_color)

        logger.info(
            f"✅ Flair synced for {username} in {subreddit}: "
            f"text=\"{badge.text}\", color={badge.background_color}, band={badge.band.value}"
        )
        return badge

    async def create_app_post(self, subreddit_name: Optional[str] = None) -> Dict[str, Any]:
        subreddit = self._subreddit(subreddit_name)
        post = await self.reddit.submit_post(
            subreddit,
            title=APP_POST_TITLE,
            text="Log your reality and see how far the group has drifted apart.",
        )
        logger.info(f"✅ App post {post.get('id')} created in r/{subreddit}")
        return post

    async def share_group(self, group_id: str, subreddit_name: Optional[str] = None) -> Dict[str, Any]:
        logger.info(f"📢 Sharing group {group_id}")
        post = await self.reddit.submit_post(
            self._subreddit(subreddit_name),
            title=SHARE_POST_TITLE,
            text=f"Join our reality monitoring group with UUID: {group_id}",
        )
        logger.info(f"✅ Share post {post.get('id')} created")
        return post

    async def collect_entries_for_date(self, date: str) -> List[Any]:
        """Entries of every group for one date"""
        entries: List[Any] = []
        async for group_id in self.repository.iter_groups():
            logs = await self.repository.get_logs(group_id, date)
            if logs:
                entries.extend(logs)
        return entries

    async def post_daily_report(self, date: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Post the day's cross-group report.

        Returns:
            The created post, or None when there were no logs that day

        Raises:
            InvalidReportDateError: If date is given but cannot be parsed
        """
        if date is None:
            date = utc_today()
        else:
            parsed = to_iso_date(date)
            if parsed is None:
                raise InvalidReportDateError(date)
            date = parsed
        entries = await self.collect_entries_for_date(date)
        if not entries:
            logger.info(f"No logs for {date}, skipping report")
            return None

        result = self.analyze(entries)
        title = f"Daily Reality Report: {date}"
        body = (
            f"The multiverse stabilized at index {format_index(result.fragmentation)}! "
            f"Consensus: {result.consensus_text}. "
            f"{result.sample_count} realities logged across the community today."
        )
        post = await self.reddit.submit_post(self.settings.report_subreddit, title=title, text=body)
        logger.info(f"✅ Daily report for {date} posted")
        return post

    async def list_reports(self, limit: int = 50) -> List[Dict[str, Any]]:
        return await self.reddit.get_hot_posts(self.settings.report_subreddit, limit=limit)
