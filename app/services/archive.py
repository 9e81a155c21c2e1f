"""
Archive Sink Service

Persists rendered summary documents under a deterministic key:
    summaries/<YYYY-MM-DD>/<channel_id>_<thread_ts with "." -> "_">.md
The date is the UTC archival date, so each thread has one location per day.
"""

import logging
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Union

from app.integrations.github import GitHubObjectStore
from app.models.results import ArchiveError

logger = logging.getLogger(__name__)

SUMMARY_KEY_ROOT = "summaries"


class ArchiveSink:
    """Stores summary documents in the object store."""

    def __init__(self, store: GitHubObjectStore):
        self.object_store = store

    @staticmethod
    def generate_key(
        channel_id: str, thread_ts: str, archived_on: Union[date, datetime]
    ) -> str:
        """
        Build the archive key for a thread.

        Args:
            channel_id: Slack channel ID
            thread_ts: Thread root timestamp
            archived_on: Archival date; datetimes are converted to UTC first

        Returns:
            e.g. "summaries/2024-01-15/C1_1700000000_000100.md"
        """
        if isinstance(archived_on, datetime):
            if archived_on.tzinfo is not None:
                archived_on = archived_on.astimezone(timezone.utc)
            archived_on = archived_on.date()
        timestamp = thread_ts.replace(".", "_")
        return f"{SUMMARY_KEY_ROOT}/{archived_on.isoformat()}/{channel_id}_{timestamp}.md"

    @staticmethod
    def generate_file_name(channel_id: str, thread_ts: str, participants: List[str]) -> str:
        """Readable title slug: channel, ts and up to three participants."""
        timestamp = thread_ts.replace(".", "_")
        if len(participants) > 3:
            participant_str = f"{'_'.join(participants[:3])}_외{len(participants) - 3}명"
        else:
            participant_str = "_".join(participants)
        return f"{channel_id}_{timestamp}_{participant_str}"

    async def store(
        self,
        key: str,
        content: str,
        content_type: str = "text/markdown",
        metadata: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Store a document and return its locator.

        Raises:
            ArchiveError: If the object store rejects the write
        """
        try:
            locator = await self.object_store.put(key, content, content_type, metadata or {})
        except Exception as e:
            logger.error(f"Failed to archive {key}: {e}")
            raise ArchiveError(f"요약 문서 저장 중 오류 발생: {str(e)}") from e

        logger.info(f"Archived summary at {locator}")
        return locator

    async def load(self, key: str) -> str:
        """
        Read back a stored document body.

        Raises:
            ArchiveError: If the key cannot be read
        """
        try:
            return await self.object_store.get(key)
        except Exception as e:
            logger.error(f"Failed to load {key}: {e}")
            raise ArchiveError(f"요약 문서 조회 중 오류 발생: {str(e)}") from e

    def locator_url(self, key: str) -> str:
        return self.object_store.locator_url(key)
