"""
Thread Collector Service

Fetches a Slack thread and normalizes it into a ThreadMessageSet:
- Drops system, bot and trigger-request messages
- Resolves display names through a per-call user directory cache
- Renders timestamps for humans while keeping the raw ts
"""

import logging
from typing import Any, Dict, List, Optional

from app.config import Settings
from app.integrations.slack import SlackClient
from app.models.results import CollectionError
from app.models.thread import ThreadMessage, ThreadMessageSet, UserDirectoryEntry
from app.utils.helpers import format_slack_timestamp

logger = logging.getLogger(__name__)


class UserDirectoryCache:
    """
    Memoized users.info lookups for one collection run.

    Failed lookups are cached as negative entries so a user is looked up at
    most once per run.
    """

    def __init__(self, slack_client: SlackClient):
        self.slack_client = slack_client
        self._entries: Dict[str, UserDirectoryEntry] = {}

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def lookup(self, user_id: str) -> UserDirectoryEntry:
        entry = self._entries.get(user_id)
        if entry is not None:
            return entry

        try:
            user = await self.slack_client.lookup_user(user_id)
        except Exception as e:
            logger.warning(f"User lookup failed ({user_id}): {e}")
            user = None

        display_name = self._display_name(user)
        if display_name:
            entry = UserDirectoryEntry(user_id=user_id, display_name=display_name, found=True)
        else:
            entry = UserDirectoryEntry.not_found(user_id)

        self._entries[user_id] = entry
        return entry

    async def resolve(self, user_id: str) -> str:
        """Display name for `user_id`, falling back to the raw ID."""
        entry = await self.lookup(user_id)
        return entry.resolve()

    @staticmethod
    def _display_name(user: Optional[Dict[str, Any]]) -> Optional[str]:
        if not user:
            return None
        profile = user.get("profile") or {}
        return user.get("real_name") or profile.get("display_name") or None


class ThreadCollector:
    """Collects and filters the messages of one thread."""

    def __init__(self, settings: Settings, slack_client: SlackClient):
        self.slack_client = slack_client
        self.trigger_keyword = settings.trigger_keyword
        self.timezone = settings.timezone

    async def collect(
        self, channel_id: str, thread_ts: str, bot_user_id: Optional[str] = None
    ) -> ThreadMessageSet:
        """
        Collect a thread into a ThreadMessageSet.

        Args:
            channel_id: Slack channel ID
            thread_ts: Thread root timestamp
            bot_user_id: The bot's own user ID; its messages are excluded

        Returns:
            ThreadMessageSet in source order. A thread holding only the
            trigger request yields an empty set.

        Raises:
            CollectionError: If retrieval fails or returns no message container
        """
        try:
            raw_messages = await self.slack_client.fetch_thread_replies(channel_id, thread_ts)
        except Exception as e:
            logger.error(f"Thread retrieval failed for {channel_id}/{thread_ts}: {e}")
            raise CollectionError("스레드 메시지를 수집하는 중 오류가 발생했습니다.") from e

        if raw_messages is None:
            raise CollectionError("스레드 메시지를 가져올 수 없습니다.")

        directory = UserDirectoryCache(self.slack_client)
        messages: List[ThreadMessage] = []

        for raw in raw_messages:
            if self._is_excluded(raw, bot_user_id):
                continue

            user_id = raw["user"]
            ts = raw.get("ts", "")
            messages.append(
                ThreadMessage(
                    author_id=user_id,
                    display_name=await directory.resolve(user_id),
                    text=raw["text"],
                    timestamp=ts,
                    rendered_time=format_slack_timestamp(ts, self.timezone),
                )
            )

        thread = ThreadMessageSet(
            channel_id=channel_id, thread_ts=thread_ts, messages=tuple(messages)
        )
        logger.info(
            f"Collected {thread.message_count}/{len(raw_messages)} messages from "
            f"{channel_id}/{thread_ts} ({len(thread.participants)} participants, "
            f"{len(directory)} user lookups)"
        )
        return thread

    def _is_excluded(self, raw: Dict[str, Any], bot_user_id: Optional[str]) -> bool:
        # System/subtype messages and messages without author or text
        if not raw.get("user") or not raw.get("text") or raw.get("subtype"):
            return True
        if bot_user_id and raw["user"] == bot_user_id:
            return True
        return self.is_summary_request(raw["text"], bot_user_id)

    def is_summary_request(self, text: str, bot_user_id: Optional[str] = None) -> bool:
        """
        True if the message is the trigger that asked for the summary.

        Either the whole message is the trigger keyword, or it mentions the bot
        and contains the keyword anywhere.
        """
        if text.strip() == self.trigger_keyword:
            return True
        if bot_user_id and f"<@{bot_user_id}>" in text and self.trigger_keyword in text:
            return True
        return False
