"""
Slack API Client

Responsibilities:
- conversations.replies: Fetch a whole thread, root message included
- users.info: Resolve user display names
- conversations.open / chat.postMessage: Deliver summaries by DM
- conversations.info: Resolve channel names

slack_sdk's WebClient is synchronous, so every call runs in a worker thread.
"""

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError
from typing import List, Optional, Dict, Any
import asyncio
import logging

from app.config import Settings

logger = logging.getLogger(__name__)

REPLIES_PAGE_SIZE = 200


class SlackClient:
    """Thin async wrapper over the Slack Web API methods the bot needs."""

    def __init__(self, settings: Settings, client: Optional[WebClient] = None):
        self.client = client or WebClient(token=settings.slack_bot_token)
        self.settings = settings

    async def fetch_thread_replies(
        self, channel_id: str, thread_ts: str
    ) -> Optional[List[Dict[str, Any]]]:
        """
        Fetch all messages in a thread.

        Args:
            channel_id: Slack channel ID
            thread_ts: Thread root timestamp

        Returns:
            Raw message dictionaries including the root message, across all
            pages and in source order, or None when the first response carries
            no message container
        """
        try:
            logger.debug(f"Fetching thread replies for {channel_id}/{thread_ts}")

            raw_messages: Optional[List[Dict[str, Any]]] = None
            cursor: Optional[str] = None
            pages = 0

            while True:
                result = await asyncio.to_thread(
                    self.client.conversations_replies,
                    channel=channel_id,
                    ts=thread_ts,
                    inclusive=True,
                    limit=REPLIES_PAGE_SIZE,
                    cursor=cursor,
                )
                pages += 1

                page = result.get("messages")
                if page is None:
                    break
                raw_messages = (raw_messages or []) + list(page)

                cursor = (result.get("response_metadata") or {}).get("next_cursor")
                if not result.get("has_more") or not cursor:
                    break

            if raw_messages is not None:
                logger.debug(
                    f"Fetched {len(raw_messages)} messages from thread {thread_ts} "
                    f"in {pages} page(s)"
                )
            return raw_messages

        except SlackApiError as e:
            logger.error(f"Slack API error fetching thread {thread_ts}: {e.response['error']}")
            raise

    async def lookup_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Return the users.info `user` object, or None when absent."""
        result = await asyncio.to_thread(self.client.users_info, user=user_id)
        return result.get("user")

    async def open_direct_message(self, user_id: str) -> str:
        """Open (or reuse) a DM channel with the user and return its ID."""
        result = await asyncio.to_thread(self.client.conversations_open, users=user_id)
        channel = result.get("channel") or {}
        channel_id = channel.get("id")
        if not channel_id:
            raise ValueError(f"conversations.open returned no channel for {user_id}")
        return channel_id

    async def post_message(self, channel_id: str, text: str) -> Optional[str]:
        """Post a message and return its ts."""
        result = await asyncio.to_thread(
            self.client.chat_postMessage,
            channel=channel_id,
            text=text,
            mrkdwn=True,
        )
        logger.info(f"Posted message to {channel_id}")
        return result.get("ts")

    async def fetch_channel_info(self, channel_id: str) -> Optional[Dict[str, Any]]:
        """Return the conversations.info `channel` object, or None when absent."""
        result = await asyncio.to_thread(self.client.conversations_info, channel=channel_id)
        return result.get("channel")

    async def fetch_bot_user_id(self) -> Optional[str]:
        """The bot's own user ID from auth.test."""
        result = await asyncio.to_thread(self.client.auth_test)
        return result.get("user_id")
