"""
Thread Summary Models

Normalized view of one Slack thread and the summary artifact built from it.
"""

from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import List, Optional, Tuple


class ThreadMessage(BaseModel):
    """One authored message in a thread."""

    model_config = ConfigDict(frozen=True)

    author_id: str
    display_name: str  # Falls back to author_id when lookup fails
    text: str  # Raw body, Slack markup intact
    timestamp: str  # Slack ts, kept as a string to preserve precision
    rendered_time: str


class ThreadMessageSet(BaseModel):
    """All qualifying messages of one thread, in source arrival order."""

    model_config = ConfigDict(frozen=True)

    channel_id: str
    thread_ts: str
    messages: Tuple[ThreadMessage, ...] = ()

    @property
    def message_count(self) -> int:
        return len(self.messages)

    @property
    def participants(self) -> List[str]:
        """Distinct display names in first-seen order."""
        return list(dict.fromkeys(msg.display_name for msg in self.messages))

    @property
    def is_empty(self) -> bool:
        return not self.messages


class UserDirectoryEntry(BaseModel):
    """Cached user lookup result, positive or negative."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    display_name: Optional[str] = None
    found: bool = False

    @classmethod
    def not_found(cls, user_id: str) -> "UserDirectoryEntry":
        return cls(user_id=user_id, found=False)

    def resolve(self) -> str:
        return self.display_name if self.found and self.display_name else self.user_id


class SummaryDocument(BaseModel):
    """Output artifact of one pipeline run."""

    model_config = ConfigDict(frozen=True)

    thread: ThreadMessageSet
    ai_summary: str
    channel_label: str
    requested_by: str
    requested_at: datetime
