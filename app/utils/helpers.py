"""
Shared Utility Functions

Common helper functions used across multiple modules.
"""

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n\n...(내용이 잘렸습니다)"


def format_korean_datetime(value: datetime) -> str:
    """
    Render a datetime the way the ko-KR locale does with 2-digit fields.

    Examples:
        2024-01-15 15:30 -> "2024. 01. 15. 오후 03:30"
        2024-01-15 00:05 -> "2024. 01. 15. 오전 12:05"

    Args:
        value: Datetime already converted to the display timezone

    Returns:
        Locale-style date and time string
    """
    meridiem = "오전" if value.hour < 12 else "오후"
    hour = value.hour % 12 or 12
    return f"{value:%Y. %m. %d.} {meridiem} {hour:02d}:{value:%M}"


def format_slack_timestamp(ts: str, tz_name: str = "Asia/Seoul") -> str:
    """
    Convert a Slack message ts ("1700000000.000100") to a readable local time.

    Unparseable values are returned unchanged.
    """
    try:
        moment = datetime.fromtimestamp(float(ts), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        logger.debug(f"Cannot render Slack timestamp: {ts!r}")
        return ts
    return format_korean_datetime(moment.astimezone(ZoneInfo(tz_name)))


def truncate_for_slack(
    text: str,
    max_length: int = 3000,
    truncate_at: int = 2900,
    marker: str = TRUNCATION_MARKER,
) -> str:
    """
    Bound a response to Slack's presentation limit.

    Text longer than `max_length` is cut at `truncate_at` characters and the
    truncation marker is appended.
    """
    if len(text) <= max_length:
        return text
    return text[:truncate_at] + marker
