"""
Utility package exports
"""

from app.utils.helpers import (
    format_korean_datetime,
    format_slack_timestamp,
    truncate_for_slack,
    TRUNCATION_MARKER,
)

__all__ = ["format_korean_datetime", "format_slack_timestamp", "truncate_for_slack", "TRUNCATION_MARKER"]
