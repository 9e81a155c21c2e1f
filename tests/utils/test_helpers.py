"""
Unit Tests for Utility Functions

Tests shared helper functions.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from datetime import datetime

from app.utils.helpers import (
    TRUNCATION_MARKER,
    format_korean_datetime,
    format_slack_timestamp,
    truncate_for_slack,
)


def test_format_korean_datetime_afternoon():
    """Test afternoon hours use 오후 and a 12-hour clock."""
    assert format_korean_datetime(datetime(2024, 1, 15, 15, 30)) == "2024. 01. 15. 오후 03:30"


def test_format_korean_datetime_midnight_and_noon():
    """Test midnight is 오전 12 and noon is 오후 12."""
    assert format_korean_datetime(datetime(2024, 1, 15, 0, 5)) == "2024. 01. 15. 오전 12:05"
    assert format_korean_datetime(datetime(2024, 1, 15, 12, 0)) == "2024. 01. 15. 오후 12:00"


def test_format_slack_timestamp_uses_timezone():
    """Test Slack ts conversion to Seoul time."""
    assert format_slack_timestamp("1700000000.000100") == "2023. 11. 15. 오전 07:13"
    assert format_slack_timestamp("1700000000.000100", "UTC") == "2023. 11. 14. 오후 10:13"


def test_format_slack_timestamp_invalid():
    """Test unparseable ts values are returned unchanged."""
    assert format_slack_timestamp("not-a-ts") == "not-a-ts"
    assert format_slack_timestamp("") == ""


def test_truncate_for_slack_short_text():
    """Test text within the limit is unchanged."""
    text = "a" * 3000
    assert truncate_for_slack(text) == text


def test_truncate_for_slack_long_text():
    """Test long text is cut and marked."""
    result = truncate_for_slack("a" * 3001)

    assert result == "a" * 2900 + TRUNCATION_MARKER


def test_truncate_for_slack_custom_limits():
    """Test custom limits and marker."""
    assert truncate_for_slack("abcdefghij", max_length=5, truncate_at=3, marker="~") == "abc~"
