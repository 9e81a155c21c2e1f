"""Shared fixtures for the thread summary test suite."""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from app.config import Settings
from app.models.thread import ThreadMessage, ThreadMessageSet


@pytest.fixture
def settings():
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        slack_bot_token="xoxb-test",
        slack_signing_secret="test-signing-secret",
        github_token="ghp-test",
        github_repo_owner="acme",
        github_repo_name="thread-archive",
        timezone="Asia/Seoul",
        trigger_keyword="요약",
    )


@pytest.fixture
def sample_thread():
    """Three messages from two participants."""
    return ThreadMessageSet(
        channel_id="C1",
        thread_ts="1700000000.000100",
        messages=[
            ThreadMessage(
                author_id="U1",
                display_name="Alice",
                text="배포 일정 어떻게 할까요?",
                timestamp="1700000000.000100",
                rendered_time="2023. 11. 15. 오전 07:13",
            ),
            ThreadMessage(
                author_id="U2",
                display_name="Bob",
                text="금요일 오후가 좋겠습니다. <@U1> 괜찮으세요?",
                timestamp="1700000060.000200",
                rendered_time="2023. 11. 15. 오전 07:14",
            ),
            ThreadMessage(
                author_id="U1",
                display_name="Alice",
                text="좋아요, 금요일로 확정합니다.",
                timestamp="1700000120.000300",
                rendered_time="2023. 11. 15. 오전 07:15",
            ),
        ],
    )
