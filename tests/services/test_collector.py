"""
Tests for the Thread Collector and its per-run user directory cache.
"""

import pytest
from unittest.mock import AsyncMock

from app.integrations.slack.client import SlackClient
from app.models.results import CollectionError
from app.services.collector import ThreadCollector, UserDirectoryCache

BOT_ID = "UBOT"

USERS = {
    "U1": {"real_name": "Alice", "profile": {"display_name": "alice"}},
    "U2": {"real_name": "", "profile": {"display_name": "bob"}},
}

MOCK_THREAD = [
    {"ts": "1700000000.000100", "user": "U1", "text": "배포 일정 어떻게 할까요?"},
    {"ts": "1700000010.000100", "user": "U2", "text": "금요일이 좋겠습니다"},
    {"ts": "1700000020.000100", "user": BOT_ID, "text": "이전 요약입니다"},
    {"ts": "1700000030.000100", "subtype": "channel_join", "user": "U3", "text": "joined"},
    {"ts": "1700000040.000100", "user": "U3"},
    {"ts": "1700000050.000100", "text": "no author"},
    {"ts": "1700000060.000100", "user": "U3", "text": "  요약  "},
    {"ts": "1700000070.000100", "user": "U2", "text": f"<@{BOT_ID}> 요약 부탁해요"},
    {"ts": "1700000080.000100", "user": "U1", "text": "좋아요, 확정합니다"},
]


async def _lookup_user(user_id):
    if user_id in USERS:
        return USERS[user_id]
    raise RuntimeError("user_not_found")


@pytest.fixture
def slack_client():
    client = AsyncMock(spec=SlackClient)
    client.fetch_thread_replies.return_value = MOCK_THREAD
    client.lookup_user.side_effect = _lookup_user
    return client


@pytest.fixture
def collector(settings, slack_client):
    return ThreadCollector(settings, slack_client)


@pytest.mark.asyncio
async def test_collect_filters_and_preserves_order(collector, slack_client):
    thread = await collector.collect("C1", "1700000000.000100", BOT_ID)

    slack_client.fetch_thread_replies.assert_awaited_once_with("C1", "1700000000.000100")
    assert [msg.text for msg in thread.messages] == [
        "배포 일정 어떻게 할까요?",
        "금요일이 좋겠습니다",
        "좋아요, 확정합니다",
    ]
    assert thread.message_count == 3
    assert thread.channel_id == "C1"
    assert thread.thread_ts == "1700000000.000100"


@pytest.mark.asyncio
async def test_collect_resolves_display_names(collector):
    thread = await collector.collect("C1", "1700000000.000100", BOT_ID)

    # real_name first, then profile.display_name
    assert [msg.display_name for msg in thread.messages] == ["Alice", "bob", "Alice"]
    assert thread.participants == ["Alice", "bob"]


@pytest.mark.asyncio
async def test_collect_keeps_raw_timestamp_and_renders_local_time(collector):
    thread = await collector.collect("C1", "1700000000.000100", BOT_ID)

    first = thread.messages[0]
    assert first.timestamp == "1700000000.000100"
    # 2023-11-14 22:13:20 UTC is 07:13 next morning in Seoul
    assert first.rendered_time == "2023. 11. 15. 오전 07:13"


@pytest.mark.asyncio
async def test_thread_with_only_trigger_is_empty(collector, slack_client):
    slack_client.fetch_thread_replies.return_value = [
        {"ts": "1700000000.000100", "user": "U1", "text": "요약"},
    ]

    thread = await collector.collect("C1", "1700000000.000100", BOT_ID)

    assert thread.message_count == 0
    assert thread.is_empty
    assert thread.participants == []


@pytest.mark.asyncio
async def test_bare_trigger_from_non_bot_user_is_excluded(collector, slack_client):
    slack_client.fetch_thread_replies.return_value = [
        {"ts": "1", "user": "U1", "text": "요약"},
        {"ts": "2", "user": "U2", "text": "요약 말고 다른 얘기"},
    ]

    thread = await collector.collect("C1", "1", bot_user_id=None)

    assert [msg.text for msg in thread.messages] == ["요약 말고 다른 얘기"]


@pytest.mark.asyncio
async def test_mention_without_keyword_is_kept(collector, slack_client):
    slack_client.fetch_thread_replies.return_value = [
        {"ts": "1", "user": "U1", "text": f"<@{BOT_ID}> 안녕하세요"},
    ]

    thread = await collector.collect("C1", "1", BOT_ID)

    assert thread.message_count == 1


@pytest.mark.asyncio
async def test_failed_lookup_is_cached_and_falls_back_to_id(collector, slack_client):
    slack_client.fetch_thread_replies.return_value = [
        {"ts": "1", "user": "U9", "text": "첫 번째"},
        {"ts": "2", "user": "U9", "text": "두 번째"},
    ]

    thread = await collector.collect("C1", "1", BOT_ID)

    assert [msg.display_name for msg in thread.messages] == ["U9", "U9"]
    assert thread.participants == ["U9"]
    slack_client.lookup_user.assert_awaited_once_with("U9")


@pytest.mark.asyncio
async def test_cache_is_not_shared_between_runs(collector, slack_client):
    await collector.collect("C1", "1700000000.000100", BOT_ID)
    await collector.collect("C1", "1700000000.000100", BOT_ID)

    looked_up = [call.args[0] for call in slack_client.lookup_user.await_args_list]
    assert looked_up == ["U1", "U2", "U1", "U2"]


@pytest.mark.asyncio
async def test_retrieval_failure_raises_collection_error(collector, slack_client):
    slack_client.fetch_thread_replies.side_effect = RuntimeError("channel_not_found")

    with pytest.raises(CollectionError):
        await collector.collect("C1", "1", BOT_ID)


@pytest.mark.asyncio
async def test_missing_message_container_raises_collection_error(collector, slack_client):
    slack_client.fetch_thread_replies.return_value = None

    with pytest.raises(CollectionError):
        await collector.collect("C1", "1", BOT_ID)


@pytest.mark.asyncio
async def test_user_directory_cache_negative_entry():
    slack_client = AsyncMock(spec=SlackClient)
    slack_client.lookup_user.return_value = None
    cache = UserDirectoryCache(slack_client)

    first = await cache.lookup("U404")
    second = await cache.lookup("U404")

    assert first is second
    assert not first.found
    assert first.resolve() == "U404"
    assert "U404" in cache
    assert len(cache) == 1
    slack_client.lookup_user.assert_awaited_once()


@pytest.mark.asyncio
async def test_collected_thread_is_immutable(collector):
    thread = await collector.collect("C1", "1700000000.000100", BOT_ID)

    assert isinstance(thread.messages, tuple)
    with pytest.raises(AttributeError):
        thread.messages.append(thread.messages[0])
