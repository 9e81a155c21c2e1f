"""
Tests for retrieval-augmented search over archived summaries.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from app.ai_core.llm import TextGenerator
from app.ai_core.prompts.query import SEARCH_QUERY_PREFIX, SEARCH_SYSTEM_PROMPT
from app.ai_core.search import SummarySearcher
from app.integrations.github import GitHubObjectStore
from app.models.results import SearchError

DOCUMENTS = [
    {
        "path": "summaries/2024-01-15/C1_1700000000_000100.md",
        "locator": "https://github.com/acme/thread-archive/blob/main/summaries/a.md",
        "metadata": {"fileName": "C1_1700000000_000100_Alice_Bob", "participants": "Alice,Bob"},
        "content": "# 스레드 요약\n\n배포 일정은 금요일로 확정했습니다.",
    },
    {
        "path": "summaries/2024-01-16/C2_1700000500_000100.md",
        "locator": "https://github.com/acme/thread-archive/blob/main/summaries/b.md",
        "metadata": {"fileName": "C2_1700000500_000100_Carol", "participants": "Carol"},
        "content": "# 스레드 요약\n\n점심 메뉴 논의.",
    },
]


@pytest.fixture
def kb_settings(settings):
    return settings.model_copy(update={"knowledge_base_path": "summaries"})


@pytest.fixture
def generator():
    generator = AsyncMock(spec=TextGenerator)
    generator.generate.return_value = "금요일에 배포합니다. (문서 1)"
    return generator


@pytest.fixture
def store():
    store = MagicMock(spec=GitHubObjectStore)
    store.list_documents = AsyncMock(return_value=DOCUMENTS)
    return store


@pytest.mark.asyncio
async def test_unconfigured_search_is_unavailable(settings, generator, store):
    searcher = SummarySearcher(settings, generator, store)

    result = await searcher.query("배포")

    assert not searcher.is_configured
    assert not result.available
    store.list_documents.assert_not_awaited()
    generator.generate.assert_not_awaited()


@pytest.mark.asyncio
async def test_query_answers_from_ranked_documents(kb_settings, generator, store):
    searcher = SummarySearcher(kb_settings, generator, store)

    result = await searcher.query("배포 일정")

    store.list_documents.assert_awaited_once_with("summaries")
    assert result.available
    assert result.answer == "금요일에 배포합니다. (문서 1)"
    assert len(result.sources) == 1
    assert result.sources[0].location == DOCUMENTS[0]["locator"]
    assert result.sources[0].score == 1.0

    prompt = generator.generate.await_args.args[0]
    assert prompt.startswith(f"질문: {SEARCH_QUERY_PREFIX}배포 일정")
    assert "--- 문서 1: summaries/2024-01-15/C1_1700000000_000100.md (관련도 1.00) ---" in prompt
    assert "점심 메뉴" not in prompt
    assert prompt.endswith("답변:")
    assert generator.generate.await_args.kwargs["system_instruction"] == SEARCH_SYSTEM_PROMPT


@pytest.mark.asyncio
async def test_all_documents_used_when_nothing_matches(kb_settings, generator, store):
    searcher = SummarySearcher(kb_settings, generator, store)

    result = await searcher.query("보안 감사")

    assert len(result.sources) == 2
    assert all(source.score == 0.0 for source in result.sources)


@pytest.mark.asyncio
async def test_empty_knowledge_base(kb_settings, generator, store):
    store.list_documents.return_value = []
    searcher = SummarySearcher(kb_settings, generator, store)

    result = await searcher.query("배포")

    assert result.available
    assert result.answer == ""
    assert result.sources == []
    generator.generate.assert_not_awaited()


@pytest.mark.asyncio
async def test_retrieval_failure_raises_search_error(kb_settings, generator, store):
    store.list_documents.side_effect = RuntimeError("Bad credentials")
    searcher = SummarySearcher(kb_settings, generator, store)

    with pytest.raises(SearchError, match="Bad credentials"):
        await searcher.query("배포")


@pytest.mark.asyncio
async def test_generation_failure_raises_search_error(kb_settings, generator, store):
    generator.generate.side_effect = RuntimeError("rate limited")
    searcher = SummarySearcher(kb_settings, generator, store)

    with pytest.raises(SearchError, match="rate limited"):
        await searcher.query("배포")


def test_relevance_is_normalized_and_sorted():
    scored = SummarySearcher.compute_document_relevance("Carol 점심", DOCUMENTS)

    assert scored[0][0] is DOCUMENTS[1]
    assert scored[0][1] == 1.0
    assert scored[1][1] == 0.0


def test_relevance_ignores_stop_words():
    scored = SummarySearcher.compute_document_relevance("the and", DOCUMENTS)

    assert [score for _, score in scored] == [0.0, 0.0]


def test_snippets_are_bounded():
    long_doc = dict(DOCUMENTS[0], content="가" * 500)

    assert SummarySearcher._snippet(long_doc["content"]) == "가" * 200 + "..."
