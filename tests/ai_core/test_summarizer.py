"""
Tests for the text generator, the thread summarizer and the chat assistant.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from app.ai_core.chat import ChatAssistant
from app.ai_core.llm import EmptyResponseError, TextGenerator
from app.ai_core.prompts.chat import CHAT_SYSTEM_PROMPT
from app.ai_core.prompts.summary import SUMMARY_SYSTEM_PROMPT
from app.ai_core.summarization import ThreadSummarizer
from app.models.results import ErrorKind, SummarizationError

TRANSCRIPT = "스레드 요약 요청\n참여자: Alice, Bob\n메시지 수: 3개\n\n대화 내용:\n[t] Alice: hi\n"


def _mock_llm(content):
    llm = MagicMock()
    llm.bind.return_value.ainvoke = AsyncMock(return_value=AIMessage(content=content))
    return llm


class TestTextGenerator:
    @pytest.mark.asyncio
    async def test_generate_builds_messages_and_binds_params(self, settings):
        llm = _mock_llm("  요약 결과  ")
        generator = TextGenerator(settings, llm=llm)

        text = await generator.generate(
            "prompt", max_tokens=100, temperature=0.1, system_instruction="system"
        )

        assert text == "요약 결과"
        llm.bind.assert_called_once_with(max_tokens=100, temperature=0.1)
        messages = llm.bind.return_value.ainvoke.await_args.args[0]
        assert isinstance(messages[0], SystemMessage)
        assert messages[0].content == "system"
        assert isinstance(messages[1], HumanMessage)
        assert messages[1].content == "prompt"

    @pytest.mark.asyncio
    async def test_generate_without_system_instruction(self, settings):
        llm = _mock_llm("ok")
        generator = TextGenerator(settings, llm=llm)

        await generator.generate("prompt")

        messages = llm.bind.return_value.ainvoke.await_args.args[0]
        assert len(messages) == 1

    @pytest.mark.asyncio
    async def test_list_content_parts_are_joined(self, settings):
        llm = _mock_llm(["첫 부분 ", {"type": "text", "text": "둘째 부분"}, {"type": "image"}])
        generator = TextGenerator(settings, llm=llm)

        assert await generator.generate("prompt") == "첫 부분 둘째 부분"

    @pytest.mark.asyncio
    async def test_empty_response_raises(self, settings):
        generator = TextGenerator(settings, llm=_mock_llm("   "))

        with pytest.raises(EmptyResponseError):
            await generator.generate("prompt")


class TestThreadSummarizer:
    @pytest.mark.asyncio
    async def test_summarize_uses_summary_settings(self, settings):
        generator = AsyncMock(spec=TextGenerator)
        generator.generate.return_value = "## 주요 논의\n- 배포"
        summarizer = ThreadSummarizer(settings, generator)

        summary = await summarizer.summarize(TRANSCRIPT, ["Alice", "Bob"], 3)

        assert summary == "## 주요 논의\n- 배포"
        prompt = generator.generate.await_args.args[0]
        kwargs = generator.generate.await_args.kwargs
        assert "참여자: Alice, Bob" in prompt
        assert "메시지 수: 3개" in prompt
        assert "[t] Alice: hi" in prompt
        assert kwargs == {
            "max_tokens": 4096,
            "temperature": 0.3,
            "system_instruction": SUMMARY_SYSTEM_PROMPT,
        }

    @pytest.mark.asyncio
    async def test_model_failure_becomes_summarization_error(self, settings):
        generator = AsyncMock(spec=TextGenerator)
        generator.generate.side_effect = TimeoutError("upstream timeout")
        summarizer = ThreadSummarizer(settings, generator)

        with pytest.raises(SummarizationError) as exc_info:
            await summarizer.summarize(TRANSCRIPT, ["Alice"], 1)

        assert exc_info.value.kind == ErrorKind.SUMMARIZATION
        assert "upstream timeout" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_blank_summary_becomes_summarization_error(self, settings):
        generator = AsyncMock(spec=TextGenerator)
        generator.generate.return_value = "  \n "
        summarizer = ThreadSummarizer(settings, generator)

        with pytest.raises(SummarizationError, match="요약 내용을 찾을 수 없습니다"):
            await summarizer.summarize(TRANSCRIPT, ["Alice"], 1)

    @pytest.mark.asyncio
    async def test_empty_response_error_is_wrapped(self, settings):
        summarizer = ThreadSummarizer(settings, TextGenerator(settings, llm=_mock_llm("")))

        with pytest.raises(SummarizationError):
            await summarizer.summarize(TRANSCRIPT, ["Alice"], 1)


@pytest.mark.asyncio
async def test_chat_assistant_uses_chat_settings(settings):
    generator = AsyncMock(spec=TextGenerator)
    generator.generate.return_value = "안녕하세요!"
    assistant = ChatAssistant(settings, generator)

    answer = await assistant.chat("안녕?")

    assert answer == "안녕하세요!"
    generator.generate.assert_awaited_once_with(
        "안녕?", max_tokens=2048, temperature=0.7, system_instruction=CHAT_SYSTEM_PROMPT
    )
