"""
Prompts for Thread Summarization

The system prompt fixes the answer language and the four required elements;
the user prompt carries the participant list, message count and transcript.
"""

from textwrap import dedent
from typing import List

SUMMARY_SYSTEM_PROMPT = dedent(
    """
    당신은 슬랙 스레드 대화를 요약하는 전문가입니다.
    다음 가이드라인을 따라 요약해주세요:

    1. 한국어로 답변해주세요
    2. 주요 논점과 결론을 명확하게 정리해주세요
    3. 참여자별 핵심 의견을 구분해서 정리해주세요
    4. 결정사항이나 액션 아이템이 있다면 별도로 정리해주세요
    5. 전체적인 대화의 맥락과 흐름을 파악할 수 있도록 요약해주세요
    """
).strip()

SUMMARY_USER_PROMPT_TEMPLATE = dedent(
    """
    참여자: {participants}
    메시지 수: {message_count}개

    대화 내용:
    {conversation_content}
    """
).strip()


def create_summary_prompt(
    rendered_text: str, participants: List[str], message_count: int
) -> str:
    """Fill the summary user prompt."""
    return SUMMARY_USER_PROMPT_TEMPLATE.format(
        participants=", ".join(participants),
        message_count=message_count,
        conversation_content=rendered_text,
    )
