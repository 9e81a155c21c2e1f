"""
Thread Summarization Module

Turns a rendered thread transcript into an AI summary. Summaries use a lower
temperature than free chat so repeated calls keep a consistent tone.
"""

import logging
from typing import List

from app.ai_core.llm import TextGenerator
from app.ai_core.prompts.summary import SUMMARY_SYSTEM_PROMPT, create_summary_prompt
from app.config import Settings
from app.models.results import SummarizationError

logger = logging.getLogger(__name__)


class ThreadSummarizer:
    """Summarization client for collected Slack threads."""

    def __init__(self, settings: Settings, generator: TextGenerator):
        self.generator = generator
        self.temperature = settings.summary_temperature
        self.max_tokens = settings.summary_max_tokens

    async def summarize(
        self, rendered_text: str, participants: List[str], message_count: int
    ) -> str:
        """
        Summarize a thread.

        Args:
            rendered_text: Transcript from SummaryFormatter.render_for_model
            participants: Distinct participant display names
            message_count: Number of collected messages

        Returns:
            Raw summary text from the model

        Raises:
            SummarizationError: If the model call fails or returns no text
        """
        prompt = create_summary_prompt(rendered_text, participants, message_count)

        try:
            summary = await self.generator.generate(
                prompt,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system_instruction=SUMMARY_SYSTEM_PROMPT,
            )
        except Exception as e:
            logger.error(f"Error generating summary: {str(e)}", exc_info=True)
            raise SummarizationError(f"AI 요약 생성 중 오류 발생: {str(e)}") from e

        if not summary or not summary.strip():
            raise SummarizationError("AI 응답에서 요약 내용을 찾을 수 없습니다.")

        logger.info(
            f"Generated summary for {message_count} messages "
            f"({len(participants)} participants, {len(summary)} chars)"
        )
        return summary
