"""General-purpose assistant behind the /chat command."""

import logging

from app.ai_core.llm import TextGenerator
from app.ai_core.prompts.chat import CHAT_SYSTEM_PROMPT
from app.config import Settings

logger = logging.getLogger(__name__)


class ChatAssistant:
    def __init__(self, settings: Settings, generator: TextGenerator):
        self.generator = generator
        self.temperature = settings.chat_temperature
        self.max_tokens = settings.chat_max_tokens

    async def chat(self, message: str) -> str:
        logger.info(f"Answering chat message ({len(message)} chars)")
        return await self.generator.generate(
            message,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system_instruction=CHAT_SYSTEM_PROMPT,
        )
