"""
Text Generation Module

Single entry point to the language model: prompt in, text out.
Uses the gen_ai_hub proxy ChatOpenAI through langchain.
"""

import logging
from typing import Any, Optional

from gen_ai_hub.proxy.langchain.openai import ChatOpenAI
from gen_ai_hub.proxy.core.proxy_clients import get_proxy_client
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from app.config import Settings

logger = logging.getLogger(__name__)


class EmptyResponseError(ValueError):
    """Raised when the model response carries no usable text."""

    pass


class TextGenerator:
    """Wraps a langchain chat model behind `generate()`."""

    def __init__(self, settings: Settings, llm: Optional[BaseChatModel] = None):
        if llm is None:
            # Initialize ChatOpenAI with gen_ai_hub proxy
            llm = ChatOpenAI(
                proxy_model_name=settings.openai_model,
                proxy_client=get_proxy_client("gen-ai-hub"),
                temperature=settings.summary_temperature,
            )
        self.llm = llm
        self.model = settings.openai_model

    async def generate(
        self,
        prompt: str,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        system_instruction: Optional[str] = None,
    ) -> str:
        """
        Generate text for a single prompt.

        Args:
            prompt: User message content
            max_tokens: Completion token limit
            temperature: Sampling temperature
            system_instruction: Optional system message

        Returns:
            Generated text, stripped

        Raises:
            EmptyResponseError: If the response has no text
        """
        messages = []
        if system_instruction:
            messages.append(SystemMessage(content=system_instruction))
        messages.append(HumanMessage(content=prompt))

        bound = self.llm.bind(max_tokens=max_tokens, temperature=temperature)
        logger.debug(
            f"Invoking {self.model} (max_tokens={max_tokens}, temperature={temperature})"
        )
        response = await bound.ainvoke(messages)

        text = self._extract_text(getattr(response, "content", None))
        if not text:
            raise EmptyResponseError("LLM response contained no text")
        return text

    @staticmethod
    def _extract_text(content: Any) -> str:
        """Accept plain string content or a list of content parts."""
        if isinstance(content, str):
            return content.strip()
        if isinstance(content, list):
            parts = []
            for part in content:
                if isinstance(part, str):
                    parts.append(part)
                elif isinstance(part, dict) and part.get("type") == "text":
                    parts.append(part.get("text", ""))
            return "".join(parts).strip()
        raise EmptyResponseError(f"Unparseable LLM response content: {type(content).__name__}")
