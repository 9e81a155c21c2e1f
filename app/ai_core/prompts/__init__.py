"""Prompts package."""

from app.ai_core.prompts.summary import (
    SUMMARY_SYSTEM_PROMPT,
    SUMMARY_USER_PROMPT_TEMPLATE,
    create_summary_prompt,
)
from app.ai_core.prompts.query import (
    SEARCH_QUERY_PREFIX,
    SEARCH_SYSTEM_PROMPT,
    create_search_prompt,
)
from app.ai_core.prompts.chat import CHAT_SYSTEM_PROMPT

__all__ = [
    "SUMMARY_SYSTEM_PROMPT",
    "SUMMARY_USER_PROMPT_TEMPLATE",
    "create_summary_prompt",
    "SEARCH_QUERY_PREFIX",
    "SEARCH_SYSTEM_PROMPT",
    "create_search_prompt",
    "CHAT_SYSTEM_PROMPT",
]
