"""
Service wiring for the API layer.

Settings are read once; every component receives them explicitly.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from app.ai_core.chat import ChatAssistant
from app.ai_core.llm import TextGenerator
from app.ai_core.search import SummarySearcher
from app.ai_core.summarization import ThreadSummarizer
from app.config import Settings, get_settings
from app.integrations.github import GitHubObjectStore
from app.integrations.slack import SlackClient
from app.services.archive import ArchiveSink
from app.services.collector import ThreadCollector
from app.services.formatter import SummaryFormatter
from app.services.pipeline import SummaryPipeline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BotServices:
    """Everything a Slack request handler needs."""

    settings: Settings
    slack_client: SlackClient
    formatter: SummaryFormatter
    pipeline: SummaryPipeline
    searcher: SummarySearcher
    assistant: ChatAssistant
    bot_user_id: Optional[str] = None


def build_services(settings: Settings, bot_user_id: Optional[str] = None) -> BotServices:
    """Construct all components from one Settings value."""
    slack_client = SlackClient(settings)
    formatter = SummaryFormatter(settings)
    generator = TextGenerator(settings)
    store = GitHubObjectStore(settings)

    pipeline = SummaryPipeline(
        collector=ThreadCollector(settings, slack_client),
        formatter=formatter,
        summarizer=ThreadSummarizer(settings, generator),
        archive=ArchiveSink(store),
        slack_client=slack_client,
    )

    return BotServices(
        settings=settings,
        slack_client=slack_client,
        formatter=formatter,
        pipeline=pipeline,
        searcher=SummarySearcher(settings, generator, store),
        assistant=ChatAssistant(settings, generator),
        bot_user_id=bot_user_id,
    )


# Lazy initialization to avoid import-time API clients
_services: Optional[BotServices] = None


async def get_services() -> BotServices:
    """Get the process-wide BotServices, building it on first use."""
    global _services
    if _services is None:
        services = build_services(get_settings())
        try:
            bot_user_id = await services.slack_client.fetch_bot_user_id()
        except Exception as e:
            logger.warning(f"Could not resolve bot user ID via auth.test: {e}")
            bot_user_id = None
        _services = replace(services, bot_user_id=bot_user_id)
    return _services
