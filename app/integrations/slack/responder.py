"""
Slack response_url Responder

Sends ephemeral replies back to the user who triggered a shortcut or slash
command. This is the fallback channel when DM delivery fails.
"""

import asyncio
import logging
from typing import Protocol

from slack_sdk.webhook import WebhookClient

logger = logging.getLogger(__name__)


class Responder(Protocol):
    """Anything that can answer the requester privately."""

    async def respond(self, text: str) -> None: ...


class ResponseUrlResponder:
    """Responder backed by the interaction payload's response_url."""

    def __init__(self, response_url: str, client: WebhookClient | None = None):
        self.response_url = response_url
        self.client = client or WebhookClient(response_url)

    async def respond(self, text: str) -> None:
        response = await asyncio.to_thread(
            self.client.send,
            text=text,
            response_type="ephemeral",
        )
        if response.status_code != 200:
            raise RuntimeError(
                f"response_url rejected message: {response.status_code} {response.body}"
            )
        logger.debug("Sent ephemeral response")
