# Slack integration module
from app.integrations.slack.client import SlackClient
from app.integrations.slack.responder import Responder, ResponseUrlResponder

__all__ = ["SlackClient", "Responder", "ResponseUrlResponder"]
