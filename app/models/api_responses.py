"""
API Response Models

Pydantic models for search results and Slack responses.
"""

from pydantic import BaseModel, Field
from typing import Optional, List


class SearchSource(BaseModel):
    """A retrieved document backing a search answer."""

    content: Optional[str] = Field(None, description="Relevant snippet from the document")
    location: Optional[str] = Field(None, description="Locator of the archived document")
    score: Optional[float] = Field(None, description="Relevance score (0.0-1.0)")


class SearchResult(BaseModel):
    """
    Result of a retrieval-augmented query.

    `available` is False when no knowledge base is configured.
    """

    available: bool = Field(True, description="Whether search is configured")
    answer: str = Field("", description="Generated answer")
    sources: List[SearchSource] = Field(default_factory=list)

    @classmethod
    def unavailable(cls) -> "SearchResult":
        return cls(available=False)


class SlackAck(BaseModel):
    """Immediate acknowledgement body for Slack commands."""

    response_type: str = Field("ephemeral", description="ephemeral or in_channel")
    text: str = Field("", description="Message text")
