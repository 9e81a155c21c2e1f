"""
Pipeline Result Models

Error taxonomy and tagged stage results for the summary pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Failure kinds a pipeline stage can report."""

    VALIDATION = "validation"
    COLLECTION = "collection"
    SUMMARIZATION = "summarization"
    ARCHIVE = "archive"
    DELIVERY = "delivery"


class PipelineError(Exception):
    """Base class for stage failures. Subclasses fix the `kind`."""

    kind: ErrorKind


class ValidationError(PipelineError):
    """Thread context is missing from the request. Not retried."""

    kind = ErrorKind.VALIDATION


class CollectionError(PipelineError):
    """Thread retrieval from Slack failed."""

    kind = ErrorKind.COLLECTION


class SummarizationError(PipelineError):
    """The LLM call failed or returned unusable output."""

    kind = ErrorKind.SUMMARIZATION


class ArchiveError(PipelineError):
    """Storing the summary document failed. Never aborts the pipeline."""

    kind = ErrorKind.ARCHIVE


class DeliveryError(PipelineError):
    """Posting the final notification to the requester failed."""

    kind = ErrorKind.DELIVERY


class SearchError(Exception):
    """Retrieval-augmented search over archived summaries failed."""

    pass


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Success payload or a tagged pipeline error."""

    value: Optional[T] = None
    error: Optional[PipelineError] = None

    @classmethod
    def success(cls, value: T) -> "StageResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: PipelineError) -> "StageResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None


class PipelineState(str, Enum):
    """States of one summary request."""

    VALIDATING = "validating"
    COLLECTING = "collecting"
    SUMMARIZING = "summarizing"
    PUBLISHING = "publishing"
    DONE = "done"
    FAILED = "failed"


class PipelineOutcome(str, Enum):
    """How a request ended, from the requester's point of view."""

    DELIVERED = "delivered"
    NO_REPLIES = "no_replies"
    FAILED = "failed"


@dataclass
class PipelineResult:
    """Result of one pipeline run."""

    state: PipelineState
    outcome: PipelineOutcome
    states: List[PipelineState] = field(default_factory=list)
    summary: Optional[str] = None
    archive_locator: Optional[str] = None
    notification: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.state == PipelineState.DONE
