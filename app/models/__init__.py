# Shared data models
from app.models.thread import (
    ThreadMessage,
    ThreadMessageSet,
    UserDirectoryEntry,
    SummaryDocument,
)
from app.models.results import (
    ErrorKind,
    PipelineError,
    ValidationError,
    CollectionError,
    SummarizationError,
    ArchiveError,
    DeliveryError,
    SearchError,
    StageResult,
    PipelineState,
    PipelineOutcome,
    PipelineResult,
)
from app.models.api_responses import SearchResult, SearchSource, SlackAck

__all__ = [
    "ThreadMessage",
    "ThreadMessageSet",
    "UserDirectoryEntry",
    "SummaryDocument",
    "ErrorKind",
    "PipelineError",
    "ValidationError",
    "CollectionError",
    "SummarizationError",
    "ArchiveError",
    "DeliveryError",
    "SearchError",
    "StageResult",
    "PipelineState",
    "PipelineOutcome",
    "PipelineResult",
    "SearchResult",
    "SearchSource",
    "SlackAck",
]
