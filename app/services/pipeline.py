"""
Thread Summary Pipeline Orchestrator

Full pipeline for one summary request:
Validate -> Collect thread -> Summarize -> Publish (archive, DM) -> Done

Every stage result is a tagged StageResult. Only archive failures are absorbed;
all other failures end the run with a stage-specific message to the requester.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, TypeVar

from app.ai_core.summarization import ThreadSummarizer
from app.integrations.slack import Responder, SlackClient
from app.models.results import (
    DeliveryError,
    ErrorKind,
    PipelineError,
    PipelineOutcome,
    PipelineResult,
    PipelineState,
    StageResult,
    ValidationError,
)
from app.models.thread import SummaryDocument, ThreadMessageSet
from app.services.archive import ArchiveSink
from app.services.collector import ThreadCollector
from app.services.formatter import SummaryFormatter, channel_label

logger = logging.getLogger(__name__)

T = TypeVar("T")

NO_REPLIES_MESSAGE = "📝 이 메시지에는 스레드 답글이 없습니다.\n\n스레드가 있는 메시지에서 시도해주세요."
DELIVERED_MESSAGE = "✅ 스레드 요약을 DM으로 보냈습니다."

FAILURE_MESSAGES = {
    ErrorKind.VALIDATION: "❌ 메시지 정보를 가져올 수 없습니다.",
    ErrorKind.COLLECTION: "❌ 스레드 메시지를 수집하지 못했습니다.",
    ErrorKind.SUMMARIZATION: "❌ AI 요약 생성에 실패했습니다.",
    ErrorKind.DELIVERY: "❌ 요약 결과를 DM으로 전송하지 못했습니다.",
}


@dataclass(frozen=True)
class SummaryRequest:
    """One trigger event: which thread, and who asked."""

    channel_id: Optional[str]
    thread_ts: Optional[str]
    requester_id: str
    requester_name: Optional[str] = None
    bot_user_id: Optional[str] = None


class SummaryPipeline:
    """
    Orchestrates the thread summary pipeline.

    Pipeline steps:
    1. Validate the request carries a thread reference
    2. Collect the thread messages
    3. Summarize with the LLM
    4. Render and archive the document (failure tolerated)
    5. DM the summary to the requester
    """

    def __init__(
        self,
        collector: ThreadCollector,
        formatter: SummaryFormatter,
        summarizer: ThreadSummarizer,
        archive: ArchiveSink,
        slack_client: SlackClient,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.collector = collector
        self.formatter = formatter
        self.summarizer = summarizer
        self.archive = archive
        self.slack_client = slack_client
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def run(self, request: SummaryRequest, responder: Responder) -> PipelineResult:
        """
        Process one summary request end to end.

        Args:
            request: Thread reference and requester
            responder: Ephemeral reply channel back to the requester

        Returns:
            PipelineResult with final state, outcome and visited states
        """
        states: List[PipelineState] = [PipelineState.VALIDATING]

        validated = self._validate(request)
        if not validated.ok:
            return await self._fail(states, validated, responder)

        states.append(PipelineState.COLLECTING)
        collected = await self._attempt(
            self.collector.collect(request.channel_id, request.thread_ts, request.bot_user_id)
        )
        if not collected.ok:
            return await self._fail(states, collected, responder)

        thread: ThreadMessageSet = collected.value
        if thread.is_empty:
            logger.info(f"Thread {request.channel_id}/{request.thread_ts} has no replies")
            await self._notify(responder, NO_REPLIES_MESSAGE)
            states.append(PipelineState.DONE)
            return PipelineResult(
                state=PipelineState.DONE,
                outcome=PipelineOutcome.NO_REPLIES,
                states=states,
                notification=NO_REPLIES_MESSAGE,
            )

        states.append(PipelineState.SUMMARIZING)
        summarized = await self._attempt(
            self.summarizer.summarize(
                self.formatter.render_for_model(thread),
                thread.participants,
                thread.message_count,
            )
        )
        if not summarized.ok:
            return await self._fail(states, summarized, responder)

        states.append(PipelineState.PUBLISHING)
        document = SummaryDocument(
            thread=thread,
            ai_summary=summarized.value,
            channel_label=await self._resolve_channel_label(thread.channel_id),
            requested_by=request.requester_name or request.requester_id,
            requested_at=self.clock(),
        )

        archived = await self._attempt(self._archive(document))
        locator = archived.value if archived.ok else None
        if archived.kind == ErrorKind.ARCHIVE:
            logger.warning(f"Continuing without archive locator: {archived.error}")

        notification = self.formatter.render_notification(document, locator)
        delivered = await self._attempt(self._deliver(request.requester_id, notification))
        if not delivered.ok:
            return await self._fail(
                states, delivered, responder, summary=document.ai_summary, locator=locator
            )

        await self._notify(responder, DELIVERED_MESSAGE)
        states.append(PipelineState.DONE)
        logger.info(
            f"Summary pipeline done for {thread.channel_id}/{thread.thread_ts} "
            f"(archived={'yes' if locator else 'no'})"
        )
        return PipelineResult(
            state=PipelineState.DONE,
            outcome=PipelineOutcome.DELIVERED,
            states=states,
            summary=document.ai_summary,
            archive_locator=locator,
            notification=notification,
        )

    def _validate(self, request: SummaryRequest) -> StageResult[SummaryRequest]:
        if not request.channel_id or not request.thread_ts:
            return StageResult.failure(
                ValidationError("Summary request has no channel or thread timestamp")
            )
        return StageResult.success(request)

    async def _archive(self, document: SummaryDocument) -> str:
        thread = document.thread
        body, metadata = self.formatter.render(document)
        metadata["fileName"] = self.archive.generate_file_name(
            thread.channel_id, thread.thread_ts, thread.participants
        )
        key = self.archive.generate_key(thread.channel_id, thread.thread_ts, document.requested_at)
        return await self.archive.store(key, body, "text/markdown", metadata)

    async def _deliver(self, user_id: str, text: str) -> str:
        try:
            dm_channel = await self.slack_client.open_direct_message(user_id)
            await self.slack_client.post_message(dm_channel, text)
        except Exception as e:
            logger.error(f"Failed to deliver summary to {user_id}: {e}")
            raise DeliveryError(str(e)) from e
        return dm_channel

    async def _resolve_channel_label(self, channel_id: str) -> str:
        try:
            channel = await self.slack_client.fetch_channel_info(channel_id)
        except Exception as e:
            logger.warning(f"Channel info lookup failed ({channel_id}): {e}")
            channel = None
        return channel_label(channel_id, (channel or {}).get("name"))

    @staticmethod
    async def _attempt(stage: Awaitable[T]) -> StageResult[T]:
        """Run a stage and tag its outcome."""
        try:
            return StageResult.success(await stage)
        except PipelineError as e:
            return StageResult.failure(e)

    async def _fail(
        self,
        states: List[PipelineState],
        result: StageResult,
        responder: Responder,
        summary: Optional[str] = None,
        locator: Optional[str] = None,
    ) -> PipelineResult:
        message = FAILURE_MESSAGES[result.kind]
        if result.kind != ErrorKind.VALIDATION:
            message = f"{message}\n\n{result.error}"

        logger.error(f"Summary pipeline failed at {states[-1].value}: {result.error}")
        await self._notify(responder, message)
        states.append(PipelineState.FAILED)
        return PipelineResult(
            state=PipelineState.FAILED,
            outcome=PipelineOutcome.FAILED,
            states=states,
            summary=summary,
            archive_locator=locator,
            notification=message,
            error_kind=result.kind,
            error=str(result.error),
        )

    @staticmethod
    async def _notify(responder: Responder, text: str) -> None:
        # Last-resort channel; nothing left to report a failure to
        try:
            await responder.respond(text)
        except Exception as e:
            logger.error(f"Failed to send ephemeral response: {e}", exc_info=True)
