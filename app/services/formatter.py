"""
Summary Formatter Service

Pure rendering functions; no I/O and no clock reads:
- render_for_model: transcript text fed to the LLM
- render_document: archived markdown document plus storage metadata
- render_notification / render_search_response / render_chat_response:
  Slack-facing texts, bounded by the presentation length limit
"""

import re
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from app.config import Settings
from app.models.api_responses import SearchResult
from app.models.thread import SummaryDocument, ThreadMessageSet
from app.utils.helpers import format_korean_datetime, truncate_for_slack

CODE_SPAN_PATTERN = re.compile(r"(```[\s\S]*?```|`[^`\n]+`)")
USER_MENTION_PATTERN = re.compile(r"<@[A-Z0-9]+(?:\|[^>]*)?>")
CHANNEL_LINK_PATTERN = re.compile(r"<#([A-Z0-9]+)(?:\|([^>]*))?>")
LABELED_URL_PATTERN = re.compile(r"<(https?://[^|>]+)\|([^>]+)>")
BARE_URL_PATTERN = re.compile(r"<(https?://[^>]+)>")

DISCLAIMER = "*이 요약은 AI에 의해 자동 생성되었으며, 실제 대화 내용과 다를 수 있습니다.*"
SNIPPET_LENGTH = 200


def sanitize_message_text(text: str) -> str:
    """
    Convert Slack markup to portable markdown.

    - <@U123> -> @사용자
    - <#C123|general> -> #general
    - <https://x|label> -> [label](https://x), <https://x> -> https://x
    - Fenced and inline code spans are left untouched
    """
    segments = CODE_SPAN_PATTERN.split(text)
    for i in range(0, len(segments), 2):
        segment = segments[i]
        segment = USER_MENTION_PATTERN.sub("@사용자", segment)
        segment = CHANNEL_LINK_PATTERN.sub(
            lambda m: f"#{m.group(2) or m.group(1)}", segment
        )
        segment = LABELED_URL_PATTERN.sub(r"[\2](\1)", segment)
        segment = BARE_URL_PATTERN.sub(r"\1", segment)
        segments[i] = segment
    return "".join(segments)


def channel_label(channel_id: str, channel_name: Optional[str] = None) -> str:
    """'#name' when the channel name is known, otherwise the raw ID."""
    return f"#{channel_name}" if channel_name else channel_id


class SummaryFormatter:
    """Renders threads and summary documents."""

    def __init__(self, settings: Settings):
        self.timezone = ZoneInfo(settings.timezone)
        self.max_length = settings.response_max_length
        self.truncate_at = settings.truncate_at

    def render_for_model(self, thread: ThreadMessageSet) -> str:
        """Plain-text transcript with header, participants and count."""
        lines = [
            "스레드 요약 요청",
            f"참여자: {', '.join(thread.participants)}",
            f"메시지 수: {thread.message_count}개",
            "",
            "대화 내용:",
        ]
        lines.extend(
            f"[{msg.rendered_time}] {msg.display_name}: {msg.text}" for msg in thread.messages
        )
        return "\n".join(lines) + "\n"

    def render_document(
        self,
        thread: ThreadMessageSet,
        ai_summary: str,
        channel_label: str,
        requested_by: str,
        requested_at: datetime,
    ) -> Tuple[str, Dict[str, str]]:
        """
        Build the archived markdown document and its storage metadata.

        Returns:
            (document_body, metadata) where every metadata value is a string
        """
        generated_at = self._format_moment(requested_at)

        blocks: List[str] = [
            "# 스레드 요약",
            "## 📋 요약 정보",
            "\n".join(
                [
                    f"- **채널**: {channel_label}",
                    f"- **스레드 타임스탬프**: {thread.thread_ts}",
                    f"- **참여자**: {', '.join(thread.participants)}",
                    f"- **메시지 수**: {thread.message_count}개",
                    f"- **요약 요청자**: {requested_by}",
                    f"- **요약 생성 시각**: {generated_at}",
                ]
            ),
            "## 🤖 AI 요약",
            ai_summary,
            "## 💬 원본 대화",
        ]
        for index, msg in enumerate(thread.messages, 1):
            blocks.append(f"### {index}. {msg.display_name} ({msg.rendered_time})")
            blocks.append(sanitize_message_text(msg.text))
        blocks.append("---")
        blocks.append(f"{DISCLAIMER}\n*생성 시각: {generated_at}*")

        body = "\n\n".join(blocks) + "\n"
        return body, self.build_metadata(thread, requested_by, requested_at)

    def render(self, document: SummaryDocument) -> Tuple[str, Dict[str, str]]:
        """render_document for an assembled SummaryDocument."""
        return self.render_document(
            document.thread,
            document.ai_summary,
            document.channel_label,
            document.requested_by,
            document.requested_at,
        )

    @staticmethod
    def build_metadata(
        thread: ThreadMessageSet, requested_by: str, requested_at: datetime
    ) -> Dict[str, str]:
        """Flat string tags for the object store."""
        return {
            "channelId": thread.channel_id,
            "threadTimestamp": thread.thread_ts,
            "participantCount": str(len(thread.participants)),
            "messageCount": str(thread.message_count),
            "participants": ",".join(thread.participants),
            "requestedBy": requested_by,
            "requestedAt": requested_at.astimezone(timezone.utc).isoformat(),
        }

    def render_notification(
        self, document: SummaryDocument, archive_locator: Optional[str] = None
    ) -> str:
        """
        DM text: summary header, AI summary and, if stored, the archive link.

        Only the summary is truncated; the header and the archive link are
        always kept whole.
        """
        thread = document.thread
        header = "\n".join(
            [
                f"📋 *스레드 요약* ({document.channel_label})",
                f"• 참여자: {', '.join(thread.participants)}",
                f"• 메시지 수: {thread.message_count}개",
                "",
                "",
            ]
        )
        footer = f"\n\n📁 요약 문서: {archive_locator}" if archive_locator else ""

        reserved = len(header) + len(footer)
        summary = truncate_for_slack(
            document.ai_summary,
            max(self.max_length - reserved, 0),
            max(self.truncate_at - reserved, 0),
        )
        return header + summary + footer

    def render_search_response(self, query: str, result: SearchResult) -> str:
        lines = [f"🔍 *검색 결과: \"{query}\"*", "", f"📝 *답변:*\n{result.answer}", ""]

        cited = [source for source in result.sources if source.content]
        if cited:
            lines.append(f"📚 *참고 자료 ({len(result.sources)}개):*")
            for index, source in enumerate(cited, 1):
                snippet = source.content
                if len(snippet) > SNIPPET_LENGTH:
                    snippet = snippet[:SNIPPET_LENGTH] + "..."
                entry = f"{index}. {snippet}"
                if source.location:
                    entry += f"\n   📍 위치: {source.location}"
                if source.score is not None:
                    entry += f"\n   🎯 관련도: {round(source.score * 100)}%"
                lines.extend([entry, ""])

        return self._bound("\n".join(lines).rstrip() + "\n")

    def render_chat_response(self, question: str, answer: str) -> str:
        text = f"💬 *AI 채팅*\n\n*질문:* {question}\n\n*답변:* {answer}"
        return self._bound(text)

    def _format_moment(self, moment: datetime) -> str:
        return format_korean_datetime(moment.astimezone(self.timezone))

    def _bound(self, text: str) -> str:
        return truncate_for_slack(text, self.max_length, self.truncate_at)
