"""
Slack API Routes

Endpoints Slack calls directly:
- POST /api/slack/interactions: "thread_summary" message shortcut
- POST /api/slack/commands: /search and /chat slash commands

Slack expects an ack within 3 seconds, so the real work runs as a background
task and answers through the payload's response_url.
"""

import json
import logging
from typing import Any, Dict
from urllib.parse import parse_qs

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, Response
from slack_sdk.signature import SignatureVerifier

from app.api.dependencies import BotServices, get_services
from app.integrations.slack import Responder, ResponseUrlResponder
from app.models.api_responses import SlackAck
from app.models.results import SearchError
from app.services.pipeline import SummaryRequest

logger = logging.getLogger(__name__)
router = APIRouter()

SUMMARY_CALLBACK_ID = "thread_summary"


async def _read_verified_body(request: Request, services: BotServices) -> str:
    """
    Read the request body and check its Slack signature.

    Raises:
        HTTPException: 400 for a body that is not UTF-8, 401 when the signature
            is invalid or no signing secret is configured
    """
    raw = await request.body()
    try:
        body = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="Request body is not valid UTF-8")

    secret = services.settings.slack_signing_secret
    if not secret:
        logger.error("SLACK_SIGNING_SECRET is not set, rejecting Slack request")
        raise HTTPException(status_code=401, detail="Slack signing secret is not configured")
    if not SignatureVerifier(secret).is_valid_request(body, dict(request.headers)):
        raise HTTPException(status_code=401, detail="Invalid Slack signature")
    return body


def _parse_form(body: str) -> Dict[str, str]:
    form = parse_qs(body, keep_blank_values=True)
    return {key: values[0] for key, values in form.items()}


async def _safe_respond(responder: Responder, text: str) -> None:
    try:
        await responder.respond(text)
    except Exception as e:
        logger.error(f"Failed to send ephemeral response: {e}", exc_info=True)


def build_summary_request(payload: Dict[str, Any], bot_user_id: str | None) -> SummaryRequest:
    """Map a message_action payload to a SummaryRequest."""
    message, channel, user = (
        value if isinstance(value, dict) else {}
        for value in (payload.get("message"), payload.get("channel"), payload.get("user"))
    )
    return SummaryRequest(
        channel_id=channel.get("id"),
        # A shortcut on a reply still summarizes the whole thread
        thread_ts=message.get("thread_ts") or message.get("ts"),
        requester_id=user.get("id", ""),
        requester_name=user.get("name") or user.get("username"),
        bot_user_id=bot_user_id,
    )


@router.post("/interactions")
async def handle_interaction(
    request: Request,
    background_tasks: BackgroundTasks,
    services: BotServices = Depends(get_services),
):
    """
    Handle the "thread_summary" message shortcut.

    Acks immediately and runs the summary pipeline in the background. The
    requester gets the summary by DM and status messages ephemerally.
    """
    body = await _read_verified_body(request, services)

    try:
        payload = json.loads(_parse_form(body).get("payload", ""))
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"Malformed interaction payload: {e}")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Interaction payload is not a JSON object")

    if payload.get("callback_id") != SUMMARY_CALLBACK_ID:
        logger.info(f"Ignoring interaction callback_id={payload.get('callback_id')}")
        return Response(status_code=200)

    response_url = payload.get("response_url")
    if not response_url:
        raise HTTPException(status_code=400, detail="Interaction payload has no response_url")
    responder = ResponseUrlResponder(response_url)

    if payload.get("type") != "message_action":
        background_tasks.add_task(_safe_respond, responder, "❌ 메시지 액션이 아닙니다.")
        return Response(status_code=200)

    summary_request = build_summary_request(payload, services.bot_user_id)
    logger.info(
        f"Thread summary requested by {summary_request.requester_id} for "
        f"{summary_request.channel_id}/{summary_request.thread_ts}"
    )
    background_tasks.add_task(services.pipeline.run, summary_request, responder)
    return Response(status_code=200)


@router.post("/commands", response_model=SlackAck)
async def handle_command(
    request: Request,
    background_tasks: BackgroundTasks,
    services: BotServices = Depends(get_services),
):
    """Handle /search and /chat slash commands."""
    body = await _read_verified_body(request, services)

    form = _parse_form(body)
    command = form.get("command", "")
    text = form.get("text", "").strip()
    response_url = form.get("response_url", "")

    if command == "/search":
        if not text:
            return SlackAck(text="❌ 검색어를 입력해주세요.\n\n사용법: `/search <검색어>`")
        background_tasks.add_task(run_search, services, text, ResponseUrlResponder(response_url))
        return SlackAck(text=f"🔍 \"{text}\"를 검색하고 있습니다...")

    if command == "/chat":
        if not text:
            return SlackAck(text="❌ 메시지를 입력해주세요.\n\n사용법: `/chat <메시지>`")
        background_tasks.add_task(run_chat, services, text, ResponseUrlResponder(response_url))
        return SlackAck(text="💭 메시지를 처리하고 있습니다...")

    logger.warning(f"Unsupported slash command: {command}")
    return SlackAck(text=f"❌ 지원하지 않는 명령입니다: {command}")


async def run_search(services: BotServices, query: str, responder: Responder) -> None:
    """Search archived summaries and answer the requester."""
    try:
        result = await services.searcher.query(query)
    except SearchError as e:
        await _safe_respond(responder, f"❌ 검색 중 오류가 발생했습니다.\n\n{e}")
        return

    if not result.available:
        text = "❌ 검색 기능을 사용할 수 없습니다.\n\n지식 베이스가 설정되지 않았거나 오류가 발생했습니다."
    elif not result.answer:
        text = f"🔍 \"{query}\"에 대한 검색 결과가 없습니다.\n\n다른 검색어로 다시 시도해보세요."
    else:
        text = services.formatter.render_search_response(query, result)
    await _safe_respond(responder, text)


async def run_chat(services: BotServices, message: str, responder: Responder) -> None:
    """Answer a /chat message."""
    try:
        answer = await services.assistant.chat(message)
    except Exception as e:
        logger.error(f"Chat command failed: {e}", exc_info=True)
        await _safe_respond(responder, f"❌ 채팅 중 오류가 발생했습니다.\n\n{e}")
        return
    await _safe_respond(responder, services.formatter.render_chat_response(message, answer))
