"""
expensebot/api/webhook.py

Purpose: Inbound chat event endpoint

- Receives new-message events from the chat server
- Parses and normalizes the payload
- Passes control to the flow dispatcher
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from expensebot.api.deps import get_chat, get_current_settings, get_engine
from expensebot.core.config import Settings
from expensebot.core.logging import get_logger
from expensebot.flow.dispatcher import dispatch_message
from expensebot.flow.engine import ConversationEngine
from expensebot.schemas.response import DispatchResponse
from expensebot.schemas.webhook import parse_message_event
from expensebot.services.chat_service import ChatService

logger = get_logger(__name__)
router = APIRouter()


@router.post("/webhook", response_model=DispatchResponse)
async def webhook_handler(
    request: Request,
    engine: ConversationEngine = Depends(get_engine),
    chat: ChatService = Depends(get_chat),
    settings: Settings = Depends(get_current_settings),
):
    """
    Event webhook. Events other than "posted" are acknowledged and ignored.
    """
    try:
        payload = await request.json()
        message = parse_message_event(payload)
    except ValueError as e:
        logger.error(f"Failed to parse event payload: {e}")
        return JSONResponse(
            status_code=400,
            content=DispatchResponse(status="error", reason="invalid_payload").model_dump(),
        )

    if message is None:
        return DispatchResponse(status="ignored", reason="unsupported_event")

    logger.info(f"Message event from {message.user_id} in {message.channel_id}")

    result = await dispatch_message(message, engine, chat, settings)
    return DispatchResponse(**result)


@router.get("/webhook")
async def webhook_verification():
    """
    Webhook verification endpoint
    """
    return {"status": "ok", "message": "Webhook endpoint is active"}
