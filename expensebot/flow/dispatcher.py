"""
expensebot/flow/dispatcher.py

Purpose: Central message dispatcher

- Receives normalized messages from the webhook
- Drops the bot's own messages and anything outside a direct channel with the bot
- Runs the conversation engine
- Sends the replies as direct messages
"""

from typing import Dict, Any, List

from expensebot.core.config import Settings
from expensebot.core.exceptions import ChatServiceError
from expensebot.core.logging import get_logger
from expensebot.flow.engine import ConversationEngine
from expensebot.schemas.webhook import InboundMessage
from expensebot.services.chat_service import ChatService, DIRECT_CHANNEL_TYPE

logger = get_logger(__name__)


async def dispatch_message(
    message: InboundMessage,
    engine: ConversationEngine,
    chat: ChatService,
    settings: Settings,
) -> Dict[str, Any]:
    """
    Main dispatcher for inbound chat messages

    Returns:
        Dict with "status" ("processed" / "ignored"), optional "reason"
        and the number of replies sent
    """
    # Without its own id the bot cannot tell its messages apart
    if not settings.BOT_USER_ID:
        logger.error("BOT_USER_ID is not configured, dropping message")
        return {"status": "ignored", "reason": "bot_not_configured"}

    # Never react to ourselves
    if message.user_id == settings.BOT_USER_ID:
        return {"status": "ignored", "reason": "own_message"}

    channel_type = message.channel_type
    if channel_type is None:
        try:
            channel = await chat.get_channel(message.channel_id)
        except ChatServiceError as e:
            logger.error(f"Failed to get channel {message.channel_id}: {e.message}")
            return {"status": "ignored", "reason": "channel_lookup_failed"}
        channel_type = channel.get("type")

    if channel_type != DIRECT_CHANNEL_TYPE:
        return {"status": "ignored", "reason": "not_direct"}

    if not await chat.is_channel_member(message.channel_id, settings.BOT_USER_ID):
        return {"status": "ignored", "reason": "bot_not_member"}

    logger.info(f"Dispatching message from {message.user_id}")

    replies = await engine.handle_message(message.user_id, message.text, message.file_ids)
    sent = await send_replies(chat, message.user_id, replies)

    return {"status": "processed", "replies": sent}


async def send_replies(chat: ChatService, user_id: str, replies: List[str]) -> int:
    """
    Sends replies in order. A failed reply is logged and the rest are
    still attempted.

    Returns:
        Number of replies delivered
    """
    sent = 0
    for reply in replies:
        try:
            await chat.send_direct_message(user_id, reply)
            sent += 1
        except ChatServiceError as e:
            logger.error(f"Failed to send reply: {e.message}", extra={"user_id": user_id})
    return sent
