"""
expensebot/schemas/webhook.py

Purpose: Inbound chat event payload schemas and parsers

- Validates new-message events forwarded by the chat server
- Normalizes them into InboundMessage
- Ensures predictable request handling
"""

import json

from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any

POSTED_EVENT = "posted"


class InboundMessage(BaseModel):
    """
    Normalized message format for internal processing
    """
    post_id: str = Field(default="", description="Id of the inbound post")
    user_id: str = Field(..., min_length=1, description="Author of the message")
    channel_id: str = Field(..., min_length=1, description="Conversation the message was posted in")
    channel_type: Optional[str] = Field(default=None, description="Conversation type, 'D' for direct")
    text: str = Field(default="", description="Message text content")
    file_ids: List[str] = Field(default_factory=list, description="Attached file ids")

    class Config:
        json_schema_extra = {
            "example": {
                "post_id": "h4kq1c8u5jdz9rtmbw7e3n6ya",
                "user_id": "q5nc3t9kwpf3mm1i8u5hf4e1ka",
                "channel_id": "4xp9fdt77pncbef59f4k1qe83o",
                "channel_type": "D",
                "text": "expense",
                "file_ids": []
            }
        }


def parse_message_event(payload: Dict[str, Any]) -> Optional[InboundMessage]:
    """
    Parses a chat server event.

    Format (JSON):
    {
        "event": "posted",
        "data": {
            "channel_type": "D",
            "post": "{\"id\": \"h4kq...\", ...}"
        }
    }

    The post may also be an already decoded object:
    {
        "event": "posted",
        "data": {
            "channel_type": "D",
            "post": {
                "id": "h4kq...",
                "user_id": "q5nc...",
                "channel_id": "4xp9...",
                "message": "expense",
                "file_ids": []
            }
        }
    }

    Returns:
        InboundMessage, or None for events other than "posted"

    Raises:
        ValueError: malformed payload (pydantic ValidationError included)
    """
    if not isinstance(payload, dict):
        raise ValueError("Event payload must be a JSON object")

    if payload.get("event") != POSTED_EVENT:
        return None

    data = payload.get("data") or {}
    if not isinstance(data, dict):
        raise ValueError("Event data must be a JSON object")

    # The chat server sends the post JSON-encoded
    post = data.get("post") or {}
    if isinstance(post, str):
        post = json.loads(post)
    if not isinstance(post, dict):
        raise ValueError("Event post must be a JSON object")

    return InboundMessage(
        post_id=post.get("id", ""),
        user_id=post.get("user_id", ""),
        channel_id=post.get("channel_id", ""),
        channel_type=data.get("channel_type"),
        text=post.get("message") or "",
        file_ids=post.get("file_ids") or [],
    )
