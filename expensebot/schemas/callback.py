"""
expensebot/schemas/callback.py

Purpose: Interactive button callback payload

The chat server posts this body when an approver clicks Paid / Reject.
Only the ids locating the shared-channel post are used.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class CallbackRequest(BaseModel):
    post_id: str = Field(..., min_length=1, description="Shared-channel post holding the buttons")
    channel_id: str = Field(..., min_length=1, description="Channel of that post")
    user_id: Optional[str] = Field(default=None, description="Approver who clicked")
    context: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            "example": {
                "post_id": "p8x4kq3c7fgd5rf1ucxb6hn5wa",
                "channel_id": "4xp9fdt77pncbef59f4k1qe83o",
                "user_id": "q5nc3t9kwpf3mm1i8u5hf4e1ka",
                "context": {}
            }
        }
