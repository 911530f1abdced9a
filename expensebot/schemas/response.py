from pydantic import BaseModel
from typing import Optional, Any, Literal

class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    error: str
    code: str
    details: Optional[Any] = None

class DispatchResponse(BaseModel):
    """
    Acknowledgement returned to the chat server for an inbound event.
    """
    status: Literal["processed", "ignored", "error"]
    reason: Optional[str] = None
    replies: int = 0
