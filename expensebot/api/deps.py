"""
expensebot/api/deps.py

Purpose: Request dependencies

- Resolves the record store and chat service created at startup
- Builds the per-request services on the current settings snapshot
- Enforces the authenticated-user header on callbacks
"""

from fastapi import Depends, Request

from expensebot.core.config import Settings, get_settings
from expensebot.core.exceptions import AuthenticationError
from expensebot.flow.engine import ConversationEngine
from expensebot.services.chat_service import ChatService
from expensebot.services.expense_service import ExpenseService
from expensebot.services.record_store import RecordStore


def get_current_settings() -> Settings:
    return get_settings()


def get_record_store(request: Request) -> RecordStore:
    store = getattr(request.app.state, "record_store", None)
    if store is None:
        raise RuntimeError("Record store not initialized")
    return store


def get_chat(request: Request) -> ChatService:
    chat = getattr(request.app.state, "chat", None)
    if chat is None:
        raise RuntimeError("Chat service not initialized")
    return chat


def get_expense_service(
    store: RecordStore = Depends(get_record_store),
    chat: ChatService = Depends(get_chat),
    settings: Settings = Depends(get_current_settings),
) -> ExpenseService:
    return ExpenseService(store, chat, settings)


def get_engine(
    store: RecordStore = Depends(get_record_store),
    expenses: ExpenseService = Depends(get_expense_service),
) -> ConversationEngine:
    return ConversationEngine(store, expenses)


def require_user(request: Request, settings: Settings = Depends(get_current_settings)) -> str:
    """Returns the authenticated user id, or fails with 401."""
    user_id = request.headers.get(settings.AUTH_USER_HEADER)
    if not user_id:
        raise AuthenticationError("Not authorized")
    return user_id
