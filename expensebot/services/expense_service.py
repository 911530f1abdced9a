"""
expensebot/services/expense_service.py

Purpose: Expense creation and approval lifecycle

- Materializes a completed draft into an Expense
- Posts the pinned private status message and the shared-channel claim
- Applies approve/reject callbacks and re-renders both posts in place

Ordering on creation: the private status post must exist before the expense
is stored, so a failed delivery never leaves an expense nobody can see.
No locking: concurrent callbacks on one expense are last-write-wins.
"""

import uuid
from typing import Any, Dict, List, Optional

from expensebot.core.config import Settings, get_settings
from expensebot.core.exceptions import ChatServiceError, ExpenseNotFoundError
from expensebot.core.logging import get_logger, LogContext
from expensebot.models.draft import Draft
from expensebot.models.expense import Expense, ExpenseState
from expensebot.schemas.callback import CallbackRequest
from expensebot.services.chat_service import ChatService
from expensebot.services.record_store import RecordStore
from expensebot.utils.formatting import (
    build_action_props,
    format_channel_message,
    format_claim_title,
    format_expense,
)

logger = get_logger(__name__)


def new_expense_id() -> str:
    return uuid.uuid4().hex


class ExpenseService:
    """
    Creates expenses and moves them through Submitted -> Paid / Rejected.
    """

    def __init__(self, store: RecordStore, chat: ChatService, settings: Optional[Settings] = None):
        self.store = store
        self.chat = chat
        self.settings = settings or get_settings()

    async def render(self, expense: Expense) -> str:
        """Looks up the attachment and renders the status table."""
        file_info = await self.chat.get_file_info(expense.file_ids[0])
        if not self.settings.SITE_URL:
            logger.warning("SITE_URL is not configured")
        return format_expense(expense, file_info, self.settings.SITE_URL)

    async def render_channel_message(self, expense: Expense, body: str) -> str:
        user = await self.chat.get_user(expense.user_id)
        return format_channel_message(format_claim_title(user), body)

    async def create_expense(self, draft: Draft) -> Expense:
        """
        Finalizes a completed draft.

        Raises:
            ChatServiceError: the private status post could not be created;
                nothing has been stored in that case
            StorageError: the expense could not be stored
        """
        if not draft.is_complete():
            raise ValueError("Cannot create an expense from an incomplete draft")

        data = draft.data
        expense = Expense(
            id=new_expense_id(),
            user_id=draft.user_id,
            state=ExpenseState.SUBMITTED,
            account=data.iban,
            name=data.name,
            amount=data.amount,
            description=data.description,
            file_ids=[data.file],
        )

        with LogContext(user_id=expense.user_id, expense_id=expense.id):
            message = await self.render(expense)
            post = await self.chat.send_direct_message(expense.user_id, message, is_pinned=True)

            expense.post_id = post["id"]
            await self.store.save_expense(expense)
            logger.info("Expense created")

            try:
                await self.announce(expense, message)
            except ChatServiceError as e:
                logger.error(f"Failed to announce expense in channel: {e.message}")

        return expense

    async def announce(self, expense: Expense, body: str) -> Dict[str, Any]:
        """Posts the claim with Paid / Reject buttons in the expense channel."""
        message = await self.render_channel_message(expense, body)
        return await self.chat.create_post(
            self.settings.EXPENSE_CHANNEL_ID,
            message,
            file_ids=expense.file_ids,
            props=build_action_props(expense.id, self.settings.CALLBACK_BASE_URL),
        )

    async def apply_state_change(self, expense_id: str, target_state: ExpenseState, callback: CallbackRequest) -> Expense:
        """
        Sets the state of an expense and refreshes its posts.

        Any state may be set from any state, including the current one.
        The stored state is not rolled back when a post update fails.

        Raises:
            ExpenseNotFoundError: no expense with that id (no writes)
            StorageError: saving failed (no posts touched)
            ChatServiceError: rendering or one of the post updates failed
        """
        with LogContext(expense_id=expense_id, state=target_state.value):
            expense = await self.store.get_expense(expense_id)
            if expense is None:
                logger.warning("State change requested for unknown expense")
                raise ExpenseNotFoundError(expense_id)

            previous_state = expense.state
            expense.state = target_state
            await self.store.save_expense(expense)
            logger.info(f"Expense state changed: {previous_state.value} -> {target_state.value}")

            try:
                body = await self.render(expense)
            except ChatServiceError as e:
                logger.error(f"State saved but posts not refreshed, render failed: {e.message}")
                raise

            failures: List[str] = []
            try:
                await self.chat.update_post(expense.post_id, body)
            except ChatServiceError as e:
                logger.error(f"Failed to update private status post: {e.message}", extra={"post_id": expense.post_id})
                failures.append(f"failed to update user post: {e.message}")

            try:
                message = await self.render_channel_message(expense, body)
                await self.chat.update_post(
                    callback.post_id,
                    message,
                    file_ids=expense.file_ids,
                    props=build_action_props(expense.id, self.settings.CALLBACK_BASE_URL),
                )
            except ChatServiceError as e:
                logger.error(f"Failed to update channel post: {e.message}", extra={"post_id": callback.post_id, "channel_id": callback.channel_id})
                failures.append(f"failed to update channel post: {e.message}")

            if failures:
                raise ChatServiceError("; ".join(failures), status_code=500)

        return expense
