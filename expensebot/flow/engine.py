"""
expensebot/flow/engine.py

Purpose: Conversation state machine

- Loads the user's draft (absence means no conversation in progress)
- Handles the global "reset" command
- Routes the message to the handler of the draft's state
- Returns the replies to send; persistence happens in the handlers
"""

from typing import Awaitable, Callable, Dict, List, Optional

from expensebot.core.exceptions import StorageError
from expensebot.core.logging import get_logger, LogContext
from expensebot.flow.context import FlowContext, Replies
from expensebot.flow.handlers.account import handle_account_input
from expensebot.flow.handlers.attachment import handle_file_input
from expensebot.flow.handlers.defaults import handle_defaults_answer
from expensebot.flow.handlers.details import (
    handle_name_input,
    handle_amount_input,
    handle_description_input,
)
from expensebot.flow.handlers.start import handle_start, handle_reset
from expensebot.flow.states import DraftState
from expensebot.models.draft import Draft
from expensebot.services.expense_service import ExpenseService
from expensebot.services.record_store import RecordStore
from expensebot.utils.constants import RESET_COMMAND, SYSTEM_ERROR_MESSAGE
from expensebot.utils.validation_utils import normalize_command

logger = get_logger(__name__)

StateHandler = Callable[[FlowContext, Draft, str, List[str]], Awaitable[Replies]]

STATE_HANDLERS: Dict[DraftState, StateHandler] = {
    DraftState.ASK_DEFAULTS: handle_defaults_answer,
    DraftState.ASK_ACCOUNT: handle_account_input,
    DraftState.ASK_NAME: handle_name_input,
    DraftState.ASK_AMOUNT: handle_amount_input,
    DraftState.ASK_DESCRIPTION: handle_description_input,
    DraftState.ASK_FILE: handle_file_input,
}


class ConversationEngine:
    """
    Advances a user's draft by one step per inbound message.
    """

    def __init__(self, store: RecordStore, expenses: ExpenseService):
        self.store = store
        self.expenses = expenses

    async def handle_message(self, user_id: str, text: str, file_ids: Optional[List[str]] = None) -> Replies:
        """
        Processes one direct message of a user.

        Args:
            user_id: Author of the message
            text: Message text
            file_ids: Ids of the files attached to the message

        Returns:
            Messages to send back to the user, in order
        """
        text = text or ""
        file_ids = list(file_ids or [])
        ctx = FlowContext(user_id=user_id, store=self.store, expenses=self.expenses)

        with LogContext(user_id=user_id):
            try:
                draft = await self.store.get_draft(user_id)
            except StorageError as e:
                logger.error(f"Failed to get draft: {e.message}")
                return [SYSTEM_ERROR_MESSAGE]

            command = normalize_command(text)

            if draft is None:
                return await handle_start(ctx, command)

            if command == RESET_COMMAND:
                return await handle_reset(ctx)

            logger.info(f"Routing message for state {draft.state.value}")
            handler = STATE_HANDLERS[draft.state]
            return await handler(ctx, draft, text, file_ids)
