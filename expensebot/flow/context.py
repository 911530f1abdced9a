"""
expensebot/flow/context.py

Purpose: Per-message context shared by the flow handlers

- Identifies the user being served
- Gives handlers the record store and expense service
- Persists an advanced draft and returns the follow-up prompts
"""

from dataclasses import dataclass
from typing import List

from expensebot.core.exceptions import StorageError
from expensebot.core.logging import get_logger
from expensebot.flow.states import get_progress_message
from expensebot.models.draft import Draft
from expensebot.services.expense_service import ExpenseService
from expensebot.services.record_store import RecordStore
from expensebot.utils.constants import SYSTEM_ERROR_MESSAGE

logger = get_logger(__name__)

Replies = List[str]


@dataclass
class FlowContext:
    user_id: str
    store: RecordStore
    expenses: ExpenseService

    async def persist(self, draft: Draft, *replies: str) -> Replies:
        """
        Saves the draft, then returns `replies`.
        On a storage failure only the system error is returned and the
        stored draft keeps its previous state.
        """
        try:
            await self.store.save_draft(self.user_id, draft)
        except StorageError as e:
            logger.error(f"Failed to save draft: {e.message}")
            return [SYSTEM_ERROR_MESSAGE]

        logger.info(f"Draft now at {draft.state.value} {get_progress_message(draft.state)}".rstrip())
        return list(replies)
