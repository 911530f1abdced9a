"""
expensebot/flow/handlers/attachment.py

Handles: STEP 5 – Receipt upload and completion

- Requires exactly one attached file
- Creates the expense (private status post first, then storage)
- Remembers account and name as the user's defaults
- Deletes the draft
"""

from typing import List

from expensebot.core.exceptions import ExpenseBotError, StorageError
from expensebot.core.logging import get_logger
from expensebot.flow.context import FlowContext, Replies
from expensebot.models.draft import Draft
from expensebot.models.expense import UserDefaults
from expensebot.utils.constants import (
    SINGLE_FILE_MESSAGE,
    SYSTEM_ERROR_MESSAGE,
    EXPENSE_SAVED_MESSAGE,
    NEW_EXPENSE_HINT_MESSAGE,
)

logger = get_logger(__name__)


async def handle_file_input(ctx: FlowContext, draft: Draft, message: str, file_ids: List[str]) -> Replies:
    if len(file_ids) != 1:
        return [SINGLE_FILE_MESSAGE]

    draft.data.file = file_ids[0]

    try:
        expense = await ctx.expenses.create_expense(draft)
    except ExpenseBotError as e:
        logger.error(f"Failed to create expense: {e.message}")
        return [SYSTEM_ERROR_MESSAGE]

    try:
        await ctx.store.save_user_defaults(UserDefaults(
            user_id=ctx.user_id,
            account=expense.account,
            name=expense.name,
        ))
    except StorageError as e:
        logger.error(f"Failed to save user defaults: {e.message}")

    try:
        await ctx.store.delete_draft(ctx.user_id)
    except StorageError as e:
        logger.error(f"Failed to delete draft: {e.message}")

    logger.info("Expense submitted", extra={"expense_id": expense.id})
    return [EXPENSE_SAVED_MESSAGE, NEW_EXPENSE_HINT_MESSAGE]
