"""
expensebot/flow/handlers/defaults.py

Handles: reuse of the last account and name

- yes: copies the stored defaults into the draft and skips to the amount
- no: continues with the IBAN question
- anything else: asks again
"""

from typing import List

from expensebot.core.exceptions import StorageError
from expensebot.core.logging import get_logger
from expensebot.flow.context import FlowContext, Replies
from expensebot.flow.states import DraftState
from expensebot.models.draft import Draft
from expensebot.utils.validation_utils import parse_yes_no
from expensebot.utils.constants import (
    DEFAULTS_ACCEPTED_MESSAGE,
    DEFAULTS_DECLINED_MESSAGE,
    DEFAULTS_INVALID_ANSWER_MESSAGE,
    ASK_AMOUNT_MESSAGE,
    ASK_ACCOUNT_MESSAGE,
    SYSTEM_ERROR_MESSAGE,
)

logger = get_logger(__name__)


async def handle_defaults_answer(ctx: FlowContext, draft: Draft, message: str, file_ids: List[str]) -> Replies:
    answer = parse_yes_no(message)

    if answer is None:
        return [DEFAULTS_INVALID_ANSWER_MESSAGE]

    if answer:
        try:
            defaults = await ctx.store.get_user_defaults(ctx.user_id)
        except StorageError as e:
            logger.error(f"Failed to get user defaults: {e.message}")
            return [SYSTEM_ERROR_MESSAGE]

        if defaults is not None:
            draft.data.iban = defaults.account
            draft.data.name = defaults.name
            draft.advance(DraftState.ASK_AMOUNT)
            return await ctx.persist(draft, DEFAULTS_ACCEPTED_MESSAGE, ASK_AMOUNT_MESSAGE)

        logger.warning("Stored defaults disappeared, asking for the account")

    draft.advance(DraftState.ASK_ACCOUNT)
    return await ctx.persist(draft, DEFAULTS_DECLINED_MESSAGE, ASK_ACCOUNT_MESSAGE)
