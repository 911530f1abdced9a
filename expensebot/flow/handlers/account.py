"""
expensebot/flow/handlers/account.py

Handles: STEP 1 – Ask IBAN

- Validates the IBAN (country length and checksum)
- Stores the normalized form
"""

from typing import List

from expensebot.core.logging import get_logger
from expensebot.flow.context import FlowContext, Replies
from expensebot.flow.states import DraftState
from expensebot.models.draft import Draft
from expensebot.utils.validation_utils import validate_iban
from expensebot.utils.constants import INVALID_IBAN_MESSAGE, ASK_NAME_MESSAGE

logger = get_logger(__name__)


async def handle_account_input(ctx: FlowContext, draft: Draft, message: str, file_ids: List[str]) -> Replies:
    iban = validate_iban(message)
    if iban is None:
        logger.info("Invalid IBAN provided")
        return [INVALID_IBAN_MESSAGE]

    draft.data.iban = iban
    draft.advance(DraftState.ASK_NAME)
    return await ctx.persist(draft, ASK_NAME_MESSAGE)
