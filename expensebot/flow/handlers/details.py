"""
expensebot/flow/handlers/details.py

Handles: STEPS 2-4 – account holder, amount, description

The amount is free text; no numeric validation is done.
"""

from typing import List

from expensebot.flow.context import FlowContext, Replies
from expensebot.flow.states import DraftState
from expensebot.models.draft import Draft
from expensebot.utils.constants import (
    ASK_NAME_MESSAGE,
    ASK_AMOUNT_MESSAGE,
    ASK_DESCRIPTION_MESSAGE,
    ASK_FILE_MESSAGE,
)


async def handle_name_input(ctx: FlowContext, draft: Draft, message: str, file_ids: List[str]) -> Replies:
    if not message.strip():
        return [ASK_NAME_MESSAGE]

    draft.data.name = message
    draft.advance(DraftState.ASK_AMOUNT)
    return await ctx.persist(draft, ASK_AMOUNT_MESSAGE)


async def handle_amount_input(ctx: FlowContext, draft: Draft, message: str, file_ids: List[str]) -> Replies:
    draft.data.amount = message
    draft.advance(DraftState.ASK_DESCRIPTION)
    return await ctx.persist(draft, ASK_DESCRIPTION_MESSAGE)


async def handle_description_input(ctx: FlowContext, draft: Draft, message: str, file_ids: List[str]) -> Replies:
    draft.data.description = message
    draft.advance(DraftState.ASK_FILE)
    return await ctx.persist(draft, ASK_FILE_MESSAGE)
