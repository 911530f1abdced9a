"""
expensebot/flow/handlers/start.py

Handles: entry and reset

- "expense" with no draft starts one (offering stored defaults if any)
- any other text with no draft gets the onboarding hint
- "reset" with a draft deletes it
"""

from expensebot.core.exceptions import StorageError
from expensebot.core.logging import get_logger
from expensebot.flow.context import FlowContext, Replies
from expensebot.flow.states import DraftState
from expensebot.models.draft import Draft
from expensebot.utils.constants import (
    START_COMMAND,
    ONBOARDING_MESSAGE,
    START_MESSAGE,
    ASK_DEFAULTS_MESSAGE,
    ASK_ACCOUNT_MESSAGE,
    RESET_MESSAGE,
    SYSTEM_ERROR_MESSAGE,
)

logger = get_logger(__name__)


async def handle_start(ctx: FlowContext, command: str) -> Replies:
    """
    Handles a message from a user without a draft.

    Args:
        ctx: Flow context
        command: Normalized message text
    """
    if command != START_COMMAND:
        return [ONBOARDING_MESSAGE]

    try:
        defaults = await ctx.store.get_user_defaults(ctx.user_id)
    except StorageError as e:
        logger.error(f"Failed to get user defaults: {e.message}")
        return [SYSTEM_ERROR_MESSAGE]

    if defaults is not None:
        draft = Draft.start(ctx.user_id, DraftState.ASK_DEFAULTS)
        prompt = ASK_DEFAULTS_MESSAGE.format(account=defaults.account, name=defaults.name)
        logger.info("Starting expense, offering stored defaults")
        return await ctx.persist(draft, START_MESSAGE, prompt)

    draft = Draft.start(ctx.user_id, DraftState.ASK_ACCOUNT)
    logger.info("Starting expense")
    return await ctx.persist(draft, START_MESSAGE, ASK_ACCOUNT_MESSAGE)


async def handle_reset(ctx: FlowContext) -> Replies:
    """Drops the draft of the user."""
    try:
        await ctx.store.delete_draft(ctx.user_id)
    except StorageError as e:
        logger.error(f"Failed to delete draft: {e.message}")
        return [SYSTEM_ERROR_MESSAGE]

    logger.info("Draft reset by user")
    return [RESET_MESSAGE]
