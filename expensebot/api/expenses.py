"""
expensebot/api/expenses.py

Purpose: Approval callback endpoint

- Invoked by the Paid / Reject buttons of the shared-channel claim
- Requires the authenticated-user header
- Responds in plain text: "OK", or the error text
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from expensebot.api.deps import get_expense_service, require_user
from expensebot.core.exceptions import ExpenseBotError
from expensebot.core.logging import get_logger
from expensebot.models.expense import ExpenseState
from expensebot.schemas.callback import CallbackRequest
from expensebot.services.expense_service import ExpenseService

logger = get_logger(__name__)
router = APIRouter()


@router.post("/expenses/{expense_id}/{target_state}", response_class=PlainTextResponse)
async def update_expense(
    expense_id: str,
    target_state: str,
    request: Request,
    user_id: str = Depends(require_user),
    service: ExpenseService = Depends(get_expense_service),
):
    """
    Sets the state of an expense and refreshes its posts.

    Path:
        expense_id: Expense to update
        target_state: "Paid", "Rejected" (or "Submitted" to reopen)
    """
    try:
        callback = CallbackRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        logger.warning("Failed to decode callback request")
        return PlainTextResponse("invalid request", status_code=400)

    try:
        state = ExpenseState(target_state)
    except ValueError:
        logger.warning(f"Rejected unknown target state: {target_state}")
        return PlainTextResponse(f"invalid state: {target_state}", status_code=400)

    logger.info(
        f"Updating expense {expense_id} to {state.value} by {user_id}",
        extra={"expense_id": expense_id, "post_id": callback.post_id, "channel_id": callback.channel_id}
    )

    try:
        await service.apply_state_change(expense_id, state, callback)
    except ExpenseBotError as e:
        log = logger.warning if e.status_code < 500 else logger.error
        log(
            f"State change to {state.value} failed: {e.message}",
            extra={"expense_id": expense_id, "state": state.value, "post_id": callback.post_id}
        )
        return PlainTextResponse(e.message, status_code=e.status_code if e.status_code < 500 else 500)

    return PlainTextResponse("OK")
