"""
expensebot/utils/formatting.py

Purpose: Expense message builders

- Renders an expense into the markdown status table
- Builds the shared-channel claim message
- Builds the Paid / Reject button attachment pointing at the callback endpoint

Everything here is pure: lookups (file info, user) happen in the services.
"""

from typing import Any, Dict, List

from expensebot.models.expense import Expense, ExpenseState
from expensebot.utils.constants import (
    STATUS_SUBMITTED_LABEL,
    STATUS_PAID_LABEL,
    STATUS_REJECTED_LABEL,
    CLAIM_TITLE,
    BUTTON_PAID,
    BUTTON_REJECT,
)


STATUS_LABELS: Dict[ExpenseState, str] = {
    ExpenseState.SUBMITTED: STATUS_SUBMITTED_LABEL,
    ExpenseState.PAID: STATUS_PAID_LABEL,
    ExpenseState.REJECTED: STATUS_REJECTED_LABEL,
}


def status_label(state: ExpenseState) -> str:
    """
    Icon and label for an expense state.

    Raises:
        ValueError: for a value outside ExpenseState
    """
    try:
        return STATUS_LABELS[ExpenseState(state)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown expense state: {state!r}")


def file_url(site_url: str, file_id: str) -> str:
    return f"{site_url.rstrip('/')}/api/v4/files/{file_id}"


def format_expense(expense: Expense, file_info: Dict[str, Any], site_url: str) -> str:
    """
    Renders the status table of an expense.

    Args:
        expense: Expense to render
        file_info: Metadata of the first attachment ("id" and "name")
        site_url: Public chat site URL, may be empty

    Returns:
        Markdown table, one row per field
    """
    return (
        f"|Status|{status_label(expense.state)}|\n"
        f"|-|-|\n"
        f"|Bank account|{expense.account}|\n"
        f"|Name|{expense.name}|\n"
        f"|Amount|{expense.amount}|\n"
        f"|Description|{expense.description}|\n"
        f"|File|[{file_info.get('name', '')}]({file_url(site_url, file_info.get('id', expense.file_ids[0]))})|\n"
    )


def format_claim_title(user: Dict[str, Any]) -> str:
    """Title of the shared-channel post, e.g. "**Expense claim from Jane Doe**"."""
    return CLAIM_TITLE.format(
        first_name=user.get("first_name", ""),
        last_name=user.get("last_name", ""),
    )


def format_channel_message(title: str, body: str) -> str:
    return f"{title}\n\n{body}"


def callback_url(callback_base_url: str, expense_id: str, state: ExpenseState) -> str:
    return f"{callback_base_url.rstrip('/')}/api/expenses/{expense_id}/{state.value}"


def build_expense_actions(expense_id: str, callback_base_url: str) -> List[Dict[str, Any]]:
    """
    Interactive buttons of the shared-channel post.

    Example:
        [
            {"id": "paid", "name": "Paid", "type": "button", "style": "success",
             "integration": {"url": ".../api/expenses/<id>/Paid"}},
            {"id": "reject", "name": "Reject", ...}
        ]
    """
    return [
        {
            "id": "paid",
            "name": BUTTON_PAID,
            "type": "button",
            "style": "success",
            "integration": {"url": callback_url(callback_base_url, expense_id, ExpenseState.PAID)},
        },
        {
            "id": "reject",
            "name": BUTTON_REJECT,
            "type": "button",
            "style": "danger",
            "integration": {"url": callback_url(callback_base_url, expense_id, ExpenseState.REJECTED)},
        },
    ]


def build_action_props(expense_id: str, callback_base_url: str) -> Dict[str, Any]:
    """Post props carrying the button attachment."""
    return {
        "attachments": [
            {
                "author_name": "",
                "actions": build_expense_actions(expense_id, callback_base_url),
            }
        ]
    }
