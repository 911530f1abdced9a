"""Tests for the expense message builders."""

import pytest

from expensebot.models.expense import Expense, ExpenseState
from expensebot.utils.formatting import (
    build_action_props,
    build_expense_actions,
    format_channel_message,
    format_claim_title,
    format_expense,
    status_label,
)

FILE_INFO = {"id": "f1", "name": "receipt.jpg"}


def make_expense(state=ExpenseState.SUBMITTED):
    return Expense(
        id="e1",
        post_id="p1",
        user_id="u1",
        state=state,
        account="DE89370400440532013000",
        name="Jane Doe",
        amount="42.50",
        description="taxi",
        file_ids=["f1"],
    )


def test_format_expense_table():
    text = format_expense(make_expense(), FILE_INFO, "https://chat.example.com")

    assert text == (
        "|Status|:hourglass_flowing_sand: **Submitted**|\n"
        "|-|-|\n"
        "|Bank account|DE89370400440532013000|\n"
        "|Name|Jane Doe|\n"
        "|Amount|42.50|\n"
        "|Description|taxi|\n"
        "|File|[receipt.jpg](https://chat.example.com/api/v4/files/f1)|\n"
    )


@pytest.mark.parametrize("state,label", [
    (ExpenseState.SUBMITTED, ":hourglass_flowing_sand: **Submitted**"),
    (ExpenseState.PAID, ":white_check_mark: **Paid**"),
    (ExpenseState.REJECTED, ":x: **Rejected**"),
])
def test_status_labels(state, label):
    assert status_label(state) == label
    assert f"|Status|{label}|" in format_expense(make_expense(state), FILE_INFO, "")


def test_unknown_state_raises():
    with pytest.raises(ValueError):
        status_label("Archived")


def test_format_is_deterministic():
    expense = make_expense()
    assert format_expense(expense, FILE_INFO, "x") == format_expense(expense, FILE_INFO, "x")


def test_claim_title_and_channel_message():
    title = format_claim_title({"first_name": "Jane", "last_name": "Doe"})
    assert title == "**Expense claim from Jane Doe**"
    assert format_channel_message(title, "body") == "**Expense claim from Jane Doe**\n\nbody"


def test_actions_point_at_callback_endpoint():
    actions = build_expense_actions("e1", "/plugins/expensebot/")

    assert [action["name"] for action in actions] == ["Paid", "Reject"]
    assert [action["style"] for action in actions] == ["success", "danger"]
    assert actions[0]["integration"]["url"] == "/plugins/expensebot/api/expenses/e1/Paid"
    assert actions[1]["integration"]["url"] == "/plugins/expensebot/api/expenses/e1/Rejected"


def test_action_props_wrap_actions_in_attachment():
    props = build_action_props("e1", "")
    assert props["attachments"][0]["actions"] == build_expense_actions("e1", "")
