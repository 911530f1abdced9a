"""
expensebot/models/expense.py

Purpose: Finalized expense record and cached user defaults

- Expense: one per completed submission, only `state` changes afterwards
- UserDefaults: last-used account/name of a user
- Field aliases keep the stored JSON shape (bank_account, file_ids, ...)
"""

from enum import Enum
from typing import List
from pydantic import BaseModel, Field


class ExpenseState(str, Enum):
    """Approval lifecycle of an expense."""

    SUBMITTED = "Submitted"
    PAID = "Paid"
    REJECTED = "Rejected"


class Expense(BaseModel):
    """
    A submitted expense.

    Stored under `expense:{id}`. `post_id` points at the pinned status
    message in the submitter's direct channel.
    """

    id: str
    post_id: str = ""
    user_id: str
    state: ExpenseState
    account: str = Field(..., alias="bank_account")
    name: str
    amount: str
    description: str
    file_ids: List[str] = Field(..., min_length=1)

    class Config:
        populate_by_name = True
        validate_assignment = True


class UserDefaults(BaseModel):
    """Stored under `user:{user_id}`; overwritten on every completed expense."""

    user_id: str
    account: str = Field(..., alias="bank_account")
    name: str

    class Config:
        populate_by_name = True
